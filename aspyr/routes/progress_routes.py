"""
Module completion endpoints and aggregate stats.
"""

from fastapi import APIRouter, Depends, HTTPException

from aspyr.bootstrap import get_dashboard
from aspyr.routes.deps import get_attached_session, get_dashboard_session
from aspyr.schemas.progress_schemas import ProgressUpdateResponse, StatsResponse
from aspyr.services.dashboard_service import DashboardService
from aspyr.utils.common import progress_response
from learning.errors import NoOpCondition
from learning.progress import course_progress
from learning.session import DashboardSession

progress_routes = APIRouter()


@progress_routes.post("/modules/{module_id}/toggle", response_model=ProgressUpdateResponse)
async def toggle_module(
    module_id: str,
    session: DashboardSession = Depends(get_dashboard_session),
    dashboard: DashboardService = Depends(get_dashboard),
) -> ProgressUpdateResponse:
    """Mark a module complete, or incomplete when it already is."""
    module = next((m for m in session.modules if m.id == module_id), None)
    if module is None:
        raise HTTPException(status_code=404, detail="Module not found")
    result = await dashboard.toggle_module(session, module_id)
    return ProgressUpdateResponse(
        status="completed" if result.completed else "incomplete",
        message=result.message,
        module_ids=list(result.module_ids),
        course_id=module.course_id,
        progress=progress_response(course_progress(module.course_id, session.modules, session.completions)),
    )


@progress_routes.post("/courses/{course_id}/complete", response_model=ProgressUpdateResponse)
async def mark_all_complete(
    course_id: str,
    session: DashboardSession = Depends(get_dashboard_session),
    dashboard: DashboardService = Depends(get_dashboard),
) -> ProgressUpdateResponse:
    """Complete every remaining module of a course in one batch."""
    if not any(c.id == course_id for c in session.courses):
        raise HTTPException(status_code=404, detail="Course not found")
    try:
        result = await dashboard.mark_all_complete(session, course_id)
        status, message, module_ids = "completed", result.message, list(result.module_ids)
    except NoOpCondition as notice:
        status, message, module_ids = "noop", notice.message, []
    return ProgressUpdateResponse(
        status=status,
        message=message,
        module_ids=module_ids,
        course_id=course_id,
        progress=progress_response(course_progress(course_id, session.modules, session.completions)),
    )


@progress_routes.get("/stats", response_model=StatsResponse)
async def get_stats(
    session: DashboardSession = Depends(get_dashboard_session),
    dashboard: DashboardService = Depends(get_dashboard),
) -> StatsResponse:
    stats = dashboard.stats(session)
    return StatsResponse(
        courses_enrolled=stats.courses_enrolled,
        modules_completed=stats.modules_completed,
        total_modules=stats.total_modules,
        completion_percentage=stats.completion_percentage,
    )


@progress_routes.post("/refresh", response_model=StatsResponse)
async def refresh(
    session: DashboardSession = Depends(get_attached_session),
    dashboard: DashboardService = Depends(get_dashboard),
) -> StatsResponse:
    """Re-fetch courses, modules and completions from the store."""
    session = await dashboard.open(session.user_id, session.identity.email, refresh=True)
    return await get_stats(session=session, dashboard=dashboard)
