"""
Course catalog endpoints with per-user progress.
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from aspyr.bootstrap import get_dashboard
from aspyr.routes.deps import get_dashboard_session
from aspyr.schemas.course_schemas import CourseListResponse, CourseModulesResponse, ModuleResponse
from aspyr.schemas.user_schemas import User
from aspyr.services.dashboard_service import DashboardService
from aspyr.utils.auth import get_current_user
from aspyr.utils.common import course_card, greeting
from learning.entities import Bucket
from learning.session import DashboardSession

course_routes = APIRouter()


@course_routes.get("/courses", response_model=CourseListResponse)
async def list_courses(
    filter: str = Query("all", description="all | in-progress | completed"),
    current_user: User = Depends(get_current_user),
    session: DashboardSession = Depends(get_dashboard_session),
    dashboard: DashboardService = Depends(get_dashboard),
) -> CourseListResponse:
    """Course cards for the learning path, filtered by completion bucket."""
    try:
        bucket = Bucket.parse(filter)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    cards = [course_card(c, p) for c, p in dashboard.courses(session, bucket)]
    return CourseListResponse(
        greeting=greeting(current_user),
        filter=bucket.value,
        courses=cards,
        message=None if cards else "No courses found for this filter. Try a different filter!",
    )


@course_routes.get("/courses/{course_id}", response_model=CourseModulesResponse)
async def get_course(
    course_id: str,
    session: DashboardSession = Depends(get_dashboard_session),
    dashboard: DashboardService = Depends(get_dashboard),
) -> CourseModulesResponse:
    """Course with its modules in display order and the user's completion flags."""
    found = dashboard.course(session, course_id)
    if found is None:
        raise HTTPException(status_code=404, detail="Course not found")
    course, progress, states = found
    return CourseModulesResponse(
        course=course_card(course, progress),
        modules=[
            ModuleResponse(
                id=s.module.id,
                course_id=s.module.course_id,
                title=s.module.title,
                description=s.module.description,
                order_index=s.module.order_index,
                duration=s.module.duration,
                completed=s.completed,
            )
            for s in states
        ],
        all_completed=progress.completed == progress.total,
    )
