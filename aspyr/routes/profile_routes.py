"""
Profile page endpoints: profile card, stats, achievements and edits.
"""

from fastapi import APIRouter, Depends

from aspyr.bootstrap import get_dashboard
from aspyr.routes.deps import get_dashboard_session
from aspyr.schemas.profile_schemas import (
    AchievementResponse,
    ProfileOverviewResponse,
    ProfileResponse,
    UpdateProfileRequest,
    UpdateThemeRequest,
)
from aspyr.schemas.progress_schemas import StatsResponse
from aspyr.services.dashboard_service import DashboardService
from learning.entities import Profile
from learning.session import DashboardSession

profile_routes = APIRouter()


def _profile_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        username=profile.username,
        profile_photo=profile.profile_photo,
        cover_image=profile.cover_image,
        tagline=profile.tagline,
        theme=profile.theme,
        learning_mood=profile.learning_mood,
        daily_journal=profile.daily_journal,
        streak_days=profile.streak_days,
    )


@profile_routes.get("/profile", response_model=ProfileOverviewResponse)
async def get_profile(
    session: DashboardSession = Depends(get_dashboard_session),
    dashboard: DashboardService = Depends(get_dashboard),
) -> ProfileOverviewResponse:
    profile, stats, achievements = await dashboard.profile(session)
    return ProfileOverviewResponse(
        profile=_profile_response(profile),
        stats=StatsResponse(
            courses_enrolled=stats.courses_enrolled,
            modules_completed=stats.modules_completed,
            total_modules=stats.total_modules,
            completion_percentage=stats.completion_percentage,
        ),
        achievements=[
            AchievementResponse(title=a.title, description=a.description, quote=a.quote, unlocked=a.unlocked)
            for a in achievements
        ],
    )


@profile_routes.patch("/profile", response_model=ProfileResponse)
async def update_profile(
    body: UpdateProfileRequest,
    session: DashboardSession = Depends(get_dashboard_session),
    dashboard: DashboardService = Depends(get_dashboard),
) -> ProfileResponse:
    """Save tagline, learning mood and journal entry. Omitted fields are left unchanged."""
    profile = await dashboard.update_profile(
        session,
        tagline=body.tagline,
        learning_mood=body.learning_mood,
        daily_journal=body.daily_journal,
    )
    return _profile_response(profile)


@profile_routes.put("/profile/theme", response_model=ProfileResponse)
async def update_theme(
    body: UpdateThemeRequest,
    session: DashboardSession = Depends(get_dashboard_session),
    dashboard: DashboardService = Depends(get_dashboard),
) -> ProfileResponse:
    profile = await dashboard.update_profile(session, theme=body.theme)
    return _profile_response(profile)
