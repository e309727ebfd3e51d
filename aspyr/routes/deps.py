from fastapi import Depends

from aspyr.bootstrap import get_dashboard
from aspyr.schemas.user_schemas import User
from aspyr.services.dashboard_service import DashboardService
from aspyr.utils.auth import get_current_user
from learning.session import DashboardSession


async def get_dashboard_session(
    current_user: User = Depends(get_current_user),
    dashboard: DashboardService = Depends(get_dashboard),
) -> DashboardSession:
    """Signed-in user's dashboard session with snapshots loaded."""
    return await dashboard.open(current_user.id, current_user.email)


def get_attached_session(
    current_user: User = Depends(get_current_user),
    dashboard: DashboardService = Depends(get_dashboard),
) -> DashboardSession:
    """Signed-in user's dashboard session without loading snapshots."""
    return dashboard.attach(current_user.id, current_user.email)
