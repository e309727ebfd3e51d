from aspyr.config import SessionLocal, settings
from aspyr.services.dashboard_service import DashboardService
from learning.store import TableGateway


def build_gateway() -> TableGateway:
    backend = settings.gateway_backend.strip().lower()
    if backend == "rest":
        from infra.gateway.rest_gateway import RestTableGateway

        return RestTableGateway(
            base_url=settings.rest_url,
            api_key=settings.rest_api_key,
            timeout=settings.remote_timeout_seconds,
        )
    if backend == "sql":
        from infra.gateway.sql_gateway import SqlTableGateway

        return SqlTableGateway(session_factory=SessionLocal)
    raise ValueError(f"Unknown GATEWAY_BACKEND {settings.gateway_backend!r} (expected 'sql' or 'rest')")


def build_dashboard() -> DashboardService:
    return DashboardService(gateway=build_gateway(), timeout=settings.remote_timeout_seconds)


_dashboard: DashboardService | None = None


def get_dashboard() -> DashboardService:
    """FastAPI dependency; one service per process."""
    global _dashboard
    if _dashboard is None:
        _dashboard = build_dashboard()
    return _dashboard
