"""
Integration test fixtures. Overrides get_db and the dashboard service for API
tests with a temporary SQLite database holding a small course catalog.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker


@pytest.fixture
def testing_session_local(tmp_path):
    from aspyr.config import Base
    from aspyr.models.models import Course, Module
    # File-backed so concurrent gateway reads each get their own connection.
    engine = create_engine(
        f"sqlite:///{tmp_path / 'dashboard.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    db = TestingSessionLocal()
    db.add_all(
        [
            Course(id="ui", title="UI Magic", description="Interfaces", category="Design", icon="Palette", color="purple"),
            Course(id="backend", title="Backend Essentials", description="APIs", category="Backend", icon="Server", color="blue"),
            Module(id="ui-2", course_id="ui", title="Color", order_index=2, duration="45 min"),
            Module(id="ui-1", course_id="ui", title="Principles", order_index=1, duration="30 min"),
            Module(id="be-1", course_id="backend", title="HTTP", order_index=1, duration="45 min"),
        ]
    )
    db.commit()
    db.close()
    yield TestingSessionLocal
    engine.dispose()


@pytest.fixture
def override_get_db(testing_session_local):
    def _get_db():
        db = testing_session_local()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def dashboard(testing_session_local):
    """Fresh dashboard service per test over the in-memory DB."""
    from aspyr.services.dashboard_service import DashboardService
    from infra.gateway.sql_gateway import SqlTableGateway
    return DashboardService(SqlTableGateway(session_factory=testing_session_local), timeout=5.0)


@pytest.fixture
def api_client(override_get_db, dashboard):
    """FastAPI TestClient with in-memory DB and dashboard overrides."""
    from fastapi.testclient import TestClient
    from aspyr.api import app
    from aspyr.bootstrap import get_dashboard
    from aspyr.config import get_db
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_dashboard] = lambda: dashboard
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def signed_in_client(api_client):
    """API client registered and signed in as ada@example.com."""
    response = api_client.post(
        "/auth/register",
        json={"email": "ada@example.com", "password": "testpass123", "confirm_password": "testpass123"},
    )
    assert response.status_code == 200
    return api_client
