"""
Pytest configuration and shared fixtures for the test suite.
Ensures proper Python path and provides common fixtures for unit and integration tests.
"""
import asyncio
from dataclasses import replace
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Keep the app module from touching a real database file at import time.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from learning.entities import Completion, Course, Module, Profile, Theme  # noqa: E402
from learning.errors import RemoteReadFailure, RemoteWriteFailure  # noqa: E402
from learning.store import TableGateway, check_profile_fields  # noqa: E402


# ----- In-memory DB (for tests that need DB without touching real DB) -----
@pytest.fixture
def in_memory_engine():
    """In-memory SQLite engine shared across threads and sessions."""
    return create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def session_factory(in_memory_engine):
    from aspyr.models.models import Base
    Base.metadata.create_all(in_memory_engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=in_memory_engine)


@pytest.fixture
def db_session(session_factory):
    """Create an in-memory database session. Uses aspyr.models Base for schema."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def seeded_catalog(db_session):
    """Two courses: `ui` with three modules, `backend` with two, plus an empty `soon` course."""
    from aspyr.models.models import Course as DbCourse, Module as DbModule
    db_session.add_all(
        [
            DbCourse(id="ui", title="UI Magic", description="Interfaces", category="Design", icon="Palette"),
            DbCourse(id="backend", title="Backend Essentials", description="APIs", category="Backend", icon="Server"),
            DbCourse(id="soon", title="Coming Soon", description="", category="Misc", icon="unknown"),
        ]
    )
    db_session.add_all(
        [
            DbModule(id="ui-3", course_id="ui", title="Motion", order_index=3, duration="40 min"),
            DbModule(id="ui-1", course_id="ui", title="Principles", order_index=1, duration="30 min"),
            DbModule(id="ui-2", course_id="ui", title="Color", order_index=2, duration="45 min"),
            DbModule(id="be-1", course_id="backend", title="HTTP", order_index=1, duration="45 min"),
            DbModule(id="be-2", course_id="backend", title="SQL", order_index=2, duration="60 min"),
        ]
    )
    db_session.commit()
    return db_session


# ----- Snapshot data for pure tests -----
@pytest.fixture
def courses() -> List[Course]:
    return [
        Course(id="ui", title="UI Magic", icon="Palette"),
        Course(id="backend", title="Backend Essentials", icon="Server"),
        Course(id="soon", title="Coming Soon"),
    ]


@pytest.fixture
def modules() -> List[Module]:
    return [
        Module(id="ui-1", course_id="ui", title="Principles", order_index=1),
        Module(id="ui-2", course_id="ui", title="Color", order_index=2),
        Module(id="ui-3", course_id="ui", title="Motion", order_index=3),
        Module(id="be-1", course_id="backend", title="HTTP", order_index=1),
        Module(id="be-2", course_id="backend", title="SQL", order_index=2),
    ]


class InMemoryGateway(TableGateway):
    """
    TableGateway over plain Python collections.

    - `fail_reads` / `fail_writes` make the matching calls raise.
    - `write_gate` (asyncio.Event) holds writes until set.
    - `calls` records every write as (op, payload).
    """

    def __init__(self, courses=(), modules=(), completions=(), profiles=()):
        self.courses = list(courses)
        self.modules = sorted(modules, key=lambda m: m.order_index)
        self.completions = set(completions)
        self.profiles: Dict[str, Profile] = {p.id: p for p in profiles}
        self.fail_reads = False
        self.fail_writes = False
        self.write_gate: Optional[asyncio.Event] = None
        self.read_delay = 0.0
        self.calls: List[tuple] = []

    async def _read(self, resource: str, value: Any) -> Any:
        if self.read_delay:
            await asyncio.sleep(self.read_delay)
        if self.fail_reads:
            raise RemoteReadFailure(resource, "unavailable")
        return value

    async def _write(self, operation: str) -> None:
        if self.write_gate is not None:
            await self.write_gate.wait()
        if self.fail_writes:
            raise RemoteWriteFailure(operation, "unavailable")

    async def fetch_courses(self) -> List[Course]:
        return await self._read("courses", list(self.courses))

    async def fetch_modules(self) -> List[Module]:
        return await self._read("modules", list(self.modules))

    async def fetch_completions(self, user_id: str) -> List[Completion]:
        return await self._read("completions", [c for c in self.completions if c.user_id == user_id])

    async def fetch_profile(self, user_id: str) -> Optional[Profile]:
        return await self._read("profile", self.profiles.get(user_id))

    async def insert_completions(self, rows: Sequence[Completion]) -> None:
        self.calls.append(("insert", tuple(r.module_id for r in rows)))
        await self._write("insert completions")
        self.completions.update(rows)

    async def delete_completion(self, user_id: str, module_id: str) -> None:
        self.calls.append(("delete", (module_id,)))
        await self._write("delete completion")
        self.completions.discard(Completion(user_id=user_id, module_id=module_id))

    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> None:
        values = check_profile_fields(fields)
        self.calls.append(("update_profile", tuple(sorted(values))))
        await self._write("update profile")
        if "theme" in values:
            values["theme"] = Theme(values["theme"])
        self.profiles[user_id] = replace(self.profiles[user_id], **values)


@pytest.fixture
def gateway(courses, modules) -> InMemoryGateway:
    profile = Profile(id="u1", username="ada", tagline="Lifelong learner", streak_days=3)
    return InMemoryGateway(courses=courses, modules=modules, profiles=[profile])
