"""
Session store and per-user dashboard snapshots.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Dict, FrozenSet, Iterable, List, Optional, TypeVar

from learning.entities import Completion, Course, Module, Profile
from learning.errors import AuthRequired, RemoteReadFailure
from learning.store import TableGateway

logger = logging.getLogger("aspyr.session")

T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 10.0


class SessionEvent(str, Enum):
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"


@dataclass(frozen=True)
class AuthSession:
    user_id: str
    email: str


SessionCallback = Callable[[SessionEvent, AuthSession], None]


class SessionStore:
    """Authenticated identities by user id, with sign-in/sign-out notifications."""

    def __init__(self):
        self._sessions: Dict[str, AuthSession] = {}
        self._subscribers: List[SessionCallback] = []

    def current(self, user_id: str) -> Optional[AuthSession]:
        return self._sessions.get(user_id)

    def subscribe(self, callback: SessionCallback) -> Callable[[], None]:
        """Register a callback; returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def sign_in(self, user_id: str, email: str) -> AuthSession:
        existing = self._sessions.get(user_id)
        if existing is not None and existing.email == email:
            return existing
        session = AuthSession(user_id=user_id, email=email)
        self._sessions[user_id] = session
        self._notify(SessionEvent.SIGNED_IN, session)
        return session

    def sign_out(self, user_id: str) -> bool:
        session = self._sessions.pop(user_id, None)
        if session is None:
            return False
        self._notify(SessionEvent.SIGNED_OUT, session)
        return True

    def _notify(self, event: SessionEvent, session: AuthSession) -> None:
        for callback in list(self._subscribers):
            callback(event, session)


async def with_timeout(call: Awaitable[T], timeout: float) -> T:
    return await asyncio.wait_for(call, timeout=timeout)


class DashboardSession:
    """
    Snapshots owned by one signed-in user.

    Snapshots are only ever swapped whole; readers never see a partially
    applied update. Once closed, the session accepts no further writes.
    """

    def __init__(self, identity: AuthSession):
        self.identity = identity
        self.courses: List[Course] = []
        self.modules: List[Module] = []
        self.completions: FrozenSet[Completion] = frozenset()
        self.profile: Optional[Profile] = None
        self.loaded = False
        self._active = True

    @property
    def user_id(self) -> str:
        return self.identity.user_id

    @property
    def active(self) -> bool:
        return self._active

    def ensure_active(self) -> None:
        if not self._active:
            raise AuthRequired("Session ended, please sign in again")

    def close(self) -> None:
        self._active = False

    async def load(self, gateway: TableGateway, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Fetch courses, modules and completions concurrently; keep prior snapshots on failure."""
        self.ensure_active()
        try:
            courses, modules, completions = await asyncio.gather(
                with_timeout(gateway.fetch_courses(), timeout),
                with_timeout(gateway.fetch_modules(), timeout),
                with_timeout(gateway.fetch_completions(self.user_id), timeout),
            )
        except asyncio.TimeoutError:
            raise RemoteReadFailure("dashboard", "request timed out") from None
        if not self._active:
            logger.info("discarding dashboard load for closed session user_id=%s", self.user_id)
            raise AuthRequired("Session ended, please sign in again")
        self.courses = list(courses)
        self.modules = list(modules)
        self.replace_completions(c for c in completions if c.user_id == self.user_id)
        self.loaded = True

    async def load_profile(self, gateway: TableGateway, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> Optional[Profile]:
        self.ensure_active()
        try:
            profile = await with_timeout(gateway.fetch_profile(self.user_id), timeout)
        except asyncio.TimeoutError:
            raise RemoteReadFailure("profile", "request timed out") from None
        self.ensure_active()
        self.profile = profile
        return profile

    def replace_completions(self, completions: Iterable[Completion]) -> None:
        self.ensure_active()
        self.completions = frozenset(completions)

    def replace_profile(self, profile: Optional[Profile]) -> None:
        self.ensure_active()
        self.profile = profile
