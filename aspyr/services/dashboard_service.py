"""
Dashboard service: per-user session scope, snapshot loading and writes.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Dict, Optional

from learning.achievements import AchievementStatus, evaluate_achievements
from learning.entities import Bucket, Course, CourseProgress, ModuleState, Profile, Stats, Theme
from learning.errors import AuthRequired, RemoteReadFailure, RemoteWriteFailure
from learning.progress import aggregate_stats, course_progress, filter_courses, module_states
from learning.session import AuthSession, DashboardSession, SessionEvent, SessionStore, with_timeout
from learning.store import TableGateway
from learning.toggle import ModuleToggleController, ToggleResult

logger = logging.getLogger("aspyr.dashboard")


class DashboardService:
    """
    Owns one DashboardSession (and its toggle controller) per signed-in user.

    Sessions are created when the SessionStore reports a sign-in and closed on
    sign-out; closing invalidates any write still in flight for that user.
    """

    def __init__(self, gateway: TableGateway, store: Optional[SessionStore] = None, timeout: float = 10.0):
        self.gateway = gateway
        self.store = store or SessionStore()
        self.timeout = timeout
        self._sessions: Dict[str, DashboardSession] = {}
        self._controllers: Dict[str, ModuleToggleController] = {}
        self._unsubscribe = self.store.subscribe(self._on_session_event)

    def _on_session_event(self, event: SessionEvent, identity: AuthSession) -> None:
        previous = self._sessions.pop(identity.user_id, None)
        self._controllers.pop(identity.user_id, None)
        if previous is not None:
            previous.close()
        if event is SessionEvent.SIGNED_IN:
            session = DashboardSession(identity)
            self._sessions[identity.user_id] = session
            self._controllers[identity.user_id] = ModuleToggleController(self.gateway, session, self.timeout)
            logger.info("dashboard session opened user_id=%s", identity.user_id)
        else:
            logger.info("dashboard session closed user_id=%s", identity.user_id)

    def sign_in(self, user_id: str, email: str) -> AuthSession:
        return self.store.sign_in(user_id, email)

    def sign_out(self, user_id: str) -> bool:
        return self.store.sign_out(user_id)

    def session(self, user_id: str) -> DashboardSession:
        session = self._sessions.get(user_id)
        if session is None or self.store.current(user_id) is None:
            raise AuthRequired("Not signed in")
        return session

    def attach(self, user_id: str, email: str) -> DashboardSession:
        """Session for a verified identity, signing in again if needed. Nothing is loaded."""
        if self.store.current(user_id) is None:
            self.sign_in(user_id, email)
        return self.session(user_id)

    async def open(self, user_id: str, email: str, refresh: bool = False) -> DashboardSession:
        """Session for a verified identity, loading snapshots on first use."""
        session = self.attach(user_id, email)
        if refresh or not session.loaded:
            await session.load(self.gateway, self.timeout)
        return session

    async def close(self) -> None:
        self._unsubscribe()
        for session in self._sessions.values():
            session.close()
        self._sessions.clear()
        self._controllers.clear()
        await self.gateway.close()

    # ----- views -----

    def courses(self, session: DashboardSession, bucket: Bucket) -> list[tuple[Course, CourseProgress]]:
        courses = filter_courses(session.courses, session.modules, session.completions, bucket)
        return [(c, course_progress(c.id, session.modules, session.completions)) for c in courses]

    def course(self, session: DashboardSession, course_id: str) -> Optional[tuple[Course, CourseProgress, list[ModuleState]]]:
        course = next((c for c in session.courses if c.id == course_id), None)
        if course is None:
            return None
        return (
            course,
            course_progress(course_id, session.modules, session.completions),
            module_states(course_id, session.modules, session.completions),
        )

    def stats(self, session: DashboardSession) -> Stats:
        return aggregate_stats(session.courses, session.modules, session.completions)

    async def profile(self, session: DashboardSession) -> tuple[Profile, Stats, list[AchievementStatus]]:
        profile = await session.load_profile(self.gateway, self.timeout)
        if profile is None:
            raise RemoteReadFailure("profile", "no profile for this account")
        stats = self.stats(session)
        return profile, stats, evaluate_achievements(profile, stats)

    # ----- writes -----

    async def toggle_module(self, session: DashboardSession, module_id: str) -> ToggleResult:
        return await self._controller(session).toggle(module_id)

    async def mark_all_complete(self, session: DashboardSession, course_id: str) -> ToggleResult:
        return await self._controller(session).mark_all_complete(course_id)

    async def update_profile(self, session: DashboardSession, **fields) -> Profile:
        """Write profile fields remotely, then replace the local profile snapshot."""
        changes = {k: v for k, v in fields.items() if v is not None}
        if session.profile is None:
            await session.load_profile(self.gateway, self.timeout)
        current = session.profile
        if current is None:
            raise RemoteReadFailure("profile", "no profile for this account")
        if not changes:
            return current
        remote = {k: (v.value if isinstance(v, Theme) else v) for k, v in changes.items()}
        try:
            await with_timeout(self.gateway.update_profile(session.user_id, remote), self.timeout)
        except asyncio.TimeoutError:
            raise RemoteWriteFailure("update profile", "request timed out") from None
        updated = replace(session.profile or current, **changes)
        session.replace_profile(updated)
        return updated

    def _controller(self, session: DashboardSession) -> ModuleToggleController:
        controller = self._controllers.get(session.user_id)
        if controller is None or controller.session is not session:
            raise AuthRequired("Session ended, please sign in again")
        return controller
