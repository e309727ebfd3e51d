"""
Module completion toggling.

The remote write always completes before the session snapshot changes, so a
failed or timed-out write leaves the completion set exactly as it was.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Dict, Iterable, Optional, Sequence, Tuple

from learning.entities import Completion, Module
from learning.errors import DashboardError, NoOpCondition, RemoteWriteFailure
from learning.progress import course_modules
from learning.session import DEFAULT_TIMEOUT_SECONDS, DashboardSession, with_timeout
from learning.store import TableGateway

logger = logging.getLogger("aspyr.toggle")


class OpKind(str, Enum):
    INSERT = "insert"
    DELETE = "delete"


@dataclass(frozen=True)
class RemoteOp:
    kind: OpKind
    rows: Tuple[Completion, ...]


@dataclass(frozen=True)
class TogglePlan:
    completions: frozenset[Completion]
    op: Optional[RemoteOp]

    @property
    def is_noop(self) -> bool:
        return self.op is None


def plan_toggle(user_id: str, module_id: str, completions: AbstractSet[Completion]) -> TogglePlan:
    record = Completion(user_id=user_id, module_id=module_id)
    if record in completions:
        op = RemoteOp(OpKind.DELETE, (record,))
    else:
        op = RemoteOp(OpKind.INSERT, (record,))
    return TogglePlan(completions=apply_op(completions, op), op=op)


def plan_mark_all(user_id: str, modules: Sequence[Module], completions: AbstractSet[Completion]) -> TogglePlan:
    """One batched insert for every module of `modules` the user has not completed."""
    missing = tuple(
        Completion(user_id=user_id, module_id=m.id)
        for m in modules
        if Completion(user_id=user_id, module_id=m.id) not in completions
    )
    if not missing:
        return TogglePlan(completions=frozenset(completions), op=None)
    op = RemoteOp(OpKind.INSERT, missing)
    return TogglePlan(completions=apply_op(completions, op), op=op)


def apply_op(completions: Iterable[Completion], op: Optional[RemoteOp]) -> frozenset[Completion]:
    current = set(completions)
    if op is None:
        return frozenset(current)
    if op.kind is OpKind.INSERT:
        current.update(op.rows)
    else:
        current.difference_update(op.rows)
    return frozenset(current)


@dataclass(frozen=True)
class ToggleResult:
    module_ids: Tuple[str, ...]
    completed: bool
    message: str


class ModuleToggleController:
    """
    Mediates completion writes for one dashboard session.

    Toggles on the same module are serialised; toggles on different modules
    run concurrently and each write-back is applied to the latest snapshot.
    """

    def __init__(self, gateway: TableGateway, session: DashboardSession, timeout: float = DEFAULT_TIMEOUT_SECONDS):
        self.gateway = gateway
        self.session = session
        self.timeout = timeout
        self._locks: Dict[str, asyncio.Lock] = {}

    def _lock(self, module_id: str) -> asyncio.Lock:
        lock = self._locks.get(module_id)
        if lock is None:
            lock = self._locks[module_id] = asyncio.Lock()
        return lock

    async def toggle(self, module_id: str) -> ToggleResult:
        async with self._lock(module_id):
            self.session.ensure_active()
            plan = plan_toggle(self.session.user_id, module_id, self.session.completions)
            await self._commit(plan.op, "update progress")
            completed = plan.op.kind is OpKind.INSERT
            return ToggleResult(
                module_ids=(module_id,),
                completed=completed,
                message="Module completed!" if completed else "Module marked as incomplete",
            )

    async def mark_all_complete(self, course_id: str) -> ToggleResult:
        modules = course_modules(course_id, self.session.modules)
        locks = [self._lock(mid) for mid in sorted({m.id for m in modules})]
        for lock in locks:
            await lock.acquire()
        try:
            self.session.ensure_active()
            plan = plan_mark_all(self.session.user_id, modules, self.session.completions)
            if plan.is_noop:
                raise NoOpCondition("All modules already completed!")
            await self._commit(plan.op, "mark all as complete")
            return ToggleResult(
                module_ids=tuple(r.module_id for r in plan.op.rows),
                completed=True,
                message="All modules completed!",
            )
        finally:
            for lock in reversed(locks):
                lock.release()

    async def _commit(self, op: RemoteOp, operation: str) -> None:
        try:
            await with_timeout(self._send(op), self.timeout)
        except asyncio.TimeoutError:
            logger.warning("completion write timed out user_id=%s op=%s", self.session.user_id, op.kind.value)
            raise RemoteWriteFailure(operation, "request timed out") from None
        except DashboardError:
            raise
        except Exception as e:
            logger.exception("completion write failed user_id=%s op=%s", self.session.user_id, op.kind.value)
            raise RemoteWriteFailure(operation, str(e)) from e

        if not self.session.active:
            logger.info("discarding completion write-back for closed session user_id=%s", self.session.user_id)
        # Raises AuthRequired when the session was closed while the write was in flight.
        self.session.replace_completions(apply_op(self.session.completions, op))

    async def _send(self, op: RemoteOp) -> None:
        if op.kind is OpKind.INSERT:
            await self.gateway.insert_completions(list(op.rows))
        else:
            for row in op.rows:
                await self.gateway.delete_completion(row.user_id, row.module_id)

