from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from aspyr.models import models
from aspyr.utils.logger import log_request
from learning.entities import Completion, Course, Module, Profile, Theme
from learning.errors import RemoteReadFailure, RemoteWriteFailure
from learning.store import TableGateway, check_profile_fields

logger = logging.getLogger("aspyr.gateway.sql")


def to_course(row: models.Course) -> Course:
    return Course(
        id=row.id,
        title=row.title,
        description=row.description or "",
        category=row.category or "",
        icon=row.icon or "",
        color=row.color or "",
    )


def to_module(row: models.Module) -> Module:
    return Module(
        id=row.id,
        course_id=row.course_id,
        title=row.title,
        order_index=int(row.order_index),
        description=row.description or "",
        duration=row.duration or "",
    )


def to_profile(row: models.Profile) -> Profile:
    try:
        theme = Theme(row.theme)
    except ValueError:
        theme = Theme.DARK
    return Profile(
        id=row.id,
        username=row.username,
        tagline=row.tagline or "",
        theme=theme,
        learning_mood=row.learning_mood or "",
        daily_journal=row.daily_journal,
        streak_days=int(row.streak_days or 0),
        profile_photo=row.profile_photo,
        cover_image=row.cover_image,
    )


@dataclass
class SqlTableGateway(TableGateway):
    """
    SQLAlchemy-backed TableGateway.

    Opens one short-lived session per call from `session_factory`, so it can
    be shared between requests.
    """

    session_factory: Callable[[], Session]

    async def fetch_courses(self) -> List[Course]:
        return await self._read("courses", lambda db: [to_course(c) for c in db.query(models.Course).all()])

    async def fetch_modules(self) -> List[Module]:
        return await self._read(
            "modules",
            lambda db: [
                to_module(m)
                for m in db.query(models.Module).order_by(models.Module.order_index.asc()).all()
            ],
        )

    async def fetch_completions(self, user_id: str) -> List[Completion]:
        return await self._read(
            "completions",
            lambda db: [
                Completion(user_id=c.user_id, module_id=c.module_id)
                for c in db.query(models.Completion).filter(models.Completion.user_id == user_id).all()
            ],
        )

    async def fetch_profile(self, user_id: str) -> Optional[Profile]:
        def query(db: Session) -> Optional[Profile]:
            row = db.query(models.Profile).filter(models.Profile.id == user_id).first()
            return to_profile(row) if row is not None else None

        return await self._read("profile", query)

    async def insert_completions(self, rows: Sequence[Completion]) -> None:
        def write(db: Session) -> None:
            db.add_all(models.Completion(user_id=r.user_id, module_id=r.module_id) for r in rows)

        await self._write("insert completions", write)

    async def delete_completion(self, user_id: str, module_id: str) -> None:
        def write(db: Session) -> None:
            db.query(models.Completion).filter(
                models.Completion.user_id == user_id,
                models.Completion.module_id == module_id,
            ).delete(synchronize_session=False)

        await self._write("delete completion", write)

    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> None:
        values = check_profile_fields(fields)

        def write(db: Session) -> None:
            updated = db.query(models.Profile).filter(models.Profile.id == user_id).update(
                values, synchronize_session=False
            )
            if not updated:
                raise RemoteWriteFailure("update profile", "profile not found")

        await self._write("update profile", write)

    async def _read(self, resource: str, query: Callable[[Session], Any]) -> Any:
        # Blocking DB work runs in a worker thread so the caller's timeout can fire.
        return await asyncio.to_thread(self._run_read, resource, query)

    async def _write(self, operation: str, write: Callable[[Session], None]) -> None:
        await asyncio.to_thread(self._run_write, operation, write)

    def _run_read(self, resource: str, query: Callable[[Session], Any]) -> Any:
        db = self.session_factory()
        try:
            with log_request(logger, f"fetch {resource}"):
                return query(db)
        except SQLAlchemyError as e:
            raise RemoteReadFailure(resource, str(e.__class__.__name__)) from e
        finally:
            db.close()

    def _run_write(self, operation: str, write: Callable[[Session], None]) -> None:
        db = self.session_factory()
        try:
            with log_request(logger, operation):
                write(db)
                db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            raise RemoteWriteFailure(operation, str(e.__class__.__name__)) from e
        except RemoteWriteFailure:
            db.rollback()
            raise
        finally:
            db.close()
