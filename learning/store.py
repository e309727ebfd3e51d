from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Sequence

from learning.entities import Completion, Course, Module, Profile

# Columns the profile owner may change from the dashboard.
PROFILE_UPDATABLE_FIELDS = frozenset({"tagline", "learning_mood", "daily_journal", "theme"})


class TableGateway(ABC):
    """
    Remote table store contract used by the dashboard.

    The core only depends on this interface; adapters in `infra.gateway`
    (SQLAlchemy, PostgREST over httpx) implement it. Read methods raise
    `RemoteReadFailure`, write methods raise `RemoteWriteFailure`.
    """

    @abstractmethod
    async def fetch_courses(self) -> List[Course]:
        raise NotImplementedError

    @abstractmethod
    async def fetch_modules(self) -> List[Module]:
        """All modules ordered by `order_index` ascending."""
        raise NotImplementedError

    @abstractmethod
    async def fetch_completions(self, user_id: str) -> List[Completion]:
        raise NotImplementedError

    @abstractmethod
    async def insert_completions(self, rows: Sequence[Completion]) -> None:
        raise NotImplementedError

    @abstractmethod
    async def delete_completion(self, user_id: str, module_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def fetch_profile(self, user_id: str) -> Optional[Profile]:
        raise NotImplementedError

    @abstractmethod
    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        return None


def check_profile_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    unknown = set(fields) - PROFILE_UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Profile fields not updatable: {sorted(unknown)}")
    return dict(fields)
