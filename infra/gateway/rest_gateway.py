from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx

from aspyr.utils.logger import log_request
from learning.entities import Completion, Course, Module, Profile, Theme
from learning.errors import RemoteReadFailure, RemoteWriteFailure
from learning.store import TableGateway, check_profile_fields

logger = logging.getLogger("aspyr.gateway.rest")


class RestTableGateway(TableGateway):
    """
    TableGateway over a PostgREST-style HTTPS API (e.g. Supabase `/rest/v1`).

    Tables are addressed as `<base_url>/<table>`; filters use PostgREST
    operators (`user_id=eq.<id>`). The service API key is sent both as
    `apikey` and as the bearer token; per-user scoping comes from the
    `user_id` / `id` filters on every call.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str = "",
        timeout: float = 10.0,
        client: Optional[httpx.AsyncClient] = None,
    ):
        headers = {"Accept": "application/json"}
        if api_key:
            headers["apikey"] = api_key
            headers["Authorization"] = f"Bearer {api_key}"
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=timeout)
        self._headers = headers

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def fetch_courses(self) -> List[Course]:
        rows = await self._get("courses", {"select": "*"})
        return [
            Course(
                id=str(r["id"]),
                title=r.get("title") or "",
                description=r.get("description") or "",
                category=r.get("category") or "",
                icon=r.get("icon") or "",
                color=r.get("color") or "",
            )
            for r in rows
        ]

    async def fetch_modules(self) -> List[Module]:
        rows = await self._get("modules", {"select": "*", "order": "order_index.asc"})
        return [
            Module(
                id=str(r["id"]),
                course_id=str(r["course_id"]),
                title=r.get("title") or "",
                order_index=int(r.get("order_index") or 0),
                description=r.get("description") or "",
                duration=r.get("duration") or "",
            )
            for r in rows
        ]

    async def fetch_completions(self, user_id: str) -> List[Completion]:
        rows = await self._get("completions", {"select": "user_id,module_id", "user_id": f"eq.{user_id}"})
        return [Completion(user_id=str(r["user_id"]), module_id=str(r["module_id"])) for r in rows]

    async def fetch_profile(self, user_id: str) -> Optional[Profile]:
        rows = await self._get("profiles", {"select": "*", "id": f"eq.{user_id}", "limit": "1"})
        if not rows:
            return None
        r = rows[0]
        try:
            theme = Theme(r.get("theme") or Theme.DARK.value)
        except ValueError:
            theme = Theme.DARK
        return Profile(
            id=str(r["id"]),
            username=r.get("username") or "",
            tagline=r.get("tagline") or "",
            theme=theme,
            learning_mood=r.get("learning_mood") or "",
            daily_journal=r.get("daily_journal"),
            streak_days=int(r.get("streak_days") or 0),
            profile_photo=r.get("profile_photo"),
            cover_image=r.get("cover_image"),
        )

    async def insert_completions(self, rows: Sequence[Completion]) -> None:
        payload = [{"user_id": r.user_id, "module_id": r.module_id} for r in rows]
        await self._send("POST", "completions", "insert completions", json=payload)

    async def delete_completion(self, user_id: str, module_id: str) -> None:
        params = {"user_id": f"eq.{user_id}", "module_id": f"eq.{module_id}"}
        await self._send("DELETE", "completions", "delete completion", params=params)

    async def update_profile(self, user_id: str, fields: Dict[str, Any]) -> None:
        values = check_profile_fields(fields)
        await self._send("PATCH", "profiles", "update profile", params={"id": f"eq.{user_id}"}, json=values)

    async def _get(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        try:
            async with log_request(logger, f"GET {table}"):
                response = await self._client.get(f"/{table}", params=params, headers=self._headers)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise RemoteReadFailure(table, f"HTTP {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise RemoteReadFailure(table, str(e) or e.__class__.__name__) from e
        if not isinstance(data, list):
            raise RemoteReadFailure(table, "unexpected response shape")
        return data

    async def _send(self, method: str, table: str, operation: str, **kwargs: Any) -> None:
        headers = {**self._headers, "Prefer": "return=minimal"}
        try:
            async with log_request(logger, f"{method} {table}"):
                response = await self._client.request(method, f"/{table}", headers=headers, **kwargs)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RemoteWriteFailure(operation, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise RemoteWriteFailure(operation, str(e) or e.__class__.__name__) from e
