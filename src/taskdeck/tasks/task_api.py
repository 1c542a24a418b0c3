# src/taskdeck/tasks/task_api.py

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import httpx

from ..core.errors import ApiError, ErrorKind
from ..core.http import make_timeout, request_json
from .task_models import Task, TaskCreate, TaskUpdate

logger = logging.getLogger(__name__)

TokenProvider = Callable[[], str | None]


class HttpTaskApi:
    """
    Remote Task API over HTTP.

    Routes (all scoped by user id):
    - GET    /api/{user_id}/tasks
    - POST   /api/{user_id}/tasks
    - PUT    /api/{user_id}/tasks/{task_id}
    - DELETE /api/{user_id}/tasks/{task_id}
    - PATCH  /api/{user_id}/tasks/{task_id}/complete
    """

    def __init__(
            self,
            base_url: str,
            token_provider: TokenProvider,
            *,
            timeout_s: float = 10.0,
            client: httpx.AsyncClient | None = None,
    ) -> None:
        self._token_provider = token_provider
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=make_timeout(timeout_s))

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        token = self._token_provider()
        if not token:
            return {}
        return {"Authorization": f"Bearer {token}"}

    async def _call(self, method: str, path: str, *, json: Any = None) -> Any:
        return await request_json(self._client, method, path, json=json, headers=self._headers())

    @staticmethod
    def _task_or_error(raw: Any, what: str) -> Task:
        if not isinstance(raw, dict):
            raise ApiError(ErrorKind.SERVER, f"Unexpected response while trying to {what}.")
        try:
            return Task.from_api(raw)
        except (KeyError, TypeError, ValueError) as exc:
            raise ApiError(ErrorKind.SERVER, f"Malformed task in response while trying to {what}.") from exc

    async def list(self, user_id: str) -> list[Task]:
        raw = await self._call("GET", f"/api/{user_id}/tasks")
        if isinstance(raw, dict):
            raw = raw.get("items", [])
        if not isinstance(raw, list):
            raise ApiError(ErrorKind.SERVER, "Unexpected response while loading tasks.")
        tasks = [self._task_or_error(item, "load tasks") for item in raw]
        logger.debug("Fetched %d tasks for user=%s", len(tasks), user_id)
        return tasks

    async def create(self, user_id: str, draft: TaskCreate) -> Task:
        raw = await self._call("POST", f"/api/{user_id}/tasks", json=draft.to_payload())
        return self._task_or_error(raw, "create a task")

    async def update(self, user_id: str, task_id: int, patch: TaskUpdate) -> Task:
        raw = await self._call("PUT", f"/api/{user_id}/tasks/{task_id}", json=patch.to_payload())
        return self._task_or_error(raw, "update a task")

    async def delete(self, user_id: str, task_id: int) -> None:
        await self._call("DELETE", f"/api/{user_id}/tasks/{task_id}")

    async def toggle_complete(self, user_id: str, task_id: int, completed: bool) -> Task:
        raw = await self._call(
            "PATCH",
            f"/api/{user_id}/tasks/{task_id}/complete",
            json={"is_completed": bool(completed)},
        )
        return self._task_or_error(raw, "update a task")
