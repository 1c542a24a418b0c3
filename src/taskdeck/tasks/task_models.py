# src/taskdeck/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

_KNOWN_FIELDS = frozenset(
    {"id", "title", "description", "is_completed", "completed", "user_id", "created_at", "updated_at"}
)


@dataclass(frozen=True, slots=True)
class Task:
    """
    A task as returned by the remote API.

    `id` is assigned by the server and never changes. Fields the client does
    not know about are kept in `extra` and passed through untouched.
    """

    id: int
    title: str
    description: str | None = None
    is_completed: bool = False
    user_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)

    @classmethod
    def from_api(cls, raw: dict[str, Any]) -> Task:
        if "is_completed" in raw:
            completed = raw["is_completed"]
        else:
            completed = raw.get("completed", False)

        user_id = raw.get("user_id")
        return cls(
            id=int(raw["id"]),
            title=str(raw.get("title") or ""),
            description=raw.get("description"),
            is_completed=bool(completed),
            user_id=None if user_id is None else str(user_id),
            created_at=raw.get("created_at"),
            updated_at=raw.get("updated_at"),
            extra={k: v for k, v in raw.items() if k not in _KNOWN_FIELDS},
        )


@dataclass(frozen=True, slots=True)
class TaskCreate:
    title: str
    description: str | None = None

    def __post_init__(self) -> None:
        if not self.title or not self.title.strip():
            raise ValueError("Task title must not be empty")

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"title": self.title.strip()}
        if self.description is not None:
            payload["description"] = self.description
        return payload


@dataclass(frozen=True, slots=True)
class TaskUpdate:
    """Partial edit: only fields that are not None are sent."""

    title: str | None = None
    description: str | None = None
    is_completed: bool | None = None

    def __post_init__(self) -> None:
        if self.title is not None and not self.title.strip():
            raise ValueError("Task title must not be empty")

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.title is not None:
            payload["title"] = self.title.strip()
        if self.description is not None:
            payload["description"] = self.description
        if self.is_completed is not None:
            payload["is_completed"] = self.is_completed
        return payload

    def is_empty(self) -> bool:
        return not self.to_payload()
