# src/taskdeck/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task session and identity session depend on Protocols instead of concrete
implementations. This keeps the HTTP clients and credential storage swappable
and makes testing easier.
"""

from typing import TYPE_CHECKING, Awaitable, Protocol, Sequence

if TYPE_CHECKING:
    from ..auth.auth_models import Credentials
    from ..tasks.task_models import Task, TaskCreate, TaskUpdate
    from .notifications import Notification


class Identity(Protocol):
    """The slice of the identity session the task session needs."""

    @property
    def user_id(self) -> str | None: ...


class TaskApi(Protocol):
    """Remote Task API. Every call is scoped by user id; failures raise ApiError."""

    def list(self, user_id: str) -> Awaitable[Sequence[Task]]: ...
    def create(self, user_id: str, draft: TaskCreate) -> Awaitable[Task]: ...
    def update(self, user_id: str, task_id: int, patch: TaskUpdate) -> Awaitable[Task]: ...
    def delete(self, user_id: str, task_id: int) -> Awaitable[None]: ...
    def toggle_complete(self, user_id: str, task_id: int, completed: bool) -> Awaitable[Task]: ...


class AuthApi(Protocol):
    def sign_in(self, *, email: str, password: str) -> Awaitable[Credentials]: ...
    def sign_up(self, *, name: str, email: str, password: str) -> Awaitable[Credentials]: ...


class CredentialStore(Protocol):
    """Where the user/token pair survives between runs."""

    def load(self) -> Credentials | None: ...
    def save(self, credentials: Credentials) -> None: ...
    def clear(self) -> None: ...


class Notifier(Protocol):
    """User-visible success/failure events, decoupled from control flow."""

    def notify(self, notification: Notification) -> None: ...
