# tests/fakes.py

from __future__ import annotations

import asyncio
from collections import deque
from dataclasses import dataclass, field, replace

from taskdeck.auth.auth_models import Credentials, User
from taskdeck.core.errors import ApiError, ErrorKind
from taskdeck.core.notifications import Notification, NotificationLevel
from taskdeck.tasks.task_models import Task, TaskCreate, TaskUpdate


def make_task(task_id: int, title: str | None = None, *, done: bool = False) -> Task:
    return Task(id=task_id, title=title or f"task {task_id}", is_completed=done, user_id="u1")


@dataclass(slots=True)
class FakeIdentity:
    user_id: str | None = "u1"


class FakeTaskApi:
    """
    In-memory TaskApi.

    - Records every call for assertions
    - Failures are injected per (operation, task_id) with fail()
    - `gate`, when set, makes the operations in `gated_ops` wait until it is released
    """

    def __init__(self, tasks: list[Task] | None = None) -> None:
        self.tasks: dict[int, Task] = {t.id: t for t in tasks or []}
        self.calls: list[tuple[str, str, int | None]] = []
        self.failures: dict[tuple[str, int | None], ApiError] = {}
        self.gate: asyncio.Event | None = None
        self.gated_ops: tuple[str, ...] = ("delete", "toggle_complete")
        self.next_id = 100
        self.in_flight = 0
        self.max_in_flight = 0

    def fail(self, op: str, task_id: int | None = None, err: ApiError | None = None) -> None:
        self.failures[(op, task_id)] = err or ApiError(ErrorKind.SERVER, f"{op} exploded", status_code=500)

    async def _enter(self, op: str, user_id: str, task_id: int | None) -> None:
        self.calls.append((op, user_id, task_id))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if self.gate is not None and op in self.gated_ops:
                await self.gate.wait()
        finally:
            self.in_flight -= 1
        err = self.failures.get((op, task_id))
        if err is not None:
            raise err

    async def list(self, user_id: str) -> list[Task]:
        await self._enter("list", user_id, None)
        return list(self.tasks.values())

    async def create(self, user_id: str, draft: TaskCreate) -> Task:
        await self._enter("create", user_id, None)
        task = Task(id=self.next_id, title=draft.title, description=draft.description, user_id=user_id)
        self.next_id += 1
        self.tasks[task.id] = task
        return task

    async def update(self, user_id: str, task_id: int, patch: TaskUpdate) -> Task:
        await self._enter("update", user_id, task_id)
        current = self.tasks.get(task_id) or make_task(task_id)
        changes = patch.to_payload()
        task = replace(current, **changes)
        self.tasks[task_id] = task
        return task

    async def delete(self, user_id: str, task_id: int) -> None:
        await self._enter("delete", user_id, task_id)
        self.tasks.pop(task_id, None)

    async def toggle_complete(self, user_id: str, task_id: int, completed: bool) -> Task:
        await self._enter("toggle_complete", user_id, task_id)
        current = self.tasks.get(task_id) or make_task(task_id)
        task = replace(current, is_completed=completed)
        self.tasks[task_id] = task
        return task


@dataclass(slots=True)
class RecordingNotifier:
    sent: list[Notification] = field(default_factory=list)

    def notify(self, notification: Notification) -> None:
        self.sent.append(notification)

    @property
    def errors(self) -> list[Notification]:
        return [n for n in self.sent if n.level == NotificationLevel.ERROR]

    @property
    def successes(self) -> list[Notification]:
        return [n for n in self.sent if n.level == NotificationLevel.SUCCESS]


@dataclass(slots=True)
class MemoryCredentialStore:
    stored: Credentials | None = None
    cleared: int = 0

    def load(self) -> Credentials | None:
        return self.stored

    def save(self, credentials: Credentials) -> None:
        self.stored = credentials

    def clear(self) -> None:
        self.stored = None
        self.cleared += 1


class FakeAuthApi:
    """Accepts one known account; anything else is rejected like the real server."""

    def __init__(self) -> None:
        self.accounts: dict[str, tuple[str, User]] = {
            "ada@example.com": ("secret", User(id="u1", email="ada@example.com", name="Ada")),
        }
        self.error: ApiError | None = None

    async def sign_in(self, *, email: str, password: str) -> Credentials:
        if self.error is not None:
            raise self.error
        account = self.accounts.get(email)
        if account is None or account[0] != password:
            raise ApiError(ErrorKind.UNAUTHORIZED, "Invalid credentials", status_code=401)
        return Credentials(user=account[1], token=f"token-{account[1].id}")

    async def sign_up(self, *, name: str, email: str, password: str) -> Credentials:
        if self.error is not None:
            raise self.error
        if email in self.accounts:
            raise ApiError(ErrorKind.CONFLICT, "User already exists", status_code=409)
        user = User(id=f"u{len(self.accounts) + 1}", email=email, name=name)
        self.accounts[email] = (password, user)
        return Credentials(user=user, token=f"token-{user.id}")


class ScriptedIO:
    """ConsoleIO that answers prompts from a script and records emitted lines."""

    def __init__(self, *answers: str) -> None:
        self.answers: deque[str] = deque(answers)
        self.prompts: list[str] = []
        self.emitted: list[str] = []

    async def prompt(self, text: str) -> str:
        self.prompts.append(text)
        return self.answers.popleft() if self.answers else ""

    async def secret(self, text: str) -> str:
        return await self.prompt(text)

    def emit(self, text: str) -> None:
        self.emitted.append(text)
