# src/taskdeck/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..auth.session import Session
from ..config import Settings
from ..tasks.task_session import TaskListSession
from .notifications import NotificationCenter
from .ports import AuthApi, TaskApi


@dataclass
class AppState:
    settings: Settings

    session: Session
    auth_api: AuthApi
    task_api: TaskApi
    notifications: NotificationCenter

    # One task session per signed-in user; replaced on sign-in, closed on sign-out.
    tasks: TaskListSession | None = field(default=None)

    def open_task_session(self) -> TaskListSession:
        self.close_task_session()
        self.tasks = TaskListSession(self.session, self.task_api, self.notifications)
        return self.tasks

    def close_task_session(self) -> None:
        if self.tasks is not None:
            self.tasks.close()
            self.tasks = None

    def follow_session(self) -> None:
        """Tie the task session's lifetime to the signed-in identity."""

        def on_user(user: object | None) -> None:
            if user is None:
                self.close_task_session()
            else:
                self.open_task_session()

        self.session.on_change(on_user)
