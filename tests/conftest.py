# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskdeck.auth.session import Session
from taskdeck.config import Settings
from taskdeck.core.notifications import NotificationCenter
from taskdeck.core.state import AppState
from taskdeck.tasks.task_session import TaskListSession

from .fakes import (
    FakeAuthApi,
    FakeIdentity,
    FakeTaskApi,
    MemoryCredentialStore,
    RecordingNotifier,
    make_task,
)


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings built directly instead of from the environment,
    to keep unit tests isolated and deterministic.
    """
    return Settings(
        app_name="taskdeck-test",
        log_level="DEBUG",
        api_url="http://api.test",
        request_timeout_seconds=1.0,
        data_dir=tmp_path,
        credentials_path=tmp_path / "credentials.json",
        confirm_bulk_delete=True,
    )


@pytest.fixture()
def api() -> FakeTaskApi:
    return FakeTaskApi([make_task(1, "A"), make_task(2, "B"), make_task(3, "C")])


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def identity() -> FakeIdentity:
    return FakeIdentity()


@pytest.fixture()
def task_session(identity: FakeIdentity, api: FakeTaskApi, notifier: RecordingNotifier) -> TaskListSession:
    return TaskListSession(identity, api, notifier)


@pytest.fixture()
def state(settings: Settings, api: FakeTaskApi) -> AppState:
    """AppState wired with fakes; starts signed out."""
    auth_api = FakeAuthApi()
    app_state = AppState(
        settings=settings,
        session=Session(auth_api, MemoryCredentialStore()),
        auth_api=auth_api,
        task_api=api,
        notifications=NotificationCenter(),
    )
    app_state.follow_session()
    app_state.session.hydrate()
    return app_state
