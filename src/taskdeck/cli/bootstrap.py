# src/taskdeck/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (HTTP clients, credential store, notifications).
"""

from __future__ import annotations

import logging

from ..auth.auth_api import HttpAuthApi
from ..auth.credentials import FileCredentialStore
from ..auth.session import Session
from ..config import Settings, get_settings
from ..core.notifications import NotificationCenter
from ..core.state import AppState
from ..tasks.task_api import HttpTaskApi

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.credentials_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings: Settings | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    auth_api = HttpAuthApi(settings.api_url, timeout_s=settings.request_timeout_seconds)
    session = Session(auth_api, FileCredentialStore(settings.credentials_path))
    task_api = HttpTaskApi(
        settings.api_url,
        lambda: session.token,
        timeout_s=settings.request_timeout_seconds,
    )

    state = AppState(
        settings=settings,
        session=session,
        auth_api=auth_api,
        task_api=task_api,
        notifications=NotificationCenter(),
    )

    state.follow_session()

    logger.info("Using task API at %s", settings.api_url)
    return state


async def shutdown(state: AppState) -> None:
    """Close the task session and the HTTP clients."""
    state.close_task_session()
    for client in (state.task_api, state.auth_api):
        aclose = getattr(client, "aclose", None)
        if aclose is not None:
            await aclose()
