# src/taskdeck/auth/credentials.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

from .auth_models import Credentials, User

logger = logging.getLogger(__name__)


class FileCredentialStore:
    """
    Persist the signed-in user and access token as a small JSON file.

    Layout: {"user": {"id", "email", "name"}, "token": "..."}.
    A missing, unreadable or half-written file means "not signed in".
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Credentials | None:
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except (OSError, ValueError):
            logger.warning("Ignoring unreadable credentials file %s", self._path, exc_info=True)
            return None

        if not isinstance(data, dict):
            return None
        raw_user = data.get("user")
        token = data.get("token")
        # Both halves must be present, same as the web client's user+token pair.
        if not isinstance(raw_user, dict) or not isinstance(token, str) or not token:
            return None
        try:
            user = User.from_dict(raw_user)
        except KeyError:
            return None
        return Credentials(user=user, token=token)

    def save(self, credentials: Credentials) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        payload = {"user": credentials.user.to_dict(), "token": credentials.token}
        # The token is a secret: the file is private from the moment it exists.
        fd = os.open(tmp, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, ensure_ascii=False, indent=2)
        with contextlib.suppress(OSError):
            # O_CREAT sets the mode only for a new file.
            os.chmod(tmp, 0o600)
        os.replace(tmp, self._path)
        logger.info("Saved credentials for user=%s to %s", credentials.user.id, self._path)

    def clear(self) -> None:
        with contextlib.suppress(FileNotFoundError):
            self._path.unlink()
        logger.info("Cleared credentials at %s", self._path)
