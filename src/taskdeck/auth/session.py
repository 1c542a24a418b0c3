# src/taskdeck/auth/session.py

"""
Identity session.

Explicitly constructed and injected (no module-level singleton):
- hydrate() restores the persisted user/token pair once at startup,
- sign_in()/sign_up() set it, sign_out() clears it,
- listeners are told whenever the current user changes.

The task session only needs `user_id` and `is_authenticated`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Literal

from ..core.errors import ApiError, ErrorKind
from ..core.ports import AuthApi, CredentialStore
from .auth_models import Credentials, User

logger = logging.getLogger(__name__)

UserListener = Callable[[User | None], None]


class Session:
    def __init__(self, auth_api: AuthApi, store: CredentialStore) -> None:
        self._auth_api = auth_api
        self._store = store
        self._credentials: Credentials | None = None
        self._listeners: list[UserListener] = []
        # True until hydrate() has run, same as the web client's initial auth-loading state.
        self.loading = True

    # ---- read side ----

    @property
    def user(self) -> User | None:
        return self._credentials.user if self._credentials else None

    @property
    def user_id(self) -> str | None:
        return self._credentials.user.id if self._credentials else None

    @property
    def token(self) -> str | None:
        return self._credentials.token if self._credentials else None

    @property
    def is_authenticated(self) -> bool:
        return self._credentials is not None

    def on_change(self, listener: UserListener) -> None:
        self._listeners.append(listener)

    # ---- lifecycle ----

    def hydrate(self) -> User | None:
        try:
            creds = self._store.load()
        finally:
            self.loading = False
        if creds is not None:
            self._set(creds)
            logger.info("Restored session for user=%s", creds.user.id)
        return self.user

    async def sign_in(self, email: str, password: str) -> User:
        creds = await self._auth_api.sign_in(email=email.strip(), password=password)
        self._store.save(creds)
        self._set(creds)
        return creds.user

    async def sign_up(self, name: str, email: str, password: str) -> User:
        creds = await self._auth_api.sign_up(name=name.strip(), email=email.strip(), password=password)
        self._store.save(creds)
        self._set(creds)
        return creds.user

    def sign_out(self) -> None:
        self._store.clear()
        if self._credentials is None:
            return
        logger.info("Signed out user=%s", self._credentials.user.id)
        self._set(None)

    def _set(self, creds: Credentials | None) -> None:
        self._credentials = creds
        user = self.user
        for listener in list(self._listeners):
            listener(user)


def humanize_auth_error(err: ApiError, action: Literal["sign_in", "sign_up"]) -> str:
    """Map a structured auth failure to the message shown on the auth screens."""
    if action == "sign_in":
        if err.kind in (ErrorKind.UNAUTHORIZED, ErrorKind.VALIDATION):
            return "Invalid email or password"
        return "Something went wrong. Please try again."

    if err.kind == ErrorKind.CONFLICT:
        return "User already exists. Please sign in instead."
    return "Failed to create account. Please try again."
