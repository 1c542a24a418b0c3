# src/taskdeck/auth/auth_api.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..core.errors import ApiError, ErrorKind
from ..core.http import make_timeout, request_json
from .auth_models import Credentials

logger = logging.getLogger(__name__)


class HttpAuthApi:
    """Email/password auth: POST /api/auth/login and POST /api/auth/signup."""

    def __init__(
            self,
            base_url: str,
            *,
            timeout_s: float = 10.0,
            client: httpx.AsyncClient | None = None,
    ) -> None:
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), timeout=make_timeout(timeout_s))

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _credentials(raw: Any) -> Credentials:
        if not isinstance(raw, dict):
            raise ApiError(ErrorKind.SERVER, "Unexpected response from the auth server.")
        try:
            return Credentials.from_auth_response(raw)
        except KeyError as exc:
            raise ApiError(ErrorKind.SERVER, f"Auth response is missing {exc.args[0]!r}.") from exc

    async def sign_in(self, *, email: str, password: str) -> Credentials:
        raw = await request_json(
            self._client,
            "POST",
            "/api/auth/login",
            json={"email": email, "password": password},
            error_fallback="Login failed",
        )
        creds = self._credentials(raw)
        logger.info("Signed in user=%s", creds.user.id)
        return creds

    async def sign_up(self, *, name: str, email: str, password: str) -> Credentials:
        raw = await request_json(
            self._client,
            "POST",
            "/api/auth/signup",
            json={"name": name, "email": email, "password": password},
            error_fallback="Signup failed",
        )
        creds = self._credentials(raw)
        logger.info("Signed up user=%s", creds.user.id)
        return creds
