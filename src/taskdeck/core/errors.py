# src/taskdeck/core/errors.py

"""
Structured errors raised at the HTTP boundary.

Callers dispatch on ErrorKind instead of inspecting message text.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

import httpx


class ErrorKind(StrEnum):
    NETWORK = "network"  # request could not complete
    VALIDATION = "validation"  # server rejected the payload
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"  # e.g. duplicate user on sign-up
    SERVER = "server"
    CANCELLED = "cancelled"  # in-flight work aborted by session teardown


class ApiError(Exception):
    """An API call failed. `message` is safe to show to the user."""

    def __init__(self, kind: ErrorKind, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"ApiError(kind={self.kind.value!r}, message={self.message!r}, status_code={self.status_code!r})"


_STATUS_KINDS: dict[int, ErrorKind] = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.UNAUTHORIZED,
    403: ErrorKind.UNAUTHORIZED,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
    422: ErrorKind.VALIDATION,
}


def kind_for_status(status_code: int) -> ErrorKind:
    if status_code >= 500:
        return ErrorKind.SERVER
    return _STATUS_KINDS.get(status_code, ErrorKind.VALIDATION)


def _detail_message(body: Any) -> str | None:
    """
    Pull a human message out of an error body.

    FastAPI-style servers answer {"detail": "..."} or, for validation errors,
    {"detail": [{"msg": "...", ...}, ...]}.
    """
    if not isinstance(body, dict):
        return None
    detail = body.get("detail")
    if isinstance(detail, str) and detail.strip():
        return detail.strip()
    if isinstance(detail, list) and detail:
        first = detail[0]
        if isinstance(first, dict) and isinstance(first.get("msg"), str):
            return first["msg"]
    return None


def error_from_response(response: httpx.Response, *, fallback: str | None = None) -> ApiError:
    try:
        body = response.json()
    except ValueError:
        body = None

    message = _detail_message(body) or fallback or response.reason_phrase or f"HTTP {response.status_code}"
    return ApiError(kind_for_status(response.status_code), message, status_code=response.status_code)


def error_from_transport(exc: httpx.TransportError) -> ApiError:
    if isinstance(exc, httpx.TimeoutException):
        return ApiError(ErrorKind.NETWORK, "The server took too long to respond.")
    return ApiError(ErrorKind.NETWORK, "Could not reach the server.")
