# src/taskdeck/core/http.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from .errors import error_from_response, error_from_transport

logger = logging.getLogger(__name__)


def make_timeout(timeout_s: float) -> httpx.Timeout:
    connect_s = min(5.0, timeout_s)
    return httpx.Timeout(connect=connect_s, read=timeout_s, write=timeout_s, pool=connect_s)


async def request_json(
        client: httpx.AsyncClient,
        method: str,
        url: str,
        *,
        json: Any = None,
        headers: dict[str, str] | None = None,
        error_fallback: str | None = None,
) -> Any:
    """
    Send one request and decode the JSON body.

    Transport failures and non-2xx answers are raised as ApiError.
    An empty body (204, or DELETE answering nothing) decodes to None.
    No retries: a failed request surfaces immediately.
    """
    try:
        response = await client.request(method, url, json=json, headers=headers)
    except httpx.TransportError as exc:
        logger.warning("%s %s failed: %s", method, url, exc)
        raise error_from_transport(exc) from exc

    if response.is_error:
        err = error_from_response(response, fallback=error_fallback)
        logger.warning("%s %s -> %s (%s)", method, url, response.status_code, err.message)
        raise err

    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        logger.debug("%s %s returned a non-JSON body", method, url)
        return None
