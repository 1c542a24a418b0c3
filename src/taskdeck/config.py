# src/taskdeck/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Credentials never live here; they are persisted by auth/credentials.py.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKDECK"

DEFAULT_API_URL = "http://localhost:8001"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Remote API ----
    api_url: str
    request_timeout_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    credentials_path: Path

    # ---- Console behaviour ----
    confirm_bulk_delete: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskdeck") or "taskdeck"
        # The REPL owns stdout, so the console log stays quiet unless asked for more.
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        # NEXT_PUBLIC_API_URL is honoured so a .env shared with the web frontend keeps working.
        api_url = _first_env(_k("API_URL"), "NEXT_PUBLIC_API_URL", default=DEFAULT_API_URL) or DEFAULT_API_URL
        api_url = api_url.strip().rstrip("/")
        request_timeout_seconds = max(0.5, _env_float(_k("REQUEST_TIMEOUT_SECONDS"), 10.0))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskdeck"))
        credentials_path = _env_path(_k("CREDENTIALS_PATH"), data_dir / "credentials.json")

        confirm_bulk_delete = _env_bool(_k("CONFIRM_BULK_DELETE"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            api_url=api_url,
            request_timeout_seconds=request_timeout_seconds,
            data_dir=data_dir,
            credentials_path=credentials_path,
            confirm_bulk_delete=confirm_bulk_delete,
        )


_settings: Settings | None = None


def get_settings() -> Settings:
    """Load settings once (reads .env on first call, never overrides real env vars)."""
    global _settings
    if _settings is None:
        load_dotenv(override=False)
        _settings = Settings.from_env()
    return _settings
