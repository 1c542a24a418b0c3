# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from taskdeck.config import DEFAULT_API_URL, Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TASKDECK_API_URL",
        "NEXT_PUBLIC_API_URL",
        "TASKDECK_DATA_DIR",
        "TASKDECK_CREDENTIALS_PATH",
        "TASKDECK_REQUEST_TIMEOUT_SECONDS",
        "TASKDECK_CONFIRM_BULK_DELETE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.api_url == DEFAULT_API_URL
    assert s.request_timeout_seconds == 10.0
    assert s.credentials_path == s.data_dir / "credentials.json"
    assert s.confirm_bulk_delete is True


def test_api_url_falls_back_to_frontend_variable_and_strips_slash(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("NEXT_PUBLIC_API_URL", "https://todo.example.com/")
    assert Settings.from_env().api_url == "https://todo.example.com"

    monkeypatch.setenv("TASKDECK_API_URL", "http://127.0.0.1:9000")
    assert Settings.from_env().api_url == "http://127.0.0.1:9000"


def test_paths_bools_and_bad_numbers(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TASKDECK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("TASKDECK_CONFIRM_BULK_DELETE", "off")
    monkeypatch.setenv("TASKDECK_REQUEST_TIMEOUT_SECONDS", "soon")

    s = Settings.from_env()
    assert s.credentials_path == tmp_path / "credentials.json"
    assert s.confirm_bulk_delete is False
    assert s.request_timeout_seconds == 10.0
