"""Test configuration and fixtures for httprecorder."""

import tempfile
from collections.abc import Generator
from datetime import UTC, datetime
from pathlib import Path

import pytest

from httprecorder.config import (
    ARCHIVE_DIR_ENV_VAR,
    DEBUG_ENV_VAR,
    LOG_DIR_ENV_VAR,
    MODE_ENV_VAR,
)
from httprecorder.modules.interaction import (
    Interaction,
    InteractionMessage,
    MessageTimings,
    RecordedRequest,
    RecordedResponse,
)


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    """Keep the developer's environment and config files out of every test."""
    for key in (MODE_ENV_VAR, ARCHIVE_DIR_ENV_VAR, LOG_DIR_ENV_VAR, DEBUG_ENV_VAR):
        monkeypatch.delenv(key, raising=False)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    return workdir


@pytest.fixture
def archive_dir(temp_dir: Path) -> Path:
    path = temp_dir / "archives"
    path.mkdir()
    return path


def build_message(
    method: str = "GET",
    url: str = "https://api.example.com/items?page=1",
    status_code: int = 200,
    request_headers: list[tuple[str, str]] | None = None,
    request_body: bytes = b"",
    response_headers: list[tuple[str, str]] | None = None,
    response_body: bytes = b'{"ok": true}',
    elapsed: float = 0.0125,
) -> InteractionMessage:
    return InteractionMessage(
        request=RecordedRequest(
            method=method,
            url=url,
            headers=request_headers if request_headers is not None else [("Accept", "*/*")],
            body=request_body,
        ),
        response=RecordedResponse(
            status_code=status_code,
            reason_phrase="OK" if status_code == 200 else "",
            headers=response_headers
            if response_headers is not None
            else [("Content-Type", "application/json")],
            body=response_body,
        ),
        timings=MessageTimings(
            started_at=datetime(2024, 5, 1, 12, 0, 0, tzinfo=UTC), elapsed=elapsed
        ),
    )


@pytest.fixture
def message() -> InteractionMessage:
    return build_message()


@pytest.fixture
def interaction() -> Interaction:
    return Interaction(
        name="sample",
        messages=[
            build_message(),
            build_message(
                method="POST",
                url="https://api.example.com/login",
                status_code=201,
                request_headers=[("Content-Type", "application/x-www-form-urlencoded")],
                request_body=b"user=alice&password=secret123",
                response_body=b"created",
                response_headers=[("Content-Type", "text/plain"), ("Location", "/me")],
            ),
        ],
    )


@pytest.fixture
def make_message():
    """Factory for messages with overridable fields."""
    return build_message
