"""
Shared test fixtures for Satchel.
"""
from collections.abc import Iterator

import pytest
import structlog

from satchel import config


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Undo any structlog configuration a test (e.g. a CLI run) applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path) -> Iterator[None]:
    """Point settings at a per-test archive and re-read them afterwards."""
    monkeypatch.setenv("SATCHEL_ARCHIVE_PATH", str(tmp_path / "default.archive"))
    monkeypatch.delenv("SATCHEL_TIMEZONE", raising=False)
    monkeypatch.delenv("SATCHEL_LOG_FORMAT", raising=False)
    monkeypatch.delenv("SATCHEL_LOG_LEVEL", raising=False)
    config.reset_settings()
    yield
    config.reset_settings()


@pytest.fixture
def archive_path(tmp_path):
    """Path of an archive file inside a fresh temp directory."""
    return tmp_path / "calendar.archive"
