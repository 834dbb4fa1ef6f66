"""Shared test fixtures for all test modules."""

from datetime import date
from pathlib import Path

import pytest

from desklog.core.config import LoggingConfig
from tests.helpers import FakeToday, RecordingConsole


@pytest.fixture
def fake_today() -> FakeToday:
    """Date source starting on 2024-05-17."""
    return FakeToday(date(2024, 5, 17))


@pytest.fixture
def console() -> RecordingConsole:
    """Console surface capturing rendered lines."""
    return RecordingConsole()


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Provide a temporary (not yet created) log directory."""
    return tmp_path / "userData" / "logs"


@pytest.fixture
def production_config(tmp_path: Path) -> LoggingConfig:
    """Production config rooted in a temporary app-data directory."""
    return LoggingConfig.for_environment("production", tmp_path / "userData")


@pytest.fixture
def development_config(tmp_path: Path) -> LoggingConfig:
    """Development config rooted in a temporary app-data directory."""
    return LoggingConfig.for_environment("development", tmp_path / "userData")
