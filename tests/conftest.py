"""Shared fixtures."""

from pathlib import Path

import pytest

from webcron.config.schema import JobConfig
from webcron.cron.recorder import LogRecorder


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    """Temporary per-job log directory."""
    path = tmp_path / "log"
    path.mkdir()
    return path


@pytest.fixture
def recorder(log_dir: Path) -> LogRecorder:
    return LogRecorder(log_dir)


@pytest.fixture
def make_job():
    """Factory for jobs with sensible defaults."""

    def _make(**overrides) -> JobConfig:
        values = {
            "id": 1,
            "url": "http://ok.test",
            "interval": "1h",
            "mail_user": "owner@example.com",
            "mail_password": "secret",
            "mail_host": "smtp.example.com",
            "mail_port": 587,
        }
        values.update(overrides)
        return JobConfig(**values)

    return _make
