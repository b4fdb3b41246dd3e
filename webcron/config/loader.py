"""Configuration loader for webcron."""

import json
import shutil
from pathlib import Path
from typing import Any

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from webcron.config.schema import JobConfig, Settings

_JOB_LIST = TypeAdapter(list[JobConfig])

EXAMPLE_JOBS: list[dict[str, Any]] = [
    {
        "url": "https://example.com/cron/hourly",
        "date": "2024-01-01 00:00:00",
        "interval": "1h",
        "notify_log": True,
        "notify_mail": True,
        "notify_on_failure": True,
        "notify_interval": "24h",
        "mail_user": "owner@example.com",
        "mail_password": "",
        "mail_host_smtp": "smtp.example.com",
        "mail_port_smtp": 587,
    },
]


class JobFileError(Exception):
    """Raised when the job file cannot be read or is not a job list."""


def load_settings(**overrides: Any) -> Settings:
    """
    Load settings from environment variables and .env.

    Args:
        overrides: Explicit values that take priority over the environment.
            None values are ignored.

    Returns:
        Loaded settings.
    """
    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**values)


def assign_ids(jobs: list[JobConfig]) -> list[JobConfig]:
    """Number jobs 1..N in file order."""
    for index, job in enumerate(jobs, start=1):
        job.id = index
    return jobs


def load_jobs(path: Path) -> list[JobConfig]:
    """
    Load the job list from a JSON file.

    Args:
        path: Path to the job file.

    Returns:
        Jobs with identifiers assigned in order of appearance.

    Raises:
        JobFileError: If the file is missing, not JSON, or not a job list.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise JobFileError(f"Error reading job file: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise JobFileError(f"Error parsing job data: {e}") from e

    try:
        jobs = _JOB_LIST.validate_python(data)
    except ValidationError as e:
        raise JobFileError(f"Error parsing job data: {e}") from e

    logger.debug(f"Loaded {len(jobs)} jobs from {path}")
    return assign_ids(jobs)


def save_example_jobs(path: Path) -> Path:
    """
    Write an example job file.

    Args:
        path: Destination path.

    Returns:
        Path where the file was written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(EXAMPLE_JOBS, indent=2, ensure_ascii=False), encoding="utf-8")
    logger.info(f"Example jobs saved to {path}")
    return path


def prepare_log_dir(log_dir: Path, reset: bool = True) -> Path:
    """
    Ensure the per-job log directory exists.

    Args:
        log_dir: Directory holding one <id>.log file per job.
        reset: Remove any previous contents first.

    Returns:
        The log directory.
    """
    if reset and log_dir.exists():
        shutil.rmtree(log_dir)
        logger.debug(f"Removed previous log directory {log_dir}")
    log_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
    return log_dir
