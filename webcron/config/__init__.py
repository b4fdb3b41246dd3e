"""Configuration module."""

from webcron.config.loader import (
    JobFileError,
    assign_ids,
    load_jobs,
    load_settings,
    prepare_log_dir,
    save_example_jobs,
)
from webcron.config.schema import JobConfig, Settings

__all__ = [
    "JobConfig",
    "Settings",
    "JobFileError",
    "assign_ids",
    "load_jobs",
    "load_settings",
    "prepare_log_dir",
    "save_example_jobs",
]
