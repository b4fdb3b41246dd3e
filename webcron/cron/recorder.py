"""Per-job status log."""

import os
from datetime import datetime
from pathlib import Path

from loguru import logger

from webcron.config.schema import JobConfig
from webcron.cron.types import Status

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class LogRecorder:
    """
    Append-only status history, one file per job.

    Writes are best-effort: an unwritable log directory must never stop a
    job's schedule, so OSErrors are dropped after a debug message.
    """

    def __init__(self, log_dir: Path) -> None:
        self.log_dir = log_dir

    def path_for(self, job_id: int) -> Path:
        """Location of a job's log."""
        return self.log_dir / f"{job_id}.log"

    @staticmethod
    def format_line(job: JobConfig, status: Status, now: datetime | None = None) -> str:
        """Render one status line, CRLF terminated."""
        stamp = (now or datetime.now()).strftime(TIMESTAMP_FORMAT)
        ok = "true" if status.ok else "false"
        return f"{stamp} Job {job.id} {job.url}: Success? {ok}. Message: {status.message}\r\n"

    def append(self, job: JobConfig, status: Status) -> None:
        """Append a status line to the job's log, creating it if needed."""
        path = self.path_for(job.id)
        line = self.format_line(job, status)
        try:
            fd = os.open(path, os.O_WRONLY | os.O_APPEND | os.O_CREAT, 0o600)
            with open(fd, "a", encoding="utf-8", newline="") as f:
                f.write(line)
        except OSError as e:
            logger.debug(f"Job {job.id}: could not write {path}: {e}")

    def read(self, job_id: int) -> str | None:
        """Return the whole log, or None if it does not exist or cannot be read."""
        path = self.path_for(job_id)
        try:
            with open(path, encoding="utf-8", errors="replace", newline="") as f:
                return f.read()
        except OSError:
            return None

    def clear(self, job_id: int) -> None:
        """Remove the job's log. Missing logs are ignored."""
        path = self.path_for(job_id)
        try:
            path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.debug(f"Job {job_id}: could not remove {path}: {e}")
