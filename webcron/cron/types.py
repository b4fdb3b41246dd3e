"""Check status and scheduler state definitions."""

from dataclasses import dataclass
from enum import Enum


class SchedulerState(Enum):
    """Lifecycle of a single job's scheduler."""

    UNINITIALIZED = "uninitialized"
    ALIGNING = "aligning"       # Waiting for the configured start date
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass
class Status:
    """Outcome of one fetch attempt."""

    ok: bool
    data: bytes = b""

    @property
    def message(self) -> str:
        """Payload as text."""
        return self.data.decode("utf-8", errors="replace")
