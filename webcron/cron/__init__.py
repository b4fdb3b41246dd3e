"""Job scheduling, checking and notification."""

from webcron.cron.fetcher import Fetcher
from webcron.cron.notifier import Mailer, Notifier, SmtpMailer
from webcron.cron.recorder import LogRecorder
from webcron.cron.runner import FleetRunner
from webcron.cron.scheduler import JobScheduler
from webcron.cron.types import SchedulerState, Status

__all__ = [
    "Fetcher",
    "FleetRunner",
    "JobScheduler",
    "LogRecorder",
    "Mailer",
    "Notifier",
    "SchedulerState",
    "SmtpMailer",
    "Status",
]
