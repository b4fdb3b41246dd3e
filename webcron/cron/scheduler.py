"""Per-job scheduling loop."""

import asyncio
import heapq
from datetime import datetime, timezone

from loguru import logger

from webcron.config.schema import JobConfig
from webcron.cron.fetcher import Fetcher
from webcron.cron.notifier import Notifier
from webcron.cron.recorder import LogRecorder
from webcron.cron.types import SchedulerState, Status
from webcron.utils.helpers import DurationError, parse_duration, parse_start_date

CHECK = "check"
NOTIFY = "notify"


class JobScheduler:
    """
    Owns one job's lifecycle.

    After waiting for the job's start date, two timers drive a single event
    loop: the check timer fetches the URL and routes the Status to the log
    and the failure notifier, the optional notify timer mails the log as a
    digest and clears it. Each event is handled to completion before the
    next one, so there is never more than one fetch in flight per job.
    """

    def __init__(
        self,
        job: JobConfig,
        fetcher: Fetcher,
        recorder: LogRecorder,
        notifier: Notifier,
    ) -> None:
        self.job = job
        self.fetcher = fetcher
        self.recorder = recorder
        self.notifier = notifier
        self.state = SchedulerState.UNINITIALIZED
        self._stop_event = asyncio.Event()

    def parse_intervals(self) -> tuple[float, float | None]:
        """
        Parse the check interval and, when batching is configured, the notify interval.

        Raises:
            DurationError: If an interval is malformed or not positive.
        """
        check = parse_duration(self.job.interval)
        if check <= 0:
            raise DurationError(f"interval must be positive, got {self.job.interval!r}")

        notify = None
        if self.job.batches_notifications:
            notify = parse_duration(self.job.notify_interval)
            if notify <= 0:
                raise DurationError(
                    f"notify interval must be positive, got {self.job.notify_interval!r}"
                )
        return check, notify

    def first_run_delay(self, now: datetime | None = None) -> float:
        """Seconds to wait before the first check; 0 for a missing, malformed or past start date."""
        start = parse_start_date(self.job.date)
        if start is None:
            return 0.0
        now = now or datetime.now(timezone.utc)
        return max(0.0, (start - now).total_seconds())

    async def start(self) -> None:
        """Run the job until stopped. Returns at once if the job's intervals are invalid."""
        try:
            check_interval, notify_interval = self.parse_intervals()
        except DurationError as e:
            logger.error(f"Job {self.job.id} ({self.job.url}) disabled: {e}")
            self.state = SchedulerState.TERMINATED
            return

        try:
            self.state = SchedulerState.ALIGNING
            delay = self.first_run_delay()
            if delay > 0:
                logger.info(f"Job {self.job.id}: first check in {delay:.0f}s")
            if await self._wait(delay):
                return

            self.state = SchedulerState.RUNNING
            logger.info(
                f"Job {self.job.id} running: {self.job.url} every {self.job.interval}"
                + (f", digest every {self.job.notify_interval}" if notify_interval else "")
            )
            await self._loop(check_interval, notify_interval)
        finally:
            self.state = SchedulerState.TERMINATED

    def stop(self) -> None:
        """Stop the loop at the next event boundary."""
        self._stop_event.set()
        logger.debug(f"Job {self.job.id} stopping")

    async def _wait(self, seconds: float) -> bool:
        """Sleep for the given time. Returns True if stop() was called meanwhile."""
        if self._stop_event.is_set():
            return True
        if seconds <= 0:
            return False
        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

    async def _loop(self, check_interval: float, notify_interval: float | None) -> None:
        clock = asyncio.get_running_loop()
        now = clock.time()
        timers: list[tuple[float, str, float]] = [(now, CHECK, check_interval)]
        if notify_interval is not None:
            timers.append((now + notify_interval, NOTIFY, notify_interval))
        heapq.heapify(timers)

        while True:
            due, name, period = heapq.heappop(timers)
            if await self._wait(due - clock.time()):
                return

            try:
                if name == CHECK:
                    await self.handle_check()
                else:
                    await self.handle_notify()
            except Exception as e:
                logger.error(f"Job {self.job.id}: {name} failed: {e}")

            # Periods missed while handling are dropped, not replayed.
            next_due = due + period
            now = clock.time()
            if next_due <= now:
                next_due += ((now - next_due) // period + 1) * period
            heapq.heappush(timers, (next_due, name, period))

    async def handle_check(self) -> None:
        """Fetch once and handle the result."""
        task = asyncio.create_task(self.fetcher.run(self.job))
        status = await task
        await self.handle_status(status)

    async def handle_status(self, status: Status) -> None:
        """Log the status and mail failures, as configured."""
        if not status.ok:
            logger.warning(f"Job {self.job.id} {self.job.url} failed: {status.message[:200]}")
        if self.job.keep_log:
            self.recorder.append(self.job, status)
        if not status.ok and self.job.notify_on_failure:
            await self.notifier.notify(self.job, status)

    async def handle_notify(self) -> None:
        """Mail the log digest and clear the log once it is delivered."""
        if not self.job.notify_by_mail or await self.notifier.notify(self.job, None):
            self.recorder.clear(self.job.id)
