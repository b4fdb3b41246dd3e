"""Fleet runner: one scheduler task per job."""

import asyncio

from loguru import logger

from webcron.config.schema import JobConfig
from webcron.cron.fetcher import Fetcher
from webcron.cron.notifier import Notifier
from webcron.cron.recorder import LogRecorder
from webcron.cron.scheduler import JobScheduler


class FleetRunner:
    """
    Starts a JobScheduler for every job and waits for all of them.

    The fetcher, recorder and notifier are shared. Each job only touches its
    own log file, so no locking is needed between schedulers.
    """

    def __init__(
        self,
        jobs: list[JobConfig],
        fetcher: Fetcher,
        recorder: LogRecorder,
        notifier: Notifier,
    ) -> None:
        self.jobs = jobs
        self.schedulers = [JobScheduler(job, fetcher, recorder, notifier) for job in jobs]

    async def run(self) -> None:
        """Run every job concurrently until all schedulers have terminated."""
        if not self.schedulers:
            logger.warning("No jobs configured")
            return

        logger.info(f"Starting {len(self.schedulers)} jobs")
        results = await asyncio.gather(
            *(scheduler.start() for scheduler in self.schedulers),
            return_exceptions=True,
        )
        for scheduler, result in zip(self.schedulers, results):
            if isinstance(result, BaseException):
                logger.error(f"Job {scheduler.job.id} crashed: {result}")
        logger.info("All jobs finished")

    def stop(self) -> None:
        """Stop all schedulers."""
        for scheduler in self.schedulers:
            scheduler.stop()
