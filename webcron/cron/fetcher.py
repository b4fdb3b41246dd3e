"""HTTP fetcher for job checks."""

import httpx
from loguru import logger

from webcron.config.schema import JobConfig
from webcron.cron.types import Status
from webcron.utils.helpers import format_error


class Fetcher:
    """
    Performs one GET against a job's URL and classifies the outcome.

    Failures are returned as a failed Status, never raised:
    - transport errors carry the error text
    - body read errors carry the read error text
    - non-200 responses carry the status line, e.g. "404 Not Found"
    """

    def __init__(
        self,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.timeout = timeout
        self.transport = transport

    async def run(self, job: JobConfig) -> Status:
        """
        Check the job's URL once.

        Args:
            job: Job whose URL is fetched.

        Returns:
            The resulting Status.
        """
        async with httpx.AsyncClient(
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True,
        ) as client:
            try:
                # The stream context releases the response on every exit path.
                async with client.stream("GET", job.url) as response:
                    try:
                        body = await response.aread()
                    except httpx.HTTPError as e:
                        logger.debug(f"Job {job.id}: body read failed: {e}")
                        return Status(ok=False, data=format_error(e).encode())

                    if response.status_code != 200:
                        line = f"{response.status_code} {response.reason_phrase}".strip()
                        return Status(ok=False, data=line.encode())

                    return Status(ok=True, data=body)
            except (httpx.HTTPError, httpx.InvalidURL) as e:
                logger.debug(f"Job {job.id}: request to {job.url} failed: {e}")
                return Status(ok=False, data=format_error(e).encode())
