"""Mail notification for job failures and log digests."""

import asyncio
import smtplib
from abc import ABC, abstractmethod
from datetime import date
from email.message import EmailMessage
from email.utils import formataddr

from loguru import logger

from webcron.config.schema import JobConfig
from webcron.cron.recorder import LogRecorder
from webcron.cron.types import Status
from webcron.utils.helpers import format_error

SENDER_NAME = "Webcron Server"
SUBJECT_LABEL = "Webcron Status Summary"


class Mailer(ABC):
    """Outbound mail transport."""

    @abstractmethod
    async def send(self, message: EmailMessage, job: JobConfig) -> None:
        """
        Deliver a composed message using the job's mail configuration.

        Raises:
            smtplib.SMTPException, OSError or ValueError: If delivery fails.
        """
        pass


class SmtpMailer(Mailer):
    """
    SMTP delivery with smtplib, run in a worker thread.

    Port 465 uses implicit TLS. Other ports upgrade with STARTTLS when the
    server offers it.
    """

    def __init__(self, timeout: float = 30.0) -> None:
        self.timeout = timeout

    async def send(self, message: EmailMessage, job: JobConfig) -> None:
        await asyncio.to_thread(self._send_sync, message, job)

    def _send_sync(self, message: EmailMessage, job: JobConfig) -> None:
        if job.mail_port == 465:
            server: smtplib.SMTP = smtplib.SMTP_SSL(job.mail_host, job.mail_port, timeout=self.timeout)
        else:
            server = smtplib.SMTP(job.mail_host, job.mail_port, timeout=self.timeout)

        with server:
            if job.mail_port != 465:
                server.ehlo()
                if server.has_extn("starttls"):
                    server.starttls()
                    server.ehlo()
            if job.mail_password:
                server.login(job.mail_user, job.mail_password)
            server.send_message(message)


class Notifier:
    """
    Sends job status mail.

    With a Status the mail describes that single check. Without one the
    job's whole log is sent as a digest. The log is never cleared here.
    """

    def __init__(self, recorder: LogRecorder, mailer: Mailer) -> None:
        self.recorder = recorder
        self.mailer = mailer

    def compose(self, job: JobConfig, body: str) -> EmailMessage:
        """Build the mail for a job."""
        message = EmailMessage()
        message["Subject"] = f"{date.today().isoformat()}: {SUBJECT_LABEL}"
        message["From"] = formataddr((SENDER_NAME, job.mail_user))
        message["To"] = job.mail_user
        message.set_content(body)
        return message

    async def notify(self, job: JobConfig, status: Status | None = None) -> bool:
        """
        Mail a single status or the accumulated log.

        Args:
            job: Job the mail is about.
            status: A single check result, or None for a digest of the log.

        Returns:
            True if the mail was handed off successfully.
        """
        if status is not None:
            body = self.recorder.format_line(job, status)
        else:
            body = self.recorder.read(job.id)
            if not body:
                logger.debug(f"Job {job.id}: no log to send")
                return False

        message = self.compose(job, body)
        try:
            await self.mailer.send(message, job)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            logger.warning(f"Job {job.id}: mail to {job.mail_user} failed: {e}")
            if job.keep_log:
                self.recorder.append(job, Status(ok=False, data=format_error(e).encode()))
            return False

        logger.info(f"Job {job.id}: {'failure' if status is not None else 'digest'} mail sent to {job.mail_user}")
        return True
