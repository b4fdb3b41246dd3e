"""Configuration schema using Pydantic."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class JobConfig(BaseModel):
    """
    A configured periodic URL check.

    Field aliases match the keys of the job file. Interval strings are kept
    raw and validated when the job's scheduler starts, so one bad interval
    only disables that job.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: int = Field(default=0, exclude=True)
    url: str
    date: str = ""
    interval: str

    keep_log: bool = Field(default=False, alias="notify_log")
    notify_by_mail: bool = Field(default=False, alias="notify_mail")
    notify_on_failure: bool = False
    notify_interval: str = ""

    mail_user: str = ""
    mail_password: str = ""
    mail_host: str = Field(default="", alias="mail_host_smtp")
    mail_port: int = Field(default=25, ge=0, le=65535, alias="mail_port_smtp")

    @property
    def batches_notifications(self) -> bool:
        """Whether the log is mailed as a digest on its own timer."""
        return bool(self.notify_interval)


class Settings(BaseSettings):
    """Process-wide settings for webcron."""

    model_config = SettingsConfigDict(
        env_prefix="WEBCRON_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    jobs_file: Path = Path("jobs.json")
    log_dir: Path = Path("log")
    reset_log_dir: bool = True
    fetch_timeout: float = 5.0
    smtp_timeout: float = 30.0
    log_level: str = "INFO"
