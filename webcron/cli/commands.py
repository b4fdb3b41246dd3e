"""CLI commands for webcron."""

import asyncio
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from webcron.config import (
    JobConfig,
    JobFileError,
    Settings,
    load_jobs,
    load_settings,
    prepare_log_dir,
    save_example_jobs,
)
from webcron.cron import Fetcher, FleetRunner, LogRecorder, Notifier, SmtpMailer
from webcron.utils.logging import setup_logging

app = typer.Typer(
    name="webcron",
    help="webcron: periodic URL checks with log history and mail notification",
)
console = Console()


def _load_jobs_or_exit(path: Path) -> list[JobConfig]:
    try:
        return load_jobs(path)
    except JobFileError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def build_runner(settings: Settings, jobs: list[JobConfig]) -> FleetRunner:
    """Wire a fleet runner from settings."""
    recorder = LogRecorder(settings.log_dir)
    return FleetRunner(
        jobs,
        fetcher=Fetcher(timeout=settings.fetch_timeout),
        recorder=recorder,
        notifier=Notifier(recorder, SmtpMailer(timeout=settings.smtp_timeout)),
    )


@app.command()
def run(
    jobs_path: Optional[Path] = typer.Option(None, "--jobs", "-j", help="Job file path"),
    log_dir: Optional[Path] = typer.Option(None, "--log-dir", help="Directory for job logs"),
    keep_logs: bool = typer.Option(False, "--keep-logs", help="Keep logs from previous runs"),
) -> None:
    """Run all configured jobs until interrupted."""
    settings = load_settings(jobs_file=jobs_path, log_dir=log_dir)
    setup_logging(settings.log_level)

    prepare_log_dir(settings.log_dir, reset=settings.reset_log_dir and not keep_logs)
    jobs = _load_jobs_or_exit(settings.jobs_file)

    runner = build_runner(settings, jobs)
    console.print(f"[bold green]Running {len(jobs)} jobs[/bold green] (logs in {settings.log_dir})")
    try:
        asyncio.run(runner.run())
    except KeyboardInterrupt:
        runner.stop()
        console.print("\n[dim]Stopped.[/dim]")


@app.command()
def jobs(
    jobs_path: Optional[Path] = typer.Option(None, "--jobs", "-j", help="Job file path"),
) -> None:
    """List configured jobs."""
    settings = load_settings(jobs_file=jobs_path)
    configured = _load_jobs_or_exit(settings.jobs_file)

    table = Table(title="Webcron Jobs")
    table.add_column("ID", style="cyan")
    table.add_column("URL", style="green")
    table.add_column("Start")
    table.add_column("Interval")
    table.add_column("Log")
    table.add_column("Mail")
    table.add_column("Alert")
    table.add_column("Digest")

    for job in configured:
        table.add_row(
            str(job.id),
            escape(job.url),
            job.date or "[dim]now[/dim]",
            job.interval,
            "yes" if job.keep_log else "no",
            "yes" if job.notify_by_mail else "no",
            "yes" if job.notify_on_failure else "no",
            job.notify_interval or "[dim]-[/dim]",
        )

    console.print(table)


@app.command()
def check(
    job_id: int = typer.Argument(..., help="Job ID (1-based position in the job file)"),
    jobs_path: Optional[Path] = typer.Option(None, "--jobs", "-j", help="Job file path"),
) -> None:
    """Check one job's URL once and print the outcome."""
    settings = load_settings(jobs_file=jobs_path)
    configured = _load_jobs_or_exit(settings.jobs_file)

    job = next((j for j in configured if j.id == job_id), None)
    if job is None:
        console.print(f"[red]Error:[/red] No job with ID {job_id}")
        raise typer.Exit(1)

    status = asyncio.run(Fetcher(timeout=settings.fetch_timeout).run(job))
    if status.ok:
        console.print(f"[green]OK[/green] {escape(job.url)}")
        return

    console.print(f"[red]FAILED[/red] {escape(job.url)}: {escape(status.message)}")
    raise typer.Exit(1)


@app.command()
def init(
    jobs_path: Optional[Path] = typer.Option(None, "--jobs", "-j", help="Job file path"),
) -> None:
    """Write an example job file."""
    settings = load_settings(jobs_file=jobs_path)
    if settings.jobs_file.exists():
        console.print(f"[yellow]Job file already exists:[/yellow] {settings.jobs_file}")
        raise typer.Exit(1)

    path = save_example_jobs(settings.jobs_file)
    console.print(f"[green]Job file created at:[/green] {path}")
    console.print("\n[yellow]Next steps:[/yellow]")
    console.print("1. Edit the job file with your URLs and mail settings")
    console.print("2. Run: webcron run")


@app.command()
def status() -> None:
    """Show the effective settings."""
    settings = load_settings()

    table = Table(title="Webcron Settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Job File", str(settings.jobs_file))
    table.add_row("Log Directory", str(settings.log_dir))
    table.add_row("Reset Logs On Start", str(settings.reset_log_dir))
    table.add_row("Fetch Timeout", f"{settings.fetch_timeout}s")
    table.add_row("SMTP Timeout", f"{settings.smtp_timeout}s")
    table.add_row("Log Level", settings.log_level)

    console.print(table)


if __name__ == "__main__":
    app()
