"""Tests for the webcron CLI."""

import json
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from typer.testing import CliRunner

from webcron.cli.commands import app
from webcron.cron.types import Status

runner = CliRunner()


@pytest.fixture
def jobs_file(tmp_path: Path) -> Path:
    path = tmp_path / "jobs.json"
    path.write_text(
        json.dumps(
            [
                {"url": "http://a.test", "interval": "1m", "notify_log": True},
                {"url": "http://b.test", "interval": "5m", "notify_interval": "1h"},
            ]
        )
    )
    return path


def test_cli_jobs(jobs_file):
    result = runner.invoke(app, ["jobs", "--jobs", str(jobs_file)])
    assert result.exit_code == 0
    assert "Webcron Jobs" in result.stdout
    assert "http://a.test" in result.stdout
    assert "5m" in result.stdout


def test_cli_jobs_missing_file(tmp_path):
    result = runner.invoke(app, ["jobs", "--jobs", str(tmp_path / "nope.json")])
    assert result.exit_code == 1
    assert "Error reading job file" in result.stdout


def test_cli_jobs_malformed_file(tmp_path):
    path = tmp_path / "jobs.json"
    path.write_text('{"url": "http://a.test"}')
    result = runner.invoke(app, ["jobs", "--jobs", str(path)])
    assert result.exit_code == 1
    assert "Error parsing job data" in result.stdout


@patch("webcron.cli.commands.Fetcher")
def test_cli_check_ok(mock_fetcher_cls, jobs_file):
    mock_fetcher_cls.return_value.run = AsyncMock(return_value=Status(ok=True, data=b"hi"))

    result = runner.invoke(app, ["check", "1", "--jobs", str(jobs_file)])

    assert result.exit_code == 0
    assert "OK" in result.stdout
    job = mock_fetcher_cls.return_value.run.await_args.args[0]
    assert job.url == "http://a.test"


@patch("webcron.cli.commands.Fetcher")
def test_cli_check_failed(mock_fetcher_cls, jobs_file):
    mock_fetcher_cls.return_value.run = AsyncMock(return_value=Status(ok=False, data=b"404 Not Found"))

    result = runner.invoke(app, ["check", "2", "--jobs", str(jobs_file)])

    assert result.exit_code == 1
    assert "404 Not Found" in result.stdout


def test_cli_check_unknown_job(jobs_file):
    result = runner.invoke(app, ["check", "9", "--jobs", str(jobs_file)])
    assert result.exit_code == 1
    assert "No job with ID 9" in result.stdout


def test_cli_init(tmp_path):
    path = tmp_path / "jobs.json"

    result = runner.invoke(app, ["init", "--jobs", str(path)])

    assert result.exit_code == 0
    assert "Job file created at:" in result.stdout
    assert isinstance(json.loads(path.read_text()), list)


def test_cli_init_refuses_overwrite(jobs_file):
    before = jobs_file.read_text()
    result = runner.invoke(app, ["init", "--jobs", str(jobs_file)])
    assert result.exit_code == 1
    assert jobs_file.read_text() == before


@patch("webcron.cli.commands.setup_logging")
@patch("webcron.cli.commands.build_runner")
def test_cli_run(mock_build, mock_logging, jobs_file, tmp_path):
    fleet = MagicMock()
    fleet.run = AsyncMock()
    mock_build.return_value = fleet
    log_dir = tmp_path / "log"
    log_dir.mkdir()
    (log_dir / "1.log").write_text("stale")

    result = runner.invoke(app, ["run", "--jobs", str(jobs_file), "--log-dir", str(log_dir)])

    assert result.exit_code == 0
    assert "Running 2 jobs" in result.stdout
    fleet.run.assert_awaited_once()
    settings, jobs = mock_build.call_args.args
    assert settings.log_dir == log_dir
    assert [j.id for j in jobs] == [1, 2]
    # Previous logs are wiped on start
    assert log_dir.is_dir()
    assert not (log_dir / "1.log").exists()


@patch("webcron.cli.commands.setup_logging")
@patch("webcron.cli.commands.build_runner")
def test_cli_run_keep_logs(mock_build, mock_logging, jobs_file, tmp_path):
    mock_build.return_value.run = AsyncMock()
    log_dir = tmp_path / "log"
    log_dir.mkdir()
    (log_dir / "1.log").write_text("stale")

    result = runner.invoke(app, ["run", "--jobs", str(jobs_file), "--log-dir", str(log_dir), "--keep-logs"])

    assert result.exit_code == 0
    assert (log_dir / "1.log").read_text() == "stale"


@patch("webcron.cli.commands.setup_logging")
@patch("webcron.cli.commands.build_runner")
def test_cli_run_bad_job_file_runs_nothing(mock_build, mock_logging, tmp_path):
    path = tmp_path / "jobs.json"
    path.write_text("not json")

    result = runner.invoke(app, ["run", "--jobs", str(path), "--log-dir", str(tmp_path / "log")])

    assert result.exit_code == 1
    assert "Error parsing job data" in result.stdout
    mock_build.assert_not_called()


def test_cli_status(monkeypatch):
    monkeypatch.setenv("WEBCRON_LOG_DIR", "var-log")
    result = runner.invoke(app, ["status"])
    assert result.exit_code == 0
    assert "Webcron Settings" in result.stdout
    assert "var-log" in result.stdout


def test_cli_jobs_url_with_brackets(tmp_path):
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps([{"url": "http://x/?a[b]=1", "interval": "1m"}]))

    result = runner.invoke(app, ["jobs", "--jobs", str(path)])

    assert result.exit_code == 0
    assert "a[b]=1" in result.stdout


@patch("webcron.cli.commands.Fetcher")
def test_cli_check_url_with_brackets(mock_fetcher_cls, tmp_path):
    mock_fetcher_cls.return_value.run = AsyncMock(return_value=Status(ok=True))
    path = tmp_path / "jobs.json"
    path.write_text(json.dumps([{"url": "http://x/?a[b]=1", "interval": "1m"}]))

    result = runner.invoke(app, ["check", "1", "--jobs", str(path)])

    assert result.exit_code == 0
    assert "http://x/?a[b]=1" in result.stdout
