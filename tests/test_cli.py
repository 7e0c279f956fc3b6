"""CLI integration tests for dirlock."""

import json
import os
import sys
import time
from pathlib import Path

import pytest
from typer.testing import CliRunner

from dirlock.cli import app
from dirlock.constants import CONFIG_FILE, EXIT_LOCK_ERROR, EXIT_STALE_LOCK


def _age(path: Path, seconds: float) -> None:
    then = time.time() - seconds
    os.utime(path, (then, then))


class TestVersionCommand:
    """Tests for --version flag."""

    def test_version_shows_version(self, runner: CliRunner) -> None:
        """--version should display version string."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "dirlock 0.1.0" in result.stdout

    def test_version_short_flag(self, runner: CliRunner) -> None:
        """-V should also display version."""
        result = runner.invoke(app, ["-V"])
        assert result.exit_code == 0
        assert "dirlock" in result.stdout


class TestHelpCommand:
    """Tests for --help flag."""

    def test_help_shows_commands(self, runner: CliRunner) -> None:
        """--help should list all available commands."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("run", "status", "break", "init"):
            assert command in result.stdout


class TestStatusCommand:
    """Tests for dirlock status."""

    def test_free_lock_json(self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path) -> None:
        """A missing lock reports held=false."""
        result = runner.invoke(app, ["-q", "--json", "status", str(lock_path)])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["held"] is False
        assert data["path"] == str(lock_path)

    def test_held_lock(self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path) -> None:
        """A fresh lock directory is reported as held."""
        lock_path.mkdir(parents=True)
        result = runner.invoke(app, ["--no-color", "status", str(lock_path)])
        assert result.exit_code == 0
        assert "held" in result.output

    def test_stale_lock_json(self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path) -> None:
        """An old lock directory is reported as stale."""
        lock_path.mkdir(parents=True)
        _age(lock_path, 30)
        result = runner.invoke(
            app, ["-q", "--json", "status", "--stale-duration", "5", str(lock_path)]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["held"] is True
        assert data["stale"] is True
        assert data["age_seconds"] >= 30

    def test_file_at_lock_path(self, runner: CliRunner, tmp_path: Path, in_tmp_dir: Path) -> None:
        """A regular file at the lock path is an error."""
        path = tmp_path / "lock"
        path.write_text("x")
        result = runner.invoke(app, ["--no-color", "status", str(path)])
        assert result.exit_code == EXIT_LOCK_ERROR


class TestBreakCommand:
    """Tests for dirlock break."""

    def test_refuses_live_lock(self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path) -> None:
        """A live lock is not removed without --force."""
        lock_path.mkdir(parents=True)
        result = runner.invoke(app, ["--no-color", "break", str(lock_path)])
        assert result.exit_code == EXIT_LOCK_ERROR
        assert "--force" in result.output
        assert lock_path.is_dir()

    def test_force(self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path) -> None:
        """--force removes a live lock."""
        lock_path.mkdir(parents=True)
        result = runner.invoke(app, ["-q", "--json", "break", "--force", str(lock_path)])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["removed"] is True
        assert not lock_path.exists()

    def test_breaks_stale_lock(
        self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path
    ) -> None:
        """A stale lock is removed without --force."""
        lock_path.mkdir(parents=True)
        _age(lock_path, 30)
        result = runner.invoke(app, ["--no-color", "break", str(lock_path)])
        assert result.exit_code == 0
        assert not lock_path.exists()

    def test_nothing_to_break(self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path) -> None:
        """Breaking a free lock succeeds and says so."""
        result = runner.invoke(app, ["-q", "--json", "break", str(lock_path)])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["removed"] is False


class TestInitCommand:
    """Tests for dirlock init."""

    def test_writes_template(self, runner: CliRunner, in_tmp_dir: Path) -> None:
        """init writes dirlock.toml and refuses to overwrite it."""
        result = runner.invoke(app, ["--no-color", "init"])
        assert result.exit_code == 0
        config_path = in_tmp_dir / CONFIG_FILE
        assert config_path.exists()

        result = runner.invoke(app, ["--no-color", "init"])
        assert result.exit_code == 0
        assert "already exists" in result.output

    def test_writes_into_directory(self, runner: CliRunner, tmp_path: Path) -> None:
        """init accepts a target directory."""
        target = tmp_path / "project"
        result = runner.invoke(app, ["-q", "--json", "init", str(target)])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["created"] is True
        assert (target / CONFIG_FILE).exists()


@pytest.mark.slow
class TestRunCommand:
    """Tests for dirlock run."""

    def test_exit_code_passthrough(
        self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path
    ) -> None:
        """The command's exit status becomes dirlock's exit status."""
        result = runner.invoke(
            app, ["run", str(lock_path), sys.executable, "-c", "import sys; sys.exit(5)"]
        )
        assert result.exit_code == 5
        assert not lock_path.exists()

    def test_command_runs_under_lock(
        self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path
    ) -> None:
        """The lock directory exists while the command runs."""
        script = "import os, sys; sys.exit(0 if os.path.isdir(sys.argv[1]) else 9)"
        result = runner.invoke(
            app, ["run", str(lock_path), sys.executable, "-c", script, str(lock_path)]
        )
        assert result.exit_code == 0
        assert not lock_path.exists()

    def test_stale_lock_fails(self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path) -> None:
        """An abandoned lock makes run fail with the stale exit code."""
        lock_path.mkdir(parents=True)
        result = runner.invoke(
            app,
            [
                "--no-color",
                "run",
                "--poll-interval",
                "0.01",
                "--stale-duration",
                "0.05",
                str(lock_path),
                sys.executable,
                "-c",
                "pass",
            ],
        )
        assert result.exit_code == EXIT_STALE_LOCK
        assert "Stale lock" in result.output
        assert lock_path.is_dir()

    def test_break_stale_option(
        self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path
    ) -> None:
        """--break-stale clears an abandoned lock and runs the command."""
        lock_path.mkdir(parents=True)
        result = runner.invoke(
            app,
            [
                "run",
                "--poll-interval",
                "0.01",
                "--stale-duration",
                "0.05",
                "--break-stale",
                str(lock_path),
                sys.executable,
                "-c",
                "pass",
            ],
        )
        assert result.exit_code == 0
        assert not lock_path.exists()

    def test_break_stale_from_config(
        self, runner: CliRunner, lock_path: Path, tmp_path: Path, in_tmp_dir: Path
    ) -> None:
        """break_stale and intervals can come from the config file."""
        config = tmp_path / "custom.toml"
        config.write_text(
            "break_stale = true\n\n[lock]\npoll_interval = 0.01\nstale_duration = 0.05\n"
        )
        lock_path.mkdir(parents=True)
        result = runner.invoke(
            app,
            ["--config", str(config), "run", str(lock_path), sys.executable, "-c", "pass"],
        )
        assert result.exit_code == 0
        assert not lock_path.exists()

    def test_invalid_timing(self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path) -> None:
        """A heartbeat slower than the stale duration is rejected up front."""
        result = runner.invoke(
            app,
            [
                "--no-color",
                "run",
                "--update-interval",
                "2",
                "--stale-duration",
                "1",
                str(lock_path),
                sys.executable,
                "-c",
                "pass",
            ],
        )
        assert result.exit_code == EXIT_LOCK_ERROR
        assert "Invalid lock timing" in result.output
        assert not lock_path.exists()

    def test_missing_command_releases_lock(
        self, runner: CliRunner, lock_path: Path, in_tmp_dir: Path
    ) -> None:
        """A command that cannot start is reported and the lock is released."""
        result = runner.invoke(
            app, ["--no-color", "run", str(lock_path), "dirlock-test-no-such-command"]
        )
        assert result.exit_code == EXIT_LOCK_ERROR
        assert not lock_path.exists()
