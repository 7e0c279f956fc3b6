"""Shared test fixtures for dirlock tests."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest
from typer.testing import CliRunner

from dirlock.core import LocalFileSystem
from dirlock.models import LockTiming


@pytest.fixture
def runner() -> CliRunner:
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def lock_path(tmp_path: Path) -> Path:
    """Lock directory path whose parent does not exist yet."""
    return tmp_path / "locks" / "lock"


@pytest.fixture
def fast_timing() -> LockTiming:
    """Short intervals so staleness is reached quickly."""
    return LockTiming(poll_interval=0.01, stale_duration=0.05)


@pytest.fixture
def in_tmp_dir(tmp_path: Path) -> Generator[Path, None, None]:
    """Change cwd to tmp_path so no stray dirlock.toml is picked up."""
    original_cwd = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_cwd)


class CountingFileSystem(LocalFileSystem):
    """LocalFileSystem that records how often each primitive is called."""

    def __init__(self) -> None:
        self.calls: dict[str, int] = {}

    def _count(self, name: str) -> None:
        self.calls[name] = self.calls.get(name, 0) + 1

    def stat(self, path: Path) -> os.stat_result:
        self._count("stat")
        return super().stat(path)

    def mkdir(self, path: Path) -> None:
        self._count("mkdir")
        super().mkdir(path)

    def rmdir(self, path: Path) -> None:
        self._count("rmdir")
        super().rmdir(path)

    def touch(self, path: Path) -> None:
        self._count("touch")
        super().touch(path)


@pytest.fixture
def counting_fs() -> CountingFileSystem:
    """Filesystem that counts primitive calls."""
    return CountingFileSystem()
