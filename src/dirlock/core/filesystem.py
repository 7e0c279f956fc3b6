"""Filesystem primitives used by directory locks.

Lock code only talks to the filesystem through this interface so tests can
inject faults (a mkdir that always loses, a touch that fails) without
patching os.
"""

import os
from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    """Filesystem operations a Lock needs."""

    def stat(self, path: Path) -> os.stat_result:
        """Stat path, raising FileNotFoundError if it does not exist."""
        ...

    def mkdir(self, path: Path) -> None:
        """Create a directory, raising FileExistsError if path exists."""
        ...

    def makedirs(self, path: Path) -> None:
        """Create path and any missing parents; existing directories are fine."""
        ...

    def rmdir(self, path: Path) -> None:
        """Remove an empty directory."""
        ...

    def touch(self, path: Path) -> None:
        """Set the modification time of path to now."""
        ...


class LocalFileSystem:
    """FileSystem backed by the local OS."""

    def stat(self, path: Path) -> os.stat_result:
        return os.stat(path)

    def mkdir(self, path: Path) -> None:
        os.mkdir(path)

    def makedirs(self, path: Path) -> None:
        path.mkdir(parents=True, exist_ok=True)

    def rmdir(self, path: Path) -> None:
        os.rmdir(path)

    def touch(self, path: Path) -> None:
        # utime with None uses the current time; unlike Path.touch it never
        # creates anything, so a vanished lock directory is an error
        os.utime(path, None)
