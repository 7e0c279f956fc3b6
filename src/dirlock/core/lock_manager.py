"""Inspection and recovery helpers for lock directories.

These work from outside any Lock instance: they look at what is on disk
at a lock path, decide whether it has gone stale, and clear abandoned
locks. remove_lock doubles as an on_stale handler that breaks the stale
lock and lets acquisition retry.
"""

import logging
import stat
import time
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from ..errors import LockError
from ..models import LockInfo
from .filesystem import FileSystem, LocalFileSystem

logger = logging.getLogger(__name__)


def inspect_lock(
    path: Path | str,
    stale_duration: float,
    filesystem: FileSystem | None = None,
    clock: Callable[[], float] | None = None,
) -> LockInfo:
    """Take a single observation of a lock path.

    Unlike the acquisition loop this does not wait for repeated unchanged
    observations, so it is only a point-in-time hint.

    Args:
        path: Lock directory path
        stale_duration: Seconds without a heartbeat before a lock is stale
        filesystem: Filesystem primitives (defaults to the local OS)
        clock: Wall-clock source in seconds (defaults to time.time)

    Returns:
        LockInfo describing the lock

    Raises:
        NotADirectoryError: If the path exists but is not a directory
    """
    path = Path(path)
    fs = filesystem or LocalFileSystem()
    now = (clock or time.time)()

    try:
        st = fs.stat(path)
    except FileNotFoundError:
        return LockInfo(path=path, held=False)

    if not stat.S_ISDIR(st.st_mode):
        raise NotADirectoryError(f"Lock path exists and is not a directory: {path}")

    age = max(now - st.st_mtime, 0.0)
    return LockInfo(
        path=path,
        held=True,
        mtime=datetime.fromtimestamp(st.st_mtime),
        age_seconds=age,
        stale=age > stale_duration,
    )


def is_stale(info: LockInfo) -> bool:
    """Check if an inspected lock is held but no longer heartbeating."""
    return info.held and info.stale


def remove_lock(path: Path | str, filesystem: FileSystem | None = None) -> bool:
    """Remove a lock directory regardless of who holds it.

    Usable as an on_stale handler: after it returns the acquisition loop
    retries and can create the directory itself.

    Returns:
        True if a directory was removed, False if it was already gone
    """
    path = Path(path)
    fs = filesystem or LocalFileSystem()
    try:
        fs.rmdir(path)
    except FileNotFoundError:
        logger.debug(f"Lock already gone: {path}", extra={"path": str(path)})
        return False
    logger.info(f"Removed lock directory: {path}", extra={"path": str(path)})
    return True


def break_lock(
    path: Path | str,
    stale_duration: float,
    force: bool = False,
    filesystem: FileSystem | None = None,
    clock: Callable[[], float] | None = None,
) -> bool:
    """Remove a lock left behind by a crashed or hung holder.

    Args:
        path: Lock directory path
        stale_duration: Seconds without a heartbeat before a lock is stale
        force: Remove the lock even if it is still heartbeating
        filesystem: Filesystem primitives (defaults to the local OS)
        clock: Wall-clock source in seconds (defaults to time.time)

    Returns:
        True if a lock was removed, False if there was nothing to remove

    Raises:
        LockError: If the lock is live and force is not set
    """
    info = inspect_lock(path, stale_duration, filesystem=filesystem, clock=clock)
    if not info.held:
        return False

    if not info.stale and not force:
        raise LockError(
            f"Lock is active (last heartbeat {info.age_seconds:.1f}s ago): {info.path}"
        )

    return remove_lock(info.path, filesystem=filesystem)
