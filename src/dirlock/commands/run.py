"""Run command: execute a program while holding a lock."""

import asyncio
import logging
from pathlib import Path

import typer

from ..config import get_active_config
from ..constants import EXIT_LOCK_ERROR, EXIT_STALE_LOCK
from ..core import Lock, StaleHandler, remove_lock
from ..errors import ConfigError, LockError, StaleLockError
from ..output import get_output_context
from ._timing import resolve_timing

logger = logging.getLogger(__name__)


def _break_stale(path: Path) -> None:
    remove_lock(path)


async def _run_locked(lock: Lock, command: list[str], on_stale: StaleHandler | None) -> int:
    """Hold lock while command runs; return its exit status."""
    async with lock.held(on_stale):
        proc = await asyncio.create_subprocess_exec(*command)
        logger.debug(f"Started {command[0]} with PID {proc.pid} under {lock.path}")
        try:
            return await proc.wait()
        except asyncio.CancelledError:
            # Interrupted: stop the child before the lock is released
            if proc.returncode is None:
                proc.terminate()
                await proc.wait()
            raise


def run(
    lock_path: Path = typer.Argument(..., help="Lock directory path"),
    command: list[str] = typer.Argument(..., help="Command to run while holding the lock"),
    poll_interval: float | None = typer.Option(
        None, "--poll-interval", help="Seconds between contention re-checks"
    ),
    update_interval: float | None = typer.Option(
        None, "--update-interval", help="Seconds between heartbeats while held"
    ),
    stale_duration: float | None = typer.Option(
        None, "--stale-duration", help="Seconds without a heartbeat before a lock is stale"
    ),
    break_stale: bool = typer.Option(
        False, "--break-stale", help="Remove stale locks and retry instead of failing"
    ),
) -> None:
    """Run COMMAND while holding the lock at LOCK_PATH.

    Exits with the command's exit status.
    """
    ctx = get_output_context()
    timing = resolve_timing(poll_interval, update_interval, stale_duration)
    try:
        break_stale = break_stale or get_active_config().break_stale
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(EXIT_LOCK_ERROR) from None

    lock = Lock(lock_path, timing)
    on_stale = _break_stale if break_stale else None

    try:
        returncode = asyncio.run(_run_locked(lock, command, on_stale))
    except StaleLockError as e:
        ctx.error(f"{e}. Use --break-stale or 'dirlock break' to clear it", {"path": str(e.path)})
        raise typer.Exit(EXIT_STALE_LOCK) from None
    except LockError as e:
        ctx.error(str(e), {"path": str(lock_path)})
        raise typer.Exit(EXIT_LOCK_ERROR) from None
    except OSError as e:
        # Lock path occupied by a file, permission denied, command not found
        ctx.error(str(e), {"path": str(lock_path)})
        raise typer.Exit(EXIT_LOCK_ERROR) from None

    if returncode < 0:
        # Killed by a signal: report it the way shells do
        returncode = 128 - returncode
    raise typer.Exit(returncode)
