"""Break command for clearing abandoned locks."""

from pathlib import Path

import typer

from ..constants import EXIT_LOCK_ERROR
from ..core import break_lock
from ..errors import LockError
from ..output import get_output_context
from ._timing import resolve_timing


def break_cmd(
    lock_path: Path = typer.Argument(..., help="Lock directory path"),
    force: bool = typer.Option(
        False, "--force", "-f", help="Remove the lock even if it is still heartbeating"
    ),
    stale_duration: float | None = typer.Option(
        None, "--stale-duration", help="Seconds without a heartbeat before a lock is stale"
    ),
) -> None:
    """Remove a stale lock left behind by a crashed holder."""
    ctx = get_output_context()
    timing = resolve_timing(stale_duration=stale_duration)

    try:
        removed = break_lock(lock_path, timing.stale_duration, force=force)
    except LockError as e:
        ctx.error(f"{e}. Use --force to remove it anyway", {"path": str(lock_path)})
        raise typer.Exit(EXIT_LOCK_ERROR) from None
    except OSError as e:
        ctx.error(str(e), {"path": str(lock_path)})
        raise typer.Exit(EXIT_LOCK_ERROR) from None

    if removed:
        ctx.success(f"Removed lock: {lock_path}", {"path": str(lock_path), "removed": True})
    else:
        ctx.result(
            {"path": str(lock_path), "removed": False},
            f"[yellow]No lock at {lock_path}[/yellow]",
        )
