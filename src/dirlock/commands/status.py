"""Status command for lock inspection."""

from pathlib import Path

import typer

from ..constants import EXIT_LOCK_ERROR
from ..core import inspect_lock
from ..output import get_output_context
from ._timing import resolve_timing


def status(
    lock_path: Path = typer.Argument(..., help="Lock directory path"),
    stale_duration: float | None = typer.Option(
        None, "--stale-duration", help="Seconds without a heartbeat before a lock is stale"
    ),
) -> None:
    """Show whether a lock is held and when it last heartbeated."""
    ctx = get_output_context()
    timing = resolve_timing(stale_duration=stale_duration)

    try:
        info = inspect_lock(lock_path, timing.stale_duration)
    except OSError as e:
        ctx.error(str(e), {"path": str(lock_path)})
        raise typer.Exit(EXIT_LOCK_ERROR) from None

    if ctx.json_mode:
        ctx.print_json(info.model_dump(mode="json"))
        return

    ctx.print(f"\n[bold]Lock:[/bold] {info.path}")
    if not info.held:
        ctx.print("[bold]State:[/bold] [green]free[/green]")
        return

    state = "[red]stale[/red]" if info.stale else "[yellow]held[/yellow]"
    ctx.print(f"[bold]State:[/bold] {state}")
    if info.mtime is not None:
        ctx.print(f"[bold]Last heartbeat:[/bold] {info.mtime:%Y-%m-%d %H:%M:%S}")
    if info.age_seconds is not None:
        ctx.print(f"[bold]Age:[/bold] {info.age_seconds:.1f}s")
    if info.stale:
        ctx.print(f"\nClear it with: dirlock break {info.path}")
