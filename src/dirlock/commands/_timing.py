"""Shared option handling for lock commands."""

import typer
from pydantic import ValidationError

from ..config import get_active_config
from ..constants import EXIT_LOCK_ERROR
from ..errors import ConfigError
from ..models import LockTiming
from ..output import get_output_context


def resolve_timing(
    poll_interval: float | None = None,
    update_interval: float | None = None,
    stale_duration: float | None = None,
) -> LockTiming:
    """Merge CLI interval options over the active config.

    Exits with EXIT_LOCK_ERROR if the config is unreadable or the
    intervals are inconsistent.
    """
    ctx = get_output_context()
    try:
        return get_active_config().lock.to_timing(
            poll_interval=poll_interval,
            update_interval=update_interval,
            stale_duration=stale_duration,
        )
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(EXIT_LOCK_ERROR) from None
    except ValidationError as e:
        ctx.error(f"Invalid lock timing: {e.errors()[0]['msg']}")
        raise typer.Exit(EXIT_LOCK_ERROR) from None
