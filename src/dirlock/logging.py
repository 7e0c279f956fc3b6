"""Logging configuration for the dirlock CLI."""

import logging
from enum import IntEnum

from rich.console import Console
from rich.logging import RichHandler


class LogLevel(IntEnum):
    """Log level enumeration."""

    QUIET = logging.WARNING
    NORMAL = logging.INFO
    VERBOSE = logging.DEBUG


def configure_logging(
    verbosity: int = 0,
    quiet: bool = False,
    no_color: bool = False,
) -> Console:
    """Configure logging based on CLI options.

    Library code only logs through module loggers; this is the single place
    handlers get installed.

    Args:
        verbosity: Number of -v flags (1 = debug incl. heartbeats, 2 = also
            timestamps and source paths)
        quiet: Suppress non-error output (takes precedence over verbosity)
        no_color: Disable colored output

    Returns:
        Configured Rich console (on stderr) for output
    """
    if quiet:
        level = LogLevel.QUIET
    elif verbosity >= 1:
        level = LogLevel.VERBOSE
    else:
        level = LogLevel.NORMAL

    console = Console(
        stderr=True,
        force_terminal=not no_color,
        no_color=no_color,
    )

    handler = RichHandler(
        console=console,
        show_time=verbosity >= 2,
        show_path=verbosity >= 2,
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[handler],
    )

    return console
