"""CLI command implementations for dirlock.

This package contains the implementation of each CLI command,
separated from the CLI framework setup in cli.py.
"""

from .break_lock import break_cmd
from .init import init
from .run import run
from .status import status

__all__ = [
    "break_cmd",
    "init",
    "run",
    "status",
]
