"""dirlock: cross-process mutual exclusion using atomic directory creation.

Example:
    >>> import asyncio
    >>> from dirlock import Lock
    >>> async def main():
    ...     async with Lock("/tmp/example/lock").held():
    ...         ...
    >>> asyncio.run(main())
"""

from .core import Lock, break_lock, inspect_lock, is_stale, raise_stale, remove_lock
from .errors import (
    ConfigError,
    DirlockError,
    LockError,
    LockInternalError,
    LockStateError,
    StaleLockError,
)
from .models import LockInfo, LockState, LockTiming

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "DirlockError",
    "Lock",
    "LockError",
    "LockInfo",
    "LockInternalError",
    "LockState",
    "LockStateError",
    "LockTiming",
    "StaleLockError",
    "__version__",
    "break_lock",
    "inspect_lock",
    "is_stale",
    "raise_stale",
    "remove_lock",
]
