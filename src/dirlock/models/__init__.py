"""Data models for dirlock.

- LockTiming: poll, heartbeat and staleness intervals
- LockState: lifecycle of a Lock instance
- LockInfo: on-disk snapshot of a lock path

Example:
    >>> from dirlock.models import LockTiming
    >>> LockTiming(poll_interval=0.01, stale_duration=0.02).update_interval
"""

from .lock import LockInfo
from .state import LockState
from .timing import LockTiming

__all__ = [
    "LockInfo",
    "LockState",
    "LockTiming",
]
