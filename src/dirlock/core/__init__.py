"""Core lock logic for dirlock.

- filesystem: filesystem primitives a lock relies on
- lock: the Lock itself (acquisition, heartbeat, release)
- lock_manager: inspecting and breaking lock directories from outside
"""

from .filesystem import FileSystem, LocalFileSystem
from .lock import Lock, StaleHandler, raise_stale, run_uncancellable
from .lock_manager import break_lock, inspect_lock, is_stale, remove_lock

__all__ = [
    "FileSystem",
    "LocalFileSystem",
    "Lock",
    "StaleHandler",
    "break_lock",
    "inspect_lock",
    "is_stale",
    "raise_stale",
    "remove_lock",
    "run_uncancellable",
]
