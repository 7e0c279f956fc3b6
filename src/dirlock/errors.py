"""Custom errors for dirlock."""

from pathlib import Path


class DirlockError(Exception):
    """Base dirlock exception."""


class ConfigError(DirlockError):
    """Raised when a config file is invalid or unreadable."""


class LockError(DirlockError):
    """Error acquiring or managing a lock."""


class LockStateError(LockError):
    """Raised when a Lock instance is used while already mid-operation."""


class LockInternalError(LockError):
    """Raised when the filesystem violates the stat/mkdir invariant.

    Acquisition gives up after mkdir reports the directory as existing too
    many times while stat never observes it. Not retryable.
    """


class StaleLockError(LockError):
    """Raised when a held lock has stopped heartbeating."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        super().__init__(f"Stale lock: {self.path}")
