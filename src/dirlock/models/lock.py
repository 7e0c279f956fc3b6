"""Lock inspection model.

A snapshot of what is on disk at a lock path. The directory itself is the
only record of ownership, so this carries no owner identity.
"""

from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field


class LockInfo(BaseModel):
    """Observed state of a lock directory.

    Attributes:
        path: Lock directory path.
        held: Whether the lock directory exists.
        mtime: Last heartbeat (directory modification time), if held.
        age_seconds: Seconds since the last heartbeat, if held.
        stale: Whether the heartbeat is older than the stale duration.
    """

    path: Path = Field(description="Lock directory path")
    held: bool = Field(description="Lock directory exists")
    mtime: datetime | None = Field(default=None, description="Last heartbeat")
    age_seconds: float | None = Field(default=None, description="Seconds since heartbeat")
    stale: bool = Field(default=False, description="Heartbeat older than stale duration")
