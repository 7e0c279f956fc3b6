"""Timing configuration for directory locks."""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from ..constants import (
    DEFAULT_POLL_INTERVAL,
    MIN_STALE_DURATION,
    MIN_STALE_FACTOR,
    STALE_UPDATE_MULTIPLE,
    UPDATE_POLL_MULTIPLE,
)


class LockTiming(BaseModel):
    """Poll, heartbeat and staleness intervals for a Lock, in seconds.

    Omitted intervals are derived from the ones that were given so that the
    heartbeat always fires several times within one stale duration:

    - update_interval defaults to poll_interval * 10, capped at
      stale_duration / 6 when a stale duration was given.
    - stale_duration defaults to update_interval * 6, floored at 1 second.

    Attributes:
        poll_interval: Delay between contention re-checks.
        update_interval: Delay between heartbeat mtime refreshes.
        stale_duration: How long a lock's mtime must stay unchanged before
            it can be declared stale.
    """

    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    update_interval: float = Field(gt=0)
    stale_duration: float = Field(gt=0)

    @model_validator(mode="before")
    @classmethod
    def derive_intervals(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        values = {name: value for name, value in data.items() if value is not None}
        poll = values.get("poll_interval", DEFAULT_POLL_INTERVAL)
        update = values.get("update_interval")
        stale = values.get("stale_duration")
        if not all(isinstance(v, int | float) for v in (poll, update, stale) if v is not None):
            # Non-numeric input is reported by field validation
            return values

        if update is None:
            update = poll * UPDATE_POLL_MULTIPLE
            if stale is not None:
                update = min(update, stale / STALE_UPDATE_MULTIPLE)
            values["update_interval"] = update
        if stale is None:
            values["stale_duration"] = max(update * STALE_UPDATE_MULTIPLE, MIN_STALE_DURATION)
        return values

    @model_validator(mode="after")
    def check_heartbeat_fits(self) -> "LockTiming":
        if self.update_interval >= self.stale_duration:
            raise ValueError(
                f"update_interval ({self.update_interval}s) must be shorter than "
                f"stale_duration ({self.stale_duration}s)"
            )
        return self

    @property
    def stale_factor(self) -> float:
        """Minimum consecutive unchanged-mtime observations before staleness."""
        return max(self.stale_duration / self.poll_interval, MIN_STALE_FACTOR)
