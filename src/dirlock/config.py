"""Configuration management for dirlock."""

import tomllib
from pathlib import Path

import tomli_w
from pydantic import BaseModel, Field, ValidationError

from .constants import CONFIG_FILE, DEFAULT_POLL_INTERVAL, MIN_STALE_DURATION
from .errors import ConfigError
from .models import LockTiming


class LockSettings(BaseModel):
    """The [lock] section. Omitted intervals are derived by LockTiming."""

    poll_interval: float | None = Field(default=None, gt=0)
    update_interval: float | None = Field(default=None, gt=0)
    stale_duration: float | None = Field(default=None, gt=0)

    def to_timing(self, **overrides: float | None) -> LockTiming:
        """Build LockTiming from these settings, with non-None overrides applied.

        Raises:
            pydantic.ValidationError: If the combined intervals are invalid
        """
        values = self.model_dump(exclude_none=True)
        values.update({name: value for name, value in overrides.items() if value is not None})
        return LockTiming(**values)


class DirlockConfig(BaseModel):
    """Root configuration for dirlock."""

    lock: LockSettings = Field(default_factory=LockSettings)
    break_stale: bool = Field(
        default=False, description="Remove stale locks and retry instead of failing"
    )


def default_config_path(directory: Path | None = None) -> Path:
    """Get path to dirlock.toml in directory (defaults to cwd)."""
    return (directory or Path.cwd()) / CONFIG_FILE


def load_config(config_path: Path | None = None) -> DirlockConfig:
    """Load config from a dirlock.toml file.

    Args:
        config_path: Path to config file (defaults to ./dirlock.toml)

    Returns:
        Loaded configuration, or defaults if the file doesn't exist

    Raises:
        ConfigError: If the file is not valid TOML or fails validation
    """
    config_path = config_path or default_config_path()
    if not config_path.exists():
        return DirlockConfig()
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
        return DirlockConfig.model_validate(data)
    except (tomllib.TOMLDecodeError, ValidationError) as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e


def write_config_template(directory: Path) -> Path:
    """Write default dirlock.toml template.

    Args:
        directory: Directory to write dirlock.toml into

    Returns:
        Path to the written config file
    """
    config_path = default_config_path(directory)
    template = {
        # Seconds. update_interval is left out so it is derived from the
        # other two and always stays well below stale_duration
        "lock": {
            "poll_interval": DEFAULT_POLL_INTERVAL,
            "stale_duration": MIN_STALE_DURATION,
        },
        "break_stale": False,
    }
    with open(config_path, "wb") as f:
        tomli_w.dump(template, f)
    return config_path


# Config file selected by the CLI --config option (set by cli.py main callback)
_config_path: Path | None = None


def set_config_path(path: Path | None) -> None:
    """Set the config file used by get_active_config. Called by CLI main callback."""
    global _config_path
    _config_path = path


def get_active_config() -> DirlockConfig:
    """Load the config selected on the command line, or ./dirlock.toml."""
    return load_config(_config_path)
