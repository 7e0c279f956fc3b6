"""Constants for dirlock."""

# Timing defaults (seconds)
DEFAULT_POLL_INTERVAL = 0.01
UPDATE_POLL_MULTIPLE = 10  # update_interval = poll_interval * 10 when not given
STALE_UPDATE_MULTIPLE = 6  # stale_duration >= update_interval * 6
MIN_STALE_DURATION = 1.0

# Minimum consecutive unchanged-mtime observations before staleness is considered
MIN_STALE_FACTOR = 2

# mkdir losing with EEXIST this many times in a row without stat ever seeing
# the directory means the filesystem is misbehaving
MAX_CREATE_FAILURES = 50

CONFIG_FILE = "dirlock.toml"

# CLI exit codes
EXIT_LOCK_ERROR = 1
EXIT_STALE_LOCK = 3
