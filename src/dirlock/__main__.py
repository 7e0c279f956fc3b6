"""Allow running dirlock as ``python -m dirlock``."""

from .cli import app

app(prog_name="dirlock")
