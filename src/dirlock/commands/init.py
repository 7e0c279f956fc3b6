"""Init command implementation."""

from pathlib import Path

import typer

from ..config import default_config_path, write_config_template
from ..output import get_output_context


def init(
    directory: Path = typer.Argument(
        Path("."), help="Directory to write dirlock.toml into", file_okay=False
    ),
) -> None:
    """Write a dirlock.toml config template."""
    ctx = get_output_context()
    config_path = default_config_path(directory)

    if config_path.exists():
        ctx.result(
            {"config": str(config_path), "created": False},
            f"[yellow]Config already exists:[/yellow] {config_path}",
        )
        return

    directory.mkdir(parents=True, exist_ok=True)
    write_config_template(directory)
    ctx.success(
        f"Created config template: {config_path}",
        {"config": str(config_path), "created": True},
    )
