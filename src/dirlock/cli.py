"""dirlock CLI: cross-process locks built on directory creation."""

from pathlib import Path

import typer

from dirlock import __version__

from .commands import break_cmd, init, run, status
from .config import set_config_path
from .logging import configure_logging
from .output import OutputContext, set_output_context


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"dirlock {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="dirlock",
    help="Cross-process locks built on atomic directory creation",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v for heartbeats, -vv for timestamps)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in JSON format for automation",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
    config: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        exists=True,
        dir_okay=False,
        help="Config file (defaults to ./dirlock.toml)",
    ),
) -> None:
    """dirlock - cross-process locks built on atomic directory creation."""
    console = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        no_color=no_color,
    )
    set_output_context(OutputContext(console=console, json_mode=json_output))
    set_config_path(config)


# Stop option parsing at the command so its own flags pass through untouched
app.command(context_settings={"allow_interspersed_args": False})(run)
app.command()(status)
app.command("break")(break_cmd)
app.command()(init)


if __name__ == "__main__":
    app()
