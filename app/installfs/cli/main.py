"""Main CLI application entry point.

Defines the Typer application and global options.
"""

import logging
from pathlib import Path
from typing import Annotated

import typer

from installfs import __version__
from installfs.cli.commands import config, probe, tree

# Create main Typer app
app = typer.Typer(
    name="installfs",
    help="Filesystem helpers for application installers and updaters.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"installfs version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    policy: Annotated[
        Path | None,
        typer.Option(
            "--policy",
            "-p",
            help="Policy file (default: ~/.config/installfs/policy.toml).",
        ),
    ] = None,
) -> None:
    """installfs - prepare, copy and clean installation directories."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["policy_path"] = policy


# Register commands
app.add_typer(tree.app, name="tree")
app.add_typer(probe.app, name="probe")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
