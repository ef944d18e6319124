"""Environment probe commands.

Provides commands to check whether a path is on a network filesystem
and to resolve canonical paths.
"""

from typing import Annotated

import typer

from installfs.cli.context import get_policy
from installfs.core.paths import canonicalize
from installfs.filesystem.probe import FilesystemTypeProbe
from installfs.utils.formatting import print_info, print_warning

app = typer.Typer(
    help="Inspect the deployment environment.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def nfs(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Path to check.")],
) -> None:
    """Check whether a path lives on a network filesystem."""
    probe = FilesystemTypeProbe(get_policy(ctx))

    if probe.is_network_filesystem(path):
        print_warning(
            f"{path} is on a network filesystem; file locking may make file based storage slow."
        )
        return
    print_info(f"{path} is not on a network filesystem (or it could not be determined).")


@app.command()
def realpath(
    path: Annotated[str, typer.Argument(help="Path to resolve.")],
) -> None:
    """Print the canonical path (unchanged if it does not exist)."""
    typer.echo(canonicalize(path))
