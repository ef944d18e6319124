"""Policy configuration commands.

Provides commands to display the effective policy and to write a
default policy file.
"""

from typing import Annotated

import typer
from rich.table import Table

from installfs.cli.context import get_policy
from installfs.core.paths import get_policy_path
from installfs.core.policy import FilesystemPolicy, PolicyError, policy_to_dict, save_policy
from installfs.utils.formatting import console, print_error, print_info, print_success

app = typer.Typer(
    help="Show and initialize the filesystem policy.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def show(ctx: typer.Context) -> None:
    """Display the effective policy."""
    policy = get_policy(ctx)

    table = Table(title="Filesystem Policy", show_lines=False)
    table.add_column("Setting", style="bold", no_wrap=True)
    table.add_column("Value", overflow="fold")

    for key, value in policy_to_dict(policy).items():
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value) or "-"
        table.add_row(key, repr(value) if key == "access_marker_content" else str(value))

    console.print(table)


@app.command()
def init(
    ctx: typer.Context,
    force: Annotated[
        bool,
        typer.Option("--force", help="Overwrite an existing policy file."),
    ] = False,
) -> None:
    """Write a policy file with default settings."""
    path = (ctx.obj or {}).get("policy_path") or get_policy_path()

    if path.exists() and not force:
        print_info(f"Policy already exists: {path} (use --force to overwrite)")
        return

    try:
        saved = save_policy(FilesystemPolicy(), path)
    except PolicyError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Policy written to {saved}")
