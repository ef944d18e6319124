"""Shared helpers for CLI commands."""

import typer

from installfs.core.policy import FilesystemPolicy, PolicyError, load_policy_or_default
from installfs.utils.formatting import print_error


def get_policy(ctx: typer.Context) -> FilesystemPolicy:
    """Load the policy selected by the global --policy option.

    Exits with code 1 if the policy cannot be loaded.
    """
    obj = ctx.obj or {}
    try:
        return load_policy_or_default(obj.get("policy_path"))
    except PolicyError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
