"""CLI package for installfs.

This package contains the Typer application and all subcommands.
"""

from installfs.cli.main import app

__all__ = ["app"]
