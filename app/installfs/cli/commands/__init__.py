"""CLI commands for installfs.

This package contains all subcommand implementations.
"""

from installfs.cli.commands import config, probe, tree

__all__ = ["config", "probe", "tree"]
