"""Directory tree commands.

Provides commands to prepare directories, copy and delete trees, write
access-deny markers, and find files recursively.
"""

import json
from enum import Enum
from typing import Annotated

import typer
from rich.table import Table

from installfs.cli.context import get_policy
from installfs.filesystem.cache import invalidate_caches
from installfs.filesystem.copier import CopyError, RecursiveCopier
from installfs.filesystem.deleter import RecursiveDeleter
from installfs.filesystem.globber import PatternGlobber
from installfs.filesystem.guard import DirectoryGuard
from installfs.filesystem.models import ActionResult
from installfs.utils.formatting import (
    console,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="Prepare, copy, delete and search directory trees.",
    invoke_without_command=True,
    no_args_is_help=True,
)


class OutputFormat(str, Enum):
    """Output format options for glob results."""

    TABLE = "table"
    JSON = "json"


@app.command()
def mkdir(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Directory to create.")],
    deny_access: Annotated[
        bool,
        typer.Option("--deny-access/--no-deny-access", help="Write an access-deny marker."),
    ] = True,
) -> None:
    """Create a directory with safe permissions."""
    guard = DirectoryGuard(get_policy(ctx))
    result = guard.ensure_directory(_no_trailing_slash(path), deny_access=deny_access)

    if result.error:
        print_warning(f"Could not create {path}: {result.error}")
    if not result.writable:
        print_error(f"Directory is not writable: {path}")
        raise typer.Exit(code=1)

    if result.marker is not None and not result.marker.success:
        print_warning(f"Could not write access marker: {result.marker.error}")

    if result.created:
        print_success(f"Created {path}")
    else:
        print_info(f"{path} already exists")


@app.command()
def marker(
    ctx: typer.Context,
    path: Annotated[str, typer.Argument(help="Directory to protect.")],
    overwrite: Annotated[
        bool,
        typer.Option("--overwrite/--no-overwrite", help="Replace an existing marker."),
    ] = True,
) -> None:
    """Write an access-deny marker into a directory."""
    guard = DirectoryGuard(get_policy(ctx))
    result = guard.write_access_marker(_no_trailing_slash(path), overwrite=overwrite)

    if not result.success:
        print_error(f"Could not write {result.path}: {result.error}")
        raise typer.Exit(code=1)
    if result.skipped:
        print_info(f"Marker not written: {result.path}")
        return
    print_success(f"Wrote {result.path}")


@app.command()
def copy(
    ctx: typer.Context,
    source: Annotated[str, typer.Argument(help="Source file or directory.")],
    target: Annotated[str, typer.Argument(help="Target file or directory.")],
    exclude_code: Annotated[
        bool,
        typer.Option("--exclude-code", help="Skip files in the exclusion set."),
    ] = False,
    clear_caches: Annotated[
        bool,
        typer.Option("--clear-caches", help="Invalidate caches after copying."),
    ] = False,
) -> None:
    """Copy a file or directory tree into place."""
    policy = get_policy(ctx)
    copier = RecursiveCopier(policy)

    try:
        results = copier.copy_tree(
            _no_trailing_slash(source),
            _no_trailing_slash(target),
            exclude=exclude_code,
        )
    except CopyError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    copied = sum(1 for r in results if r.success and not r.skipped)
    skipped = sum(1 for r in results if r.skipped)
    failures = [r for r in results if not r.success]

    for failure in failures:
        print_warning(f"{failure.path}: {failure.error}")

    console.print(f"[success]Copied {copied} file(s)[/], [skipped]skipped {skipped}[/]")

    if clear_caches:
        cache_results = invalidate_caches(policy=policy)
        _print_results("Cache Invalidation", cache_results)
        failures.extend(r for r in cache_results if not r.success)

    if failures:
        raise typer.Exit(code=1)


@app.command()
def delete(
    directory: Annotated[str, typer.Argument(help="Directory to delete.")],
    keep_root: Annotated[
        bool,
        typer.Option("--keep-root", help="Only empty the directory."),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Recursively delete a directory."""
    if not yes:
        action = "empty" if keep_root else "delete"
        confirmed = typer.confirm(f"Really {action} {directory}?", default=False)
        if not confirmed:
            print_info("Aborted.")
            raise typer.Exit(code=0)

    deleter = RecursiveDeleter()
    result = deleter.delete_tree(_no_trailing_slash(directory), delete_root=not keep_root)

    if result.error:
        print_error(f"Cannot open {directory}: {result.error}")
        raise typer.Exit(code=1)

    for path in result.failed:
        print_warning(f"Could not remove {path}")

    print_success(f"Removed {len(result.removed)} path(s)")
    if not result.success:
        raise typer.Exit(code=1)


@app.command()
def glob(
    base: Annotated[str, typer.Argument(help="Directory to search.")],
    pattern: Annotated[str, typer.Argument(help="Glob pattern, e.g. '*.php'.")],
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Find files matching a pattern in a directory tree."""
    matches = PatternGlobber().match_recursive(_no_trailing_slash(base), pattern)

    if output_format == OutputFormat.JSON:
        typer.echo(json.dumps(matches, indent=2))
        return

    if not matches:
        print_info("No matching files found.")
        return

    table = Table(title=f"Matches for {pattern}", show_lines=False)
    table.add_column("Path", style="bold")
    for match in matches:
        table.add_row(match)
    console.print(table)
    console.print(f"\n[dim]Found {len(matches)} match(es)[/dim]")


# === Private helper functions ===


def _print_results(title: str, results: list[ActionResult]) -> None:
    """Display operation results."""
    if not results:
        return

    table = Table(title=title, show_lines=False)
    table.add_column("Target", style="bold")
    table.add_column("Status", width=10)
    table.add_column("Error", style="dim")

    for r in results:
        status = "[success]OK[/]" if r.success else "[error]FAILED[/]"
        table.add_row(r.path, status, r.error or "")

    console.print(table)


def _no_trailing_slash(path: str) -> str:
    """Directory paths are passed on without trailing slash."""
    return path.rstrip("/") or "/"
