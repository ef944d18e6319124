"""File and tree copying for deployments.

Copies single files with one permission-fix retry and composes them into
whole-tree copies. A data-only deployment can skip application logic
files (by extension) so they are never overwritten.

A file that still cannot be copied after the retry is the one hard
failure of this package: the upgrade cannot continue with a required
file missing, so CopyError is raised.
"""

import logging
import os
import shutil
from collections.abc import Callable, Iterator

from installfs.core.paths import get_app_root
from installfs.core.policy import FilesystemPolicy
from installfs.filesystem.guard import DirectoryGuard
from installfs.filesystem.models import ActionResult

logger = logging.getLogger(__name__)

# Produces remediation text for permission problems below an application root
PermissionAdvice = Callable[[str], str]


def default_permission_advice(root: str) -> str:
    """Explain how to give the installer write access to the application root.

    Args:
        root: Application root directory.

    Returns:
        Human-readable remediation text.
    """
    return (
        f"The installer needs write access to {root}. "
        f"Make the directory owned by the web server user, e.g. "
        f"'chown -R www-data:www-data {root}', and make it writable with "
        f"'chmod -R 0755 {root}', then try again."
    )


class CopyError(Exception):
    """Raised when a file cannot be copied even after fixing permissions.

    Attributes:
        source: File that was being copied.
        dest: Destination that could not be written.
    """

    def __init__(self, source: str, dest: str, message: str) -> None:
        super().__init__(message)
        self.source = source
        self.dest = dest


def file_extension(path: str) -> str:
    """Return the text after the last dot of the base name ("" if none)."""
    name = os.path.basename(path)
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1]


class RecursiveCopier:
    """Copies files and directory trees into an installation.

    Attributes:
        _policy: Exclusion set and retry permission mode.
        _guard: Creates target directories (without access markers).
        _advice: Builds the remediation hint of CopyError messages.
    """

    def __init__(
        self,
        policy: FilesystemPolicy | None = None,
        *,
        guard: DirectoryGuard | None = None,
        permission_advice: PermissionAdvice | None = None,
    ) -> None:
        self._policy = policy or FilesystemPolicy()
        self._guard = guard or DirectoryGuard(self._policy)
        self._advice = permission_advice or default_permission_advice

    def is_excluded(self, path: str) -> bool:
        """Check whether a file belongs to the exclusion set."""
        return file_extension(path) in self._policy.excluded_extensions

    def copy_file(self, source: str, dest: str, exclude: bool = False) -> ActionResult:
        """Copy an individual file from source to dest.

        Args:
            source: File to copy, e.g. "./tmp/latest/index.php".
            dest: Destination file path, e.g. "./index.php".
            exclude: Skip files whose extension is in the exclusion set.
                Skipped files count as successfully copied.

        Returns:
            ActionResult for dest (skipped=True for excluded files).

        Raises:
            CopyError: If the copy fails again after relaxing dest permissions.
        """
        if exclude and self.is_excluded(source):
            logger.debug("Skipping excluded file %s", source)
            return ActionResult(path=dest, success=True, skipped=True)

        try:
            shutil.copyfile(source, dest)
        except OSError as first:
            logger.debug("Copy %s -> %s failed (%s), retrying", source, dest, first)
            try:
                os.chmod(dest, self._policy.file_retry_mode)
            except OSError:
                pass
            try:
                shutil.copyfile(source, dest)
            except OSError as e:
                message = (
                    f"Error while creating/copying file to {dest}. "
                    f"{self._advice(get_app_root())}"
                )
                logger.error("Copy %s -> %s failed: %s", source, dest, e)
                raise CopyError(source, dest, message) from e

        return ActionResult(path=dest, success=True)

    def copy_tree(
        self,
        source_dir: str,
        target_dir: str,
        exclude: bool = False,
    ) -> list[ActionResult]:
        """Copy a directory tree (or a single file) to a target location.

        Directories are visited depth-first in enumeration order; each
        subdirectory is fully copied before its later siblings. Exclusion
        applies at every depth.

        Args:
            source_dir: Source directory or file, e.g. "./tmp/latest".
            target_dir: Target directory or file, e.g. ".".
            exclude: Skip files in the exclusion set.

        Returns:
            One ActionResult per file (and per unreadable source directory).

        Raises:
            CopyError: If a file cannot be copied.
        """
        if not os.path.isdir(source_dir):
            return [self.copy_file(source_dir, target_dir, exclude)]

        results: list[ActionResult] = []
        self._guard.ensure_directory(target_dir, deny_access=False)

        stack: list[tuple[str, str, Iterator[str]]] = [
            (source_dir, target_dir, self._entries(source_dir, results))
        ]
        while stack:
            source, target, entries = stack[-1]
            entry = next(entries, None)
            if entry is None:
                stack.pop()
                continue

            source_path = f"{source}/{entry}"
            dest_path = f"{target}/{entry}"
            if os.path.isdir(source_path):
                self._guard.ensure_directory(dest_path, deny_access=False)
                stack.append((source_path, dest_path, self._entries(source_path, results)))
                continue
            results.append(self.copy_file(source_path, dest_path, exclude))

        return results

    def _entries(self, directory: str, results: list[ActionResult]) -> Iterator[str]:
        """List a directory, recording a failed result if it is unreadable."""
        try:
            names = os.listdir(directory)
        except OSError as e:
            logger.warning("Cannot read source directory %s: %s", directory, e)
            results.append(ActionResult(path=directory, success=False, error=str(e)))
            return iter(())
        return iter(names)
