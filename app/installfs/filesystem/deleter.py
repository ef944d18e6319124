"""Recursive, best-effort directory removal.

Used to clean up old files during upgrades where an incomplete cleanup is
preferable to aborting: every removal failure is recorded and the walk
carries on.
"""

import logging
import os
from collections.abc import Iterator

from installfs.filesystem.models import DeleteResult

logger = logging.getLogger(__name__)


class RecursiveDeleter:
    """Removes directory trees without ever raising."""

    def delete_tree(self, directory: str, delete_root: bool) -> DeleteResult:
        """Recursively delete the contents of a directory.

        Each entry is unlinked as a file first; entries that cannot be
        unlinked are treated as directories, emptied and removed. Symbolic
        links are unlinked, never followed.

        Args:
            directory: Directory to empty, without trailing slash.
            delete_root: Also remove the directory itself.

        Returns:
            DeleteResult listing removed and failed paths.
        """
        try:
            names = os.listdir(directory)
        except OSError as e:
            logger.debug("Cannot open %s for deletion: %s", directory, e)
            return DeleteResult(path=directory, error=str(e))

        removed: list[str] = []
        failed: list[str] = []

        # (directory, remaining entries, remove directory once emptied)
        stack: list[tuple[str, Iterator[str], bool]] = [(directory, iter(names), delete_root)]
        while stack:
            current, entries, remove_current = stack[-1]
            name = next(entries, None)
            if name is None:
                stack.pop()
                if remove_current:
                    self._rmdir(current, removed, failed)
                continue

            path = f"{current}/{name}"
            try:
                os.unlink(path)
                removed.append(path)
                continue
            except OSError:
                pass

            try:
                children = os.listdir(path)
            except OSError as e:
                logger.debug("Cannot remove %s: %s", path, e)
                failed.append(path)
                continue
            stack.append((path, iter(children), True))

        if failed:
            logger.warning("Could not remove %d path(s) under %s", len(failed), directory)
        return DeleteResult(path=directory, removed=removed, failed=failed)

    @staticmethod
    def _rmdir(path: str, removed: list[str], failed: list[str]) -> None:
        try:
            os.rmdir(path)
            removed.append(path)
        except OSError as e:
            logger.debug("Cannot remove directory %s: %s", path, e)
            failed.append(path)
