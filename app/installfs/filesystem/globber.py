"""Recursive glob matching.

Matches a glob pattern in a directory and every subdirectory below it.
Symbolic links to directories are not followed, so link cycles cannot
make the walk run forever.
"""

import glob
import logging
import os

logger = logging.getLogger(__name__)


class PatternGlobber:
    """Finds files matching a pattern across a directory subtree."""

    def match_recursive(self, base_dir: str, pattern: str) -> list[str]:
        """Recursively find pathnames matching a pattern.

        Matches directly under a directory come before the matches of its
        subdirectories. The order across subdirectories depends on the
        filesystem and should be treated as unordered.

        Args:
            base_dir: Directory to search, without trailing slash.
            pattern: Glob pattern relative to each directory, e.g. "*.php".

        Returns:
            Matching paths, each prefixed with the directory it was found in.
        """
        results: list[str] = []
        stack: list[str] = [base_dir]
        while stack:
            directory = stack.pop()
            prefix = glob.escape(directory)
            results.extend(sorted(glob.glob(f"{prefix}/{pattern}")))

            subdirs = [
                d
                for d in sorted(glob.glob(f"{prefix}/*"))
                if os.path.isdir(d) and not os.path.islink(d)
            ]
            # reversed so the first subdirectory is walked first
            stack.extend(reversed(subdirs))

        logger.debug("Pattern %s matched %d path(s) under %s", pattern, len(results), base_dir)
        return results
