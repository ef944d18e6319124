"""Directory creation with permission hardening.

Creates installation directories, works around restrictive umask
configurations by escalating permissions at most twice (never to a
world-writable mode), and drops access-deny markers into directories
that must not be served by the web server.
"""

import logging
import os

from installfs.core.policy import FilesystemPolicy
from installfs.filesystem.models import ActionResult, DirectoryResult

logger = logging.getLogger(__name__)


class DirectoryGuard:
    """Creates directories and guards them against direct web access.

    All operations are best-effort: failures are logged and reported in
    the returned result, never raised.

    Attributes:
        _policy: Permission modes and access marker settings.
    """

    def __init__(self, policy: FilesystemPolicy | None = None) -> None:
        self._policy = policy or FilesystemPolicy()

    def ensure_directory(self, path: str, deny_access: bool = True) -> DirectoryResult:
        """Create a directory (and missing ancestors) if permitted.

        Args:
            path: Directory path without trailing slash.
            deny_access: Write an access-deny marker unless one already exists.

        Returns:
            DirectoryResult describing the final state. Callers needing a
            guarantee should check ``writable``.
        """
        created = False
        error: str | None = None

        if not os.path.isdir(path):
            try:
                self._create_missing(path)
                created = True
                logger.debug("Created directory %s", path)
            except OSError as e:
                error = str(e)
                logger.warning("Could not create directory %s: %s", path, e)

        writable = os.path.isdir(path) and self._make_writable(path)

        marker: ActionResult | None = None
        if deny_access:
            marker = self.write_access_marker(path, overwrite=False)

        return DirectoryResult(
            path=path,
            created=created,
            writable=writable,
            marker=marker,
            error=error,
        )

    def write_access_marker(
        self,
        path: str,
        overwrite: bool = True,
        content: str | None = None,
    ) -> ActionResult:
        """Write the access-deny marker into a directory.

        Nothing is written when the policy disables markers (the web server
        is not Apache), or when a marker exists and ``overwrite`` is False.

        Args:
            path: Directory path without trailing slash.
            overwrite: Replace an existing marker.
            content: Marker content. Defaults to the policy's deny-all block.

        Returns:
            ActionResult for the marker file.
        """
        marker_path = f"{path}/{self._policy.access_marker_name}"

        if not self._policy.write_access_markers:
            return ActionResult(path=marker_path, success=True, skipped=True)

        if not overwrite and os.path.exists(marker_path):
            return ActionResult(path=marker_path, success=True, skipped=True)

        if content is None:
            content = self._policy.access_marker_content

        try:
            with open(marker_path, "w", encoding="utf-8") as f:
                f.write(content)
        except OSError as e:
            logger.warning("Could not write access marker %s: %s", marker_path, e)
            return ActionResult(path=marker_path, success=False, error=str(e))

        logger.debug("Wrote access marker %s", marker_path)
        return ActionResult(path=marker_path, success=True)

    def _create_missing(self, path: str) -> None:
        """Create path and its missing ancestors, outermost first.

        Every level gets the directory mode (modified by the umask), not
        only the leaf.

        Raises:
            OSError: If a level cannot be created.
        """
        missing: list[str] = []
        current = path
        while current and not os.path.isdir(current):
            missing.append(current)
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent

        for directory in reversed(missing):
            try:
                os.mkdir(directory, self._policy.directory_mode)
            except FileExistsError:
                if not os.path.isdir(directory):
                    raise

    def _make_writable(self, path: str) -> bool:
        """Escalate directory permissions until writable, at most twice.

        Tries the directory mode, then the group-writable fallback mode.
        World-writable modes are never attempted.

        Returns:
            True if the directory is writable afterwards.
        """
        if os.access(path, os.W_OK):
            return True

        for mode in (self._policy.directory_mode, self._policy.directory_fallback_mode):
            try:
                os.chmod(path, mode)
            except OSError as e:
                logger.debug("chmod %04o failed on %s: %s", mode, path, e)
                continue
            if os.access(path, os.W_OK):
                logger.debug("Made %s writable with mode %04o", path, mode)
                return True

        logger.warning("Directory %s is not writable", path)
        return False
