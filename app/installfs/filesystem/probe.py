"""Network filesystem detection.

File locking on network filesystems (NFS) can make file based storage,
such as session files, extremely slow. The probe asks ``df`` whether a
path lives on one of the configured network filesystem types.
"""

import logging
import subprocess

from installfs.core.policy import FilesystemPolicy
from installfs.utils.shell import CommandRunner, command_exists, run_command

logger = logging.getLogger(__name__)


class FilesystemTypeProbe:
    """Detects whether a path is backed by a network filesystem.

    Args:
        policy: Network filesystem types and probe timeout.
        runner: Process-execution facility. Pass None when no process can
            be executed on this system; the probe then reports False.
    """

    def __init__(
        self,
        policy: FilesystemPolicy | None = None,
        runner: CommandRunner | None = run_command,
    ) -> None:
        self._policy = policy or FilesystemPolicy()
        self._runner = runner

    def is_available(self) -> bool:
        """Check if a process-execution facility is configured.

        With the default runner df must also be on PATH.
        """
        if self._runner is None:
            return False
        return self._runner is not run_command or command_exists("df")

    def build_command(self, path: str) -> list[str]:
        """Build the df command restricted to network filesystem types.

        df prints a header plus one line for the filesystem holding the
        path when its type matches, and exits non-zero otherwise.
        """
        args = ["df", "-T"]
        for fs_type in self._policy.network_filesystem_types:
            args.extend(["-t", fs_type])
        args.append(path)
        return args

    def is_network_filesystem(self, path: str) -> bool:
        """Check whether a path lives on a network filesystem.

        Args:
            path: Path to check.

        Returns:
            True if df succeeds with a header and at least one data line.
            False otherwise, including when df cannot be run at all.
        """
        if not self.is_available():
            logger.debug("No process execution available, assuming %s is local", path)
            return False

        command = self.build_command(path)
        try:
            result = self._runner(command, timeout=self._policy.probe_timeout_seconds)
        except subprocess.TimeoutExpired:
            logger.warning("Filesystem probe timed out for %s", path)
            return False
        except (OSError, ValueError) as e:
            logger.debug("Cannot run %s: %s", command[0], e)
            return False

        is_network = result.success and len(result.lines) > 1
        logger.debug("Filesystem probe for %s: network=%s", path, is_network)
        return is_network
