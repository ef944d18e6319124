"""Filesystem operations for installers and updaters.

This module provides directory hardening, recursive copy and delete,
recursive glob matching, network filesystem detection, and cache
invalidation.
"""

from installfs.filesystem.cache import directory_hooks, invalidate_caches
from installfs.filesystem.copier import CopyError, RecursiveCopier, default_permission_advice
from installfs.filesystem.deleter import RecursiveDeleter
from installfs.filesystem.globber import PatternGlobber
from installfs.filesystem.guard import DirectoryGuard
from installfs.filesystem.models import ActionResult, DeleteResult, DirectoryResult
from installfs.filesystem.probe import FilesystemTypeProbe

__all__ = [
    "ActionResult",
    "CopyError",
    "DeleteResult",
    "DirectoryGuard",
    "DirectoryResult",
    "FilesystemTypeProbe",
    "PatternGlobber",
    "RecursiveCopier",
    "RecursiveDeleter",
    "default_permission_advice",
    "directory_hooks",
    "invalidate_caches",
]
