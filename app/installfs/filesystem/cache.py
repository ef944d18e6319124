"""Cache invalidation after installs and updates.

Called on install, update and plugin changes to clear every cache the
change could affect. Each cache is cleared by a hook callable; the
default hooks empty the cache directories named in the policy.
"""

import logging
from collections.abc import Callable, Iterable

from installfs.core.policy import FilesystemPolicy
from installfs.filesystem.deleter import RecursiveDeleter
from installfs.filesystem.models import ActionResult

logger = logging.getLogger(__name__)

# A named hook: (name, callable clearing one cache)
CacheHook = tuple[str, Callable[[], None]]


def directory_hooks(
    policy: FilesystemPolicy,
    deleter: RecursiveDeleter | None = None,
) -> list[CacheHook]:
    """Build hooks emptying each configured cache directory.

    The directories themselves are kept.
    """
    deleter = deleter or RecursiveDeleter()

    def _make(directory: str) -> Callable[[], None]:
        def _clear() -> None:
            result = deleter.delete_tree(directory, delete_root=False)
            if result.failed:
                raise RuntimeError(f"Could not remove {len(result.failed)} cached file(s)")

        return _clear

    return [(directory, _make(directory)) for directory in policy.cache_dirs]


def invalidate_caches(
    hooks: Iterable[CacheHook] | None = None,
    policy: FilesystemPolicy | None = None,
) -> list[ActionResult]:
    """Run cache invalidation hooks in order.

    A failing hook is logged and reported; the remaining hooks still run.

    Args:
        hooks: Hooks to run. Defaults to the policy's cache directories.
        policy: Policy providing cache directories for the default hooks.

    Returns:
        One ActionResult per hook, with the hook name as path.
    """
    if hooks is None:
        hooks = directory_hooks(policy or FilesystemPolicy())

    results: list[ActionResult] = []
    for name, hook in hooks:
        try:
            hook()
        except (OSError, RuntimeError) as e:
            logger.warning("Cache invalidation %s failed: %s", name, e)
            results.append(ActionResult(path=name, success=False, error=str(e)))
            continue
        logger.debug("Invalidated cache %s", name)
        results.append(ActionResult(path=name, success=True))
    return results
