"""
Cached read views, keyed by view path.

The list route caches what it read from the store under its view path
(plus a per-user key, since RLS makes every user's list different).
Successful writes call revalidate_path() so the next read goes back to the
store. Nothing else is cached: the store stays the source of truth.

Each path carries a generation number that revalidate_path() bumps. A load
that started before a revalidation returns its value to its own caller but
never stores it.

The cache lives in the process, so it assumes a single worker.
"""

import logging
import threading
from typing import Any, Awaitable, Callable, Dict

logger = logging.getLogger(__name__)

_views: Dict[str, Dict[str, Any]] = {}
_generations: Dict[str, int] = {}
_lock = threading.Lock()


async def get_or_load(
    path: str,
    key: str,
    loader: Callable[[], Awaitable[Any]],
) -> Any:
    """
    Return the cached value for (path, key), loading it on a miss.

    Args:
        path: View path (e.g. "/dashboard/invoices")
        key: Per-viewer key inside the path (e.g. the user id)
        loader: Coroutine factory that reads from the store

    Returns:
        The cached or freshly loaded value.
    """
    with _lock:
        entries = _views.get(path)
        if entries is not None and key in entries:
            logger.debug(f"View cache hit: path={path}")
            return entries[key]
        generation = _generations.get(path, 0)

    logger.debug(f"View cache miss: path={path}")
    value = await loader()

    with _lock:
        if _generations.get(path, 0) == generation:
            _views.setdefault(path, {})[key] = value
        else:
            logger.debug(f"Discarding load revalidated mid-flight: path={path}")

    return value


def revalidate_path(path: str) -> None:
    """Mark every cached read under `path` stale."""
    with _lock:
        dropped = _views.pop(path, None)
        _generations[path] = _generations.get(path, 0) + 1

    logger.info(
        f"Revalidated view path={path} "
        f"(dropped {len(dropped) if dropped else 0} cached entries)"
    )


def clear() -> None:
    """Drop every cached view."""
    with _lock:
        _views.clear()
        _generations.clear()
