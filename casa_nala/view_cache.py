"""
View Cache - snapshots of the role-scoped order views.

The kitchen, delivery and pickup boards are rebuilt from the order store the
first time they are read and served from memory afterwards. Each snapshot is
stored with the stamp the caller read from the store when it was built; a
read with a different stamp reloads it, so writes made by other workers or
processes are picked up on the next read. Writes in this process also
invalidate the snapshots directly.

Usage:
    from casa_nala.view_cache import view_cache, ORDER_VIEWS

    board = view_cache.get_or_load("kitchen", lambda: build_board(db), stamp=fingerprint)
    view_cache.invalidate(*ORDER_VIEWS)
"""

import logging
import threading
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

logger = logging.getLogger(__name__)

KITCHEN_VIEW = "kitchen"
DELIVERY_VIEW = "delivery"
PICKUP_VIEW = "pickup"
ORDER_VIEWS = (KITCHEN_VIEW, DELIVERY_VIEW, PICKUP_VIEW)


class ViewCache:
    """Thread-safe map of view name -> (stamp, last loaded snapshot)."""

    def __init__(self):
        self._lock = threading.Lock()
        self._entries: Dict[str, Tuple[Optional[Hashable], Any]] = {}
        self._versions: Dict[str, int] = {}

    def get_or_load(
        self,
        name: str,
        loader: Callable[[], Any],
        stamp: Optional[Hashable] = None,
    ) -> Any:
        with self._lock:
            entry = self._entries.get(name)
            if entry is not None and entry[0] == stamp:
                return entry[1]
            version = self._versions.get(name, 0)

        if entry is not None:
            logger.debug("View %s is stale, reloading", name)
        value = loader()

        with self._lock:
            # Drop the load if the view was invalidated while it was running
            if self._versions.get(name, 0) == version:
                self._entries[name] = (stamp, value)
        return value

    def invalidate(self, *names: str) -> None:
        with self._lock:
            for name in names:
                self._entries.pop(name, None)
                self._versions[name] = self._versions.get(name, 0) + 1
        logger.debug("Invalidated views: %s", ", ".join(names))

    def version(self, name: str) -> int:
        with self._lock:
            return self._versions.get(name, 0)

    def is_cached(self, name: str) -> bool:
        with self._lock:
            return name in self._entries

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._versions.clear()


view_cache = ViewCache()


def invalidate_order_views() -> None:
    """Signal every role-scoped reader that the orders collection changed."""
    view_cache.invalidate(*ORDER_VIEWS)
