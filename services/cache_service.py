from typing import Callable, Dict, List
from utils.logger import logger

class ViewCache:
    """Tracks which presentation views are stale after a mutation."""

    def __init__(self):
        self._versions: Dict[str, int] = {}
        self._stale: set = set()
        self._listeners: List[Callable[[str], None]] = []

    def subscribe(self, listener: Callable[[str], None]) -> None:
        """Register a callback invoked with the path of every invalidated view."""
        self._listeners.append(listener)

    def invalidate(self, path: str = "/") -> None:
        """Mark a view stale. Listener failures are logged, never raised."""
        self._versions[path] = self._versions.get(path, 0) + 1
        self._stale.add(path)
        logger.debug(f"Invalidated view cache for {path}")

        for listener in self._listeners:
            try:
                listener(path)
            except Exception as e:
                logger.error(f"View cache listener failed for {path}: {e}")

    def is_stale(self, path: str = "/") -> bool:
        return path in self._stale

    def mark_fresh(self, path: str = "/") -> None:
        self._stale.discard(path)

    def version(self, path: str = "/") -> int:
        return self._versions.get(path, 0)
