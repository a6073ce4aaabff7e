"""
In-process cache for studio contexts.
"""

from typing import Dict, Optional

from studiosync.core.logging import get_logger
from studiosync.schemas.studio import StudioContext


class ContextCache:
    """
    Namespaced key/value cache of StudioContext entries.

    Entries carry their own load timestamp; freshness is decided by the
    caller, so the cache itself never expires anything.
    """

    def __init__(self, namespace: str = "studio_context"):
        """
        Initialize context cache.

        Args:
            namespace: Key namespace prefix
        """
        self.namespace = namespace
        self._entries: Dict[str, StudioContext] = {}
        self._logger = get_logger(self.__class__.__name__)

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str) -> Optional[StudioContext]:
        entry = self._entries.get(self._key(key))
        if entry is None:
            self._logger.debug(f"Cache miss: {key}")
        else:
            self._logger.debug(f"Cache hit: {key}")
        return entry

    def set(self, key: str, value: StudioContext) -> None:
        self._entries[self._key(key)] = value
        self._logger.debug(f"Cache set: {key}")

    def delete(self, key: str) -> bool:
        """
        Delete key from cache.

        Returns:
            True if an entry was removed
        """
        removed = self._entries.pop(self._key(key), None) is not None
        self._logger.debug(f"Cache delete: {key}")
        return removed

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
