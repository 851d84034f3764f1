import time
from typing import Any, Dict, Hashable, Optional, Tuple


class TTLCache:
    """Small in-process cache for upstream payloads.

    Entries older than ``ttl_seconds`` are treated as missing. A TTL of zero
    or less disables the cache entirely.
    """

    def __init__(self, ttl_seconds: int = 300, max_items: int = 1000):
        self.ttl = ttl_seconds
        self.max_items = max_items
        self._store: Dict[Hashable, Tuple[float, Any]] = {}

    @property
    def enabled(self) -> bool:
        return self.ttl > 0

    def _evict_if_needed(self):
        while len(self._store) > self.max_items:
            oldest_key = min(self._store, key=lambda k: self._store[k][0])
            self._store.pop(oldest_key, None)

    def get(self, key: Hashable) -> Optional[Any]:
        if not self.enabled:
            return None
        item = self._store.get(key)
        if item is None:
            return None
        stored_at, value = item
        if time.monotonic() - stored_at > self.ttl:
            self._store.pop(key, None)
            return None
        return value

    def set(self, key: Hashable, value: Any):
        if not self.enabled:
            return
        self._store[key] = (time.monotonic(), value)
        self._evict_if_needed()

    def __len__(self) -> int:
        return len(self._store)
