"""
In-memory cache for data fetched through the API client.

Entries are keyed by tuples such as ``("venues", "details", "42")``. Operations
that take a prefix act on every key starting with it, so ``("venues",)``
covers all venue data. Some key roots hold data tied to the signed-in user;
those are marked stale after a credential refresh and dropped entirely when
the session is torn down.
"""

from __future__ import annotations

import threading
import time
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

CacheKey = Tuple[Any, ...]

# Data that belongs to the current identity
IDENTITY_SCOPED_KEYS: Tuple[CacheKey, ...] = (
    ("user", "data"),
    ("auth", "session"),
    ("auth", "userAvatar"),
    ("venues", "favorites"),
    ("classes", "schedules"),
    ("payment", "methods"),
    ("payment", "subscriptions"),
)


def _matches(key: CacheKey, prefix: CacheKey) -> bool:
    return key[: len(prefix)] == prefix


class QueryCache:
    def __init__(
        self,
        stale_seconds: float = 300,
        max_entries: int = 1000,
        identity_keys: Iterable[CacheKey] = IDENTITY_SCOPED_KEYS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._lock = threading.Lock()
        # key -> (value, stored_at, stale flag)
        self._data: Dict[CacheKey, Tuple[Any, float, bool]] = {}
        self._order: List[CacheKey] = []
        self._stale_seconds = stale_seconds
        self._max = max_entries
        self._identity_keys = tuple(tuple(k) for k in identity_keys)
        self._clock = clock

    def set(self, key: CacheKey, value: Any) -> None:
        key = tuple(key)
        with self._lock:
            if key in self._data:
                self._order.remove(key)
            self._data[key] = (value, self._clock(), False)
            self._order.append(key)
            while len(self._order) > self._max:
                oldest = self._order.pop(0)
                self._data.pop(oldest, None)

    def get(self, key: CacheKey) -> Optional[Any]:
        """Return the cached value, stale or not; None when absent."""
        with self._lock:
            entry = self._data.get(tuple(key))
        return entry[0] if entry else None

    def is_stale(self, key: CacheKey) -> bool:
        """True when absent, explicitly invalidated or older than the stale time."""
        with self._lock:
            entry = self._data.get(tuple(key))
        if not entry:
            return True
        _, stored_at, stale = entry
        return stale or self._clock() - stored_at > self._stale_seconds

    def invalidate(self, prefix: CacheKey) -> int:
        """Mark matching entries stale so the next reader refetches them."""
        prefix = tuple(prefix)
        count = 0
        with self._lock:
            for key, (value, stored_at, _) in list(self._data.items()):
                if _matches(key, prefix):
                    self._data[key] = (value, stored_at, True)
                    count += 1
        return count

    def remove(self, prefix: CacheKey) -> int:
        """Drop matching entries."""
        prefix = tuple(prefix)
        with self._lock:
            doomed = [key for key in self._data if _matches(key, prefix)]
            for key in doomed:
                self._data.pop(key, None)
                self._order.remove(key)
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._data.clear()
            self._order.clear()

    def invalidate_identity_scoped(self) -> int:
        return sum(self.invalidate(prefix) for prefix in self._identity_keys)

    def drop_identity_scoped(self) -> int:
        return sum(self.remove(prefix) for prefix in self._identity_keys)

    def keys(self) -> List[CacheKey]:
        with self._lock:
            return list(self._order)

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)
