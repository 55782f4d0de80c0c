"""
In-memory TTL cache fronting registrar read calls.

Entries expire lazily on ``get``; there is no background eviction. The owner
decides what a TTL of 0 means, the cache just stores what it is given.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 120.0


class TtlCache:
    """Single-process key/value store with per-entry expiry."""

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self._clock = clock
        self._store: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Return the cached value, or ``default`` when absent or expired."""
        entry = self._store.get(key)
        if entry is None:
            return default

        value, expires_at = entry
        if self._clock() > expires_at:
            del self._store[key]
            return default

        return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        """Store a fresh entry, replacing any existing one."""
        ttl = self.default_ttl if ttl is None else ttl
        self._store[key] = (value, self._clock() + ttl)

    def invalidate(self, pattern: str) -> int:
        """Evict every key containing ``pattern``; returns how many were evicted."""
        doomed = [key for key in self._store if pattern in key]
        for key in doomed:
            del self._store[key]
        if doomed:
            logger.debug(f"Invalidated {len(doomed)} cache entries matching '{pattern}'")
        return len(doomed)

    def clear(self) -> None:
        self._store.clear()

    @property
    def size(self) -> int:
        return len(self._store)

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: object) -> bool:
        return key in self._store
