"""
Bounded LRU cache with time-to-live for evaluation results.

Entries are keyed by a canonical hash of the evaluation request. Eviction
policy: an entry older than ``ttl`` seconds is dropped on access; when the
cache is full the least recently used entry is dropped on insert.
"""

import hashlib
import json
import threading
import time
from collections import OrderedDict
from decimal import Decimal
from typing import Any, Callable, Optional

from options_risk.utils.constants import DEFAULT_CACHE_SIZE, DEFAULT_CACHE_TTL


def _canonical(value: Any) -> str:
    if isinstance(value, Decimal):
        return str(value.normalize()) if value.is_finite() else str(value)
    return str(value)


def cache_key(payload: Any) -> str:
    """
    Hash a JSON-compatible request payload into a cache key.

    Keys are sorted and Decimals normalized, so equal requests map to the
    same key regardless of dict ordering or trailing zeros.
    """
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":"), default=_canonical)
    return hashlib.sha256(encoded.encode("utf-8")).hexdigest()


class CalculationCache:
    """
    Thread-safe LRU cache whose entries expire after ``ttl`` seconds.

    Args:
        max_size: Maximum number of entries kept
        ttl: Entry lifetime in seconds
        clock: Monotonic time source, injectable for tests
    """

    def __init__(
        self,
        max_size: int = DEFAULT_CACHE_SIZE,
        ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_size < 1:
            raise ValueError(f"Cache size must be positive, got {max_size}")
        if ttl <= 0:
            raise ValueError(f"Cache TTL must be positive, got {ttl}")
        self.max_size = max_size
        self.ttl = ttl
        self._clock = clock
        self._entries: "OrderedDict[str, tuple]" = OrderedDict()
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when absent or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            value, stored_at = entry
            if self._clock() - stored_at > self.ttl:
                del self._entries[key]
                return None

            self._entries.move_to_end(key)
            return value

    def set(self, key: str, value: Any) -> None:
        """Store a value, evicting the least recently used entry when full."""
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            self._entries[key] = (value, self._clock())
            while len(self._entries) > self.max_size:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
