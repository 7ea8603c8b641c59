"""
Per-builder cache of decoded related records.
"""

import time
from typing import Any, Callable, Dict, Optional, Tuple

DEFAULT_TTL_SECONDS = 5 * 60


class RelationCache:
    """
    Maps record id -> (decoded value, fetch time).

    Entries go stale after ``ttl`` seconds and are checked lazily on read;
    nothing is evicted.
    """

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}

    def get(self, record_id: str) -> Optional[Any]:
        """Return the cached value, or None if absent or stale."""
        entry = self._entries.get(record_id)
        if entry is None:
            return None
        value, fetched_at = entry
        if self._clock() - fetched_at >= self.ttl:
            return None
        return value

    def set(self, record_id: str, value: Any) -> None:
        self._entries[record_id] = (value, self._clock())

    def __contains__(self, record_id: str) -> bool:
        return self.get(record_id) is not None

    def __len__(self) -> int:
        return len(self._entries)
