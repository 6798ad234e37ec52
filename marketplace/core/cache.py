"""
Small in-process TTL cache for read-heavy listing queries.

Instances are injected into the services that use them (see
ContractorService) so tests can swap or clear them.
"""
import json
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass
class CacheEntry:
    value: Any
    timestamp: float


class TTLCache:
    """
    key -> (value, timestamp) with a fixed time-to-live.

    Expired entries are dropped on read. When the cache grows past
    `max_entries`, the oldest inserted entry is evicted.
    """

    def __init__(
        self,
        ttl_seconds: float,
        max_entries: int = 50,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.timestamp >= self.ttl_seconds:
            del self._entries[key]
            return None
        return entry.value

    def set(self, key: str, value: Any) -> None:
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(value=value, timestamp=self._clock())
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    @staticmethod
    def make_key(namespace: str, **params: Any) -> str:
        """
        Build a stable key from query parameters.

        List values are sorted so ["b", "a"] and ["a", "b"] share an entry.
        """
        stable = {
            name: sorted(value) if isinstance(value, (list, tuple, set)) else value
            for name, value in params.items()
        }
        return f"{namespace}:{json.dumps(stable, sort_keys=True, default=str)}"
