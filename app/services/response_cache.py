import copy
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Dict[str, Any]
    stored_at: float


class ResponseCache:
    """In-memory memoization of validated upstream responses.

    Entries are keyed by the caller's logical request identity. Expiry is
    decided by the reader through `is_expired`; stale entries are not swept,
    they are overwritten by the next fetch or pushed out by the LRU bound.
    Process lifetime only.
    """

    def __init__(self, max_entries: int = 500, clock: Callable[[], float] = time.time):
        self.max_entries = max_entries
        self.clock = clock
        self._store: "OrderedDict[str, CacheEntry]" = OrderedDict()

    def get(self, key: str) -> Optional[CacheEntry]:
        entry = self._store.get(key)
        if entry is not None:
            self._store.move_to_end(key)
        return entry

    def put(self, key: str, payload: Dict[str, Any]) -> CacheEntry:
        entry = CacheEntry(key=key, payload=copy.deepcopy(payload), stored_at=self.clock())
        self._store[key] = entry
        self._store.move_to_end(key)
        while len(self._store) > self.max_entries:
            self._store.popitem(last=False)
        return entry

    def is_expired(self, entry: CacheEntry, ttl: float) -> bool:
        return self.clock() - entry.stored_at > ttl

    def clear(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        return key in self._store
