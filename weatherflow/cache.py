import logging
import threading
from typing import Dict, Optional

from .keys import normalize_key
from .models import CacheEntry, WeatherRecord

logger = logging.getLogger(__name__)


class TtlCache:
    """One entry per normalized key; an entry expires once ``now - cached_at >= ttl``.

    The caller passes ``now`` in, so the cache itself never reads a clock.
    """

    def __init__(self, ttl_seconds: int = 300):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._store: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def is_fresh(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.cached_at < self.ttl_seconds

    def get(self, key: str, now: float) -> Optional[CacheEntry]:
        key = normalize_key(key)
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                return None
            if not self.is_fresh(entry, now):
                del self._store[key]
                logger.debug("Cache entry for %s expired (age %.1fs)", key, now - entry.cached_at)
                return None
            return entry

    def put(self, key: str, record: WeatherRecord, now: float) -> CacheEntry:
        key = normalize_key(key)
        entry = CacheEntry(key=key, record=record, cached_at=now)
        with self._lock:
            self._store[key] = entry
        return entry

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._store.pop(normalize_key(key), None) is not None

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def purge_expired(self, now: float) -> int:
        with self._lock:
            stale = [k for k, e in self._store.items() if not self.is_fresh(e, now)]
            for k in stale:
                del self._store[k]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
