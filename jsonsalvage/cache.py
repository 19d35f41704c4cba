"""
Time-expiring cache for successfully parsed results.

The repair pipeline itself never caches. Callers that want to skip repeat
work for identical source text own a ResultCache and pass it in; only final,
successfully parsed objects should be stored.
"""

from collections import OrderedDict
from dataclasses import dataclass
import hashlib
import logging
import time
from typing import Any, Callable, Dict, Optional

from .constants import DEFAULT_CACHE_MAX_ENTRIES, DEFAULT_CACHE_TTL

log = logging.getLogger(__name__)


def cache_key(text: str) -> str:
    """SHA-256 hex digest of the source text"""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


@dataclass
class CacheEntry:
    """A cached value and the moment it stops being valid"""

    value: Any
    created_at: float
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class CacheMetrics:
    """Cache usage counters"""

    hits: int = 0
    misses: int = 0
    expirations: int = 0
    evictions: int = 0

    @property
    def hit_ratio(self) -> float:
        lookups = self.hits + self.misses
        if lookups == 0:
            return 0.0
        return self.hits / lookups

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "expirations": self.expirations,
            "evictions": self.evictions,
            "hit_ratio": self.hit_ratio,
        }


class ResultCache:
    """Key -> (value, expiry) store with a size cap.

    When full, the oldest inserted entry is evicted first.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_CACHE_TTL,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self.metrics = CacheMetrics()

    @classmethod
    def from_settings(cls, settings) -> "ResultCache":
        return cls(
            ttl_seconds=settings.cache_ttl_seconds,
            max_entries=settings.cache_max_entries,
        )

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not entry.is_expired(self._clock())

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, dropping it first if it has expired"""
        entry = self._entries.get(key)
        if entry is None:
            self.metrics.misses += 1
            return None

        now = self._clock()
        if entry.is_expired(now):
            del self._entries[key]
            self.metrics.expirations += 1
            self.metrics.misses += 1
            log.debug("Cache expired for key %s...", key[:16])
            return None

        self.metrics.hits += 1
        log.debug(
            "Cache hit for key %s... (age %.0fs)", key[:16], now - entry.created_at
        )
        return entry.value

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None) -> None:
        now = self._clock()
        ttl = ttl_seconds if ttl_seconds is not None else self.ttl_seconds
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(value=value, created_at=now, expires_at=now + ttl)

        while len(self._entries) > self.max_entries:
            oldest, _ = self._entries.popitem(last=False)
            self.metrics.evictions += 1
            log.debug("Cache limit reached, evicted key %s...", oldest[:16])

    def invalidate(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def purge_expired(self) -> int:
        """Remove every expired entry and return how many were dropped"""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
        for key in expired:
            del self._entries[key]
        self.metrics.expirations += len(expired)
        return len(expired)

    def clear(self) -> None:
        self._entries.clear()
