"""
In-memory result cache.

Two namespaces share one interface:

- models: normalized ``ParsedGrammar`` results (long TTL)
- documents: built engine documents for string parses (short TTL)

Key structure::

    grammar:{abs_path}:{mtime_ns}-{size}[:validated]
    content:{uri}:{sha256_prefix}[:validated]

A changed source produces a new key, so stale results are never returned
even before their TTL expires. Concurrent callers may both miss and both
store a result; the last write wins.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, Protocol, TypeVar

from .config import CacheSettings

logger = logging.getLogger(__name__)

T = TypeVar("T")

Clock = Callable[[], float]


def model_key(path: str, fingerprint: str, validated: bool = False) -> str:
    key = f"grammar:{path}:{fingerprint}"
    return f"{key}:validated" if validated else key


def content_key(uri: str, fingerprint: str, validated: bool = False) -> str:
    key = f"content:{uri}:{fingerprint}"
    return f"{key}:validated" if validated else key


@dataclass
class CacheEntry(Generic[T]):
    value: T
    expires_at: float
    hits: int = 0


@dataclass(frozen=True)
class CacheStats:
    models: int
    documents: int
    hits: int
    misses: int


class GrammarCache(Protocol):
    """Interface the parser needs from a cache."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any, ttl: float | None = None) -> None: ...

    def get_document(self, key: str) -> Any | None: ...

    def set_document(self, key: str, value: Any, ttl: float | None = None) -> None: ...

    def invalidate(self, key: str) -> None: ...

    def invalidate_prefix(self, prefix: str) -> int: ...

    def clear(self) -> None: ...


class TTLCache(Generic[T]):
    """
    Thread-safe dictionary with per-entry expiry and a size limit.

    When full, expired entries are dropped first; if still full, the entry
    with the fewest hits is evicted.

    Args:
        default_ttl: Seconds an entry lives unless ``set`` is given a ttl
        max_entries: Maximum number of live entries
        clock: Time source in seconds (default: ``time.monotonic``)
    """

    def __init__(
        self,
        default_ttl: float,
        max_entries: int = 50,
        clock: Clock = time.monotonic,
    ) -> None:
        self.default_ttl = default_ttl
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: str) -> T | None:
        """Return the cached value, or ``None`` on miss or expiry."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            if entry.expires_at <= self._clock():
                del self._entries[key]
                self.misses += 1
                return None
            entry.hits += 1
            self.hits += 1
            return entry.value

    def set(self, key: str, value: T, ttl: float | None = None) -> None:
        """Store a value, replacing any existing entry for ``key``."""
        lifetime = self.default_ttl if ttl is None else ttl
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_entries:
                self._evict()
            self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + lifetime)

    def invalidate(self, key: str) -> bool:
        """Remove ``key``. Returns True if it was present."""
        with self._lock:
            return self._entries.pop(key, None) is not None

    def invalidate_prefix(self, prefix: str) -> int:
        """Remove every key starting with ``prefix``. Returns the count removed."""
        with self._lock:
            doomed = [k for k in self._entries if k.startswith(prefix)]
            for k in doomed:
                del self._entries[k]
            return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            entry = self._entries.get(key)
            return entry is not None and entry.expires_at > self._clock()

    def _evict(self) -> None:
        # Caller holds the lock
        now = self._clock()
        expired = [k for k, e in self._entries.items() if e.expires_at <= now]
        for k in expired:
            del self._entries[k]
        while self._entries and len(self._entries) >= self.max_entries:
            coldest = min(self._entries, key=lambda k: self._entries[k].hits)
            logger.debug(f"Cache full, evicting {coldest}")
            del self._entries[coldest]


class ResultCache:
    """
    Model and document caches behind one object.

    Args:
        settings: TTLs and size limit (default: CacheSettings())
        clock: Time source shared by both namespaces
    """

    def __init__(
        self, settings: CacheSettings | None = None, clock: Clock = time.monotonic
    ) -> None:
        settings = settings or CacheSettings()
        self.models: TTLCache[Any] = TTLCache(settings.model_ttl, settings.max_entries, clock)
        self.documents: TTLCache[Any] = TTLCache(
            settings.document_ttl, settings.max_entries, clock
        )

    def get(self, key: str) -> Any | None:
        value = self.models.get(key)
        logger.debug(f"Model cache {'hit' if value is not None else 'miss'}: {key}")
        return value

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        self.models.set(key, value, ttl)

    def get_document(self, key: str) -> Any | None:
        value = self.documents.get(key)
        logger.debug(f"Document cache {'hit' if value is not None else 'miss'}: {key}")
        return value

    def set_document(self, key: str, value: Any, ttl: float | None = None) -> None:
        self.documents.set(key, value, ttl)

    def invalidate(self, key: str) -> None:
        """Drop ``key`` from both namespaces."""
        self.models.invalidate(key)
        self.documents.invalidate(key)

    def invalidate_prefix(self, prefix: str) -> int:
        return self.models.invalidate_prefix(prefix) + self.documents.invalidate_prefix(prefix)

    def clear(self) -> None:
        self.models.clear()
        self.documents.clear()

    def stats(self) -> CacheStats:
        return CacheStats(
            models=len(self.models),
            documents=len(self.documents),
            hits=self.models.hits + self.documents.hits,
            misses=self.models.misses + self.documents.misses,
        )


class NullCache:
    """Cache that stores nothing. Parsing with it gives the same results."""

    def get(self, key: str) -> None:
        return None

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        pass

    def get_document(self, key: str) -> None:
        return None

    def set_document(self, key: str, value: Any, ttl: float | None = None) -> None:
        pass

    def invalidate(self, key: str) -> None:
        pass

    def invalidate_prefix(self, prefix: str) -> int:
        return 0

    def clear(self) -> None:
        pass
