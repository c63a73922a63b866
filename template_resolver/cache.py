"""TTL cache for resolved variables.

Entries are keyed by variable name plus a canonical fingerprint of the
context fields the owning resolver reads. Expired entries are treated as
absent and evicted lazily on read, or in bulk via clear_expired().

The cache is only touched from the event loop, so no locking is done.
"""

import json
import logging
import time
from collections.abc import Callable, Mapping
from typing import Any

from core import CachedVariable, ResolvedVariable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 5 * 60

# Per-family TTLs (seconds)
CACHE_TTL_INSTITUTE = 10 * 60
CACHE_TTL_COURSE = 15 * 60
CACHE_TTL_BATCH = 10 * 60
CACHE_TTL_ATTENDANCE = 5 * 60
CACHE_TTL_STUDENT = 5 * 60
CACHE_TTL_LIVE_CLASS = 5 * 60
CACHE_TTL_REFERRAL = 10 * 60


def make_cache_key(variable_name: str, scope: Mapping[str, Any] | None = None) -> str:
    """Build a cache key from a variable name and a resolver's cache scope.

    The scope is serialized as sorted (field, value) pairs, so two contexts
    that agree on those fields share an entry regardless of how they were
    built.
    """
    pairs = sorted((scope or {}).items())
    return f"{variable_name}:{json.dumps(pairs, sort_keys=True, default=str)}"


class VariableCache:
    """In-memory TTL store of ResolvedVariable entries.

    Usage:
        cache = VariableCache()
        cache.set(key, resolved, ttl=600)
        entry = cache.get(key)
        if entry:
            value = entry.variable.value
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CachedVariable] = {}
        self._hits = 0
        self._misses = 0

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    def get(self, key: str) -> CachedVariable | None:
        """Get a live entry, evicting it if it has expired."""
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None

        if self._clock() >= entry.expires_at:
            del self._entries[key]
            self._misses += 1
            logger.debug("[CACHE] Expired: %s", key)
            return None

        self._hits += 1
        return entry

    def set(self, key: str, variable: ResolvedVariable, ttl: float | None = None) -> None:
        """Store a variable for ttl seconds (default TTL when None)."""
        ttl = self._default_ttl if ttl is None else ttl
        self._entries[key] = CachedVariable(
            variable=variable,
            expires_at=self._clock() + ttl,
        )

    def has(self, key: str) -> bool:
        return self.get(key) is not None

    def delete(self, key: str) -> bool:
        """Remove a single entry. Returns True if it existed."""
        return self._entries.pop(key, None) is not None

    def clear_expired(self) -> int:
        """Remove every expired entry. Returns the number removed."""
        now = self._clock()
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]
        if expired:
            logger.debug("[CACHE] Swept %d expired entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        """Remove everything."""
        self._entries.clear()
        logger.debug("[CACHE] Cleared")

    def stats(self) -> dict:
        return {
            "entries": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "default_ttl_seconds": self._default_ttl,
        }

    def __len__(self) -> int:
        return len(self._entries)
