"""Cache store implementations for fetched key sets.

This module provides implementations of the KeySetCache protocol. A cache sits
in front of the key-set fetcher so that verifying a token does not cost a
network round-trip. It is owned by the hosting application (usually the
middleware) and shared across concurrent requests.

Implementations:
- InMemoryCache: In-process caching (good for dev/single-instance)
- RedisCache: Distributed caching via Redis (good for multi-instance production)

Both implementations support a default expiration applied when ``set`` is
called without an explicit TTL.

Security Note:
    Caching keys introduces a TTL window where rotated keys may not be
    immediately recognized. Balance cache TTL against key rotation frequency.
"""

from __future__ import annotations

import json
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Final

from .key_set import KeySet

DEFAULT_TTL_SECONDS: Final[float] = 300
"""Default expiration for cached key sets in seconds."""


@dataclass(slots=True)
class _CacheItem:
    """Internal cache entry with TTL tracking."""

    value: KeySet
    expires_at: float


class InMemoryCache:
    """Thread-safe in-process cache for key sets.

    Expired entries are removed lazily on access, and all of them are swept
    out on the first ``set`` after each sweep interval, so keys that are never
    read again (e.g. derived from unknown ``kid`` values) do not accumulate.

    Example:
        ```python
        cache = InMemoryCache(default_ttl_seconds=600)

        cache.set("jwks_tenant.example_key-1", key_set)        # default expiration
        cache.set("jwks_tenant.example_key-2", key_set, 60)    # explicit TTL

        cache.get("jwks_tenant.example_key-1")  # KeySet or None
        ```

    Args:
        default_ttl_seconds: TTL applied when ``set`` is called without one.
        sweep_interval_seconds: Minimum time between full sweeps of expired
            entries. Defaults to ``default_ttl_seconds``.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        default_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        sweep_interval_seconds: float | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if default_ttl_seconds <= 0:
            raise ValueError(f"default_ttl_seconds must be positive, got {default_ttl_seconds}")
        if sweep_interval_seconds is not None and sweep_interval_seconds <= 0:
            raise ValueError(f"sweep_interval_seconds must be positive, got {sweep_interval_seconds}")
        self._default_ttl = default_ttl_seconds
        self._sweep_interval = sweep_interval_seconds or default_ttl_seconds
        self._clock = clock
        self._next_sweep_at = clock() + self._sweep_interval
        self._lock = threading.Lock()
        self._store: dict[str, _CacheItem] = {}

    def get(self, key: str) -> KeySet | None:
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return None

            if self._clock() >= item.expires_at:
                # Lazy removal of expired entry
                del self._store[key]
                return None

            return item.value

    def set(self, key: str, key_set: KeySet, ttl_seconds: float | None = None) -> None:
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        with self._lock:
            now = self._clock()
            if now >= self._next_sweep_at:
                self._purge_expired(now)
                self._next_sweep_at = now + self._sweep_interval
            self._store[key] = _CacheItem(value=key_set, expires_at=now + ttl)

    def purge_expired(self) -> int:
        """Remove every expired entry now; returns how many were removed."""
        with self._lock:
            return self._purge_expired(self._clock())

    def _purge_expired(self, now: float) -> int:
        # caller holds the lock
        expired = [k for k, item in self._store.items() if now >= item.expires_at]
        for k in expired:
            del self._store[k]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            now = self._clock()
            return sum(1 for item in self._store.values() if now < item.expires_at)


class RedisCache:
    """Redis-backed distributed cache for key sets.

    Key sets are stored as their JSON document; Redis's native TTL handles
    expiration.

    Args:
        redis_client: Any Redis-compatible client (redis-py, fakeredis, ...)
            supporting ``get`` and ``setex``.
        default_ttl_seconds: TTL applied when ``set`` is called without one.
        prefix: Namespace prepended to every key.
    """

    def __init__(
        self,
        redis_client: Any,
        default_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        prefix: str = "",
    ) -> None:
        self._client = redis_client
        self._default_ttl = default_ttl_seconds
        self._prefix = prefix

    def get(self, key: str) -> KeySet | None:
        """Retrieve a cached key set.

        Raises:
            RuntimeError: If the cached payload cannot be deserialized.
        """
        data = self._client.get(self._prefix + key)
        if data is None:
            return None

        try:
            return KeySet.from_dict(json.loads(data))
        except (json.JSONDecodeError, ValueError, TypeError) as e:
            raise RuntimeError("Failed to deserialize cached key set") from e

    def set(self, key: str, key_set: KeySet, ttl_seconds: float | None = None) -> None:
        """Cache a key set.

        Raises:
            RuntimeError: If the Redis operation fails.
        """
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        try:
            # setex only accepts whole seconds
            self._client.setex(
                self._prefix + key,
                max(1, int(ttl)),
                json.dumps(key_set.to_dict()),
            )
        except Exception as e:
            raise RuntimeError("Failed to cache key set in Redis") from e
