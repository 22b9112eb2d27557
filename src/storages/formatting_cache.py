# -*- coding: utf-8 -*-
"""In-memory memoization cache for text formatting results."""

import asyncio
import copy
import functools
import json
import time
from typing import Any, Callable, TypeVar

from pydantic import BaseModel

from src.utils.logger import get_logger

T = TypeVar("T")

BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
EVICTION_RATIO = 0.25


class CacheEntry(BaseModel):
    result: Any = None
    timestamp: float
    access_count: int = 1


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def hash_string(text: str) -> str:
    """Fast non-cryptographic hash of a string.

    Rolling ``h * 31 + code`` over code points, wrapped to a signed 32-bit
    integer, absolute value, base 36.

    Args:
        text: String to hash.

    Returns:
        Base-36 hash string.
    """
    h = 0
    for char in text:
        h = ((h << 5) - h + ord(char)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return _to_base36(abs(h))


class FormattingCache:
    """Bounded TTL cache with oldest-first eviction and hit metrics.

    Entries expire ``ttl`` seconds after they were written; reads do not extend
    their lifetime. When a write brings the cache to ``max_size`` entries, the
    oldest quarter (at least one entry) is evicted, ranked by write time and
    then by access count. Values are copied on the way in and on the way out,
    so callers never share mutable state with the cache. The cache is meant
    for a single thread or event loop.
    """

    def __init__(
        self,
        max_size: int = 1000,
        ttl: float = 300,
        cleanup_interval: float = 60,
        enable_metrics: bool = True,
        clock: Callable[[], float] | None = None,
    ):
        """Initialize formatting cache.

        Args:
            max_size: Maximum number of entries.
            ttl: Entry lifetime in seconds.
            cleanup_interval: Seconds between expired-entry sweeps.
            enable_metrics: Track hits, misses and factory timings.
            clock: Time source in seconds, defaults to time.monotonic.
        """
        if max_size < 1:
            raise ValueError("max_size must be at least 1")

        self.max_size = max_size
        self.ttl = ttl
        self.cleanup_interval = cleanup_interval
        self.enable_metrics = enable_metrics
        self.clock = clock or time.monotonic
        self.logger = get_logger(__name__)

        self._entries: dict[str, CacheEntry] = {}
        self._timer: asyncio.TimerHandle | None = None
        self._reset_metrics()

        self.start_cleanup_timer()

    @classmethod
    def from_settings(cls, settings: dict[str, Any] | None = None, **kwargs) -> "FormattingCache":
        """Build a cache from the ``cache`` section of the configuration.

        Args:
            settings: Dictionary with max_size, ttl_seconds,
                cleanup_interval_seconds and enable_metrics.
            **kwargs: Extra constructor arguments (e.g. clock).

        Returns:
            FormattingCache instance.
        """
        settings = settings or {}
        return cls(
            max_size=settings.get("max_size", 1000),
            ttl=settings.get("ttl_seconds", 300),
            cleanup_interval=settings.get("cleanup_interval_seconds", 60),
            enable_metrics=settings.get("enable_metrics", True),
            **kwargs,
        )

    def _reset_metrics(self) -> None:
        self.metrics: dict[str, Any] = {
            "hits": 0,
            "misses": 0,
            "total_operations": 0,
            "average_processing_time": 0.0,
            "last_cleanup": self.clock(),
        }
        self._factory_time_total = 0.0
        self._factory_calls = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not self._is_expired(entry, self.clock())

    def _is_expired(self, entry: CacheEntry, now: float) -> bool:
        return now - entry.timestamp >= self.ttl

    @staticmethod
    def hash_string(text: str) -> str:
        return hash_string(text)

    def generate_key(self, text: str, options: Any = None) -> str:
        """Build a cache key from an input string and its options.

        Args:
            text: Input string.
            options: JSON-serializable options or a pydantic model.

        Returns:
            Key of the form ``{length}_{input hash}_{options hash}``.
        """
        if isinstance(options, BaseModel):
            options = options.model_dump()
        options_json = json.dumps(options or {}, sort_keys=True, separators=(",", ":"), default=str)
        return f"{len(text)}_{hash_string(text)}_{hash_string(options_json)}"

    def get(self, key: str, factory: Callable[[], T]) -> T:
        """Get a cached result or compute and store it.

        Args:
            key: Cache key.
            factory: Zero-argument function producing the value on a miss.

        Returns:
            Cached or freshly computed value.

        Raises:
            Exception: Whatever the factory raises; nothing is cached then.
        """
        now = self.clock()
        if now - self.metrics["last_cleanup"] >= self.cleanup_interval:
            self.cleanup()

        entry = self._entries.get(key)
        if entry is not None:
            if not self._is_expired(entry, now):
                entry.access_count += 1
                if self.enable_metrics:
                    self.metrics["hits"] += 1
                    self.metrics["total_operations"] += 1
                return copy.deepcopy(entry.result)
            del self._entries[key]

        start = time.perf_counter()
        result = factory()
        elapsed_ms = (time.perf_counter() - start) * 1000

        self.set(key, result)

        if self.enable_metrics:
            self.metrics["misses"] += 1
            self.metrics["total_operations"] += 1
            self._factory_calls += 1
            self._factory_time_total += elapsed_ms
            self.metrics["average_processing_time"] = self._factory_time_total / self._factory_calls

        return result

    def set(self, key: str, value: Any) -> None:
        """Store a value, evicting old entries when the cache is full.

        Args:
            key: Cache key.
            value: Value to store.
        """
        self._entries[key] = CacheEntry(result=copy.deepcopy(value), timestamp=self.clock())
        if len(self._entries) >= self.max_size:
            self._evict_oldest(keep=key)

    def _evict_oldest(self, keep: str) -> None:
        candidates = sorted(
            (k for k in self._entries if k != keep),
            key=lambda k: (self._entries[k].timestamp, self._entries[k].access_count),
        )
        to_remove = max(1, int(len(self._entries) * EVICTION_RATIO))
        for k in candidates[:to_remove]:
            del self._entries[k]
        self.logger.debug(f"Evicted {min(to_remove, len(candidates))} cache entries, {len(self._entries)} left")

    def memoize(
        self,
        func: Callable[..., T],
        key_fn: Callable[..., str] | None = None,
    ) -> Callable[..., T]:
        """Wrap a function so its results are cached.

        Args:
            func: Function to memoize.
            key_fn: Builds the cache key from the call arguments. Defaults to
                a key over the JSON form of the arguments.

        Returns:
            Memoized function.
        """

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            if key_fn is not None:
                key = key_fn(*args, **kwargs)
            else:
                key = self.generate_key(
                    json.dumps([args, kwargs], sort_keys=True, default=str),
                    {"fn": func.__qualname__},
                )
            return self.get(key, lambda: func(*args, **kwargs))

        return wrapper

    def cleanup(self) -> int:
        """Remove expired entries.

        Returns:
            Number of entries removed.
        """
        now = self.clock()
        expired = [k for k, entry in self._entries.items() if self._is_expired(entry, now)]
        for k in expired:
            del self._entries[k]
        self.metrics["last_cleanup"] = now
        if expired:
            self.logger.debug(f"Removed {len(expired)} expired cache entries")
        return len(expired)

    def start_cleanup_timer(self) -> bool:
        """Schedule periodic sweeps on the running event loop.

        Without a running loop, sweeps happen on access instead.

        Returns:
            True if a timer is scheduled.
        """
        if self._timer is not None:
            return True
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return False

        def sweep() -> None:
            self._timer = None
            self.cleanup()
            self.start_cleanup_timer()

        self._timer = loop.call_later(self.cleanup_interval, sweep)
        return True

    def stop_cleanup_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def get_metrics(self) -> dict[str, Any]:
        return dict(self.metrics)

    def get_stats(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with size, max_size, hit_rate (0-1) and metrics.
        """
        total = self.metrics["total_operations"]
        return {
            "size": len(self._entries),
            "max_size": self.max_size,
            "hit_rate": self.metrics["hits"] / total if total > 0 else 0,
            "metrics": self.get_metrics(),
        }

    def clear(self) -> None:
        """Remove every entry and reset metrics."""
        self._entries.clear()
        self._reset_metrics()

    def destroy(self) -> None:
        """Stop the cleanup timer and clear the cache."""
        self.stop_cleanup_timer()
        self.clear()
