"""Time-to-live result cache."""

import time
from collections.abc import Callable
from threading import Lock
from typing import Any

from loguru import logger

from .base import CacheStrategy

DEFAULT_TTL_SECONDS = 600


class ResultCache(CacheStrategy):
    """Thread-safe TTL cache for whole pipeline results.

    An entry is fresh while ``now - stored_at < ttl``. Stale entries read as
    misses but stay in place until the next ``put`` overwrites them.
    """

    def __init__(self, ttl: float = DEFAULT_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, tuple[Any, float]] = {}
        self._lock = Lock()

    async def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None

        value, stored_at = entry
        age = self._clock() - stored_at
        if age >= self.ttl:
            logger.bind(cache_key=key, age_seconds=round(age, 1)).debug("Cache entry stale")
            return None
        return value

    async def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock())

    async def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    async def get_ttl(self, key: str) -> float | None:
        """获取剩余TTL."""
        with self._lock:
            entry = self._entries.get(key)
        if entry is None:
            return None
        remaining = self.ttl - (self._clock() - entry[1])
        return remaining if remaining > 0 else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
