"""In-process cache store."""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

from .base import CacheStore

logger = logging.getLogger(__name__)


class MemoryCache(CacheStore):
    """Dict-backed cache; expired entries are dropped when read."""

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """Initialize memory cache.

        Args:
            clock: Monotonic time source in seconds
        """
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, Optional[float]]] = {}

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None

        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            logger.debug(f"Cache entry {key} expired")
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        expires_at = self._clock() + ttl_seconds if ttl_seconds > 0 else None
        self._entries[key] = (value, expires_at)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def __len__(self) -> int:
        return len(self._entries)
