"""Base class for cache stores."""

from abc import ABC, abstractmethod
from typing import Any, Optional


class CacheStore(ABC):
    """Key-value store with a per-entry time to live."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """Get a cached value.

        Args:
            key: Cache key

        Returns:
            Stored value, or None on a miss or after expiry
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        """Store a value.

        Args:
            key: Cache key
            value: Value to store
            ttl_seconds: Lifetime in seconds (<= 0 keeps it until deleted)
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a value if present."""
        pass
