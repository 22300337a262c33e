"""
Time-to-live cache for price and metadata lookups.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Generic, TypeVar

T = TypeVar("T")


class _Missing:
    """Sentinel for 'no entry'. A cached None is a real value."""

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    expires_at: float


class TTLCache(Generic[T]):
    """
    Key to value mapping with per-entry expiry checked on read.

    Entries are never refreshed in place; set() always replaces.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: Dict[str, CacheEntry[T]] = {}
        self._clock = clock

    def get(self, key: str) -> Any:
        """
        Get a live value.

        Returns:
            The cached value (possibly None), or MISSING if absent or expired
        """
        entry = self._entries.get(key)
        if entry is None:
            return MISSING
        if entry.expires_at <= self._clock():
            del self._entries[key]
            return MISSING
        return entry.value

    def set(self, key: str, value: T, ttl_seconds: float) -> None:
        self._entries[key] = CacheEntry(value=value, expires_at=self._clock() + ttl_seconds)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not MISSING

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
