"""
Travel Booking API - In-Memory Cache
=====================================

Process-local cache used by the services for read-through lookups.

Each entry has an absolute deadline and a sliding window; it is dropped at
whichever comes first. Reads renew the sliding window. Writes in the services
remove the affected keys ("clear on write").
"""

import threading
import time
from typing import Any, Dict, Optional, Tuple

from logging_config import get_logger

logger = get_logger(__name__)

# (value, absolute_deadline, sliding_seconds, sliding_deadline)
_Entry = Tuple[Any, float, float, float]


class MemoryCache:
    """Thread-safe key/value cache with absolute and sliding expiration."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value or None if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None

            value, absolute_deadline, sliding_seconds, sliding_deadline = entry
            now = self._clock()
            if now >= absolute_deadline or now >= sliding_deadline:
                del self._entries[key]
                logger.debug(f"Cache entry expired: {key}")
                return None

            self._entries[key] = (value, absolute_deadline, sliding_seconds, now + sliding_seconds)
            return value

    def set(self, key: str, value: Any, absolute_minutes: float, sliding_minutes: float) -> None:
        """Store ``value`` under ``key``."""
        now = self._clock()
        sliding_seconds = sliding_minutes * 60
        with self._lock:
            self._entries[key] = (value, now + absolute_minutes * 60, sliding_seconds, now + sliding_seconds)

    def remove(self, *keys: str) -> None:
        """Drop the given keys; unknown keys are ignored."""
        with self._lock:
            for key in keys:
                self._entries.pop(key, None)

    def remove_prefix(self, prefix: str) -> None:
        """Drop every key starting with ``prefix``."""
        with self._lock:
            for key in [k for k in self._entries if k.startswith(prefix)]:
                del self._entries[key]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


# Shared instance used by every service
cache = MemoryCache()
