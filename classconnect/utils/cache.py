"""Timestamp-gated in-process cache for fetched records."""

import logging
import time
from typing import Any, Dict, Optional

log = logging.getLogger(__name__)

DEFAULT_TTL = 300  # seconds


def is_fresh(cached_at: float, now: Optional[float] = None, ttl: float = DEFAULT_TTL) -> bool:
    """True while less than `ttl` seconds have passed since `cached_at`."""
    if now is None:
        now = time.time()
    return now - cached_at < ttl


class RecordCache:
    """Keyed records stamped with their capture time.

    Stale or missing entries read as ``None``; the caller refetches and
    calls :meth:`set` again.
    """

    def __init__(self, ttl: float = DEFAULT_TTL):
        self.ttl = ttl
        self._entries: Dict[str, Dict[str, Any]] = {}

    def get(self, key: str, now: Optional[float] = None) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if not is_fresh(entry["cached_at"], now=now, ttl=self.ttl):
            log.debug("Cache entry '%s' is stale", key)
            self._entries.pop(key, None)
            return None
        return entry["data"]

    def set(self, key: str, data: Any, now: Optional[float] = None) -> None:
        self._entries[key] = {
            "data": data,
            "cached_at": time.time() if now is None else now,
        }

    def clear(self) -> None:
        self._entries.clear()
