"""
In-process TTL cache for special date lookups.

One instance is shared by the availability and schedule services of an
app; there is no module-level state. Entries are an optimization only,
a miss always falls back to the repository.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, Hashable, Optional, Tuple

from clinic_booking.domain.interfaces import ISpecialDateCache

logger = logging.getLogger(__name__)

_MISSING = object()


class SpecialDateCache(ISpecialDateCache):
    """Thread-safe key/value cache with a fixed time-to-live.

    Keys are ``(doctor_id, date)`` tuples so a doctor's entries can be
    dropped together when an admin edits special dates.
    """

    def __init__(
        self,
        ttl_seconds: float = 300,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock or time.monotonic
        self._entries: Dict[Hashable, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self.ttl_seconds > 0

    def get(self, key: Hashable) -> Tuple[bool, Any]:
        if not self.enabled:
            return False, None
        with self._lock:
            entry = self._entries.get(key, _MISSING)
            if entry is _MISSING:
                return False, None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return False, None
            return True, value

    def set(self, key: Hashable, value: Any) -> None:
        if not self.enabled:
            return
        with self._lock:
            self._entries[key] = (self._clock() + self.ttl_seconds, value)

    def invalidate(self, doctor_id: Optional[str] = None) -> None:
        with self._lock:
            if doctor_id is None:
                self._entries.clear()
                return
            stale = [
                key
                for key in self._entries
                if isinstance(key, tuple) and key and key[0] == doctor_id
            ]
            for key in stale:
                del self._entries[key]
        logger.debug(
            "Special date cache invalidated",
            extra={"context": {"doctor_id": doctor_id, "dropped": len(stale)}},
        )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
