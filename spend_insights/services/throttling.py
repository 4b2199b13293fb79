"""Per-user fixed-window rate limiting and TTL result caching (process-local)"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Dict, Hashable, Optional

Clock = Callable[[], float]


@dataclass
class RateLimitEntry:
    """Request count for the window ending at window_reset_at"""

    count: int
    window_reset_at: float


class RateLimiter:
    """
    Fixed-window counter per user.

    Each user may make ``max_requests`` calls per ``window_seconds``; the
    window restarts on the first call after it lapses. Lapsed entries are
    swept once more than ``max_tracked_users`` users are tracked.

    State is per process. Multiple instances each enforce their own limit.
    """

    def __init__(
        self,
        max_requests: int = 10,
        window_seconds: float = 3600.0,
        max_tracked_users: int = 10_000,
        clock: Clock = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.max_tracked_users = max_tracked_users
        self._clock = clock
        self._entries: Dict[str, RateLimitEntry] = {}

    def admit(self, user_id: str) -> bool:
        """Count a request and report whether it is within the limit"""
        now = self._clock()
        entry = self._entries.get(user_id)

        if entry is None:
            entry = RateLimitEntry(count=0, window_reset_at=now + self.window_seconds)
            self._entries[user_id] = entry
            if len(self._entries) > self.max_tracked_users:
                self.sweep()
        elif now > entry.window_reset_at:
            entry.count = 0
            entry.window_reset_at = now + self.window_seconds

        entry.count += 1
        return entry.count <= self.max_requests

    def retry_after(self, user_id: str) -> float:
        """Seconds until the user's current window resets"""
        entry = self._entries.get(user_id)
        if entry is None:
            return 0.0
        return max(0.0, entry.window_reset_at - self._clock())

    def sweep(self) -> int:
        """Drop entries whose window has lapsed; returns how many were dropped"""
        now = self._clock()
        expired = [uid for uid, entry in self._entries.items() if now > entry.window_reset_at]
        for uid in expired:
            del self._entries[uid]
        return len(expired)

    def __len__(self) -> int:
        return len(self._entries)


@dataclass
class CacheEntry:
    """Cached payload valid while now < expires_at"""

    payload: Any
    expires_at: float


class ResultCache:
    """
    Size-bounded LRU cache with per-entry TTL.

    Expired entries read as misses and are dropped. Inserting at capacity
    purges expired entries first, then evicts the least recently used.
    """

    def __init__(
        self,
        max_entries: int = 1024,
        default_ttl: float = 600.0,
        clock: Clock = time.monotonic,
    ):
        self.max_entries = max_entries
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: "OrderedDict[Hashable, CacheEntry]" = OrderedDict()

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the payload if present and unexpired, else None"""
        entry = self._entries.get(key)
        if entry is None:
            return None

        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None

        self._entries.move_to_end(key)
        return entry.payload

    def put(self, key: Hashable, payload: Any, ttl: float | None = None) -> None:
        """Store payload until now + ttl, overwriting any previous entry"""
        now = self._clock()
        ttl = self.default_ttl if ttl is None else ttl

        if key in self._entries:
            del self._entries[key]
        elif len(self._entries) >= self.max_entries:
            self._purge_expired(now)
            while len(self._entries) >= self.max_entries:
                self._entries.popitem(last=False)

        self._entries[key] = CacheEntry(payload=payload, expires_at=now + ttl)

    def _purge_expired(self, now: float) -> None:
        expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
        for key in expired:
            del self._entries[key]

    def __len__(self) -> int:
        return len(self._entries)
