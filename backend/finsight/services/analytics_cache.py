"""In-memory cache of analytics results.

Entries are keyed by (user id, period) and stay fresh for a fixed TTL.
Results computed from an empty transaction set get a shorter TTL so that
freshly recorded transactions show up quickly. A stale entry is never served
again; it lingers until it is overwritten by a recompute or removed by the
periodic sweep.

One instance is created per process and handed to request handlers; the
clock is injectable so TTL behaviour can be tested without sleeping.
"""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

import structlog

from finsight.schemas.analytics import AnalyticsResult, Period

logger = structlog.get_logger()

DEFAULT_TTL_SECONDS = 300.0
DEFAULT_EMPTY_TTL_SECONDS = 60.0
DEFAULT_SWEEP_INTERVAL_SECONDS = 600.0

CacheKey = tuple[str, Period]


@dataclass(frozen=True)
class CacheEntry:
    result: AnalyticsResult
    stored_at: float
    ttl: float

    def age(self, now: float) -> float:
        return now - self.stored_at

    def is_fresh(self, now: float) -> bool:
        return self.age(now) < self.ttl


class AnalyticsCache:
    def __init__(
        self,
        ttl: float = DEFAULT_TTL_SECONDS,
        empty_ttl: float = DEFAULT_EMPTY_TTL_SECONDS,
        sweep_interval: float = DEFAULT_SWEEP_INTERVAL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self.empty_ttl = empty_ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._entries: dict[CacheKey, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self._entries

    # ── Lookup / fill ──────────────────────────────────

    def get(self, user_id: str, period: Period) -> CacheEntry | None:
        """Return the entry for this key if it is still fresh."""
        entry = self._entries.get((user_id, period))
        if entry is None or not entry.is_fresh(self._clock()):
            return None
        return entry

    def put(self, user_id: str, period: Period, result: AnalyticsResult) -> CacheEntry:
        """Store a freshly computed result, replacing any previous entry."""
        entry = CacheEntry(
            result=result,
            stored_at=self._clock(),
            ttl=self.ttl_for(result),
        )
        self._entries[(user_id, period)] = entry
        return entry

    def ttl_for(self, result: AnalyticsResult) -> float:
        return self.empty_ttl if result.is_empty else self.ttl

    # ── Eviction ───────────────────────────────────────

    def sweep(self) -> int:
        """Drop every stale entry. Returns the number removed."""
        now = self._clock()
        stale = [key for key, entry in self._entries.items() if not entry.is_fresh(now)]
        for key in stale:
            self._entries.pop(key, None)
        return len(stale)

    def invalidate(self, user_id: str) -> int:
        """Drop all entries of one user, whatever their age."""
        keys = [key for key in self._entries if key[0] == user_id]
        for key in keys:
            self._entries.pop(key, None)
        return len(keys)

    def clear(self) -> None:
        self._entries.clear()

    async def run_sweeper(self) -> None:
        """Sweep on a fixed interval until cancelled."""
        logger.info("analytics_cache_sweeper_started", interval_seconds=self.sweep_interval)
        while True:
            await asyncio.sleep(self.sweep_interval)
            removed = self.sweep()
            logger.info("analytics_cache_swept", removed=removed, remaining=len(self))
