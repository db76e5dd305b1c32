"""Analytics service: cached analytics per user and period."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

import structlog

from finsight.schemas.analytics import AnalyticsResult, Period
from finsight.services.analytics_cache import AnalyticsCache
from finsight.services.analytics_engine import (
    export_time_series_csv,
    generate_analytics,
    period_window,
)
from finsight.services.transaction_store import TransactionStore
from finsight.utils.clock import utcnow

logger = structlog.get_logger()


class CacheStatus(str, Enum):
    HIT = "HIT"
    MISS = "MISS"
    MISS_EMPTY = "MISS-EMPTY"


@dataclass(frozen=True)
class CachedAnalytics:
    result: AnalyticsResult
    cache_status: CacheStatus
    max_age: int  # seconds, for Cache-Control

    @property
    def cache_control(self) -> str:
        return f"public, max-age={self.max_age}"


class AnalyticsService:
    def __init__(
        self,
        store: TransactionStore,
        cache: AnalyticsCache,
        now: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.cache = cache
        self._now = now

    def get_analytics(self, user_id: str, period: Period | str | None = None) -> CachedAnalytics:
        """Serve analytics from cache when fresh, otherwise recompute and cache.

        A hit returns the stored result object itself, untouched.
        """
        period = Period.parse(period)

        entry = self.cache.get(user_id, period)
        if entry is not None:
            logger.info("analytics_cache_hit", user_id=user_id, period=period.value)
            return CachedAnalytics(entry.result, CacheStatus.HIT, int(entry.ttl))

        now = self._now()
        start, end = period_window(period, now)
        transactions = self.store.list_between(user_id, start, end)
        logger.info(
            "analytics_cache_miss",
            user_id=user_id,
            period=period.value,
            transactions=len(transactions),
        )

        result = generate_analytics(transactions, period, now=now)
        entry = self.cache.put(user_id, period, result)

        status = CacheStatus.MISS_EMPTY if result.is_empty else CacheStatus.MISS
        return CachedAnalytics(result, status, int(entry.ttl))

    def export_csv(self, user_id: str, period: Period | str | None = None) -> str:
        """Time series of the (possibly cached) analytics as CSV."""
        cached = self.get_analytics(user_id, period)
        return export_time_series_csv(cached.result)
