"""Shared API dependencies.

The cache and the transaction store are created once per process in
``finsight.main`` and live on ``app.state``; handlers reach them through
these dependencies.
"""

from fastapi import Depends, Request

from finsight.core.security import get_current_user
from finsight.services.analytics_cache import AnalyticsCache
from finsight.services.analytics_service import AnalyticsService
from finsight.services.transaction_store import TransactionStore


def get_analytics_cache(request: Request) -> AnalyticsCache:
    return request.app.state.analytics_cache


def get_transaction_store(request: Request) -> TransactionStore:
    return request.app.state.transaction_store


def get_analytics_service(
    store: TransactionStore = Depends(get_transaction_store),
    cache: AnalyticsCache = Depends(get_analytics_cache),
) -> AnalyticsService:
    return AnalyticsService(store, cache)


__all__ = [
    "get_current_user",
    "get_analytics_cache",
    "get_transaction_store",
    "get_analytics_service",
]
