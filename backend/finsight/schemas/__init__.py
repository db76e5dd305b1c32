"""Pydantic schemas."""

from finsight.schemas.analytics import (
    AnalyticsResult,
    AnalyticsSummary,
    CategoryBucket,
    Period,
    TimeSeriesPoint,
    TrendRecord,
)
from finsight.schemas.transaction import CategoryRef, Transaction, TransactionType

__all__ = [
    "AnalyticsResult",
    "AnalyticsSummary",
    "CategoryBucket",
    "CategoryRef",
    "Period",
    "TimeSeriesPoint",
    "Transaction",
    "TransactionType",
    "TrendRecord",
]
