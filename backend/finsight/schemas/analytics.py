"""Analytics schemas.

Attributes are snake_case in Python and camelCase on the wire
(``timeSeries``, ``categoryBreakdown``, ``avgAmount``...), which is the shape
the dashboard charts consume.
"""

from decimal import Decimal
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class Period(str, Enum):
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"

    @classmethod
    def parse(cls, value: "str | Period | None") -> "Period":
        """Read a period tag, falling back to ``month`` for anything unknown."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.MONTH
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.MONTH

    @property
    def nominal_days(self) -> int:
        """Fixed day-count used for average daily spending."""
        return _NOMINAL_DAYS[self]

    @property
    def bucket_format(self) -> str:
        """strftime pattern of a time-series bucket key."""
        if self in (Period.WEEK, Period.MONTH):
            return "%Y-%m-%d"
        return "%Y-%m"


_NOMINAL_DAYS = {
    Period.WEEK: 7,
    Period.MONTH: 30,
    Period.QUARTER: 90,
    Period.YEAR: 365,
}

TrendDirection = Literal["up", "down", "stable"]
Significance = Literal["high", "medium", "low"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class TimeSeriesPoint(CamelModel):
    date: str  # "2026-01-14" (daily) or "2026-01" (monthly)
    income: Decimal
    expenses: Decimal
    net: Decimal
    transactions: int


class CategoryBucket(CamelModel):
    category: str
    amount: Decimal
    percentage: float
    color: str
    transactions: int
    avg_amount: Decimal


class TrendRecord(CamelModel):
    label: str
    growth: float
    direction: TrendDirection
    significance: Significance


class AnalyticsSummary(CamelModel):
    total_income: Decimal
    total_expenses: Decimal
    net_income: Decimal
    avg_daily_spending: Decimal
    top_category: str
    transaction_count: int
    period: Period


class AnalyticsResult(CamelModel):
    time_series: list[TimeSeriesPoint]
    category_breakdown: list[CategoryBucket]
    trends: list[TrendRecord]
    summary: AnalyticsSummary
    insights: list[str]

    @property
    def is_empty(self) -> bool:
        return self.summary.transaction_count == 0


class AnalyticsResponse(CamelModel):
    analytics: AnalyticsResult
