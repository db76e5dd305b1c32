"""Analytics engine: time series, category breakdown, trends, insights.

``generate_analytics`` runs the whole pipeline over an in-memory list of
transactions:

    period filter → time-series buckets → category breakdown
                  → trends → summary → insight sentences

Every stage is a plain function of its inputs and rebuilds its output from
scratch, so the same transactions, period and ``now`` always give the same
result. Money is summed as ``Decimal``; averages are rounded to cents.
"""

import csv
import io
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal, localcontext

import structlog

from finsight.schemas.analytics import (
    AnalyticsResult,
    AnalyticsSummary,
    CategoryBucket,
    Period,
    Significance,
    TimeSeriesPoint,
    TrendDirection,
    TrendRecord,
)
from finsight.schemas.transaction import Transaction, TransactionType
from finsight.utils.clock import to_naive_utc, utcnow

logger = structlog.get_logger()

CATEGORY_COLORS: dict[str, str] = {
    "groceries": "#22c55e",
    "dining": "#f59e0b",
    "transportation": "#3b82f6",
    "utilities": "#8b5cf6",
    "entertainment": "#ef4444",
    "healthcare": "#06b6d4",
    "shopping": "#f97316",
    "travel": "#84cc16",
    "education": "#6366f1",
    "housing": "#ec4899",
    "income": "#10b981",
    "other": "#6b7280",
}
DEFAULT_CATEGORY_COLOR = "#6b7280"
FALLBACK_CATEGORY = "other"
NO_CATEGORY = "None"

# Trend windows are counted in buckets, not calendar days
TREND_WINDOW = 7
DIRECTION_DEADBAND = 5
HIGH_SIGNIFICANCE = 20
MEDIUM_SIGNIFICANCE = 10

EXPENSE_TREND_LABEL = "Recent vs Previous Week"
INCOME_TREND_LABEL = "Income Trend"

CONCENTRATION_THRESHOLD = 40
LARGE_TRANSACTION_THRESHOLD = 100
KEEP_TRACKING_INSIGHT = (
    "Keep tracking your expenses to get personalized insights and recommendations."
)

CSV_HEADER = ["Date", "Income", "Expenses", "Net", "Transactions"]

_ZERO = Decimal("0")
_CENTS = Decimal("0.01")


# ── Public API ──────────────────────────────────────────────────


def generate_analytics(
    transactions: Iterable[Transaction],
    period: Period | str | None = Period.MONTH,
    now: datetime | None = None,
) -> AnalyticsResult:
    """Build the full analytics result for one period."""
    period = Period.parse(period)
    now = to_naive_utc(now) if now is not None else utcnow()

    filtered = filter_by_period(transactions, period, now)
    time_series = build_time_series(filtered, period)
    category_breakdown = build_category_breakdown(filtered)
    trends = analyze_trends(time_series)
    summary = calculate_summary(filtered, category_breakdown, period)
    insights = generate_insights(filtered, category_breakdown, trends)

    logger.debug(
        "analytics_generated",
        period=period.value,
        transactions=len(filtered),
        time_series_points=len(time_series),
        categories=len(category_breakdown),
        trends=len(trends),
        insights=len(insights),
    )

    return AnalyticsResult(
        time_series=time_series,
        category_breakdown=category_breakdown,
        trends=trends,
        summary=summary,
        insights=insights,
    )


def period_window(period: Period, now: datetime) -> tuple[datetime, datetime]:
    """Return the (start, end) of the period that ends at ``now``.

    ``week`` is a rolling seven days; the others start at the first day of
    the current month, quarter or year.
    """
    if period is Period.WEEK:
        start = now - timedelta(days=7)
    elif period is Period.QUARTER:
        first_month = (now.month - 1) // 3 * 3 + 1
        start = datetime(now.year, first_month, 1)
    elif period is Period.YEAR:
        start = datetime(now.year, 1, 1)
    else:
        start = datetime(now.year, now.month, 1)
    return start, now


def filter_by_period(
    transactions: Iterable[Transaction],
    period: Period,
    now: datetime,
) -> list[Transaction]:
    start, _ = period_window(period, now)
    return [txn for txn in transactions if txn.date >= start]


def build_time_series(
    transactions: Iterable[Transaction],
    period: Period,
) -> list[TimeSeriesPoint]:
    """Group transactions into daily (week/month) or monthly (quarter/year) buckets."""
    key_format = period.bucket_format
    buckets: dict[str, _Totals] = {}

    for txn in transactions:
        key = txn.date.strftime(key_format)
        buckets.setdefault(key, _Totals()).add(txn)

    return [
        TimeSeriesPoint(
            date=key,
            income=totals.income,
            expenses=totals.expenses,
            net=totals.income - totals.expenses,
            transactions=totals.count,
        )
        for key, totals in sorted(buckets.items())
    ]


def build_category_breakdown(transactions: Iterable[Transaction]) -> list[CategoryBucket]:
    """Sum expenses per category, largest first.

    Categories are matched case-insensitively; transactions without one land
    in ``other``. Equal amounts keep the order in which categories first
    appeared.
    """
    amounts: dict[str, Decimal] = {}
    counts: dict[str, int] = {}

    for txn in transactions:
        if txn.type is not TransactionType.EXPENSE:
            continue
        key = category_key(txn)
        amounts[key] = amounts.get(key, _ZERO) + txn.amount
        counts[key] = counts.get(key, 0) + 1

    total = sum(amounts.values(), _ZERO)

    breakdown = [
        CategoryBucket(
            category=display_category(key),
            amount=amount,
            percentage=_percentage(amount, total),
            color=CATEGORY_COLORS.get(key, DEFAULT_CATEGORY_COLOR),
            transactions=counts[key],
            avg_amount=_to_cents(amount / counts[key]),
        )
        for key, amount in amounts.items()
    ]
    breakdown.sort(key=lambda bucket: bucket.amount, reverse=True)
    return breakdown


def analyze_trends(time_series: Sequence[TimeSeriesPoint]) -> list[TrendRecord]:
    """Compare the last seven buckets against the seven before them.

    One record for expenses and one for income; a side whose earlier window
    sums to zero has no defined growth and is left out.
    """
    if len(time_series) < 2:
        return []

    recent = time_series[-TREND_WINDOW:]
    previous = time_series[-2 * TREND_WINDOW : -TREND_WINDOW]

    trends = []
    for label, field in ((EXPENSE_TREND_LABEL, "expenses"), (INCOME_TREND_LABEL, "income")):
        trend = _compare_windows(
            label,
            recent=sum((getattr(point, field) for point in recent), _ZERO),
            previous=sum((getattr(point, field) for point in previous), _ZERO),
        )
        if trend is not None:
            trends.append(trend)
    return trends


def classify_direction(growth: Decimal | float) -> TrendDirection:
    if growth > DIRECTION_DEADBAND:
        return "up"
    if growth < -DIRECTION_DEADBAND:
        return "down"
    return "stable"


def classify_significance(growth: Decimal | float) -> Significance:
    magnitude = abs(growth)
    if magnitude > HIGH_SIGNIFICANCE:
        return "high"
    if magnitude > MEDIUM_SIGNIFICANCE:
        return "medium"
    return "low"


def calculate_summary(
    transactions: Sequence[Transaction],
    category_breakdown: Sequence[CategoryBucket],
    period: Period,
) -> AnalyticsSummary:
    """Totals straight from the transactions; top category from the breakdown."""
    income = sum(
        (txn.amount for txn in transactions if txn.type is TransactionType.INCOME), _ZERO
    )
    expenses = sum(
        (txn.amount for txn in transactions if txn.type is TransactionType.EXPENSE), _ZERO
    )

    return AnalyticsSummary(
        total_income=income,
        total_expenses=expenses,
        net_income=income - expenses,
        # Nominal period length, not elapsed days, so figures compare across calls
        avg_daily_spending=_to_cents(expenses / period.nominal_days),
        top_category=category_breakdown[0].category if category_breakdown else NO_CATEGORY,
        transaction_count=len(transactions),
        period=period,
    )


def generate_insights(
    transactions: Sequence[Transaction],
    category_breakdown: Sequence[CategoryBucket],
    trends: Sequence[TrendRecord],
) -> list[str]:
    """Plain-language observations, in rule order."""
    insights = []

    if category_breakdown:
        top = category_breakdown[0]
        if top.percentage > CONCENTRATION_THRESHOLD:
            insights.append(
                f"{top.category} accounts for {format_percentage(top.percentage)} of your "
                "spending. Consider reviewing this category for savings opportunities."
            )

    for trend in trends:
        if trend.significance != "high" or "Recent" not in trend.label:
            continue
        if trend.direction == "up":
            insights.append(
                f"Your spending has increased by {trend.growth:.1f}% recently. "
                "Monitor your expenses closely."
            )
        elif trend.direction == "down":
            insights.append(
                f"Great job! Your spending decreased by {abs(trend.growth):.1f}% recently."
            )

    if transactions:
        average = sum((abs(txn.amount) for txn in transactions), _ZERO) / len(transactions)
        if average > LARGE_TRANSACTION_THRESHOLD:
            insights.append(
                f"Your average transaction is ${average:.2f}. "
                "Consider tracking large purchases more carefully."
            )

    if not insights:
        insights.append(KEEP_TRACKING_INSIGHT)
    return insights


def export_time_series_csv(result: AnalyticsResult) -> str:
    """Render the time series as CSV, one row per bucket."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for point in result.time_series:
        writer.writerow([
            point.date,
            f"{point.income:.2f}",
            f"{point.expenses:.2f}",
            f"{point.net:.2f}",
            point.transactions,
        ])
    return buffer.getvalue()


def category_key(txn: Transaction) -> str:
    """Normalized (lower-case) category name of a transaction."""
    name = txn.category.name.strip().lower() if txn.category else ""
    return name or FALLBACK_CATEGORY


def display_category(key: str) -> str:
    return key[:1].upper() + key[1:]


def format_percentage(value: float) -> str:
    return f"{value:.1f}%"


# ── Private helpers ─────────────────────────────────────────────


@dataclass
class _Totals:
    income: Decimal = _ZERO
    expenses: Decimal = _ZERO
    count: int = 0

    def add(self, txn: Transaction) -> None:
        if txn.type is TransactionType.INCOME:
            self.income += txn.amount
        else:
            self.expenses += txn.amount
        self.count += 1


def _compare_windows(label: str, recent: Decimal, previous: Decimal) -> TrendRecord | None:
    if previous <= 0:
        return None
    growth = (recent - previous) / previous * 100
    return TrendRecord(
        label=label,
        growth=float(growth),
        direction=classify_direction(growth),
        significance=classify_significance(growth),
    )


def _percentage(part: Decimal, total: Decimal) -> float:
    if total <= 0:
        return 0.0
    return float(part / total * 100)


def _to_cents(value: Decimal) -> Decimal:
    # quantize needs every integer digit plus two decimals within the precision
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return value.quantize(_CENTS)
