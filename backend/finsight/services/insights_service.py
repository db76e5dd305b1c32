"""Rule-based financial insights.

Used when no language model is wired in: two threshold checks over the
expense totals, each producing a titled, actionable insight.
"""

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal

import structlog

from finsight.schemas.ai import FinancialInsight, Timeframe
from finsight.schemas.analytics import Period
from finsight.schemas.transaction import Transaction, TransactionType
from finsight.services.analytics_engine import period_window
from finsight.services.transaction_store import TransactionStore
from finsight.utils.clock import utcnow

logger = structlog.get_logger()

HIGH_SPENDING_THRESHOLD = Decimal("1000")
LARGE_AVERAGE_THRESHOLD = Decimal("100")
MAX_INSIGHT_TRANSACTIONS = 100


def recent_transactions(
    store: TransactionStore,
    user_id: str,
    timeframe: Timeframe = "month",
    now: datetime | None = None,
) -> list[Transaction]:
    """The user's newest transactions inside the timeframe's window.

    ``week`` is the last seven days; ``month`` and ``year`` start on the
    first day of the current month or year.
    """
    start, end = period_window(Period(timeframe), now or utcnow())
    return store.list_between(user_id, start, end)[:MAX_INSIGHT_TRANSACTIONS]


def insights_for_user(
    store: TransactionStore,
    user_id: str,
    timeframe: Timeframe = "month",
    now: datetime | None = None,
) -> list[FinancialInsight]:
    transactions = recent_transactions(store, user_id, timeframe, now)
    if not transactions:
        return []
    return generate_fallback_insights(transactions, timeframe)


def generate_fallback_insights(
    transactions: Sequence[Transaction],
    timeframe: str = "month",
) -> list[FinancialInsight]:
    insights = []

    total_expenses = sum(
        (t.amount for t in transactions if t.type is TransactionType.EXPENSE), Decimal("0")
    )
    # Averaged over every transaction, income included
    average = total_expenses / len(transactions) if transactions else Decimal("0")

    if total_expenses > HIGH_SPENDING_THRESHOLD:
        insights.append(FinancialInsight(
            type="SPENDING_PATTERN",
            title="High Spending Detected",
            content=(
                f"You've spent ${total_expenses:.2f} this {timeframe}. "
                "Consider reviewing your expenses to identify areas for savings."
            ),
            priority=3,
            actionable=True,
            recommendations=[
                "Review largest expenses",
                "Set a monthly budget",
                "Track daily spending",
            ],
        ))

    if average > LARGE_AVERAGE_THRESHOLD:
        insights.append(FinancialInsight(
            type="SAVING_OPPORTUNITY",
            title="Large Transaction Pattern",
            content=(
                f"Your average transaction is ${average:.2f}. "
                "Consider if these large purchases are necessary."
            ),
            priority=2,
            actionable=True,
            recommendations=[
                "Plan large purchases in advance",
                "Compare prices before buying",
                "Consider alternatives",
            ],
        ))

    logger.info(
        "fallback_insights_generated",
        transactions=len(transactions),
        timeframe=timeframe,
        insights=len(insights),
    )
    return insights
