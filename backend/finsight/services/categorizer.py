"""Rule-based transaction categorizer.

Keyword rules over the lower-cased description and merchant. Rules are
checked in order and the first match wins, so broad rules (income by
amount) sit after the specific ones.
"""

from dataclasses import dataclass, field
from decimal import Decimal

import structlog

from finsight.schemas.ai import CategorySuggestion

logger = structlog.get_logger()

TRANSPORT_KEYWORDS = (
    "uber",
    "lyft",
    "taxi",
    "ride",
    "gas",
    "fuel",
    "parking",
    "metro",
    "bus",
    "train",
    "airport",
)


@dataclass(frozen=True)
class KeywordRule:
    category: str
    confidence: float
    reasoning: str
    icon: str
    color: str
    description_keywords: tuple[str, ...] = ()
    merchant_keywords: tuple[str, ...] = ()
    min_amount: Decimal | None = field(default=None)  # strictly greater than

    def matches(self, description: str, merchant: str, amount: Decimal) -> bool:
        if any(keyword in description for keyword in self.description_keywords):
            return True
        if any(keyword in merchant for keyword in self.merchant_keywords):
            return True
        return self.min_amount is not None and amount > self.min_amount

    def suggestion(self) -> CategorySuggestion:
        return CategorySuggestion(
            category=self.category,
            confidence=self.confidence,
            reasoning=self.reasoning,
            suggested_icon=self.icon,
            suggested_color=self.color,
        )


RULES: list[KeywordRule] = [
    KeywordRule(
        category="transportation",
        confidence=0.9,
        reasoning="Matched transportation keywords (Uber, ride, gas, etc.)",
        icon="🚗",
        color="#3b82f6",
        description_keywords=TRANSPORT_KEYWORDS,
        merchant_keywords=("shell", "exxon", "bp"),
    ),
    KeywordRule(
        category="groceries",
        confidence=0.85,
        reasoning="Matched grocery-related keywords",
        icon="🛒",
        color="#22c55e",
        description_keywords=("grocery", "supermarket"),
        merchant_keywords=("walmart", "kroger", "target"),
    ),
    KeywordRule(
        category="dining",
        confidence=0.85,
        reasoning="Matched dining/food keywords",
        icon="🍽️",
        color="#f59e0b",
        description_keywords=("restaurant", "cafe", "food", "doordash", "ubereats"),
        merchant_keywords=("mcdonalds", "starbucks", "chipotle"),
    ),
    KeywordRule(
        category="entertainment",
        confidence=0.85,
        reasoning="Matched entertainment/subscription keywords",
        icon="🎬",
        color="#8b5cf6",
        description_keywords=("netflix", "spotify", "subscription", "movie", "game"),
    ),
    KeywordRule(
        category="income",
        confidence=0.8,
        reasoning="Matched income-related keywords or large amount",
        icon="💰",
        color="#10b981",
        description_keywords=("salary", "paycheck", "deposit", "payment"),
        min_amount=Decimal("500"),
    ),
]

DEFAULT_RULE = KeywordRule(
    category="other",
    confidence=0.5,
    reasoning="No specific category match found",
    icon="💳",
    color="#6b7280",
)


def categorize_transaction(
    description: str,
    amount: Decimal,
    merchant: str | None = None,
) -> CategorySuggestion:
    """Suggest a category from keywords; falls back to ``other``."""
    desc = (description or "").lower()
    merch = (merchant or "").lower()

    for rule in RULES:
        if rule.matches(desc, merch, amount):
            logger.debug("transaction_categorized", category=rule.category, rule="keyword")
            return rule.suggestion()

    logger.debug("transaction_categorized", category=DEFAULT_RULE.category, rule="default")
    return DEFAULT_RULE.suggestion()

