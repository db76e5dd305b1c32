"""Categorization and insight schemas."""

from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field

Timeframe = Literal["week", "month", "year"]

InsightType = Literal[
    "SPENDING_PATTERN",
    "BUDGET_ALERT",
    "SAVING_OPPORTUNITY",
    "UNUSUAL_ACTIVITY",
    "PREDICTION",
]


class CategorizeRequest(BaseModel):
    description: str = Field(max_length=500)
    amount: Decimal = Field(gt=0)
    merchant: str | None = Field(None, max_length=200)


class CategorySuggestion(BaseModel):
    category: str
    confidence: float  # 0-1
    reasoning: str
    suggested_icon: str
    suggested_color: str


class FinancialInsight(BaseModel):
    type: InsightType
    title: str
    content: str
    priority: int = Field(ge=1, le=5)
    actionable: bool
    recommendations: list[str] | None = None


class InsightsResponse(BaseModel):
    data: list[FinancialInsight]
