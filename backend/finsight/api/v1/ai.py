"""Categorization and insight API routes (rule-based)."""

from fastapi import APIRouter, Depends, Query

from finsight.api.deps import get_current_user, get_transaction_store
from finsight.schemas.ai import (
    CategorizeRequest,
    CategorySuggestion,
    InsightsResponse,
    Timeframe,
)
from finsight.services.categorizer import categorize_transaction
from finsight.services.insights_service import insights_for_user
from finsight.services.transaction_store import TransactionStore

router = APIRouter()


@router.post("/categorize", response_model=CategorySuggestion)
async def categorize(
    body: CategorizeRequest,
    current_user: str = Depends(get_current_user),
):
    """Suggest a category for a transaction from its description and merchant."""
    return categorize_transaction(body.description, body.amount, body.merchant)


@router.get("/insights", response_model=InsightsResponse)
async def insights(
    timeframe: Timeframe = Query("month"),
    current_user: str = Depends(get_current_user),
    store: TransactionStore = Depends(get_transaction_store),
):
    """Threshold-based insights over the caller's recent transactions.

    Reads at most the 100 newest transactions in the timeframe.
    """
    return InsightsResponse(data=insights_for_user(store, current_user, timeframe))
