"""Transaction API routes."""

from math import ceil

from fastapi import APIRouter, Depends, Query, status

from finsight.api.deps import get_current_user, get_transaction_store
from finsight.schemas.transaction import Transaction, TransactionListResponse
from finsight.services.transaction_store import TransactionStore

router = APIRouter()


@router.post("", response_model=Transaction, status_code=status.HTTP_201_CREATED)
async def create_transaction(
    data: Transaction,
    current_user: str = Depends(get_current_user),
    store: TransactionStore = Depends(get_transaction_store),
):
    """Record a transaction for the current user.

    A category may be sent as a plain name or as ``{name, color}``.
    """
    return store.add(current_user, data.model_copy(update={"id": None}))


@router.get("", response_model=TransactionListResponse)
async def list_transactions(
    page: int = Query(1, ge=1),
    per_page: int = Query(50, ge=1, le=200),
    current_user: str = Depends(get_current_user),
    store: TransactionStore = Depends(get_transaction_store),
):
    """List the current user's transactions, newest first, one page at a time."""
    total = store.count(current_user)
    transactions = store.list_for_user(
        current_user,
        offset=(page - 1) * per_page,
        limit=per_page,
    )
    return TransactionListResponse(
        data=transactions,
        meta={
            "total": total,
            "page": page,
            "per_page": per_page,
            "pages": ceil(total / per_page),
        },
    )
