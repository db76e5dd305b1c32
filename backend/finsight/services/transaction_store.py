"""Process-local transaction store.

Holds each user's transactions in memory and answers the date-range query
the analytics endpoint needs before aggregation.
"""

import uuid
from datetime import datetime

import structlog

from finsight.schemas.transaction import Transaction

logger = structlog.get_logger()


class TransactionStore:
    def __init__(self) -> None:
        self._by_user: dict[str, list[Transaction]] = {}

    def add(self, user_id: str, transaction: Transaction) -> Transaction:
        """Record a transaction, assigning an id when it has none."""
        if transaction.id is None:
            transaction = transaction.model_copy(update={"id": uuid.uuid4().hex})
        self._by_user.setdefault(user_id, []).append(transaction)
        logger.info(
            "transaction_recorded",
            user_id=user_id,
            txn_id=transaction.id,
            type=transaction.type.value,
        )
        return transaction

    def list_for_user(
        self,
        user_id: str,
        offset: int = 0,
        limit: int | None = None,
    ) -> list[Transaction]:
        """A user's transactions, newest first, optionally one page of them."""
        ordered = sorted(self._by_user.get(user_id, []), key=lambda t: t.date, reverse=True)
        if limit is None:
            return ordered[offset:]
        return ordered[offset:offset + limit]

    def list_between(self, user_id: str, start: datetime, end: datetime) -> list[Transaction]:
        """Transactions dated within [start, end], newest first."""
        return [t for t in self.list_for_user(user_id) if start <= t.date <= end]

    def count(self, user_id: str | None = None) -> int:
        if user_id is not None:
            return len(self._by_user.get(user_id, []))
        return sum(len(txns) for txns in self._by_user.values())
