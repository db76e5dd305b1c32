"""Transaction schemas for request/response validation.

``Transaction`` is the single normalized shape the analytics engine reads.
Clients may send a category either as a bare name or as an object; both
collapse into ``CategoryRef`` here so nothing downstream has to care.
"""

from datetime import date as date_type
from datetime import datetime, time
from decimal import Decimal
from enum import Enum

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_validator

from finsight.utils.clock import to_naive_utc, utcnow

logger = structlog.get_logger()


class TransactionType(str, Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class CategoryRef(BaseModel):
    name: str
    color: str | None = None

    model_config = ConfigDict(frozen=True)


class Transaction(BaseModel):
    id: str | None = None
    amount: Decimal = Field(gt=0, max_digits=12, decimal_places=2)  # NUMERIC(12, 2)
    type: TransactionType
    date: datetime
    category: CategoryRef | None = None
    merchant: str | None = None
    description: str | None = None

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    @field_validator("type", mode="before")
    @classmethod
    def _upper_type(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value):
        if value is None or isinstance(value, CategoryRef):
            return value
        if isinstance(value, str):
            return {"name": value} if value.strip() else None
        if isinstance(value, dict) and not value.get("name"):
            return None
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value):
        parsed = _parse_datetime(value)
        if parsed is None:
            logger.warning("transaction_date_unparseable", value=repr(value)[:64])
            return utcnow()
        return parsed

    @field_validator("date")
    @classmethod
    def _normalize_date(cls, value: datetime) -> datetime:
        return to_naive_utc(value)


class TransactionListResponse(BaseModel):
    data: list[Transaction]
    meta: dict  # {total, page, per_page, pages}


def _parse_datetime(value) -> datetime | None:
    """Best-effort datetime parsing; ``None`` means "could not read it"."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date_type):
        return datetime.combine(value, time.min)
    if isinstance(value, str) and value.strip():
        try:
            return datetime.fromisoformat(value.strip())
        except ValueError:
            return None
    return None
