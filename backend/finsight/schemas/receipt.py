"""Receipt parsing schemas."""

from decimal import Decimal

from pydantic import BaseModel, Field


class ReceiptItem(BaseModel):
    name: str
    price: Decimal
    quantity: int | None = None


class ReceiptData(BaseModel):
    merchant: str
    amount: Decimal
    date: str  # YYYY-MM-DD
    date_detected: bool  # False when the date defaulted to today
    items: list[ReceiptItem]
    raw_text: str
    confidence: float  # 0-1
    processing_time_ms: float = 0.0


class ReceiptValidation(BaseModel):
    is_valid: bool
    errors: list[str]
    warnings: list[str]


class ReceiptParseRequest(BaseModel):
    text: str = Field(max_length=50_000)
    ocr_confidence: float = Field(0.0, ge=0, le=100)  # OCR engine score, 0-100


class ReceiptParseResponse(BaseModel):
    data: ReceiptData
    validation: ReceiptValidation
