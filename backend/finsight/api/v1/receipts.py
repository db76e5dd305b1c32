"""Receipt API routes."""

from fastapi import APIRouter, Depends

from finsight.api.deps import get_current_user
from finsight.schemas.receipt import ReceiptParseRequest, ReceiptParseResponse
from finsight.services.receipt_parser import parse_receipt_text, validate_receipt_data

router = APIRouter()


@router.post("/parse", response_model=ReceiptParseResponse)
async def parse_receipt(
    body: ReceiptParseRequest,
    current_user: str = Depends(get_current_user),
):
    """Extract merchant, total, date and items from a receipt's OCR text."""
    data = parse_receipt_text(body.text, body.ocr_confidence)
    return ReceiptParseResponse(data=data, validation=validate_receipt_data(data))
