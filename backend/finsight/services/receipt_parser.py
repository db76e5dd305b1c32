"""Receipt parser for OCR output.

Pulls merchant, total, date and line items out of the noisy text an OCR
engine returns for a receipt photo, using regex heuristics.

Typical input:
    WALMART SUPERCENTER #1234
    123 MAIN ST
    01/15/2026 14:32
    2 x MILK 1GAL      $7.98
    BREAD              $2.49
    SUBTOTAL          $10.47
    TAX                $0.84
    TOTAL             $11.31
    → merchant="Walmart Supercenter 1234", amount=11.31, date="2026-01-15",
      items=[MILK 1GAL (qty 2) 7.98, BREAD 2.49]
"""

import re
import time
from datetime import date as date_type
from decimal import Decimal, InvalidOperation

import structlog

from finsight.schemas.receipt import ReceiptData, ReceiptItem, ReceiptValidation

logger = structlog.get_logger()

UNKNOWN_MERCHANT = "Unknown"
MERCHANT_SCAN_LINES = 5
MAX_ITEM_PRICE = Decimal("1000")
HIGH_AMOUNT_WARNING = Decimal("10000")
LOW_CONFIDENCE_WARNING = 0.5

# ── Merchant patterns (known chains first, then generic words) ──

MERCHANT_PATTERNS: list[re.Pattern] = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"walmart",
        r"target",
        r"kroger",
        r"safeway",
        r"costco",
        r"home depot",
        r"best buy",
        r"starbucks",
        r"mcdonalds",
        r"subway",
        r"cvs",
        r"walgreens",
        r"store",
        r"market",
        r"shop",
        r"restaurant",
        r"cafe",
    )
]

# ── Regex patterns ──────────────────────────────────────────────

# Keyword lines that usually carry the total
_AMOUNT_PATTERNS = [
    re.compile(r"total.*?\$?(\d+\.?\d*)", re.IGNORECASE),
    re.compile(r"amount.*?\$?(\d+\.?\d*)", re.IGNORECASE),
    re.compile(r"^\$?(\d+\.\d{2})$"),
    re.compile(r"balance.*?\$?(\d+\.?\d*)", re.IGNORECASE),
    re.compile(r"due.*?\$?(\d+\.?\d*)", re.IGNORECASE),
]

_DOLLAR_AMOUNT_RE = re.compile(r"\$(\d+\.\d{2})")

_MONTHS = "jan|feb|mar|apr|may|jun|jul|aug|sep|oct|nov|dec"

# ISO first so "2026-01-15" is not read as "26-01-15"
_DATE_ISO_RE = re.compile(r"(?<!\d)(\d{4})-(\d{1,2})-(\d{1,2})(?!\d)")
_DATE_US_SLASH_RE = re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})/(\d{2,4})(?!\d)")
_DATE_US_DASH_RE = re.compile(r"(?<!\d)(\d{1,2})-(\d{1,2})-(\d{2,4})(?!\d)")
_DATE_MONTH_FIRST_RE = re.compile(
    rf"\b({_MONTHS})[a-z]*\.?\s+(\d{{1,2}}),?\s+(\d{{2,4}})(?!\d)", re.IGNORECASE
)
_DATE_DAY_FIRST_RE = re.compile(
    rf"(?<!\d)(\d{{1,2}})\s+({_MONTHS})[a-z]*\.?,?\s+(\d{{2,4}})(?!\d)", re.IGNORECASE
)

_ITEM_LINE_RE = re.compile(r"^(.+?)\s+\$?(\d+\.\d{2})$")
_ITEM_SKIP_RE = re.compile(
    r"total|tax|subtotal|change|cash|card|visa|mastercard|amex"
    r"|thank you|receipt|store|address|phone",
    re.IGNORECASE,
)
_QUANTITY_PREFIX_RE = re.compile(r"^(\d+)\s*x?\s*", re.IGNORECASE)

_SPECIAL_CHARS_RE = re.compile(r"[#*]+")
_STORE_SUFFIX_RE = re.compile(r"store.*$", re.IGNORECASE)
_INC_SUFFIX_RE = re.compile(r"inc\.?$", re.IGNORECASE)
_DIGITS_ONLY_RE = re.compile(r"^\d+$")


# ── Public API ──────────────────────────────────────────────────


def parse_receipt_text(
    text: str,
    ocr_confidence: float = 0.0,
    today: date_type | None = None,
) -> ReceiptData:
    """Parse OCR text into structured receipt data.

    ``ocr_confidence`` is the OCR engine's own 0-100 score; the returned
    confidence (0-1) starts from it and grows with each field found.
    """
    started = time.perf_counter()
    lines = [line.strip() for line in (text or "").splitlines()]
    lines = [line for line in lines if line]

    merchant = extract_merchant(lines)
    amount = extract_amount(lines)
    detected_date = extract_date(lines)
    items = extract_items(lines)

    confidence = ocr_confidence / 100
    if merchant != UNKNOWN_MERCHANT:
        confidence += 0.1
    if amount > 0:
        confidence += 0.2
    if detected_date is not None:
        confidence += 0.1
    if items:
        confidence += 0.1
    confidence = min(confidence, 1.0)

    receipt_date = detected_date or today or date_type.today()

    logger.debug(
        "receipt_parsed",
        lines=len(lines),
        merchant=merchant,
        amount=str(amount),
        date_detected=detected_date is not None,
        items=len(items),
        confidence=round(confidence, 3),
    )

    return ReceiptData(
        merchant=merchant,
        amount=amount,
        date=receipt_date.isoformat(),
        date_detected=detected_date is not None,
        items=items,
        raw_text=text,
        confidence=confidence,
        processing_time_ms=round((time.perf_counter() - started) * 1000, 3),
    )


def validate_receipt_data(data: ReceiptData) -> ReceiptValidation:
    """Flag receipts that cannot become a transaction (errors) or look doubtful (warnings)."""
    errors: list[str] = []
    warnings: list[str] = []

    if not data.merchant or data.merchant == UNKNOWN_MERCHANT:
        warnings.append("Merchant name could not be identified")

    if data.amount <= 0:
        errors.append("No valid amount found")

    if data.amount > HIGH_AMOUNT_WARNING:
        warnings.append("Amount seems unusually high")

    if not data.date_detected:
        warnings.append("Date could not be extracted")

    if data.confidence < LOW_CONFIDENCE_WARNING:
        warnings.append("Low confidence in OCR results")

    return ReceiptValidation(is_valid=not errors, errors=errors, warnings=warnings)


def extract_merchant(lines: list[str]) -> str:
    """Find the merchant name in the first few lines of the receipt."""
    for i, line in enumerate(lines[:MERCHANT_SCAN_LINES]):
        if len(line) < 3 or _DIGITS_ONLY_RE.match(line) or "$" in line:
            continue

        if any(pattern.search(line) for pattern in MERCHANT_PATTERNS):
            name = clean_merchant_name(line)
            if name:
                return name

        lowered = line.lower()
        if i == 0 and len(line) > 3 and "receipt" not in lowered and "store" not in lowered:
            name = clean_merchant_name(line)
            if name:
                return name

    return UNKNOWN_MERCHANT


def clean_merchant_name(name: str) -> str:
    name = _SPECIAL_CHARS_RE.sub("", name)
    name = _STORE_SUFFIX_RE.sub("", name)
    name = _INC_SUFFIX_RE.sub("", name)
    words = name.strip().lower().split(" ")
    return " ".join(word[:1].upper() + word[1:] for word in words)


def extract_amount(lines: list[str]) -> Decimal:
    """Return the largest amount on the receipt, which is normally the total."""
    best = Decimal("0")

    for line in lines:
        candidates = []
        for pattern in _AMOUNT_PATTERNS:
            match = pattern.search(line)
            if match:
                candidates.append(match.group(1))
        candidates.extend(_DOLLAR_AMOUNT_RE.findall(line))

        for raw in candidates:
            amount = _to_decimal(raw)
            if amount is not None and amount > best:
                best = amount

    return best


def extract_date(lines: list[str]) -> date_type | None:
    """Return the first parseable date on the receipt, if any."""
    for line in lines:
        for pattern, builder in _DATE_PARSERS:
            match = pattern.search(line)
            if not match:
                continue
            parsed = builder(*match.groups())
            if parsed is not None:
                return parsed
    return None


def extract_items(lines: list[str]) -> list[ReceiptItem]:
    """Read "NAME  $PRICE" lines as line items."""
    items = []

    for line in lines:
        if len(line) < 3 or _ITEM_SKIP_RE.search(line):
            continue

        match = _ITEM_LINE_RE.match(line)
        if not match:
            continue

        raw_name = match.group(1).strip()
        price = _to_decimal(match.group(2))
        if len(raw_name) <= 2 or price is None or not 0 < price < MAX_ITEM_PRICE:
            continue

        items.append(ReceiptItem(
            name=_clean_item_name(raw_name),
            price=price,
            quantity=_extract_quantity(raw_name),
        ))

    return items


# ── Private helpers ─────────────────────────────────────────────


def _clean_item_name(name: str) -> str:
    name = _QUANTITY_PREFIX_RE.sub("", name, count=1)
    return _SPECIAL_CHARS_RE.sub("", name).strip()


def _extract_quantity(name: str) -> int | None:
    match = _QUANTITY_PREFIX_RE.match(name)
    return int(match.group(1)) if match else None


def _to_decimal(raw: str) -> Decimal | None:
    try:
        return Decimal(raw.rstrip("."))
    except InvalidOperation:
        return None


def _year(yy: str) -> int:
    year = int(yy)
    return year + 2000 if year < 100 else year


def _month_number(name: str) -> int:
    return _MONTHS.split("|").index(name[:3].lower()) + 1


def _safe_date(year: int, month: int, day: int) -> date_type | None:
    try:
        return date_type(year, month, day)
    except ValueError:
        return None


def _from_iso(yyyy: str, mm: str, dd: str) -> date_type | None:
    return _safe_date(int(yyyy), int(mm), int(dd))


def _from_us(mm: str, dd: str, yy: str) -> date_type | None:
    return _safe_date(_year(yy), int(mm), int(dd))


def _from_month_first(month: str, dd: str, yy: str) -> date_type | None:
    return _safe_date(_year(yy), _month_number(month), int(dd))


def _from_day_first(dd: str, month: str, yy: str) -> date_type | None:
    return _safe_date(_year(yy), _month_number(month), int(dd))


_DATE_PARSERS = [
    (_DATE_ISO_RE, _from_iso),
    (_DATE_US_SLASH_RE, _from_us),
    (_DATE_US_DASH_RE, _from_us),
    (_DATE_MONTH_FIRST_RE, _from_month_first),
    (_DATE_DAY_FIRST_RE, _from_day_first),
]
