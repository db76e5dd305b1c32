"""Receipt parser tests."""

from datetime import date
from decimal import Decimal

import pytest

from finsight.schemas.receipt import ReceiptData
from finsight.services.receipt_parser import (
    UNKNOWN_MERCHANT,
    clean_merchant_name,
    extract_amount,
    extract_date,
    extract_items,
    extract_merchant,
    parse_receipt_text,
    validate_receipt_data,
)

WALMART_RECEIPT = """\
WALMART SUPERCENTER #1234
123 MAIN ST
01/15/2026 14:32
2 x MILK 1GAL      $7.98
BREAD              $2.49
SUBTOTAL          $10.47
TAX                $0.84
TOTAL             $11.31
"""


def test_parse_full_receipt():
    data = parse_receipt_text(WALMART_RECEIPT, ocr_confidence=90)

    assert data.merchant == "Walmart Supercenter 1234"
    assert data.amount == Decimal("11.31")
    assert data.date == "2026-01-15"
    assert data.date_detected is True
    assert [(i.name, i.price, i.quantity) for i in data.items] == [
        ("MILK 1GAL", Decimal("7.98"), 2),
        ("BREAD", Decimal("2.49"), None),
    ]
    assert data.confidence == 1.0
    assert data.raw_text == WALMART_RECEIPT


def test_confidence_builds_on_found_fields():
    data = parse_receipt_text(WALMART_RECEIPT, ocr_confidence=0)
    assert data.confidence == pytest.approx(0.5)


def test_missing_date_defaults_to_today_without_bonus():
    data = parse_receipt_text("CORNER CAFE\nTOTAL $4.50", today=date(2026, 10, 19))

    assert data.date == "2026-10-19"
    assert data.date_detected is False
    assert data.confidence == pytest.approx(0.3)


def test_empty_text():
    data = parse_receipt_text("", today=date(2026, 10, 19))

    assert data.merchant == UNKNOWN_MERCHANT
    assert data.amount == 0
    assert data.items == []
    assert data.confidence == 0.0


@pytest.mark.parametrize(
    "line, expected",
    [
        ("2026-01-15", date(2026, 1, 15)),
        ("01/15/2026", date(2026, 1, 15)),
        ("1/5/26", date(2026, 1, 5)),
        ("03-04-2025", date(2025, 3, 4)),
        ("Jan 15, 2026", date(2026, 1, 15)),
        ("September 3 2025", date(2025, 9, 3)),
        ("15 Mar 2026", date(2026, 3, 15)),
    ],
)
def test_extract_date_formats(line, expected):
    assert extract_date([line]) == expected


def test_extract_date_skips_impossible_dates():
    assert extract_date(["13/45/2026", "02/03/2026"]) == date(2026, 2, 3)
    assert extract_date(["no dates here"]) is None


def test_extract_amount_takes_largest():
    lines = ["COFFEE $3.50", "SUBTOTAL $9.00", "TOTAL 9.72", "CHANGE $0.28"]
    assert extract_amount(lines) == Decimal("9.72")


def test_extract_amount_bare_line():
    assert extract_amount(["42.00"]) == Decimal("42.00")
    assert extract_amount(["no money"]) == Decimal("0")


def test_extract_merchant_known_chain_below_header():
    lines = ["*** RECEIPT ***", "Target Store T-0456", "TOTAL $5.00"]
    assert extract_merchant(lines) == "Target"


def test_extract_merchant_first_line_fallback():
    assert extract_merchant(["Joe's Hardware", "TOTAL $5.00"]) == "Joe's Hardware"


def test_extract_merchant_skips_unusable_lines():
    lines = ["12345", "$4.00", "ab", "TOTAL $4.00"]
    assert extract_merchant(lines) == UNKNOWN_MERCHANT


def test_clean_merchant_name():
    assert clean_merchant_name("#ACME WIDGETS INC.") == "Acme Widgets"
    assert clean_merchant_name("best buy store #55") == "Best Buy"


def test_extract_items_skips_totals_and_big_prices():
    lines = ["3 APPLES $1.50", "VISA ****1234 $20.00", "TELEVISION 1200.00", "TOTAL $1.50", "X $1.00"]

    items = extract_items(lines)

    assert len(items) == 1
    assert items[0].name == "APPLES"
    assert items[0].quantity == 3


def _receipt(**overrides):
    fields = dict(
        merchant="Walmart",
        amount=Decimal("10"),
        date="2026-10-19",
        date_detected=True,
        items=[],
        raw_text="",
        confidence=0.9,
    )
    fields.update(overrides)
    return ReceiptData(**fields)


def test_validate_clean_receipt():
    result = validate_receipt_data(_receipt())
    assert result.is_valid
    assert result.errors == []
    assert result.warnings == []


def test_validate_missing_amount_is_error():
    result = validate_receipt_data(_receipt(amount=Decimal("0")))
    assert not result.is_valid
    assert result.errors == ["No valid amount found"]


def test_validate_warnings():
    result = validate_receipt_data(_receipt(
        merchant=UNKNOWN_MERCHANT,
        amount=Decimal("20000"),
        date_detected=False,
        confidence=0.2,
    ))

    assert result.is_valid
    assert result.warnings == [
        "Merchant name could not be identified",
        "Amount seems unusually high",
        "Date could not be extracted",
        "Low confidence in OCR results",
    ]


async def test_parse_receipt_endpoint(client):
    response = await client.post(
        "/api/v1/receipts/parse",
        json={"text": WALMART_RECEIPT, "ocr_confidence": 85},
        headers={"X-User-Id": "user-1"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["merchant"] == "Walmart Supercenter 1234"
    assert Decimal(body["data"]["amount"]) == Decimal("11.31")
    assert body["validation"]["is_valid"] is True


async def test_parse_receipt_rejects_bad_confidence(client):
    response = await client.post(
        "/api/v1/receipts/parse",
        json={"text": "x", "ocr_confidence": 150},
        headers={"X-User-Id": "user-1"},
    )
    assert response.status_code == 422
