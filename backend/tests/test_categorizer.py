"""Rule-based categorizer tests."""

from decimal import Decimal

import pytest

from finsight.services.categorizer import categorize_transaction


@pytest.mark.parametrize(
    "description, merchant, amount, expected",
    [
        ("Uber trip downtown", None, "18.40", "transportation"),
        ("Fuel", "SHELL 0042", "55.00", "transportation"),
        ("weekly grocery run", None, "82.10", "groceries"),
        ("Card purchase", "Walmart", "23.99", "groceries"),
        ("Lunch at the cafe", None, "12.00", "dining"),
        ("Morning coffee", "Starbucks", "5.25", "dining"),
        ("NETFLIX.COM", None, "15.49", "entertainment"),
        ("October salary", None, "3200.00", "income"),
        ("Wire from ACME", None, "750.00", "income"),
        ("Hardware", "Joe's", "42.00", "other"),
    ],
)
def test_categorize(description, merchant, amount, expected):
    suggestion = categorize_transaction(description, Decimal(amount), merchant)
    assert suggestion.category == expected


def test_first_matching_rule_wins():
    # "ubereats" contains "uber", and transportation is checked first
    suggestion = categorize_transaction("UberEats order", Decimal("30"))
    assert suggestion.category == "transportation"
    assert suggestion.confidence == 0.9


def test_amount_boundary_for_income():
    assert categorize_transaction("Transfer", Decimal("500")).category == "other"
    assert categorize_transaction("Transfer", Decimal("500.01")).category == "income"


def test_default_suggestion():
    suggestion = categorize_transaction("", Decimal("1"))

    assert suggestion.category == "other"
    assert suggestion.confidence == 0.5
    assert suggestion.suggested_color == "#6b7280"
    assert suggestion.reasoning == "No specific category match found"


async def test_categorize_endpoint(client):
    response = await client.post(
        "/api/v1/ai/categorize",
        json={"description": "Spotify subscription", "amount": "9.99"},
        headers={"X-User-Id": "user-1"},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["category"] == "entertainment"
    assert body["suggested_icon"] == "🎬"


@pytest.mark.parametrize("amount", ["0", "-12.50"])
async def test_categorize_rejects_non_positive_amount(client, amount):
    response = await client.post(
        "/api/v1/ai/categorize",
        json={"description": "Uber", "amount": amount},
        headers={"X-User-Id": "user-1"},
    )
    assert response.status_code == 422
