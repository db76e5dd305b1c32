"""Analytics API tests."""

from decimal import Decimal

from finsight.utils.clock import utcnow

USER = {"X-User-Id": "user-1"}


async def _record(client, amount, type="EXPENSE", category=None, headers=USER):
    payload = {"amount": amount, "type": type, "date": utcnow().isoformat()}
    if category is not None:
        payload["category"] = category
    response = await client.post("/api/v1/transactions", json=payload, headers=headers)
    assert response.status_code == 201
    return response.json()


async def test_analytics_requires_user(client):
    response = await client.get("/api/v1/analytics")
    assert response.status_code == 401


async def test_analytics_miss_then_hit(client):
    await _record(client, 50, category="groceries")
    await _record(client, 30, category={"name": "Dining"})
    await _record(client, 20, category="Groceries")

    first = await client.get("/api/v1/analytics", params={"period": "month"}, headers=USER)
    assert first.status_code == 200
    assert first.headers["X-Cache-Status"] == "MISS"
    assert first.headers["Cache-Control"] == "public, max-age=300"

    analytics = first.json()["analytics"]
    assert analytics["summary"]["topCategory"] == "Groceries"
    assert Decimal(analytics["summary"]["totalExpenses"]) == Decimal("100")
    assert analytics["summary"]["transactionCount"] == 3
    assert analytics["summary"]["period"] == "month"
    breakdown = analytics["categoryBreakdown"]
    assert [b["category"] for b in breakdown] == ["Groceries", "Dining"]
    assert breakdown[0]["percentage"] == 70.0
    assert Decimal(breakdown[0]["avgAmount"]) == Decimal("35")
    assert len(analytics["timeSeries"]) >= 1

    second = await client.get("/api/v1/analytics", params={"period": "month"}, headers=USER)
    assert second.headers["X-Cache-Status"] == "HIT"
    assert second.json() == first.json()


async def test_analytics_recomputes_after_ttl(client, clock):
    await _record(client, 40, category="travel")
    await client.get("/api/v1/analytics", headers=USER)

    await _record(client, 60, category="travel")
    cached = await client.get("/api/v1/analytics", headers=USER)
    assert cached.json()["analytics"]["summary"]["transactionCount"] == 1

    clock.advance(300)
    fresh = await client.get("/api/v1/analytics", headers=USER)
    assert fresh.headers["X-Cache-Status"] == "MISS"
    assert fresh.json()["analytics"]["summary"]["transactionCount"] == 2


async def test_empty_analytics(client):
    response = await client.get("/api/v1/analytics", params={"period": "year"}, headers=USER)

    assert response.headers["X-Cache-Status"] == "MISS-EMPTY"
    assert response.headers["Cache-Control"] == "public, max-age=60"
    analytics = response.json()["analytics"]
    assert analytics["timeSeries"] == []
    assert analytics["categoryBreakdown"] == []
    assert analytics["trends"] == []
    assert analytics["summary"]["topCategory"] == "None"
    assert Decimal(analytics["summary"]["netIncome"]) == 0
    assert analytics["insights"]


async def test_unknown_period_falls_back_to_month(client):
    response = await client.get("/api/v1/analytics", params={"period": "decade"}, headers=USER)
    assert response.json()["analytics"]["summary"]["period"] == "month"


async def test_users_do_not_share_analytics(client):
    await _record(client, 10, headers={"X-User-Id": "alice"})

    response = await client.get("/api/v1/analytics", headers={"X-User-Id": "bob"})

    assert response.headers["X-Cache-Status"] == "MISS-EMPTY"
    assert response.json()["analytics"]["summary"]["transactionCount"] == 0


async def test_invalidate_cache(client):
    await _record(client, 10)
    await client.get("/api/v1/analytics", headers=USER)
    await client.get("/api/v1/analytics", params={"period": "week"}, headers=USER)

    response = await client.delete("/api/v1/analytics/cache", headers=USER)
    assert response.json() == {"removed": 2}

    again = await client.get("/api/v1/analytics", headers=USER)
    assert again.headers["X-Cache-Status"] == "MISS"


async def test_export_csv(client):
    await _record(client, 12.5)
    await _record(client, 100, type="INCOME")

    response = await client.get("/api/v1/analytics/export", params={"period": "week"}, headers=USER)

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    assert 'filename="analytics-week.csv"' in response.headers["content-disposition"]
    lines = response.text.splitlines()
    assert lines[0] == "Date,Income,Expenses,Net,Transactions"
    assert lines[1].endswith(",100.00,12.50,87.50,2")


async def test_analytics_failure_returns_500(client, monkeypatch):
    from finsight.services import analytics_service

    def boom(*args, **kwargs):
        raise RuntimeError("aggregation exploded")

    monkeypatch.setattr(analytics_service, "generate_analytics", boom)

    response = await client.get("/api/v1/analytics", headers=USER)

    assert response.status_code == 500
    assert response.json()["detail"]["error"] == "Failed to generate analytics"
