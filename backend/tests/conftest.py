"""Shared test fixtures."""

from datetime import datetime

import pytest
from httpx import ASGITransport, AsyncClient

from finsight.main import app
from finsight.schemas.transaction import Transaction
from finsight.services.analytics_cache import AnalyticsCache
from finsight.services.transaction_store import TransactionStore

# Fixed "now" for engine tests: a Monday, mid-month, first month of Q4
NOW = datetime(2026, 10, 19, 12, 0, 0)


class FakeClock:
    """Monotonic clock the tests move by hand."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def analytics_cache(clock):
    return AnalyticsCache(ttl=300, empty_ttl=60, sweep_interval=600, clock=clock)


@pytest.fixture
def transaction_store():
    return TransactionStore()


@pytest.fixture
def make_transaction():
    """Build a validated transaction; ``date`` defaults to NOW."""

    def _make(amount, type="EXPENSE", date=NOW, category=None, **extra):
        return Transaction(amount=amount, type=type, date=date, category=category, **extra)

    return _make


@pytest.fixture
async def client(analytics_cache, transaction_store):
    """Async test client for the FastAPI app, with a fresh cache and store."""
    previous = (app.state.analytics_cache, app.state.transaction_store)
    app.state.analytics_cache = analytics_cache
    app.state.transaction_store = transaction_store
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.state.analytics_cache, app.state.transaction_store = previous
