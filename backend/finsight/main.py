"""Finsight API: Main entry point."""

import asyncio
import contextlib
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from finsight import __version__
from finsight.config import settings
from finsight.core.logging_config import configure_logging
from finsight.core.middleware import RequestLoggingMiddleware
from finsight.services.analytics_cache import AnalyticsCache
from finsight.services.transaction_store import TransactionStore

configure_logging()
logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: start the cache sweeper, stop it on shutdown."""
    # Startup
    logger.info("Starting Finsight API", env=settings.app_env)
    sweeper = asyncio.create_task(app.state.analytics_cache.run_sweeper())
    yield
    # Shutdown
    logger.info("Shutting down Finsight API")
    sweeper.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await sweeper
    app.state.analytics_cache.clear()


app = FastAPI(
    title="Finsight API",
    description="Personal finance dashboard API: transactions, analytics, receipts",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    redirect_slashes=False,
)

# One cache and one store per process, shared by every request
app.state.analytics_cache = AnalyticsCache(
    ttl=settings.analytics_cache_ttl_seconds,
    empty_ttl=settings.analytics_empty_cache_ttl_seconds,
    sweep_interval=settings.analytics_cache_sweep_interval_seconds,
)
app.state.transaction_store = TransactionStore()

# ── Middleware ─────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Cache-Status", "X-Request-Id"],
)
app.add_middleware(RequestLoggingMiddleware)


# ── Health Check ──────────────────────────────────
@app.get("/health", tags=["system"])
async def health_check():
    """Liveness probe: always returns healthy if the process is running."""
    return {"status": "healthy", "version": __version__}


@app.get("/ready", tags=["system"])
async def readiness_check():
    """Readiness probe: reports in-memory state."""
    checks = {
        "api": "ok",
        "analytics_cache_entries": len(app.state.analytics_cache),
        "transactions": app.state.transaction_store.count(),
    }
    return {"status": "ready", "checks": checks}


# ── API Routes ────────────────────────────────────
from finsight.api.v1 import ai, analytics, receipts, transactions  # noqa: E402

app.include_router(transactions.router, prefix="/api/v1/transactions", tags=["transactions"])
app.include_router(analytics.router, prefix="/api/v1/analytics", tags=["analytics"])
app.include_router(receipts.router, prefix="/api/v1/receipts", tags=["receipts"])
app.include_router(ai.router, prefix="/api/v1/ai", tags=["ai"])
