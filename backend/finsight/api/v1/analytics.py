"""Analytics API routes: dashboard analytics and CSV export."""

import structlog
from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import PlainTextResponse

from finsight.api.deps import get_analytics_cache, get_analytics_service, get_current_user
from finsight.config import settings
from finsight.core.exceptions import AnalyticsError
from finsight.schemas.analytics import AnalyticsResponse, Period
from finsight.services.analytics_cache import AnalyticsCache
from finsight.services.analytics_service import AnalyticsService

logger = structlog.get_logger()

router = APIRouter()


@router.get("", response_model=AnalyticsResponse)
async def get_analytics(
    response: Response,
    period: str | None = Query(None, description="week, month, quarter or year (default month)"),
    current_user: str = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Time series, category breakdown, trends, summary and insights for a period.

    Served from a per-user cache; ``X-Cache-Status`` tells whether this
    response was a HIT, a MISS or a MISS-EMPTY (no transactions in range).
    """
    try:
        cached = service.get_analytics(current_user, Period.parse(period))
    except Exception as e:
        logger.error(
            "analytics_failed",
            user_id=current_user,
            period=period,
            error=str(e),
            error_type=type(e).__name__,
        )
        raise AnalyticsError(str(e) if settings.app_debug else None) from e

    response.headers["Cache-Control"] = cached.cache_control
    response.headers["X-Cache-Status"] = cached.cache_status.value
    return AnalyticsResponse(analytics=cached.result)


@router.get("/export", response_class=PlainTextResponse)
async def export_analytics(
    period: str | None = None,
    current_user: str = Depends(get_current_user),
    service: AnalyticsService = Depends(get_analytics_service),
):
    """Download the period's time series as CSV."""
    parsed = Period.parse(period)
    content = service.export_csv(current_user, parsed)
    return PlainTextResponse(
        content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="analytics-{parsed.value}.csv"'},
    )


@router.delete("/cache")
async def invalidate_analytics_cache(
    current_user: str = Depends(get_current_user),
    cache: AnalyticsCache = Depends(get_analytics_cache),
):
    """Drop the caller's cached analytics so the next request recomputes."""
    removed = cache.invalidate(current_user)
    logger.info("analytics_cache_invalidated", user_id=current_user, removed=removed)
    return {"removed": removed}
