"""FastAPI application exposing the backend API."""

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, FastAPI, Query

from webstatus_backend.adapters.fastapi.errors import register_exception_handlers
from webstatus_backend.adapters.fastapi.server import Server
from webstatus_backend.core.entities.api import (
    BaselineStatusMetricsPage,
    BrowserPathParam,
    BrowserReleaseFeatureMetricsPage,
    ChannelPathParam,
    ChromiumDailyStatsPage,
    Feature,
    FeatureMetadata,
    FeaturePage,
    GetFeatureMetadataRequestObject,
    GetFeatureParams,
    GetFeatureRequestObject,
    ListAggregatedBaselineStatusCountsParams,
    ListAggregatedBaselineStatusCountsRequestObject,
    ListAggregatedFeatureSupportParams,
    ListAggregatedFeatureSupportRequestObject,
    ListAggregatedWPTMetricsParams,
    ListAggregatedWPTMetricsRequestObject,
    ListChromiumDailyUsageStatsParams,
    ListChromiumDailyUsageStatsRequestObject,
    ListFeaturesParams,
    ListFeaturesParamsSort,
    ListFeaturesRequestObject,
    ListFeatureWPTMetricsParams,
    ListFeatureWPTMetricsRequestObject,
    ListMissingOneImplementationCountsParams,
    ListMissingOneImplementationCountsRequestObject,
    WPTMetricView,
    WPTRunMetricsPage,
)

logger = logging.getLogger(__name__)


def _metric_view_or_none(value: str | None) -> WPTMetricView | None:
    # Unknown views map to None so the handler default applies.
    if value is None:
        return None
    try:
        return WPTMetricView(value)
    except ValueError:
        logger.warning("ignoring unknown wpt metric view value=%r", value)
        return None


def create_router(server: Server) -> APIRouter:
    """Create the /v1 routes backed by the given server."""
    router = APIRouter(prefix="/v1")

    @router.get("/features", response_model_exclude_none=True)
    async def list_features(
        page_token: str | None = None,
        page_size: int | None = None,
        wpt_metric_view: str | None = None,
        q: str | None = Query(default=None, min_length=1),
        sort: ListFeaturesParamsSort | None = None,
    ) -> FeaturePage:
        return await server.list_features(
            ListFeaturesRequestObject(
                params=ListFeaturesParams(
                    page_token=page_token,
                    page_size=page_size,
                    wpt_metric_view=_metric_view_or_none(wpt_metric_view),
                    q=q,
                    sort=sort,
                )
            )
        )

    @router.get("/features/{feature_id}", response_model_exclude_none=True)
    async def get_feature(
        feature_id: str,
        wpt_metric_view: str | None = None,
    ) -> Feature:
        return await server.get_feature(
            GetFeatureRequestObject(
                feature_id=feature_id,
                params=GetFeatureParams(
                    wpt_metric_view=_metric_view_or_none(wpt_metric_view)
                ),
            )
        )

    @router.get(
        "/features/{feature_id}/feature-metadata",
        response_model_exclude_none=True,
    )
    async def get_feature_metadata(feature_id: str) -> FeatureMetadata:
        return await server.get_feature_metadata(
            GetFeatureMetadataRequestObject(feature_id=feature_id)
        )

    @router.get(
        "/features/{feature_id}/stats/wpt/browsers/{browser}/channels/{channel}/{metric_view}",
        response_model_exclude_none=True,
    )
    async def list_feature_wpt_metrics(
        feature_id: str,
        browser: BrowserPathParam,
        channel: ChannelPathParam,
        metric_view: WPTMetricView,
        start_at: date = Query(alias="startAt"),
        end_at: date = Query(alias="endAt"),
        page_token: str | None = None,
        page_size: int | None = None,
    ) -> WPTRunMetricsPage:
        return await server.list_feature_wpt_metrics(
            ListFeatureWPTMetricsRequestObject(
                feature_id=feature_id,
                browser=browser,
                channel=channel,
                metric_view=metric_view,
                params=ListFeatureWPTMetricsParams(
                    start_at=start_at,
                    end_at=end_at,
                    page_token=page_token,
                    page_size=page_size,
                ),
            )
        )

    @router.get(
        "/features/{feature_id}/stats/usage/chrome/daily_stats",
        response_model_exclude_none=True,
    )
    async def list_chromium_daily_usage_stats(
        feature_id: str,
        start_at: date = Query(alias="startAt"),
        end_at: date = Query(alias="endAt"),
        page_token: str | None = None,
        page_size: int | None = None,
    ) -> ChromiumDailyStatsPage:
        return await server.list_chromium_daily_usage_stats(
            ListChromiumDailyUsageStatsRequestObject(
                feature_id=feature_id,
                params=ListChromiumDailyUsageStatsParams(
                    start_at=start_at,
                    end_at=end_at,
                    page_token=page_token,
                    page_size=page_size,
                ),
            )
        )

    @router.get(
        "/stats/features/browsers/{browser}/feature_counts",
        response_model_exclude_none=True,
    )
    async def list_aggregated_feature_support(
        browser: BrowserPathParam,
        start_at: date = Query(alias="startAt"),
        end_at: date = Query(alias="endAt"),
        page_token: str | None = None,
        page_size: int | None = None,
    ) -> BrowserReleaseFeatureMetricsPage:
        return await server.list_aggregated_feature_support(
            ListAggregatedFeatureSupportRequestObject(
                browser=browser,
                params=ListAggregatedFeatureSupportParams(
                    start_at=start_at,
                    end_at=end_at,
                    page_token=page_token,
                    page_size=page_size,
                ),
            )
        )

    @router.get(
        "/stats/features/browsers/{browser}/missing_one_implementation_counts",
        response_model_exclude_none=True,
    )
    async def list_missing_one_implementation_counts(
        browser: BrowserPathParam,
        other_browsers: list[BrowserPathParam] = Query(alias="browser"),
        start_at: date = Query(alias="startAt"),
        end_at: date = Query(alias="endAt"),
        page_token: str | None = None,
        page_size: int | None = None,
    ) -> BrowserReleaseFeatureMetricsPage:
        return await server.list_missing_one_implementation_counts(
            ListMissingOneImplementationCountsRequestObject(
                browser=browser,
                params=ListMissingOneImplementationCountsParams(
                    start_at=start_at,
                    end_at=end_at,
                    page_token=page_token,
                    page_size=page_size,
                    browser=other_browsers,
                ),
            )
        )

    @router.get(
        "/stats/wpt/browsers/{browser}/channels/{channel}/{metric_view}",
        response_model_exclude_none=True,
    )
    async def list_aggregated_wpt_metrics(
        browser: BrowserPathParam,
        channel: ChannelPathParam,
        metric_view: WPTMetricView,
        start_at: date = Query(alias="startAt"),
        end_at: date = Query(alias="endAt"),
        page_token: str | None = None,
        page_size: int | None = None,
        feature_ids: list[str] | None = Query(default=None, alias="featureIds"),
    ) -> WPTRunMetricsPage:
        return await server.list_aggregated_wpt_metrics(
            ListAggregatedWPTMetricsRequestObject(
                browser=browser,
                channel=channel,
                metric_view=metric_view,
                params=ListAggregatedWPTMetricsParams(
                    start_at=start_at,
                    end_at=end_at,
                    page_token=page_token,
                    page_size=page_size,
                    feature_ids=feature_ids,
                ),
            )
        )

    @router.get(
        "/stats/baseline_status/low_date_feature_counts",
        response_model_exclude_none=True,
    )
    async def list_aggregated_baseline_status_counts(
        start_at: date = Query(alias="startAt"),
        end_at: date = Query(alias="endAt"),
        page_token: str | None = None,
        page_size: int | None = None,
    ) -> BaselineStatusMetricsPage:
        return await server.list_aggregated_baseline_status_counts(
            ListAggregatedBaselineStatusCountsRequestObject(
                params=ListAggregatedBaselineStatusCountsParams(
                    start_at=start_at,
                    end_at=end_at,
                    page_token=page_token,
                    page_size=page_size,
                ),
            )
        )

    return router


def create_app(
    server: Server,
    cache_backend: Any | None = None,
    lifespan: Any | None = None,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        server: The request handlers.
        cache_backend: The shared byte cache backend, reported by /health
            when it supports ping().
        lifespan: Optional lifespan context manager for startup/shutdown.

    Returns:
        The ASGI application.
    """
    app = FastAPI(
        title="webstatus.dev API",
        description="Web platform feature status API",
        version="1.0.0",
        lifespan=lifespan,
    )
    register_exception_handlers(app)
    app.include_router(create_router(server))

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        cache_status = "not configured"
        ping = getattr(cache_backend, "ping", None)
        if ping is not None:
            try:
                await ping()
                cache_status = "healthy"
            except Exception as e:
                logger.warning("cache health check failed error=%s", e)
                cache_status = f"unhealthy: {e}"

        return {"status": "healthy", "cache": cache_status}

    return app
