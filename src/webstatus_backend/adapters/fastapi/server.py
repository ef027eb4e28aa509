"""Request handlers for the cached read operations of the API."""

import logging
import re
from collections.abc import Awaitable
from typing import TypeVar
from urllib.parse import unquote_plus

from webstatus_backend.adapters.fastapi.errors import (
    APIError,
    FeatureGoneAPIError,
    FeatureMovedError,
)
from webstatus_backend.core.entities.api import (
    BaselineStatusMetricsPage,
    BrowserPathParam,
    BrowserReleaseFeatureMetricsPage,
    ChromiumDailyStatsPage,
    Feature,
    FeatureGoneError,
    FeatureGoneErrorType,
    FeatureMetadata,
    FeaturePage,
    GetFeatureMetadataRequestObject,
    GetFeatureRequestObject,
    ListAggregatedBaselineStatusCountsRequestObject,
    ListAggregatedFeatureSupportRequestObject,
    ListAggregatedWPTMetricsRequestObject,
    ListChromiumDailyUsageStatsRequestObject,
    ListFeaturesRequestObject,
    ListFeatureWPTMetricsRequestObject,
    ListMissingOneImplementationCountsRequestObject,
    WPTMetricView,
    WPTRunMetricsPage,
)
from webstatus_backend.core.entities.feature_result import (
    MovedFeatureResult,
    RegularFeatureResult,
    SplitFeatureResult,
)
from webstatus_backend.core.exceptions import (
    InvalidPageTokenError,
    QueryReturnedNoResultsError,
    SearchQueryParseError,
)
from webstatus_backend.core.interfaces.storage import (
    SearchQueryParser,
    WebFeatureMetadataStorer,
    WPTMetricsStorer,
)
from webstatus_backend.core.services.operation_response_caches import (
    OperationResponseCaches,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")

# From the page_size parameter of the backend OpenAPI document.
MAX_PAGE_SIZE = 100

_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def default_browsers() -> list[BrowserPathParam]:
    return [
        BrowserPathParam.CHROME,
        BrowserPathParam.EDGE,
        BrowserPathParam.FIREFOX,
        BrowserPathParam.SAFARI,
    ]


def get_page_size_or_default(page_size: int | None) -> int:
    if page_size is not None and 1 <= page_size <= MAX_PAGE_SIZE:
        return page_size
    return MAX_PAGE_SIZE


def get_wpt_metric_view_or_default(view: WPTMetricView | None) -> WPTMetricView:
    # Default to test counts if not specified.
    return view or WPTMetricView.TEST_COUNTS


def decode_query(q: str) -> str:
    """URL-decode a search query.

    Raises:
        ValueError: If the query holds malformed escapes or invalid UTF-8.
    """
    if _MALFORMED_ESCAPE.search(q):
        raise ValueError(f"malformed escape in {q!r}")
    return unquote_plus(q, errors="strict")


class Server:
    """Handlers for the cacheable read operations.

    Every handler looks up its operation response cache first, queries
    storage on a miss, and offers the 200 payload back to the cache before
    returning it. Cache faults never change the response.
    """

    def __init__(
        self,
        metadata_storer: WebFeatureMetadataStorer,
        wpt_metrics_storer: WPTMetricsStorer,
        operation_response_caches: OperationResponseCaches,
        query_parser: SearchQueryParser,
        base_url: str = "http://localhost:8080",
    ) -> None:
        self._metadata_storer = metadata_storer
        self._wpt_metrics_storer = wpt_metrics_storer
        self._caches = operation_response_caches
        self._query_parser = query_parser
        self._base_url = base_url.rstrip("/")

    async def _call_storage(
        self,
        call: Awaitable[T],
        failure_message: str,
        page_token: str | None = None,
        not_found_message: str | None = None,
    ) -> T:
        """Await a storage call, mapping its errors to API errors."""
        try:
            return await call
        except InvalidPageTokenError as e:
            logger.warning("invalid page token token=%r error=%s", page_token, e)
            raise APIError(400, "invalid page token") from e
        except QueryReturnedNoResultsError as e:
            if not_found_message is None:
                logger.error("%s error=%s", failure_message, e)
                raise APIError(500, failure_message) from e
            raise APIError(404, not_found_message) from e
        except Exception as e:
            logger.error("%s error=%s", failure_message, e)
            raise APIError(500, failure_message) from e

    async def get_feature(self, request: GetFeatureRequestObject) -> Feature:
        cache = self._caches.get_feature_cache
        cached = await cache.lookup(request)
        if cached is not None:
            return cached

        result = await self._call_storage(
            self._wpt_metrics_storer.get_feature(
                request.feature_id,
                get_wpt_metric_view_or_default(request.params.wpt_metric_view),
                default_browsers(),
            ),
            "unable to get feature",
            not_found_message=f"feature id {request.feature_id} is not found",
        )

        if isinstance(result, RegularFeatureResult):
            await cache.attempt_cache(request, result.feature)
            return result.feature
        if isinstance(result, MovedFeatureResult):
            raise FeatureMovedError(
                f"{self._base_url}/v1/features/{result.new_feature_id}"
            )
        if isinstance(result, SplitFeatureResult):
            raise FeatureGoneAPIError(
                FeatureGoneError(
                    code=410,
                    message="feature is split",
                    new_features=list(result.feature_ids),
                    type=FeatureGoneErrorType.SPLIT,
                )
            )

        logger.error(
            "unable to determine if feature is regular, split, or moved result=%r",
            result,
        )
        raise APIError(500, "unable to determine if feature is regular, split, or moved")

    async def list_features(self, request: ListFeaturesRequestObject) -> FeaturePage:
        cache = self._caches.list_features_cache
        cached = await cache.lookup(request)
        if cached is not None:
            return cached

        params = request.params
        node = None
        if params.q is not None:
            try:
                decoded = decode_query(params.q)
            except ValueError as e:
                logger.warning("unable to decode string input=%r error=%s", params.q, e)
                raise APIError(400, "query string cannot be decoded") from e

            try:
                node = self._query_parser.parse(decoded)
            except SearchQueryParseError as e:
                logger.warning("unable to parse query string query=%r error=%s", decoded, e)
                raise APIError(400, "query string does not match expected grammar") from e

        page = await self._call_storage(
            self._wpt_metrics_storer.features_search(
                params.page_token,
                get_page_size_or_default(params.page_size),
                node,
                params.sort,
                get_wpt_metric_view_or_default(params.wpt_metric_view),
                default_browsers(),
            ),
            "unable to get list of features",
            page_token=params.page_token,
        )

        await cache.attempt_cache(request, page)
        return page

    async def get_feature_metadata(
        self, request: GetFeatureMetadataRequestObject
    ) -> FeatureMetadata:
        cache = self._caches.get_feature_metadata_cache
        cached = await cache.lookup(request)
        if cached is not None:
            return cached

        metadata = await self._call_storage(
            self._metadata_storer.get_feature_metadata(request.feature_id),
            "unable to get feature metadata",
            not_found_message=f"feature id {request.feature_id} is not found",
        )

        await cache.attempt_cache(request, metadata)
        return metadata

    async def list_feature_wpt_metrics(
        self, request: ListFeatureWPTMetricsRequestObject
    ) -> WPTRunMetricsPage:
        cache = self._caches.list_feature_wpt_metrics_cache
        cached = await cache.lookup(request)
        if cached is not None:
            return cached

        params = request.params
        page = await self._call_storage(
            self._wpt_metrics_storer.list_metrics_for_feature_id_browser_and_channel(
                request.feature_id,
                request.browser,
                request.channel,
                request.metric_view,
                params.start_at,
                params.end_at,
                get_page_size_or_default(params.page_size),
                params.page_token,
            ),
            "unable to get feature metrics",
            page_token=params.page_token,
        )

        await cache.attempt_cache(request, page)
        return page

    async def list_chromium_daily_usage_stats(
        self, request: ListChromiumDailyUsageStatsRequestObject
    ) -> ChromiumDailyStatsPage:
        cache = self._caches.list_chromium_daily_usage_stats_cache
        cached = await cache.lookup(request)
        if cached is not None:
            return cached

        params = request.params
        page = await self._call_storage(
            self._wpt_metrics_storer.list_chromium_daily_usage_stats(
                request.feature_id,
                params.start_at,
                params.end_at,
                get_page_size_or_default(params.page_size),
                params.page_token,
            ),
            "unable to get chromium usage metrics",
            page_token=params.page_token,
        )

        await cache.attempt_cache(request, page)
        return page

    async def list_aggregated_feature_support(
        self, request: ListAggregatedFeatureSupportRequestObject
    ) -> BrowserReleaseFeatureMetricsPage:
        cache = self._caches.list_aggregated_feature_support_cache
        cached = await cache.lookup(request)
        if cached is not None:
            return cached

        params = request.params
        page = await self._call_storage(
            self._wpt_metrics_storer.list_browser_feature_count_metric(
                request.browser,
                params.start_at,
                params.end_at,
                get_page_size_or_default(params.page_size),
                params.page_token,
            ),
            "unable to get feature support metrics",
            page_token=params.page_token,
        )

        await cache.attempt_cache(request, page)
        return page

    async def list_missing_one_implementation_counts(
        self, request: ListMissingOneImplementationCountsRequestObject
    ) -> BrowserReleaseFeatureMetricsPage:
        cache = self._caches.list_missing_one_implementation_counts_cache
        cached = await cache.lookup(request)
        if cached is not None:
            return cached

        params = request.params
        other_browsers = [b for b in params.browser if b != request.browser]
        if not other_browsers:
            raise APIError(400, "at least one other browser is required")

        page = await self._call_storage(
            self._wpt_metrics_storer.list_missing_one_impl_counts(
                request.browser,
                other_browsers,
                params.start_at,
                params.end_at,
                get_page_size_or_default(params.page_size),
                params.page_token,
            ),
            "unable to get missing one implementation metrics",
            page_token=params.page_token,
        )

        await cache.attempt_cache(request, page)
        return page

    async def list_aggregated_wpt_metrics(
        self, request: ListAggregatedWPTMetricsRequestObject
    ) -> WPTRunMetricsPage:
        cache = self._caches.list_aggregated_wpt_metrics_cache
        cached = await cache.lookup(request)
        if cached is not None:
            return cached

        params = request.params
        page = await self._call_storage(
            self._wpt_metrics_storer.list_metrics_over_time_with_aggregated_totals(
                params.feature_ids or [],
                request.browser,
                request.channel,
                request.metric_view,
                params.start_at,
                params.end_at,
                get_page_size_or_default(params.page_size),
                params.page_token,
            ),
            "unable to get aggregated metrics",
            page_token=params.page_token,
        )

        await cache.attempt_cache(request, page)
        return page

    async def list_aggregated_baseline_status_counts(
        self, request: ListAggregatedBaselineStatusCountsRequestObject
    ) -> BaselineStatusMetricsPage:
        cache = self._caches.list_aggregated_baseline_status_counts_cache
        cached = await cache.lookup(request)
        if cached is not None:
            return cached

        params = request.params
        page = await self._call_storage(
            self._wpt_metrics_storer.list_baseline_status_counts(
                params.start_at,
                params.end_at,
                get_page_size_or_default(params.page_size),
                params.page_token,
            ),
            "unable to get baseline status metrics",
            page_token=params.page_token,
        )

        await cache.attempt_cache(request, page)
        return page
