"""Request and response types of the backend API.

These mirror the backend OpenAPI document. Response fields are declared
in alphabetical order of their serialization names, and request objects
nest their query parameters under ``Params``, so the canonical JSON of a
value is stable across releases. Optional fields left as None are
omitted from serialized output.
"""

import datetime as dt
from enum import Enum
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializerFunctionWrapHandler,
    field_serializer,
)

from webstatus_backend.utils.mappings import sort_mapping_keys


class APIModel(BaseModel):
    """Base model for API value types.

    Mapping fields serialize with their keys sorted, so equal maps always
    produce equal bytes. Model fields keep their declared order.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    @field_serializer("*", mode="wrap")
    def serialize_sorted_mappings(
        self, value: Any, handler: SerializerFunctionWrapHandler
    ) -> Any:
        result = handler(value)
        if isinstance(value, dict):
            return sort_mapping_keys(result)
        return result


# Enums


class BrowserPathParam(str, Enum):
    CHROME = "chrome"
    EDGE = "edge"
    FIREFOX = "firefox"
    SAFARI = "safari"


class ChannelPathParam(str, Enum):
    EXPERIMENTAL = "experimental"
    STABLE = "stable"


class WPTMetricView(str, Enum):
    """The desired view of the WPT data."""

    SUBTEST_COUNTS = "subtest_counts"
    TEST_COUNTS = "test_counts"


class BaselineInfoStatus(str, Enum):
    LIMITED = "limited"
    NEWLY = "newly"
    WIDELY = "widely"


class BrowserImplementationStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class FeatureGoneErrorType(str, Enum):
    SPLIT = "split"


class ListFeaturesParamsSort(str, Enum):
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"
    BASELINE_STATUS_ASC = "baseline_status_asc"
    BASELINE_STATUS_DESC = "baseline_status_desc"
    STABLE_CHROME_ASC = "stable_chrome_asc"
    STABLE_CHROME_DESC = "stable_chrome_desc"
    STABLE_SAFARI_ASC = "stable_safari_asc"
    STABLE_SAFARI_DESC = "stable_safari_desc"
    STABLE_EDGE_ASC = "stable_edge_asc"
    STABLE_EDGE_DESC = "stable_edge_desc"
    STABLE_FIREFOX_ASC = "stable_firefox_asc"
    STABLE_FIREFOX_DESC = "stable_firefox_desc"
    EXPERIMENTAL_CHROME_ASC = "experimental_chrome_asc"
    EXPERIMENTAL_CHROME_DESC = "experimental_chrome_desc"
    EXPERIMENTAL_SAFARI_ASC = "experimental_safari_asc"
    EXPERIMENTAL_SAFARI_DESC = "experimental_safari_desc"
    EXPERIMENTAL_EDGE_ASC = "experimental_edge_asc"
    EXPERIMENTAL_EDGE_DESC = "experimental_edge_desc"
    EXPERIMENTAL_FIREFOX_ASC = "experimental_firefox_asc"
    EXPERIMENTAL_FIREFOX_DESC = "experimental_firefox_desc"


# Response payloads


class PageMetadata(APIModel):
    next_page_token: str | None = None


class PageMetadataWithTotal(APIModel):
    next_page_token: str | None = None
    total: int


class BaselineInfo(APIModel):
    """Baseline information for a feature."""

    high_date: dt.date | None = None
    low_date: dt.date | None = None
    status: BaselineInfoStatus | None = None


class BrowserImplementation(APIModel):
    date: dt.date | None = None
    status: BrowserImplementationStatus | None = None
    version: str | None = None


class SpecLink(APIModel):
    link: str | None = None


class FeatureSpecInfo(APIModel):
    links: list[SpecLink] | None = None


class WPTFeatureData(APIModel):
    # Unstable key-value pairs about the metric.
    metadata: dict[str, Any] | None = None
    score: float | None = None


class FeatureWPTSnapshots(APIModel):
    experimental: dict[str, WPTFeatureData] | None = None
    stable: dict[str, WPTFeatureData] | None = None


class Feature(APIModel):
    baseline: BaselineInfo | None = None
    browser_implementations: dict[str, BrowserImplementation] | None = None
    feature_id: str
    name: str
    spec: FeatureSpecInfo | None = None
    usage: float | None = None
    wpt: FeatureWPTSnapshots | None = None


class FeaturePage(APIModel):
    data: list[Feature]
    metadata: PageMetadataWithTotal


class CanIUseItem(APIModel):
    id: str | None = None


class CanIUseInfo(APIModel):
    items: list[CanIUseItem] | None = None


class FeatureMetadata(APIModel):
    can_i_use: CanIUseInfo | None = None
    description: str | None = None


class WPTRunMetric(APIModel):
    run_timestamp: dt.datetime
    test_pass_count: int | None = None
    total_tests_count: int | None = None


class WPTRunMetricsPage(APIModel):
    data: list[WPTRunMetric]
    metadata: PageMetadata | None = None


class ChromiumUsageStat(APIModel):
    timestamp: dt.datetime
    usage: float | None = None


class ChromiumDailyStatsPage(APIModel):
    data: list[ChromiumUsageStat]
    metadata: PageMetadata | None = None


class BrowserReleaseFeatureMetric(APIModel):
    count: int | None = None
    timestamp: dt.datetime


class BrowserReleaseFeatureMetricsPage(APIModel):
    data: list[BrowserReleaseFeatureMetric]
    metadata: PageMetadata | None = None


class BaselineStatusMetric(APIModel):
    count: int | None = None
    timestamp: dt.datetime


class BaselineStatusMetricsPage(APIModel):
    data: list[BaselineStatusMetric]
    metadata: PageMetadata | None = None


class BasicErrorModel(APIModel):
    code: int
    message: str


class FeatureGoneError(APIModel):
    code: int
    message: str
    new_features: list[str]
    type: FeatureGoneErrorType


# Request objects


class GetFeatureParams(APIModel):
    wpt_metric_view: WPTMetricView | None = None


class GetFeatureRequestObject(APIModel):
    feature_id: str
    params: GetFeatureParams = Field(default_factory=GetFeatureParams, alias="Params")


class ListFeaturesParams(APIModel):
    page_token: str | None = None
    page_size: int | None = None
    wpt_metric_view: WPTMetricView | None = None
    q: str | None = None
    sort: ListFeaturesParamsSort | None = None


class ListFeaturesRequestObject(APIModel):
    params: ListFeaturesParams = Field(
        default_factory=ListFeaturesParams, alias="Params"
    )


class GetFeatureMetadataRequestObject(APIModel):
    feature_id: str


class DateRangePageParams(APIModel):
    """Query parameters shared by the time series operations."""

    start_at: dt.date = Field(alias="startAt")
    end_at: dt.date = Field(alias="endAt")
    page_token: str | None = None
    page_size: int | None = None


class ListFeatureWPTMetricsParams(DateRangePageParams):
    pass


class ListFeatureWPTMetricsRequestObject(APIModel):
    feature_id: str
    browser: BrowserPathParam
    channel: ChannelPathParam
    metric_view: WPTMetricView
    params: ListFeatureWPTMetricsParams = Field(alias="Params")


class ListChromiumDailyUsageStatsParams(DateRangePageParams):
    pass


class ListChromiumDailyUsageStatsRequestObject(APIModel):
    feature_id: str
    params: ListChromiumDailyUsageStatsParams = Field(alias="Params")


class ListAggregatedFeatureSupportParams(DateRangePageParams):
    pass


class ListAggregatedFeatureSupportRequestObject(APIModel):
    browser: BrowserPathParam
    params: ListAggregatedFeatureSupportParams = Field(alias="Params")


class ListMissingOneImplementationCountsParams(DateRangePageParams):
    # Browsers to compare the target browser against.
    browser: list[BrowserPathParam]


class ListMissingOneImplementationCountsRequestObject(APIModel):
    browser: BrowserPathParam
    params: ListMissingOneImplementationCountsParams = Field(alias="Params")


class ListAggregatedWPTMetricsParams(DateRangePageParams):
    feature_ids: list[str] | None = Field(default=None, alias="featureIds")


class ListAggregatedWPTMetricsRequestObject(APIModel):
    browser: BrowserPathParam
    channel: ChannelPathParam
    metric_view: WPTMetricView
    params: ListAggregatedWPTMetricsParams = Field(alias="Params")


class ListAggregatedBaselineStatusCountsParams(DateRangePageParams):
    pass


class ListAggregatedBaselineStatusCountsRequestObject(APIModel):
    params: ListAggregatedBaselineStatusCountsParams = Field(alias="Params")
