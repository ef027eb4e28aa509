"""Core interfaces (Protocol classes) for webstatus_backend."""

from webstatus_backend.core.interfaces.cache_backend import RawBytesDataCacher
from webstatus_backend.core.interfaces.serializer import ISerializer
from webstatus_backend.core.interfaces.storage import (
    SearchQueryParser,
    WebFeatureMetadataStorer,
    WPTMetricsStorer,
)

__all__ = [
    "RawBytesDataCacher",
    "ISerializer",
    "SearchQueryParser",
    "WebFeatureMetadataStorer",
    "WPTMetricsStorer",
]
