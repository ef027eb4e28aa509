"""Domain services for webstatus_backend."""

from webstatus_backend.core.services.operation_response_cache import (
    LookupOutcome,
    OperationResponseCache,
)
from webstatus_backend.core.services.operation_response_caches import (
    OperationResponseCaches,
    init_operation_response_caches,
)

__all__ = [
    "LookupOutcome",
    "OperationResponseCache",
    "OperationResponseCaches",
    "init_operation_response_caches",
]
