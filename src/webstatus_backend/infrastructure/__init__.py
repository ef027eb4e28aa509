"""Infrastructure layer implementations for webstatus_backend."""

from webstatus_backend.infrastructure.backends import (
    InMemoryCacheBackend,
    ValkeyCacheBackend,
)
from webstatus_backend.infrastructure.serializers import JsonSerializer

__all__ = [
    "InMemoryCacheBackend",
    "ValkeyCacheBackend",
    "JsonSerializer",
]
