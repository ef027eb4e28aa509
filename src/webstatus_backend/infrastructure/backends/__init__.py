"""Byte cache backends."""

from webstatus_backend.infrastructure.backends.memory import InMemoryCacheBackend
from webstatus_backend.infrastructure.backends.valkey import ValkeyCacheBackend

__all__ = [
    "InMemoryCacheBackend",
    "ValkeyCacheBackend",
]
