"""Serializers."""

from webstatus_backend.infrastructure.serializers.json import JsonSerializer

__all__ = ["JsonSerializer"]
