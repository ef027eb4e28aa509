"""FastAPI adapter: HTTP handlers and application factory."""

from webstatus_backend.adapters.fastapi.app import create_app, create_router
from webstatus_backend.adapters.fastapi.errors import (
    APIError,
    FeatureGoneAPIError,
    FeatureMovedError,
)
from webstatus_backend.adapters.fastapi.server import Server

__all__ = [
    "create_app",
    "create_router",
    "Server",
    "APIError",
    "FeatureGoneAPIError",
    "FeatureMovedError",
]
