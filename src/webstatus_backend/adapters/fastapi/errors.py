"""Error responses raised by the HTTP handlers."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, RedirectResponse

from webstatus_backend.core.entities.api import BasicErrorModel, FeatureGoneError


class APIError(Exception):
    """A handler outcome rendered as a BasicErrorModel response."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message

    def to_model(self) -> BasicErrorModel:
        return BasicErrorModel(code=self.status_code, message=self.message)


class FeatureMovedError(Exception):
    """The requested feature moved to a new identifier."""

    def __init__(self, location: str) -> None:
        super().__init__(location)
        self.location = location


class FeatureGoneAPIError(Exception):
    """The requested feature no longer exists, e.g. after a split."""

    def __init__(self, body: FeatureGoneError) -> None:
        super().__init__(body.message)
        self.body = body


def _json(status_code: int, model: BasicErrorModel | FeatureGoneError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=model.model_dump(mode="json", by_alias=True, exclude_none=True),
    )


async def _handle_api_error(_: Request, exc: APIError) -> JSONResponse:
    return _json(exc.status_code, exc.to_model())


async def _handle_feature_moved(_: Request, exc: FeatureMovedError) -> RedirectResponse:
    return RedirectResponse(url=exc.location, status_code=301)


async def _handle_feature_gone(_: Request, exc: FeatureGoneAPIError) -> JSONResponse:
    return _json(410, exc.body)


def register_exception_handlers(app: FastAPI) -> None:
    """Render handler errors in the API's error format."""
    app.add_exception_handler(APIError, _handle_api_error)  # type: ignore[arg-type]
    app.add_exception_handler(FeatureMovedError, _handle_feature_moved)  # type: ignore[arg-type]
    app.add_exception_handler(FeatureGoneAPIError, _handle_feature_gone)  # type: ignore[arg-type]
