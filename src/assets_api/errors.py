"""Error types raised by the Assets API and the handlers that render them."""

import logging

from fastapi import (
    Request,
    status,
)
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AssetsApiError(Exception):
    """Base class for errors that map onto an HTTP status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(AssetsApiError):
    """Missing or malformed required input, e.g. no file part or no visibility."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundError(AssetsApiError):
    """No document exists at the given (id, visibility) coordinates."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, asset_id: str, visibility: str) -> None:
        self.asset_id = asset_id
        self.visibility = visibility
        super().__init__(f"Asset '{asset_id}' not found in partition '{visibility}'")


class PayloadTooLargeError(AssetsApiError):
    """Upload exceeds the configured size ceiling."""

    status_code = 413

    def __init__(self, max_bytes: int) -> None:
        self.max_bytes = max_bytes
        super().__init__(f"File too large: uploads are limited to {max_bytes} bytes")


class DependencyError(AssetsApiError):
    """Any failure reported by S3 or DynamoDB. The message is the store's own."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


async def handle_assets_api_errors(request: Request, exc: AssetsApiError) -> JSONResponse:
    """Render an :class:`AssetsApiError` as ``{"detail": message}``."""
    if exc.status_code >= status.HTTP_500_INTERNAL_SERVER_ERROR:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed query, form or body input is a 400, same as any other validation failure."""
    errors = exc.errors()
    logger.warning(f"{request.method} {request.url.path} rejected: {errors}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_errors(errors)},
    )


def jsonable_errors(errors) -> list:
    # ctx may carry the original exception object, which is not JSON serializable
    return [
        {key: value for key, value in error.items() if key in ("type", "loc", "msg")}
        for error in errors
    ]


async def handle_broad_exceptions(request: Request, call_next):
    """Turn anything uncaught into a 500 after logging it."""
    try:
        return await call_next(request)
    except Exception as err:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}: {err}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )
