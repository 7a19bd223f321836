"""FastAPI exception handlers for converting QuoteError to HTTP responses.

Domain errors are returned with the ToolError JSON body. Status mapping:
- 400 Bad Request: invalid stay window
- 404 Not Found: unknown campground, site or site class
- 409 Conflict: promotion usage limit reached at redemption
- 422 Unprocessable Entity: no rate configured for a night, and request
  validation failures

Usage:
    from campquote_api.exceptions import register_exception_handlers
    register_exception_handlers(app)
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_422_UNPROCESSABLE_ENTITY,
    HTTP_500_INTERNAL_SERVER_ERROR,
)

from campquote.models.errors import ErrorCode, QuoteError
from campquote_api.models.common import format_validation_errors

logger = logging.getLogger(__name__)

ERROR_CODE_TO_HTTP_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_STAY_WINDOW: HTTP_400_BAD_REQUEST,
    ErrorCode.SITE_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.CAMPGROUND_NOT_FOUND: HTTP_404_NOT_FOUND,
    ErrorCode.USAGE_LIMIT_REACHED: HTTP_409_CONFLICT,
    ErrorCode.RATE_NOT_RESOLVABLE: HTTP_422_UNPROCESSABLE_ENTITY,
}


def get_http_status_for_error(code: ErrorCode) -> int:
    """Get HTTP status code for an ErrorCode, defaulting to 400."""
    return ERROR_CODE_TO_HTTP_STATUS.get(code, HTTP_400_BAD_REQUEST)


async def quote_error_handler(request: Request, exc: QuoteError) -> JSONResponse:
    """Convert a QuoteError to a ToolError JSON response.

    Args:
        request: Unused
        exc: The QuoteError exception

    Returns:
        JSONResponse with error details and the mapped status code.
    """
    return JSONResponse(
        status_code=get_http_status_for_error(exc.code),
        content=exc.to_tool_error().model_dump(mode="json"),
    )


async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return request validation failures as ValidationErrorResponse."""
    return JSONResponse(
        status_code=HTTP_422_UNPROCESSABLE_ENTITY,
        content=format_validation_errors(list(exc.errors())).model_dump(mode="json"),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Fallback for unexpected exceptions; internal details are not exposed."""
    logger.exception("Unhandled exception: %s", exc)
    return JSONResponse(
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "error_code": "ERR_INTERNAL",
            "message": "The quote service failed unexpectedly",
            "recovery": "Retry the request; if it keeps failing, report the correlation id",
            "details": None,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the domain, validation and fallback handlers on ``app``."""
    app.add_exception_handler(QuoteError, quote_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, generic_exception_handler)
