"""Shared API response models.

Domain models (Quote, QuoteRequest, ...) live in campquote.models; this
module holds HTTP-layer concerns only.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# ToolError is the standard error body for domain errors
from campquote.models.errors import ErrorCode, ToolError

__all__ = [
    "ErrorCode",
    "ToolError",
    "ValidationErrorResponse",
    "ValidationErrorDetail",
    "format_validation_errors",
]


class ValidationErrorDetail(BaseModel):
    """Detail of a single validation error."""

    model_config = ConfigDict(strict=True)

    loc: list[str | int] = Field(
        ...,
        description="Path to the field that failed validation",
        examples=[["body", "departure"]],
    )
    msg: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Field required"],
    )
    type: str = Field(
        ...,
        description="Error type identifier",
        examples=["missing"],
    )


class ValidationErrorResponse(BaseModel):
    """Response body for request validation errors (HTTP 422)."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: str = "ERR_VALIDATION"
    message: str = "Request validation failed"
    recovery: str = "Check the request parameters and try again"
    details: list[ValidationErrorDetail] = Field(default_factory=list)


def format_validation_errors(errors: list[Any]) -> ValidationErrorResponse:
    """Convert Pydantic validation errors to ValidationErrorResponse.

    Args:
        errors: Error dicts from ValidationError.errors()

    Returns:
        ValidationErrorResponse ready for JSON serialization.
    """
    details = [
        ValidationErrorDetail(
            loc=[loc if isinstance(loc, int) else str(loc) for loc in error.get("loc", [])],
            msg=str(error.get("msg", "")),
            type=str(error.get("type", "")),
        )
        for error in errors
    ]
    return ValidationErrorResponse(details=details)
