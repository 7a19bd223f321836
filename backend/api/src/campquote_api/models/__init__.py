"""API request/response models."""

from campquote_api.models.common import (
    ValidationErrorDetail,
    ValidationErrorResponse,
    format_validation_errors,
)
from campquote_api.models.quotes import NightlyBaseRate, NightlyRatesResponse

__all__ = [
    "NightlyBaseRate",
    "NightlyRatesResponse",
    "ValidationErrorDetail",
    "ValidationErrorResponse",
    "format_validation_errors",
]
