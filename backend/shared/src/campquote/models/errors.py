"""Standard error codes for quote and redemption operations.

Fatal problems (bad stay window, missing rate configuration) are raised as
QuoteError subclasses and abort quoting. Rejected discount codes and
unsigned tax waivers are not errors: they are reported as data on the Quote.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ErrorCode(str, Enum):
    """Standard error codes returned by the quote API."""

    INVALID_STAY_WINDOW = "ERR_QUOTE_001"
    RATE_NOT_RESOLVABLE = "ERR_QUOTE_002"
    SITE_NOT_FOUND = "ERR_QUOTE_003"
    CAMPGROUND_NOT_FOUND = "ERR_QUOTE_004"
    USAGE_LIMIT_REACHED = "ERR_QUOTE_005"


# Human-readable error messages
ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.INVALID_STAY_WINDOW: "Departure date must be after arrival date",
    ErrorCode.RATE_NOT_RESOLVABLE: "No nightly rate is configured for one or more nights of the stay",
    ErrorCode.SITE_NOT_FOUND: "Site or site class not found",
    ErrorCode.CAMPGROUND_NOT_FOUND: "Campground not found",
    ErrorCode.USAGE_LIMIT_REACHED: "Promotion usage limit has been reached",
}

# Recovery suggestions for callers
ERROR_RECOVERY: dict[ErrorCode, str] = {
    ErrorCode.INVALID_STAY_WINDOW: "Choose a departure date at least one night after arrival",
    ErrorCode.RATE_NOT_RESOLVABLE: "Configure a default rate or seasonal rate for the site class before booking",
    ErrorCode.SITE_NOT_FOUND: "Verify the site or site class ID",
    ErrorCode.CAMPGROUND_NOT_FOUND: "Verify the campground ID",
    ErrorCode.USAGE_LIMIT_REACHED: "Re-quote without the promotion code and confirm the new total with the guest",
}


class ToolError(BaseModel):
    """Standard error response body for failed operations."""

    model_config = ConfigDict(strict=True)

    success: bool = False
    error_code: ErrorCode
    message: str
    recovery: str
    details: Optional[dict[str, str]] = None

    @classmethod
    def from_code(
        cls,
        code: ErrorCode,
        details: Optional[dict[str, str]] = None,
    ) -> "ToolError":
        """Create a ToolError from an error code.

        Args:
            code: The error code
            details: Optional additional context about the error

        Returns:
            A ToolError with the message and recovery hint for the code.
        """
        return cls(
            error_code=code,
            message=ERROR_MESSAGES[code],
            recovery=ERROR_RECOVERY[code],
            details=details,
        )


class QuoteError(Exception):
    """Base exception for quote and redemption operations.

    Can be caught and converted to a ToolError for API responses.
    """

    code: ErrorCode

    def __init__(self, details: Optional[dict[str, str]] = None):
        self.message = ERROR_MESSAGES[self.code]
        self.recovery = ERROR_RECOVERY[self.code]
        self.details = details
        super().__init__(self.message)

    def to_tool_error(self) -> ToolError:
        """Convert this exception to a ToolError for API responses."""
        return ToolError.from_code(self.code, self.details)


class ConfigurationError(QuoteError):
    """Quoting cannot proceed; no partial quote is returned."""


class InvalidStayWindowError(ConfigurationError):
    code = ErrorCode.INVALID_STAY_WINDOW


class RateResolutionError(ConfigurationError):
    code = ErrorCode.RATE_NOT_RESOLVABLE


class SiteNotFoundError(ConfigurationError):
    code = ErrorCode.SITE_NOT_FOUND


class CampgroundNotFoundError(ConfigurationError):
    code = ErrorCode.CAMPGROUND_NOT_FOUND


class UsageLimitReachedError(QuoteError):
    """Raised by booking confirmation when a promotion is exhausted."""

    code = ErrorCode.USAGE_LIMIT_REACHED
