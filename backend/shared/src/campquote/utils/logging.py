"""Logging helpers for the quote engine.

Every record carries the id of the request it belongs to, so one quote can
be followed from the API through snapshot loading to the computed result.
The id lives in a ContextVar, which keeps it separate per thread and per
asyncio task.

Quote and redemption outcomes are logged through ``log_quote_operation``
and ``log_redemption`` as one pipe-separated line with the same fields
attached to the record as attributes.
"""

import logging
import uuid
from contextvars import ContextVar
from typing import Any

UNSET_CORRELATION_ID = "no-correlation-id"

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def generate_correlation_id() -> str:
    return uuid.uuid4().hex


def set_correlation_id(correlation_id: str | None = None) -> str:
    """Bind a correlation id to the current context.

    A new id is generated when none is given (e.g. no request header).
    """
    value = correlation_id or generate_correlation_id()
    _correlation_id.set(value)
    return value


def get_correlation_id() -> str | None:
    return _correlation_id.get()


def clear_correlation_id() -> None:
    _correlation_id.set(None)


def _current_id() -> str:
    return _correlation_id.get() or UNSET_CORRELATION_ID


class CorrelationIdFilter(logging.Filter):
    """Stamps ``record.correlation_id`` on every record that passes."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = _current_id()
        return True


class StructuredFormatter(logging.Formatter):
    """Prefixes each formatted line with ``[<correlation id>]``."""

    def format(self, record: logging.LogRecord) -> str:
        correlation_id = getattr(record, "correlation_id", None) or _current_id()
        return f"[{correlation_id}] {super().format(record)}"


def get_logger(name: str) -> logging.Logger:
    """Return ``logging.getLogger(name)`` with the correlation filter attached once."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationIdFilter) for f in logger.filters):
        logger.addFilter(CorrelationIdFilter())
    return logger


def _format_context(headline: str, context: dict[str, Any]) -> str:
    parts = [headline]
    for key, value in context.items():
        parts.append(f"{key}={value}")
    return " | ".join(parts)


def log_quote_operation(
    logger: logging.Logger,
    operation: str,
    *,
    campground_id: str | None = None,
    site_class_id: str | None = None,
    nights: int | None = None,
    total_cents: int | None = None,
    rejected: list[str] | None = None,
    waiver_required: bool = False,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a quote operation with structured context.

    Rejected discount codes and pending tax waivers are logged at WARNING so
    they stand out; failures at ERROR.

    Args:
        logger: Logger instance
        operation: Operation name (e.g., "quote_computed", "snapshot_loaded")
        campground_id: Campground being quoted
        site_class_id: Resolved site class
        nights: Number of nights
        total_cents: Total with taxes in cents
        rejected: Rejected discount ids with reasons ("PROMO:expired")
        waiver_required: Whether a tax waiver is still required
        error: Error message if the operation failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {}

    if campground_id:
        context["campground_id"] = campground_id
    if site_class_id:
        context["site_class_id"] = site_class_id
    if nights is not None:
        context["nights"] = nights
    if total_cents is not None:
        context["total_cents"] = total_cents
    if rejected:
        context["rejected"] = ",".join(rejected)
    if waiver_required:
        context["waiver_required"] = True
    if error:
        context["error"] = error

    context.update(extra)

    message = _format_context(f"Quote operation: {operation}", context)
    context["operation"] = operation

    if error:
        logger.error(message, extra=context)
    elif rejected or waiver_required:
        logger.warning(message, extra=context)
    else:
        logger.info(message, extra=context)


def log_redemption(
    logger: logging.Logger,
    booking_id: str,
    *,
    promotion_id: str | None = None,
    referral_program_id: str | None = None,
    result: str | None = None,
    error: str | None = None,
    **extra: Any,
) -> None:
    """Log a usage-counter redemption with structured context.

    Args:
        logger: Logger instance
        booking_id: Booking the redemption belongs to
        promotion_id: Promotion redeemed, if any
        referral_program_id: Referral program redeemed, if any
        result: Processing result (success, duplicate, rejected)
        error: Error message if processing failed
        **extra: Additional context fields
    """
    context: dict[str, Any] = {"booking_id": booking_id}

    if promotion_id:
        context["promotion_id"] = promotion_id
    if referral_program_id:
        context["referral_program_id"] = referral_program_id
    if result:
        context["result"] = result
    if error:
        context["error"] = error

    context.update(extra)

    message = _format_context("Redemption", context)

    if error or result == "rejected":
        logger.error(message, extra=context)
    elif result == "duplicate":
        logger.warning(message, extra=context)
    else:
        logger.info(message, extra=context)
