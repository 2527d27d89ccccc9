"""Booking ID logging context for tracing a request across modules.

Provides a booking_id-aware logger that attaches the booking being
processed to every log record, so a single request's journey from
submission through acceptance, timeout, and payment can be followed
even when many countdowns run concurrently.

Usage:
    from massage_booking.logging_context import get_booking_logger, set_booking_id

    set_booking_id("3f2a...")
    logger = get_booking_logger(__name__)
    logger.info("Therapist accepted")  # record.booking_id == "3f2a..."
"""

import logging
from contextvars import ContextVar

_booking_id: ContextVar[str] = ContextVar("booking_id", default="NO_BOOKING_ID")


def set_booking_id(booking_id: str) -> None:
    """Set the booking ID for the current async context."""
    _booking_id.set(booking_id)


def get_booking_id() -> str:
    """Retrieve the current booking ID."""
    return _booking_id.get()


class BookingIdFilter(logging.Filter):
    """Injects booking_id into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.booking_id = _booking_id.get()  # type: ignore[attr-defined]
        return True


def get_booking_logger(name: str) -> logging.Logger:
    """Return a logger with the BookingIdFilter attached.

    The filter adds ``booking_id`` to each record so formatters can
    include ``%(booking_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, BookingIdFilter) for f in logger.filters):
        logger.addFilter(BookingIdFilter())
    return logger
