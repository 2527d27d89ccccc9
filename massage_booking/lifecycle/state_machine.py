"""
Finite state machine for the booking request lifecycle.

Defines the seven booking statuses and the explicit transitions between
them. The machine is the single arbiter for every status change: a
transition attempt either matches a row of the table whose guard holds,
or it is stale and leaves the request untouched. Stale attempts are
never errors; a late accept after a timeout and a duplicate decline
both resolve to ``None``.

Usage:
    machine = BookingStateMachine()
    target, reason = machine.resolve(request, BookingEvent.THERAPIST_ACCEPTED, now)
    if target is None:
        ...  # stale, reason says why
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from massage_booking.schemas.booking_schema import (
    BookingEvent,
    BookingRequest,
    BookingStatus,
)

logger = logging.getLogger(__name__)

Guard = Callable[[BookingRequest, datetime], bool]


def _within_acceptance_window(request: BookingRequest, now: datetime) -> bool:
    return now <= request.acceptance_deadline


@dataclass(frozen=True)
class Transition:
    """A single valid status transition."""
    from_status: BookingStatus
    to_status: BookingStatus
    event: BookingEvent
    guard: Optional[Guard] = None
    guard_reason: str = ""


class BookingStateMachine:
    """
    Stateless transition table for booking requests.

    The machine holds no per-request state. The directory reads the
    current record, asks ``resolve`` for the target status, and writes it
    under the request's lock, which makes every transition a
    compare-and-set.
    """

    TRANSITIONS: list[Transition] = [
        # --- Therapist response ---
        Transition(BookingStatus.PENDING, BookingStatus.ACCEPTED,
                   BookingEvent.THERAPIST_ACCEPTED,
                   _within_acceptance_window, "acceptance window closed"),
        Transition(BookingStatus.PENDING, BookingStatus.DECLINED,
                   BookingEvent.THERAPIST_DECLINED,
                   _within_acceptance_window, "acceptance window closed"),

        # --- Countdown ---
        Transition(BookingStatus.PENDING, BookingStatus.TIMED_OUT,
                   BookingEvent.DEADLINE_ELAPSED),

        # --- Customer ---
        Transition(BookingStatus.PENDING, BookingStatus.CANCELLED,
                   BookingEvent.CUSTOMER_CANCELLED),

        # --- Payment ---
        Transition(BookingStatus.ACCEPTED, BookingStatus.CONFIRMED,
                   BookingEvent.PAYMENT_SUCCEEDED),
        Transition(BookingStatus.ACCEPTED, BookingStatus.PAYMENT_FAILED,
                   BookingEvent.PAYMENT_FAILED),
    ]

    def resolve(
        self,
        request: BookingRequest,
        event: BookingEvent,
        now: datetime,
    ) -> tuple[Optional[BookingStatus], str]:
        """
        Decide where ``event`` takes ``request``.

        Returns:
            ``(target_status, "")`` when the transition applies, otherwise
            ``(None, reason)`` describing why the attempt is stale.
        """
        for t in self.TRANSITIONS:
            if t.from_status != request.status or t.event != event:
                continue
            if t.guard is not None and not t.guard(request, now):
                return None, t.guard_reason
            logger.debug(
                "Booking %s: %s -> %s (event: %s)",
                request.id, request.status.value, t.to_status.value, event.value,
            )
            return t.to_status, ""

        if request.status.is_terminal:
            return None, f"request already {request.status.value}"
        return None, (
            f"'{event.value}' not valid from '{request.status.value}'; "
            f"valid events: {[e.value for e in self.get_valid_events(request.status)]}"
        )

    def get_valid_events(self, status: BookingStatus) -> list[BookingEvent]:
        """Return all events valid from ``status``."""
        return [t.event for t in self.TRANSITIONS if t.from_status == status]
