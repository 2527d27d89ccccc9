"""
In-memory booking directory.

In production, this would sit in front of the relational store with
row-level access control. It owns durable storage of booking requests
and the only write path for their ``status``: ``apply_transition`` reads,
checks, and writes under a per-booking lock, so concurrent attempts on
the same id are serialized while different ids never contend.
"""

import asyncio
import logging
from datetime import datetime
from typing import Iterable, Optional

from massage_booking.exceptions import BookingNotFoundError, DuplicateBookingError
from massage_booking.lifecycle.state_machine import BookingStateMachine
from massage_booking.schemas.booking_schema import (
    BookingEvent,
    BookingRequest,
    BookingStatus,
    StatusChange,
    TransitionOutcome,
    TransitionResult,
)

logger = logging.getLogger(__name__)

_PAYMENT_EVENTS = {BookingEvent.PAYMENT_SUCCEEDED, BookingEvent.PAYMENT_FAILED}


class BookingDirectory:
    """Keyed collection of booking requests with compare-and-set transitions."""

    def __init__(self, machine: Optional[BookingStateMachine] = None) -> None:
        self._machine = machine or BookingStateMachine()
        self._records: dict[str, BookingRequest] = {}
        self._history: dict[str, list[StatusChange]] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._charging: set[str] = set()

    def __len__(self) -> int:
        return len(self._records)

    def create(self, request: BookingRequest) -> str:
        """Store a new request. It must be ``pending``."""
        if request.id in self._records:
            raise DuplicateBookingError(f"Booking {request.id} already exists.")
        if request.status != BookingStatus.PENDING:
            raise ValueError(f"New bookings must be pending, got {request.status.value}")
        self._records[request.id] = request
        self._history[request.id] = [
            StatusChange(status=request.status, entered_at=request.created_at)
        ]
        self._locks[request.id] = asyncio.Lock()
        logger.info(
            "Booking created: %s for %s with %s on %s at %s",
            request.id, request.customer_id, request.therapist_id,
            request.scheduled_date, request.scheduled_time,
        )
        return request.id

    def get(self, booking_id: str) -> BookingRequest:
        """Retrieve a booking by id."""
        try:
            return self._records[booking_id]
        except KeyError:
            raise BookingNotFoundError(booking_id) from None

    def history(self, booking_id: str) -> list[StatusChange]:
        """Return the full status history of a booking."""
        if booking_id not in self._history:
            raise BookingNotFoundError(booking_id)
        return list(self._history[booking_id])

    def list_by_status(
        self,
        therapist_id: str,
        statuses: Iterable[BookingStatus],
    ) -> list[BookingRequest]:
        """Bookings assigned to a therapist in any of ``statuses``, soonest first."""
        wanted = set(statuses)
        matches = [
            r for r in self._records.values()
            if r.therapist_id == therapist_id and r.status in wanted
        ]
        return sorted(matches, key=lambda r: (r.scheduled_date, r.scheduled_time))

    def list_for_customer(self, customer_id: str) -> list[BookingRequest]:
        """A customer's bookings, newest first."""
        matches = [r for r in self._records.values() if r.customer_id == customer_id]
        return sorted(matches, key=lambda r: r.created_at, reverse=True)

    def list_recent(self, limit: int) -> list[BookingRequest]:
        """All bookings, newest first, at most ``limit``."""
        return sorted(self._records.values(), key=lambda r: r.created_at, reverse=True)[:limit]

    def all(self) -> list[BookingRequest]:
        return list(self._records.values())

    async def claim_payment(self, booking_id: str) -> tuple[BookingRequest, str]:
        """
        Reserve the one charge an accepted booking may receive.

        The status check and the reservation happen under the booking's
        lock, so two concurrent captures can never both reach the processor.

        Returns:
            The current record and an empty reason when the claim is taken,
            otherwise the record and why no charge may be attempted.

        Raises:
            BookingNotFoundError: If the id was never created.
        """
        lock = self._locks.get(booking_id)
        if lock is None:
            raise BookingNotFoundError(booking_id)

        async with lock:
            current = self._records[booking_id]
            if current.status != BookingStatus.ACCEPTED:
                return current, (
                    f"payment requires an accepted booking, status is {current.status.value}"
                )
            if booking_id in self._charging:
                return current, "a charge is already in flight"
            self._charging.add(booking_id)
        return current, ""

    def release_payment(self, booking_id: str) -> None:
        """Drop a charge claim taken by ``claim_payment``."""
        self._charging.discard(booking_id)

    def is_charging(self, booking_id: str) -> bool:
        return booking_id in self._charging

    async def apply_transition(
        self,
        booking_id: str,
        event: BookingEvent,
        now: datetime,
        holds_charge: bool = False,
    ) -> TransitionResult:
        """
        Attempt one transition as a compare-and-set on ``status``.

        While a charge claimed through ``claim_payment`` is in flight, only
        the claim holder (``holds_charge=True``) may record a payment outcome.

        Returns:
            An applied result carrying the new status, or a stale result
            with the status left unchanged.

        Raises:
            BookingNotFoundError: If the id was never created.
        """
        lock = self._locks.get(booking_id)
        if lock is None:
            raise BookingNotFoundError(booking_id)

        async with lock:
            current = self._records[booking_id]
            target, reason = self._machine.resolve(current, event, now)
            if (
                target is not None
                and event in _PAYMENT_EVENTS
                and booking_id in self._charging
                and not holds_charge
            ):
                target, reason = None, "a charge is already in flight"
            if target is None:
                return TransitionResult(
                    booking_id=booking_id,
                    event=event,
                    outcome=TransitionOutcome.STALE_TRANSITION_IGNORED,
                    status=current.status,
                    previous_status=current.status,
                    reason=reason,
                )

            self._records[booking_id] = current.model_copy(
                update={"status": target, "updated_at": now}
            )
            self._history[booking_id].append(
                StatusChange(status=target, entered_at=now, event=event)
            )

        logger.info(
            "Booking %s: %s -> %s (%s)",
            booking_id, current.status.value, target.value, event.value,
        )
        return TransitionResult(
            booking_id=booking_id,
            event=event,
            outcome=TransitionOutcome.APPLIED,
            status=target,
            previous_status=current.status,
        )
