"""
Booking request lifecycle orchestration.

Ties the pricing engine, directory, acceptance countdowns, payment
processor and notifier together behind the operations a presentation
layer calls. All collaborators are injected; nothing here reaches for a
module-level client.

Flow:
    submit -> pending -> (accept | decline | deadline | cancel)
    accepted -> capture_payment -> confirmed | payment_failed
"""

import asyncio
import uuid
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from massage_booking.config import settings
from massage_booking.exceptions import PermissionDeniedError
from massage_booking.lifecycle.scheduler import AcceptanceScheduler, remaining_seconds
from massage_booking.logging_context import get_booking_logger, set_booking_id
from massage_booking.schemas.booking_schema import (
    BookingEvent,
    BookingRequest,
    BookingStatus,
    BookingSubmission,
    TransitionOutcome,
    TransitionResult,
)
from massage_booking.tools.directory import BookingDirectory
from massage_booking.tools.notifications import Notification, NotificationType, Notifier
from massage_booking.tools.payments import PaymentProcessor
from massage_booking.tools.pricing import compute_price
from massage_booking.tools.services import ServiceCatalog

logger = get_booking_logger(__name__)

Clock = Callable[[], datetime]

# Who hears about each status; everything else goes to the customer.
_THERAPIST_NOTIFIED = {BookingStatus.PENDING, BookingStatus.CANCELLED}

# Reason prefix on a capture that never reached the processor.
NO_CHARGE_PREFIX = "no charge attempted: "


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BookingService:
    """
    Entry point for the booking request lifecycle.

    Every status change goes through ``BookingDirectory.apply_transition``;
    this class only reacts to applied results (stopping countdowns,
    waking waiters, notifying) and logs stale ones.
    """

    def __init__(
        self,
        directory: BookingDirectory,
        scheduler: AcceptanceScheduler,
        payments: PaymentProcessor,
        notifier: Notifier,
        catalog: Optional[ServiceCatalog] = None,
        clock: Clock = utc_now,
        acceptance_timeout_seconds: Optional[float] = None,
    ) -> None:
        self.directory = directory
        self.scheduler = scheduler
        self.catalog = catalog or ServiceCatalog()
        self._payments = payments
        self._notifier = notifier
        self._clock = clock
        if acceptance_timeout_seconds is None:
            acceptance_timeout_seconds = settings.booking.acceptance_timeout_seconds
        if acceptance_timeout_seconds <= 0:
            raise ValueError(
                f"acceptance_timeout_seconds must be > 0, got {acceptance_timeout_seconds}"
            )
        self._timeout = timedelta(seconds=acceptance_timeout_seconds)
        self._settled: dict[str, asyncio.Event] = {}

    # ------------------------------------------------------------------ create

    async def submit(self, submission: BookingSubmission) -> BookingRequest:
        """
        Price and store a new booking request, then start its countdown.

        Raises:
            ServiceNotFoundError: Unknown or inactive service id.
            InvalidDurationError: Duration does not fit the tier; nothing is stored.
        """
        tier = self.catalog.require(submission.service_id)
        price = compute_price(tier, submission.duration_minutes)

        now = self._clock()
        request = BookingRequest(
            **submission.model_dump(),
            id=uuid.uuid4().hex,
            price=price,
            status=BookingStatus.PENDING,
            created_at=now,
            acceptance_deadline=now + self._timeout,
            updated_at=now,
        )
        booking_id = self.directory.create(request)
        set_booking_id(booking_id)

        self._settled[booking_id] = asyncio.Event()
        self.scheduler.schedule(
            booking_id, remaining_seconds(request, self._clock()), self.expire
        )
        logger.info(
            "Requested %s (%d min) at %s, waiting for therapist %s",
            tier.name, request.duration_minutes, request.price, request.therapist_id,
        )
        self._notify(request, BookingStatus.PENDING)
        return request

    # -------------------------------------------------------------- transitions

    async def accept(self, booking_id: str, therapist_id: str) -> TransitionResult:
        """Therapist accepts a pending request within the acceptance window."""
        self._require_therapist(booking_id, therapist_id)
        return await self._apply(booking_id, BookingEvent.THERAPIST_ACCEPTED)

    async def decline(self, booking_id: str, therapist_id: str) -> TransitionResult:
        """Therapist declines a pending request within the acceptance window."""
        self._require_therapist(booking_id, therapist_id)
        return await self._apply(booking_id, BookingEvent.THERAPIST_DECLINED)

    async def cancel(self, booking_id: str, customer_id: str) -> TransitionResult:
        """Customer withdraws a pending request."""
        request = self.directory.get(booking_id)
        if request.customer_id != customer_id:
            raise PermissionDeniedError(
                f"Customer {customer_id} does not own booking {booking_id}."
            )
        return await self._apply(booking_id, BookingEvent.CUSTOMER_CANCELLED)

    async def expire(self, booking_id: str) -> TransitionResult:
        """Countdown callback: the acceptance window elapsed."""
        return await self._apply(booking_id, BookingEvent.DEADLINE_ELAPSED)

    async def capture_payment(self, booking_id: str) -> TransitionResult:
        """
        Charge an accepted request and record the outcome.

        The charge is claimed under the booking's lock before the processor
        is called, so an accepted request is charged at most once even when
        captures race. A declined charge ends the request in
        ``payment_failed``; the customer must submit a new booking.

        When no charge is attempted (the request is not ``accepted``, or
        another capture holds the claim) the result is stale, carries the
        ``payment_succeeded`` event the capture would have produced, and its
        reason starts with ``"no charge attempted: "``.
        """
        set_booking_id(booking_id)
        request, refused = await self.directory.claim_payment(booking_id)
        if refused:
            result = TransitionResult(
                booking_id=booking_id,
                event=BookingEvent.PAYMENT_SUCCEEDED,
                outcome=TransitionOutcome.STALE_TRANSITION_IGNORED,
                status=request.status,
                previous_status=request.status,
                reason=f"{NO_CHARGE_PREFIX}{refused}",
            )
            logger.info("Stale transition ignored: %s", result.reason)
            return result

        try:
            payment = await self._payments.charge(booking_id, request.price)
            event = (
                BookingEvent.PAYMENT_SUCCEEDED if payment.succeeded
                else BookingEvent.PAYMENT_FAILED
            )
            return await self._apply(booking_id, event, holds_charge=True)
        finally:
            self.directory.release_payment(booking_id)

    async def record_payment_result(self, booking_id: str, succeeded: bool) -> TransitionResult:
        """
        Feed a payment outcome delivered by the processor into the lifecycle.

        Stale while a ``capture_payment`` charge for the same booking is in
        flight; that capture records its own outcome.
        """
        event = BookingEvent.PAYMENT_SUCCEEDED if succeeded else BookingEvent.PAYMENT_FAILED
        return await self._apply(booking_id, event)

    # ------------------------------------------------------------------ queries

    async def wait_for_response(self, booking_id: str) -> BookingStatus:
        """
        Wait until the request leaves ``pending`` and return its new status.

        The countdown guarantees this resolves no later than the
        acceptance deadline.
        """
        request = self.directory.get(booking_id)
        settled = self._settled.get(booking_id)
        if request.status != BookingStatus.PENDING or settled is None:
            return request.status
        await settled.wait()
        return self.directory.get(booking_id).status

    def remaining_seconds(self, booking_id: str) -> float:
        """Seconds left for a therapist to respond; 0 once no longer pending."""
        request = self.directory.get(booking_id)
        if request.status != BookingStatus.PENDING:
            return 0.0
        return remaining_seconds(request, self._clock())

    def get(self, booking_id: str) -> BookingRequest:
        return self.directory.get(booking_id)

    def close(self) -> None:
        """Stop every running countdown."""
        self.scheduler.shutdown()

    # ----------------------------------------------------------------- internal

    def _require_therapist(self, booking_id: str, therapist_id: str) -> None:
        request = self.directory.get(booking_id)
        if request.therapist_id != therapist_id:
            raise PermissionDeniedError(
                f"Therapist {therapist_id} is not assigned to booking {booking_id}."
            )

    async def _apply(
        self, booking_id: str, event: BookingEvent, holds_charge: bool = False,
    ) -> TransitionResult:
        set_booking_id(booking_id)
        result = await self.directory.apply_transition(
            booking_id, event, self._clock(), holds_charge=holds_charge,
        )

        if result.stale:
            logger.info(
                "Stale transition ignored: %s while %s (%s)",
                event.value, result.status.value, result.reason,
            )
            return result

        if result.previous_status == BookingStatus.PENDING:
            self.scheduler.cancel(booking_id)
            settled = self._settled.pop(booking_id, None)
            if settled is not None:
                settled.set()

        self._notify(self.directory.get(booking_id), result.status)
        return result

    def _notify(self, request: BookingRequest, status: BookingStatus) -> None:
        recipient = (
            request.therapist_id if status in _THERAPIST_NOTIFIED else request.customer_id
        )
        notification = Notification(
            booking_id=request.id,
            type=NotificationType.for_status(status),
            recipient_id=recipient,
            created_at=self._clock(),
        )
        try:
            self._notifier.send(notification)
        except Exception:
            logger.exception("Notification %s failed to dispatch", notification.type.value)
