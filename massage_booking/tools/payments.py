"""
Payment processor contract and mock implementation.

In production, this would create and confirm a payment intent with the
card gateway. The booking core only consumes the success/failure signal.
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Iterable, Optional, Protocol

logger = logging.getLogger(__name__)


class PaymentStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    REFUNDED = "refunded"


@dataclass(frozen=True)
class PaymentResult:
    """Outcome reported by the payment processor for one charge."""
    succeeded: bool
    reference: Optional[str] = None
    message: str = ""


@dataclass(frozen=True)
class PaymentRecord:
    """A charge attempt as recorded against a booking."""
    booking_id: str
    reference: str
    amount: Decimal
    status: PaymentStatus
    created_at: datetime


class PaymentProcessor(Protocol):
    async def charge(self, booking_id: str, amount: Decimal) -> PaymentResult:
        ...


class MockPaymentProcessor:
    """
    Records charges in memory and succeeds unless told otherwise.

    ``failing`` lists booking ids whose charge is declined; ``delay``
    simulates gateway latency.
    """

    def __init__(self, failing: Iterable[str] = (), delay: float = 0.0) -> None:
        self._failing = set(failing)
        self._delay = delay
        self.records: list[PaymentRecord] = []

    def fail_for(self, booking_id: str) -> None:
        self._failing.add(booking_id)

    def records_for(self, booking_id: str) -> list[PaymentRecord]:
        return [r for r in self.records if r.booking_id == booking_id]

    async def charge(self, booking_id: str, amount: Decimal) -> PaymentResult:
        if self._delay:
            await asyncio.sleep(self._delay)

        reference = f"pm_{uuid.uuid4().hex[:12]}"
        succeeded = booking_id not in self._failing
        self.records.append(PaymentRecord(
            booking_id=booking_id,
            reference=reference,
            amount=amount,
            status=PaymentStatus.COMPLETED if succeeded else PaymentStatus.FAILED,
            created_at=datetime.now(timezone.utc),
        ))

        if not succeeded:
            logger.info("Payment declined for %s (%s)", booking_id, amount)
            return PaymentResult(succeeded=False, reference=reference, message="Card declined.")
        logger.info("Payment captured for %s (%s): %s", booking_id, amount, reference)
        return PaymentResult(succeeded=True, reference=reference, message="Payment captured.")
