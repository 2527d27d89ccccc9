"""Booking request data models."""

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BookingStatus(str, Enum):
    """All possible states in a booking request lifecycle."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    PAYMENT_FAILED = "payment_failed"
    CONFIRMED = "confirmed"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({
    BookingStatus.DECLINED,
    BookingStatus.TIMED_OUT,
    BookingStatus.CANCELLED,
    BookingStatus.PAYMENT_FAILED,
    BookingStatus.CONFIRMED,
})


class BookingEvent(str, Enum):
    """Events that cause status transitions."""
    THERAPIST_ACCEPTED = "therapist_accepted"
    THERAPIST_DECLINED = "therapist_declined"
    DEADLINE_ELAPSED = "deadline_elapsed"
    CUSTOMER_CANCELLED = "customer_cancelled"
    PAYMENT_SUCCEEDED = "payment_succeeded"
    PAYMENT_FAILED = "payment_failed"


class TransitionOutcome(str, Enum):
    APPLIED = "applied"
    STALE_TRANSITION_IGNORED = "stale_transition_ignored"


class BookingSubmission(BaseModel):
    """Validated booking form data submitted by a customer."""
    customer_id: str = Field(min_length=1)
    therapist_id: str = Field(min_length=1)
    service_id: int
    duration_minutes: int
    scheduled_date: date
    scheduled_time: time
    address: str
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    parking_notes: str = ""
    room_notes: str = ""

    @field_validator("address")
    @classmethod
    def _address_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("address must not be blank")
        return value


class BookingRequest(BookingSubmission):
    """
    A customer's appointment proposal as stored in the directory.

    Instances are frozen. A transition replaces the stored record with a
    copy carrying the new ``status`` and ``updated_at``; every other field,
    including the price snapshot, is carried over unchanged.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    price: Decimal = Field(gt=0)
    status: BookingStatus = BookingStatus.PENDING
    created_at: datetime
    acceptance_deadline: datetime
    updated_at: datetime

    @property
    def coordinates(self) -> Optional[tuple[float, float]]:
        if self.latitude is None or self.longitude is None:
            return None
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class StatusChange:
    """Recorded history entry for a status visit."""
    status: BookingStatus
    entered_at: datetime
    event: Optional[BookingEvent] = None


@dataclass(frozen=True)
class TransitionResult:
    """Result of a single transition attempt against the directory.

    A stale result is informational: the request had already left the
    status the event targets, so nothing changed.
    """
    booking_id: str
    event: BookingEvent
    outcome: TransitionOutcome
    status: BookingStatus
    previous_status: BookingStatus
    reason: str = ""

    @property
    def applied(self) -> bool:
        return self.outcome == TransitionOutcome.APPLIED

    @property
    def stale(self) -> bool:
        return self.outcome == TransitionOutcome.STALE_TRANSITION_IGNORED
