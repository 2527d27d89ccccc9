"""Shared test fixtures and helpers."""

import asyncio
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Optional

import pytest

from massage_booking.lifecycle.booking_service import BookingService
from massage_booking.lifecycle.scheduler import AcceptanceScheduler
from massage_booking.schemas.booking_schema import BookingRequest, BookingStatus, BookingSubmission
from massage_booking.schemas.service_schema import ServiceTier
from massage_booking.tools.directory import BookingDirectory
from massage_booking.tools.notifications import InMemoryNotifier
from massage_booking.tools.payments import MockPaymentProcessor

T0 = datetime(2025, 3, 15, 10, 0, tzinfo=timezone.utc)
CUSTOMER = "customer-1"
THERAPIST = "therapist-1"


class FakeClock:
    """Manually advanced clock starting at T0."""

    def __init__(self, start: datetime = T0) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def run(coro):
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def stressbuster():
    return ServiceTier(
        id=1,
        name="Stressbuster",
        base_duration_minutes=60,
        base_price=Decimal("80"),
        increment_minutes=30,
        increment_price=Decimal("40"),
    )


@pytest.fixture
def notifier():
    return InMemoryNotifier()


@pytest.fixture
def payments():
    return MockPaymentProcessor()


@pytest.fixture
def make_service(clock, notifier, payments):
    """Factory so each test builds the service inside its own event loop."""

    def factory(timeout: float = 120, use_clock: bool = True) -> BookingService:
        kwargs = {"clock": clock} if use_clock else {}
        return BookingService(
            directory=BookingDirectory(),
            scheduler=AcceptanceScheduler(),
            payments=payments,
            notifier=notifier,
            acceptance_timeout_seconds=timeout,
            **kwargs,
        )

    return factory


def make_submission(
    service_id: int = 1,
    duration_minutes: int = 120,
    customer_id: str = CUSTOMER,
    therapist_id: str = THERAPIST,
    scheduled_date: date = date(2025, 3, 18),
    scheduled_time: time = time(10, 0),
    **kwargs,
) -> BookingSubmission:
    """Helper to create a BookingSubmission with sensible defaults."""
    data = {
        "customer_id": customer_id,
        "therapist_id": therapist_id,
        "service_id": service_id,
        "duration_minutes": duration_minutes,
        "scheduled_date": scheduled_date,
        "scheduled_time": scheduled_time,
        "address": "42 Oak Ave, Richmond VIC 3121",
        "latitude": -37.8183,
        "longitude": 144.9984,
        "parking_notes": "Driveway",
        "room_notes": "Lounge room",
    }
    data.update(kwargs)
    return BookingSubmission(**data)


def make_request(
    booking_id: str = "bk-1",
    status: BookingStatus = BookingStatus.PENDING,
    created_at: datetime = T0,
    timeout: float = 120,
    price: Optional[Decimal] = None,
    **kwargs,
) -> BookingRequest:
    """Helper to create a stored BookingRequest directly."""
    submission = make_submission(**kwargs)
    return BookingRequest(
        **submission.model_dump(),
        id=booking_id,
        price=price or Decimal("160.00"),
        status=status,
        created_at=created_at,
        acceptance_deadline=created_at + timedelta(seconds=timeout),
        updated_at=created_at,
    )
