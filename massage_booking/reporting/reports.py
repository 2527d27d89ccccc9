"""
Admin dashboard reports: bookings, users, and revenue.

Revenue only counts confirmed bookings, at the price snapshotted when
each request was created.
"""

import logging
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from massage_booking.config import settings
from massage_booking.exceptions import PermissionDeniedError
from massage_booking.schemas.booking_schema import BookingRequest, BookingStatus
from massage_booking.schemas.user_schema import Role, User
from massage_booking.tools.directory import BookingDirectory
from massage_booking.utils import to_money

logger = logging.getLogger(__name__)


@dataclass
class RevenueReport:
    """Headline figures for the admin reports view."""

    total_bookings: int = 0
    total_revenue: Decimal = Decimal("0.00")
    todays_bookings: int = 0
    active_therapists: int = 0
    status_counts: dict[str, int] = field(default_factory=dict)


def _require_admin(principal: User) -> None:
    if principal.role != Role.ADMIN:
        raise PermissionDeniedError(f"User {principal.id} is not an admin.")


class AdminReports:
    """Read-only admin views over the booking directory and user list."""

    def __init__(self, directory: BookingDirectory, users: Iterable[User] = ()) -> None:
        self._directory = directory
        self._users = list(users)

    def recent_bookings(self, principal: User, limit: Optional[int] = None) -> list[BookingRequest]:
        """Newest bookings first."""
        _require_admin(principal)
        return self._directory.list_recent(limit or settings.reports.recent_bookings_limit)

    def users(self, principal: User) -> list[User]:
        """All users, newest first when creation times are known."""
        _require_admin(principal)
        return sorted(
            self._users,
            key=lambda u: (u.created_at is not None, u.created_at),
            reverse=True,
        )

    def revenue(self, principal: User, today: date) -> RevenueReport:
        _require_admin(principal)
        return summarize(self._directory.all(), self._users, today)


def summarize(bookings: Iterable[BookingRequest], users: Iterable[User], today: date) -> RevenueReport:
    """Calculate the revenue report from booking records and users."""
    report = RevenueReport()
    confirmed: list[BookingRequest] = []

    for booking in bookings:
        key = booking.status.value
        report.status_counts[key] = report.status_counts.get(key, 0) + 1
        if booking.status == BookingStatus.CONFIRMED:
            confirmed.append(booking)

    report.total_bookings = len(confirmed)
    report.total_revenue = to_money(sum((b.price for b in confirmed), Decimal("0")))
    report.todays_bookings = sum(1 for b in confirmed if b.scheduled_date == today)
    report.active_therapists = sum(1 for u in users if u.role == Role.THERAPIST)

    logger.debug(
        "Report: %d confirmed, revenue %s, %d today",
        report.total_bookings, report.total_revenue, report.todays_bookings,
    )
    return report
