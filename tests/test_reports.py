"""Tests for admin reports."""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from massage_booking.exceptions import PermissionDeniedError
from massage_booking.reporting.reports import AdminReports, summarize
from massage_booking.schemas.booking_schema import BookingEvent, BookingStatus
from massage_booking.schemas.user_schema import Role, User
from massage_booking.tools.directory import BookingDirectory

from tests.conftest import T0, make_request, run

ADMIN = User(id="admin-1", name="Ada", email="ada@example.com", role=Role.ADMIN)
USERS = [
    ADMIN,
    User(id="therapist-1", name="Tess", email="tess@example.com", role=Role.THERAPIST,
         created_at=datetime(2025, 1, 2)),
    User(id="therapist-2", name="Theo", email="theo@example.com", role=Role.THERAPIST,
         created_at=datetime(2025, 1, 5)),
    User(id="customer-1", name="Cam", email="cam@example.com", role=Role.CUSTOMER,
         created_at=datetime(2025, 1, 3)),
]
TODAY = date(2025, 3, 18)


def _confirm(directory, booking_id):
    run(directory.apply_transition(booking_id, BookingEvent.THERAPIST_ACCEPTED, T0))
    run(directory.apply_transition(booking_id, BookingEvent.PAYMENT_SUCCEEDED, T0))


@pytest.fixture
def directory():
    directory = BookingDirectory()
    directory.create(make_request("today-1", price=Decimal("160.00"), scheduled_date=TODAY))
    directory.create(make_request("later-1", price=Decimal("120.00"),
                                  scheduled_date=TODAY + timedelta(days=3),
                                  created_at=T0 + timedelta(minutes=1)))
    directory.create(make_request("pending", price=Decimal("80.00"), scheduled_date=TODAY,
                                  created_at=T0 + timedelta(minutes=2)))
    directory.create(make_request("declined", price=Decimal("95.00"),
                                  created_at=T0 + timedelta(minutes=3)))
    _confirm(directory, "today-1")
    _confirm(directory, "later-1")
    run(directory.apply_transition("declined", BookingEvent.THERAPIST_DECLINED, T0))
    return directory


class TestSummarize:
    def test_revenue_counts_confirmed_only(self, directory):
        report = summarize(directory.all(), USERS, TODAY)
        assert report.total_bookings == 2
        assert report.total_revenue == Decimal("280.00")
        assert report.todays_bookings == 1
        assert report.active_therapists == 2

    def test_status_counts(self, directory):
        report = summarize(directory.all(), USERS, TODAY)
        assert report.status_counts == {"confirmed": 2, "pending": 1, "declined": 1}

    def test_empty(self):
        report = summarize([], [], TODAY)
        assert report.total_bookings == 0
        assert report.total_revenue == Decimal("0.00")
        assert report.status_counts == {}


class TestAdminReports:
    def test_recent_bookings_newest_first(self, directory):
        reports = AdminReports(directory, USERS)
        recent = reports.recent_bookings(ADMIN, limit=2)
        assert [b.id for b in recent] == ["declined", "pending"]

    def test_recent_bookings_default_limit(self, directory):
        assert len(AdminReports(directory, USERS).recent_bookings(ADMIN)) == 4

    def test_users_newest_first(self, directory):
        users = AdminReports(directory, USERS).users(ADMIN)
        assert [u.id for u in users] == ["therapist-2", "customer-1", "therapist-1", "admin-1"]

    def test_revenue(self, directory):
        report = AdminReports(directory, USERS).revenue(ADMIN, TODAY)
        assert report.total_revenue == Decimal("280.00")

    @pytest.mark.parametrize("user", USERS[1:])
    def test_non_admin_denied(self, directory, user):
        reports = AdminReports(directory, USERS)
        with pytest.raises(PermissionDeniedError):
            reports.recent_bookings(user)
        with pytest.raises(PermissionDeniedError):
            reports.users(user)
        with pytest.raises(PermissionDeniedError):
            reports.revenue(user, TODAY)

    def test_directory_statuses_unchanged(self, directory):
        AdminReports(directory, USERS).revenue(ADMIN, TODAY)
        assert directory.get("pending").status == BookingStatus.PENDING
