"""Tests for import chains and module integrity.

Ensures all public modules can be imported without errors and
that re-exports from __init__.py files work correctly.
"""


class TestSchemaImports:
    def test_import_booking_schema(self):
        from massage_booking.schemas import BookingStatus, BookingEvent, TransitionOutcome
        assert BookingStatus.PENDING == "pending"
        assert BookingEvent.DEADLINE_ELAPSED == "deadline_elapsed"
        assert TransitionOutcome.STALE_TRANSITION_IGNORED == "stale_transition_ignored"

    def test_import_user_schema(self):
        from massage_booking.schemas import Role
        assert {r.value for r in Role} == {"customer", "therapist", "admin"}


class TestLifecycleImports:
    def test_import_lifecycle_package(self):
        from massage_booking.lifecycle import (
            AcceptanceScheduler, BookingService, BookingStateMachine, remaining_seconds,
        )
        assert callable(remaining_seconds)
        assert AcceptanceScheduler().pending_count == 0
        assert BookingStateMachine().TRANSITIONS

    def test_import_reporting(self):
        from massage_booking.reporting import AdminReports, RevenueReport, summarize
        assert RevenueReport().total_bookings == 0

    def test_import_user_directory(self):
        from massage_booking.tools.users import UserDirectory
        assert UserDirectory().therapists() == []


class TestLoggingContext:
    def test_booking_logger_injects_id(self):
        import logging

        from massage_booking.logging_context import get_booking_logger, set_booking_id

        logger = get_booking_logger("tests.logging_context")
        set_booking_id("bk-log")
        record = logger.makeRecord(logger.name, logging.INFO, __file__, 1, "msg", (), None)
        assert logger.filter(record)
        assert record.booking_id == "bk-log"

    def test_filter_attached_once(self):
        from massage_booking.logging_context import BookingIdFilter, get_booking_logger

        get_booking_logger("tests.once")
        logger = get_booking_logger("tests.once")
        assert sum(isinstance(f, BookingIdFilter) for f in logger.filters) == 1
