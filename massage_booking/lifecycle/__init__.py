from massage_booking.lifecycle.booking_service import BookingService
from massage_booking.lifecycle.scheduler import AcceptanceScheduler, remaining_seconds
from massage_booking.lifecycle.state_machine import BookingStateMachine

__all__ = [
    "BookingService",
    "AcceptanceScheduler",
    "BookingStateMachine",
    "remaining_seconds",
]
