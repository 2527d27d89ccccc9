from massage_booking.schemas.booking_schema import (
    BookingEvent,
    BookingRequest,
    BookingStatus,
    BookingSubmission,
    TransitionOutcome,
    TransitionResult,
)
from massage_booking.schemas.service_schema import ServiceTier
from massage_booking.schemas.user_schema import Role, User

__all__ = [
    "BookingEvent",
    "BookingRequest",
    "BookingStatus",
    "BookingSubmission",
    "TransitionOutcome",
    "TransitionResult",
    "ServiceTier",
    "Role",
    "User",
]
