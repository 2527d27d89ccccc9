"""Error taxonomy for the booking core.

Only hard failures are exceptions. Lifecycle outcomes such as a stale
transition or a failed payment are reported as status values and
``TransitionResult`` objects instead.
"""


class BookingError(Exception):
    """Base class for all booking core errors."""


class InvalidDurationError(BookingError, ValueError):
    """Raised when a duration does not fit a tier's base/increment rule."""

    def __init__(self, service_name: str, duration_minutes: object, reason: str) -> None:
        self.service_name = service_name
        self.duration_minutes = duration_minutes
        super().__init__(
            f"Invalid duration {duration_minutes!r} for '{service_name}': {reason}"
        )


class NotFoundError(BookingError, LookupError):
    """Raised when an operation references an unknown identifier."""


class BookingNotFoundError(NotFoundError):
    """No booking request exists with the given id."""

    def __init__(self, booking_id: str) -> None:
        self.booking_id = booking_id
        super().__init__(f"Booking {booking_id} not found.")


class ServiceNotFoundError(NotFoundError):
    """No active service tier exists with the given id."""

    def __init__(self, service_id: object) -> None:
        self.service_id = service_id
        super().__init__(f"Service {service_id!r} not found.")


class DuplicateBookingError(BookingError):
    """Raised when a booking id is created twice."""


class PermissionDeniedError(BookingError):
    """Raised when a principal acts on a booking they are not party to."""
