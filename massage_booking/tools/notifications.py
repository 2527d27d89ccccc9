"""
Notification channel contract and in-memory implementation.

In production, this would dispatch email/SMS through the notification
provider. Dispatch is fire-and-forget; delivery is the channel's concern.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol

from massage_booking.schemas.booking_schema import BookingStatus

logger = logging.getLogger(__name__)


class NotificationType(str, Enum):
    NEW_REQUEST = "new_request"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    TIMED_OUT = "timed_out"
    CANCELLED = "cancelled"
    PAYMENT_FAILED = "payment_failed"
    CONFIRMED = "confirmed"

    @classmethod
    def for_status(cls, status: BookingStatus) -> "NotificationType":
        if status == BookingStatus.PENDING:
            return cls.NEW_REQUEST
        return cls(status.value)


@dataclass(frozen=True)
class Notification:
    booking_id: str
    type: NotificationType
    recipient_id: str
    created_at: datetime


class Notifier(Protocol):
    def send(self, notification: Notification) -> None:
        ...


class InMemoryNotifier:
    """Keeps every dispatched notification for inspection."""

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    def send(self, notification: Notification) -> None:
        self.sent.append(notification)
        logger.info(
            "Notification %s for booking %s -> %s",
            notification.type.value, notification.booking_id, notification.recipient_id,
        )

    def of_type(self, kind: NotificationType) -> list[Notification]:
        return [n for n in self.sent if n.type == kind]
