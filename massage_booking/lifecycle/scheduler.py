"""
Per-request acceptance countdowns.

Each pending booking owns one asyncio task that sleeps until the
request's acceptance deadline and then fires a single callback. The
scheduler never decides the outcome: the callback submits a
``deadline_elapsed`` attempt, which the directory arbitrates against any
therapist response or cancellation that got there first.
"""

import asyncio
import logging
from datetime import datetime
from typing import Awaitable, Callable

from massage_booking.schemas.booking_schema import BookingRequest

logger = logging.getLogger(__name__)

DeadlineCallback = Callable[[str], Awaitable[object]]


def remaining_seconds(request: BookingRequest, now: datetime) -> float:
    """Seconds left in the acceptance window, clamped at zero."""
    return max(0.0, (request.acceptance_deadline - now).total_seconds())


class AcceptanceScheduler:
    """Registry of running countdown tasks keyed by booking id."""

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task] = {}

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    def is_scheduled(self, booking_id: str) -> bool:
        return booking_id in self._tasks

    def schedule(self, booking_id: str, delay_seconds: float, callback: DeadlineCallback) -> None:
        """Start (or restart) the countdown for ``booking_id``.

        Must be called from a running event loop.
        """
        self.cancel(booking_id)
        task = asyncio.get_running_loop().create_task(
            self._countdown(booking_id, max(0.0, delay_seconds), callback),
            name=f"acceptance-timer-{booking_id}",
        )
        self._tasks[booking_id] = task
        logger.debug("Countdown started for %s (%.3fs)", booking_id, delay_seconds)

    def cancel(self, booking_id: str) -> bool:
        """Cancel and release the countdown. Returns False if none was running."""
        task = self._tasks.pop(booking_id, None)
        if task is None:
            return False
        task.cancel()
        logger.debug("Countdown cancelled for %s", booking_id)
        return True

    def shutdown(self) -> None:
        """Cancel every running countdown."""
        for booking_id in list(self._tasks):
            self.cancel(booking_id)

    async def _countdown(self, booking_id: str, delay: float, callback: DeadlineCallback) -> None:
        await asyncio.sleep(delay)
        # Once fired the timer is no longer cancellable; it loses any race
        # through the directory's compare-and-set instead.
        if self._tasks.get(booking_id) is asyncio.current_task():
            del self._tasks[booking_id]
        logger.debug("Countdown fired for %s", booking_id)
        await callback(booking_id)
