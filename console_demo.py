"""
Offline console demo: runs booking request lifecycles without any backend.

Drives the real pricing engine, directory, countdowns and booking service
against the mock payment processor and in-memory notifier. The therapist
is simulated by a task that responds after a configurable delay, which
stands in for the real therapist-response channel.

Usage:
    python console_demo.py
    python console_demo.py --scenario timeout --timeout 2
    python console_demo.py --scenario payment_failed
"""

import argparse
import asyncio
from datetime import date, time, timedelta
from typing import Optional

from massage_booking.config import settings
from massage_booking.lifecycle.booking_service import BookingService
from massage_booking.lifecycle.scheduler import AcceptanceScheduler
from massage_booking.schemas.booking_schema import BookingStatus, BookingSubmission
from massage_booking.schemas.user_schema import Role, User
from massage_booking.tools.directory import BookingDirectory
from massage_booking.tools.notifications import InMemoryNotifier
from massage_booking.tools.payments import MockPaymentProcessor
from massage_booking.tools.users import UserDirectory
from massage_booking.utils import format_countdown

BLUE = "\033[94m"
GREEN = "\033[92m"
YELLOW = "\033[93m"
RED = "\033[91m"
DIM = "\033[2m"
RESET = "\033[0m"
BOLD = "\033[1m"

CUSTOMER_ID = "customer-001"
THERAPIST_ID = "therapist-007"

DEMO_USERS = (
    User(id=CUSTOMER_ID, name="Sam", email="sam@example.com", role=Role.CUSTOMER),
    User(id="therapist-003", name="Priya", email="priya@example.com", role=Role.THERAPIST),
    User(id=THERAPIST_ID, name="Jordan", email="jordan@example.com", role=Role.THERAPIST),
)


class ConsoleSession:
    """Plays one scripted booking lifecycle in the terminal."""

    # scenario -> (therapist action, response delay as a fraction of the window)
    SCENARIOS: dict[str, tuple[Optional[str], float]] = {
        "accept": ("accept", 0.25),
        "decline": ("decline", 0.25),
        "timeout": (None, 0.0),
        "late_accept": ("accept", 1.25),
        "cancel": ("cancel", 0.25),
        "payment_failed": ("accept", 0.25),
    }

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        self.users = UserDirectory(DEMO_USERS)
        self.notifier = InMemoryNotifier()
        self.payments = MockPaymentProcessor()
        self.service = BookingService(
            directory=BookingDirectory(),
            scheduler=AcceptanceScheduler(),
            payments=self.payments,
            notifier=self.notifier,
            acceptance_timeout_seconds=timeout_seconds,
        )

    def say(self, who: str, text: str, colour: str = GREEN) -> None:
        print(f"{colour}{BOLD}[{who}]{RESET} {colour}{text}{RESET}")

    def system_log(self, text: str) -> None:
        print(f"{DIM}  >> {text}{RESET}")

    async def run_scenario(self, scenario: str) -> None:
        action, fraction = self.SCENARIOS[scenario]

        print()
        print(f"{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  {settings.app_name.upper()} - Scenario: {scenario}{RESET}")
        print(f"{BOLD}  Acceptance window: {self.timeout_seconds:g}s{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")
        print()

        for item in self.service.catalog.menu():
            self.system_log(
                f"{item['name']}: from ${item['base_price']} ({item['durations']} min)"
            )
        therapists = self.users.therapists()
        self.system_log(f"Therapists: {', '.join(t.name for t in therapists)}")
        chosen = next(t for t in therapists if t.id == THERAPIST_ID)

        request = await self.service.submit(BookingSubmission(
            customer_id=CUSTOMER_ID,
            therapist_id=chosen.id,
            service_id=1,
            duration_minutes=120,
            scheduled_date=date.today() + timedelta(days=1),
            scheduled_time=time(10, 0),
            address="42 Wallaby Way, Sydney",
            latitude=-33.8688,
            longitude=151.2093,
            parking_notes="Visitor bay out front",
            room_notes="Second floor, no lift",
        ))
        self.say(
            "Customer",
            f"Requested 120 min Stressbuster with {chosen.name} for ${request.price}",
            BLUE,
        )
        self.system_log(
            f"Booking {request.id[:8]} pending, "
            f"{format_countdown(self.service.remaining_seconds(request.id))} left"
        )

        responder = None
        if action is not None:
            responder = asyncio.create_task(
                self._respond(request.id, action, fraction * self.timeout_seconds)
            )

        status = await self.service.wait_for_response(request.id)
        self.system_log(f"Request settled: {status.value}")
        if responder is not None:
            await responder

        if scenario == "payment_failed":
            self.payments.fail_for(request.id)
        result = await self.service.capture_payment(request.id)
        if result.applied:
            colour = GREEN if result.status == BookingStatus.CONFIRMED else RED
            self.say("Payment", f"Booking {result.status.value}", colour)
        else:
            self.say("Payment", f"Skipped: {result.reason}", YELLOW)

        self.service.close()

        print(f"\n{BOLD}{'=' * 60}{RESET}")
        print(f"{BOLD}  Scenario '{scenario}' complete.{RESET}")
        trace = [c.status.value for c in self.service.directory.history(request.id)]
        print(f"{DIM}  Status trace: {' -> '.join(trace)}{RESET}")
        print(f"{DIM}  Notifications: {[n.type.value for n in self.notifier.sent]}{RESET}")
        print(f"{BOLD}{'=' * 60}{RESET}")

    async def _respond(self, booking_id: str, action: str, delay: float) -> None:
        await asyncio.sleep(delay)
        if action == "accept":
            result = await self.service.accept(booking_id, THERAPIST_ID)
            who = "Therapist"
        elif action == "decline":
            result = await self.service.decline(booking_id, THERAPIST_ID)
            who = "Therapist"
        else:
            result = await self.service.cancel(booking_id, CUSTOMER_ID)
            who = "Customer"

        if result.stale:
            self.say(who, f"{action} ignored: {result.reason}", YELLOW)
        else:
            self.say(who, f"{action} -> {result.status.value}", BLUE)


def main() -> None:
    parser = argparse.ArgumentParser(description="Offline booking lifecycle demo")
    parser.add_argument(
        "--scenario",
        choices=sorted(ConsoleSession.SCENARIOS),
        default="accept",
        help="Lifecycle to play through",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=4.0,
        help="Acceptance window in seconds (the service default is "
             f"{settings.booking.acceptance_timeout_seconds:g})",
    )
    args = parser.parse_args()

    session = ConsoleSession(timeout_seconds=args.timeout)
    asyncio.run(session.run_scenario(args.scenario))


if __name__ == "__main__":
    main()
