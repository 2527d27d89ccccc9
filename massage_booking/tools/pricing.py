"""
Tiered base + increment pricing.

A booking's price is the tier's base price plus one increment price for
every increment of time booked beyond the base duration:

    price = base_price + ((duration - base_duration) / increment) * increment_price

Usage:
    price = compute_price(tier, 120)   # Stressbuster: 80 + 2 * 40 = 160.00
"""

from decimal import Decimal
from typing import Iterable

from massage_booking.exceptions import InvalidDurationError
from massage_booking.schemas.service_schema import ServiceTier
from massage_booking.utils import to_money


def _increments(tier: ServiceTier, duration_minutes: int) -> int:
    if isinstance(duration_minutes, bool) or not isinstance(duration_minutes, int):
        raise InvalidDurationError(tier.name, duration_minutes, "duration must be whole minutes")
    if duration_minutes < tier.base_duration_minutes:
        raise InvalidDurationError(
            tier.name,
            duration_minutes,
            f"shorter than the base duration of {tier.base_duration_minutes} minutes",
        )
    extra, remainder = divmod(duration_minutes - tier.base_duration_minutes, tier.increment_minutes)
    if remainder:
        raise InvalidDurationError(
            tier.name,
            duration_minutes,
            f"must be {tier.base_duration_minutes} minutes plus a multiple of "
            f"{tier.increment_minutes}",
        )
    return extra


def compute_price(tier: ServiceTier, duration_minutes: int) -> Decimal:
    """Return the price of ``duration_minutes`` of ``tier``, to 2 decimal places.

    Raises:
        InvalidDurationError: If the duration is below the base duration or
            not reachable from it in whole increments.
    """
    k = _increments(tier, duration_minutes)
    return to_money(tier.base_price + k * tier.increment_price)


def is_valid_duration(tier: ServiceTier, duration_minutes: int) -> bool:
    try:
        _increments(tier, duration_minutes)
    except InvalidDurationError:
        return False
    return True


def offered_durations(tier: ServiceTier, choices: Iterable[int]) -> list[int]:
    """Filter the booking form's duration choices down to those valid for a tier."""
    return sorted(d for d in set(choices) if is_valid_duration(tier, d))
