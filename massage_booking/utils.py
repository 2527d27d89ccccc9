"""Shared utilities used across the booking core."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

CENT = Decimal("0.01")


def to_money(value: Union[Decimal, int, float, str]) -> Decimal:
    """Quantize an amount to the currency's minor unit (2 decimal places).

    Floats are converted through ``str`` so binary noise does not leak in.

    Examples:
        >>> to_money(80)
        Decimal('80.00')
        >>> to_money("42.005")
        Decimal('42.01')
    """
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def format_countdown(seconds: float) -> str:
    """Format remaining seconds as ``m:ss`` for a countdown display.

    Partial seconds round up so the display only reads ``0:00`` once
    the window has actually closed.

    Examples:
        >>> format_countdown(120)
        '2:00'
        >>> format_countdown(65.2)
        '1:06'
    """
    whole = max(0, int(-(-seconds // 1)))
    mins, secs = divmod(whole, 60)
    return f"{mins}:{secs:02d}"
