"""Integer-cent arithmetic helpers.

All quote amounts are integer cents. Intermediate products use Decimal so
percentages never pass through binary floats.
"""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal

_ONE = Decimal(1)
_HUNDRED = Decimal(100)


def round_half_up(value: Decimal | int) -> int:
    """Round to the nearest cent, halves away from zero."""
    return int(Decimal(value).quantize(_ONE, rounding=ROUND_HALF_UP))


def round_up(value: Decimal | int) -> int:
    """Round up to the next whole cent."""
    return int(Decimal(value).quantize(_ONE, rounding=ROUND_CEILING))


def fraction_of(amount_cents: int, fraction: Decimal) -> int:
    """Return ``fraction`` (0.10 = 10%) of an amount, rounded half up."""
    return round_half_up(Decimal(amount_cents) * fraction)


def percent_of(amount_cents: int, percent: int | Decimal) -> int:
    """Return ``percent`` (10 = 10%) of an amount, rounded half up."""
    return round_half_up(Decimal(amount_cents) * Decimal(percent) / _HUNDRED)


def clamp(value: int, low: int | None = None, high: int | None = None) -> int:
    """Clamp to optional bounds; ``high`` is applied last and always holds."""
    if low is not None and value < low:
        value = low
    if high is not None and value > high:
        value = high
    return value
