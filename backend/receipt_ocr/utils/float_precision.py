"""
Float precision utilities for currency amounts.

Receipt amounts travel as floats in the API payload, so sums and deltas are
rounded half-up to whole pennies before they are compared or returned.
"""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Iterable

_PENNY = Decimal("0.01")


def round_money(value: float) -> float:
    """
    Round a currency amount half-up to 2 decimal places.

    Args:
        value: Amount to round

    Returns:
        Rounded float value (0.0 for values that are not finite numbers)
    """
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return 0.0
    if not amount.is_finite():
        return 0.0
    return float(amount.quantize(_PENNY, rounding=ROUND_HALF_UP))


def sum_money(values: Iterable[float]) -> float:
    """Sum currency amounts exactly and round the result to 2 decimal places."""
    total = sum((Decimal(str(v)) for v in values), Decimal("0"))
    return round_money(float(total))
