"""Money helpers: all amounts are Decimals quantized to cents, rounded half up."""
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Any

CENTS = Decimal("0.01")


def to_money(value: Any) -> Decimal:
    """Quantize a number (int, float, str, Decimal) to 2 decimal places."""
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value))
        except InvalidOperation:
            raise ValueError(f"Not a monetary amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Not a monetary amount: {value!r}")
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def amounts_match(expected: Decimal, actual: Decimal, tolerance: Decimal) -> bool:
    return abs(to_money(expected) - to_money(actual)) <= tolerance
