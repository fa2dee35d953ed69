"""
Quantity normalization — isolated, testable, reusable.

Every quantity that reaches the ledger is a Decimal with two fractional
digits, rounded half-up. Floats go through str() first so 0.1 + 0.2
style drift never reaches a comparison.

Examples:
    normalize('2.345')  -> Decimal('2.35')
    normalize(1.005)    -> Decimal('1.01')
    normalize('abc')    -> InvalidQuantity
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

QUANTITY_PLACES = Decimal('0.01')
ZERO = Decimal('0.00')


class InvalidQuantity(ValueError):
    """Raised when a value cannot be read as a finite quantity."""


def normalize(value) -> Decimal:
    """
    Convert value to a finite Decimal rounded to QUANTITY_PLACES.

    Args:
        value: Decimal, int, float or numeric string

    Returns:
        Rounded Decimal

    Raises:
        InvalidQuantity: None, bool, non-numeric or non-finite input
    """
    if value is None or isinstance(value, bool):
        raise InvalidQuantity(value)

    if isinstance(value, float):
        value = str(value)

    try:
        quantity = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidQuantity(value)

    if not quantity.is_finite():
        raise InvalidQuantity(value)

    return quantity.quantize(QUANTITY_PLACES, rounding=ROUND_HALF_UP)


def clamp(quantity: Decimal) -> Decimal:
    """Floor a quantity at zero."""
    return max(ZERO, quantity)
