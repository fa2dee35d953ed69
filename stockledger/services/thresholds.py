"""
Stock thresholds — classify quantity on hand against the minimum.

Pure functions: no queries, no side effects. Callable after a movement
(advisory warning) or from reporting code.

Usage:
    from stockledger.services.thresholds import classify, warning_for

    level = classify(Decimal('1'), Decimal('5'))   # StockLevel.BELOW_MINIMUM
    warning_for(level)                             # 'El nuevo stock queda ...'
"""

from decimal import Decimal

from stockledger.models.enums import StockLevel
from stockledger.quantities import normalize

WARNINGS = {
    StockLevel.OUT_OF_STOCK: 'El producto se quedó sin stock',
    StockLevel.BELOW_MINIMUM: 'El nuevo stock queda por debajo del mínimo',
}


def classify(quantity, minimum) -> StockLevel:
    """
    Classify a quantity on hand.

    Returns:
        OUT_OF_STOCK when quantity == 0,
        BELOW_MINIMUM when 0 < quantity < minimum,
        NORMAL otherwise.
    """
    quantity = normalize(quantity)
    minimum = normalize(minimum if minimum is not None else Decimal('0'))

    if quantity <= 0:
        return StockLevel.OUT_OF_STOCK
    if quantity < minimum:
        return StockLevel.BELOW_MINIMUM
    return StockLevel.NORMAL


def warning_for(level: StockLevel) -> str | None:
    """User-facing warning for a level, None when stock is normal."""
    return WARNINGS.get(level)
