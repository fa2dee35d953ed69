"""
Transition validation — decide whether a movement may be applied.

Never touches the database. The mutation engine calls validate() with
the locked quantity on hand; anyone else may call it to pre-check a
request (forms, order previews).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any

from stockledger.exceptions import StockError
from stockledger.models.enums import MovementKind
from stockledger.quantities import InvalidQuantity, clamp, normalize


@dataclass(frozen=True)
class Decision:
    """Outcome of validate()."""

    ok: bool
    resulting_quantity: Decimal | None = None
    error_code: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    def raise_for_error(self) -> None:
        """Raise the matching StockError when the decision is negative."""
        if not self.ok:
            raise StockError(self.error_code, **self.data)


def _reject(code: str, **data) -> Decision:
    return Decision(ok=False, error_code=code, data=data)


def validate(current_quantity, requested, kind) -> Decision:
    """
    Validate a stock transition.

    Args:
        current_quantity: Quantity on hand (>= 0)
        requested: Magnitude to add (INBOUND) or remove (OUTBOUND),
            or the absolute target (ADJUSTMENT)
        kind: MovementKind

    Returns:
        Decision with resulting_quantity on success, error_code otherwise.
        Possible codes: INVALID_QUANTITY, INSUFFICIENT_STOCK, INVALID_KIND.
    """
    try:
        kind = MovementKind(kind)
    except ValueError:
        return _reject('INVALID_KIND', kind=kind)

    try:
        current = clamp(normalize(current_quantity))
        quantity = normalize(requested)
    except InvalidQuantity:
        return _reject('INVALID_QUANTITY', requested=requested)

    if kind == MovementKind.ADJUSTMENT:
        if quantity < 0:
            return _reject('INVALID_QUANTITY', requested=quantity)
        return Decision(ok=True, resulting_quantity=quantity)

    if quantity <= 0:
        return _reject('INVALID_QUANTITY', requested=quantity)

    if kind == MovementKind.INBOUND:
        return Decision(ok=True, resulting_quantity=current + quantity)

    # OUTBOUND: never partially fulfilled
    if quantity > current:
        return _reject('INSUFFICIENT_STOCK', available=current, requested=quantity)

    return Decision(ok=True, resulting_quantity=clamp(current - quantity))


def magnitude_or_error(requested) -> Decimal:
    """Normalize a requested quantity, raising INVALID_QUANTITY on bad input."""
    try:
        return normalize(requested)
    except InvalidQuantity:
        raise StockError('INVALID_QUANTITY', requested=requested)
