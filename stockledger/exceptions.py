"""
Exceptions for Stockledger.

All errors are StockError with a structured code for programmatic handling.
"""

from decimal import Decimal
from typing import Any


class BaseError(Exception):
    """
    Error with a machine-readable code, a human message and context data.

    Subclasses declare ``_default_messages`` keyed by code; an explicit
    ``message`` always wins over the default.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.data!r})"


class StockError(BaseError):
    """
    Structured exception for stock operations.

    Usage:
        try:
            ledger.issue(10, producto, reason='Venta #123')
        except StockError as e:
            if e.code == 'INSUFFICIENT_STOCK':
                print(f"Solo hay {e.available} disponible")
            elif e.retryable:
                ...  # nothing was committed, safe to try again

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'PRODUCT_NOT_FOUND': 'Producto no encontrado',
        'INVALID_QUANTITY': 'Cantidad inválida',
        'INSUFFICIENT_STOCK': 'Stock insuficiente para registrar este movimiento',
        'PERSISTENCE_FAILURE': 'No se pudo guardar el movimiento, intente nuevamente',
        'REASON_REQUIRED': 'El motivo es obligatorio',
        'INVALID_KIND': 'Tipo de movimiento inválido',
        'INVALID_CAUSE': 'Causa de merma inválida para el tipo indicado',
        'INVALID_STATUS': 'Estado inválido para esta operación',
        'EMPTY_ORDER': 'El pedido no tiene items',
        'ORDER_NOT_FOUND': 'Pedido no encontrado',
        'MOVEMENT_NOT_FOUND': 'Movimiento no encontrado',
        'NOT_REVERSIBLE': 'Este movimiento no se puede revertir',
        'ALREADY_REVERSED': 'El movimiento ya fue revertido',
    }

    # Only a failed commit can be retried as-is.
    _retryable_codes = frozenset({'PERSISTENCE_FAILURE'})

    @property
    def retryable(self) -> bool:
        """True when nothing was committed and the same call may be repeated."""
        return self.code in self._retryable_codes

    @property
    def available(self) -> Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', Decimal('0'))

    @property
    def requested(self) -> Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', Decimal('0'))

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'retryable': self.retryable,
            'data': {
                k: _jsonable(v) for k, v in self.data.items()
            }
        }


def _jsonable(value):
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    return value
