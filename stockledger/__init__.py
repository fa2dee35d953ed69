"""
Django Stockledger — inventory ledger for a produce wholesaler.

Stock on hand lives on Product; every change is an immutable Movement
written in the same transaction.

Uso:
    from stockledger import ledger, StockError

    ledger.receive(20, palta, reason='Compra OC-001')
    ledger.issue(3, palta, reason='Venta PV-001')
    ledger.register_shrinkage(1, palta, deterioro)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'ledger':
        from stockledger.service import Ledger
        return Ledger
    elif name == 'StockError':
        from stockledger.exceptions import StockError
        return StockError
    elif name == 'MovementRequest':
        from stockledger.services.movements import MovementRequest
        return MovementRequest
    elif name in (
        'Product', 'Movement', 'MovementKind', 'StockLevel', 'Shrinkage',
        'ShrinkageType', 'ShrinkageCause', 'ShrinkageClassification',
        'Order', 'OrderItem', 'OrderKind', 'OrderStatus',
    ):
        from stockledger import models
        return getattr(models, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'ledger',
    'StockError',
    'MovementRequest',
    'Product',
    'Movement',
    'MovementKind',
    'StockLevel',
    'Shrinkage',
    'ShrinkageType',
    'ShrinkageCause',
    'ShrinkageClassification',
    'Order',
    'OrderItem',
    'OrderKind',
    'OrderStatus',
]

__version__ = '0.1.0'
