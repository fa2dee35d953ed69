"""
Stock services — modular organization of stock operations.

Re-exports all public classes; stockledger.service.Ledger combines them:
    from stockledger.services import StockQueries, StockMovements, StockShrinkage, StockOrders
"""

from stockledger.services.movements import MovementRequest, MovementResult, StockMovements
from stockledger.services.orders import OrderCompletion, StockOrders
from stockledger.services.queries import StockQueries
from stockledger.services.shrinkage import ShrinkageResult, StockShrinkage

__all__ = [
    'StockQueries',
    'StockMovements',
    'StockShrinkage',
    'StockOrders',
    'MovementRequest',
    'MovementResult',
    'ShrinkageResult',
    'OrderCompletion',
]
