"""
Stockledger Models.

Core models for stock management:
- Product: Quantity on hand + minimum threshold
- Movement: Immutable ledger of changes
- ShrinkageType / ShrinkageCause / Shrinkage: Loss taxonomy and records
- Order / OrderItem: Sales and purchase orders
"""

from stockledger.models.enums import (
    MovementKind,
    OrderKind,
    OrderStatus,
    ShrinkageClassification,
    StockLevel,
)
from stockledger.models.movement import Movement
from stockledger.models.order import Order, OrderItem
from stockledger.models.product import Product
from stockledger.models.shrinkage import Shrinkage, ShrinkageCause, ShrinkageType

__all__ = [
    'MovementKind',
    'StockLevel',
    'ShrinkageClassification',
    'OrderKind',
    'OrderStatus',
    'Product',
    'Movement',
    'ShrinkageType',
    'ShrinkageCause',
    'Shrinkage',
    'Order',
    'OrderItem',
]
