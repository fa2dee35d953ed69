"""
Order completion — move stock for every line of a sales or purchase order.

The engine guarantees atomicity per movement; this module wraps all the
movements of one order plus the status change in a single transaction,
so an order is either fully applied or not applied at all.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from decimal import Decimal

from django.db import transaction
from django.utils import timezone

from stockledger.exceptions import StockError
from stockledger.models.enums import OrderKind, OrderStatus
from stockledger.models.order import Order
from stockledger.models.product import Product
from stockledger.services.movements import (
    MovementRequest,
    MovementResult,
    StockMovements,
    persistence_guard,
)

logger = logging.getLogger('stockledger')


@dataclass(frozen=True)
class OrderCompletion:
    order: Order
    results: list[MovementResult] = field(default_factory=list)

    @property
    def warnings(self) -> list[tuple[Product, str]]:
        """(product, warning) for every line that left stock low."""
        return [(r.product, r.warning) for r in self.results if r.warning]


def _lock_order(order) -> Order:
    pk = getattr(order, 'pk', order)
    try:
        return Order.objects.select_for_update().get(pk=pk)
    except Order.DoesNotExist:
        raise StockError('ORDER_NOT_FOUND', order_id=pk)


def _shortages(items, products: dict) -> list[dict]:
    """Lines of a sale that stock cannot cover (same product lines summed)."""
    needed = defaultdict(lambda: Decimal('0'))
    for item in items:
        needed[item.product_id] += item.quantity

    shortages = []
    for product_id, required in needed.items():
        product = products[product_id]
        if product._quantity < required:
            shortages.append({
                'product_id': product_id,
                'product': product.name,
                'available': product._quantity,
                'requested': required,
            })
    return shortages


class StockOrders:
    """Order lifecycle methods that touch stock."""

    @classmethod
    def complete_order(cls, order, user=None) -> OrderCompletion:
        """
        Complete a PENDING order and move its stock.

        SALE -> one OUTBOUND per item, PURCHASE -> one INBOUND per item.

        Raises:
            StockError('INVALID_STATUS'): Order not PENDING
            StockError('EMPTY_ORDER'): Order without items
            StockError('INSUFFICIENT_STOCK'): data['shortages'] lists every
                product a sale cannot cover
            StockError('PERSISTENCE_FAILURE'): Nothing committed; retryable
            Any StockError from the mutation engine (nothing is applied)

        Concurrency:
            - Runs under transaction.atomic()
            - Locks the order, then its products in pk order
        """
        with persistence_guard(order_id=getattr(order, 'pk', order)), transaction.atomic():
            locked = _lock_order(order)

            if locked.status != OrderStatus.PENDING:
                raise StockError('INVALID_STATUS', order_id=locked.pk, status=locked.status)

            items = list(locked.items.select_related('product').order_by('pk'))
            if not items:
                raise StockError('EMPTY_ORDER', order_id=locked.pk)

            product_ids = sorted({item.product_id for item in items})
            products = {
                p.pk: p for p in
                Product.objects.select_for_update().filter(pk__in=product_ids).order_by('pk')
            }

            if locked.kind == OrderKind.SALE:
                shortages = _shortages(items, products)
                if shortages:
                    raise StockError('INSUFFICIENT_STOCK', order_id=locked.pk, shortages=shortages)

            results = [
                StockMovements.apply(MovementRequest(
                    product_id=item.product_id,
                    kind=locked.movement_kind,
                    quantity=item.quantity,
                    reason=locked.movement_reason,
                    user=user,
                    reference=locked,
                    metadata={'order_item_id': item.pk, 'price': str(item.price)},
                ))
                for item in items
            ]

            locked.status = OrderStatus.COMPLETED
            locked.completed_at = timezone.now()
            locked.save(update_fields=['status', 'completed_at'])

        logger.info(
            "stock.order.completed",
            extra={
                "order_id": locked.pk,
                "number": locked.number,
                "kind": locked.kind,
                "movements": len(results),
            },
        )
        return OrderCompletion(order=locked, results=results)

    @classmethod
    def cancel_order(cls, order) -> Order:
        """
        Cancel a PENDING order. No stock effect.

        Raises:
            StockError('INVALID_STATUS'): Order not PENDING
            StockError('PERSISTENCE_FAILURE'): Nothing committed; retryable
        """
        with persistence_guard(order_id=getattr(order, 'pk', order)), transaction.atomic():
            locked = _lock_order(order)

            if locked.status != OrderStatus.PENDING:
                raise StockError('INVALID_STATUS', order_id=locked.pk, status=locked.status)

            locked.status = OrderStatus.CANCELLED
            locked.save(update_fields=['status'])

        logger.info("stock.order.cancelled", extra={"order_id": locked.pk, "number": locked.number})
        return locked
