"""
Stock movements — the only code path that changes quantity on hand.

Every call writes exactly one Product update and one Movement insert,
in one transaction, or nothing at all.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import timedelta
from decimal import Decimal
from typing import Any

from django.contrib.contenttypes.models import ContentType
from django.db import DatabaseError, transaction
from django.utils import timezone

from stockledger.conf import stockledger_settings
from stockledger.exceptions import StockError
from stockledger.models.enums import MovementKind, StockLevel
from stockledger.models.movement import Movement
from stockledger.models.product import Product
from stockledger.services.thresholds import classify, warning_for
from stockledger.services.validation import magnitude_or_error, validate
from stockledger.signals import stock_level_low

logger = logging.getLogger('stockledger')


@dataclass(frozen=True)
class MovementRequest:
    """
    One requested stock change.

    quantity is a positive magnitude for INBOUND/OUTBOUND and the
    absolute target for ADJUSTMENT.
    """

    product_id: Any
    kind: MovementKind
    quantity: Any
    reason: str
    user: Any = None
    actor: str = ''
    reference: Any = None
    metadata: dict = field(default_factory=dict)

    def __post_init__(self):
        try:
            object.__setattr__(self, 'kind', MovementKind(self.kind))
        except ValueError:
            raise StockError('INVALID_KIND', kind=self.kind)


@dataclass(frozen=True)
class MovementResult:
    """What apply() hands back to the caller."""

    product: Product
    movement: Movement
    level: StockLevel
    warning: str | None = None


def _product_pk(product):
    return getattr(product, 'pk', product)


@contextmanager
def persistence_guard(**context):
    """
    Turn a DatabaseError into a retryable PERSISTENCE_FAILURE.

    Open it outside transaction.atomic() so the rollback has already
    happened when the StockError reaches the caller.
    """
    try:
        yield
    except DatabaseError as exc:
        logger.exception("stock.persistence_failure", extra=context)
        raise StockError('PERSISTENCE_FAILURE', error=str(exc), **context) from exc


def _actor_for(request: MovementRequest) -> str:
    if request.actor:
        return request.actor
    if request.user is not None:
        return request.user.get_username()
    return stockledger_settings.DEFAULT_ACTOR


class StockMovements:
    """State-changing stock movement methods."""

    @classmethod
    def apply(cls, request: MovementRequest) -> MovementResult:
        """
        Apply one validated movement.

        Raises:
            StockError('REASON_REQUIRED'): Empty reason
            StockError('INVALID_QUANTITY'): Non-finite, zero or negative quantity
            StockError('PRODUCT_NOT_FOUND'): No product with that pk
            StockError('INSUFFICIENT_STOCK'): OUTBOUND above quantity on hand
            StockError('PERSISTENCE_FAILURE'): Write did not commit; retryable

        Concurrency:
            - Runs under transaction.atomic() (a savepoint when nested)
            - Uses select_for_update() on Product
            - Validates after lock
            - Update is guarded by the quantity read under the lock
        """
        if not request.reason:
            raise StockError('REASON_REQUIRED')

        quantity = magnitude_or_error(request.quantity)

        with persistence_guard(product_id=request.product_id, kind=request.kind.value, qty=str(quantity)):
            with transaction.atomic():
                product, movement = cls._write(request, quantity)

        level = classify(product._quantity, product.min_quantity)
        warning = warning_for(level)

        logger.info(
            "stock.movement",
            extra={
                "product_id": product.pk,
                "movement_id": movement.pk,
                "kind": movement.kind,
                "delta": str(movement.delta),
                "quantity": str(product._quantity),
                "reason": movement.reason,
            },
        )

        if warning:
            logger.warning(
                "stock.level.low",
                extra={
                    "product_id": product.pk,
                    "level": level,
                    "quantity": str(product._quantity),
                    "min_quantity": str(product.min_quantity),
                },
            )
            if stockledger_settings.SEND_LEVEL_SIGNALS:
                transaction.on_commit(
                    lambda: stock_level_low.send_robust(
                        sender=Product,
                        product=product,
                        movement=movement,
                        level=level,
                        warning=warning,
                    )
                )

        return MovementResult(product=product, movement=movement, level=level, warning=warning)

    @classmethod
    def _write(cls, request: MovementRequest, quantity: Decimal):
        try:
            product = Product.objects.select_for_update().get(pk=request.product_id)
        except (Product.DoesNotExist, ValueError, TypeError):
            raise StockError('PRODUCT_NOT_FOUND', product_id=request.product_id)

        decision = validate(product._quantity, quantity, request.kind)
        decision.raise_for_error()

        before = product._quantity
        after = decision.resulting_quantity

        # Guard against writers that got past a no-op row lock (SQLite)
        updated = Product.objects.filter(pk=product.pk, _quantity=before).update(
            _quantity=after,
            updated_at=timezone.now(),
        )
        if updated != 1:
            logger.warning(
                "stock.concurrent_modification",
                extra={"product_id": product.pk, "expected": str(before)},
            )
            raise StockError(
                'PERSISTENCE_FAILURE',
                product_id=product.pk,
                reason='concurrent_modification',
            )

        movement = Movement.objects.create(
            product=product,
            kind=request.kind,
            delta=after - before,
            quantity_before=before,
            quantity_after=after,
            reason=request.reason,
            reference=request.reference,
            user=request.user,
            actor=_actor_for(request),
            metadata=request.metadata,
        )

        product.refresh_from_db()
        return product, movement

    # ══════════════════════════════════════════════════════════════
    # SHORTCUTS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def receive(cls, quantity, product, reason='Entrada', reference=None,
                user=None, actor='', **metadata) -> MovementResult:
        """Stock entry (INBOUND)."""
        return cls.apply(MovementRequest(
            product_id=_product_pk(product),
            kind=MovementKind.INBOUND,
            quantity=quantity,
            reason=reason,
            user=user,
            actor=actor,
            reference=reference,
            metadata=metadata,
        ))

    @classmethod
    def issue(cls, quantity, product, reason='Salida', reference=None,
              user=None, actor='', **metadata) -> MovementResult:
        """
        Stock exit (OUTBOUND).

        Raises:
            StockError('INSUFFICIENT_STOCK'): If quantity > quantity on hand
        """
        return cls.apply(MovementRequest(
            product_id=_product_pk(product),
            kind=MovementKind.OUTBOUND,
            quantity=quantity,
            reason=reason,
            user=user,
            actor=actor,
            reference=reference,
            metadata=metadata,
        ))

    @classmethod
    def adjust(cls, product, new_quantity, reason, user=None, actor='',
               **metadata) -> MovementResult:
        """
        Inventory adjustment (physical count).

        Sets quantity on hand to new_quantity; delta is computed under lock.
        A count that matches the current stock is still recorded.

        Raises:
            StockError('REASON_REQUIRED'): If reason is empty
        """
        if not reason:
            raise StockError('REASON_REQUIRED')

        return cls.apply(MovementRequest(
            product_id=_product_pk(product),
            kind=MovementKind.ADJUSTMENT,
            quantity=new_quantity,
            reason=f"Ajuste: {reason}",
            user=user,
            actor=actor,
            metadata=metadata,
        ))

    # ══════════════════════════════════════════════════════════════
    # REVERSAL
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def reverse(cls, movement, reason, user=None, actor='') -> MovementResult:
        """
        Undo a movement with a compensating one.

        INBOUND -> OUTBOUND of the same size, OUTBOUND -> INBOUND,
        ADJUSTMENT -> ADJUSTMENT back to its quantity_before.
        The reversed movement is never touched; the new one references it.

        Raises:
            StockError('REASON_REQUIRED'): If reason is empty
            StockError('MOVEMENT_NOT_FOUND'): No movement with that pk
            StockError('NOT_REVERSIBLE'): Order or shrinkage movement, a
                reversal itself, or older than REVERSAL_WINDOW_HOURS
            StockError('ALREADY_REVERSED'): Movement was reversed before
            StockError('INSUFFICIENT_STOCK'): Reversal would leave negative stock
        """
        if not reason:
            raise StockError('REASON_REQUIRED')

        movement_id = getattr(movement, 'pk', movement)

        with persistence_guard(movement_id=movement_id):
            with transaction.atomic():
                original = _load_reversible(movement_id)

                if original.kind == MovementKind.ADJUSTMENT:
                    kind, quantity = MovementKind.ADJUSTMENT, original.quantity_before
                elif original.kind == MovementKind.INBOUND:
                    kind, quantity = MovementKind.OUTBOUND, original.delta
                else:
                    kind, quantity = MovementKind.INBOUND, -original.delta

                result = cls.apply(MovementRequest(
                    product_id=original.product_id,
                    kind=kind,
                    quantity=quantity,
                    reason=f"Reversión: {reason}",
                    user=user,
                    actor=actor,
                    reference=original,
                    metadata={'reversed_movement_id': original.pk},
                ))

        logger.info(
            "stock.movement.reversed",
            extra={
                "movement_id": original.pk,
                "reversal_id": result.movement.pk,
                "product_id": original.product_id,
            },
        )
        return result


def _load_reversible(movement_id) -> Movement:
    """Fetch a movement for reversal, with its product row locked."""
    from stockledger.models.order import Order
    from stockledger.models.shrinkage import Shrinkage

    try:
        original = Movement.objects.get(pk=movement_id)
    except (Movement.DoesNotExist, ValueError, TypeError):
        raise StockError('MOVEMENT_NOT_FOUND', movement_id=movement_id)

    # Serializes reversals of the same movement
    Product.objects.select_for_update().get(pk=original.product_id)

    movement_type = ContentType.objects.get_for_model(Movement)
    order_type = ContentType.objects.get_for_model(Order)

    if original.reference_type_id in (movement_type.pk, order_type.pk):
        raise StockError('NOT_REVERSIBLE', movement_id=original.pk, why='reference')
    if Shrinkage.objects.filter(movement=original).exists():
        raise StockError('NOT_REVERSIBLE', movement_id=original.pk, why='shrinkage')

    window = stockledger_settings.REVERSAL_WINDOW_HOURS
    if window is not None and timezone.now() - original.created_at > timedelta(hours=window):
        raise StockError('NOT_REVERSIBLE', movement_id=original.pk, why='too_old')

    already = Movement.objects.filter(reference_type=movement_type, reference_id=original.pk)
    if already.exists():
        raise StockError('ALREADY_REVERSED', movement_id=original.pk, reversal_id=already.first().pk)

    return original
