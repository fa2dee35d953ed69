"""
Shrinkage (merma) — register losses through the mutation engine.

Usage:
    from stockledger import ledger

    result = ledger.register_shrinkage(
        Decimal('2.5'), tomate, deterioro, cause=sobre_maduracion,
        user=request.user,
    )
    if result.warning:
        messages.warning(request, result.warning)
"""

import csv
import logging
from dataclasses import dataclass

from django.db import transaction

from stockledger.exceptions import StockError
from stockledger.models.enums import MovementKind, ShrinkageClassification, StockLevel
from stockledger.models.movement import Movement
from stockledger.models.shrinkage import Shrinkage, ShrinkageCause, ShrinkageType
from stockledger.services.movements import (
    MovementRequest,
    StockMovements,
    _product_pk,
    persistence_guard,
)
from stockledger.services.queries import _as_datetime

logger = logging.getLogger('stockledger')

CSV_HEADER = [
    'Fecha', 'Producto', 'Tipo', 'Causa', 'Cantidad',
    'Clasificación', 'Usuario', 'Observaciones',
]


@dataclass(frozen=True)
class ShrinkageResult:
    shrinkage: Shrinkage
    movement: Movement
    level: StockLevel
    warning: str | None = None


def _check_taxonomy(shrinkage_type: ShrinkageType, cause: ShrinkageCause | None):
    if not shrinkage_type.is_active:
        raise StockError('INVALID_CAUSE', type=shrinkage_type.name)
    if cause is None:
        return
    if cause.type_id != shrinkage_type.pk or not cause.is_active:
        raise StockError(
            'INVALID_CAUSE',
            type=shrinkage_type.name,
            cause=cause.name,
        )


class StockShrinkage:
    """Shrinkage registration and reporting."""

    @classmethod
    def register_shrinkage(cls, quantity, product, shrinkage_type: ShrinkageType,
                           cause: ShrinkageCause | None = None,
                           classification: str = ShrinkageClassification.NORMAL,
                           notes: str = '', user=None) -> ShrinkageResult:
        """
        Take a lost quantity out of stock and record why.

        Raises:
            StockError('INVALID_CAUSE'): Cause not in type, or inactive
            StockError('INSUFFICIENT_STOCK'): Loss above quantity on hand
            StockError('PERSISTENCE_FAILURE'): Nothing committed; retryable
            Any other StockError from the mutation engine

        Concurrency:
            - Runs under transaction.atomic()
            - The OUTBOUND movement and the Shrinkage commit together
        """
        _check_taxonomy(shrinkage_type, cause)
        classification = ShrinkageClassification(classification)

        reason = f"Merma: {shrinkage_type.name}"
        if cause is not None:
            reason = f"{reason} / {cause.name}"

        with persistence_guard(product_id=_product_pk(product)), transaction.atomic():
            result = StockMovements.apply(MovementRequest(
                product_id=_product_pk(product),
                kind=MovementKind.OUTBOUND,
                quantity=quantity,
                reason=reason,
                user=user,
                metadata={'classification': classification.value},
            ))
            shrinkage = Shrinkage.objects.create(
                product=result.product,
                type=shrinkage_type,
                cause=cause,
                quantity=-result.movement.delta,
                classification=classification,
                notes=notes,
                movement=result.movement,
                user=user,
            )

        logger.info(
            "stock.shrinkage",
            extra={
                "shrinkage_id": shrinkage.pk,
                "product_id": result.product.pk,
                "qty": str(shrinkage.quantity),
                "classification": classification.value,
            },
        )
        return ShrinkageResult(
            shrinkage=shrinkage,
            movement=result.movement,
            level=result.level,
            warning=result.warning,
        )

    @classmethod
    def shrinkage_report(cls, since=None, until=None, product=None,
                         shrinkage_type=None, classification: str | None = None) -> list[dict]:
        """
        Shrinkage rows for reports, newest first.

        Returns:
            List of dicts with date, product, type, cause, quantity,
            classification, user, notes
        """
        qs = Shrinkage.objects.select_related('product', 'type', 'cause', 'user')

        if since is not None:
            qs = qs.filter(created_at__gte=_as_datetime(since))
        if until is not None:
            qs = qs.filter(created_at__lte=_as_datetime(until, end_of_day=True))
        if product is not None:
            qs = qs.filter(product_id=_product_pk(product))
        if shrinkage_type is not None:
            qs = qs.filter(type_id=getattr(shrinkage_type, 'pk', shrinkage_type))
        if classification:
            qs = qs.filter(classification=ShrinkageClassification(classification))

        return [
            {
                'id': s.pk,
                'date': s.created_at.date().isoformat(),
                'product_id': s.product_id,
                'product': s.product.name,
                'type': s.type.name,
                'cause': s.cause.name if s.cause else '',
                'quantity': s.quantity,
                'classification': s.classification,
                'user': s.user.get_username() if s.user else '',
                'notes': s.notes,
            }
            for s in qs.order_by('-created_at', '-id')
        ]

    @classmethod
    def write_shrinkage_csv(cls, rows: list[dict], stream) -> None:
        """Write report rows as CSV (all fields quoted)."""
        writer = csv.writer(stream, quoting=csv.QUOTE_ALL, lineterminator='\n')
        writer.writerow(CSV_HEADER)
        for row in rows:
            writer.writerow([
                row['date'], row['product'], row['type'], row['cause'],
                row['quantity'], row['classification'], row['user'], row['notes'],
            ])
