"""
Ledger reconciliation — replay movements and compare with stored stock.

Usage:
    from stockledger.services.reconciliation import reconcile

    # Run periodically (cron) or from manage.py reconcile_stock
    mismatches = reconcile()
    # Returns list of Discrepancy for products whose stock disagrees with the ledger
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from stockledger.models.enums import MovementKind
from stockledger.models.product import Product
from stockledger.quantities import normalize

logger = logging.getLogger('stockledger')


@dataclass
class Discrepancy:
    """One product whose stored stock and ledger disagree."""

    product: Product
    stored: Decimal
    ledger: Decimal
    broken_links: list[int] = field(default_factory=list)
    repaired: bool = False

    @property
    def difference(self) -> Decimal:
        return self.ledger - self.stored


def _broken_links(product: Product) -> list[int]:
    """
    Movement ids that do not chain onto the previous movement.

    Each movement must start where the previous one ended and its delta
    must equal after - before. An ADJUSTMENT records a count, so it may
    start anywhere and settles every break recorded before it.
    """
    broken = []
    previous_after = Decimal('0')
    for movement in product.movements.order_by('id'):
        consistent = movement.quantity_after - movement.quantity_before == movement.delta
        if movement.kind == MovementKind.ADJUSTMENT and consistent:
            broken = []
        elif not consistent or movement.quantity_before != previous_after:
            broken.append(movement.pk)
        previous_after = movement.quantity_after
    return broken


def reconcile(product=None, fix: bool = False) -> list[Discrepancy]:
    """
    Check every product (or one) against its ledger.

    Args:
        product: Optional product to check (None = all).
        fix: Bring stored stock back to the ledger with an
            "Ajuste: conciliación" movement (Product.recalculate()).

    Returns:
        List of Discrepancy; empty when everything reconciles.
    """
    qs = Product.objects.all()
    if product is not None:
        qs = qs.filter(pk=getattr(product, 'pk', product))

    mismatches = []
    for item in qs.order_by('pk'):
        stored = normalize(item._quantity)
        ledger = normalize(item.ledger_total())
        broken = _broken_links(item)

        if stored == ledger and not broken:
            continue

        discrepancy = Discrepancy(product=item, stored=stored, ledger=ledger, broken_links=broken)
        logger.warning(
            "stock.reconcile.mismatch",
            extra={
                "product_id": item.pk,
                "stored": str(stored),
                "ledger": str(ledger),
                "broken_links": broken,
            },
        )

        if fix and stored != ledger:
            item.recalculate()
            discrepancy.repaired = True

        mismatches.append(discrepancy)

    return mismatches
