"""
Product model — quantity on hand and minimum threshold.
"""

import logging
from decimal import Decimal

from django.db import models, transaction
from django.db.models import F, Q, Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import MovementKind

logger = logging.getLogger('stockledger')


class ProductQuerySet(models.QuerySet):
    """QuerySet with stock level filters."""

    def active(self):
        return self.filter(is_active=True)

    def out_of_stock(self):
        """Products with nothing on hand."""
        return self.filter(_quantity=0)

    def below_minimum(self):
        """Products with some stock, but less than their minimum."""
        return self.filter(_quantity__gt=0, _quantity__lt=F('min_quantity'))

    def low(self):
        """Out of stock or below minimum."""
        return self.filter(Q(_quantity=0) | Q(_quantity__lt=F('min_quantity')))


class Product(models.Model):
    """
    Product as seen by the stock ledger.

    Performance:
    - _quantity is a cache written only by the mutation engine,
      together with one Movement per change
    - Read is O(1), not O(N)
    - save() never writes _quantity; a stale instance cannot undo a movement
    - Use recalculate() for audit/correction
    """

    sku = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_('Código'),
    )
    name = models.CharField(
        max_length=200,
        verbose_name=_('Nombre'),
    )
    unit = models.CharField(
        max_length=20,
        default='kg',
        verbose_name=_('Unidad de medida'),
    )

    # Quantity cache (written by the mutation engine only)
    _quantity = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Stock'),
    )
    min_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Stock mínimo'),
        help_text=_('Se alerta cuando el stock queda por debajo de este valor'),
    )

    is_active = models.BooleanField(default=True, verbose_name=_('Activo'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        verbose_name = _('Producto')
        verbose_name_plural = _('Productos')
        ordering = ['name']
        constraints = [
            models.CheckConstraint(
                condition=Q(_quantity__gte=0),
                name='stockledger_product_quantity_non_negative',
            ),
            models.CheckConstraint(
                condition=Q(min_quantity__gte=0),
                name='stockledger_product_min_quantity_non_negative',
            ),
        ]

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def quantity(self) -> Decimal:
        """Quantity on hand — O(1) cache read."""
        return self._quantity

    @property
    def level(self):
        """StockLevel for the current quantity."""
        from stockledger.services.thresholds import classify
        return classify(self._quantity, self.min_quantity)

    # ══════════════════════════════════════════════════════════════
    # METHODS
    # ══════════════════════════════════════════════════════════════

    def save(self, *args, **kwargs):
        """
        Save everything except _quantity, which only the mutation engine writes.

        Opening stock is registered with ledger.receive(), never on create.
        """
        if self._state.adding:
            if self._quantity:
                raise ValueError(
                    "El stock inicial se registra con un movimiento de entrada"
                )
        else:
            update_fields = kwargs.get('update_fields')
            if update_fields is None:
                deferred = self.get_deferred_fields()
                update_fields = [
                    f.name for f in self._meta.concrete_fields
                    if not f.primary_key and f.attname not in deferred
                ]
            kwargs['update_fields'] = [f for f in update_fields if f != '_quantity']

        super().save(*args, **kwargs)

    def ledger_total(self) -> Decimal:
        """
        Quantity the ledger says is on hand.

        Replays movements: the latest ADJUSTMENT sets the value,
        later movements add their deltas.
        """
        movements = self.movements.all()
        start = Decimal('0')

        last_adjustment = movements.filter(kind=MovementKind.ADJUSTMENT).order_by('-id').first()
        if last_adjustment is not None:
            start = last_adjustment.quantity_after
            movements = movements.filter(id__gt=last_adjustment.id)

        return start + movements.aggregate(
            t=Coalesce(Sum('delta'), Decimal('0'))
        )['t']

    def recalculate(self, user=None) -> Decimal:
        """
        Bring stored quantity back to what the ledger says.

        The correction is itself an ADJUSTMENT movement
        ("Ajuste: conciliación"), so it shows up in history.

        Use for:
        - Correction after detected inconsistency (reconcile_stock --fix)

        Returns:
            New quantity
        """
        from stockledger.services.movements import StockMovements

        with transaction.atomic():
            locked = type(self).objects.select_for_update().get(pk=self.pk)
            total = locked.ledger_total()

            if total != locked._quantity:
                logger.warning(
                    "stock.recalculated",
                    extra={
                        "product_id": self.pk,
                        "stored": str(locked._quantity),
                        "ledger": str(total),
                    },
                )
                StockMovements.adjust(
                    self.pk, total, reason='conciliación', user=user,
                    stored=str(locked._quantity),
                )

        self._quantity = total
        return total

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})"
