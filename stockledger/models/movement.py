"""
Movement model — Immutable ledger of stock changes.
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import MovementKind


class Movement(models.Model):
    """
    Immutable record of a stock change.

    Rules:
    - NEVER update() or delete()
    - Corrections are new Movements (inverse delta or adjustment)
    - Written together with the Product update, in one transaction,
      by the mutation engine (stockledger.services.movements)

    delta is what was actually applied: quantity_after - quantity_before.
    """

    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Producto'),
    )
    kind = models.CharField(
        max_length=20,
        choices=MovementKind.choices,
        verbose_name=_('Tipo'),
    )

    delta = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_('Variación'),
        help_text=_('Positivo = entrada, Negativo = salida'),
    )
    quantity_before = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_('Cantidad anterior'),
    )
    quantity_after = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_('Cantidad nueva'),
    )

    # External reference (order, shrinkage, etc)
    reference_type = models.ForeignKey(
        ContentType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Tipo de referencia'),
    )
    reference_id = models.PositiveBigIntegerField(null=True, blank=True, verbose_name=_('ID de referencia'))
    reference = GenericForeignKey('reference_type', 'reference_id')

    reason = models.CharField(
        max_length=255,
        verbose_name=_('Motivo'),
        help_text=_('Obligatorio. Ej: "Salida por pedido de venta PV-001", "Merma"'),
    )
    metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadatos'))

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Usuario'),
    )
    actor = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name=_('Actor'),
        help_text=_('Usuario o proceso que originó el movimiento'),
    )
    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Fecha/Hora'))

    class Meta:
        verbose_name = _('Movimiento')
        verbose_name_plural = _('Movimientos')
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['product', 'created_at'], name='stockledger_mov_product_idx'),
            models.Index(fields=['kind', 'created_at'], name='stockledger_mov_kind_idx'),
        ]

    def save(self, *args, **kwargs):
        # Immutability check
        if self.pk:
            raise ValueError(
                "Los movimientos son inmutables. "
                "Para corregir, registre un nuevo movimiento."
            )

        if not self.reason:
            raise ValueError("El motivo es obligatorio")

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion — movements are immutable."""
        raise ValueError(
            "Los movimientos son inmutables. "
            "Para revertir, registre un nuevo movimiento."
        )

    def __str__(self) -> str:
        signal = '+' if self.delta > 0 else ''
        return f"{signal}{self.delta} | {self.reason}"
