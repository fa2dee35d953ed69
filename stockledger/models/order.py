"""
Order models — sales and purchase orders whose completion moves stock.
"""

from decimal import Decimal

from django.db import models
from django.db.models import Q
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import MovementKind, OrderKind, OrderStatus


class Order(models.Model):
    """
    Sales or purchase order.

    LIFECYCLE:

        PENDING ──complete()──► COMPLETED   (stock moved, one Movement per item)
           │
           └────cancel()─────► CANCELLED   (no stock effect)
    """

    kind = models.CharField(
        max_length=20,
        choices=OrderKind.choices,
        verbose_name=_('Tipo'),
    )
    number = models.CharField(max_length=50, unique=True, verbose_name=_('Número'))
    counterparty = models.CharField(
        max_length=200,
        blank=True,
        default='',
        verbose_name=_('Cliente / Proveedor'),
    )
    guide_number = models.CharField(
        max_length=100,
        blank=True,
        default='',
        verbose_name=_('Número de guía'),
    )
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
        verbose_name=_('Estado'),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_('Creado'))
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Completado'))

    class Meta:
        verbose_name = _('Pedido')
        verbose_name_plural = _('Pedidos')
        ordering = ['-created_at', '-id']

    @property
    def movement_kind(self) -> str:
        """Ledger direction of this order's items."""
        if self.kind == OrderKind.SALE:
            return MovementKind.OUTBOUND
        return MovementKind.INBOUND

    @property
    def movement_reason(self) -> str:
        if self.kind == OrderKind.SALE:
            return f"Salida por pedido de venta {self.number}"
        return f"Entrada por pedido de compra {self.number}"

    def __str__(self) -> str:
        return f"{self.get_kind_display()} {self.number}"


class OrderItem(models.Model):
    """Order line."""

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name='items',
        verbose_name=_('Pedido'),
    )
    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Producto'),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_('Cantidad'),
    )
    price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal('0'),
        verbose_name=_('Precio'),
    )

    class Meta:
        verbose_name = _('Item de pedido')
        verbose_name_plural = _('Items de pedido')
        constraints = [
            models.CheckConstraint(
                condition=Q(quantity__gt=0),
                name='stockledger_order_item_quantity_positive',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.quantity} x {self.product}"
