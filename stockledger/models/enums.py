"""
Enums for Stockledger models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class MovementKind(models.TextChoices):
    """
    Kind of ledger entry.

    INBOUND:    Adds stock. Purchase completion, manual entry.
    OUTBOUND:   Removes stock. Sale completion, shrinkage.
    ADJUSTMENT: Sets stock to an absolute value (physical count).
    """
    INBOUND = 'inbound', _('Entrada')
    OUTBOUND = 'outbound', _('Salida')
    ADJUSTMENT = 'adjustment', _('Ajuste')


class StockLevel(models.TextChoices):
    """Stock classification against the product's minimum."""
    OUT_OF_STOCK = 'out_of_stock', _('Sin stock')
    BELOW_MINIMUM = 'below_minimum', _('Bajo mínimo')
    NORMAL = 'normal', _('Normal')


class ShrinkageClassification(models.TextChoices):
    """Whether a loss is expected for the business or exceptional."""
    NORMAL = 'normal', _('Normal')
    EXTRAORDINARY = 'extraordinary', _('Extraordinaria')


class OrderKind(models.TextChoices):
    """Order direction."""
    SALE = 'sale', _('Venta')          # Completion removes stock
    PURCHASE = 'purchase', _('Compra')  # Completion adds stock


class OrderStatus(models.TextChoices):
    """Order lifecycle status."""
    PENDING = 'pending', _('Pendiente')
    COMPLETED = 'completed', _('Completado')
    CANCELLED = 'cancelled', _('Anulado')
