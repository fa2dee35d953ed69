"""
Shrinkage (merma) models — loss taxonomy and loss records.

A Shrinkage always points at the OUTBOUND Movement that took the lost
quantity out of stock. Both are written in the same transaction by
stockledger.services.shrinkage.register_shrinkage.
"""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from stockledger.models.enums import ShrinkageClassification


class ShrinkageType(models.Model):
    """Top level of the loss taxonomy (e.g. 'Por deterioro natural')."""

    name = models.CharField(max_length=100, unique=True, verbose_name=_('Nombre'))
    is_active = models.BooleanField(default=True, verbose_name=_('Activo'))

    class Meta:
        verbose_name = _('Tipo de merma')
        verbose_name_plural = _('Tipos de merma')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class ShrinkageCause(models.Model):
    """Sub-cause within a type (e.g. 'Sobre maduración')."""

    type = models.ForeignKey(
        ShrinkageType,
        on_delete=models.PROTECT,
        related_name='causes',
        verbose_name=_('Tipo'),
    )
    name = models.CharField(max_length=100, verbose_name=_('Nombre'))
    is_active = models.BooleanField(default=True, verbose_name=_('Activo'))

    class Meta:
        verbose_name = _('Causa de merma')
        verbose_name_plural = _('Causas de merma')
        ordering = ['type__name', 'name']
        constraints = [
            models.UniqueConstraint(
                fields=['type', 'name'],
                name='unique_shrinkage_cause_per_type',
            ),
        ]

    def __str__(self) -> str:
        return f"{self.type.name} / {self.name}"


class Shrinkage(models.Model):
    """Registered loss of a product quantity."""

    product = models.ForeignKey(
        'stockledger.Product',
        on_delete=models.PROTECT,
        related_name='shrinkages',
        verbose_name=_('Producto'),
    )
    type = models.ForeignKey(
        ShrinkageType,
        on_delete=models.PROTECT,
        related_name='shrinkages',
        verbose_name=_('Tipo'),
    )
    cause = models.ForeignKey(
        ShrinkageCause,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='shrinkages',
        verbose_name=_('Causa'),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        verbose_name=_('Cantidad'),
    )
    classification = models.CharField(
        max_length=20,
        choices=ShrinkageClassification.choices,
        default=ShrinkageClassification.NORMAL,
        verbose_name=_('Clasificación'),
    )
    notes = models.TextField(blank=True, default='', verbose_name=_('Observaciones'))
    movement = models.OneToOneField(
        'stockledger.Movement',
        on_delete=models.PROTECT,
        related_name='shrinkage',
        verbose_name=_('Movimiento'),
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Usuario'),
    )
    created_at = models.DateTimeField(auto_now_add=True, db_index=True, verbose_name=_('Fecha'))

    class Meta:
        verbose_name = _('Merma')
        verbose_name_plural = _('Mermas')
        ordering = ['-created_at', '-id']

    def __str__(self) -> str:
        return f"Merma {self.quantity} {self.product.unit} de {self.product.name}"
