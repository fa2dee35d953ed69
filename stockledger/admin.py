"""
Stockledger Admin.

Stock only changes through the ledger, so the admin never writes
quantities directly:
- Product: list + edit (stock is read-only)
- Movement: read-only audit trail
- Shrinkage: read-only loss records
- ShrinkageType / ShrinkageCause: editable taxonomy
- Order: edit while pending, with "complete" and "cancel" actions
"""

import logging

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from stockledger.exceptions import StockError
from stockledger.models import (
    Movement,
    Order,
    OrderItem,
    OrderStatus,
    Product,
    Shrinkage,
    ShrinkageCause,
    ShrinkageType,
)

logger = logging.getLogger('stockledger')


class ReadOnlyAdminMixin:
    """No add, change or delete from the admin."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# PRODUCT ADMIN
# =========================================================================

@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Product admin — editable, stock changes only via the ledger."""

    list_display = ['sku', 'name', 'unit', 'quantity_display', 'min_quantity',
                    'level_display', 'is_active']
    list_filter = ['is_active', 'unit']
    search_fields = ['sku', 'name']
    readonly_fields = ['_quantity', 'created_at', 'updated_at']

    @admin.display(description=_('Stock'), ordering='_quantity')
    def quantity_display(self, obj):
        return obj.quantity

    @admin.display(description=_('Nivel'))
    def level_display(self, obj):
        return obj.level.label


# =========================================================================
# MOVEMENT ADMIN (read-only audit trail)
# =========================================================================

@admin.register(Movement)
class MovementAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Movement admin — read-only. Immutable audit trail."""

    list_display = ['created_at', 'product', 'kind', 'delta', 'quantity_before',
                    'quantity_after', 'reason', 'actor']
    list_filter = ['kind', 'created_at']
    search_fields = ['reason', 'product__name', 'product__sku', 'actor']
    readonly_fields = ['product', 'kind', 'delta', 'quantity_before', 'quantity_after',
                       'reference_type', 'reference_id', 'reason', 'metadata',
                       'user', 'actor', 'created_at']
    date_hierarchy = 'created_at'
    list_select_related = ['product']


# =========================================================================
# SHRINKAGE ADMIN
# =========================================================================

class ShrinkageCauseInline(admin.TabularInline):
    model = ShrinkageCause
    extra = 0
    fields = ['name', 'is_active']


@admin.register(ShrinkageType)
class ShrinkageTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name']
    inlines = [ShrinkageCauseInline]


@admin.register(ShrinkageCause)
class ShrinkageCauseAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'is_active']
    list_filter = ['type', 'is_active']
    search_fields = ['name']


@admin.register(Shrinkage)
class ShrinkageAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Shrinkage admin — read-only. Register losses via ledger.register_shrinkage."""

    list_display = ['created_at', 'product', 'type', 'cause', 'quantity',
                    'classification', 'user']
    list_filter = ['classification', 'type', 'created_at']
    search_fields = ['product__name', 'notes']
    readonly_fields = ['product', 'type', 'cause', 'quantity', 'classification',
                       'notes', 'movement', 'user', 'created_at']
    date_hierarchy = 'created_at'


# =========================================================================
# ORDER ADMIN
# =========================================================================

class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 1
    fields = ['product', 'quantity', 'price']
    autocomplete_fields = ['product']

    def has_change_permission(self, request, obj=None):
        return obj is None or obj.status == OrderStatus.PENDING

    def has_add_permission(self, request, obj=None):
        return obj is None or obj.status == OrderStatus.PENDING

    def has_delete_permission(self, request, obj=None):
        return obj is None or obj.status == OrderStatus.PENDING


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Order admin — stock moves only when an order is completed."""

    list_display = ['number', 'kind', 'counterparty', 'status', 'created_at', 'completed_at']
    list_filter = ['kind', 'status']
    search_fields = ['number', 'counterparty', 'guide_number']
    readonly_fields = ['status', 'created_at', 'completed_at']
    inlines = [OrderItemInline]
    actions = ['complete_orders', 'cancel_orders']

    def has_change_permission(self, request, obj=None):
        if obj is not None and obj.status != OrderStatus.PENDING:
            return False
        return super().has_change_permission(request, obj)

    @admin.action(description=_('Completar pedidos seleccionados'))
    def complete_orders(self, request, queryset):
        from stockledger import ledger

        count = 0
        for order in queryset.filter(status=OrderStatus.PENDING):
            try:
                ledger.complete_order(order, user=request.user)
                count += 1
            except StockError as exc:
                logger.warning("complete_orders: failed to complete %s: %s", order.number, exc)
                self.message_user(request, f"{order.number}: {exc.message}", level='error')

        self.message_user(request, _('{count} pedido(s) completado(s).').format(count=count))

    @admin.action(description=_('Anular pedidos seleccionados'))
    def cancel_orders(self, request, queryset):
        from stockledger import ledger

        count = 0
        for order in queryset.filter(status=OrderStatus.PENDING):
            try:
                ledger.cancel_order(order)
                count += 1
            except StockError as exc:
                logger.warning("cancel_orders: failed to cancel %s: %s", order.number, exc)

        self.message_user(request, _('{count} pedido(s) anulado(s).').format(count=count))
