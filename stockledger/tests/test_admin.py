"""
Tests for the Stockledger admin.
"""

from decimal import Decimal

import pytest
from django.contrib import admin
from django.urls import reverse

from stockledger import ledger
from stockledger.models import (
    Movement,
    Order,
    OrderStatus,
    Product,
    Shrinkage,
    ShrinkageCause,
    ShrinkageType,
)


pytestmark = pytest.mark.django_db


class TestRegistration:

    @pytest.mark.parametrize('model', [
        Product, Movement, Shrinkage, ShrinkageType, ShrinkageCause, Order,
    ])
    def test_registered(self, model):
        assert admin.site.is_registered(model)

    def test_movement_is_read_only(self, rf):
        model_admin = admin.site._registry[Movement]
        request = rf.get('/')

        assert not model_admin.has_add_permission(request)
        assert not model_admin.has_change_permission(request)
        assert not model_admin.has_delete_permission(request)

    def test_stock_not_editable(self):
        assert '_quantity' in admin.site._registry[Product].readonly_fields


class TestChangelists:

    @pytest.mark.parametrize('name', [
        'product', 'movement', 'shrinkage', 'shrinkagetype', 'shrinkagecause', 'order',
    ])
    def test_changelist_renders(self, admin_client, product, sale_order, deterioro, name):
        ledger.register_shrinkage(Decimal('1'), product, deterioro)

        response = admin_client.get(reverse(f'admin:stockledger_{name}_changelist'))

        assert response.status_code == 200


class TestOrderActions:

    def test_complete_selected_orders(self, admin_client, product, sale_order):
        response = admin_client.post(
            reverse('admin:stockledger_order_changelist'),
            {'action': 'complete_orders', '_selected_action': [sale_order.pk]},
        )

        assert response.status_code == 302
        sale_order.refresh_from_db()
        assert sale_order.status == OrderStatus.COMPLETED
        assert ledger.quantity(product) == Decimal('6')

    def test_complete_with_shortage_leaves_order_pending(self, admin_client, product, sale_order):
        ledger.issue(Decimal('9'), product, reason='Venta')

        admin_client.post(
            reverse('admin:stockledger_order_changelist'),
            {'action': 'complete_orders', '_selected_action': [sale_order.pk]},
        )

        sale_order.refresh_from_db()
        assert sale_order.status == OrderStatus.PENDING
        assert ledger.quantity(product) == Decimal('1')

    def test_cancel_selected_orders(self, admin_client, sale_order):
        admin_client.post(
            reverse('admin:stockledger_order_changelist'),
            {'action': 'cancel_orders', '_selected_action': [sale_order.pk]},
        )

        sale_order.refresh_from_db()
        assert sale_order.status == OrderStatus.CANCELLED
