"""
Pytest fixtures for Stockledger tests.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from stockledger import ledger
from stockledger.models import (
    Order,
    OrderItem,
    OrderKind,
    Product,
    ShrinkageCause,
    ShrinkageType,
)


User = get_user_model()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='bodeguero',
        password='testpass123'
    )


@pytest.fixture
def product(db):
    """Product with 10 kg on hand and a minimum of 5."""
    palta = Product.objects.create(
        sku='PALTA-01',
        name='Palta Hass',
        unit='kg',
        min_quantity=Decimal('5'),
    )
    ledger.receive(Decimal('10'), palta, reason='Stock inicial')
    palta.refresh_from_db()
    return palta


@pytest.fixture
def empty_product(db):
    """Product with nothing on hand and a minimum of 5."""
    return Product.objects.create(
        sku='TOMATE-01',
        name='Tomate',
        unit='kg',
        min_quantity=Decimal('5'),
    )


@pytest.fixture
def deterioro(db):
    """Shrinkage type (seeded by migration, recreated if missing)."""
    shrinkage_type, _ = ShrinkageType.objects.get_or_create(name='Por deterioro natural')
    return shrinkage_type


@pytest.fixture
def sobre_maduracion(deterioro):
    cause, _ = ShrinkageCause.objects.get_or_create(type=deterioro, name='Sobre maduración')
    return cause


@pytest.fixture
def plagas(db):
    shrinkage_type, _ = ShrinkageType.objects.get_or_create(name='Por plagas')
    return shrinkage_type


@pytest.fixture
def sale_order(product, empty_product):
    """Pending sale: 4 kg of palta."""
    order = Order.objects.create(kind=OrderKind.SALE, number='PV-001', counterparty='Feria Lo Valledor')
    OrderItem.objects.create(order=order, product=product, quantity=Decimal('4'), price=Decimal('2500'))
    return order


@pytest.fixture
def purchase_order(product, empty_product):
    """Pending purchase: 20 kg of tomate and 5 kg of palta."""
    order = Order.objects.create(kind=OrderKind.PURCHASE, number='OC-001', counterparty='Agrícola Sur')
    OrderItem.objects.create(order=order, product=empty_product, quantity=Decimal('20'), price=Decimal('900'))
    OrderItem.objects.create(order=order, product=product, quantity=Decimal('5'), price=Decimal('1800'))
    return order
