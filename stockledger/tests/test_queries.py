"""
Tests for read-only ledger queries.
"""

from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone

from stockledger import StockError, ledger
from stockledger.models import MovementKind, Product, StockLevel


pytestmark = pytest.mark.django_db


class TestProductLookup:
    """Tests for get_product(), quantity() and level()."""

    def test_by_instance_pk_and_sku(self, product):
        assert ledger.get_product(product) is product
        assert ledger.get_product(product.pk) == product
        assert ledger.get_product(str(product.pk)) == product
        assert ledger.get_product('PALTA-01') == product

    def test_missing(self, db):
        assert ledger.get_product('NO-EXISTE') is None

    def test_quantity_reads_fresh(self, product):
        stale = Product.objects.get(pk=product.pk)
        ledger.issue(Decimal('4'), product, reason='Venta')

        assert stale.quantity == Decimal('10')
        assert ledger.quantity(stale) == Decimal('6')

    def test_quantity_of_missing_product(self, db):
        with pytest.raises(StockError) as exc:
            ledger.quantity(999999)

        assert exc.value.code == 'PRODUCT_NOT_FOUND'

    def test_quantity_of_product_with_no_stock(self, empty_product):
        assert ledger.quantity(empty_product) == Decimal('0')

    def test_numeric_sku_found_before_pk(self, product):
        numeric = Product.objects.create(sku=str(product.pk + 1000), name='Cebolla')

        assert ledger.get_product(numeric.sku) == numeric
        assert ledger.get_product(str(product.pk)) == product

    def test_level(self, product, empty_product):
        assert ledger.level(product) == StockLevel.NORMAL
        assert ledger.level(empty_product) == StockLevel.OUT_OF_STOCK
        assert product.level == StockLevel.NORMAL

    def test_level_missing_product(self, db):
        with pytest.raises(StockError) as exc:
            ledger.level(999999)

        assert exc.value.code == 'PRODUCT_NOT_FOUND'


class TestHistory:
    """Tests for ledger.history()."""

    def test_newest_first(self, product):
        ledger.issue(Decimal('1'), product, reason='Venta 1')
        ledger.issue(Decimal('2'), product, reason='Venta 2')

        reasons = list(ledger.history(product).values_list('reason', flat=True))

        assert reasons == ['Venta 2', 'Venta 1', 'Stock inicial']

    def test_filter_by_product(self, product, empty_product):
        ledger.receive(Decimal('3'), empty_product, reason='Compra')

        assert ledger.history(empty_product).count() == 1
        assert ledger.history().count() == 2

    def test_filter_by_kind(self, product):
        ledger.issue(Decimal('1'), product, reason='Venta')

        assert ledger.history(product, kind=MovementKind.OUTBOUND).count() == 1
        assert ledger.history(product, kind='inbound').count() == 1

    def test_invalid_kind(self, product):
        with pytest.raises(StockError) as exc:
            ledger.history(product, kind='transfer')

        assert exc.value.code == 'INVALID_KIND'

    def test_filter_by_reason(self, product):
        ledger.issue(Decimal('1'), product, reason='Salida por pedido de venta PV-9')

        assert ledger.history(reason='pedido de VENTA').count() == 1

    def test_filter_by_user(self, product, user):
        ledger.issue(Decimal('1'), product, reason='Venta', user=user)

        assert ledger.history(user=user).count() == 1

    def test_filter_by_dates(self, product):
        today = timezone.localdate()

        assert ledger.history(since=today, until=today).count() == 1
        assert ledger.history(since=today + timedelta(days=1)).count() == 0
        assert ledger.history(until=today - timedelta(days=1)).count() == 0

    def test_filter_by_datetime(self, product):
        now = timezone.now()

        assert ledger.history(since=now - timedelta(minutes=5)).count() == 1
        assert ledger.history(since=now + timedelta(minutes=5)).count() == 0


class TestPaginate:
    """Tests for ledger.paginate()."""

    def test_default_page_size(self, product):
        for i in range(24):
            ledger.receive(Decimal('1'), product, reason=f'Compra {i}')

        page = ledger.paginate(ledger.history(product))

        assert page['total'] == 25
        assert page['page_size'] == 20
        assert page['total_pages'] == 2
        assert len(page['items']) == 20

        last = ledger.paginate(ledger.history(product), page=2)
        assert len(last['items']) == 5
        assert last['items'][-1].reason == 'Stock inicial'

    def test_page_size_capped(self, product):
        page = ledger.paginate(ledger.history(product), page_size=10_000)

        assert page['page_size'] == 100

    def test_out_of_range_page_returns_last(self, product):
        page = ledger.paginate(ledger.history(product), page=99)

        assert page['page'] == 1
        assert len(page['items']) == 1


class TestAggregates:
    """Tests for net_change() and totals_by_kind()."""

    def test_net_change(self, product):
        ledger.issue(Decimal('3'), product, reason='Venta')
        ledger.receive(Decimal('1.5'), product, reason='Compra')

        assert ledger.net_change(product) == Decimal('8.5')

    def test_totals_by_kind(self, product):
        ledger.issue(Decimal('3'), product, reason='Venta')
        ledger.issue(Decimal('2'), product, reason='Venta')

        totals = ledger.totals_by_kind(product=product)

        assert totals[MovementKind.INBOUND] == {'count': 1, 'total': Decimal('10')}
        assert totals[MovementKind.OUTBOUND] == {'count': 2, 'total': Decimal('-5')}
        assert totals[MovementKind.ADJUSTMENT] == {'count': 0, 'total': Decimal('0')}


class TestStockLevels:
    """Tests for products_below_minimum() and summary()."""

    def test_products_below_minimum(self, product, empty_product):
        ledger.issue(Decimal('7'), product, reason='Venta')

        assert set(ledger.products_below_minimum()) == {product, empty_product}
        assert list(ledger.products_below_minimum(include_out_of_stock=False)) == [product]

    def test_inactive_products_ignored(self, empty_product):
        empty_product.is_active = False
        empty_product.save()

        assert list(ledger.products_below_minimum()) == []

    def test_summary(self, product, empty_product):
        limon = Product.objects.create(sku='LIMON-01', name='Limón', min_quantity=Decimal('1'))
        ledger.receive(Decimal('0.5'), limon, reason='Compra')

        summary = ledger.summary()

        assert summary['total_products'] == 3
        assert summary['below_minimum'] == 1
        assert summary['out_of_stock'] == 1
        assert summary['total_units'] == Decimal('10.5')
