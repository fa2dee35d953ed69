"""
Tests for ledger reconciliation.
"""

from decimal import Decimal

import pytest

from stockledger import ledger
from stockledger.models import MovementKind, Product


pytestmark = pytest.mark.django_db


def _tamper(product, quantity):
    """Write stored stock behind the ledger's back."""
    Product.objects.filter(pk=product.pk).update(_quantity=Decimal(quantity))


class TestReconcile:
    """Tests for ledger.reconcile()."""

    def test_clean_ledger(self, product, empty_product):
        ledger.issue(Decimal('3'), product, reason='Venta')
        ledger.receive(Decimal('2'), empty_product, reason='Compra')

        assert ledger.reconcile() == []

    def test_detects_mismatch(self, product, caplog):
        _tamper(product, '99')

        with caplog.at_level('WARNING', logger='stockledger'):
            mismatches = ledger.reconcile()

        assert len(mismatches) == 1
        item = mismatches[0]
        assert item.product.pk == product.pk
        assert item.stored == Decimal('99')
        assert item.ledger == Decimal('10')
        assert item.difference == Decimal('-89')
        assert not item.repaired
        assert ledger.quantity(product) == Decimal('99')
        assert 'stock.reconcile.mismatch' in caplog.messages

    def test_fix_rewrites_from_ledger(self, product):
        _tamper(product, '99')

        mismatches = ledger.reconcile(fix=True)

        assert mismatches[0].repaired
        assert ledger.quantity(product) == Decimal('10')
        assert ledger.reconcile() == []

        correction = product.movements.order_by('-id').first()
        assert correction.kind == MovementKind.ADJUSTMENT
        assert correction.reason == 'Ajuste: conciliación'
        assert correction.quantity_before == Decimal('99')
        assert correction.quantity_after == Decimal('10')

    def test_fix_after_broken_chain(self, product):
        _tamper(product, '50')
        ledger.issue(Decimal('1'), product, reason='Venta')

        ledger.reconcile(product, fix=True)

        assert ledger.quantity(product) == Decimal('9')
        assert ledger.reconcile(product) == []

    def test_single_product(self, product, empty_product):
        _tamper(empty_product, '5')

        assert ledger.reconcile(product) == []
        assert len(ledger.reconcile(empty_product)) == 1

    def test_broken_chain_reported(self, product):
        _tamper(product, '50')
        result = ledger.issue(Decimal('1'), product, reason='Venta')

        mismatches = ledger.reconcile(product)

        assert mismatches[0].broken_links == [result.movement.pk]
        assert mismatches[0].stored == Decimal('49')
        assert mismatches[0].ledger == Decimal('9')


class TestRecalculate:
    """Tests for Product.recalculate()."""

    def test_recalculate(self, product):
        _tamper(product, '3')
        product.refresh_from_db()

        assert product.recalculate() == Decimal('10')
        product.refresh_from_db()
        assert product.quantity == Decimal('10')
        assert product.movements.count() == 2

    def test_recalculate_in_sync_writes_nothing(self, product):
        assert product.recalculate() == Decimal('10')
        assert product.movements.count() == 1
