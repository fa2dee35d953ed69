"""
Concurrency tests — real row locks need PostgreSQL.

Run with STOCKLEDGER_TEST_DB=postgres (the postgres CI job does);
skipped on SQLite. Select them alone with -m postgres.
"""

import threading
from decimal import Decimal

import pytest
from django.db import connection

from stockledger import StockError, ledger
from stockledger.models import Product


pytestmark = [
    pytest.mark.postgres,
    pytest.mark.django_db(transaction=True),
    pytest.mark.skipif(
        connection.vendor != 'postgresql',
        reason='Row locking requires PostgreSQL',
    ),
]


def _run_concurrently(*calls):
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def worker(index, call):
        try:
            barrier.wait()
            outcomes[index] = call()
        except StockError as exc:
            outcomes[index] = exc
        finally:
            connection.close()

    threads = [threading.Thread(target=worker, args=(i, c)) for i, c in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return outcomes


class TestConcurrentIssue:

    def test_only_one_of_two_overlapping_issues_succeeds(self):
        product = Product.objects.create(sku='PALTA-C', name='Palta', min_quantity=Decimal('0'))
        ledger.receive(Decimal('10'), product, reason='Stock inicial')

        outcomes = _run_concurrently(
            lambda: ledger.issue(Decimal('6'), product.pk, reason='Venta A'),
            lambda: ledger.issue(Decimal('7'), product.pk, reason='Venta B'),
        )

        errors = [o for o in outcomes if isinstance(o, StockError)]
        assert len(errors) == 1
        assert errors[0].code == 'INSUFFICIENT_STOCK'
        assert ledger.quantity(product) in (Decimal('4'), Decimal('3'))
        assert product.ledger_total() == ledger.quantity(product)

    def test_many_small_issues_conserve_stock(self):
        product = Product.objects.create(sku='PALTA-D', name='Palta', min_quantity=Decimal('0'))
        ledger.receive(Decimal('5'), product, reason='Stock inicial')

        outcomes = _run_concurrently(*[
            (lambda: ledger.issue(Decimal('1'), product.pk, reason='Venta'))
            for _ in range(8)
        ])

        errors = [o for o in outcomes if isinstance(o, StockError)]
        assert len(errors) == 3
        assert ledger.quantity(product) == Decimal('0')
        assert product.movements.count() == 6
