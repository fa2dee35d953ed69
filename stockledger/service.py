"""
Ledger Service — The single public interface for all stock operations.

Usage:
    from stockledger import ledger, StockError

    ledger.receive(20, palta, reason='Compra OC-001')
    result = ledger.issue(3, palta, reason='Venta PV-001')
    result.warning          # None, or 'El nuevo stock queda por debajo del mínimo'
    ledger.history(palta)   # newest first
"""

from stockledger.services.movements import StockMovements
from stockledger.services.orders import StockOrders
from stockledger.services.queries import StockQueries
from stockledger.services.reconciliation import reconcile
from stockledger.services.shrinkage import StockShrinkage
from stockledger.services.thresholds import classify, warning_for
from stockledger.services.validation import validate


class Ledger(StockQueries, StockMovements, StockShrinkage, StockOrders):
    """
    Single interface for all stock operations.

    Parameter convention: (quantity, product, ...)
    Follows natural language: "Issue 3 kg of palta"

    IMPORTANT: All state-changing methods go through StockMovements.apply(),
    which runs under transaction.atomic() with the product row locked.
    """

    validate = staticmethod(validate)
    classify = staticmethod(classify)
    warning_for = staticmethod(warning_for)

    @classmethod
    def reconcile(cls, product=None, fix: bool = False):
        """Compare stored stock with the ledger. See services.reconciliation."""
        return reconcile(product, fix=fix)
