"""
Tests for stock level classification.
"""

from decimal import Decimal

import pytest

from stockledger.models import StockLevel
from stockledger.services.thresholds import classify, warning_for


class TestClassify:
    """Tests for classify()."""

    @pytest.mark.parametrize('quantity, minimum, expected', [
        ('0', '5', StockLevel.OUT_OF_STOCK),
        ('0', '0', StockLevel.OUT_OF_STOCK),
        ('1', '5', StockLevel.BELOW_MINIMUM),
        ('4.99', '5', StockLevel.BELOW_MINIMUM),
        ('5', '5', StockLevel.NORMAL),
        ('7', '5', StockLevel.NORMAL),
        ('3', '0', StockLevel.NORMAL),
    ])
    def test_levels(self, quantity, minimum, expected):
        assert classify(Decimal(quantity), Decimal(minimum)) == expected

    def test_missing_minimum_treated_as_zero(self):
        assert classify(Decimal('1'), None) == StockLevel.NORMAL


class TestWarningFor:

    def test_normal_has_no_warning(self):
        assert warning_for(StockLevel.NORMAL) is None

    def test_below_minimum_warning(self):
        assert warning_for(StockLevel.BELOW_MINIMUM) == 'El nuevo stock queda por debajo del mínimo'

    def test_out_of_stock_warning(self):
        assert warning_for(StockLevel.OUT_OF_STOCK) == 'El producto se quedó sin stock'
