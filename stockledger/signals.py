"""
Stockledger signals.

stock_level_low is sent after the transaction that wrote the movement
commits, when the product ends OUT_OF_STOCK or BELOW_MINIMUM.

    from django.dispatch import receiver
    from stockledger.signals import stock_level_low

    @receiver(stock_level_low)
    def notify_buyer(sender, product, movement, level, **kwargs):
        ...
"""

from django.dispatch import Signal

# Provides: product, movement, level, warning
stock_level_low = Signal()
