"""
Stockledger configuration.

Usage in settings.py:
    STOCKLEDGER = {
        "HISTORY_PAGE_SIZE": 20,
        "HISTORY_MAX_PAGE_SIZE": 100,
        "DEFAULT_ACTOR": "sistema",
        "SEND_LEVEL_SIGNALS": True,
        "REVERSAL_WINDOW_HOURS": 48,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class StockLedgerSettings:
    """Stockledger configuration settings."""

    # Default page size for ledger history
    HISTORY_PAGE_SIZE: int = 20

    # Upper bound for a requested page size
    HISTORY_MAX_PAGE_SIZE: int = 100

    # Actor label stored when a movement has neither user nor actor
    DEFAULT_ACTOR: str = "sistema"

    # Send stock_level_low after commit when a movement leaves stock low
    SEND_LEVEL_SIGNALS: bool = True

    # Movements older than this cannot be reversed (None = no limit)
    REVERSAL_WINDOW_HOURS: int | None = 48


def get_stockledger_settings() -> StockLedgerSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOCKLEDGER", {})
    return StockLedgerSettings(**{
        k: v for k, v in user_settings.items()
        if k in StockLedgerSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_stockledger_settings(), name)


stockledger_settings = _LazySettings()
