"""
Stockroom configuration.

Usage in settings.py:
    STOCKROOM = {
        "DOCUMENT_PREFIXES": {"receipt": "IN", "delivery": "OUT"},
        "NUMBER_PADDING": 6,
        "VERIFY_LEDGER_ON_VALIDATE": True,
    }
"""

from dataclasses import dataclass, field
from typing import Any

from django.conf import settings


DEFAULT_PREFIXES = {
    'receipt': 'RCP',
    'delivery': 'DEL',
    'transfer': 'TRF',
    'adjustment': 'ADJ',
}


@dataclass
class StockroomSettings:
    """Stockroom configuration settings."""

    # Number prefix per document kind (partial overrides merge with defaults)
    DOCUMENT_PREFIXES: dict[str, str] = field(default_factory=dict)

    # Zero padding of the numeric part (RCP-00001)
    NUMBER_PADDING: int = 5

    # Re-sum the ledger of every touched balance before committing a validation
    VERIFY_LEDGER_ON_VALIDATE: bool = False

    def __post_init__(self):
        self.DOCUMENT_PREFIXES = {**DEFAULT_PREFIXES, **self.DOCUMENT_PREFIXES}


def get_stockroom_settings() -> StockroomSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOCKROOM", {})
    return StockroomSettings(**{
        k: v for k, v in user_settings.items()
        if k in StockroomSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_stockroom_settings(), name)


stockroom_settings = _LazySettings()
