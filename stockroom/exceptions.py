"""
Exceptions for Stockroom.

All errors are StockError with a structured code for programmatic handling.
"""

from decimal import Decimal
from typing import Any


class BaseError(Exception):
    """
    Base for structured errors: a code, a human message and context data.

    Subclasses declare ``_default_messages`` keyed by code.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")


class StockError(BaseError):
    """
    Structured exception for stock operations.

    Usage:
        try:
            stock.validate(delivery)
        except StockError as e:
            if e.code == 'INSUFFICIENT_QUANTITY':
                print(f"Only {e.available} on hand")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'EMPTY_DOCUMENT': 'Document has no lines',
        'INSUFFICIENT_QUANTITY': 'Insufficient stock',
        'INVALID_QUANTITY': 'Invalid quantity',
        'INVALID_STATUS': 'Invalid status for this operation',
        'ALREADY_VALIDATED': 'Document was already validated',
        'SAME_WAREHOUSE': 'Source and destination warehouses must be different',
        'DOCUMENT_NOT_FOUND': 'Document not found',
        'UNSUPPORTED_DOCUMENT': 'Unsupported document type',
        'CONCURRENT_MODIFICATION': 'Concurrent modification detected',
        'LEDGER_MISMATCH': 'Ledger does not match stock balance',
    }

    @property
    def available(self) -> Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', Decimal('0'))

    @property
    def requested(self) -> Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', Decimal('0'))

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }
