"""
Stock services — modular organization of stock operations.

Re-exports all public classes so callers can compose them:
    from stockroom.services import StockQueries, StockDocuments, StockValidation
"""

from stockroom.services.documents import StockDocuments
from stockroom.services.queries import StockQueries
from stockroom.services.validation import StockValidation

__all__ = [
    'StockQueries',
    'StockDocuments',
    'StockValidation',
]
