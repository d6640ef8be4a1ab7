"""
Stock Service — The single public interface for all stock operations.

Usage:
    from stockroom import stock, StockError

    receipt = stock.create_receipt(main, 'ACME', [(bolt, 10)], user=user)
    stock.validate(receipt, user=user)
    stock.balance(bolt, main)  # 10
"""

from stockroom.services.documents import StockDocuments
from stockroom.services.queries import StockQueries
from stockroom.services.reconciliation import check_ledger, repair_ledger
from stockroom.services.validation import StockValidation


class Stock(StockQueries, StockDocuments, StockValidation):
    """
    Single interface for all stock operations.

    - Queries: balance, on_hand, get_stock_level, list_stock_levels,
      low_stock, history, summary
    - Documents: create_receipt, create_delivery, create_transfer,
      create_adjustment, add_line, advance, cancel
    - Validation: validate
    - Integrity: check_ledger, repair_ledger

    IMPORTANT: Only validate() changes balances. It runs in a single
    atomic transaction with row locks; see StockValidation.validate.
    """

    check_ledger = staticmethod(check_ledger)
    repair_ledger = staticmethod(repair_ledger)
