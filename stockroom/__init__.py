"""
Django Stockroom — document-driven inventory.

Products, warehouses, per-warehouse balances and an immutable movement
ledger. Balances only change when a document is validated.

Usage:
    from stockroom import stock, StockError

    receipt = stock.create_receipt(main, 'ACME', [(bolt, 10)])
    stock.validate(receipt)
    stock.balance(bolt, main)  # 10
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'stock':
        from stockroom.service import Stock
        return Stock
    elif name == 'StockError':
        from stockroom.exceptions import StockError
        return StockError
    elif name in _MODELS:
        from stockroom import models
        return getattr(models, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


_MODELS = {
    'Product',
    'ProductCategory',
    'Warehouse',
    'StockLevel',
    'StockMovement',
    'Receipt',
    'Delivery',
    'InternalTransfer',
    'StockAdjustment',
    'DocumentStatus',
    'MovementKind',
}

__all__ = [
    'stock',
    'StockError',
    *sorted(_MODELS),
]

__version__ = '0.1.0'
