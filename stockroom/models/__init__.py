"""
Stockroom Models.

Core models for inventory management:
- ProductCategory, Product, Warehouse: catalog and reference data
- StockLevel: balance cache per (product, warehouse)
- StockMovement: immutable ledger of changes
- Receipt, Delivery, InternalTransfer, StockAdjustment: stock documents
- DocumentSequence: server-side document numbering
"""

from stockroom.models.catalog import Product, ProductCategory, Warehouse
from stockroom.models.documents import (
    Delivery,
    DeliveryLine,
    InternalTransfer,
    Receipt,
    ReceiptLine,
    StockAdjustment,
)
from stockroom.models.enums import AdjustmentStatus, DocumentStatus, MovementKind
from stockroom.models.movement import StockMovement
from stockroom.models.sequence import DocumentSequence
from stockroom.models.stock_level import StockLevel

__all__ = [
    'DocumentStatus',
    'AdjustmentStatus',
    'MovementKind',
    'ProductCategory',
    'Product',
    'Warehouse',
    'StockLevel',
    'StockMovement',
    'Receipt',
    'ReceiptLine',
    'Delivery',
    'DeliveryLine',
    'InternalTransfer',
    'StockAdjustment',
    'DocumentSequence',
]
