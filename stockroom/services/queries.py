"""
Stock queries — read-only operations.

All methods are classmethod on Stock and use no locking.
"""

import logging
from decimal import Decimal

from django.contrib.contenttypes.models import ContentType
from django.db.models import Sum
from django.db.models.functions import Coalesce

from stockroom.models.catalog import Product, Warehouse
from stockroom.models.documents import Delivery, InternalTransfer, Receipt, StockAdjustment
from stockroom.models.movement import StockMovement
from stockroom.models.stock_level import StockLevel

logger = logging.getLogger('stockroom')


class StockQueries:
    """Read-only stock query methods."""

    @classmethod
    def balance(cls, product: Product, warehouse: Warehouse) -> Decimal:
        """On-hand quantity at one warehouse (0 when never stocked)."""
        level = cls.get_stock_level(product, warehouse)
        return level.quantity if level else Decimal('0')

    @classmethod
    def on_hand(cls, product: Product) -> Decimal:
        """Total on-hand quantity across all warehouses."""
        return StockLevel.objects.for_product(product).aggregate(
            t=Coalesce(Sum('quantity'), Decimal('0'))
        )['t']

    @classmethod
    def get_stock_level(cls, product: Product, warehouse: Warehouse) -> StockLevel | None:
        return StockLevel.objects.for_pair(product, warehouse).first()

    @classmethod
    def list_stock_levels(cls, product: Product | None = None,
                          warehouse: Warehouse | None = None,
                          include_empty: bool = False):
        """List stock levels with filters."""
        qs = StockLevel.objects.select_related('product', 'warehouse')

        if product is not None:
            qs = qs.filter(product=product)

        if warehouse is not None:
            qs = qs.filter(warehouse=warehouse)

        if not include_empty:
            qs = qs.filter(quantity__gt=0)

        return qs

    @classmethod
    def low_stock(cls):
        """
        Products at or below their reorder level.

        Each one is logged as a stock.low warning so a periodic caller
        (cron, celery beat) can feed alerting from the log stream.

        Returns:
            List of Product, annotated with ``on_hand``.
        """
        products = list(Product.objects.low_stock().order_by('name'))
        for product in products:
            logger.warning(
                "stock.low",
                extra={
                    "product_id": product.pk,
                    "sku": product.sku,
                    "on_hand": str(product.on_hand),
                    "reorder_level": product.reorder_level,
                },
            )
        return products

    @classmethod
    def history(cls, product: Product | None = None, warehouse: Warehouse | None = None,
                kind: str | None = None, reference=None):
        """Ledger rows, newest first."""
        qs = StockMovement.objects.select_related('product', 'warehouse', 'user')

        if product is not None:
            qs = qs.filter(product=product)

        if warehouse is not None:
            qs = qs.filter(warehouse=warehouse)

        if kind is not None:
            qs = qs.filter(kind=kind)

        if reference is not None:
            qs = qs.filter(
                reference_type=ContentType.objects.get_for_model(reference),
                reference_id=reference.pk,
            )

        return qs.order_by('-timestamp', '-pk')

    @classmethod
    def summary(cls) -> dict[str, int]:
        """Dashboard counters."""
        return {
            'total_products': Product.objects.count(),
            'low_stock_products': Product.objects.low_stock().count(),
            'pending_receipts': Receipt.objects.pending().count(),
            'pending_deliveries': Delivery.objects.pending().count(),
            'scheduled_transfers': InternalTransfer.objects.pending().count(),
            'draft_adjustments': StockAdjustment.objects.pending().count(),
        }
