"""
Ledger reconciliation — StockLevel.quantity vs. sum of StockMovement.

Balances only change through movements, so a mismatch means someone
wrote StockLevel directly (raw SQL, data import, fixtures).

Usage:
    from stockroom.services.reconciliation import check_ledger, repair_ledger

    # Run periodically (celery beat, cron): manage.py reconcile_stock
    mismatches = check_ledger()
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import transaction
from django.db.models import OuterRef, Subquery, Sum, DecimalField
from django.db.models.functions import Coalesce

from stockroom.models.movement import StockMovement
from stockroom.models.stock_level import StockLevel

logger = logging.getLogger('stockroom')


@dataclass(frozen=True)
class LedgerMismatch:
    """A stock level whose balance disagrees with its ledger."""

    stock_level: StockLevel
    balance: Decimal
    ledger_total: Decimal

    @property
    def difference(self) -> Decimal:
        return self.ledger_total - self.balance


def check_ledger(product=None, warehouse=None) -> list[LedgerMismatch]:
    """
    Find stock levels whose quantity differs from their ledger sum.

    Args:
        product: Optional product filter (None = all).
        warehouse: Optional warehouse filter (None = all).

    Returns:
        List of LedgerMismatch, in stock level order.
    """
    ledger = StockMovement.objects.filter(
        product_id=OuterRef('product_id'),
        warehouse_id=OuterRef('warehouse_id'),
    ).order_by().values('product_id', 'warehouse_id').annotate(
        total=Sum('quantity')
    ).values('total')

    qs = StockLevel.objects.select_related('product', 'warehouse').annotate(
        ledger=Coalesce(
            Subquery(ledger, output_field=DecimalField(max_digits=12, decimal_places=3)),
            Decimal('0'),
            output_field=DecimalField(max_digits=12, decimal_places=3),
        )
    )
    if product is not None:
        qs = qs.filter(product=product)
    if warehouse is not None:
        qs = qs.filter(warehouse=warehouse)

    mismatches = []
    for level in qs.order_by('pk'):
        if level.ledger != level.quantity:
            mismatches.append(LedgerMismatch(level, level.quantity, level.ledger))
            logger.warning(
                "stock.ledger.mismatch",
                extra={
                    "stock_level_id": level.pk,
                    "product": level.product.sku,
                    "warehouse": level.warehouse.code,
                    "balance": str(level.quantity),
                    "ledger": str(level.ledger),
                },
            )
    return mismatches


def repair_ledger(product=None, warehouse=None) -> list[LedgerMismatch]:
    """
    Reset every mismatched balance to its ledger sum.

    The ledger is the source of truth. Returns the mismatches that were fixed.
    """
    with transaction.atomic():
        mismatches = check_ledger(product, warehouse)
        for mismatch in mismatches:
            level = StockLevel.objects.select_for_update().get(pk=mismatch.stock_level.pk)
            level.recalculate()
    return mismatches
