"""
StockLevel model — balance of a product at a warehouse.
"""

import logging
from decimal import Decimal

from django.db import models
from django.db.models import Q, Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _

logger = logging.getLogger('stockroom')


class StockLevelManager(models.Manager):
    """Manager with helper methods for StockLevel queries."""

    def for_product(self, product):
        return self.filter(product=product)

    def at_warehouse(self, warehouse):
        return self.filter(warehouse=warehouse)

    def for_pair(self, product, warehouse):
        return self.filter(product=product, warehouse=warehouse)


class StockLevel(models.Model):
    """
    On-hand quantity of a product at a warehouse.

    The quantity is a cache of the ledger:
    - Only StockMovement.save() changes it (F() update, same transaction)
    - Read is O(1), not O(N)
    - Use recalculate() for audit/correction
    """

    product = models.ForeignKey(
        'stockroom.Product',
        on_delete=models.PROTECT,
        related_name='stock_levels',
        verbose_name=_('Product'),
    )
    warehouse = models.ForeignKey(
        'stockroom.Warehouse',
        on_delete=models.PROTECT,
        related_name='stock_levels',
        verbose_name=_('Warehouse'),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        verbose_name=_('Quantity'),
    )
    updated_at = models.DateTimeField(auto_now=True)

    objects = StockLevelManager()

    class Meta:
        verbose_name = _('Stock level')
        verbose_name_plural = _('Stock levels')
        ordering = ['product', 'warehouse']
        constraints = [
            models.UniqueConstraint(
                fields=['product', 'warehouse'],
                name='unique_stock_level_per_product_warehouse',
            ),
            models.CheckConstraint(
                condition=Q(quantity__gte=0),
                name='stock_level_quantity_non_negative',
            ),
        ]

    def ledger_total(self) -> Decimal:
        """Sum of all movements posted for this product/warehouse pair."""
        from stockroom.models.movement import StockMovement

        return StockMovement.objects.filter(
            product_id=self.product_id,
            warehouse_id=self.warehouse_id,
        ).aggregate(
            t=Coalesce(Sum('quantity'), Decimal('0'))
        )['t']

    def recalculate(self) -> Decimal:
        """
        Recalculate quantity from the ledger.

        Use for:
        - Integrity audit
        - Correction after detected inconsistency

        Returns:
            New calculated quantity
        """
        total = self.ledger_total()

        if total != self.quantity:
            old = self.quantity
            self.quantity = total
            self.save(update_fields=['quantity', 'updated_at'])

            logger.warning(
                f"StockLevel {self.pk} recalculated: {old} → {total} "
                f"(diff: {total - old})"
            )

        return total

    def __str__(self) -> str:
        return f"{self.product} [{self.warehouse}]: {self.quantity}"
