"""
StockMovement model — Immutable ledger of quantity changes.
"""

from django.conf import settings
from django.contrib.contenttypes.fields import GenericForeignKey
from django.contrib.contenttypes.models import ContentType
from django.db import models, transaction
from django.db.models import F
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockroom.models.enums import MovementKind


class StockMovement(models.Model):
    """
    Immutable record of quantity change.

    Rules:
    - NEVER update() or delete()
    - Corrections are new movements (adjustments)
    - Updates StockLevel.quantity atomically on save()

    This is the ONLY model that changes quantity.
    """

    product = models.ForeignKey(
        'stockroom.Product',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Product'),
    )
    warehouse = models.ForeignKey(
        'stockroom.Warehouse',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('Warehouse'),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantity'),
        help_text=_('Positive = in, Negative = out'),
    )
    kind = models.CharField(
        max_length=20,
        choices=MovementKind.choices,
        verbose_name=_('Kind'),
    )

    # Originating document (receipt, delivery, transfer, adjustment)
    reference_type = models.ForeignKey(
        ContentType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Reference type'),
    )
    reference_id = models.PositiveIntegerField(null=True, blank=True, verbose_name=_('Reference ID'))
    reference = GenericForeignKey('reference_type', 'reference_id')

    reason = models.CharField(
        max_length=255,
        verbose_name=_('Reason'),
        help_text=_('Required. E.g. "Receipt RCP-00001"'),
    )
    metadata = models.JSONField(default=dict, blank=True, verbose_name=_('Metadata'))

    timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Timestamp'))
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        verbose_name=_('User'),
    )

    class Meta:
        verbose_name = _('Stock movement')
        verbose_name_plural = _('Stock movements')
        ordering = ['timestamp', 'pk']
        indexes = [
            models.Index(fields=['product', 'warehouse', 'timestamp'], name='stock_move_pair_ts_idx'),
            models.Index(fields=['reference_type', 'reference_id'], name='stock_move_reference_idx'),
        ]

    def save(self, *args, **kwargs):
        """Save movement and update the stock level cache atomically."""
        if self.pk:
            raise ValueError(
                "Movements are immutable. "
                "To correct, post an adjustment."
            )

        if not self.reason:
            raise ValueError("Reason is required")

        if self.kind not in MovementKind.values:
            raise ValueError(f"Unknown movement kind: {self.kind!r}")
        if self.kind in MovementKind.inbound() and self.quantity <= 0:
            raise ValueError(f"{self.kind} movements must be positive")
        if self.kind in MovementKind.outbound() and self.quantity >= 0:
            raise ValueError(f"{self.kind} movements must be negative")

        with transaction.atomic():
            super().save(*args, **kwargs)

            from stockroom.models.stock_level import StockLevel

            updated = StockLevel.objects.filter(
                product_id=self.product_id,
                warehouse_id=self.warehouse_id,
            ).update(
                quantity=F('quantity') + self.quantity,
                updated_at=timezone.now()
            )
            if not updated:
                raise ValueError(
                    f"No stock level for product {self.product_id} "
                    f"at warehouse {self.warehouse_id}"
                )

    def delete(self, *args, **kwargs):
        """Prevent deletion — movements are immutable."""
        raise ValueError(
            "Movements are immutable. "
            "To reverse, post an adjustment."
        )

    def __str__(self) -> str:
        sign = '+' if self.quantity > 0 else ''
        return f"{sign}{self.quantity} {self.kind} | {self.reason}"
