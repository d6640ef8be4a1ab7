"""
Enums for Stockroom models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class DocumentStatus(models.TextChoices):
    """
    Lifecycle of receipts, deliveries and transfers.

    draft → waiting → ready → done
      └────────┴────────┴───→ canceled
    """
    DRAFT = 'draft', _('Draft')
    WAITING = 'waiting', _('Waiting')
    READY = 'ready', _('Ready')
    DONE = 'done', _('Done')
    CANCELED = 'canceled', _('Canceled')


class AdjustmentStatus(models.TextChoices):
    """Adjustments only go draft → done."""
    DRAFT = 'draft', _('Draft')
    DONE = 'done', _('Done')


PENDING_STATUSES = (DocumentStatus.DRAFT, DocumentStatus.WAITING, DocumentStatus.READY)


class MovementKind(models.TextChoices):
    """
    Kind of ledger movement.

    Sign convention:
        RECEIPT, TRANSFER_IN   → positive
        DELIVERY, TRANSFER_OUT → negative
        ADJUSTMENT             → either (counted - system)
    """
    RECEIPT = 'receipt', _('Receipt')
    DELIVERY = 'delivery', _('Delivery')
    TRANSFER_IN = 'transfer_in', _('Transfer in')
    TRANSFER_OUT = 'transfer_out', _('Transfer out')
    ADJUSTMENT = 'adjustment', _('Adjustment')

    @classmethod
    def inbound(cls):
        return (cls.RECEIPT, cls.TRANSFER_IN)

    @classmethod
    def outbound(cls):
        return (cls.DELIVERY, cls.TRANSFER_OUT)
