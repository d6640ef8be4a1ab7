"""
Document models — receipts, deliveries, internal transfers, adjustments.

A document is created in DRAFT and only ever reaches DONE through
stock.validate(), which posts its movements in the same transaction.
"""

from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from django.utils.translation import gettext_lazy as _

from stockroom.models.enums import AdjustmentStatus, DocumentStatus, PENDING_STATUSES


class DocumentQuerySet(models.QuerySet):

    def pending(self):
        return self.filter(status__in=PENDING_STATUSES)

    def done(self):
        return self.filter(status=DocumentStatus.DONE)


class Document(models.Model):
    """
    Common header of every stock document.

    Subclasses set ``number_kind`` (key into STOCKROOM['DOCUMENT_PREFIXES']).
    """

    number_kind = ''

    number = models.CharField(
        max_length=30,
        unique=True,
        editable=False,
        verbose_name=_('Number'),
    )
    status = models.CharField(
        max_length=20,
        choices=DocumentStatus.choices,
        default=DocumentStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status'),
    )
    notes = models.TextField(blank=True, default='', verbose_name=_('Notes'))

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Created by'),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    validated_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Validated at'))
    validated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Validated by'),
    )

    objects = DocumentQuerySet.as_manager()

    class Meta:
        abstract = True
        ordering = ['-created_at', '-pk']

    @property
    def is_done(self) -> bool:
        return self.status == DocumentStatus.DONE

    @property
    def is_pending(self) -> bool:
        return self.status in PENDING_STATUSES

    def save(self, *args, **kwargs):
        if not self.number:
            # Import here to avoid circular import
            from stockroom.services.numbering import next_document_number
            self.number = next_document_number(self.number_kind)
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Validated documents are referenced by the ledger."""
        if self.is_done:
            raise ValueError(
                f"{self.number} is validated and cannot be deleted."
            )
        return super().delete(*args, **kwargs)

    def __str__(self) -> str:
        return self.number


class Receipt(Document):
    """Incoming goods from a supplier into one warehouse."""

    number_kind = 'receipt'

    supplier_name = models.CharField(max_length=200, verbose_name=_('Supplier'))
    warehouse = models.ForeignKey(
        'stockroom.Warehouse',
        on_delete=models.PROTECT,
        related_name='receipts',
        verbose_name=_('Warehouse'),
    )

    class Meta(Document.Meta):
        verbose_name = _('Receipt')
        verbose_name_plural = _('Receipts')


class ReceiptLine(models.Model):
    receipt = models.ForeignKey(
        Receipt,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Receipt'),
    )
    product = models.ForeignKey(
        'stockroom.Product',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Product'),
    )
    quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantity'))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Receipt line')
        verbose_name_plural = _('Receipt lines')
        ordering = ['pk']

    def __str__(self) -> str:
        return f"{self.quantity} x {self.product}"


class Delivery(Document):
    """Outgoing goods to a customer from one warehouse."""

    number_kind = 'delivery'

    customer_name = models.CharField(max_length=200, verbose_name=_('Customer'))
    warehouse = models.ForeignKey(
        'stockroom.Warehouse',
        on_delete=models.PROTECT,
        related_name='deliveries',
        verbose_name=_('Warehouse'),
    )

    class Meta(Document.Meta):
        verbose_name = _('Delivery')
        verbose_name_plural = _('Deliveries')


class DeliveryLine(models.Model):
    delivery = models.ForeignKey(
        Delivery,
        on_delete=models.CASCADE,
        related_name='lines',
        verbose_name=_('Delivery'),
    )
    product = models.ForeignKey(
        'stockroom.Product',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Product'),
    )
    quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantity'))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Delivery line')
        verbose_name_plural = _('Delivery lines')
        ordering = ['pk']

    def __str__(self) -> str:
        return f"{self.quantity} x {self.product}"


class InternalTransfer(Document):
    """Move a quantity of one product between two warehouses."""

    number_kind = 'transfer'

    source_warehouse = models.ForeignKey(
        'stockroom.Warehouse',
        on_delete=models.PROTECT,
        related_name='outgoing_transfers',
        verbose_name=_('Source warehouse'),
    )
    destination_warehouse = models.ForeignKey(
        'stockroom.Warehouse',
        on_delete=models.PROTECT,
        related_name='incoming_transfers',
        verbose_name=_('Destination warehouse'),
    )
    product = models.ForeignKey(
        'stockroom.Product',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Product'),
    )
    quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Quantity'))

    class Meta(Document.Meta):
        verbose_name = _('Internal transfer')
        verbose_name_plural = _('Internal transfers')
        constraints = [
            models.CheckConstraint(
                condition=~Q(source_warehouse=F('destination_warehouse')),
                name='transfer_warehouses_differ',
            ),
        ]


class StockAdjustment(Document):
    """
    Physical count of a product at a warehouse.

    ``system_quantity`` is the balance when the count was recorded;
    validation refuses to post if the balance moved since then.
    """

    number_kind = 'adjustment'

    status = models.CharField(
        max_length=20,
        choices=AdjustmentStatus.choices,
        default=AdjustmentStatus.DRAFT,
        db_index=True,
        verbose_name=_('Status'),
    )
    product = models.ForeignKey(
        'stockroom.Product',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Product'),
    )
    warehouse = models.ForeignKey(
        'stockroom.Warehouse',
        on_delete=models.PROTECT,
        related_name='adjustments',
        verbose_name=_('Warehouse'),
    )
    counted_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0'))],
        verbose_name=_('Counted quantity'),
    )
    system_quantity = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('System quantity'))
    difference = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Difference'))
    reason = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Reason'))

    class Meta(Document.Meta):
        verbose_name = _('Stock adjustment')
        verbose_name_plural = _('Stock adjustments')

    def save(self, *args, **kwargs):
        self.difference = Decimal(self.counted_quantity) - Decimal(self.system_quantity)
        super().save(*args, **kwargs)
