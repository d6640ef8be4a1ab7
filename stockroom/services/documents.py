"""
Stock documents — creation and lifecycle before validation.

Nothing here touches balances; see services/validation.py for that.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.db import transaction
from django.utils import timezone

from stockroom.exceptions import StockError
from stockroom.models.documents import (
    Delivery,
    DeliveryLine,
    InternalTransfer,
    Receipt,
    ReceiptLine,
    StockAdjustment,
)
from stockroom.models.enums import DocumentStatus, PENDING_STATUSES
from stockroom.models.stock_level import StockLevel

logger = logging.getLogger('stockroom')

# draft → waiting → ready
NEXT_STATUS = {
    DocumentStatus.DRAFT: DocumentStatus.WAITING,
    DocumentStatus.WAITING: DocumentStatus.READY,
}


# Matches DecimalField(max_digits=12, decimal_places=3)
QUANTITY_STEP = Decimal('0.001')
MAX_QUANTITY = Decimal('1E9')


def to_decimal(value) -> Decimal:
    """
    Coerce user input (int, str, Decimal) to a storable Decimal.

    The result is rounded to the field precision, so a value below
    0.001 comes back as 0 and fails the callers' sign checks.
    """
    try:
        quantity = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise StockError('INVALID_QUANTITY', requested=str(value))

    if not quantity.is_finite() or abs(quantity) >= MAX_QUANTITY:
        raise StockError('INVALID_QUANTITY', requested=str(value))

    return quantity.quantize(QUANTITY_STEP, rounding=ROUND_HALF_UP)


class StockDocuments:
    """Document creation and status transitions."""

    @classmethod
    def create_receipt(cls, warehouse, supplier_name, lines=(), user=None, notes=''):
        """
        Create a DRAFT receipt.

        Args:
            warehouse: Destination Warehouse
            supplier_name: Who delivered the goods
            lines: Iterable of (product, quantity)
        """
        with transaction.atomic():
            receipt = Receipt.objects.create(
                warehouse=warehouse,
                supplier_name=supplier_name,
                notes=notes,
                created_by=user,
            )
            for product, quantity in lines:
                cls.add_line(receipt, product, quantity)

        logger.info(
            "stock.document.created",
            extra={"number": receipt.number, "warehouse": warehouse.code},
        )
        return receipt

    @classmethod
    def create_delivery(cls, warehouse, customer_name, lines=(), user=None, notes=''):
        """
        Create a DRAFT delivery.

        Stock is not checked here, only at validation.
        """
        with transaction.atomic():
            delivery = Delivery.objects.create(
                warehouse=warehouse,
                customer_name=customer_name,
                notes=notes,
                created_by=user,
            )
            for product, quantity in lines:
                cls.add_line(delivery, product, quantity)

        logger.info(
            "stock.document.created",
            extra={"number": delivery.number, "warehouse": warehouse.code},
        )
        return delivery

    @classmethod
    def create_transfer(cls, product, quantity, source, destination, user=None, notes=''):
        """
        Create a DRAFT internal transfer.

        Raises:
            StockError('SAME_WAREHOUSE'): source == destination
            StockError('INVALID_QUANTITY'): quantity <= 0
        """
        quantity = to_decimal(quantity)
        if quantity <= 0:
            raise StockError('INVALID_QUANTITY', requested=quantity)
        if source.pk == destination.pk:
            raise StockError('SAME_WAREHOUSE', warehouse=source.code)

        transfer = InternalTransfer.objects.create(
            product=product,
            quantity=quantity,
            source_warehouse=source,
            destination_warehouse=destination,
            notes=notes,
            created_by=user,
        )
        logger.info(
            "stock.document.created",
            extra={"number": transfer.number, "warehouse": source.code},
        )
        return transfer

    @classmethod
    def create_adjustment(cls, product, warehouse, counted_quantity, reason='', user=None):
        """
        Record a physical count as a DRAFT adjustment.

        system_quantity is the balance right now; validation only posts
        if the balance is still the same.
        """
        counted_quantity = to_decimal(counted_quantity)
        if counted_quantity < 0:
            raise StockError('INVALID_QUANTITY', requested=counted_quantity)

        level = StockLevel.objects.filter(product=product, warehouse=warehouse).first()
        system_quantity = level.quantity if level else Decimal('0')

        adjustment = StockAdjustment.objects.create(
            product=product,
            warehouse=warehouse,
            counted_quantity=counted_quantity,
            system_quantity=system_quantity,
            reason=reason,
            created_by=user,
        )
        logger.info(
            "stock.document.created",
            extra={
                "number": adjustment.number,
                "warehouse": warehouse.code,
                "difference": str(adjustment.difference),
            },
        )
        return adjustment

    @classmethod
    def add_line(cls, document, product, quantity):
        """
        Add a line to a pending receipt or delivery.

        Raises:
            StockError('INVALID_QUANTITY'): quantity <= 0
            StockError('INVALID_STATUS'): document is not pending
        """
        quantity = to_decimal(quantity)
        if quantity <= 0:
            raise StockError('INVALID_QUANTITY', requested=quantity, product=product.sku)

        if not document.is_pending:
            raise StockError(
                'INVALID_STATUS',
                number=document.number,
                current=document.status,
                expected=[str(s) for s in PENDING_STATUSES],
            )

        if isinstance(document, Receipt):
            return ReceiptLine.objects.create(receipt=document, product=product, quantity=quantity)
        if isinstance(document, Delivery):
            return DeliveryLine.objects.create(delivery=document, product=product, quantity=quantity)
        raise StockError('UNSUPPORTED_DOCUMENT', document=type(document).__name__)

    @classmethod
    def advance(cls, document):
        """
        Move a document one step forward: DRAFT → WAITING → READY.

        READY documents go to DONE only through validate().
        """
        if isinstance(document, StockAdjustment):
            raise StockError('INVALID_STATUS', number=document.number, current=document.status)

        with transaction.atomic():
            locked = type(document).objects.select_for_update().get(pk=document.pk)
            next_status = NEXT_STATUS.get(locked.status)
            if next_status is None:
                raise StockError(
                    'INVALID_STATUS',
                    number=locked.number,
                    current=locked.status,
                    expected=[str(s) for s in NEXT_STATUS],
                )
            locked.status = next_status
            locked.save(update_fields=['status'])

        document.status = locked.status
        return document

    @classmethod
    def cancel(cls, document, reason=''):
        """
        Cancel a pending receipt, delivery or transfer.

        Adjustments have no CANCELED state; delete the draft instead.
        """
        if isinstance(document, StockAdjustment):
            raise StockError('INVALID_STATUS', number=document.number, current=document.status)

        with transaction.atomic():
            locked = type(document).objects.select_for_update().get(pk=document.pk)
            if locked.status not in PENDING_STATUSES:
                raise StockError(
                    'INVALID_STATUS',
                    number=locked.number,
                    current=locked.status,
                    expected=[str(s) for s in PENDING_STATUSES],
                )
            locked.status = DocumentStatus.CANCELED
            if reason:
                stamp = timezone.now().strftime('%Y-%m-%d %H:%M')
                locked.notes = f"{locked.notes}\n[{stamp}] Canceled: {reason}".strip()
            locked.save(update_fields=['status', 'notes'])

        document.status = locked.status
        document.notes = locked.notes
        logger.info("stock.document.canceled", extra={"number": locked.number, "reason": reason})
        return document
