"""
Movement validation — posts a document's stock effect exactly once.

Every validation is one transaction:
1. Lock the document row, re-read its status
2. Lock every touched StockLevel (pk order)
3. Check all preconditions (lines, quantities, sufficiency)
4. Post movements (each one updates its StockLevel)
5. Mark the document DONE

Any error before commit rolls back everything: no partial effect.
"""

import logging
import operator
from collections import defaultdict
from decimal import Decimal
from functools import reduce

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from stockroom.conf import stockroom_settings
from stockroom.exceptions import StockError
from stockroom.models.documents import Delivery, InternalTransfer, Receipt, StockAdjustment
from stockroom.models.enums import DocumentStatus, MovementKind, PENDING_STATUSES
from stockroom.models.movement import StockMovement
from stockroom.models.stock_level import StockLevel
from stockroom.signals import document_validated

logger = logging.getLogger('stockroom')


class StockValidation:
    """Document validation methods."""

    @classmethod
    def validate(cls, document, user=None) -> list[StockMovement]:
        """
        Validate a document: post its movements and mark it DONE.

        | Document         | Effect                               | Movements                   |
        |------------------|--------------------------------------|-----------------------------|
        | Receipt          | balance += qty per line              | receipt +qty                |
        | Delivery         | balance -= qty per line              | delivery -qty               |
        | InternalTransfer | source -= qty, destination += qty    | transfer_out / transfer_in  |
        | StockAdjustment  | balance := counted                   | adjustment (counted-system) |

        Returns:
            Posted movements, in posting order.

        Raises:
            StockError('ALREADY_VALIDATED'): Document is DONE (no double posting)
            StockError('INVALID_STATUS'): Document is CANCELED
            StockError('EMPTY_DOCUMENT'): Receipt/Delivery without lines
            StockError('INVALID_QUANTITY'): Non-positive line/transfer quantity
            StockError('INSUFFICIENT_QUANTITY'): Not enough stock to deliver/transfer
            StockError('SAME_WAREHOUSE'): Transfer to its own source
            StockError('CONCURRENT_MODIFICATION'): Balance moved since the count
            StockError('LEDGER_MISMATCH'): VERIFY_LEDGER_ON_VALIDATE check failed

        Concurrency:
            - Runs under transaction.atomic()
            - select_for_update() on the document, then on StockLevels by pk
            - All checks happen after the locks are taken
        """
        handlers = {
            Receipt: cls._validate_receipt,
            Delivery: cls._validate_delivery,
            InternalTransfer: cls._validate_transfer,
            StockAdjustment: cls._validate_adjustment,
        }
        handler = handlers.get(type(document))
        if handler is None:
            raise StockError('UNSUPPORTED_DOCUMENT', document=type(document).__name__)

        try:
            with transaction.atomic():
                locked = cls._lock_document(document)
                movements = handler(locked, user)
                cls._mark_done(locked, user)

                if stockroom_settings.VERIFY_LEDGER_ON_VALIDATE:
                    cls._verify_ledger(movements)

                transaction.on_commit(
                    lambda: document_validated.send(
                        sender=type(locked),
                        document=locked,
                        movements=movements,
                        user=user,
                    )
                )
        except StockError as exc:
            logger.warning(
                "stock.validate.rejected",
                extra={
                    "number": document.number,
                    "code": exc.code,
                    "data": exc.as_dict()['data'],
                },
            )
            raise

        document.status = locked.status
        document.validated_at = locked.validated_at
        document.validated_by = locked.validated_by

        logger.info(
            f"stock.validate.{locked.number_kind}",
            extra={
                "number": locked.number,
                "movements": len(movements),
                "user": str(user) if user else None,
            },
        )
        return movements

    # ══════════════════════════════════════════════════════════════
    # PER DOCUMENT KIND
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _validate_receipt(cls, receipt, user):
        lines = cls._get_lines(receipt)
        levels = cls._lock_levels(
            [(line.product_id, receipt.warehouse_id) for line in lines],
            create=True,
        )
        reason = f"Receipt {receipt.number}"
        return [
            cls._post(
                levels[(line.product_id, receipt.warehouse_id)],
                line.quantity, MovementKind.RECEIPT, receipt, user, reason,
            )
            for line in lines
        ]

    @classmethod
    def _validate_delivery(cls, delivery, user):
        lines = cls._get_lines(delivery)

        # Same product may appear on several lines
        requested = defaultdict(Decimal)
        products = {}
        for line in lines:
            requested[line.product_id] += line.quantity
            products[line.product_id] = line.product

        levels = cls._lock_levels(
            [(product_id, delivery.warehouse_id) for product_id in requested],
        )
        for product_id, quantity in requested.items():
            cls._check_available(
                levels.get((product_id, delivery.warehouse_id)),
                quantity,
                number=delivery.number,
                product=products[product_id].sku,
                warehouse=delivery.warehouse.code,
            )

        reason = f"Delivery {delivery.number}"
        return [
            cls._post(
                levels[(line.product_id, delivery.warehouse_id)],
                -line.quantity, MovementKind.DELIVERY, delivery, user, reason,
            )
            for line in lines
        ]

    @classmethod
    def _validate_transfer(cls, transfer, user):
        cls._check_quantity(transfer.quantity, number=transfer.number)

        if transfer.source_warehouse_id == transfer.destination_warehouse_id:
            raise StockError('SAME_WAREHOUSE', number=transfer.number)

        source_key = (transfer.product_id, transfer.source_warehouse_id)
        destination_key = (transfer.product_id, transfer.destination_warehouse_id)

        StockLevel.objects.get_or_create(
            product_id=transfer.product_id,
            warehouse_id=transfer.destination_warehouse_id,
        )
        levels = cls._lock_levels([source_key, destination_key])

        cls._check_available(
            levels.get(source_key),
            transfer.quantity,
            number=transfer.number,
            product=transfer.product.sku,
            warehouse=transfer.source_warehouse.code,
        )

        reason = (
            f"Transfer {transfer.number}: "
            f"{transfer.source_warehouse.code} → {transfer.destination_warehouse.code}"
        )
        return [
            cls._post(levels[source_key], -transfer.quantity,
                      MovementKind.TRANSFER_OUT, transfer, user, reason),
            cls._post(levels[destination_key], transfer.quantity,
                      MovementKind.TRANSFER_IN, transfer, user, reason),
        ]

    @classmethod
    def _validate_adjustment(cls, adjustment, user):
        if adjustment.counted_quantity < 0:
            raise StockError(
                'INVALID_QUANTITY',
                number=adjustment.number,
                requested=adjustment.counted_quantity,
            )

        key = (adjustment.product_id, adjustment.warehouse_id)
        level = cls._lock_levels([key], create=True)[key]

        # Compare-and-swap: the count was taken against system_quantity
        if level.quantity != adjustment.system_quantity:
            raise StockError(
                'CONCURRENT_MODIFICATION',
                number=adjustment.number,
                expected=adjustment.system_quantity,
                current=level.quantity,
            )

        reason = f"Adjustment {adjustment.number}"
        if adjustment.reason:
            reason = f"{reason}: {adjustment.reason}"
        return [
            cls._post(
                level,
                adjustment.counted_quantity - adjustment.system_quantity,
                MovementKind.ADJUSTMENT, adjustment, user, reason,
            )
        ]

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _lock_document(cls, document):
        """Re-read the document under lock and check it can be validated."""
        model = type(document)
        try:
            locked = model.objects.select_for_update().get(pk=document.pk)
        except model.DoesNotExist:
            raise StockError('DOCUMENT_NOT_FOUND', number=document.number)

        if locked.status == DocumentStatus.DONE:
            raise StockError(
                'ALREADY_VALIDATED',
                number=locked.number,
                validated_at=locked.validated_at.isoformat() if locked.validated_at else None,
            )
        if locked.status not in PENDING_STATUSES:
            raise StockError(
                'INVALID_STATUS',
                number=locked.number,
                current=locked.status,
                expected=[str(s) for s in PENDING_STATUSES],
            )
        return locked

    @classmethod
    def _get_lines(cls, document):
        lines = list(document.lines.select_related('product'))
        if not lines:
            raise StockError('EMPTY_DOCUMENT', number=document.number)
        for line in lines:
            cls._check_quantity(line.quantity, number=document.number, product=line.product.sku)
        return lines

    @classmethod
    def _check_quantity(cls, quantity, **context):
        if quantity is None or quantity <= 0:
            raise StockError('INVALID_QUANTITY', requested=quantity, **context)

    @classmethod
    def _check_available(cls, level, quantity, **context):
        available = level.quantity if level is not None else Decimal('0')
        if available < quantity:
            raise StockError(
                'INSUFFICIENT_QUANTITY',
                available=available,
                requested=quantity,
                **context
            )

    @classmethod
    def _lock_levels(cls, pairs, create=False) -> dict[tuple[int, int], StockLevel]:
        """
        Lock StockLevels for (product_id, warehouse_id) pairs.

        With create=True, missing rows are created first (quantity 0).
        Missing rows are absent from the result when create=False.
        """
        pairs = sorted(set(pairs))
        if create:
            for product_id, warehouse_id in pairs:
                StockLevel.objects.get_or_create(product_id=product_id, warehouse_id=warehouse_id)

        condition = reduce(
            operator.or_,
            (Q(product_id=p, warehouse_id=w) for p, w in pairs),
        )
        levels = StockLevel.objects.select_for_update().filter(condition).order_by('pk')
        return {(level.product_id, level.warehouse_id): level for level in levels}

    @classmethod
    def _post(cls, level, quantity, kind, document, user, reason) -> StockMovement:
        return StockMovement.objects.create(
            product_id=level.product_id,
            warehouse_id=level.warehouse_id,
            quantity=quantity,
            kind=kind,
            reference=document,
            reason=reason,
            user=user,
        )

    @classmethod
    def _mark_done(cls, document, user):
        document.status = DocumentStatus.DONE
        document.validated_at = timezone.now()
        document.validated_by = user
        document.save(update_fields=['status', 'validated_at', 'validated_by'])

    @classmethod
    def _verify_ledger(cls, movements):
        """Re-sum the ledger of every touched pair (inside the transaction)."""
        pairs = {(m.product_id, m.warehouse_id) for m in movements}
        condition = reduce(
            operator.or_,
            (Q(product_id=p, warehouse_id=w) for p, w in pairs),
        )
        for level in StockLevel.objects.filter(condition):
            total = level.ledger_total()
            if total != level.quantity:
                logger.error(
                    "stock.ledger.mismatch",
                    extra={
                        "stock_level_id": level.pk,
                        "balance": str(level.quantity),
                        "ledger": str(total),
                    },
                )
                raise StockError(
                    'LEDGER_MISMATCH',
                    product=level.product_id,
                    warehouse=level.warehouse_id,
                    balance=level.quantity,
                    ledger=total,
                )
