"""
Tests for document creation, numbering and lifecycle.
"""

from decimal import Decimal

import pytest

from stockroom import stock, StockError
from stockroom.models import (
    DocumentStatus,
    InternalTransfer,
    Receipt,
    StockAdjustment,
)
from stockroom.models.sequence import DocumentSequence
from stockroom.services.numbering import format_number, next_document_number


pytestmark = pytest.mark.django_db


class TestNumbering:
    """Server-side document numbers."""

    def test_numbers_use_kind_prefix(self, product, main, secondary):
        receipt = stock.create_receipt(main, 'ACME')
        delivery = stock.create_delivery(main, 'Customer')
        transfer = stock.create_transfer(product, 1, main, secondary)
        adjustment = stock.create_adjustment(product, main, 0)

        assert receipt.number == 'RCP-00001'
        assert delivery.number == 'DEL-00001'
        assert transfer.number == 'TRF-00001'
        assert adjustment.number == 'ADJ-00001'

    def test_numbers_increase_per_prefix(self, main):
        numbers = [stock.create_receipt(main, 'ACME').number for _ in range(3)]

        assert numbers == ['RCP-00001', 'RCP-00002', 'RCP-00003']
        assert DocumentSequence.objects.get(prefix='RCP').last_value == 3

    def test_prefix_and_padding_from_settings(self, settings, main):
        settings.STOCKROOM = {'DOCUMENT_PREFIXES': {'receipt': 'IN'}, 'NUMBER_PADDING': 3}

        receipt = stock.create_receipt(main, 'ACME')
        delivery = stock.create_delivery(main, 'Customer')

        assert receipt.number == 'IN-001'
        assert delivery.number == 'DEL-001'

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError):
            next_document_number('invoice')

    def test_format_number(self):
        assert format_number('ADJ', 42) == 'ADJ-00042'

    def test_admin_style_creation_gets_number(self, main):
        """Saving a document directly (admin, shell) also numbers it."""
        receipt = Receipt.objects.create(warehouse=main, supplier_name='ACME')

        assert receipt.number.startswith('RCP-')


class TestCreateDocuments:
    """Tests for stock.create_*()."""

    def test_create_receipt_with_lines(self, product, other_product, main, user):
        receipt = stock.create_receipt(
            main, 'ACME', [(product, '2.5'), (other_product, 3)], user=user, notes='Dock 4',
        )

        assert receipt.status == DocumentStatus.DRAFT
        assert receipt.created_by == user
        assert receipt.notes == 'Dock 4'
        assert [line.quantity for line in receipt.lines.all()] == [Decimal('2.5'), Decimal('3')]

    def test_create_receipt_invalid_line_creates_nothing(self, product, main):
        with pytest.raises(StockError) as exc:
            stock.create_receipt(main, 'ACME', [(product, 1), (product, -1)])

        assert exc.value.code == 'INVALID_QUANTITY'
        assert not Receipt.objects.exists()

    def test_create_delivery_does_not_check_stock(self, product, main):
        """Stock is only checked on validation."""
        delivery = stock.create_delivery(main, 'Customer', [(product, 100)])

        assert delivery.lines.count() == 1
        assert stock.balance(product, main) == Decimal('0')

    def test_create_transfer_same_warehouse(self, product, main):
        with pytest.raises(StockError) as exc:
            stock.create_transfer(product, 1, main, main)

        assert exc.value.code == 'SAME_WAREHOUSE'
        assert not InternalTransfer.objects.exists()

    def test_create_transfer_invalid_quantity(self, product, main, secondary):
        with pytest.raises(StockError) as exc:
            stock.create_transfer(product, 0, main, secondary)

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_create_adjustment_captures_system_quantity(self, stocked, main, user):
        adjustment = stock.create_adjustment(stocked, main, '8', reason='Cycle count', user=user)

        assert adjustment.system_quantity == Decimal('10')
        assert adjustment.counted_quantity == Decimal('8')
        assert adjustment.difference == Decimal('-2')
        assert adjustment.status == 'draft'

    def test_create_adjustment_negative_count(self, product, main):
        with pytest.raises(StockError) as exc:
            stock.create_adjustment(product, main, -1)

        assert exc.value.code == 'INVALID_QUANTITY'

    def test_non_numeric_quantity(self, product, main):
        receipt = stock.create_receipt(main, 'ACME')

        with pytest.raises(StockError) as exc:
            stock.add_line(receipt, product, 'ten')

        assert exc.value.code == 'INVALID_QUANTITY'

    @pytest.mark.parametrize('quantity', ['NaN', 'Infinity', '-Infinity', '1e12', '0.0004'])
    def test_unstorable_line_quantity(self, product, main, quantity):
        """Non-finite, over 12 digits, or rounding to 0.000 at 3 places."""
        with pytest.raises(StockError) as exc:
            stock.create_receipt(main, 'ACME', [(product, quantity)])

        assert exc.value.code == 'INVALID_QUANTITY'
        assert not Receipt.objects.exists()

    @pytest.mark.parametrize('quantity', ['NaN', 'Infinity', '1e12', '0.0004'])
    def test_unstorable_transfer_quantity(self, product, main, secondary, quantity):
        with pytest.raises(StockError) as exc:
            stock.create_transfer(product, quantity, main, secondary)

        assert exc.value.code == 'INVALID_QUANTITY'
        assert not InternalTransfer.objects.exists()

    @pytest.mark.parametrize('quantity', ['NaN', 'Infinity', '1e12'])
    def test_unstorable_counted_quantity(self, product, main, quantity):
        with pytest.raises(StockError) as exc:
            stock.create_adjustment(product, main, quantity)

        assert exc.value.code == 'INVALID_QUANTITY'
        assert not StockAdjustment.objects.exists()

    def test_quantity_rounded_to_three_places(self, product, main, secondary):
        receipt = stock.create_receipt(main, 'ACME', [(product, '2.0004')])
        transfer = stock.create_transfer(product, Decimal('1.2345'), main, secondary)

        assert receipt.lines.get().quantity == Decimal('2.000')
        assert transfer.quantity == Decimal('1.235')


class TestAddLine:
    """Tests for stock.add_line()."""

    def test_add_line_to_draft(self, product, main):
        delivery = stock.create_delivery(main, 'Customer')

        line = stock.add_line(delivery, product, 3)

        assert line.delivery == delivery
        assert line.quantity == Decimal('3')

    def test_add_line_to_done_document(self, product, main):
        receipt = stock.create_receipt(main, 'ACME', [(product, 1)])
        stock.validate(receipt)

        with pytest.raises(StockError) as exc:
            stock.add_line(receipt, product, 1)

        assert exc.value.code == 'INVALID_STATUS'
        assert receipt.lines.count() == 1

    def test_add_line_to_transfer(self, product, main, secondary):
        transfer = stock.create_transfer(product, 1, main, secondary)

        with pytest.raises(StockError) as exc:
            stock.add_line(transfer, product, 1)

        assert exc.value.code == 'UNSUPPORTED_DOCUMENT'


class TestLifecycle:
    """Tests for stock.advance() and stock.cancel()."""

    def test_advance_draft_waiting_ready(self, main):
        receipt = stock.create_receipt(main, 'ACME')

        stock.advance(receipt)
        assert receipt.status == DocumentStatus.WAITING

        stock.advance(receipt)
        assert receipt.status == DocumentStatus.READY

        receipt.refresh_from_db()
        assert receipt.status == DocumentStatus.READY

    def test_advance_ready_rejected(self, main):
        receipt = stock.create_receipt(main, 'ACME')
        stock.advance(receipt)
        stock.advance(receipt)

        with pytest.raises(StockError) as exc:
            stock.advance(receipt)

        assert exc.value.code == 'INVALID_STATUS'

    def test_ready_document_can_be_validated(self, product, main):
        receipt = stock.create_receipt(main, 'ACME', [(product, 2)])
        stock.advance(receipt)
        stock.advance(receipt)

        stock.validate(receipt)

        assert receipt.status == DocumentStatus.DONE

    def test_cancel_pending(self, product, main, secondary):
        transfer = stock.create_transfer(product, 1, main, secondary)
        stock.advance(transfer)

        stock.cancel(transfer, reason='Truck broke down')

        transfer.refresh_from_db()
        assert transfer.status == DocumentStatus.CANCELED
        assert 'Canceled: Truck broke down' in transfer.notes

    def test_cancel_done_rejected(self, product, main):
        receipt = stock.create_receipt(main, 'ACME', [(product, 2)])
        stock.validate(receipt)

        with pytest.raises(StockError) as exc:
            stock.cancel(receipt)

        assert exc.value.code == 'INVALID_STATUS'
        assert stock.balance(product, main) == Decimal('2')

    def test_adjustment_cannot_advance_or_cancel(self, product, main):
        adjustment = stock.create_adjustment(product, main, 1)

        with pytest.raises(StockError):
            stock.advance(adjustment)
        with pytest.raises(StockError):
            stock.cancel(adjustment)

    def test_done_document_cannot_be_deleted(self, product, main):
        receipt = stock.create_receipt(main, 'ACME', [(product, 2)])
        stock.validate(receipt)

        with pytest.raises(ValueError):
            receipt.delete()

        assert Receipt.objects.filter(pk=receipt.pk).exists()

    def test_draft_document_can_be_deleted(self, product, main):
        adjustment = stock.create_adjustment(product, main, 1)

        adjustment.delete()

        assert not StockAdjustment.objects.exists()
