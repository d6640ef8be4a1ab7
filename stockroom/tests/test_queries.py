"""
Tests for the read model: balances, low stock, history, summary.
"""

import logging
from decimal import Decimal

import pytest

from stockroom import stock
from stockroom.models import MovementKind, Product


pytestmark = pytest.mark.django_db


class TestBalances:

    def test_balance_without_stock_level(self, product, main):
        assert stock.balance(product, main) == Decimal('0')
        assert stock.get_stock_level(product, main) is None

    def test_on_hand_sums_warehouses(self, stocked, main, secondary):
        stock.validate(stock.create_transfer(stocked, 3, main, secondary))

        assert stock.balance(stocked, main) == Decimal('7')
        assert stock.balance(stocked, secondary) == Decimal('3')
        assert stock.on_hand(stocked) == Decimal('10')

    def test_list_stock_levels_hides_empty(self, stocked, main, secondary):
        stock.validate(stock.create_transfer(stocked, 10, main, secondary))

        levels = stock.list_stock_levels(product=stocked)
        assert [level.warehouse.code for level in levels] == ['WH-SEC']

        levels = stock.list_stock_levels(product=stocked, include_empty=True)
        assert levels.count() == 2

    def test_list_stock_levels_by_warehouse(self, stocked, other_product, main, secondary):
        stock.validate(stock.create_receipt(secondary, 'ACME', [(other_product, 1)]))

        assert [level.product.sku for level in stock.list_stock_levels(warehouse=main)] == ['X1']


class TestLowStock:

    def test_low_stock_uses_total_on_hand(self, product, main, secondary):
        """reorder_level=5: low at 0, low at 5, fine at 6."""
        assert product in stock.low_stock()

        stock.validate(stock.create_receipt(main, 'ACME', [(product, 3)]))
        stock.validate(stock.create_receipt(secondary, 'ACME', [(product, 2)]))
        assert product in stock.low_stock()

        stock.validate(stock.create_receipt(secondary, 'ACME', [(product, 1)]))
        assert product not in stock.low_stock()

    def test_low_stock_annotates_on_hand(self, stocked):
        stocked.reorder_level = 20
        stocked.save()

        [low] = [p for p in stock.low_stock() if p.pk == stocked.pk]
        assert low.on_hand == Decimal('10')

    def test_low_stock_logs_warning(self, product, caplog):
        with caplog.at_level(logging.WARNING, logger='stockroom'):
            stock.low_stock()

        record = next(r for r in caplog.records if r.getMessage() == 'stock.low')
        assert record.sku == 'X1'

    def test_queryset_low_stock(self, stocked, other_product):
        """reorder_level=0 with nothing on hand is still low (0 <= 0)."""
        assert set(Product.objects.low_stock()) == {other_product}


class TestHistory:

    def test_history_newest_first(self, stocked, main):
        stock.validate(stock.create_delivery(main, 'Customer', [(stocked, 1)]))

        kinds = [m.kind for m in stock.history(product=stocked)]
        assert kinds == [MovementKind.DELIVERY, MovementKind.RECEIPT]

    def test_history_filters(self, stocked, main, secondary):
        transfer = stock.create_transfer(stocked, 4, main, secondary)
        stock.validate(transfer)

        assert stock.history(warehouse=secondary).count() == 1
        assert stock.history(kind=MovementKind.TRANSFER_OUT).get().quantity == Decimal('-4')
        assert stock.history(reference=transfer).count() == 2


class TestSummary:

    def test_summary_counts(self, product, other_product, main, secondary):
        stock.create_receipt(main, 'ACME', [(product, 1)])
        done = stock.create_receipt(main, 'ACME', [(product, 1)])
        stock.validate(done)
        stock.create_delivery(main, 'Customer')
        canceled = stock.create_transfer(product, 1, main, secondary)
        stock.cancel(canceled)
        stock.create_transfer(product, 1, main, secondary)
        stock.create_adjustment(product, main, 5)

        assert stock.summary() == {
            'total_products': 2,
            'low_stock_products': 2,
            'pending_receipts': 1,
            'pending_deliveries': 1,
            'scheduled_transfers': 1,
            'draft_adjustments': 1,
        }
