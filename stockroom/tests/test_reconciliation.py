"""
Tests for ledger reconciliation and the reconcile_stock command.
"""

from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from stockroom import stock
from stockroom.models import StockLevel
from stockroom.services.reconciliation import check_ledger, repair_ledger


pytestmark = pytest.mark.django_db


@pytest.fixture
def drifted(stocked, main):
    """X1 @ WH-MAIN written directly to 12 (ledger says 10)."""
    StockLevel.objects.filter(product=stocked, warehouse=main).update(quantity=Decimal('12'))
    return stocked


class TestCheckLedger:

    def test_no_mismatch_after_validations(self, stocked, main, secondary):
        stock.validate(stock.create_transfer(stocked, 4, main, secondary))
        stock.validate(stock.create_adjustment(stocked, secondary, 1))

        assert check_ledger() == []

    def test_detects_direct_write(self, drifted, main):
        [mismatch] = check_ledger()

        assert mismatch.stock_level.warehouse == main
        assert mismatch.balance == Decimal('12')
        assert mismatch.ledger_total == Decimal('10')
        assert mismatch.difference == Decimal('-2')

    def test_level_without_movements(self, product, secondary):
        StockLevel.objects.create(product=product, warehouse=secondary, quantity=Decimal('5'))

        [mismatch] = check_ledger(warehouse=secondary)
        assert mismatch.ledger_total == Decimal('0')

    def test_filters(self, drifted, other_product, secondary):
        assert check_ledger(product=other_product) == []
        assert check_ledger(warehouse=secondary) == []
        assert len(check_ledger(product=drifted)) == 1


class TestRepairLedger:

    def test_repair_resets_to_ledger(self, drifted, main):
        fixed = repair_ledger()

        assert len(fixed) == 1
        assert stock.balance(drifted, main) == Decimal('10')
        assert check_ledger() == []

    def test_recalculate_is_noop_when_consistent(self, stocked, main):
        level = stock.get_stock_level(stocked, main)

        assert level.recalculate() == Decimal('10')
        assert level.ledger_total() == Decimal('10')


class TestReconcileCommand:

    def test_report_only(self, drifted):
        out = StringIO()
        call_command('reconcile_stock', stdout=out)

        output = out.getvalue()
        assert 'X1 @ WH-MAIN: balance 12' in output
        assert '1 mismatch(es) found' in output
        assert check_ledger() != []

    def test_fix(self, drifted, main):
        out = StringIO()
        call_command('reconcile_stock', '--fix', stdout=out)

        assert '1 balance(s) repaired' in out.getvalue()
        assert stock.balance(drifted, main) == Decimal('10')

    def test_clean_ledger(self, stocked):
        out = StringIO()
        call_command('reconcile_stock', '--product', 'X1', '--warehouse', 'WH-MAIN', stdout=out)

        assert 'Ledger and balances agree' in out.getvalue()

    def test_unknown_product(self, db):
        with pytest.raises(CommandError):
            call_command('reconcile_stock', '--product', 'NOPE')

    def test_unknown_warehouse(self, db):
        with pytest.raises(CommandError):
            call_command('reconcile_stock', '--warehouse', 'NOPE')
