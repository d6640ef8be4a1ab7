"""
Management command to reconcile stock balances against the ledger.

Usage:
    python manage.py reconcile_stock
    python manage.py reconcile_stock --fix
    python manage.py reconcile_stock --product X1 --warehouse WH-MAIN
"""

from django.core.management.base import BaseCommand, CommandError

from stockroom.models import Product, Warehouse
from stockroom.services.reconciliation import check_ledger, repair_ledger


class Command(BaseCommand):
    """Reconcile stock levels command."""

    help = 'Compares stock balances with the movement ledger'

    def add_arguments(self, parser):
        parser.add_argument(
            '--fix',
            action='store_true',
            help='Reset mismatched balances to the ledger total'
        )
        parser.add_argument('--product', metavar='SKU', help='Only this product')
        parser.add_argument('--warehouse', metavar='CODE', help='Only this warehouse')

    def handle(self, *args, **options):
        product = warehouse = None
        if options['product']:
            try:
                product = Product.objects.get(sku=options['product'])
            except Product.DoesNotExist:
                raise CommandError(f"Unknown product SKU: {options['product']}")
        if options['warehouse']:
            try:
                warehouse = Warehouse.objects.get(code=options['warehouse'])
            except Warehouse.DoesNotExist:
                raise CommandError(f"Unknown warehouse code: {options['warehouse']}")

        if options['fix']:
            mismatches = repair_ledger(product, warehouse)
        else:
            mismatches = check_ledger(product, warehouse)

        for mismatch in mismatches:
            level = mismatch.stock_level
            self.stdout.write(
                f'{level.product.sku} @ {level.warehouse.code}: '
                f'balance {mismatch.balance}, ledger {mismatch.ledger_total} '
                f'(diff {mismatch.difference})'
            )

        if not mismatches:
            self.stdout.write(self.style.SUCCESS('Ledger and balances agree'))
        elif options['fix']:
            self.stdout.write(self.style.SUCCESS(f'{len(mismatches)} balance(s) repaired'))
        else:
            self.stdout.write(self.style.WARNING(f'{len(mismatches)} mismatch(es) found'))
