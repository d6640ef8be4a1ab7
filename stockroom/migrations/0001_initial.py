"""
Initial migration for Stockroom models.
"""

from decimal import Decimal
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


def document_fields():
    """Columns shared by every document header."""
    return [
        ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
        ('number', models.CharField(editable=False, max_length=30, unique=True, verbose_name='Number')),
        ('notes', models.TextField(blank=True, default='', verbose_name='Notes')),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('validated_at', models.DateTimeField(blank=True, null=True, verbose_name='Validated at')),
        ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Created by')),
        ('validated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Validated by')),
    ]


DOCUMENT_STATUS_CHOICES = [
    ('draft', 'Draft'),
    ('waiting', 'Waiting'),
    ('ready', 'Ready'),
    ('done', 'Done'),
    ('canceled', 'Canceled'),
]


class Migration(migrations.Migration):
    """Create catalog, stock level, ledger and document models."""

    initial = True

    dependencies = [
        ('contenttypes', '0002_remove_content_type_name'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='ProductCategory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, unique=True, verbose_name='Name')),
                ('description', models.TextField(blank=True, default='', verbose_name='Description')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Product category',
                'verbose_name_plural': 'Product categories',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Warehouse',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('code', models.CharField(help_text='Unique identifier (e.g. WH-MAIN)', max_length=20, unique=True, verbose_name='Code')),
                ('address', models.TextField(blank=True, default='', verbose_name='Address')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Warehouse',
                'verbose_name_plural': 'Warehouses',
                'ordering': ['code'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=200, verbose_name='Name')),
                ('sku', models.CharField(max_length=64, unique=True, verbose_name='SKU')),
                ('unit_of_measure', models.CharField(default='Units', max_length=30, verbose_name='Unit of measure')),
                ('reorder_level', models.PositiveIntegerField(default=10, help_text='Product is low on stock when total on hand is at or below this value', verbose_name='Reorder level')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('category', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name='products', to='stockroom.productcategory', verbose_name='Category')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='DocumentSequence',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('prefix', models.CharField(max_length=10, unique=True, verbose_name='Prefix')),
                ('last_value', models.PositiveIntegerField(default=0, verbose_name='Last value')),
            ],
            options={
                'verbose_name': 'Document sequence',
                'verbose_name_plural': 'Document sequences',
                'ordering': ['prefix'],
            },
        ),
        migrations.CreateModel(
            name='StockLevel',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, default=Decimal('0'), max_digits=12, verbose_name='Quantity')),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_levels', to='stockroom.product', verbose_name='Product')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='stock_levels', to='stockroom.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Stock level',
                'verbose_name_plural': 'Stock levels',
                'ordering': ['product', 'warehouse'],
                'constraints': [
                    models.UniqueConstraint(fields=('product', 'warehouse'), name='unique_stock_level_per_product_warehouse'),
                    models.CheckConstraint(condition=models.Q(('quantity__gte', 0)), name='stock_level_quantity_non_negative'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, help_text='Positive = in, Negative = out', max_digits=12, verbose_name='Quantity')),
                ('kind', models.CharField(choices=[('receipt', 'Receipt'), ('delivery', 'Delivery'), ('transfer_in', 'Transfer in'), ('transfer_out', 'Transfer out'), ('adjustment', 'Adjustment')], max_length=20, verbose_name='Kind')),
                ('reference_id', models.PositiveIntegerField(blank=True, null=True, verbose_name='Reference ID')),
                ('reason', models.CharField(help_text='Required. E.g. "Receipt RCP-00001"', max_length=255, verbose_name='Reason')),
                ('metadata', models.JSONField(blank=True, default=dict, verbose_name='Metadata')),
                ('timestamp', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Timestamp')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='stockroom.product', verbose_name='Product')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='movements', to='stockroom.warehouse', verbose_name='Warehouse')),
                ('reference_type', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to='contenttypes.contenttype', verbose_name='Reference type')),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL, verbose_name='User')),
            ],
            options={
                'verbose_name': 'Stock movement',
                'verbose_name_plural': 'Stock movements',
                'ordering': ['timestamp', 'pk'],
                'indexes': [
                    models.Index(fields=['product', 'warehouse', 'timestamp'], name='stock_move_pair_ts_idx'),
                    models.Index(fields=['reference_type', 'reference_id'], name='stock_move_reference_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Receipt',
            fields=document_fields() + [
                ('status', models.CharField(choices=DOCUMENT_STATUS_CHOICES, db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('supplier_name', models.CharField(max_length=200, verbose_name='Supplier')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='receipts', to='stockroom.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Receipt',
                'verbose_name_plural': 'Receipts',
                'ordering': ['-created_at', '-pk'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='ReceiptLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='stockroom.product', verbose_name='Product')),
                ('receipt', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='stockroom.receipt', verbose_name='Receipt')),
            ],
            options={
                'verbose_name': 'Receipt line',
                'verbose_name_plural': 'Receipt lines',
                'ordering': ['pk'],
            },
        ),
        migrations.CreateModel(
            name='Delivery',
            fields=document_fields() + [
                ('status', models.CharField(choices=DOCUMENT_STATUS_CHOICES, db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('customer_name', models.CharField(max_length=200, verbose_name='Customer')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='deliveries', to='stockroom.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Delivery',
                'verbose_name_plural': 'Deliveries',
                'ordering': ['-created_at', '-pk'],
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='DeliveryLine',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='stockroom.product', verbose_name='Product')),
                ('delivery', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='lines', to='stockroom.delivery', verbose_name='Delivery')),
            ],
            options={
                'verbose_name': 'Delivery line',
                'verbose_name_plural': 'Delivery lines',
                'ordering': ['pk'],
            },
        ),
        migrations.CreateModel(
            name='InternalTransfer',
            fields=document_fields() + [
                ('status', models.CharField(choices=DOCUMENT_STATUS_CHOICES, db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Quantity')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='stockroom.product', verbose_name='Product')),
                ('source_warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='outgoing_transfers', to='stockroom.warehouse', verbose_name='Source warehouse')),
                ('destination_warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='incoming_transfers', to='stockroom.warehouse', verbose_name='Destination warehouse')),
            ],
            options={
                'verbose_name': 'Internal transfer',
                'verbose_name_plural': 'Internal transfers',
                'ordering': ['-created_at', '-pk'],
                'abstract': False,
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('source_warehouse', models.F('destination_warehouse')), _negated=True), name='transfer_warehouses_differ'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StockAdjustment',
            fields=document_fields() + [
                ('status', models.CharField(choices=[('draft', 'Draft'), ('done', 'Done')], db_index=True, default='draft', max_length=20, verbose_name='Status')),
                ('counted_quantity', models.DecimalField(decimal_places=3, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0'))], verbose_name='Counted quantity')),
                ('system_quantity', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='System quantity')),
                ('difference', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Difference')),
                ('reason', models.CharField(blank=True, default='', max_length=255, verbose_name='Reason')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='+', to='stockroom.product', verbose_name='Product')),
                ('warehouse', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='adjustments', to='stockroom.warehouse', verbose_name='Warehouse')),
            ],
            options={
                'verbose_name': 'Stock adjustment',
                'verbose_name_plural': 'Stock adjustments',
                'ordering': ['-created_at', '-pk'],
                'abstract': False,
            },
        ),
    ]
