"""
Create the default warehouses and product categories.
"""

from django.db import migrations


WAREHOUSES = [
    {'code': 'WH-MAIN', 'name': 'Main Warehouse', 'address': '123 Main Street, City'},
    {'code': 'WH-SEC', 'name': 'Secondary Warehouse', 'address': '456 Second Avenue, City'},
]

CATEGORIES = [
    {'name': 'Raw Materials', 'description': 'Basic materials used in production'},
    {'name': 'Finished Goods', 'description': 'Completed products ready for sale'},
    {'name': 'Components', 'description': 'Parts and components'},
    {'name': 'Supplies', 'description': 'General supplies and consumables'},
]


def create_reference_data(apps, schema_editor):
    Warehouse = apps.get_model('stockroom', 'Warehouse')
    ProductCategory = apps.get_model('stockroom', 'ProductCategory')

    for data in WAREHOUSES:
        Warehouse.objects.get_or_create(code=data['code'], defaults=data)

    for data in CATEGORIES:
        ProductCategory.objects.get_or_create(name=data['name'], defaults=data)


def remove_reference_data(apps, schema_editor):
    """Remove reference data (for reverse migration)."""
    Warehouse = apps.get_model('stockroom', 'Warehouse')
    ProductCategory = apps.get_model('stockroom', 'ProductCategory')

    Warehouse.objects.filter(code__in=[w['code'] for w in WAREHOUSES]).delete()
    ProductCategory.objects.filter(name__in=[c['name'] for c in CATEGORIES]).delete()


class Migration(migrations.Migration):
    """Seed warehouses and categories."""

    dependencies = [
        ('stockroom', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(create_reference_data, remove_reference_data),
    ]
