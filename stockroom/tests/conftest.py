"""
Pytest fixtures for Stockroom tests.
"""

from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from stockroom import stock
from stockroom.models import Product, ProductCategory, Warehouse


User = get_user_model()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='testuser',
        password='testpass123'
    )


@pytest.fixture
def category(db):
    """Category seeded by migration 0002."""
    category, _ = ProductCategory.objects.get_or_create(name='Finished Goods')
    return category


@pytest.fixture
def product(db, category):
    """Product X1 from the reference scenario."""
    return Product.objects.create(
        name='Widget',
        sku='X1',
        category=category,
        unit_of_measure='Units',
        reorder_level=5,
    )


@pytest.fixture
def other_product(db, category):
    return Product.objects.create(
        name='Gadget',
        sku='X2',
        category=category,
        reorder_level=0,
    )


@pytest.fixture
def main(db):
    """Get or create the main warehouse."""
    warehouse, _ = Warehouse.objects.get_or_create(
        code='WH-MAIN',
        defaults={'name': 'Main Warehouse'}
    )
    return warehouse


@pytest.fixture
def secondary(db):
    """Get or create the secondary warehouse."""
    warehouse, _ = Warehouse.objects.get_or_create(
        code='WH-SEC',
        defaults={'name': 'Secondary Warehouse'}
    )
    return warehouse


@pytest.fixture
def stocked(product, main, user):
    """X1 with 10 units at WH-MAIN (through a validated receipt)."""
    receipt = stock.create_receipt(main, 'ACME', [(product, Decimal('10'))], user=user)
    stock.validate(receipt, user=user)
    return product
