"""
Catalog models — what is stocked and where.
"""

from decimal import Decimal

from django.db import models
from django.db.models import F, Sum
from django.db.models.functions import Coalesce
from django.utils.translation import gettext_lazy as _


class ProductCategory(models.Model):
    """Grouping of products (Raw Materials, Finished Goods, ...)."""

    name = models.CharField(max_length=100, unique=True, verbose_name=_('Name'))
    description = models.TextField(blank=True, default='', verbose_name=_('Description'))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Product category')
        verbose_name_plural = _('Product categories')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class ProductQuerySet(models.QuerySet):
    """Custom QuerySet for Product with stock aggregates."""

    def with_on_hand(self):
        """Annotate ``on_hand``: total balance across all warehouses."""
        return self.annotate(
            on_hand=Coalesce(
                Sum('stock_levels__quantity'),
                Decimal('0'),
                output_field=models.DecimalField(max_digits=12, decimal_places=3),
            )
        )

    def low_stock(self):
        """Products whose total on hand is at or below the reorder level."""
        return self.with_on_hand().filter(on_hand__lte=F('reorder_level'))


class Product(models.Model):
    """
    Stockable product.

    SKU is the business identifier. Descriptive fields stay editable
    after the product has movements; stock itself lives in StockLevel.
    """

    name = models.CharField(max_length=200, verbose_name=_('Name'))
    sku = models.CharField(
        max_length=64,
        unique=True,
        verbose_name=_('SKU'),
    )
    category = models.ForeignKey(
        ProductCategory,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='products',
        verbose_name=_('Category'),
    )
    unit_of_measure = models.CharField(
        max_length=30,
        default='Units',
        verbose_name=_('Unit of measure'),
    )
    reorder_level = models.PositiveIntegerField(
        default=10,
        verbose_name=_('Reorder level'),
        help_text=_('Product is low on stock when total on hand is at or below this value'),
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProductQuerySet.as_manager()

    class Meta:
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        ordering = ['name']

    def __str__(self) -> str:
        return f"{self.name} ({self.sku})"


class Warehouse(models.Model):
    """
    Where stock exists.

    Static reference data, created during setup (see migration 0002).
    """

    name = models.CharField(max_length=100, verbose_name=_('Name'))
    code = models.CharField(
        max_length=20,
        unique=True,
        verbose_name=_('Code'),
        help_text=_('Unique identifier (e.g. WH-MAIN)'),
    )
    address = models.TextField(blank=True, default='', verbose_name=_('Address'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _('Warehouse')
        verbose_name_plural = _('Warehouses')
        ordering = ['code']

    def __str__(self) -> str:
        return self.code
