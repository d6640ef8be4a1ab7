"""
Stockroom Admin.

- Catalog (category, product, warehouse): editable
- StockLevel: read-only (quantity, ledger total)
- StockMovement: read-only audit trail
- Documents: editable while pending, with "validate" and "cancel" actions
"""

import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from stockroom.exceptions import StockError
from stockroom.models import (
    Delivery,
    DeliveryLine,
    InternalTransfer,
    Product,
    ProductCategory,
    Receipt,
    ReceiptLine,
    StockAdjustment,
    StockLevel,
    StockMovement,
    Warehouse,
)

logger = logging.getLogger(__name__)


# =========================================================================
# CATALOG
# =========================================================================

@admin.register(ProductCategory)
class ProductCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'description']
    search_fields = ['name']


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Product admin — shows total on hand and low stock flag."""

    list_display = ['sku', 'name', 'category', 'unit_of_measure', 'reorder_level',
                    'on_hand_display', 'is_low_display']
    list_filter = ['category']
    search_fields = ['sku', 'name']
    readonly_fields = ['created_at', 'updated_at']

    def get_queryset(self, request):
        return super().get_queryset(request).with_on_hand()

    @admin.display(description=_('On hand'), ordering='on_hand')
    def on_hand_display(self, obj):
        return obj.on_hand

    @admin.display(description=_('Low stock?'), boolean=True)
    def is_low_display(self, obj):
        return obj.on_hand <= obj.reorder_level


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['code', 'name', 'address']
    search_fields = ['code', 'name']
    readonly_fields = ['created_at', 'updated_at']


# =========================================================================
# STOCK LEVEL / MOVEMENT (read-only)
# =========================================================================

class ReadOnlyAdminMixin:
    """Stock only changes via the Stock service."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(StockLevel)
class StockLevelAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['product', 'warehouse', 'quantity', 'updated_at']
    list_filter = ['warehouse']
    search_fields = ['product__sku', 'product__name']
    readonly_fields = ['product', 'warehouse', 'quantity', 'ledger_total_display', 'updated_at']

    @admin.display(description=_('Ledger total'))
    def ledger_total_display(self, obj):
        return obj.ledger_total()


@admin.register(StockMovement)
class StockMovementAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Immutable audit trail."""

    list_display = ['timestamp', 'product', 'warehouse', 'kind', 'quantity', 'reason', 'user']
    list_filter = ['kind', 'warehouse', 'timestamp']
    search_fields = ['reason', 'product__sku']
    readonly_fields = ['product', 'warehouse', 'kind', 'quantity', 'reference_type',
                       'reference_id', 'reason', 'metadata', 'timestamp', 'user']
    date_hierarchy = 'timestamp'


# =========================================================================
# DOCUMENTS
# =========================================================================

class DocumentAdmin(admin.ModelAdmin):
    """Base admin for stock documents: validate/cancel actions, frozen once done."""

    list_filter = ['status', 'created_at']
    search_fields = ['number']
    actions = ['validate_documents', 'cancel_documents']
    document_readonly_fields = ['number', 'status', 'created_by', 'created_at',
                                'validated_at', 'validated_by']

    def get_readonly_fields(self, request, obj=None):
        if obj is not None and not obj.is_pending:
            return [f.name for f in self.model._meta.fields]
        return self.document_readonly_fields

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_done:
            return False
        return super().has_delete_permission(request, obj)

    def save_model(self, request, obj, form, change):
        if not change:
            obj.created_by = request.user
        super().save_model(request, obj, form, change)

    @admin.action(description=_('Validate selected documents'))
    def validate_documents(self, request, queryset):
        from stockroom import stock

        count = 0
        for document in queryset:
            try:
                stock.validate(document, user=request.user)
                count += 1
            except StockError as exc:
                self.message_user(request, f"{document.number}: {exc.message}", messages.ERROR)

        self.message_user(request, _('{count} document(s) validated.').format(count=count))

    @admin.action(description=_('Cancel selected documents'))
    def cancel_documents(self, request, queryset):
        from stockroom import stock

        count = 0
        for document in queryset:
            try:
                stock.cancel(document, reason=f'Canceled via admin by {request.user}')
                count += 1
            except StockError as exc:
                logger.warning("cancel_documents: failed to cancel %s: %s", document.number, exc)

        self.message_user(request, _('{count} document(s) canceled.').format(count=count))


class DocumentLineInline(admin.TabularInline):
    """Lines are frozen once the document leaves the pending states."""

    extra = 1
    autocomplete_fields = ['product']

    def has_add_permission(self, request, obj=None):
        return (obj is None or obj.is_pending) and super().has_add_permission(request, obj)

    def has_change_permission(self, request, obj=None):
        return (obj is None or obj.is_pending) and super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        return (obj is None or obj.is_pending) and super().has_delete_permission(request, obj)


class ReceiptLineInline(DocumentLineInline):
    model = ReceiptLine


class DeliveryLineInline(DocumentLineInline):
    model = DeliveryLine


@admin.register(Receipt)
class ReceiptAdmin(DocumentAdmin):
    list_display = ['number', 'supplier_name', 'warehouse', 'status', 'created_at', 'validated_at']
    list_filter = ['status', 'warehouse', 'created_at']
    search_fields = ['number', 'supplier_name']
    inlines = [ReceiptLineInline]


@admin.register(Delivery)
class DeliveryAdmin(DocumentAdmin):
    list_display = ['number', 'customer_name', 'warehouse', 'status', 'created_at', 'validated_at']
    list_filter = ['status', 'warehouse', 'created_at']
    search_fields = ['number', 'customer_name']
    inlines = [DeliveryLineInline]


@admin.register(InternalTransfer)
class InternalTransferAdmin(DocumentAdmin):
    list_display = ['number', 'product', 'quantity', 'source_warehouse',
                    'destination_warehouse', 'status', 'validated_at']
    list_filter = ['status', 'source_warehouse', 'destination_warehouse']
    autocomplete_fields = ['product']


@admin.register(StockAdjustment)
class StockAdjustmentAdmin(DocumentAdmin):
    """Adjustments capture system_quantity at creation; no cancel action."""

    list_display = ['number', 'product', 'warehouse', 'system_quantity', 'counted_quantity',
                    'difference', 'status', 'validated_at']
    list_filter = ['status', 'warehouse']
    autocomplete_fields = ['product']
    actions = ['validate_documents']
    document_readonly_fields = DocumentAdmin.document_readonly_fields + [
        'system_quantity', 'difference',
    ]

    def save_model(self, request, obj, form, change):
        if not change:
            from stockroom import stock
            obj.system_quantity = stock.balance(obj.product, obj.warehouse)
        super().save_model(request, obj, form, change)
