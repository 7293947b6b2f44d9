"""
Textileman Admin.

Provides views for back-office debugging:
- StockLot: variants inline, "recompute status" action
- Order: items inline, read-only (stock moves only through OrderWorkflow)
- Customer, Product: editable, renames carried over to stored copies
- ReturnRequest: editable, approve/reject actions
- Adjustment / NotificationMessage: read-only audit trails
- NotificationSettings / NotificationRecipient: editable
"""

import logging

from django.contrib import admin, messages
from django.utils.translation import gettext_lazy as _

from textileman.exceptions import BusinessRuleViolation
from textileman.models import (
    Adjustment,
    Customer,
    NotificationMessage,
    NotificationRecipient,
    NotificationSettings,
    Order,
    OrderItem,
    Product,
    ReturnRequest,
    StockLot,
    Variant,
)
from textileman.services import ReturnWorkflow
from textileman.services.catalog import propagate_product_rename
from textileman.services.credit import credit_summary
from textileman.services.customers import propagate_customer_rename

logger = logging.getLogger(__name__)


class ReadOnlyAdminMixin:

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# STOCK
# =========================================================================

class VariantInline(admin.TabularInline):
    model = Variant
    extra = 0


@admin.register(StockLot)
class StockLotAdmin(admin.ModelAdmin):
    """Lot admin. Status is normally derived; the action re-derives it."""

    list_display = ['id', 'product', 'stock_type', 'status', 'total_display',
                    'batch_number', 'quality_grade', 'updated_at']
    list_filter = ['stock_type', 'status', 'quality_grade']
    search_fields = ['product', 'batch_number']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [VariantInline]
    actions = ['recompute_status']

    @admin.display(description=_('Total'))
    def total_display(self, obj):
        return obj.total_quantity

    def save_related(self, request, form, formsets, change):
        super().save_related(request, form, formsets, change)
        # an explicit status wins; otherwise edited quantities re-derive it
        lot = form.instance
        if 'status' not in form.changed_data and any(f.has_changed() for f in formsets):
            before = lot.status
            if lot.refresh_status() != before:
                lot.save(update_fields=['status', 'updated_at'])
                logger.info("admin.lot.status", extra={"lot_id": lot.pk, "from": before, "to": lot.status})

    @admin.action(description=_('Recompute status from quantities'))
    def recompute_status(self, request, queryset):
        changed = 0
        for lot in queryset:
            before = lot.status
            if lot.refresh_status() != before:
                lot.save(update_fields=['status', 'updated_at'])
                changed += 1
        logger.info("admin.recompute_status", extra={"lots": queryset.count(), "changed": changed})
        self.message_user(request, _('{count} lot(s) changed status.').format(count=changed))


@admin.register(Adjustment)
class AdjustmentAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """Adjustment admin. Read-only audit trail."""

    list_display = ['created_at', 'product', 'color', 'prev_quantity', 'new_quantity', 'reason']
    list_filter = ['stock_type', 'created_at']
    search_fields = ['product', 'reason']
    date_hierarchy = 'created_at'


# =========================================================================
# ORDERS
# =========================================================================

class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['product', 'color', 'quantity', 'unit', 'price_per_meter', 'stock']

    def has_add_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Order admin. Status changes go through the API so stock follows."""

    list_display = ['id', 'customer', 'status', 'order_date', 'delivery_date', 'total_display']
    list_filter = ['status', 'order_date']
    search_fields = ['customer']
    readonly_fields = ['customer', 'status', 'created_at', 'updated_at']
    inlines = [OrderItemInline]

    @admin.display(description=_('Total'))
    def total_display(self, obj):
        return obj.total

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# CUSTOMERS / CATALOG / RETURNS
# =========================================================================

@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    """Customer admin. A rename is carried over to orders and returns."""

    list_display = ['customer_name', 'customer_type', 'city', 'credit_limit', 'remaining_display']
    list_filter = ['customer_type', 'city']
    search_fields = ['customer_name', 'email', 'phone']
    readonly_fields = ['created_at', 'updated_at']

    @admin.display(description=_('Remaining credit'))
    def remaining_display(self, obj):
        return credit_summary(obj)['remaining_credit']

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        if change and 'customer_name' in form.changed_data:
            propagate_customer_rename(form.initial['customer_name'], obj.customer_name)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Product admin. A rename is carried over to lots, order items and adjustments."""

    list_display = ['name', 'sku', 'category', 'unit']
    list_filter = ['category']
    search_fields = ['name', 'sku']
    readonly_fields = ['created_at', 'updated_at']

    def save_model(self, request, obj, form, change):
        super().save_model(request, obj, form, change)
        if change and 'name' in form.changed_data:
            propagate_product_rename(form.initial['name'], obj.name)


@admin.register(ReturnRequest)
class ReturnRequestAdmin(admin.ModelAdmin):
    """Return admin. Decisions go through the approve/reject actions."""

    list_display = ['return_id', 'customer', 'product', 'color', 'quantity', 'is_approved', 'is_rejected']
    list_filter = ['is_approved', 'is_rejected']
    search_fields = ['return_id', 'customer', 'product']
    readonly_fields = ['return_id', 'customer', 'is_approved', 'is_rejected', 'created_at', 'updated_at']
    actions = ['approve_returns', 'reject_returns']

    def _resolve(self, request, queryset, resolve):
        done = 0
        for ret in queryset:
            try:
                resolve(ret)
            except BusinessRuleViolation as exc:
                self.message_user(request, f"{ret.return_id}: {exc.message}", level=messages.WARNING)
            else:
                done += 1
        self.message_user(request, _('{count} return(s) updated.').format(count=done))

    @admin.action(description=_('Approve selected returns'))
    def approve_returns(self, request, queryset):
        self._resolve(request, queryset, ReturnWorkflow.approve)

    @admin.action(description=_('Reject selected returns'))
    def reject_returns(self, request, queryset):
        self._resolve(request, queryset, ReturnWorkflow.reject)


# =========================================================================
# NOTIFICATIONS
# =========================================================================

@admin.register(NotificationSettings)
class NotificationSettingsAdmin(admin.ModelAdmin):
    list_display = ['__str__', 'updated_at']

    def has_add_permission(self, request):
        return not NotificationSettings.objects.exists()


@admin.register(NotificationRecipient)
class NotificationRecipientAdmin(admin.ModelAdmin):
    list_display = ['name', 'number', 'role', 'is_active']
    list_filter = ['role', 'is_active']
    search_fields = ['name', 'number']


@admin.register(NotificationMessage)
class NotificationMessageAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['created_at', 'type', 'status', 'sent_to_count']
    list_filter = ['type', 'status']
    search_fields = ['message']
    date_hierarchy = 'created_at'
