"""
Rackman Admin.

Warehouses, racks and items are editable here for convenience. Storage
units, reservations and the audit trail are read-only: they only change
through the Storage service.
"""

import logging

from django.contrib import admin
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from rackman.models import (
    InboundOperation,
    Item,
    OutboundOperation,
    Rack,
    Reservation,
    StorageUnit,
    Warehouse,
)

logger = logging.getLogger(__name__)


class ReadOnlyAdminMixin:
    """No add/change/delete from the admin."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# MASTER DATA (editable)
# =========================================================================

@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(Rack)
class RackAdmin(admin.ModelAdmin):
    list_display = ['marker', 'warehouse', 'size_x', 'size_y', 'max_weight',
                    'min_temp', 'max_temp', 'accepts_dangerous']
    list_filter = ['warehouse', 'accepts_dangerous']
    search_fields = ['marker']


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'weight', 'dangerous', 'expire_after_days']
    list_filter = ['dangerous']
    search_fields = ['name', 'code']


# =========================================================================
# STORAGE UNIT ADMIN (read-only)
# =========================================================================

@admin.register(StorageUnit)
class StorageUnitAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    """StorageUnit admin: read-only. Units only change via the Storage service."""

    list_display = ['code', 'item', 'rack', 'position_x', 'position_y',
                    'created_at', 'expires_at', 'is_expired_display']
    list_filter = ['rack__warehouse', 'rack']
    search_fields = ['code', 'item__name', 'item__code']
    list_select_related = ['item', 'rack']
    date_hierarchy = 'created_at'

    @admin.display(description=_('Expired?'), boolean=True)
    def is_expired_display(self, obj):
        return obj.is_expired


# =========================================================================
# RESERVATION ADMIN (read-only with purge action)
# =========================================================================

@admin.register(Reservation)
class ReservationAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['rack', 'position_x', 'position_y', 'owner', 'expires_at', 'is_active_display']
    list_filter = ['rack']
    list_select_related = ['rack', 'owner']
    actions = ['purge_expired']

    @admin.display(description=_('Active?'), boolean=True)
    def is_active_display(self, obj):
        return obj.is_active

    @admin.action(description=_('Purge expired reservations'))
    def purge_expired(self, request, queryset):
        from rackman import storage

        count = storage.purge_expired_reservations(timezone.now())
        logger.info("Admin purge of expired reservations: %s deleted", count)
        self.message_user(request, _('{count} expired reservation(s) purged.').format(count=count))


# =========================================================================
# AUDIT TRAIL (read-only)
# =========================================================================

@admin.register(InboundOperation)
class InboundOperationAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['operation_timestamp', 'item_name', 'rack_marker', 'position_x',
                    'position_y', 'unit_code', 'received_by']
    search_fields = ['unit_code', 'item_name', 'item_code']
    date_hierarchy = 'operation_timestamp'


@admin.register(OutboundOperation)
class OutboundOperationAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ['operation_timestamp', 'item_name', 'rack_marker', 'position_x',
                    'position_y', 'unit_code', 'batch_arrival_date', 'fifo_compliant', 'issued_by']
    list_filter = ['fifo_compliant']
    search_fields = ['unit_code', 'item_name', 'item_code']
    date_hierarchy = 'operation_timestamp'
