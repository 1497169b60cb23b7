"""
Inbound/Outbound operations: immutable audit trail of placements and picks.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class AuditRecord(models.Model):
    """
    Immutable snapshot of one committed mutation.

    Rules:
    - NEVER update() or delete()
    - Item name/code, rack marker and unit code are copied at write time,
      so the record stays readable after the unit is gone

    Both subclasses are written exactly once, inside the transaction that
    performs the mutation they describe.
    """

    item = models.ForeignKey(
        'rackman.Item',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Item'),
    )
    rack = models.ForeignKey(
        'rackman.Rack',
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Rack'),
    )
    position_x = models.PositiveIntegerField(verbose_name=_('Column'))
    position_y = models.PositiveIntegerField(verbose_name=_('Row'))
    quantity = models.PositiveIntegerField(default=1, verbose_name=_('Quantity'))

    unit_code = models.CharField(max_length=40, verbose_name=_('Placement code'))
    item_name = models.CharField(max_length=200, verbose_name=_('Item name'))
    item_code = models.CharField(max_length=14, blank=True, default='', verbose_name=_('Item code'))
    rack_marker = models.CharField(max_length=32, blank=True, default='', verbose_name=_('Rack marker'))

    operation_timestamp = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Date/Time'))

    class Meta:
        abstract = True
        ordering = ['operation_timestamp']

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValueError("Audit records are immutable.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError("Audit records are immutable.")

    def fill_snapshot(self, unit) -> None:
        """Copy denormalized fields from a storage unit (item/rack loaded)."""
        self.item = unit.item
        self.rack = unit.rack
        self.position_x = unit.position_x
        self.position_y = unit.position_y
        self.unit_code = unit.code
        self.item_name = unit.item.name
        self.item_code = unit.item.code or ''
        self.rack_marker = unit.rack.marker


class InboundOperation(AuditRecord):
    """One unit received onto a rack."""

    unit = models.ForeignKey(
        'rackman.StorageUnit',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='inbound_operations',
        verbose_name=_('Storage unit'),
    )
    received_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Received by'),
    )

    class Meta(AuditRecord.Meta):
        verbose_name = _('Inbound operation')
        verbose_name_plural = _('Inbound operations')
        indexes = [
            models.Index(fields=['item', 'operation_timestamp'], name='rackman_in_item_ts_idx'),
        ]

    @classmethod
    def for_unit(cls, unit, user, timestamp):
        operation = cls(unit=unit, received_by=user, operation_timestamp=timestamp)
        operation.fill_snapshot(unit)
        return operation

    def __str__(self) -> str:
        return f"+1 {self.item_name} -> {self.rack_marker} ({self.position_x},{self.position_y})"


class OutboundOperation(AuditRecord):
    """One unit issued from a rack."""

    issued_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='+',
        verbose_name=_('Issued by'),
    )
    batch_arrival_date = models.DateTimeField(verbose_name=_('Placed at'))
    fifo_compliant = models.BooleanField(default=True, verbose_name=_('FIFO compliant'))

    class Meta(AuditRecord.Meta):
        verbose_name = _('Outbound operation')
        verbose_name_plural = _('Outbound operations')
        indexes = [
            models.Index(fields=['item', 'operation_timestamp'], name='rackman_out_item_ts_idx'),
        ]

    @classmethod
    def for_unit(cls, unit, user, timestamp, fifo_compliant: bool):
        operation = cls(
            issued_by=user,
            operation_timestamp=timestamp,
            batch_arrival_date=unit.created_at,
            fifo_compliant=fifo_compliant,
        )
        operation.fill_snapshot(unit)
        return operation

    def __str__(self) -> str:
        flag = '' if self.fifo_compliant else ' [non-FIFO]'
        return f"-1 {self.item_name} <- {self.rack_marker} ({self.position_x},{self.position_y}){flag}"
