"""
Warehouse and Rack models: where stock can physically be placed.
"""

from functools import cached_property
from typing import NamedTuple

from django.db import models
from django.utils.translation import gettext_lazy as _


class RackLocation(NamedTuple):
    """Proximity key of a rack: racks sharing it sit next to each other."""
    warehouse_id: int
    zone: str
    aisle: str


class Warehouse(models.Model):
    """A building that holds racks. Managed outside Rackman."""

    name = models.CharField(max_length=100, verbose_name=_('Name'))
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _('Warehouse')
        verbose_name_plural = _('Warehouses')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name


class Rack(models.Model):
    """
    Fixed grid of storage coordinates.

    Coordinates are 1-based: x in 1..size_x (column), y in 1..size_y (row).
    Rackman only reads racks; occupancy is derived from StorageUnit rows.

    The marker encodes the physical location: first character is the zone,
    the remainder is the aisle ("A12" -> zone "A", aisle "12").
    """

    warehouse = models.ForeignKey(
        'rackman.Warehouse',
        on_delete=models.PROTECT,
        related_name='racks',
        verbose_name=_('Warehouse'),
    )
    marker = models.CharField(max_length=32, blank=True, default='', verbose_name=_('Marker'))

    size_x = models.PositiveIntegerField(verbose_name=_('Columns'))
    size_y = models.PositiveIntegerField(verbose_name=_('Rows'))

    max_weight = models.FloatField(verbose_name=_('Max weight (kg)'))
    min_temp = models.FloatField(verbose_name=_('Min temperature'))
    max_temp = models.FloatField(verbose_name=_('Max temperature'))

    max_size_x = models.FloatField(verbose_name=_('Max item width'))
    max_size_y = models.FloatField(verbose_name=_('Max item height'))
    max_size_z = models.FloatField(verbose_name=_('Max item depth'))

    accepts_dangerous = models.BooleanField(default=False, verbose_name=_('Accepts dangerous items'))

    class Meta:
        verbose_name = _('Rack')
        verbose_name_plural = _('Racks')
        ordering = ['warehouse', 'marker']

    @property
    def area(self) -> int:
        return self.size_x * self.size_y

    @cached_property
    def location(self) -> RackLocation:
        """Zone/aisle key, computed once per loaded instance."""
        marker = self.marker or ''
        zone = marker[0] if marker else 'Z'
        aisle = marker[1:]
        return RackLocation(self.warehouse_id or 0, zone, aisle)

    def contains(self, x: int, y: int) -> bool:
        """Is (x, y) inside the grid?"""
        return 1 <= x <= self.size_x and 1 <= y <= self.size_y

    def __str__(self) -> str:
        return f"{self.marker or '?'} ({self.size_x}x{self.size_y})"
