"""
StorageUnit model: one physical placement of an item instance.
"""

from django.conf import settings
from django.db import models
from django.db.models import Q
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class StorageUnitQuerySet(models.QuerySet):
    """Custom QuerySet for StorageUnit with freshness filters."""

    def for_item(self, item):
        return self.filter(item=item)

    def not_expired(self, now=None):
        """Units without expiry, or expiring no earlier than now."""
        now = now or timezone.now()
        return self.filter(Q(expires_at__isnull=True) | Q(expires_at__gte=now))

    def expired(self, now=None):
        """Units strictly past their expiry."""
        now = now or timezone.now()
        return self.filter(expires_at__isnull=False, expires_at__lt=now)

    def fifo(self):
        """Oldest first; id breaks ties between units created together."""
        return self.order_by('created_at', 'id')

    def older_than(self, unit, now=None):
        """Non-expired units of the same item created strictly before `unit`."""
        return self.filter(
            item_id=unit.item_id,
            created_at__lt=unit.created_at,
        ).not_expired(now).fifo()


class StorageUnit(models.Model):
    """
    One item instance sitting at (rack, position_x, position_y).

    Rules:
    - Created only by placement confirm, removed only by outbound execute
    - Position and rack are NEVER updated in place
    - (rack, position_x, position_y) is unique: the database is the final
      arbiter between concurrent confirms
    """

    item = models.ForeignKey(
        'rackman.Item',
        on_delete=models.PROTECT,
        related_name='units',
        verbose_name=_('Item'),
    )
    rack = models.ForeignKey(
        'rackman.Rack',
        on_delete=models.PROTECT,
        related_name='units',
        verbose_name=_('Rack'),
    )
    position_x = models.PositiveIntegerField(verbose_name=_('Column'))
    position_y = models.PositiveIntegerField(verbose_name=_('Row'))

    code = models.CharField(
        max_length=40,
        unique=True,
        verbose_name=_('Placement code'),
    )

    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Placed at'))
    expires_at = models.DateTimeField(null=True, blank=True, db_index=True, verbose_name=_('Expires at'))
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Placed by'),
    )

    objects = StorageUnitQuerySet.as_manager()

    class Meta:
        verbose_name = _('Storage unit')
        verbose_name_plural = _('Storage units')
        constraints = [
            models.UniqueConstraint(
                fields=['rack', 'position_x', 'position_y'],
                name='unique_storage_unit_position',
            ),
        ]
        indexes = [
            models.Index(fields=['item', 'created_at'], name='rackman_unit_item_fifo_idx'),
        ]

    def is_expired_at(self, now) -> bool:
        if self.expires_at is None:
            return False
        return now > self.expires_at

    @property
    def is_expired(self) -> bool:
        """Is this unit past its expiry?"""
        return self.is_expired_at(timezone.now())

    def __str__(self) -> str:
        return f"{self.code} @ rack {self.rack_id} ({self.position_x},{self.position_y})"
