"""
Item model: what gets stored.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class Item(models.Model):
    """
    Product definition consulted for rack compatibility and shelf life.

    Managed outside Rackman. The only field Rackman ever writes is `code`,
    assigned once when an item without a code is first placed.
    """

    name = models.CharField(max_length=200, verbose_name=_('Name'))
    code = models.CharField(
        max_length=14,
        unique=True,
        null=True,
        blank=True,
        verbose_name=_('Code'),
        help_text=_('14-digit base identifier embedded in placement codes'),
    )

    weight = models.FloatField(verbose_name=_('Weight (kg)'))
    size_x = models.FloatField(verbose_name=_('Width'))
    size_y = models.FloatField(verbose_name=_('Height'))
    size_z = models.FloatField(verbose_name=_('Depth'))
    min_temp = models.FloatField(verbose_name=_('Min temperature'))
    max_temp = models.FloatField(verbose_name=_('Max temperature'))
    dangerous = models.BooleanField(default=False, verbose_name=_('Dangerous'))

    expire_after_days = models.PositiveIntegerField(
        null=True,
        blank=True,
        verbose_name=_('Expire after (days)'),
        help_text=_('Empty = placed units never expire'),
    )

    class Meta:
        verbose_name = _('Item')
        verbose_name_plural = _('Items')
        ordering = ['name']

    def __str__(self) -> str:
        return self.name
