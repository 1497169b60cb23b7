"""
Reservation model: time-bounded soft lock on one rack coordinate.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class ReservationQuerySet(models.QuerySet):

    def active(self, now=None):
        """
        Reservations still holding their coordinate.

        Expired rows are never swept eagerly; every read goes through
        this filter, so a lapsed reservation is simply invisible.
        """
        now = now or timezone.now()
        return self.filter(expires_at__gt=now)

    def expired(self, now=None):
        now = now or timezone.now()
        return self.filter(expires_at__lte=now)

    def owned_by(self, user):
        return self.filter(owner=user)


class Reservation(models.Model):
    """
    Soft lock created at plan time when the caller asks for `reserve=True`.

    LIFECYCLE:

        plan(reserve=True) ──► ACTIVE ──► confirm() by owner ──► deleted
                                  │
                                  └──► expires_at passes ──► invisible
                                       (purged later, if ever)

    Not tied 1:1 to a StorageUnit: confirm may place units on positions
    that were never reserved.
    """

    rack = models.ForeignKey(
        'rackman.Rack',
        on_delete=models.CASCADE,
        related_name='reservations',
        verbose_name=_('Rack'),
    )
    position_x = models.PositiveIntegerField(verbose_name=_('Column'))
    position_y = models.PositiveIntegerField(verbose_name=_('Row'))
    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='+',
        verbose_name=_('Reserved by'),
    )
    expires_at = models.DateTimeField(db_index=True, verbose_name=_('Expires at'))
    created_at = models.DateTimeField(default=timezone.now)

    objects = ReservationQuerySet.as_manager()

    class Meta:
        verbose_name = _('Reservation')
        verbose_name_plural = _('Reservations')
        constraints = [
            models.UniqueConstraint(
                fields=['rack', 'position_x', 'position_y'],
                name='unique_reservation_position',
            ),
        ]
        indexes = [
            models.Index(fields=['rack', 'expires_at'], name='rackman_resv_rack_exp_idx'),
        ]

    def is_active_at(self, now) -> bool:
        return self.expires_at > now

    @property
    def is_active(self) -> bool:
        return self.is_active_at(timezone.now())

    def belongs_to(self, user) -> bool:
        return user is not None and self.owner_id == user.pk

    def __str__(self) -> str:
        return f"rack {self.rack_id} ({self.position_x},{self.position_y}) until {self.expires_at:%H:%M:%S}"
