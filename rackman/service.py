"""
Storage Service: the single public interface for rack storage.

Usage:
    from rackman import storage, RackError

    plan = storage.plan_placement(item, 4, reserve=True, user=request.user)
    storage.confirm_placement(item, plan.slots, request.user)

    picks = storage.plan_outbound(item, 2)
    storage.execute_outbound([s.code for s in picks.pick_slots], request.user)
"""

from django.utils import timezone

from rackman.services.outbound import StorageOutbound
from rackman.services.placement import StoragePlacement
from rackman.services.reservations import StorageReservations


class Storage(StoragePlacement, StorageOutbound):
    """
    Single interface for placement and outbound operations.

    IMPORTANT: confirm_placement and execute_outbound are all-or-nothing;
    plan_placement (without reserve), plan_outbound and check_outbound
    never write.
    """

    @classmethod
    def purge_expired_reservations(cls, now=None) -> int:
        """Delete lapsed reservations. Housekeeping only."""
        return StorageReservations.purge_expired(now or timezone.now())
