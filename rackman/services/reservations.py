"""
Reservations: soft locks on rack coordinates (reserve, release, purge).

A reservation only hides a coordinate from other planners; it never
creates stock. Expiry is lazy: every read filters `expires_at > now`,
so nothing has to run on a schedule for a lapsed lock to stop counting.
"""

import logging
from datetime import timedelta

from django.db import transaction

from rackman.conf import rackman_settings
from rackman.exceptions import RackError
from rackman.models.reservation import Reservation
from rackman.persistence import SaveOutcome, save_batch

logger = logging.getLogger('rackman')


class StorageReservations:
    """Reservation lifecycle methods."""

    @classmethod
    def ttl(cls) -> timedelta:
        return timedelta(minutes=rackman_settings.RESERVATION_TTL_MINUTES)

    @classmethod
    def active_for_racks(cls, rack_ids, now) -> dict[int, list[Reservation]]:
        """Active reservations of every owner, grouped by rack id."""
        grouped: dict[int, list[Reservation]] = {rack_id: [] for rack_id in rack_ids}
        qs = Reservation.objects.filter(rack_id__in=list(rack_ids)).active(now)
        for reservation in qs:
            grouped.setdefault(reservation.rack_id, []).append(reservation)
        return grouped

    @classmethod
    def active_at(cls, rack, x: int, y: int, now) -> Reservation | None:
        return Reservation.objects.filter(
            rack=rack, position_x=x, position_y=y,
        ).active(now).first()

    @classmethod
    def reserve(cls, positions, owner, now):
        """
        Reserve all (rack_id, x, y) positions for `owner`, all or nothing.

        Expired rows on the affected racks are deleted first, in the same
        transaction, since they still occupy the unique key.

        Returns:
            (expires_at, count)

        Raises:
            RackError('PLACEMENT_CONFLICT'): a concurrent planner holds one
                of the coordinates; nothing is reserved
        """
        positions = list(positions)
        expires_at = now + cls.ttl()
        if not positions:
            return expires_at, 0

        rack_ids = {rack_id for rack_id, _, _ in positions}
        rows = [
            Reservation(
                rack_id=rack_id,
                position_x=x,
                position_y=y,
                owner=owner,
                expires_at=expires_at,
                created_at=now,
            )
            for rack_id, x, y in positions
        ]

        with transaction.atomic():
            Reservation.objects.filter(rack_id__in=rack_ids).expired(now).delete()
            outcome = save_batch(Reservation, rows)
            if outcome is SaveOutcome.CONSTRAINT_VIOLATION:
                logger.warning(
                    "rackman.reservation.conflict",
                    extra={"owner": owner.pk, "positions": len(rows)},
                )
                raise RackError('PLACEMENT_CONFLICT', reason='reserved concurrently', owner=owner.pk)

        logger.info(
            "rackman.reservation.created",
            extra={"owner": owner.pk, "count": len(rows), "expires_at": expires_at.isoformat()},
        )
        return expires_at, len(rows)

    @classmethod
    def release(cls, reservations) -> int:
        """Delete the given reservations (caller provides the transaction)."""
        pks = [r.pk for r in reservations]
        if not pks:
            return 0
        deleted, _ = Reservation.objects.filter(pk__in=pks).delete()
        return deleted

    @classmethod
    def purge_expired(cls, now) -> int:
        """
        Delete lapsed reservations in batches.

        Optional housekeeping: correctness never depends on it.
        """
        total = 0
        batch_size = rackman_settings.EXPIRED_BATCH_SIZE

        while True:
            with transaction.atomic():
                batch_ids = list(
                    Reservation.objects.expired(now)
                    .values_list('pk', flat=True)[:batch_size]
                )
                if not batch_ids:
                    break
                Reservation.objects.filter(pk__in=batch_ids).delete()
                total += len(batch_ids)

        if total:
            logger.info("rackman.reservations.purged", extra={"purged": total})
        return total
