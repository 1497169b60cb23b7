"""
Outbound: FIFO picking and issuing of storage units.

Oldest non-expired unit first, ties broken by id. Expired units are never
picked and never issued; FIFO order can be overridden on execute, expiry
cannot.
"""

import logging

from django.db import transaction
from django.utils import timezone

from rackman.adapters.ratelimit import check_rate_limit
from rackman.exceptions import RackError
from rackman.models.operation import OutboundOperation
from rackman.models.unit import StorageUnit
from rackman.protocols.ratelimit import RateLimitOperation
from rackman.results import OutboundCheck, OutboundExecution, OutboundPlan, PickSlot
from rackman.services.lookup import find_item, find_unit
from rackman.services.placement import validate_quantity

logger = logging.getLogger('rackman')


def shortage_warning(requested: int, available: int, expired: int) -> str | None:
    if available >= requested:
        return None
    if available == 0 and expired > 0:
        return f"All {expired} stored units of this item are expired; nothing can be issued."
    if expired > 0:
        return (
            f"Only {available} of {requested} units can be issued; "
            f"{expired} more are expired."
        )
    return f"Only {available} of {requested} units in stock."


class StorageOutbound:
    """FIFO outbound methods."""

    @classmethod
    def plan_outbound(cls, item, quantity, user=None) -> OutboundPlan:
        """
        Which units to pick for `quantity` of `item`, oldest first.

        A shortage is reported in `warning`, never raised.
        """
        check_rate_limit(user, RateLimitOperation.INVENTORY_READ)
        validate_quantity(quantity)
        item = find_item(item)
        now = timezone.now()

        units = StorageUnit.objects.for_item(item)
        fresh = units.not_expired(now)
        available = fresh.count()
        expired = units.expired(now).count()
        picks = [
            PickSlot.from_unit(unit)
            for unit in fresh.select_related('rack').fifo()[:quantity]
        ]

        warning = shortage_warning(quantity, available, expired)
        if warning:
            logger.warning(
                "rackman.outbound.shortage",
                extra={"item_id": item.pk, "requested": quantity, "available": available, "expired": expired},
            )

        return OutboundPlan(
            item_id=item.pk,
            item_name=item.name,
            requested_quantity=quantity,
            available_quantity=available,
            expired_quantity=expired,
            pick_slots=tuple(picks),
            warning=warning,
        )

    @classmethod
    def check_outbound(cls, code, user=None) -> OutboundCheck:
        """
        Would issuing this unit respect FIFO? Read-only.

        Older slots are non-expired units of the same item placed strictly
        earlier.
        """
        check_rate_limit(user, RateLimitOperation.INVENTORY_READ)
        now = timezone.now()
        unit = find_unit(code)
        expired = unit.is_expired_at(now)
        older = [
            PickSlot.from_unit(other)
            for other in StorageUnit.objects.older_than(unit, now).select_related('rack')
        ]

        warning = None
        if expired:
            warning = f"Unit {unit.code} expired at {unit.expires_at.isoformat()}."
        elif older:
            warning = f"{len(older)} older unit(s) of {unit.item.name} should be issued first."

        return OutboundCheck(
            code=unit.code,
            fifo_compliant=not older,
            expired=expired,
            requested=PickSlot.from_unit(unit),
            older_slots=tuple(older),
            warning=warning,
        )

    @classmethod
    def execute_outbound(cls, codes, user, skip_fifo=False) -> OutboundExecution:
        """
        Issue the given units: delete each one and record an OutboundOperation.

        All or nothing. Units in the same call never block each other.

        Args:
            codes: Placement codes to issue
            user: Acting user
            skip_fifo: Issue even if older units exist (recorded as non-FIFO)

        Raises:
            RackError('UNIT_NOT_FOUND'): Unknown code
            RackError('EXPIRED'): A unit is expired (skip_fifo doesn't help)
            RackError('FIFO_VIOLATION'): Older units exist and skip_fifo is False
            RackError('PLACEMENT_INVALID'): The same unit listed twice
        """
        check_rate_limit(user, RateLimitOperation.INVENTORY_WRITE)
        if user is None:
            raise RackError('USER_NOT_FOUND', operation='execute_outbound')

        if isinstance(codes, str):
            codes = [codes]
        codes = [str(code).strip() for code in codes]
        if not codes:
            raise RackError('INVALID_QUANTITY', requested=0)
        if len(set(codes)) != len(codes):
            raise RackError('PLACEMENT_INVALID', reason='duplicate code')

        now = timezone.now()

        with transaction.atomic():
            locked = StorageUnit.objects.select_for_update(of=('self',))
            units = [find_unit(code, queryset=locked) for code in codes]

            batch_ids = {unit.pk for unit in units}
            if len(batch_ids) != len(units):
                raise RackError('PLACEMENT_INVALID', reason='duplicate code')

            operations = []
            for unit in units:
                if unit.is_expired_at(now):
                    raise RackError('EXPIRED', unit_code=unit.code, expires_at=unit.expires_at.isoformat())

                blockers = StorageUnit.objects.older_than(unit, now).exclude(pk__in=batch_ids)
                compliant = not blockers.exists()
                if not compliant and not skip_fifo:
                    raise RackError('FIFO_VIOLATION', unit_code=unit.code, older=blockers.count())

                operations.append(OutboundOperation.for_unit(unit, user, now, compliant))

            OutboundOperation.objects.bulk_create(operations)
            StorageUnit.objects.filter(pk__in=batch_ids).delete()

        logger.info(
            "rackman.outbound.executed",
            extra={
                "issued": len(operations),
                "non_fifo": sum(1 for op in operations if not op.fifo_compliant),
                "user": user.pk,
            },
        )

        return OutboundExecution(issued_count=len(operations), operations=tuple(operations))
