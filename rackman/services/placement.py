"""
Placement: plan where incoming units go, then commit them.

plan_placement is read-only unless asked to reserve. confirm_placement
re-reads occupancy and reservations inside its transaction and trusts
nothing the plan said; the unique constraint on (rack, x, y) settles
whatever slips between the re-read and the insert.
"""

import logging
from collections import defaultdict
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from rackman.adapters.ratelimit import check_rate_limit
from rackman.conf import rackman_settings
from rackman.exceptions import RackError
from rackman.models.operation import InboundOperation
from rackman.models.rack import Rack, Warehouse
from rackman.models.unit import StorageUnit
from rackman.persistence import SaveOutcome, save_batch
from rackman.protocols.ratelimit import RateLimitOperation
from rackman.results import PlacementConfirmation, PlacementPlan, Slot
from rackman.services.capacity import (
    check_compatibility,
    rack_geometry_problem,
    resolve_capacity,
    validate_rack_geometry,
)
from rackman.services.codes import ensure_item_code, generate_unique_codes
from rackman.services.grouping import group_racks_by_proximity
from rackman.services.lookup import find_item
from rackman.services.reservations import StorageReservations

logger = logging.getLogger('rackman')


def validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise RackError('INVALID_QUANTITY', requested=quantity)
    return quantity


def _occupants(rack_ids) -> dict[int, list[StorageUnit]]:
    """Current units per rack, item loaded (one query)."""
    grouped: dict[int, list[StorageUnit]] = {rack_id: [] for rack_id in rack_ids}
    for unit in StorageUnit.objects.filter(rack_id__in=list(rack_ids)).select_related('item'):
        grouped.setdefault(unit.rack_id, []).append(unit)
    return grouped


def _reservations(rack_ids, now):
    return StorageReservations.active_for_racks(rack_ids, now)


def _resolve_warehouse(warehouse):
    if warehouse is None or isinstance(warehouse, Warehouse):
        return warehouse
    found = Warehouse.objects.filter(pk=warehouse).first()
    if found is None:
        raise RackError('WAREHOUSE_NOT_FOUND', warehouse_id=warehouse)
    return found


def _as_slot(value) -> Slot:
    """Accept a Slot, a {'rack_id', 'x', 'y'} dict or a (rack_id, x, y) tuple."""
    if isinstance(value, Slot):
        return value
    try:
        if isinstance(value, dict):
            return Slot(int(value['rack_id']), int(value['x']), int(value['y']))
        rack_id, x, y = value
        return Slot(int(rack_id), int(x), int(y))
    except (KeyError, TypeError, ValueError):
        raise RackError('PLACEMENT_INVALID', reason='malformed target', target=repr(value))


def expiry_for(item, now):
    """Expiry of a unit placed `now`, or None for non-perishables."""
    days = item.expire_after_days
    if days is None:
        return None
    if days < 0 or days > rackman_settings.MAX_EXPIRE_DAYS:
        raise RackError('EXPIRE_AFTER_INVALID', item_id=item.pk, expire_after_days=days)
    return now + timedelta(days=days)


class StoragePlacement:
    """Placement planning and confirmation."""

    @classmethod
    def plan_placement(cls, item, quantity, warehouse=None, reserve=False, user=None) -> PlacementPlan:
        """
        Pick rack coordinates for `quantity` units of `item`.

        Racks are evaluated against current occupancy and every active
        reservation (the caller's own included), ordered by proximity
        group and filled row by row.

        Args:
            item: Item instance, pk or code
            quantity: Units to place (positive int)
            warehouse: Restrict to one warehouse (instance or pk)
            reserve: Soft-lock the chosen coordinates for the TTL
            user: Acting user (required when reserve=True)

        Returns:
            PlacementPlan with every requested unit allocated

        Raises:
            RackError('NO_MATCH'): Nothing fits anywhere
            RackError('INSUFFICIENT_SPACE'): Only part of the quantity fits
            RackError('PLACEMENT_CONFLICT'): Reservation lost to a concurrent planner
        """
        check_rate_limit(user, RateLimitOperation.INVENTORY_READ)
        validate_quantity(quantity)
        if reserve and user is None:
            raise RackError('USER_NOT_FOUND', operation='reserve')

        item = find_item(item)
        warehouse = _resolve_warehouse(warehouse)
        now = timezone.now()

        racks = Rack.objects.all()
        if warehouse is not None:
            racks = racks.filter(warehouse=warehouse)
        racks = list(racks.order_by('warehouse_id', 'marker', 'id'))

        valid = []
        for rack in racks:
            problem = rack_geometry_problem(rack)
            if problem is not None:
                logger.warning("rackman.rack.skipped", extra={"rack_id": rack.pk, "reason": problem})
                continue
            valid.append(rack)

        rack_ids = [rack.pk for rack in valid]
        occupancy = _occupants(rack_ids)
        reservations = _reservations(rack_ids, now)

        capacities = []
        for rack in valid:
            capacity = resolve_capacity(
                rack, item, occupancy.get(rack.pk, []), reservations.get(rack.pk, []),
            )
            if capacity is not None:
                capacities.append(capacity)

        total_available = sum(c.available for c in capacities)
        slots: list[Slot] = []
        for capacity in group_racks_by_proximity(capacities):
            missing = quantity - len(slots)
            if missing <= 0:
                break
            take = min(missing, capacity.available)
            slots.extend(
                Slot(capacity.rack.pk, coord.x, coord.y)
                for coord in capacity.free_coordinates[:take]
            )

        allocated = len(slots)
        if allocated == 0:
            raise RackError(
                'NO_MATCH',
                item_id=item.pk, allocated=0, requested=quantity, available=total_available,
            )
        if allocated < quantity:
            logger.warning(
                "rackman.placement.partial",
                extra={"item_id": item.pk, "allocated": allocated, "requested": quantity},
            )
            raise RackError(
                'INSUFFICIENT_SPACE',
                item_id=item.pk, allocated=allocated, requested=quantity, available=total_available,
            )

        reserved_until = None
        reserved_count = 0
        if reserve:
            reserved_until, reserved_count = StorageReservations.reserve(
                [(slot.rack_id, slot.x, slot.y) for slot in slots], user, now,
            )

        return PlacementPlan(
            item_id=item.pk,
            requested_quantity=quantity,
            allocated_quantity=allocated,
            remaining_quantity=quantity - allocated,
            slots=tuple(slots),
            reserved=reserve,
            reserved_until=reserved_until,
            reserved_count=reserved_count,
        )

    @classmethod
    def confirm_placement(cls, item_or_code, slots, user) -> PlacementConfirmation:
        """
        Create one StorageUnit per target, all or nothing.

        A target the caller has reserved is accepted as long as it is still
        free of stock. Every other target must fit the rack's capacity as it
        is now, counting the caller's reserved targets as load.

        Raises:
            RackError('PLACEMENT_CONFLICT'): State changed since planning
            RackError('PLACEMENT_INVALID'): Duplicate or out-of-grid target
            RackError('RACK_NOT_FOUND'), RackError('INVALID_RACK')
            RackError(<compatibility code>): Item can't live on a target rack
        """
        check_rate_limit(user, RateLimitOperation.INVENTORY_WRITE)
        if user is None:
            raise RackError('USER_NOT_FOUND', operation='confirm_placement')

        item = find_item(item_or_code)
        targets = [_as_slot(value) for value in slots]
        if not targets:
            raise RackError('INVALID_QUANTITY', requested=0)

        seen = set()
        by_rack: dict[int, list[Slot]] = defaultdict(list)
        for target in targets:
            if target in seen:
                raise RackError('PLACEMENT_INVALID', reason='duplicate target', **target.as_dict())
            seen.add(target)
            by_rack[target.rack_id].append(target)

        racks = Rack.objects.in_bulk(list(by_rack))
        for rack_id in by_rack:
            if rack_id not in racks:
                raise RackError('RACK_NOT_FOUND', rack_id=rack_id)

        for rack_id, rack_targets in by_rack.items():
            rack = racks[rack_id]
            validate_rack_geometry(rack)
            for target in rack_targets:
                if not rack.contains(target.x, target.y):
                    raise RackError('PLACEMENT_INVALID', reason='outside rack grid', **target.as_dict())
            check_compatibility(rack, item)

        item_code = ensure_item_code(item)
        now = timezone.now()
        expires_at = expiry_for(item, now)

        with transaction.atomic():
            occupancy = _occupants(list(by_rack))
            reservations = _reservations(list(by_rack), now)
            owned = []

            for rack_id, rack_targets in by_rack.items():
                rack = racks[rack_id]
                occupied = {(u.position_x, u.position_y) for u in occupancy.get(rack_id, [])}
                held = {(r.position_x, r.position_y): r for r in reservations.get(rack_id, [])}

                owned_here = []
                extra = []
                for target in rack_targets:
                    if (target.x, target.y) in occupied:
                        raise RackError('PLACEMENT_CONFLICT', reason='occupied', **target.as_dict())
                    reservation = held.get((target.x, target.y))
                    if reservation is None:
                        extra.append(target)
                    elif reservation.belongs_to(user):
                        owned_here.append(reservation)
                    else:
                        raise RackError('PLACEMENT_CONFLICT', reason='reserved', **target.as_dict())

                if extra:
                    capacity = resolve_capacity(
                        rack, item, occupancy.get(rack_id, []), reservations.get(rack_id, []),
                        reserved_load=len(owned_here) * item.weight,
                    )
                    available = capacity.available if capacity is not None else 0
                    if len(extra) > available:
                        raise RackError(
                            'PLACEMENT_CONFLICT',
                            reason='capacity', rack_id=rack_id,
                            requested=len(extra), available=available,
                        )
                owned.extend(owned_here)

            codes = generate_unique_codes(item_code, len(targets), now)
            units = [
                StorageUnit(
                    item=item,
                    rack=racks[target.rack_id],
                    position_x=target.x,
                    position_y=target.y,
                    code=code,
                    created_at=now,
                    expires_at=expires_at,
                    created_by=user,
                )
                for target, code in zip(targets, codes)
            ]

            outcome = save_batch(StorageUnit, units)
            if outcome is SaveOutcome.CONSTRAINT_VIOLATION:
                logger.warning(
                    "rackman.placement.conflict",
                    extra={"item_id": item.pk, "targets": len(units)},
                )
                raise RackError('PLACEMENT_CONFLICT', reason='stored concurrently', item_id=item.pk)

            InboundOperation.objects.bulk_create(
                [InboundOperation.for_unit(unit, user, now) for unit in units]
            )
            StorageReservations.release(owned)

        logger.info(
            "rackman.placement.confirmed",
            extra={
                "item_id": item.pk,
                "stored": len(units),
                "racks": sorted(by_rack),
                "released_reservations": len(owned),
                "user": user.pk,
            },
        )

        return PlacementConfirmation(
            item_id=item.pk,
            stored_quantity=len(units),
            codes=tuple(codes),
            units=tuple(units),
        )
