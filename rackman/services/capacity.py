"""
Capacity resolution: isolated, testable, pure.

Given a rack, an item, the rack's occupants and its active reservations,
decides whether the item fits the rack at all and, if so, how many more
units can go there and on which coordinates.

Examples:
    - 3x3 rack, 100 kg limit, empty, item 5 kg: weight allows 20,
      slots allow 9 -> 9 available
    - same rack with 8 units of 12 kg: weight allows 0 -> None
    - dangerous item on a rack that doesn't accept them -> None
"""

import logging
import math
from dataclasses import dataclass, field
from typing import NamedTuple

from rackman.conf import rackman_settings
from rackman.exceptions import RackError
from rackman.services.grouping import snake_order

logger = logging.getLogger('rackman')

EPS = 1e-6


class Coordinate(NamedTuple):
    x: int
    y: int


@dataclass(frozen=True)
class RackCapacity:
    """How many more units of an item a rack can take, and where."""

    rack: object
    available: int
    free_coordinates: list[Coordinate] = field(default_factory=list)
    slot_budget: int = 0
    weight_budget: int | None = None


def _le_eps(a: float, b: float) -> bool:
    return a <= b or abs(a - b) < EPS


def compatibility_problem(rack, item) -> str | None:
    """
    First reason the item can't live on this rack, or None.

    The rack's temperature range must sit inside the item's tolerance:
    a rack that gets colder or warmer than the item allows is rejected.
    """
    if item.dangerous and not rack.accepts_dangerous:
        return 'RACK_DOES_NOT_ACCEPT_DANGEROUS_ITEMS'
    if rack.min_temp < item.min_temp:
        return 'RACK_TEMP_MIN_BELOW_ITEM_TOLERANCE'
    if rack.max_temp > item.max_temp:
        return 'RACK_TEMP_MAX_ABOVE_ITEM_TOLERANCE'
    if not _le_eps(item.size_x, rack.max_size_x):
        return 'ITEM_SIZE_X_EXCEEDS_RACK_LIMIT'
    if not _le_eps(item.size_y, rack.max_size_y):
        return 'ITEM_SIZE_Y_EXCEEDS_RACK_LIMIT'
    if not _le_eps(item.size_z, rack.max_size_z):
        return 'ITEM_SIZE_Z_EXCEEDS_RACK_LIMIT'
    return None


def is_compatible(rack, item) -> bool:
    return compatibility_problem(rack, item) is None


def check_compatibility(rack, item) -> None:
    """Raise the specific incompatibility as RackError."""
    problem = compatibility_problem(rack, item)
    if problem is not None:
        raise RackError(problem, rack_id=rack.pk, item_id=item.pk)


def rack_geometry_problem(rack) -> str | None:
    if rack.size_x <= 0 or rack.size_y <= 0:
        return 'non-positive grid size'
    side = rackman_settings.MAX_RACK_SIDE
    if rack.size_x > side or rack.size_y > side:
        return f'grid side above {side}'
    if rack.size_x * rack.size_y > rackman_settings.MAX_RACK_AREA:
        return 'grid area above limit'
    return None


def validate_rack_geometry(rack) -> None:
    problem = rack_geometry_problem(rack)
    if problem is not None:
        raise RackError('INVALID_RACK', rack_id=rack.pk, reason=problem)


def weight_budget(rack, item, current_load: float) -> int | None:
    """
    Units of `item` the remaining weight allowance can take.

    None means weight doesn't constrain (weightless item).
    """
    if item.weight <= 0:
        return None
    possible = (rack.max_weight - current_load) / item.weight
    if math.isnan(possible) or math.isinf(possible) or possible <= 0:
        return 0
    return math.floor(possible)


def free_coordinates(rack, occupants, reservations=()) -> list[Coordinate]:
    """In-grid coordinates with no unit and no active reservation, snake-ordered."""
    taken = {
        (unit.position_x, unit.position_y)
        for unit in occupants
        if rack.contains(unit.position_x, unit.position_y)
    }
    taken.update((r.position_x, r.position_y) for r in reservations)
    free = [
        Coordinate(x, y)
        for y in range(1, rack.size_y + 1)
        for x in range(1, rack.size_x + 1)
        if (x, y) not in taken
    ]
    return snake_order(free)


def resolve_capacity(rack, item, occupants, reservations=(),
                     reserved_load: float = 0.0) -> RackCapacity | None:
    """
    Capacity of `rack` for `item`, or None when nothing more fits.

    Args:
        rack: Rack instance (valid geometry)
        item: Item instance
        occupants: StorageUnits currently on the rack (with .item loaded)
        reservations: Active reservations on the rack (any owner)
        reserved_load: Extra weight already promised to the rack

    Returns:
        RackCapacity with available = min(slot budget, weight budget,
        free coordinates), or None if incompatible / full.
    """
    if not is_compatible(rack, item):
        return None

    occupants = list(occupants)
    current_load = sum(unit.item.weight for unit in occupants) + reserved_load
    slot_budget = max(0, rack.area - len(occupants))
    by_weight = weight_budget(rack, item, current_load)
    free = free_coordinates(rack, occupants, reservations)

    budgets = [slot_budget, len(free)]
    if by_weight is not None:
        budgets.append(by_weight)
    available = min(budgets)

    logger.debug(
        "Rack %s | slots=%s occupied=%s reserved=%s weight_budget=%s free=%s -> %s | load=%.3f/%.3f",
        rack.pk, rack.area, len(occupants), len(reservations), by_weight,
        len(free), available, current_load, rack.max_weight,
    )

    if available <= 0:
        return None
    return RackCapacity(
        rack=rack,
        available=available,
        free_coordinates=free,
        slot_budget=slot_budget,
        weight_budget=by_weight,
    )
