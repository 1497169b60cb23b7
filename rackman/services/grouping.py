"""
Proximity grouping: ordering that keeps one allocation physically close.

Racks are grouped by their RackLocation (warehouse, zone, aisle). Groups
keep the order in which they were first seen; inside a group the rack
with most room comes first, so an allocation drains as few racks as
possible. Inside a rack, coordinates fill row by row, left to right
("snake" fill), which keeps the picked slots next to each other.
"""


def group_racks_by_proximity(capacities):
    """
    Order RackCapacity objects by proximity group.

    Within a group: available desc, then marker, then id.
    """
    groups: dict = {}
    for capacity in capacities:
        groups.setdefault(capacity.rack.location, []).append(capacity)

    ordered = []
    for group in groups.values():
        group.sort(key=lambda c: (-c.available, c.rack.marker or '', c.rack.pk))
        ordered.extend(group)
    return ordered


def snake_order(coordinates):
    """Row-major order: ascending row (y), then ascending column (x)."""
    return sorted(coordinates, key=lambda c: (c.y, c.x))
