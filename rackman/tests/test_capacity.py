"""
Tests for capacity resolution (no database).
"""

from types import SimpleNamespace

import pytest

from rackman.exceptions import RackError
from rackman.models import Item, Rack
from rackman.services.capacity import (
    Coordinate,
    check_compatibility,
    compatibility_problem,
    free_coordinates,
    rack_geometry_problem,
    resolve_capacity,
    weight_budget,
)


def make_rack(**overrides):
    values = dict(
        marker='A1', size_x=3, size_y=3, max_weight=100.0,
        min_temp=0.0, max_temp=25.0,
        max_size_x=50.0, max_size_y=50.0, max_size_z=50.0,
        accepts_dangerous=False,
    )
    values.update(overrides)
    return Rack(**values)


def make_item(**overrides):
    values = dict(
        name='Crate', weight=5.0, size_x=10.0, size_y=10.0, size_z=10.0,
        min_temp=-10.0, max_temp=30.0, dangerous=False,
    )
    values.update(overrides)
    return Item(**values)


def occupant(x, y, weight):
    return SimpleNamespace(position_x=x, position_y=y, item=SimpleNamespace(weight=weight))


def held(x, y):
    return SimpleNamespace(position_x=x, position_y=y)


class TestCompatibility:
    """Tests for compatibility_problem()."""

    def test_compatible(self):
        assert compatibility_problem(make_rack(), make_item()) is None

    def test_dangerous_item_needs_accepting_rack(self):
        item = make_item(dangerous=True)
        assert compatibility_problem(make_rack(), item) == 'RACK_DOES_NOT_ACCEPT_DANGEROUS_ITEMS'
        assert compatibility_problem(make_rack(accepts_dangerous=True), item) is None

    def test_rack_colder_than_item_tolerates(self):
        rack = make_rack(min_temp=-20.0)
        assert compatibility_problem(rack, make_item()) == 'RACK_TEMP_MIN_BELOW_ITEM_TOLERANCE'

    def test_rack_warmer_than_item_tolerates(self):
        rack = make_rack(max_temp=35.0)
        assert compatibility_problem(rack, make_item()) == 'RACK_TEMP_MAX_ABOVE_ITEM_TOLERANCE'

    @pytest.mark.parametrize('axis', ['x', 'y', 'z'])
    def test_oversized_item(self, axis):
        item = make_item(**{f'size_{axis}': 60.0})
        expected = f'ITEM_SIZE_{axis.upper()}_EXCEEDS_RACK_LIMIT'
        assert compatibility_problem(make_rack(), item) == expected

    def test_size_within_epsilon_fits(self):
        item = make_item(size_x=50.0000000001)
        assert compatibility_problem(make_rack(), item) is None

    def test_check_compatibility_raises_code(self):
        with pytest.raises(RackError) as exc:
            check_compatibility(make_rack(), make_item(dangerous=True))
        assert exc.value.code == 'RACK_DOES_NOT_ACCEPT_DANGEROUS_ITEMS'


class TestBudgets:
    """Tests for weight budget and free coordinates."""

    def test_weight_budget_floors(self):
        assert weight_budget(make_rack(), make_item(weight=30.0), 0) == 3

    def test_weightless_item_unbounded(self):
        assert weight_budget(make_rack(), make_item(weight=0.0), 0) is None

    def test_overloaded_rack_has_no_budget(self):
        assert weight_budget(make_rack(), make_item(), 150.0) == 0

    def test_free_coordinates_snake_order(self):
        rack = make_rack(size_x=2, size_y=2)
        free = free_coordinates(rack, [occupant(1, 1, 1.0)], [held(2, 2)])
        assert free == [Coordinate(2, 1), Coordinate(1, 2)]

    def test_out_of_grid_occupant_ignored(self):
        rack = make_rack(size_x=1, size_y=1)
        assert free_coordinates(rack, [occupant(5, 5, 1.0)]) == [Coordinate(1, 1)]


class TestResolveCapacity:
    """Tests for resolve_capacity()."""

    def test_empty_rack_limited_by_slots(self):
        capacity = resolve_capacity(make_rack(), make_item(), [])
        assert capacity.available == 9
        assert capacity.weight_budget == 20
        assert capacity.free_coordinates[0] == Coordinate(1, 1)

    def test_limited_by_weight(self):
        capacity = resolve_capacity(make_rack(), make_item(weight=40.0), [])
        assert capacity.available == 2

    def test_full_by_weight_returns_none(self):
        occupants = [occupant(x, 1, 12.0) for x in range(1, 4)] + \
                    [occupant(x, 2, 12.0) for x in range(1, 4)] + \
                    [occupant(1, 3, 12.0), occupant(2, 3, 12.0)]
        assert resolve_capacity(make_rack(), make_item(), occupants) is None

    def test_reservations_reduce_free_coordinates(self):
        reservations = [held(1, 1), held(2, 1)]
        capacity = resolve_capacity(make_rack(), make_item(), [], reservations)
        assert capacity.available == 7
        assert Coordinate(1, 1) not in capacity.free_coordinates

    def test_reserved_load_counts_as_weight(self):
        capacity = resolve_capacity(make_rack(), make_item(), [], reserved_load=90.0)
        assert capacity.available == 2

    def test_incompatible_returns_none(self):
        assert resolve_capacity(make_rack(), make_item(dangerous=True), []) is None


class TestRackGeometry:

    def test_valid(self):
        assert rack_geometry_problem(make_rack()) is None

    def test_zero_side(self):
        assert rack_geometry_problem(make_rack(size_x=0)) is not None

    def test_side_above_limit(self):
        assert rack_geometry_problem(make_rack(size_x=1001)) is not None
