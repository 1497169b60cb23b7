"""
Tests for FIFO outbound: plan, check, execute.
"""

from datetime import timedelta
from unittest import mock

import pytest
from django.utils import timezone

from rackman import storage, RackError
from rackman.models import InboundOperation, OutboundOperation, StorageUnit
from rackman.services import outbound


pytestmark = pytest.mark.django_db


@pytest.fixture
def three_days(item, rack, make_unit, days_ago):
    """One unit placed on each of the last three days, oldest first."""
    return [
        make_unit(item, rack, 1, 1, created_at=days_ago(3)),
        make_unit(item, rack, 2, 1, created_at=days_ago(2)),
        make_unit(item, rack, 3, 1, created_at=days_ago(1)),
    ]


class TestPlanOutbound:
    """Tests for storage.plan_outbound()."""

    def test_oldest_first(self, item, three_days):
        plan = storage.plan_outbound(item, 2)

        assert [s.code for s in plan.pick_slots] == [three_days[0].code, three_days[1].code]
        assert plan.available_quantity == 3
        assert plan.warning is None

    def test_same_timestamp_ordered_by_id(self, item, rack, make_unit, days_ago):
        placed = days_ago(1)
        first = make_unit(item, rack, 3, 3, created_at=placed)
        second = make_unit(item, rack, 1, 1, created_at=placed)

        plan = storage.plan_outbound(item, 2)
        assert [s.unit_id for s in plan.pick_slots] == [first.pk, second.pk]

    def test_expired_units_skipped(self, perishable_item, rack, make_unit, days_ago):
        make_unit(perishable_item, rack, 1, 1, created_at=days_ago(5), expires_at=days_ago(2))
        fresh = make_unit(perishable_item, rack, 2, 1, created_at=days_ago(1), expires_at=days_ago(-2))

        plan = storage.plan_outbound(perishable_item, 1)

        assert [s.code for s in plan.pick_slots] == [fresh.code]
        assert plan.expired_quantity == 1

    def test_shortage_is_a_warning(self, item, three_days):
        plan = storage.plan_outbound(item, 5)

        assert len(plan.pick_slots) == 3
        assert plan.warning == 'Only 3 of 5 units in stock.'

    def test_partial_expiry_warning(self, perishable_item, rack, make_unit, days_ago):
        make_unit(perishable_item, rack, 1, 1, created_at=days_ago(5), expires_at=days_ago(2))
        make_unit(perishable_item, rack, 2, 1, created_at=days_ago(1))

        plan = storage.plan_outbound(perishable_item, 2)
        assert 'expired' in plan.warning
        assert plan.available_quantity == 1

    def test_all_expired_warning(self, perishable_item, rack, make_unit, days_ago):
        make_unit(perishable_item, rack, 1, 1, created_at=days_ago(5), expires_at=days_ago(2))

        plan = storage.plan_outbound(perishable_item, 1)

        assert plan.pick_slots == ()
        assert plan.warning.startswith('All 1 stored units')

    def test_unknown_item(self, db):
        with pytest.raises(RackError) as exc:
            storage.plan_outbound('99999999999999', 1)
        assert exc.value.code == 'ITEM_NOT_FOUND'


class TestCheckOutbound:
    """Tests for storage.check_outbound()."""

    def test_newest_is_blocked_by_older(self, three_days):
        check = storage.check_outbound(three_days[2].code)

        assert not check.fifo_compliant
        assert [s.code for s in check.older_slots] == [three_days[0].code, three_days[1].code]
        assert '2 older unit(s)' in check.warning

    def test_oldest_is_compliant(self, three_days):
        check = storage.check_outbound(three_days[0].code)
        assert check.fifo_compliant
        assert check.warning is None

    def test_expired_older_units_do_not_block(self, perishable_item, rack, make_unit, days_ago):
        make_unit(perishable_item, rack, 1, 1, created_at=days_ago(5), expires_at=days_ago(2))
        newer = make_unit(perishable_item, rack, 2, 1, created_at=days_ago(1))

        assert storage.check_outbound(newer.code).fifo_compliant

    def test_expired_flag(self, perishable_item, rack, make_unit, days_ago):
        unit = make_unit(perishable_item, rack, 1, 1, created_at=days_ago(5), expires_at=days_ago(2))
        check = storage.check_outbound(unit.code)
        assert check.expired
        assert 'expired' in check.warning

    def test_check_writes_nothing(self, three_days):
        storage.check_outbound(three_days[2].code)
        assert StorageUnit.objects.count() == 3

    def test_unknown_code(self, db):
        with pytest.raises(RackError) as exc:
            storage.check_outbound('nope')
        assert exc.value.code == 'UNIT_NOT_FOUND'
        assert exc.value.data['unit_code'] == 'nope'


class TestExecuteOutbound:
    """Tests for storage.execute_outbound()."""

    def test_issue_oldest(self, three_days, user):
        result = storage.execute_outbound([three_days[0].code], user)

        assert result.issued_count == 1
        assert not StorageUnit.objects.filter(pk=three_days[0].pk).exists()
        operation = OutboundOperation.objects.get()
        assert operation.fifo_compliant
        assert operation.unit_code == three_days[0].code
        assert operation.batch_arrival_date == three_days[0].created_at
        assert operation.issued_by == user

    def test_fifo_violation(self, three_days, user):
        with pytest.raises(RackError) as exc:
            storage.execute_outbound([three_days[2].code], user)

        assert exc.value.code == 'FIFO_VIOLATION'
        assert exc.value.data['older'] == 2
        assert exc.value.data['unit_code'] == three_days[2].code
        assert exc.value.as_dict()['code'] == 'FIFO_VIOLATION'
        assert StorageUnit.objects.count() == 3
        assert not OutboundOperation.objects.exists()

    def test_skip_fifo_records_non_compliance(self, three_days, user):
        storage.execute_outbound([three_days[2].code], user, skip_fifo=True)

        operation = OutboundOperation.objects.get()
        assert not operation.fifo_compliant
        assert StorageUnit.objects.count() == 2

    def test_batch_members_do_not_block_each_other(self, three_days, user):
        codes = [u.code for u in reversed(three_days)]
        result = storage.execute_outbound(codes, user)

        assert result.issued_count == 3
        assert all(op.fifo_compliant for op in result.operations)
        assert not StorageUnit.objects.exists()

    def test_expired_is_never_issued(self, perishable_item, rack, make_unit, days_ago, user):
        unit = make_unit(perishable_item, rack, 1, 1, created_at=days_ago(5), expires_at=days_ago(2))

        with pytest.raises(RackError) as exc:
            storage.execute_outbound([unit.code], user, skip_fifo=True)

        assert exc.value.code == 'EXPIRED'
        assert exc.value.data['unit_code'] == unit.code
        assert StorageUnit.objects.filter(pk=unit.pk).exists()

    def test_one_failure_rolls_back_batch(self, three_days, user):
        with pytest.raises(RackError) as exc:
            storage.execute_outbound([three_days[0].code, 'missing'], user)

        assert exc.value.code == 'UNIT_NOT_FOUND'
        assert StorageUnit.objects.count() == 3

    def test_duplicate_codes_invalid(self, three_days, user):
        with pytest.raises(RackError) as exc:
            storage.execute_outbound([three_days[0].code, three_days[0].code], user)
        assert exc.value.code == 'PLACEMENT_INVALID'

    def test_single_code_string(self, three_days, user):
        """A bare code is issued as one unit, not split into characters."""
        result = storage.execute_outbound(three_days[0].code, user)

        assert result.issued_count == 1
        assert StorageUnit.objects.count() == 2

    def test_locks_only_unit_rows(self, three_days, user):
        """Joined item and rack rows stay unlocked."""
        with mock.patch.object(outbound, 'find_unit', wraps=outbound.find_unit) as lookup:
            storage.execute_outbound([three_days[0].code], user)

        queryset = lookup.call_args.kwargs['queryset']
        assert queryset.query.select_for_update
        assert queryset.query.select_for_update_of == ('self',)

    def test_requires_user(self, three_days):
        with pytest.raises(RackError) as exc:
            storage.execute_outbound([three_days[0].code], None)
        assert exc.value.code == 'USER_NOT_FOUND'

    def test_inbound_history_survives_issue(self, rack, item, user):
        confirmation = storage.confirm_placement(item, [(rack.pk, 1, 1)], user)
        storage.execute_outbound(list(confirmation.codes), user)

        inbound = InboundOperation.objects.get()
        assert inbound.unit is None
        assert inbound.unit_code == confirmation.codes[0]


class TestDayByDayScenario:
    """Place on three days, then issue in FIFO order."""

    def test_three_day_fifo(self, rack, item, user, days_ago):
        for day, x in ((3, 1), (2, 2), (1, 3)):
            placed_at = days_ago(day)
            with pytest.MonkeyPatch.context() as mp:
                mp.setattr(timezone, 'now', lambda placed_at=placed_at: placed_at)
                storage.confirm_placement(item, [(rack.pk, x, 1)], user)

        plan = storage.plan_outbound(item, 1)
        oldest = plan.pick_slots[0]
        assert (oldest.x, oldest.y) == (1, 1)

        newest = StorageUnit.objects.get(position_x=3)
        assert not storage.check_outbound(newest.code).fifo_compliant

        for expected_x in (1, 2, 3):
            pick = storage.plan_outbound(item, 1).pick_slots[0]
            assert pick.x == expected_x
            storage.execute_outbound([pick.code], user)

        assert OutboundOperation.objects.filter(fifo_compliant=True).count() == 3
