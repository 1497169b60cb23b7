"""
Tests for placement and item code generation.
"""

import re
from datetime import datetime, timezone as dt_timezone
from unittest import mock

import pytest

from rackman.exceptions import RackError
from rackman.models import Item
from rackman.services import codes
from rackman.services.codes import (
    build_placement_code,
    ensure_item_code,
    generate_unique_codes,
)


pytestmark = pytest.mark.django_db


class TestBuildPlacementCode:
    """Tests for build_placement_code()."""

    def test_layout(self):
        now = datetime(2026, 2, 23, 10, 0, tzinfo=dt_timezone.utc)
        with mock.patch.object(codes, '_serial', return_value='482913'):
            code = build_placement_code('00012345678905', now)
        assert code == '11260223010001234567890521482913'

    def test_rejects_bad_item_code(self):
        with pytest.raises(RackError) as exc:
            build_placement_code('123')
        assert exc.value.code == 'INVALID_ITEM_CODE'


class TestGenerateUniqueCodes:
    """Tests for generate_unique_codes()."""

    def test_codes_are_distinct(self, item):
        result = generate_unique_codes(item.code, 5)
        assert len(result) == 5
        assert len(set(result)) == 5
        assert all(re.fullmatch(r'11\d{6}01\d{14}21\d{6}', c) for c in result)

    def test_retries_past_persisted_collision(self, item, rack, make_unit):
        now = datetime(2026, 2, 23, tzinfo=dt_timezone.utc)
        taken = '11260223010001234567890521000001'
        make_unit(item, rack, 1, 1, code=taken)

        serials = iter(['000001', '000002'])
        with mock.patch.object(codes, '_serial', side_effect=lambda: next(serials)), \
                mock.patch.object(codes, '_backoff') as backoff:
            result = generate_unique_codes(item.code, 1, now)

        assert result == ['11260223010001234567890521000002']
        backoff.assert_called_once_with(1)

    def test_gives_up_after_max_attempts(self, item, rack, make_unit):
        now = datetime(2026, 2, 23, tzinfo=dt_timezone.utc)
        make_unit(item, rack, 1, 1, code='11260223010001234567890521000001')

        with mock.patch.object(codes, '_serial', return_value='000001'), \
                mock.patch.object(codes, '_backoff') as backoff:
            with pytest.raises(RackError) as exc:
                generate_unique_codes(item.code, 1, now)

        assert exc.value.code == 'CODE_GENERATION_FAILED'
        assert exc.value.data['attempts'] == 3
        assert backoff.call_count == 2

    def test_duplicate_candidates_in_batch_are_retried(self, item):
        serials = iter(['000007', '000007', '000008'])
        with mock.patch.object(codes, '_serial', side_effect=lambda: next(serials)), \
                mock.patch.object(codes, '_backoff'):
            result = generate_unique_codes(item.code, 2)
        assert [c[-6:] for c in result] == ['000007', '000008']


class TestEnsureItemCode:
    """Tests for ensure_item_code()."""

    def test_keeps_existing_code(self, item):
        assert ensure_item_code(item) == '00012345678905'

    def test_assigns_missing_code(self):
        item = Item.objects.create(
            name='Loose', weight=1, size_x=1, size_y=1, size_z=1, min_temp=0, max_temp=10,
        )
        code = ensure_item_code(item)

        assert re.fullmatch(r'\d{14}', code)
        item.refresh_from_db()
        assert item.code == code

    def test_assigns_over_blank_code(self):
        item = Item.objects.create(
            name='Blank', code='', weight=1, size_x=1, size_y=1, size_z=1, min_temp=0, max_temp=10,
        )
        assert len(ensure_item_code(item)) == 14

    def test_concurrent_assignment_wins_once(self):
        item = Item.objects.create(
            name='Raced', weight=1, size_x=1, size_y=1, size_z=1, min_temp=0, max_temp=10,
        )
        Item.objects.filter(pk=item.pk).update(code='55555555555555')

        assert ensure_item_code(item) == '55555555555555'

    def test_invalid_existing_code(self):
        item = Item(name='Bad', code='ABC')
        with pytest.raises(RackError) as exc:
            ensure_item_code(item)
        assert exc.value.code == 'INVALID_ITEM_CODE'
