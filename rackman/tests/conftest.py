"""
Pytest fixtures for Rackman tests.
"""

from datetime import timedelta
from itertools import count

import pytest
from django.contrib.auth import get_user_model
from django.utils import timezone

from rackman.adapters import reset_rate_limiter
from rackman.models import Item, Rack, StorageUnit, Warehouse


User = get_user_model()

_serials = count(1)


@pytest.fixture(autouse=True)
def _fresh_rate_limiter():
    """Each test loads the limiter from its own settings."""
    reset_rate_limiter()
    yield
    reset_rate_limiter()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(username='picker', password='testpass123')


@pytest.fixture
def other_user(db):
    """A second, competing user."""
    return User.objects.create_user(username='rival', password='testpass123')


@pytest.fixture
def warehouse(db):
    return Warehouse.objects.create(name='Main')


def _rack(warehouse, marker, **overrides):
    values = {
        'warehouse': warehouse,
        'marker': marker,
        'size_x': 3,
        'size_y': 3,
        'max_weight': 100.0,
        'min_temp': 0.0,
        'max_temp': 25.0,
        'max_size_x': 50.0,
        'max_size_y': 50.0,
        'max_size_z': 50.0,
        'accepts_dangerous': False,
    }
    values.update(overrides)
    return Rack.objects.create(**values)


@pytest.fixture
def make_rack(warehouse):
    """Factory: make_rack('B1', size_x=2, ...)."""
    def factory(marker='A1', **overrides):
        return _rack(overrides.pop('warehouse', warehouse), marker, **overrides)
    return factory


@pytest.fixture
def rack(make_rack):
    """Empty 3x3 rack, 100 kg limit, 0..25 degrees."""
    return make_rack('A1')


@pytest.fixture
def item(db):
    """5 kg non-perishable item with a code."""
    return Item.objects.create(
        name='Box of bolts',
        code='00012345678905',
        weight=5.0,
        size_x=10.0,
        size_y=10.0,
        size_z=10.0,
        min_temp=-10.0,
        max_temp=30.0,
    )


@pytest.fixture
def perishable_item(db):
    """Item whose units expire 3 days after placement."""
    return Item.objects.create(
        name='Yoghurt',
        code='00098765432109',
        weight=1.0,
        size_x=5.0,
        size_y=5.0,
        size_z=5.0,
        min_temp=-5.0,
        max_temp=30.0,
        expire_after_days=3,
    )


@pytest.fixture
def make_unit(user):
    """Factory: place a unit directly, bypassing the service."""
    def factory(item, rack, x, y, created_at=None, expires_at=None, code=None):
        return StorageUnit.objects.create(
            item=item,
            rack=rack,
            position_x=x,
            position_y=y,
            code=code or f"TEST{next(_serials):012d}",
            created_at=created_at or timezone.now(),
            expires_at=expires_at,
            created_by=user,
        )
    return factory


@pytest.fixture
def days_ago():
    """days_ago(2) -> aware datetime two days back."""
    def factory(days):
        return timezone.now() - timedelta(days=days)
    return factory
