"""
Django Rackman: placement allocation and FIFO fulfillment for rack storage.

Usage:
    from rackman import storage, RackError

    plan = storage.plan_placement(item, 10)
    storage.confirm_placement(item, plan.slots, user)
    storage.plan_outbound(item, 3)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'storage':
        from rackman.service import Storage
        return Storage
    elif name == 'RackError':
        from rackman.exceptions import RackError
        return RackError
    elif name == 'Warehouse':
        from rackman.models.rack import Warehouse
        return Warehouse
    elif name == 'Rack':
        from rackman.models.rack import Rack
        return Rack
    elif name == 'Item':
        from rackman.models.item import Item
        return Item
    elif name == 'StorageUnit':
        from rackman.models.unit import StorageUnit
        return StorageUnit
    elif name == 'Reservation':
        from rackman.models.reservation import Reservation
        return Reservation
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'storage',
    'RackError',
    'Warehouse',
    'Rack',
    'Item',
    'StorageUnit',
    'Reservation',
]

__version__ = '0.1.0'
