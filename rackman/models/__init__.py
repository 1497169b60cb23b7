"""
Rackman Models.

Core models for rack storage:
- Warehouse / Rack: Where stock can be placed (grid of coordinates)
- Item: What is placed (compatibility and shelf-life attributes)
- StorageUnit: One placed item instance at a rack coordinate
- Reservation: Time-bounded soft lock on a coordinate
- InboundOperation / OutboundOperation: Immutable audit trail
"""

from rackman.models.item import Item
from rackman.models.operation import InboundOperation, OutboundOperation
from rackman.models.rack import Rack, RackLocation, Warehouse
from rackman.models.reservation import Reservation
from rackman.models.unit import StorageUnit

__all__ = [
    'Warehouse',
    'Rack',
    'RackLocation',
    'Item',
    'StorageUnit',
    'Reservation',
    'InboundOperation',
    'OutboundOperation',
]
