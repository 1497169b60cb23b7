"""
Rackman services: modular organization of storage operations.

    from rackman.services import StoragePlacement, StorageOutbound, StorageReservations
"""

from rackman.services.outbound import StorageOutbound
from rackman.services.placement import StoragePlacement
from rackman.services.reservations import StorageReservations

__all__ = [
    'StoragePlacement',
    'StorageOutbound',
    'StorageReservations',
]
