"""
Exceptions for Rackman.

All errors are RackError with a structured code for programmatic handling.
"""

from typing import Any


class BaseError(Exception):
    """
    Base exception with a machine-readable code and context data.

    Subclasses provide `_default_messages` so callers can raise with
    just a code: `raise RackError('NO_MATCH', requested=5)`.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")


class RackError(BaseError):
    """
    Structured exception for placement and outbound operations.

    Usage:
        try:
            storage.plan_placement(item, 10)
        except RackError as e:
            if e.code == 'INSUFFICIENT_SPACE':
                print(f"Only {e.allocated} of {e.requested} fit")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'ITEM_NOT_FOUND': 'Item not found',
        'RACK_NOT_FOUND': 'Rack not found',
        'UNIT_NOT_FOUND': 'Storage unit not found',
        'USER_NOT_FOUND': 'Acting user is required',
        'WAREHOUSE_NOT_FOUND': 'Warehouse not found',
        'RACK_DOES_NOT_ACCEPT_DANGEROUS_ITEMS': 'Rack does not accept dangerous items',
        'RACK_TEMP_MIN_BELOW_ITEM_TOLERANCE': 'Rack minimum temperature is below item tolerance',
        'RACK_TEMP_MAX_ABOVE_ITEM_TOLERANCE': 'Rack maximum temperature is above item tolerance',
        'ITEM_SIZE_X_EXCEEDS_RACK_LIMIT': 'Item width exceeds rack limit',
        'ITEM_SIZE_Y_EXCEEDS_RACK_LIMIT': 'Item height exceeds rack limit',
        'ITEM_SIZE_Z_EXCEEDS_RACK_LIMIT': 'Item depth exceeds rack limit',
        'NO_MATCH': 'No rack can hold this item',
        'INSUFFICIENT_SPACE': 'Not enough space for the requested quantity',
        'PLACEMENT_CONFLICT': 'Placement conflicts with concurrent changes',
        'PLACEMENT_INVALID': 'Invalid placement request',
        'CODE_GENERATION_FAILED': 'Unable to generate a unique code',
        'FIFO_VIOLATION': 'Older units of the same item must be issued first',
        'EXPIRED': 'Storage unit is expired',
        'INVALID_QUANTITY': 'Quantity must be a positive integer',
        'INVALID_RACK': 'Rack geometry is invalid',
        'EXPIRE_AFTER_INVALID': 'Item expiry policy is out of range',
        'INVALID_ITEM_CODE': 'Item code must be 14 digits',
        'RATE_LIMITED': 'Too many requests',
    }

    _retryable_codes = frozenset({'PLACEMENT_CONFLICT'})

    @property
    def retryable(self) -> bool:
        """Can the caller simply retry (after re-planning)?"""
        return self.code in self._retryable_codes

    @property
    def allocated(self) -> int:
        """Shortcut for data['allocated']."""
        return self.data.get('allocated', 0)

    @property
    def requested(self) -> int:
        """Shortcut for data['requested']."""
        return self.data.get('requested', 0)

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'retryable': self.retryable,
            'data': {
                k: v if isinstance(v, (int, float, bool, type(None), list, dict)) else str(v)
                for k, v in self.data.items()
            },
        }
