"""
Rate Limiter Protocol.

Defines how Rackman asks an external throttle whether a caller may run an
inventory operation. Rackman never counts requests itself; it only asks.
"""

from enum import Enum
from typing import Protocol, runtime_checkable


class RateLimitOperation(str, Enum):
    """Kind of inventory operation being throttled."""

    INVENTORY_READ = "inventory_read"  # plan_placement, plan_outbound, check_outbound
    INVENTORY_WRITE = "inventory_write"  # confirm_placement, execute_outbound


@runtime_checkable
class RateLimiter(Protocol):
    """
    Protocol for throttling inventory operations.

    Implementations decide per caller key (a user pk, or "anonymous").
    """

    def allow(self, key: str, operation: RateLimitOperation) -> bool:
        """
        Whether the caller may run `operation` now.

        Args:
            key: Caller identity
            operation: Operation kind

        Returns:
            True to proceed, False to reject with RATE_LIMITED
        """
        ...
