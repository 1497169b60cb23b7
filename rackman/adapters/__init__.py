"""
Rackman Adapters.

Implementations of protocols for external systems.
"""

from rackman.adapters.noop import NoopRateLimiter
from rackman.adapters.ratelimit import (
    check_rate_limit,
    get_rate_limiter,
    reset_rate_limiter,
)

__all__ = [
    "NoopRateLimiter",
    "check_rate_limit",
    "get_rate_limiter",
    "reset_rate_limiter",
]
