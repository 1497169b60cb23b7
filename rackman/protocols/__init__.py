"""
Rackman Protocols.

Defines interfaces for external collaborators.
"""

from rackman.protocols.ratelimit import RateLimiter, RateLimitOperation

__all__ = [
    "RateLimiter",
    "RateLimitOperation",
]
