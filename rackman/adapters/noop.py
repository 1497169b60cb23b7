"""
Noop Rate Limiter: default adapter.

Allows every call. Used when RACKMAN['RATE_LIMITER'] is not set, which
suits tests and deployments that throttle at the HTTP edge instead.

Usage in settings.py:
    RACKMAN = {
        "RATE_LIMITER": "myproject.throttling.RedisRateLimiter",
    }
"""

from __future__ import annotations

from rackman.protocols.ratelimit import RateLimitOperation


class NoopRateLimiter:
    """Rate limiter that never says no."""

    def allow(self, key: str, operation: RateLimitOperation) -> bool:
        return True
