"""
Rackman configuration.

Usage in settings.py:
    RACKMAN = {
        "RESERVATION_TTL_MINUTES": 5,
        "CODE_MAX_ATTEMPTS": 3,
        "CODE_BACKOFF_MS": 20,
        "RATE_LIMITER": "myproject.limits.RedisRateLimiter",
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class RackmanSettings:
    """Rackman configuration settings."""

    # Soft-lock lifetime for plan-time reservations
    RESERVATION_TTL_MINUTES: int = 5

    # Placement code generation: attempts and base backoff between them
    CODE_MAX_ATTEMPTS: int = 3
    CODE_BACKOFF_MS: int = 20

    # Rack geometry sanity limits
    MAX_RACK_SIDE: int = 1000
    MAX_RACK_AREA: int = 1_000_000

    # Upper bound for Item.expire_after_days
    MAX_EXPIRE_DAYS: int = 3650

    # Batch size for purge_expired processing
    EXPIRED_BATCH_SIZE: int = 200

    # Rate limiter backend (dotted path, empty = noop)
    RATE_LIMITER: str = ""


def get_rackman_settings() -> RackmanSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "RACKMAN", {})
    return RackmanSettings(**{
        k: v for k, v in user_settings.items()
        if k in RackmanSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_rackman_settings(), name)


rackman_settings = _LazySettings()
