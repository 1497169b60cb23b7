"""
Rate limiter loading.

The limiter class is read from RACKMAN['RATE_LIMITER'] and instantiated
once per process.

Configuration:
    RACKMAN = {
        "RATE_LIMITER": "path.to.RateLimiterClass",
    }
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from rackman.adapters.noop import NoopRateLimiter
from rackman.conf import rackman_settings
from rackman.exceptions import RackError
from rackman.protocols.ratelimit import RateLimiter, RateLimitOperation

logger = logging.getLogger("rackman")

_rate_limiter: RateLimiter | None = None
_lock = threading.Lock()


def get_rate_limiter() -> RateLimiter:
    """
    Return the configured rate limiter.

    Raises:
        ImproperlyConfigured: If the configured path can't be imported
    """
    global _rate_limiter

    if _rate_limiter is None:
        with _lock:
            if _rate_limiter is None:  # double-checked
                limiter_path = rackman_settings.RATE_LIMITER

                if not limiter_path:
                    _rate_limiter = NoopRateLimiter()
                else:
                    try:
                        limiter_class = import_string(limiter_path)
                    except ImportError as e:
                        raise ImproperlyConfigured(
                            f"Failed to import rate limiter '{limiter_path}': {e}"
                        ) from e
                    _rate_limiter = limiter_class()
                    logger.debug("Loaded rate limiter: %s", limiter_path)

    return _rate_limiter


def reset_rate_limiter() -> None:
    """Reset the cached limiter. Useful for testing."""
    global _rate_limiter
    _rate_limiter = None


def check_rate_limit(user, operation: RateLimitOperation) -> None:
    """
    Ask the limiter on behalf of `user`.

    Raises:
        RackError('RATE_LIMITED')
    """
    key = str(user.pk) if user is not None else "anonymous"
    if not get_rate_limiter().allow(key, operation):
        logger.warning(
            "rackman.rate_limited",
            extra={"key": key, "operation": operation.value},
        )
        raise RackError("RATE_LIMITED", key=key, operation=operation.value)
