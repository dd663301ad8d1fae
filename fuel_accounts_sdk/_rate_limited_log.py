"""
Thread-safe rate-limited logging.

Used by the provider while it polls for a commit, so that a transaction that
stays pending for a while does not flood the log with identical lines.
"""
import logging
import threading
from typing import Dict, Optional

from cachetools import TTLCache

logger = logging.getLogger(__name__)

# One TTL cache per interval; an entry lives exactly `interval` seconds
_caches: Dict[int, TTLCache] = {}
_caches_lock = threading.RLock()


def _cache_for(interval: int) -> TTLCache:
    with _caches_lock:
        cache = _caches.get(interval)
        if cache is None:
            cache = TTLCache(maxsize=256, ttl=interval)
            _caches[interval] = cache
        return cache


def rate_limited_log(
    key: str,
    message: str,
    level: str = "warning",
    interval: int = 30,
    logger_instance: Optional[logging.Logger] = None
) -> bool:
    """
    Log `message` at most once per `interval` seconds for a given `key`.

    Args:
        key: Identity of the event (e.g. a transaction id)
        message: Message to log
        level: Log level name (debug, info, warning, error, critical)
        interval: Minimum number of seconds between two logs for the same key
        logger_instance: Logger to use (defaults to this module's logger)

    Returns:
        True if the message was emitted, False if it was suppressed
    """
    log_instance = logger_instance or logger
    log_method = getattr(log_instance, level.lower(), log_instance.warning)
    cache_key = f"{level}:{key}"

    cache = _cache_for(interval)
    with _caches_lock:
        if cache_key in cache:
            return False
        cache[cache_key] = True

    log_method(message)
    return True


def reset() -> None:
    """Forget every rate-limit entry."""
    with _caches_lock:
        for cache in _caches.values():
            cache.clear()
