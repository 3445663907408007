"""
Cache helpers for event pool read models.

Keys are built from fixed prefixes; TTLs come from settings.CACHE_TTL_<NAME>.
"""
import logging
from typing import Optional

from django.conf import settings
from django.core.cache import cache
from django.db import transaction

logger = logging.getLogger(__name__)

PREFIX_POOL_STATS = "pool_stats"


def _get_ttl(name: str, default: int = 60) -> int:
    """Get TTL from settings with fallback."""
    setting_name = f"CACHE_TTL_{name.upper()}"
    return getattr(settings, setting_name, default)


def make_key(*parts) -> str:
    return ":".join(str(p) for p in parts)


def get_pool_stats_cache_key(event_id) -> str:
    return make_key(PREFIX_POOL_STATS, event_id)


def get_cached_pool_stats(event_id) -> Optional[dict]:
    return cache.get(get_pool_stats_cache_key(event_id))


def set_cached_pool_stats(event_id, stats: dict) -> None:
    cache.set(get_pool_stats_cache_key(event_id), stats, _get_ttl("pool_stats", 30))


def invalidate_pool_stats(event_id) -> None:
    cache.delete(get_pool_stats_cache_key(event_id))


def invalidate_pool_stats_on_commit(event_id) -> None:
    """
    Drop cached stats now and again once the surrounding transaction commits,
    so a reader that re-cached pre-commit totals in between is overwritten.
    """
    invalidate_pool_stats(event_id)
    transaction.on_commit(lambda: invalidate_pool_stats(event_id))
