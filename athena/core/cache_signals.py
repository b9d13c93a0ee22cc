"""
Cache invalidation signals
Automatically invalidate cached dashboard figures when stock or journal data changes
"""
import logging
import threading
from contextlib import contextmanager

from django.core.cache import cache
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

logger = logging.getLogger(__name__)

DASHBOARD_CACHE_PREFIX = 'dashboard_summary'

# Models whose changes affect the dashboard figures
WATCHED_MODELS = {
    'inventory.InventoryItem',
    'movements.DailyBon',
    'movements.BonPds',
    'movements.Msk',
}

# Thread-local storage to track signal suspension
_thread_locals = threading.local()


@contextmanager
def suspend_cache_signals():
    """
    Temporarily suspend cache invalidation signals.
    Used by bulk operations (imports, delete-all); they invalidate once afterwards.
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


def dashboard_cache_version_key():
    return f'{DASHBOARD_CACHE_PREFIX}:version'


def get_dashboard_cache_version():
    try:
        return cache.get(dashboard_cache_version_key(), 1)
    except Exception as e:
        logger.warning(f"Cache unavailable, using default version: {e}")
        return 1


def invalidate_dashboard_cache():
    """Bump the dashboard version so every cached summary becomes stale"""
    key = dashboard_cache_version_key()
    try:
        try:
            cache.incr(key)
        except ValueError:
            cache.set(key, 2, None)
        logger.debug("Dashboard cache invalidated")
    except Exception as e:
        logger.warning(f"Failed to invalidate dashboard cache: {e}")


@receiver(post_save)
@receiver(post_delete)
def invalidate_on_stock_change(sender, **kwargs):
    if is_suspended():
        return
    if sender._meta.label in WATCHED_MODELS:
        invalidate_dashboard_cache()
