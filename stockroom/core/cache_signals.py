"""
Cache invalidation signals
Clear the dashboard stats when the rows behind them change
"""
from contextlib import contextmanager
import threading

from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .cache_utils import invalidate_dashboard_cache


_thread_locals = threading.local()


@contextmanager
def suspend_cache_signals():
    """
    Suspend invalidation for bulk writes.
    Call invalidate_dashboard_cache() once the block is done.
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


@receiver([post_save, post_delete])
def invalidate_dashboard_stats(sender, instance, **kwargs):
    """Invalidate dashboard stats when products, customers or orders change"""
    if is_suspended():
        return
    if sender.__name__ not in ('Product', 'Customer', 'Order'):
        return

    from stockroom.catalog.models import Product
    from stockroom.orders.models import Order
    from stockroom.parties.models import Customer

    if isinstance(instance, (Product, Customer, Order)):
        # After commit, so a concurrent read cannot cache the old rows again
        transaction.on_commit(invalidate_dashboard_cache)
