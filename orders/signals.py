"""
Orders Module Signals

Integration points for printing, kitchen/bar displays and alerting.
Every signal is sent after the emitting transaction commits.
"""

import logging
from django.db import transaction
from django.dispatch import Signal

logger = logging.getLogger(__name__)

# Signals this module emits
order_created = Signal()  # Provides: event (order-created payload dict)
order_completed = Signal()  # Provides: order
order_cancelled = Signal()  # Provides: order, reason
low_stock = Signal()  # Provides: store_product


def send_on_commit(signal, sender, **kwargs):
    """
    Send ``signal`` once the current transaction commits.

    A failing receiver is logged and does not reach the caller, whose
    changes are already committed, nor stop the other receivers.
    """
    def send():
        for receiver, response in signal.send_robust(sender=sender, **kwargs):
            if isinstance(response, Exception):
                logger.error(
                    "Signal receiver %s failed for %s: %s",
                    getattr(receiver, '__qualname__', receiver), sender.__name__, response,
                    exc_info=response,
                )

    transaction.on_commit(send, robust=True)
