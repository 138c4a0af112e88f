"""
Order Events

Integration events are written to the outbox inside the transaction that
produced them and dispatched through Django signals once it commits.
Undispatched events are retried by the ``dispatch_order_events`` command.
"""

import logging
from typing import Dict, List

from django.db import transaction
from django.utils import timezone

from .models import Order, OutboxEvent
from .module import DISPATCH_BATCH_SIZE
from .signals import order_created

logger = logging.getLogger(__name__)

EVENT_SIGNALS = {
    OutboxEvent.ORDER_CREATED: order_created,
}


def build_order_created_payload(order: Order) -> Dict:
    """Payload consumed by kitchen/bar printing and display fan-out."""
    items = order.items.select_related('product').prefetch_related('accompaniments')
    return {
        'order_id': str(order.id),
        'order_number': order.order_number,
        'table_number': order.table.number if order.table else None,
        'waiter_id': str(order.waiter_id),
        'waiter_name': order.waiter.name,
        'total_amount': str(order.total_amount),
        'order_type': order.order_type,
        'created_at': order.created_at.isoformat(),
        'items': [
            {
                'product_id': str(item.product_id),
                'product_name': item.product_name,
                'quantity': item.quantity,
                'price': str(item.unit_price),
                'preparation_location': item.product.preparation_location,
                'notes': item.notes,
                'accompaniments': [a.name for a in item.accompaniments.all()],
            }
            for item in items
        ],
    }


def items_for_location(payload: Dict, location) -> List[Dict]:
    """Items of an order-created payload prepared at ``location``."""
    return [
        item for item in payload.get('items', [])
        if item['preparation_location'] == str(location)
    ]


def record_order_created(order: Order) -> OutboxEvent:
    """
    Write the order-created event in the current transaction.

    Dispatch is scheduled for after commit; a rollback discards both the
    order and its event.
    """
    event = OutboxEvent.objects.create(
        event_type=OutboxEvent.ORDER_CREATED,
        payload=build_order_created_payload(order),
    )
    transaction.on_commit(lambda: dispatch_event(event.pk), robust=True)
    return event


def dispatch_event(event_id) -> bool:
    """Send one pending event to its signal receivers. Returns True when sent."""
    with transaction.atomic():
        event = OutboxEvent.objects.select_for_update().filter(
            pk=event_id, dispatched_at__isnull=True,
        ).first()
        if event is None:
            return False

        signal = EVENT_SIGNALS.get(event.event_type)
        event.attempts += 1
        if signal is None:
            event.last_error = f"No signal registered for {event.event_type}"
            event.save(update_fields=['attempts', 'last_error', 'updated_at'])
            logger.error("Outbox event %s has unknown type %s", event.pk, event.event_type)
            return False

        try:
            with transaction.atomic():
                signal.send(sender=OutboxEvent, event=event.payload)
        except Exception as e:
            # The order is already committed; keep the event for a retry.
            logger.exception("Failed to dispatch outbox event %s (%s)", event.pk, event.event_type)
            event.last_error = str(e)
            event.save(update_fields=['attempts', 'last_error', 'updated_at'])
            return False

        event.dispatched_at = timezone.now()
        event.last_error = ''
        event.save(update_fields=['attempts', 'last_error', 'dispatched_at', 'updated_at'])

    logger.info("Dispatched outbox event %s (%s)", event_id, event.event_type)
    return True


def dispatch_pending_events(limit: int = DISPATCH_BATCH_SIZE) -> int:
    """Retry undispatched events, oldest first. Returns how many were sent."""
    pending = list(
        OutboxEvent.objects.filter(dispatched_at__isnull=True)
        .order_by('created_at')
        .values_list('pk', flat=True)[:limit]
    )
    return sum(1 for event_id in pending if dispatch_event(event_id))
