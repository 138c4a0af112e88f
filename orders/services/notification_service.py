"""
Notification Service

Persistent staff notifications. Records are created inside the caller's
transaction; delivery is left to whoever reads them.
"""

import logging
from typing import List

from ..exceptions import NotFoundError
from ..models import Employee, Notification, StoreProduct
from ..signals import low_stock, send_on_commit

logger = logging.getLogger(__name__)


class NotificationService:

    @staticmethod
    def create(recipient: Employee, title: str, message: str,
               notification_type: str = Notification.NotificationType.SYSTEM,
               store_product: StoreProduct = None) -> Notification:
        return Notification.objects.create(
            recipient=recipient,
            title=title,
            message=message,
            notification_type=notification_type,
            store_product=store_product,
        )

    @staticmethod
    def notify_low_stock(store_product: StoreProduct) -> List[Notification]:
        """Alert every active admin that a stock item is below its minimum."""
        admins = list(Employee.active_admins())
        if not admins:
            logger.warning("No active admins to notify about low stock of %s", store_product.name)
            return []

        message = (
            f"{store_product.name} is below minimum stock "
            f"({store_product.current_stock}/{store_product.minimum_stock})"
        )
        notifications = [
            NotificationService.create(
                recipient=admin,
                title='Low Stock Alert',
                message=message,
                notification_type=Notification.NotificationType.LOW_STOCK,
                store_product=store_product,
            )
            for admin in admins
        ]
        logger.info("Low stock alert for %s sent to %d admins", store_product.name, len(admins))

        send_on_commit(low_stock, sender=StoreProduct, store_product=store_product)
        return notifications

    @staticmethod
    def mark_as_read(notification_id) -> Notification:
        try:
            notification = Notification.objects.get(pk=notification_id)
        except Notification.DoesNotExist:
            raise NotFoundError(f"Notification {notification_id} not found")
        if not notification.is_read:
            notification.is_read = True
            notification.save(update_fields=['is_read', 'updated_at'])
        return notification

    @staticmethod
    def get_for_employee(employee_id, unread_only: bool = False) -> List[Notification]:
        qs = Notification.objects.filter(recipient_id=employee_id)
        if unread_only:
            qs = qs.filter(is_read=False)
        return list(qs.order_by('-created_at'))
