"""
Orders services: one service per part of the order workflow.

- OrderService: order lifecycle (create, add item, status, complete, cancel)
- AccompanimentService: modifier selection rules and extra charges
- InventoryService: product and store stock movements with audit log
- NotificationService: staff notifications (low stock alerts)
- TableService: table occupancy
"""

from .accompaniment_service import AccompanimentService, SelectionResult
from .inventory_service import InventoryService
from .notification_service import NotificationService
from .order_service import OrderService
from .table_service import TableService

__all__ = [
    'AccompanimentService',
    'SelectionResult',
    'InventoryService',
    'NotificationService',
    'OrderService',
    'TableService',
]
