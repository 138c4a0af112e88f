"""
Table Service

A table is occupied exactly while it has an order that is neither
completed nor cancelled. Always called inside the transaction that
changed the order.
"""

import logging

from ..models import CafeTable, Order

logger = logging.getLogger(__name__)


class TableService:

    @staticmethod
    def has_active_orders(table: CafeTable, exclude_order: Order = None) -> bool:
        qs = Order.objects.filter(table=table, status__in=Order.ACTIVE_STATUSES)
        if exclude_order is not None:
            qs = qs.exclude(pk=exclude_order.pk)
        return qs.exists()

    @staticmethod
    def occupy(table: CafeTable) -> CafeTable:
        if table.status != CafeTable.Status.OCCUPIED:
            table.status = CafeTable.Status.OCCUPIED
            table.save(update_fields=['status', 'updated_at'])
        return table

    @staticmethod
    def refresh_occupancy(table: CafeTable) -> CafeTable:
        """Recompute the table status from its orders."""
        if table is None:
            return None
        if TableService.has_active_orders(table):
            return TableService.occupy(table)
        if table.status != CafeTable.Status.AVAILABLE:
            table.status = CafeTable.Status.AVAILABLE
            table.save(update_fields=['status', 'updated_at'])
            logger.info("Table %s released", table.number)
        return table
