"""
Order Service

Handles business logic for order operations. Creation, item additions,
cancellation and completion each run in a single database transaction:
stock, inventory log, notifications, table status and outbox event are
committed together or not at all.
"""

import logging
import uuid
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from django.core.exceptions import ValidationError
from django.db import transaction
from django.utils import timezone

from .. import events
from ..exceptions import InvalidOperationError, NotFoundError
from ..models import (
    Accompaniment,
    CafeTable,
    Employee,
    InventoryLog,
    Order,
    OrderItem,
    OrderItemAccompaniment,
    OrdersSettings,
    Product,
    StoreProduct,
    status_rank,
)
from ..signals import order_cancelled, order_completed, send_on_commit
from .accompaniment_service import AccompanimentService, normalize_ids
from .inventory_service import InventoryService
from .table_service import TableService

logger = logging.getLogger(__name__)


@dataclass
class PricedLine:
    """A validated order line, ready to be written."""

    product: Product
    quantity: int
    notes: str = ''
    accompaniments: List[Accompaniment] = field(default_factory=list)
    unit_price: Decimal = Decimal('0.00')

    @property
    def subtotal(self) -> Decimal:
        return self.unit_price * self.quantity


class OrderService:
    """Service for managing orders."""

    # ---- Lookups ----

    @staticmethod
    def _get_active_waiter(waiter_id) -> Employee:
        try:
            return Employee.objects.get(pk=waiter_id, is_active=True)
        except (Employee.DoesNotExist, ValidationError):
            raise NotFoundError(f"Waiter {waiter_id} not found")

    @staticmethod
    def _lock_order(order_id) -> Order:
        try:
            return Order.objects.select_for_update().get(pk=order_id)
        except (Order.DoesNotExist, ValidationError):
            raise NotFoundError(f"Order {order_id} not found")

    @staticmethod
    def _lock_table(table_id) -> CafeTable:
        try:
            return CafeTable.objects.select_for_update().get(pk=table_id)
        except (CafeTable.DoesNotExist, ValidationError):
            raise NotFoundError(f"Table {table_id} not found")

    @staticmethod
    def _lock_order_and_table(order_id) -> Tuple[Order, Optional[CafeTable]]:
        """Lock an order's table before the order itself, as create_order does."""
        try:
            table_id = Order.objects.values_list('table_id', flat=True).get(pk=order_id)
        except (Order.DoesNotExist, ValidationError):
            raise NotFoundError(f"Order {order_id} not found")
        table = OrderService._lock_table(table_id) if table_id else None
        return OrderService._lock_order(order_id), table

    @staticmethod
    def _product_key(product_id) -> str:
        try:
            return str(uuid.UUID(str(product_id)))
        except ValueError:
            raise InvalidOperationError(f"Product {product_id} not available")

    @staticmethod
    def _lock_products(product_ids) -> Dict[str, Product]:
        """Lock every requested product up front, in primary-key order."""
        keys = {OrderService._product_key(product_id) for product_id in product_ids}
        return {str(p.pk): p for p in InventoryService.lock_products(keys)}

    @staticmethod
    def _get_product(product_id, products: Dict[str, Product]) -> Product:
        product = products.get(OrderService._product_key(product_id))
        if product is None:
            raise InvalidOperationError(f"Product {product_id} not available")
        return product

    # ---- Validation & pricing ----

    @staticmethod
    def _parse_quantity(value) -> int:
        """Whole positive quantities only; fractions are rejected, not truncated."""
        if isinstance(value, str) and value.strip().isdigit():
            value = int(value.strip())
        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidOperationError("Quantity must be a whole number")
        if value < 1:
            raise InvalidOperationError("Quantity must be at least 1")
        return value

    @staticmethod
    def _price_line(item_data: Dict, products: Dict, reserved: Dict) -> PricedLine:
        """
        Validate one requested line and compute its unit price.

        ``products`` holds the already locked products. ``reserved``
        accumulates quantities per product so several lines of the same
        product are checked against its stock together.
        """
        quantity = OrderService._parse_quantity(item_data.get('quantity', 1))

        product = OrderService._get_product(item_data.get('product_id'), products)
        if not product.is_available:
            raise InvalidOperationError(f"Product {product.name} not available")

        key = str(product.pk)
        reserved[key] = reserved.get(key, 0) + quantity
        if product.stock < reserved[key]:
            raise InvalidOperationError(f"Insufficient stock for {product.name}")

        selected = item_data.get('accompaniment_ids') or []
        accompaniments = []
        if selected:
            result = AccompanimentService.validate_selection(product.pk, selected)
            if not result.is_valid:
                raise InvalidOperationError('; '.join(result.errors), errors=result.errors)
            accompaniments = AccompanimentService.get_for_product(product, selected)
            if len(accompaniments) != len(normalize_ids(selected)):
                raise InvalidOperationError(
                    f"Unknown accompaniment selected for {product.name}"
                )

        extra = AccompanimentService.calculate_total_extra_charges([a.pk for a in accompaniments])
        return PricedLine(
            product=product,
            quantity=quantity,
            notes=item_data.get('notes') or '',
            accompaniments=accompaniments,
            unit_price=product.price + extra,
        )

    @staticmethod
    def _check_ingredients(lines: List[PricedLine], settings: OrdersSettings):
        """Lock the store items the lines consume; under ``reject`` fail on any shortfall."""
        requirements = {}
        for line in lines:
            for store_product_id, amount in InventoryService.ingredient_requirements(
                line.product, line.quantity,
            ).items():
                requirements[store_product_id] = requirements.get(store_product_id, 0) + amount
        shortfalls = InventoryService.find_shortfalls(requirements)
        if shortfalls and settings.rejects_shortfall:
            raise InvalidOperationError('; '.join(shortfalls), errors=shortfalls)

    # ---- Writes ----

    @staticmethod
    def _write_line(order: Order, line: PricedLine) -> Tuple[OrderItem, List[StoreProduct]]:
        """Persist a priced line and take its stock. Returns the item and low store items."""
        item = OrderItem.objects.create(
            order=order,
            product=line.product,
            product_name=line.product.name,
            unit_price=line.unit_price,
            quantity=line.quantity,
            notes=line.notes,
            status=OrderItem.Status.PENDING,
        )
        for accompaniment in line.accompaniments:
            OrderItemAccompaniment.objects.create(
                order_item=item,
                accompaniment=accompaniment,
                name=accompaniment.name,
                price_at_order=accompaniment.extra_charge,
            )

        InventoryService.change_product_stock(line.product.pk, -line.quantity)
        line.product.stock -= line.quantity
        low = InventoryService.deduct_for_item(item, f"Order {order.order_number}")
        return item, low

    @staticmethod
    def _lock_item_stock(items: List[OrderItem]):
        """Lock the products and store items that compensating ``items`` will touch."""
        InventoryService.lock_products({item.product_id for item in items})
        InventoryService.lock_store_products(
            InventoryLog.objects.filter(order_item__in=items).values_list('store_product_id', flat=True)
        )

    @staticmethod
    def _compensate_item(item: OrderItem, reason: str):
        """Give back everything an item took and mark it cancelled."""
        InventoryService.change_product_stock(item.product_id, item.quantity)
        InventoryService.restore_for_item(item, reason)
        item.status = OrderItem.Status.CANCELLED
        item.save(update_fields=['status', 'updated_at'])

    # ---- Lifecycle ----

    @staticmethod
    def create_order(
        waiter_id,
        items: List[Dict],
        table_id=None,
        order_type: str = Order.OrderType.DINE_IN,
        is_partner_order: bool = False,
        notes: str = '',
    ) -> Order:
        """
        Create a new order with items.

        Args:
            waiter_id: Active employee placing the order
            items: List of dicts with product_id, quantity, notes, accompaniment_ids
            table_id: Table ID (required for dine-in)
            order_type: dine_in or takeaway
            is_partner_order: Order placed for a partner
            notes: Order notes

        Returns:
            The created Order, with waiter, table and items loaded
        """
        waiter = OrderService._get_active_waiter(waiter_id)
        if order_type not in Order.OrderType.values:
            raise InvalidOperationError(f"Unknown order type: {order_type}")
        if order_type == Order.OrderType.DINE_IN and not table_id:
            raise InvalidOperationError("Dine-in orders require a table")
        if not items:
            raise InvalidOperationError("Order must contain at least one item")

        with transaction.atomic():
            table = OrderService._lock_table(table_id) if table_id else None
            settings = OrdersSettings.get_settings()

            # Lock order: table, products, store items, then the day's number sequence.
            products = OrderService._lock_products(data.get('product_id') for data in items)
            reserved = {}
            lines = [OrderService._price_line(data, products, reserved) for data in items]
            OrderService._check_ingredients(lines, settings)

            order = Order.objects.create(
                order_number=Order.generate_order_number(),
                waiter=waiter,
                table=table,
                order_type=order_type,
                is_partner_order=is_partner_order,
                notes=notes or '',
                status=Order.Status.PENDING,
            )

            low_stock = []
            total = Decimal('0.00')
            for line in lines:
                item, low = OrderService._write_line(order, line)
                total += item.subtotal
                low_stock.extend(low)

            order.total_amount = total
            order.save(update_fields=['total_amount', 'updated_at'])

            InventoryService.alert_low_stock(low_stock, settings)
            if table is not None:
                TableService.occupy(table)
            events.record_order_created(order)

        logger.info("Order %s created by %s: %s", order.order_number, waiter.name, order.total_amount)
        return OrderService.get_order(order.pk)

    @staticmethod
    def add_item_to_order(
        order_id,
        product_id,
        quantity: int = 1,
        notes: str = '',
        accompaniment_ids: Optional[List] = None,
    ) -> OrderItem:
        """Add an item to an order that is still open."""
        with transaction.atomic():
            order = OrderService._lock_order(order_id)
            if order.is_terminal:
                raise InvalidOperationError(f"Cannot add items to a {order.status} order")

            settings = OrdersSettings.get_settings()
            line = OrderService._price_line(
                {
                    'product_id': product_id,
                    'quantity': quantity,
                    'notes': notes,
                    'accompaniment_ids': accompaniment_ids,
                },
                OrderService._lock_products([product_id]), {},
            )
            OrderService._check_ingredients([line], settings)

            item, low = OrderService._write_line(order, line)
            order.total_amount = order.total_amount + item.subtotal
            order.save(update_fields=['total_amount', 'updated_at'])
            InventoryService.alert_low_stock(low, settings)

        logger.info("Added %dx %s to order %s", item.quantity, item.product_name, order.order_number)
        return item

    @staticmethod
    def update_order_status(order_id, status: str) -> Order:
        """
        Move an order forward. Cancelling and completing go through their
        own operations so stock and tables are handled.
        """
        if status not in Order.Status.values:
            raise InvalidOperationError(f"Unknown order status: {status}")
        if status == Order.Status.CANCELLED:
            return OrderService.cancel_order(order_id)
        if status == Order.Status.COMPLETED:
            return OrderService.complete_order(order_id)

        with transaction.atomic():
            order = OrderService._lock_order(order_id)
            if order.is_terminal:
                raise InvalidOperationError(f"Order {order.order_number} is already {order.status}")
            if status_rank(status) < status_rank(order.status):
                raise InvalidOperationError(
                    f"Cannot move order {order.order_number} from {order.status} back to {status}"
                )
            if status == order.status:
                return order

            order.status = status
            order.save(update_fields=['status', 'updated_at'])

            if status == Order.Status.PREPARING:
                behind = [OrderItem.Status.PENDING]
            else:
                behind = [OrderItem.Status.PENDING, OrderItem.Status.PREPARING]
            order.items.filter(status__in=behind).update(status=status, updated_at=timezone.now())

        logger.info("Order %s status updated to %s", order.order_number, status)
        return order

    @staticmethod
    def complete_order(order_id) -> Order:
        with transaction.atomic():
            order, table = OrderService._lock_order_and_table(order_id)
            if order.status == Order.Status.COMPLETED:
                raise InvalidOperationError(f"Order {order.order_number} is already completed")
            if order.status == Order.Status.CANCELLED:
                raise InvalidOperationError("Cannot complete cancelled order")

            now = timezone.now()
            order.status = Order.Status.COMPLETED
            order.completed_at = now
            order.save(update_fields=['status', 'completed_at', 'updated_at'])

            order.items.exclude(status=OrderItem.Status.CANCELLED).update(
                status=OrderItem.Status.COMPLETED, updated_at=now,
            )
            TableService.refresh_occupancy(table)

            send_on_commit(order_completed, sender=Order, order=order)

        logger.info("Order %s completed", order.order_number)
        return order

    @staticmethod
    def cancel_order(order_id, reason: str = '') -> Order:
        """
        Cancel an order and give back all stock its items took.

        Restores product stock and exactly the ingredient amounts logged
        for each item, then releases the table if nothing else is open on it.
        """
        with transaction.atomic():
            order, table = OrderService._lock_order_and_table(order_id)
            if order.status == Order.Status.COMPLETED:
                raise InvalidOperationError("Cannot cancel completed order")
            if order.status == Order.Status.CANCELLED:
                raise InvalidOperationError(f"Order {order.order_number} is already cancelled")

            restore_reason = f"Cancelled order {order.order_number}"
            if reason:
                restore_reason = f"{restore_reason}: {reason}"
            items = list(order.items.exclude(status=OrderItem.Status.CANCELLED))
            OrderService._lock_item_stock(items)
            for item in items:
                OrderService._compensate_item(item, restore_reason)

            order.status = Order.Status.CANCELLED
            if reason:
                order.notes = f"{order.notes}\nCancelled: {reason}".strip()
            order.total_amount = order.calculate_total()
            order.save(update_fields=['status', 'notes', 'total_amount', 'updated_at'])

            TableService.refresh_occupancy(table)

            send_on_commit(order_cancelled, sender=Order, order=order, reason=reason)

        logger.info("Order %s cancelled%s", order.order_number, f": {reason}" if reason else '')
        return order

    @staticmethod
    def cancel_item(item_id, reason: str = '') -> OrderItem:
        """Cancel a single item of an open order and give back its stock."""
        with transaction.atomic():
            try:
                order_id = OrderItem.objects.values_list('order_id', flat=True).get(pk=item_id)
            except (OrderItem.DoesNotExist, ValidationError):
                raise NotFoundError(f"Order item {item_id} not found")

            order = OrderService._lock_order(order_id)
            item = OrderItem.objects.select_for_update().get(pk=item_id)
            if order.is_terminal:
                raise InvalidOperationError(f"Order {order.order_number} is already {order.status}")
            if item.is_terminal:
                raise InvalidOperationError(f"Item {item.product_name} is already {item.status}")

            restore_reason = f"Cancelled item {item.product_name} of order {order.order_number}"
            if reason:
                restore_reason = f"{restore_reason}: {reason}"
            OrderService._lock_item_stock([item])
            OrderService._compensate_item(item, restore_reason)

            order.total_amount = order.calculate_total()
            order.save(update_fields=['total_amount', 'updated_at'])

        logger.info("Item %s of order %s cancelled", item.product_name, order.order_number)
        return item

    @staticmethod
    def update_item_status(item_id, status: str) -> OrderItem:
        """Move one item forward; the order turns ready once all its items are."""
        if status not in OrderItem.Status.values:
            raise InvalidOperationError(f"Unknown item status: {status}")
        if status == OrderItem.Status.CANCELLED:
            return OrderService.cancel_item(item_id)

        with transaction.atomic():
            try:
                order_id = OrderItem.objects.values_list('order_id', flat=True).get(pk=item_id)
            except (OrderItem.DoesNotExist, ValidationError):
                raise NotFoundError(f"Order item {item_id} not found")
            order = OrderService._lock_order(order_id)
            item = OrderItem.objects.select_for_update().get(pk=item_id)

            if order.is_terminal or item.is_terminal:
                raise InvalidOperationError(f"Item {item.product_name} can no longer change")
            if status_rank(status) < status_rank(item.status):
                raise InvalidOperationError(
                    f"Cannot move item {item.product_name} from {item.status} back to {status}"
                )
            item.status = status
            item.save(update_fields=['status', 'updated_at'])

            pending = order.items.exclude(
                status__in=[OrderItem.Status.READY, OrderItem.Status.COMPLETED, OrderItem.Status.CANCELLED],
            ).exists()
            if not pending and status_rank(order.status) < status_rank(Order.Status.READY):
                order.status = Order.Status.READY
                order.save(update_fields=['status', 'updated_at'])
                logger.info("Order %s ready", order.order_number)

        return item

    # ---- Queries ----

    @staticmethod
    def _materialized():
        return Order.objects.select_related('waiter', 'table').prefetch_related(
            'items', 'items__product', 'items__accompaniments',
        )

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return OrderService._materialized().get(pk=order_id)
        except (Order.DoesNotExist, ValidationError):
            raise NotFoundError(f"Order {order_id} not found")

    @staticmethod
    def get_active_orders() -> List[Order]:
        return list(OrderService._materialized().filter(
            status__in=Order.ACTIVE_STATUSES,
        ).order_by('created_at'))

    @staticmethod
    def get_orders_by_table(table_id) -> List[Order]:
        """Get all active orders for a table."""
        return list(OrderService._materialized().filter(
            table_id=table_id,
            status__in=Order.ACTIVE_STATUSES,
        ).order_by('created_at'))

    @staticmethod
    def get_orders(waiter_id=None, status: str = None, date_from=None, date_to=None) -> List[Order]:
        qs = OrderService._materialized()
        if waiter_id:
            qs = qs.filter(waiter_id=waiter_id)
        if status:
            qs = qs.filter(status=status)
        if date_from:
            qs = qs.filter(created_at__gte=date_from)
        if date_to:
            qs = qs.filter(created_at__lte=date_to)
        return list(qs.order_by('-created_at'))

    @staticmethod
    def serialize_order(order: Order) -> Dict[str, Any]:
        return {
            'id': str(order.id),
            'order_number': order.order_number,
            'status': order.status,
            'order_type': order.order_type,
            'is_partner_order': order.is_partner_order,
            'table_number': order.table.number if order.table else None,
            'waiter_id': str(order.waiter_id),
            'waiter_name': order.waiter.name,
            'total_amount': str(order.total_amount),
            'notes': order.notes,
            'created_at': order.created_at.isoformat(),
            'updated_at': order.updated_at.isoformat(),
            'completed_at': order.completed_at.isoformat() if order.completed_at else None,
            'items': [
                {
                    'id': str(item.id),
                    'product_id': str(item.product_id),
                    'product_name': item.product.name,
                    'quantity': item.quantity,
                    'unit_price': str(item.unit_price),
                    'subtotal': str(item.subtotal),
                    'status': item.status,
                    'notes': item.notes,
                    'preparation_location': item.product.preparation_location,
                    'accompaniments': [
                        {
                            'id': str(a.accompaniment_id),
                            'name': a.name,
                            'price_at_order': str(a.price_at_order),
                        }
                        for a in item.accompaniments.all()
                    ],
                }
                for item in order.items.all()
            ],
        }
