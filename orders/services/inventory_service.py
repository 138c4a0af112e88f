"""
Inventory Service

Signed stock movements on products and store stock items. Every store
stock change writes an InventoryLog entry; entries are never edited.
"""

import logging
from datetime import timedelta
from decimal import Decimal, ROUND_CEILING
from typing import Dict, Iterable, List, Tuple

from django.db import transaction
from django.db.models import F, Sum
from django.utils import timezone

from ..exceptions import InvalidOperationError, NotFoundError
from ..models import InventoryLog, OrderItem, OrdersSettings, Product, StoreProduct
from .notification_service import NotificationService

logger = logging.getLogger(__name__)


class InventoryService:

    @staticmethod
    def required_quantity(quantity_per_unit, ordered_quantity: int) -> int:
        """Whole units consumed; fractional recipe amounts round up."""
        amount = Decimal(quantity_per_unit) * ordered_quantity
        return int(amount.to_integral_value(rounding=ROUND_CEILING))

    @staticmethod
    def ingredient_requirements(product: Product, quantity: int) -> Dict:
        """Map of store product id -> units needed to make ``quantity`` of product."""
        needs = {}
        for ingredient in product.ingredients.all():
            amount = InventoryService.required_quantity(ingredient.quantity, quantity)
            if amount:
                needs[ingredient.store_product_id] = needs.get(ingredient.store_product_id, 0) + amount
        return needs

    @staticmethod
    def find_shortfalls(requirements: Dict) -> List[str]:
        """Lock the store items and describe every one that cannot cover its need."""
        if not requirements:
            return []
        shortfalls = []
        for store_product in InventoryService.lock_store_products(requirements):
            needed = requirements[store_product.pk]
            if store_product.current_stock < needed:
                shortfalls.append(
                    f"Insufficient {store_product.name}: need {needed}, "
                    f"have {store_product.current_stock}"
                )
        return shortfalls

    # ---- Row locks ----
    # Rows are always locked in primary-key order: products before store items.

    @staticmethod
    def lock_products(product_ids) -> List[Product]:
        return list(
            Product.objects.select_for_update().filter(pk__in=set(product_ids)).order_by('pk')
        )

    @staticmethod
    def lock_store_products(store_product_ids) -> List[StoreProduct]:
        return list(
            StoreProduct.objects.select_for_update().filter(pk__in=set(store_product_ids)).order_by('pk')
        )

    # ---- Product stock ----

    @staticmethod
    def change_product_stock(product_id, delta: int):
        """Apply a signed delta to a product; never lets stock go below zero."""
        qs = Product.objects.filter(pk=product_id)
        if delta < 0:
            qs = qs.filter(stock__gte=-delta)
        updated = qs.update(stock=F('stock') + delta, updated_at=timezone.now())
        if not updated:
            if not Product.objects.filter(pk=product_id).exists():
                raise NotFoundError(f"Product {product_id} not found")
            raise InvalidOperationError(f"Insufficient stock for product {product_id}")

    # ---- Store stock ----

    @staticmethod
    def apply_change(store_product_id, quantity_change: int, log_type: str,
                     reason: str = '', order_item: OrderItem = None) -> Tuple[StoreProduct, InventoryLog]:
        updated = StoreProduct.objects.filter(pk=store_product_id).update(
            current_stock=F('current_stock') + quantity_change,
            updated_at=timezone.now(),
        )
        if not updated:
            raise NotFoundError(f"Store product {store_product_id} not found")

        entry = InventoryLog.objects.create(
            store_product_id=store_product_id,
            quantity_change=quantity_change,
            log_type=log_type,
            reason=reason[:255],
            order_item=order_item,
        )
        return StoreProduct.objects.get(pk=store_product_id), entry

    @staticmethod
    def deduct_for_item(item: OrderItem, reason: str) -> List[StoreProduct]:
        """
        Consume the recipe of an order item from store stock.

        Returns the store items left below their minimum.
        """
        low = []
        for ingredient in item.product.ingredients.all():
            amount = InventoryService.required_quantity(ingredient.quantity, item.quantity)
            if not amount:
                continue
            store_product, _ = InventoryService.apply_change(
                ingredient.store_product_id, -amount,
                InventoryLog.LogType.SALE, reason, order_item=item,
            )
            if store_product.current_stock < 0:
                logger.warning(
                    "Stock of %s went negative (%d) for %s",
                    store_product.name, store_product.current_stock, reason,
                )
            if store_product.is_low:
                low.append(store_product)
        return low

    @staticmethod
    def restore_for_item(item: OrderItem, reason: str) -> List[InventoryLog]:
        """
        Return to store stock whatever is still deducted for an item.

        Works from the item's own log entries, so it undoes exactly what was
        taken even if the recipe has changed since.
        """
        outstanding = InventoryLog.objects.filter(order_item=item).values(
            'store_product_id',
        ).annotate(net=Sum('quantity_change')).order_by('store_product_id')

        entries = []
        for row in outstanding:
            if row['net'] < 0:
                _, entry = InventoryService.apply_change(
                    row['store_product_id'], -row['net'],
                    InventoryLog.LogType.ADJUSTMENT, reason, order_item=item,
                )
                entries.append(entry)
        return entries

    @staticmethod
    def alert_low_stock(store_products: Iterable[StoreProduct], settings: OrdersSettings = None):
        """Notify admins once per distinct low store item."""
        settings = settings or OrdersSettings.get_settings()
        if not settings.low_stock_notifications:
            return
        seen = {}
        for store_product in store_products:
            seen[store_product.pk] = store_product
        for store_product in seen.values():
            NotificationService.notify_low_stock(store_product)

    @staticmethod
    @transaction.atomic
    def adjust_stock(store_product_id, quantity_change: int, log_type: str,
                     reason: str = '') -> StoreProduct:
        """Manual restock, correction or write-off of a store item."""
        if log_type not in InventoryLog.LogType.values:
            raise InvalidOperationError(f"Unknown inventory log type: {log_type}")
        if log_type == InventoryLog.LogType.SALE:
            raise InvalidOperationError("Sales are recorded by orders only")
        if not quantity_change:
            raise InvalidOperationError("Quantity change must not be zero")

        try:
            store_product = StoreProduct.objects.select_for_update().get(pk=store_product_id)
        except StoreProduct.DoesNotExist:
            raise NotFoundError(f"Store product {store_product_id} not found")

        store_product, _ = InventoryService.apply_change(
            store_product.pk, quantity_change, log_type, reason,
        )
        if log_type == InventoryLog.LogType.RESTOCK:
            store_product.last_restocked = timezone.now()
            store_product.save(update_fields=['last_restocked', 'updated_at'])

        logger.info(
            "Inventory adjusted for %s: %+d (%s)",
            store_product.name, quantity_change, log_type,
        )
        if quantity_change < 0 and store_product.is_low:
            InventoryService.alert_low_stock([store_product])
        return store_product

    @staticmethod
    def get_low_stock_items() -> List[StoreProduct]:
        return list(
            StoreProduct.objects.filter(
                current_stock__lt=F('minimum_stock'),
            ).select_related('store')
        )

    @staticmethod
    def get_logs(store_product_id=None, days: int = 30) -> List[InventoryLog]:
        since = timezone.now() - timedelta(days=days)
        qs = InventoryLog.objects.filter(created_at__gte=since).select_related('store_product')
        if store_product_id:
            qs = qs.filter(store_product_id=store_product_id)
        return list(qs.order_by('-created_at'))
