"""
Orders Module Models

Order lifecycle for restaurants, bars and cafes.
Features:
- Waiter orders against tables (dine-in) or takeaway
- Line items priced at order time with accompaniment snapshots
- Products with ingredient recipes drawn from store stock
- Append-only inventory log for every stock movement
- Low-stock notifications for administrators
- Transactional outbox for order events
"""

import uuid
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models, transaction
from django.db.models import Sum
from django.utils import timezone
from django.utils.translation import gettext_lazy as _


class BaseModel(models.Model):
    """Common identity and timestamps."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# =============================================================================
# Settings
# =============================================================================

class OrdersSettings(models.Model):
    """Singleton configuration for the orders module."""

    # Single row with pk=1, so an integer key rather than the UUID of BaseModel.
    id = models.BigAutoField(primary_key=True)

    class ShortfallPolicy(models.TextChoices):
        WARN = 'warn', _('Log a warning and deduct anyway')
        REJECT = 'reject', _('Reject the order')

    ingredient_shortfall_policy = models.CharField(
        max_length=10, choices=ShortfallPolicy.choices,
        default=ShortfallPolicy.WARN,
        verbose_name=_('Ingredient Shortfall Policy'),
    )
    low_stock_notifications = models.BooleanField(
        default=True, verbose_name=_('Low Stock Notifications'),
    )

    class Meta:
        db_table = 'orders_settings'
        verbose_name = _('Orders Settings')
        verbose_name_plural = _('Orders Settings')

    def __str__(self):
        return "Orders Settings"

    @classmethod
    def get_settings(cls):
        from .module import SETTINGS

        settings, _ = cls.objects.get_or_create(pk=1, defaults={
            'ingredient_shortfall_policy': SETTINGS['ingredient_shortfall_policy'],
            'low_stock_notifications': SETTINGS['low_stock_notifications'],
        })
        return settings

    @property
    def rejects_shortfall(self):
        return self.ingredient_shortfall_policy == self.ShortfallPolicy.REJECT


# =============================================================================
# Staff
# =============================================================================

class Employee(BaseModel):
    """Staff member: waiters place orders, admins receive stock alerts."""

    class Role(models.TextChoices):
        ADMIN = 'admin', _('Admin')
        MANAGER = 'manager', _('Manager')
        WAITER = 'waiter', _('Waiter')
        BARTENDER = 'bartender', _('Bartender')
        KITCHEN = 'kitchen', _('Kitchen')

    name = models.CharField(max_length=150, verbose_name=_('Name'))
    email = models.EmailField(unique=True, verbose_name=_('Email'))
    role = models.CharField(
        max_length=20, choices=Role.choices,
        default=Role.WAITER, verbose_name=_('Role'),
    )
    is_active = models.BooleanField(default=True, verbose_name=_('Active'))

    class Meta:
        db_table = 'orders_employee'
        verbose_name = _('Employee')
        verbose_name_plural = _('Employees')
        ordering = ['name']

    def __str__(self):
        return self.name

    @classmethod
    def active_admins(cls):
        return cls.objects.filter(role=cls.Role.ADMIN, is_active=True)


# =============================================================================
# Tables
# =============================================================================

class CafeTable(BaseModel):
    """Dining table; occupied while it has a non-terminal order."""

    class Status(models.TextChoices):
        AVAILABLE = 'available', _('Available')
        OCCUPIED = 'occupied', _('Occupied')
        RESERVED = 'reserved', _('Reserved')

    number = models.CharField(max_length=20, unique=True, verbose_name=_('Table Number'))
    capacity = models.PositiveIntegerField(default=4, verbose_name=_('Capacity'))
    status = models.CharField(
        max_length=20, choices=Status.choices,
        default=Status.AVAILABLE, verbose_name=_('Status'),
    )
    location = models.CharField(max_length=100, blank=True, verbose_name=_('Location'))

    class Meta:
        db_table = 'orders_cafe_table'
        verbose_name = _('Table')
        verbose_name_plural = _('Tables')
        ordering = ['number']

    def __str__(self):
        return f"Table {self.number}"


# =============================================================================
# Store stock (ingredients)
# =============================================================================

class Store(BaseModel):
    name = models.CharField(max_length=150, verbose_name=_('Name'))
    address = models.CharField(max_length=255, blank=True, verbose_name=_('Address'))

    class Meta:
        db_table = 'orders_store'
        verbose_name = _('Store')
        verbose_name_plural = _('Stores')

    def __str__(self):
        return self.name


class StoreProduct(BaseModel):
    """
    Raw stock item consumed by product recipes.

    current_stock is signed: under the ``warn`` shortfall policy a sale may
    drive it below zero.
    """
    store = models.ForeignKey(
        Store, on_delete=models.CASCADE,
        related_name='products', verbose_name=_('Store'),
    )
    name = models.CharField(max_length=150, verbose_name=_('Name'))
    current_stock = models.IntegerField(default=0, verbose_name=_('Current Stock'))
    minimum_stock = models.PositiveIntegerField(default=10, verbose_name=_('Minimum Stock'))
    unit = models.CharField(max_length=20, default='pcs', verbose_name=_('Unit'))
    purchase_price = models.DecimalField(
        max_digits=10, decimal_places=2,
        default=Decimal('0.00'), verbose_name=_('Purchase Price'),
    )
    last_restocked = models.DateTimeField(default=timezone.now, verbose_name=_('Last Restocked'))

    class Meta:
        db_table = 'orders_store_product'
        verbose_name = _('Store Product')
        verbose_name_plural = _('Store Products')
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.current_stock} {self.unit})"

    @property
    def is_low(self):
        return self.current_stock < self.minimum_stock


# =============================================================================
# Catalog
# =============================================================================

class Product(BaseModel):
    """Sellable menu product."""

    class PreparationLocation(models.TextChoices):
        KITCHEN = 'kitchen', _('Kitchen')
        BAR = 'bar', _('Bar')

    name = models.CharField(max_length=150, verbose_name=_('Name'))
    price = models.DecimalField(
        max_digits=10, decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name=_('Price'),
    )
    is_available = models.BooleanField(default=True, verbose_name=_('Available'))
    stock = models.PositiveIntegerField(default=0, verbose_name=_('Stock'))
    preparation_location = models.CharField(
        max_length=20, choices=PreparationLocation.choices,
        default=PreparationLocation.KITCHEN, verbose_name=_('Preparation Location'),
    )
    preparation_time_minutes = models.PositiveIntegerField(
        default=15, verbose_name=_('Preparation Time (minutes)'),
    )

    class Meta:
        db_table = 'orders_product'
        verbose_name = _('Product')
        verbose_name_plural = _('Products')
        ordering = ['name']

    def __str__(self):
        return self.name


class ProductIngredient(BaseModel):
    """Recipe line: store stock consumed per unit of product sold."""

    product = models.ForeignKey(
        Product, on_delete=models.CASCADE,
        related_name='ingredients', verbose_name=_('Product'),
    )
    store_product = models.ForeignKey(
        StoreProduct, on_delete=models.PROTECT,
        related_name='used_in', verbose_name=_('Store Product'),
    )
    quantity = models.DecimalField(
        max_digits=10, decimal_places=3,
        validators=[MinValueValidator(Decimal('0.000'))],
        verbose_name=_('Quantity per Unit'),
    )

    class Meta:
        db_table = 'orders_product_ingredient'
        verbose_name = _('Product Ingredient')
        verbose_name_plural = _('Product Ingredients')
        unique_together = [('product', 'store_product')]

    def __str__(self):
        return f"{self.product} <- {self.quantity} {self.store_product.name}"


class AccompanimentGroup(BaseModel):
    """Named set of modifiers on a product with selection-count rules."""

    class SelectionType(models.TextChoices):
        SINGLE = 'single', _('Single')
        MULTIPLE = 'multiple', _('Multiple')

    product = models.ForeignKey(
        Product, on_delete=models.CASCADE,
        related_name='accompaniment_groups', verbose_name=_('Product'),
    )
    name = models.CharField(max_length=100, verbose_name=_('Name'))
    selection_type = models.CharField(
        max_length=20, choices=SelectionType.choices,
        default=SelectionType.SINGLE, verbose_name=_('Selection Type'),
    )
    is_required = models.BooleanField(default=False, verbose_name=_('Required'))
    min_selections = models.PositiveIntegerField(null=True, blank=True, verbose_name=_('Min Selections'))
    max_selections = models.PositiveIntegerField(null=True, blank=True, verbose_name=_('Max Selections'))
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'orders_accompaniment_group'
        verbose_name = _('Accompaniment Group')
        verbose_name_plural = _('Accompaniment Groups')
        ordering = ['sort_order', 'name']

    def __str__(self):
        return f"{self.product} / {self.name}"

    @property
    def effective_max(self):
        if self.selection_type == self.SelectionType.SINGLE:
            if self.max_selections is None:
                return 1
            return min(self.max_selections, 1)
        return self.max_selections


class Accompaniment(BaseModel):
    group = models.ForeignKey(
        AccompanimentGroup, on_delete=models.CASCADE,
        related_name='accompaniments', verbose_name=_('Group'),
    )
    name = models.CharField(max_length=100, verbose_name=_('Name'))
    extra_charge = models.DecimalField(
        max_digits=10, decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))],
        verbose_name=_('Extra Charge'),
    )
    is_available = models.BooleanField(default=True, verbose_name=_('Available'))
    sort_order = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = 'orders_accompaniment'
        verbose_name = _('Accompaniment')
        verbose_name_plural = _('Accompaniments')
        ordering = ['sort_order', 'name']

    def __str__(self):
        if self.extra_charge > 0:
            return f"{self.name} (+{self.extra_charge})"
        return self.name


# =============================================================================
# Orders
# =============================================================================

class OrderSequence(BaseModel):
    """Per-day counter behind order numbers."""

    day = models.DateField(unique=True, verbose_name=_('Day'))
    last_value = models.PositiveIntegerField(default=0, verbose_name=_('Last Value'))

    class Meta:
        db_table = 'orders_sequence'
        verbose_name = _('Order Sequence')
        verbose_name_plural = _('Order Sequences')

    def __str__(self):
        return f"{self.day}: {self.last_value}"

    @classmethod
    def next_value(cls, day):
        with transaction.atomic():
            cls.objects.get_or_create(day=day)
            sequence = cls.objects.select_for_update().get(day=day)
            sequence.last_value += 1
            sequence.save(update_fields=['last_value', 'updated_at'])
        return sequence.last_value


class Order(BaseModel):
    """Waiter order ticket."""

    class Status(models.TextChoices):
        PENDING = 'pending', _('Pending')
        PREPARING = 'preparing', _('Preparing')
        READY = 'ready', _('Ready')
        COMPLETED = 'completed', _('Completed')
        CANCELLED = 'cancelled', _('Cancelled')

    class OrderType(models.TextChoices):
        DINE_IN = 'dine_in', _('Dine In')
        TAKEAWAY = 'takeaway', _('Takeaway')

    TERMINAL_STATUSES = (Status.COMPLETED, Status.CANCELLED)
    ACTIVE_STATUSES = (Status.PENDING, Status.PREPARING, Status.READY)

    order_number = models.CharField(max_length=20, unique=True, verbose_name=_('Order Number'))
    waiter = models.ForeignKey(
        Employee, on_delete=models.PROTECT,
        related_name='orders', verbose_name=_('Waiter'),
    )
    table = models.ForeignKey(
        CafeTable, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='orders', verbose_name=_('Table'),
    )
    status = models.CharField(
        max_length=20, choices=Status.choices,
        default=Status.PENDING, verbose_name=_('Status'),
    )
    order_type = models.CharField(
        max_length=20, choices=OrderType.choices,
        default=OrderType.DINE_IN, verbose_name=_('Order Type'),
    )
    is_partner_order = models.BooleanField(default=False, verbose_name=_('Partner Order'))
    total_amount = models.DecimalField(
        max_digits=10, decimal_places=2,
        default=Decimal('0.00'), verbose_name=_('Total Amount'),
    )
    notes = models.TextField(blank=True, default='')
    completed_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Completed At'))

    class Meta:
        db_table = 'orders_order'
        verbose_name = _('Order')
        verbose_name_plural = _('Orders')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='orders_ord_status_idx'),
            models.Index(fields=['table', 'status'], name='orders_ord_table_status_idx'),
            models.Index(fields=['created_at'], name='orders_ord_created_idx'),
        ]

    def __str__(self):
        return f"Order #{self.order_number}"

    # ---- Properties ----

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    @property
    def table_display(self):
        if self.table:
            return self.table.number
        return '-'

    @property
    def item_count(self):
        return self.items.exclude(status=OrderItem.Status.CANCELLED).count()

    # ---- Financial ----

    def calculate_total(self):
        """Sum of subtotals of every non-cancelled item."""
        total = self.items.exclude(
            status=OrderItem.Status.CANCELLED,
        ).aggregate(total=Sum('subtotal'))['total']
        return total or Decimal('0.00')

    # ---- Number generation ----

    @classmethod
    def generate_order_number(cls):
        """Next YYYYMMDD-NNNN number; the day's sequence row stays locked until commit."""
        today = timezone.now()
        number = OrderSequence.next_value(today.date())
        return f"{today.strftime('%Y%m%d')}-{number:04d}"


# Forward-only ordering of order/item statuses; cancelled sits outside it.
STATUS_RANK = {
    Order.Status.PENDING.value: 0,
    Order.Status.PREPARING.value: 1,
    Order.Status.READY.value: 2,
    Order.Status.COMPLETED.value: 3,
}


def status_rank(status):
    return STATUS_RANK.get(str(status))


class OrderItem(BaseModel):
    """Line item priced at order time."""

    class Status(models.TextChoices):
        PENDING = 'pending', _('Pending')
        PREPARING = 'preparing', _('Preparing')
        READY = 'ready', _('Ready')
        COMPLETED = 'completed', _('Completed')
        CANCELLED = 'cancelled', _('Cancelled')

    TERMINAL_STATUSES = (Status.COMPLETED, Status.CANCELLED)

    order = models.ForeignKey(
        Order, on_delete=models.CASCADE,
        related_name='items', verbose_name=_('Order'),
    )
    product = models.ForeignKey(
        Product, on_delete=models.PROTECT,
        related_name='order_items', verbose_name=_('Product'),
    )

    # Snapshot
    product_name = models.CharField(max_length=150, verbose_name=_('Product Name'))
    unit_price = models.DecimalField(
        max_digits=10, decimal_places=2,
        default=Decimal('0.00'), verbose_name=_('Unit Price'),
    )

    quantity = models.PositiveIntegerField(
        default=1, validators=[MinValueValidator(1)],
        verbose_name=_('Quantity'),
    )
    subtotal = models.DecimalField(
        max_digits=10, decimal_places=2,
        default=Decimal('0.00'), verbose_name=_('Subtotal'),
    )
    status = models.CharField(
        max_length=20, choices=Status.choices,
        default=Status.PENDING, verbose_name=_('Status'),
    )
    notes = models.TextField(blank=True, default='', verbose_name=_('Special Instructions'))

    class Meta:
        db_table = 'orders_order_item'
        verbose_name = _('Order Item')
        verbose_name_plural = _('Order Items')
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['order', 'status'], name='orders_item_order_status_idx'),
        ]

    def __str__(self):
        return f"{self.quantity}x {self.product_name}"

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    def save(self, *args, **kwargs):
        self.subtotal = self.unit_price * self.quantity
        if not self.product_name and self.product_id:
            self.product_name = self.product.name
        super().save(*args, **kwargs)


class OrderItemAccompaniment(BaseModel):
    """Selected accompaniment with its charge captured at order time."""

    order_item = models.ForeignKey(
        OrderItem, on_delete=models.CASCADE,
        related_name='accompaniments', verbose_name=_('Order Item'),
    )
    accompaniment = models.ForeignKey(
        Accompaniment, on_delete=models.PROTECT,
        related_name='order_selections', verbose_name=_('Accompaniment'),
    )
    name = models.CharField(max_length=100, verbose_name=_('Name'))
    price_at_order = models.DecimalField(
        max_digits=10, decimal_places=2,
        default=Decimal('0.00'), verbose_name=_('Price at Order'),
    )

    class Meta:
        db_table = 'orders_order_item_accompaniment'
        verbose_name = _('Order Item Accompaniment')
        verbose_name_plural = _('Order Item Accompaniments')

    def __str__(self):
        if self.price_at_order > 0:
            return f"{self.name} (+{self.price_at_order})"
        return self.name


# =============================================================================
# Inventory log
# =============================================================================

class InventoryLog(BaseModel):
    """Append-only audit entry for a store stock movement."""

    class LogType(models.TextChoices):
        SALE = 'sale', _('Sale')
        RESTOCK = 'restock', _('Restock')
        ADJUSTMENT = 'adjustment', _('Adjustment')
        DAMAGE = 'damage', _('Damage')

    store_product = models.ForeignKey(
        StoreProduct, on_delete=models.CASCADE,
        related_name='logs', verbose_name=_('Store Product'),
    )
    quantity_change = models.IntegerField(verbose_name=_('Quantity Change'))
    log_type = models.CharField(
        max_length=20, choices=LogType.choices, verbose_name=_('Type'),
    )
    reason = models.CharField(max_length=255, blank=True, verbose_name=_('Reason'))
    order_item = models.ForeignKey(
        OrderItem, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='inventory_logs', verbose_name=_('Order Item'),
    )

    class Meta:
        db_table = 'orders_inventory_log'
        verbose_name = _('Inventory Log')
        verbose_name_plural = _('Inventory Logs')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['store_product', 'created_at'], name='orders_invlog_sp_created_idx'),
        ]

    def __str__(self):
        return f"{self.store_product.name} {self.quantity_change:+d} ({self.log_type})"


# =============================================================================
# Notifications
# =============================================================================

class Notification(BaseModel):
    class NotificationType(models.TextChoices):
        LOW_STOCK = 'low_stock', _('Low Stock')
        NEW_ORDER = 'new_order', _('New Order')
        ORDER_READY = 'order_ready', _('Order Ready')
        SYSTEM = 'system', _('System')

    recipient = models.ForeignKey(
        Employee, on_delete=models.CASCADE,
        related_name='notifications', verbose_name=_('Recipient'),
    )
    title = models.CharField(max_length=150, verbose_name=_('Title'))
    message = models.TextField(verbose_name=_('Message'))
    notification_type = models.CharField(
        max_length=20, choices=NotificationType.choices,
        default=NotificationType.SYSTEM, verbose_name=_('Type'),
    )
    is_read = models.BooleanField(default=False, verbose_name=_('Read'))
    store_product = models.ForeignKey(
        StoreProduct, on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='notifications', verbose_name=_('Store Product'),
    )

    class Meta:
        db_table = 'orders_notification'
        verbose_name = _('Notification')
        verbose_name_plural = _('Notifications')
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.title} -> {self.recipient}"


# =============================================================================
# Outbox
# =============================================================================

class OutboxEvent(BaseModel):
    """Integration event written in the same transaction as its order."""

    ORDER_CREATED = 'order.created'

    event_type = models.CharField(max_length=50, verbose_name=_('Event Type'))
    payload = models.JSONField(default=dict)
    dispatched_at = models.DateTimeField(null=True, blank=True, verbose_name=_('Dispatched At'))
    attempts = models.PositiveIntegerField(default=0)
    last_error = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'orders_outbox_event'
        verbose_name = _('Outbox Event')
        verbose_name_plural = _('Outbox Events')
        ordering = ['created_at']
        indexes = [
            models.Index(fields=['dispatched_at', 'created_at'], name='orders_outbox_pending_idx'),
        ]

    def __str__(self):
        state = 'sent' if self.dispatched_at else 'pending'
        return f"{self.event_type} ({state})"
