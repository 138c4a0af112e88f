"""
Initial migration for Orders module.
"""

from decimal import Decimal
import uuid

from django.db import migrations, models
import django.core.validators
import django.db.models.deletion
import django.utils.timezone


def base_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='OrdersSettings',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('ingredient_shortfall_policy', models.CharField(choices=[('warn', 'Log a warning and deduct anyway'), ('reject', 'Reject the order')], default='warn', max_length=10, verbose_name='Ingredient Shortfall Policy')),
                ('low_stock_notifications', models.BooleanField(default=True, verbose_name='Low Stock Notifications')),
            ],
            options={
                'verbose_name': 'Orders Settings',
                'verbose_name_plural': 'Orders Settings',
                'db_table': 'orders_settings',
            },
        ),
        migrations.CreateModel(
            name='Employee',
            fields=base_fields() + [
                ('name', models.CharField(max_length=150, verbose_name='Name')),
                ('email', models.EmailField(max_length=254, unique=True, verbose_name='Email')),
                ('role', models.CharField(choices=[('admin', 'Admin'), ('manager', 'Manager'), ('waiter', 'Waiter'), ('bartender', 'Bartender'), ('kitchen', 'Kitchen')], default='waiter', max_length=20, verbose_name='Role')),
                ('is_active', models.BooleanField(default=True, verbose_name='Active')),
            ],
            options={
                'verbose_name': 'Employee',
                'verbose_name_plural': 'Employees',
                'db_table': 'orders_employee',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='CafeTable',
            fields=base_fields() + [
                ('number', models.CharField(max_length=20, unique=True, verbose_name='Table Number')),
                ('capacity', models.PositiveIntegerField(default=4, verbose_name='Capacity')),
                ('status', models.CharField(choices=[('available', 'Available'), ('occupied', 'Occupied'), ('reserved', 'Reserved')], default='available', max_length=20, verbose_name='Status')),
                ('location', models.CharField(blank=True, max_length=100, verbose_name='Location')),
            ],
            options={
                'verbose_name': 'Table',
                'verbose_name_plural': 'Tables',
                'db_table': 'orders_cafe_table',
                'ordering': ['number'],
            },
        ),
        migrations.CreateModel(
            name='Store',
            fields=base_fields() + [
                ('name', models.CharField(max_length=150, verbose_name='Name')),
                ('address', models.CharField(blank=True, max_length=255, verbose_name='Address')),
            ],
            options={
                'verbose_name': 'Store',
                'verbose_name_plural': 'Stores',
                'db_table': 'orders_store',
            },
        ),
        migrations.CreateModel(
            name='StoreProduct',
            fields=base_fields() + [
                ('name', models.CharField(max_length=150, verbose_name='Name')),
                ('current_stock', models.IntegerField(default=0, verbose_name='Current Stock')),
                ('minimum_stock', models.PositiveIntegerField(default=10, verbose_name='Minimum Stock')),
                ('unit', models.CharField(default='pcs', max_length=20, verbose_name='Unit')),
                ('purchase_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, verbose_name='Purchase Price')),
                ('last_restocked', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Last Restocked')),
                ('store', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='products', to='orders.store', verbose_name='Store')),
            ],
            options={
                'verbose_name': 'Store Product',
                'verbose_name_plural': 'Store Products',
                'db_table': 'orders_store_product',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Product',
            fields=base_fields() + [
                ('name', models.CharField(max_length=150, verbose_name='Name')),
                ('price', models.DecimalField(decimal_places=2, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Price')),
                ('is_available', models.BooleanField(default=True, verbose_name='Available')),
                ('stock', models.PositiveIntegerField(default=0, verbose_name='Stock')),
                ('preparation_location', models.CharField(choices=[('kitchen', 'Kitchen'), ('bar', 'Bar')], default='kitchen', max_length=20, verbose_name='Preparation Location')),
                ('preparation_time_minutes', models.PositiveIntegerField(default=15, verbose_name='Preparation Time (minutes)')),
            ],
            options={
                'verbose_name': 'Product',
                'verbose_name_plural': 'Products',
                'db_table': 'orders_product',
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='ProductIngredient',
            fields=base_fields() + [
                ('quantity', models.DecimalField(decimal_places=3, max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.000'))], verbose_name='Quantity per Unit')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='ingredients', to='orders.product', verbose_name='Product')),
                ('store_product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='used_in', to='orders.storeproduct', verbose_name='Store Product')),
            ],
            options={
                'verbose_name': 'Product Ingredient',
                'verbose_name_plural': 'Product Ingredients',
                'db_table': 'orders_product_ingredient',
                'unique_together': {('product', 'store_product')},
            },
        ),
        migrations.CreateModel(
            name='AccompanimentGroup',
            fields=base_fields() + [
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('selection_type', models.CharField(choices=[('single', 'Single'), ('multiple', 'Multiple')], default='single', max_length=20, verbose_name='Selection Type')),
                ('is_required', models.BooleanField(default=False, verbose_name='Required')),
                ('min_selections', models.PositiveIntegerField(blank=True, null=True, verbose_name='Min Selections')),
                ('max_selections', models.PositiveIntegerField(blank=True, null=True, verbose_name='Max Selections')),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='accompaniment_groups', to='orders.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Accompaniment Group',
                'verbose_name_plural': 'Accompaniment Groups',
                'db_table': 'orders_accompaniment_group',
                'ordering': ['sort_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Accompaniment',
            fields=base_fields() + [
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('extra_charge', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))], verbose_name='Extra Charge')),
                ('is_available', models.BooleanField(default=True, verbose_name='Available')),
                ('sort_order', models.PositiveIntegerField(default=0)),
                ('group', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='accompaniments', to='orders.accompanimentgroup', verbose_name='Group')),
            ],
            options={
                'verbose_name': 'Accompaniment',
                'verbose_name_plural': 'Accompaniments',
                'db_table': 'orders_accompaniment',
                'ordering': ['sort_order', 'name'],
            },
        ),
        migrations.CreateModel(
            name='Order',
            fields=base_fields() + [
                ('order_number', models.CharField(max_length=20, unique=True, verbose_name='Order Number')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('preparing', 'Preparing'), ('ready', 'Ready'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='pending', max_length=20, verbose_name='Status')),
                ('order_type', models.CharField(choices=[('dine_in', 'Dine In'), ('takeaway', 'Takeaway')], default='dine_in', max_length=20, verbose_name='Order Type')),
                ('is_partner_order', models.BooleanField(default=False, verbose_name='Partner Order')),
                ('total_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, verbose_name='Total Amount')),
                ('notes', models.TextField(blank=True, default='')),
                ('completed_at', models.DateTimeField(blank=True, null=True, verbose_name='Completed At')),
                ('waiter', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to='orders.employee', verbose_name='Waiter')),
                ('table', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='orders.cafetable', verbose_name='Table')),
            ],
            options={
                'verbose_name': 'Order',
                'verbose_name_plural': 'Orders',
                'db_table': 'orders_order',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['status'], name='orders_ord_status_idx'),
                    models.Index(fields=['table', 'status'], name='orders_ord_table_status_idx'),
                    models.Index(fields=['created_at'], name='orders_ord_created_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=base_fields() + [
                ('product_name', models.CharField(max_length=150, verbose_name='Product Name')),
                ('unit_price', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, verbose_name='Unit Price')),
                ('quantity', models.PositiveIntegerField(default=1, validators=[django.core.validators.MinValueValidator(1)], verbose_name='Quantity')),
                ('subtotal', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, verbose_name='Subtotal')),
                ('status', models.CharField(choices=[('pending', 'Pending'), ('preparing', 'Preparing'), ('ready', 'Ready'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], default='pending', max_length=20, verbose_name='Status')),
                ('notes', models.TextField(blank=True, default='', verbose_name='Special Instructions')),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='orders.order', verbose_name='Order')),
                ('product', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='order_items', to='orders.product', verbose_name='Product')),
            ],
            options={
                'verbose_name': 'Order Item',
                'verbose_name_plural': 'Order Items',
                'db_table': 'orders_order_item',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['order', 'status'], name='orders_item_order_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItemAccompaniment',
            fields=base_fields() + [
                ('name', models.CharField(max_length=100, verbose_name='Name')),
                ('price_at_order', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=10, verbose_name='Price at Order')),
                ('order_item', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='accompaniments', to='orders.orderitem', verbose_name='Order Item')),
                ('accompaniment', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='order_selections', to='orders.accompaniment', verbose_name='Accompaniment')),
            ],
            options={
                'verbose_name': 'Order Item Accompaniment',
                'verbose_name_plural': 'Order Item Accompaniments',
                'db_table': 'orders_order_item_accompaniment',
            },
        ),
        migrations.CreateModel(
            name='InventoryLog',
            fields=base_fields() + [
                ('quantity_change', models.IntegerField(verbose_name='Quantity Change')),
                ('log_type', models.CharField(choices=[('sale', 'Sale'), ('restock', 'Restock'), ('adjustment', 'Adjustment'), ('damage', 'Damage')], max_length=20, verbose_name='Type')),
                ('reason', models.CharField(blank=True, max_length=255, verbose_name='Reason')),
                ('store_product', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='logs', to='orders.storeproduct', verbose_name='Store Product')),
                ('order_item', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='inventory_logs', to='orders.orderitem', verbose_name='Order Item')),
            ],
            options={
                'verbose_name': 'Inventory Log',
                'verbose_name_plural': 'Inventory Logs',
                'db_table': 'orders_inventory_log',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['store_product', 'created_at'], name='orders_invlog_sp_created_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Notification',
            fields=base_fields() + [
                ('title', models.CharField(max_length=150, verbose_name='Title')),
                ('message', models.TextField(verbose_name='Message')),
                ('notification_type', models.CharField(choices=[('low_stock', 'Low Stock'), ('new_order', 'New Order'), ('order_ready', 'Order Ready'), ('system', 'System')], default='system', max_length=20, verbose_name='Type')),
                ('is_read', models.BooleanField(default=False, verbose_name='Read')),
                ('recipient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to='orders.employee', verbose_name='Recipient')),
                ('store_product', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='notifications', to='orders.storeproduct', verbose_name='Store Product')),
            ],
            options={
                'verbose_name': 'Notification',
                'verbose_name_plural': 'Notifications',
                'db_table': 'orders_notification',
                'ordering': ['-created_at'],
            },
        ),
        migrations.CreateModel(
            name='OutboxEvent',
            fields=base_fields() + [
                ('event_type', models.CharField(max_length=50, verbose_name='Event Type')),
                ('payload', models.JSONField(default=dict)),
                ('dispatched_at', models.DateTimeField(blank=True, null=True, verbose_name='Dispatched At')),
                ('attempts', models.PositiveIntegerField(default=0)),
                ('last_error', models.TextField(blank=True, default='')),
            ],
            options={
                'verbose_name': 'Outbox Event',
                'verbose_name_plural': 'Outbox Events',
                'db_table': 'orders_outbox_event',
                'ordering': ['created_at'],
                'indexes': [
                    models.Index(fields=['dispatched_at', 'created_at'], name='orders_outbox_pending_idx'),
                ],
            },
        ),
    ]
