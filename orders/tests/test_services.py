"""
Unit tests for the order lifecycle service.
"""

import pytest
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from unittest import mock

from django.db import DatabaseError

from orders.exceptions import InvalidOperationError, NotFoundError
from orders.models import (
    CafeTable,
    InventoryLog,
    Notification,
    Order,
    OrderItem,
    OutboxEvent,
)
from orders.services import InventoryService, OrderService


def line(product, quantity=1, **extra):
    data = {'product_id': product.id, 'quantity': quantity}
    data.update(extra)
    return data


def reload(*objects):
    for obj in objects:
        obj.refresh_from_db()


# ==============================================================================
# CREATE ORDER TESTS
# ==============================================================================

@pytest.mark.django_db
class TestCreateOrder:
    """Tests for create_order method."""

    def test_create_order_basic(self, waiter, table, espresso):
        """One espresso at a table: pending, priced, table taken, stock down."""
        order = OrderService.create_order(
            waiter_id=waiter.id,
            table_id=table.id,
            items=[line(espresso)],
        )

        assert order.status == Order.Status.PENDING
        assert order.total_amount == Decimal('2.50')
        assert order.waiter == waiter
        assert order.table == table

        reload(table, espresso)
        assert table.status == CafeTable.Status.OCCUPIED
        assert espresso.stock == 99

    def test_create_order_items(self, waiter, table, espresso, burger):
        order = OrderService.create_order(
            waiter_id=waiter.id,
            table_id=table.id,
            items=[
                line(espresso, 2, notes='Extra hot'),
                line(burger, 1),
            ],
            notes='Birthday',
        )

        items = list(order.items.all())
        assert len(items) == 2
        assert items[0].product_name == 'Espresso'
        assert items[0].quantity == 2
        assert items[0].subtotal == Decimal('5.00')
        assert items[0].notes == 'Extra hot'
        assert items[0].status == OrderItem.Status.PENDING
        assert order.total_amount == Decimal('13.00')
        assert order.notes == 'Birthday'

    def test_total_matches_item_subtotals(self, waiter, table, espresso, burger, sides_group):
        fries = sides_group.accompaniments.get(name='Fries')
        order = OrderService.create_order(
            waiter_id=waiter.id,
            table_id=table.id,
            items=[line(espresso, 3), line(burger, 2, accompaniment_ids=[fries.id])],
        )
        assert order.total_amount == sum(i.subtotal for i in order.items.all())
        assert order.total_amount == Decimal('26.50')

    def test_takeaway_without_table(self, waiter, espresso):
        order = OrderService.create_order(
            waiter_id=waiter.id,
            items=[line(espresso)],
            order_type=Order.OrderType.TAKEAWAY,
            is_partner_order=True,
        )
        assert order.table is None
        assert order.order_type == Order.OrderType.TAKEAWAY
        assert order.is_partner_order is True

    def test_dine_in_requires_table(self, waiter, espresso):
        with pytest.raises(InvalidOperationError, match='require a table'):
            OrderService.create_order(waiter_id=waiter.id, items=[line(espresso)])

    def test_unknown_order_type(self, waiter, espresso):
        with pytest.raises(InvalidOperationError):
            OrderService.create_order(
                waiter_id=waiter.id, items=[line(espresso)], order_type='delivery',
            )

    def test_empty_order_rejected(self, waiter, table):
        with pytest.raises(InvalidOperationError):
            OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[])

    def test_missing_waiter(self, table, espresso):
        with pytest.raises(NotFoundError):
            OrderService.create_order(
                waiter_id='00000000-0000-0000-0000-000000000000',
                table_id=table.id, items=[line(espresso)],
            )

    def test_inactive_waiter(self, inactive_waiter, table, espresso):
        with pytest.raises(NotFoundError):
            OrderService.create_order(
                waiter_id=inactive_waiter.id, table_id=table.id, items=[line(espresso)],
            )

    def test_missing_table(self, waiter, espresso):
        with pytest.raises(NotFoundError):
            OrderService.create_order(
                waiter_id=waiter.id,
                table_id='00000000-0000-0000-0000-000000000000',
                items=[line(espresso)],
            )

    def test_unavailable_product(self, waiter, table, espresso):
        espresso.is_available = False
        espresso.save()

        with pytest.raises(InvalidOperationError, match='not available'):
            OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(espresso)])

    def test_unknown_product(self, waiter, table):
        with pytest.raises(InvalidOperationError):
            OrderService.create_order(
                waiter_id=waiter.id, table_id=table.id,
                items=[{'product_id': 'not-a-uuid', 'quantity': 1}],
            )

    def test_zero_quantity(self, waiter, table, espresso):
        with pytest.raises(InvalidOperationError):
            OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(espresso, 0)])

    @pytest.mark.parametrize('quantity', [2.9, Decimal('2.5'), '2.5', 'two', True, None])
    def test_fractional_or_odd_quantity_rejected(self, waiter, table, espresso, quantity):
        with pytest.raises(InvalidOperationError, match='whole number'):
            OrderService.create_order(
                waiter_id=waiter.id, table_id=table.id, items=[line(espresso, quantity)],
            )
        reload(espresso)
        assert espresso.stock == 100
        assert Order.objects.count() == 0

    def test_digit_string_quantity(self, waiter, table, espresso):
        order = OrderService.create_order(
            waiter_id=waiter.id, table_id=table.id, items=[line(espresso, '3')],
        )
        assert order.items.get().quantity == 3

    def test_products_locked_once_in_key_order(self, waiter, table, espresso, burger):
        with mock.patch.object(
            InventoryService, 'lock_products', wraps=InventoryService.lock_products,
        ) as lock_products:
            OrderService.create_order(
                waiter_id=waiter.id, table_id=table.id,
                items=[line(burger), line(espresso), line(burger)],
            )

        lock_products.assert_called_once()
        assert set(lock_products.call_args[0][0]) == {str(espresso.id), str(burger.id)}

    def test_insufficient_stock_changes_nothing(self, waiter, table, burger):
        """Stock 2, five requested: rejected and stock stays at 2."""
        burger.stock = 2
        burger.save()

        with pytest.raises(InvalidOperationError, match='Insufficient stock'):
            OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(burger, 5)])

        reload(burger, table)
        assert burger.stock == 2
        assert table.status == CafeTable.Status.AVAILABLE
        assert Order.objects.count() == 0
        assert OrderItem.objects.count() == 0

    def test_stock_checked_across_lines(self, waiter, table, burger):
        burger.stock = 3
        burger.save()

        with pytest.raises(InvalidOperationError, match='Insufficient stock'):
            OrderService.create_order(
                waiter_id=waiter.id, table_id=table.id,
                items=[line(burger, 2), line(burger, 2)],
            )
        reload(burger)
        assert burger.stock == 3

    def test_later_line_failure_leaves_no_trace(self, waiter, table, espresso, burger):
        burger.is_available = False
        burger.save()

        with pytest.raises(InvalidOperationError):
            OrderService.create_order(
                waiter_id=waiter.id, table_id=table.id,
                items=[line(espresso), line(burger)],
            )

        reload(espresso)
        assert espresso.stock == 100
        assert Order.objects.count() == 0

    def test_failure_during_writes_rolls_back(self, waiter, table, latte, milk, coffee_beans):
        with mock.patch.object(InventoryService, 'deduct_for_item', side_effect=DatabaseError('disk full')):
            with pytest.raises(DatabaseError):
                OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(latte)])

        reload(latte, milk, table)
        assert latte.stock == 50
        assert milk.current_stock == 12
        assert table.status == CafeTable.Status.AVAILABLE
        assert Order.objects.count() == 0
        assert OutboxEvent.objects.count() == 0

    def test_order_created_event_recorded(self, waiter, table, espresso):
        order = OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(espresso)])

        event = OutboxEvent.objects.get()
        assert event.event_type == OutboxEvent.ORDER_CREATED
        assert event.payload['order_id'] == str(order.id)
        assert event.payload['total_amount'] == '2.50'


# ==============================================================================
# ACCOMPANIMENT PRICING TESTS
# ==============================================================================

@pytest.mark.django_db
class TestAccompanimentPricing:

    def test_unit_price_includes_extra_charges(self, waiter, table, burger, mayo, sides_group):
        fries = sides_group.accompaniments.get(name='Fries')
        order = OrderService.create_order(
            waiter_id=waiter.id, table_id=table.id,
            items=[line(burger, 2, accompaniment_ids=[mayo.id, fries.id])],
        )

        item = order.items.get()
        assert item.unit_price == Decimal('9.80')
        assert item.subtotal == Decimal('19.60')
        snapshots = {a.name: a.price_at_order for a in item.accompaniments.all()}
        assert snapshots == {'Mayo': Decimal('0.30'), 'Fries': Decimal('1.50')}

    def test_price_snapshot_survives_price_change(self, waiter, table, burger, mayo):
        order = OrderService.create_order(
            waiter_id=waiter.id, table_id=table.id,
            items=[line(burger, accompaniment_ids=[mayo.id])],
        )
        mayo.extra_charge = Decimal('1.00')
        mayo.save()
        burger.price = Decimal('12.00')
        burger.save()

        item = OrderService.get_order(order.id).items.get()
        assert item.unit_price == Decimal('8.30')
        assert item.accompaniments.get().price_at_order == Decimal('0.30')

    def test_single_group_with_two_selections(self, waiter, table, burger, ketchup, mayo):
        with pytest.raises(InvalidOperationError) as exc_info:
            OrderService.create_order(
                waiter_id=waiter.id, table_id=table.id,
                items=[line(burger, accompaniment_ids=[ketchup.id, mayo.id])],
            )

        assert 'Sauce' in exc_info.value.message
        assert 'only one' in exc_info.value.message
        assert exc_info.value.errors
        reload(burger)
        assert burger.stock == 20

    def test_all_violations_reported(self, waiter, table, burger, sauce_group, sides_group):
        sides = list(sides_group.accompaniments.all())
        with pytest.raises(InvalidOperationError) as exc_info:
            OrderService.create_order(
                waiter_id=waiter.id, table_id=table.id,
                items=[line(burger, accompaniment_ids=[s.id for s in sides])],
            )
        errors = exc_info.value.errors
        assert any('Sauce' in e for e in errors)
        assert any('Sides' in e for e in errors)

    def test_accompaniment_of_other_product(self, waiter, table, espresso, ketchup):
        with pytest.raises(InvalidOperationError, match='Unknown accompaniment'):
            OrderService.create_order(
                waiter_id=waiter.id, table_id=table.id,
                items=[line(espresso, accompaniment_ids=[ketchup.id])],
            )


# ==============================================================================
# INGREDIENT DEDUCTION TESTS
# ==============================================================================

@pytest.mark.django_db
class TestIngredientDeduction:

    def test_ingredients_deducted_and_logged(self, waiter, table, latte, coffee_beans, milk):
        order = OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(latte)])

        reload(coffee_beans, milk)
        assert coffee_beans.current_stock == 98
        # 1.5 dl per cup rounds up to 2
        assert milk.current_stock == 10

        logs = InventoryLog.objects.filter(log_type=InventoryLog.LogType.SALE)
        assert {(entry.store_product_id, entry.quantity_change) for entry in logs} == {
            (coffee_beans.id, -2), (milk.id, -2),
        }
        assert all(order.order_number in entry.reason for entry in logs)

    def test_low_stock_notifies_admins(self, admin, waiter, table, latte, milk):
        OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(latte, 3)])

        reload(milk)
        assert milk.current_stock == 7
        notification = Notification.objects.get()
        assert notification.recipient == admin
        assert notification.notification_type == Notification.NotificationType.LOW_STOCK
        assert notification.store_product == milk
        assert 'Milk' in notification.message

    def test_one_alert_per_store_item(self, admin, waiter, table, latte, milk):
        OrderService.create_order(
            waiter_id=waiter.id, table_id=table.id,
            items=[line(latte, 2), line(latte, 2)],
        )
        assert Notification.objects.filter(store_product=milk).count() == 1

    def test_low_stock_alerts_can_be_disabled(self, admin, waiter, table, latte, orders_settings):
        orders_settings.low_stock_notifications = False
        orders_settings.save()

        OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(latte, 3)])
        assert Notification.objects.count() == 0

    def test_shortfall_warns_and_deducts(self, waiter, table, latte, milk, caplog):
        with caplog.at_level('WARNING', logger='orders'):
            OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(latte, 10)])

        reload(milk)
        assert milk.current_stock == -3
        assert 'went negative' in caplog.text

    def test_shortfall_rejected_by_policy(self, reject_shortfall, waiter, table, latte, milk, coffee_beans):
        with pytest.raises(InvalidOperationError, match='Insufficient Milk'):
            OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(latte, 10)])

        reload(milk, coffee_beans, latte)
        assert milk.current_stock == 12
        assert coffee_beans.current_stock == 100
        assert latte.stock == 50


# ==============================================================================
# ADD ITEM TESTS
# ==============================================================================

@pytest.mark.django_db
class TestAddItem:
    """Tests for add_item_to_order method."""

    @pytest.fixture
    def order(self, waiter, table, espresso):
        return OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(espresso)])

    def test_add_item_basic(self, order, burger, ketchup):
        item = OrderService.add_item_to_order(
            order.id, burger.id, quantity=2, notes='No onions', accompaniment_ids=[ketchup.id],
        )

        assert item.order_id == order.id
        assert item.quantity == 2
        assert item.notes == 'No onions'
        order.refresh_from_db()
        assert order.total_amount == Decimal('18.50')
        assert order.total_amount == order.calculate_total()
        burger.refresh_from_db()
        assert burger.stock == 18

    def test_add_item_deducts_ingredients(self, order, latte, milk):
        OrderService.add_item_to_order(order.id, latte.id)
        milk.refresh_from_db()
        assert milk.current_stock == 10

    def test_add_item_validates(self, order, burger):
        with pytest.raises(InvalidOperationError, match='Insufficient stock'):
            OrderService.add_item_to_order(order.id, burger.id, quantity=21)
        order.refresh_from_db()
        assert order.total_amount == Decimal('2.50')

    def test_add_item_to_closed_order(self, order, burger):
        OrderService.complete_order(order.id)
        with pytest.raises(InvalidOperationError):
            OrderService.add_item_to_order(order.id, burger.id)

    def test_add_item_to_missing_order(self, burger):
        with pytest.raises(NotFoundError):
            OrderService.add_item_to_order('00000000-0000-0000-0000-000000000000', burger.id)


# ==============================================================================
# STATUS TESTS
# ==============================================================================

@pytest.mark.django_db
class TestOrderStatus:

    @pytest.fixture
    def order(self, waiter, table, espresso, burger):
        return OrderService.create_order(
            waiter_id=waiter.id, table_id=table.id,
            items=[line(espresso), line(burger)],
        )

    def test_preparing_advances_items(self, order):
        result = OrderService.update_order_status(order.id, Order.Status.PREPARING)

        assert result.status == Order.Status.PREPARING
        for item in result.items.all():
            assert item.status == OrderItem.Status.PREPARING

    def test_ready_advances_items(self, order):
        result = OrderService.update_order_status(order.id, 'ready')
        assert result.status == Order.Status.READY
        assert set(result.items.values_list('status', flat=True)) == {'ready'}

    def test_cannot_move_backwards(self, order):
        OrderService.update_order_status(order.id, Order.Status.READY)
        with pytest.raises(InvalidOperationError):
            OrderService.update_order_status(order.id, Order.Status.PENDING)

    def test_unknown_status(self, order):
        with pytest.raises(InvalidOperationError):
            OrderService.update_order_status(order.id, 'served')

    def test_complete_order(self, order, table):
        fixed = datetime(2026, 3, 1, 12, 30, tzinfo=dt_timezone.utc)
        with mock.patch('django.utils.timezone.now', return_value=fixed):
            result = OrderService.update_order_status(order.id, Order.Status.COMPLETED)

        assert result.status == Order.Status.COMPLETED
        assert result.completed_at == fixed
        assert set(result.items.values_list('status', flat=True)) == {'completed'}
        table.refresh_from_db()
        assert table.status == CafeTable.Status.AVAILABLE

    def test_complete_keeps_cancelled_items(self, order):
        burger_item = order.items.get(product_name='Burger')
        OrderService.cancel_item(burger_item.id)

        OrderService.complete_order(order.id)

        burger_item.refresh_from_db()
        assert burger_item.status == OrderItem.Status.CANCELLED

    def test_completed_order_is_final(self, order):
        OrderService.complete_order(order.id)
        with pytest.raises(InvalidOperationError):
            OrderService.update_order_status(order.id, Order.Status.PREPARING)
        with pytest.raises(InvalidOperationError):
            OrderService.complete_order(order.id)

    def test_cancel_through_status_restores_stock(self, order, espresso):
        OrderService.update_order_status(order.id, Order.Status.CANCELLED)
        espresso.refresh_from_db()
        assert espresso.stock == 100

    def test_item_ready_makes_order_ready(self, order):
        items = list(order.items.all())
        OrderService.update_item_status(items[0].id, OrderItem.Status.READY)
        order.refresh_from_db()
        assert order.status == Order.Status.PENDING

        OrderService.update_item_status(items[1].id, OrderItem.Status.READY)
        order.refresh_from_db()
        assert order.status == Order.Status.READY

    def test_item_cannot_move_backwards(self, order):
        item = order.items.first()
        OrderService.update_item_status(item.id, OrderItem.Status.READY)
        with pytest.raises(InvalidOperationError):
            OrderService.update_item_status(item.id, OrderItem.Status.PREPARING)


# ==============================================================================
# CANCEL TESTS
# ==============================================================================

@pytest.mark.django_db
class TestCancelOrder:

    def test_cancel_restores_stock(self, waiter, table, latte, espresso, coffee_beans, milk):
        """Create then cancel puts every product and ingredient back."""
        order = OrderService.create_order(
            waiter_id=waiter.id, table_id=table.id,
            items=[line(latte, 3), line(espresso, 2)],
        )

        result = OrderService.cancel_order(order.id, 'Customer left')

        reload(latte, espresso, coffee_beans, milk, table)
        assert latte.stock == 50
        assert espresso.stock == 100
        assert coffee_beans.current_stock == 100
        assert milk.current_stock == 12
        assert result.status == Order.Status.CANCELLED
        assert set(result.items.values_list('status', flat=True)) == {'cancelled'}
        assert 'Customer left' in result.notes
        assert result.total_amount == Decimal('0.00')
        assert table.status == CafeTable.Status.AVAILABLE

    def test_cancel_locks_table_before_order_and_stock(self, waiter, table, latte):
        """Same lock order as create_order: table, order, then stock rows."""
        order = OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(latte)])
        manager = mock.Mock()

        with mock.patch.object(OrderService, '_lock_table', wraps=OrderService._lock_table) as lock_table, \
                mock.patch.object(OrderService, '_lock_order', wraps=OrderService._lock_order) as lock_order, \
                mock.patch.object(InventoryService, 'lock_store_products',
                                  wraps=InventoryService.lock_store_products) as lock_stock:
            manager.attach_mock(lock_table, 'table')
            manager.attach_mock(lock_order, 'order')
            manager.attach_mock(lock_stock, 'stock')
            OrderService.cancel_order(order.id)

        assert [name for name, _, _ in manager.mock_calls] == ['table', 'order', 'stock']

    def test_cancel_logs_adjustments(self, waiter, table, latte, milk):
        order = OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(latte)])
        OrderService.cancel_order(order.id, 'Spilled')

        entry = InventoryLog.objects.get(store_product=milk, log_type=InventoryLog.LogType.ADJUSTMENT)
        assert entry.quantity_change == 2
        assert order.order_number in entry.reason
        assert 'Spilled' in entry.reason

    def test_cancel_restores_what_was_taken_after_recipe_change(self, waiter, table, latte, milk):
        order = OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(latte)])
        latte.ingredients.filter(store_product=milk).update(quantity=Decimal('5'))

        OrderService.cancel_order(order.id)

        milk.refresh_from_db()
        assert milk.current_stock == 12

    def test_cancel_keeps_table_with_other_open_order(self, waiter, table, espresso):
        OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(espresso)])
        second = OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(espresso)])

        OrderService.cancel_order(second.id)

        table.refresh_from_db()
        assert table.status == CafeTable.Status.OCCUPIED

    def test_cannot_cancel_completed_order(self, waiter, table, espresso):
        order = OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(espresso)])
        OrderService.complete_order(order.id)

        with pytest.raises(InvalidOperationError, match='Cannot cancel completed order'):
            OrderService.cancel_order(order.id)
        espresso.refresh_from_db()
        assert espresso.stock == 99

    def test_cancel_twice(self, waiter, table, espresso):
        order = OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(espresso)])
        OrderService.cancel_order(order.id)

        with pytest.raises(InvalidOperationError):
            OrderService.cancel_order(order.id)
        espresso.refresh_from_db()
        assert espresso.stock == 100

    def test_cancel_missing_order(self):
        with pytest.raises(NotFoundError):
            OrderService.cancel_order('00000000-0000-0000-0000-000000000000')


@pytest.mark.django_db
class TestCancelItem:

    def test_cancel_item(self, waiter, table, espresso, burger, ketchup):
        order = OrderService.create_order(
            waiter_id=waiter.id, table_id=table.id,
            items=[line(espresso), line(burger, 2, accompaniment_ids=[ketchup.id])],
        )
        burger_item = order.items.get(product_name='Burger')

        result = OrderService.cancel_item(burger_item.id, 'Wrong table')

        assert result.status == OrderItem.Status.CANCELLED
        order.refresh_from_db()
        assert order.status == Order.Status.PENDING
        assert order.total_amount == Decimal('2.50')
        burger.refresh_from_db()
        assert burger.stock == 20

    def test_cancel_item_twice(self, waiter, table, espresso, burger):
        order = OrderService.create_order(
            waiter_id=waiter.id, table_id=table.id,
            items=[line(espresso), line(burger)],
        )
        item = order.items.get(product_name='Burger')
        OrderService.cancel_item(item.id)

        with pytest.raises(InvalidOperationError):
            OrderService.cancel_item(item.id)
        burger.refresh_from_db()
        assert burger.stock == 20

    def test_cancel_missing_item(self):
        with pytest.raises(NotFoundError):
            OrderService.cancel_item('00000000-0000-0000-0000-000000000000')


# ==============================================================================
# QUERY METHODS TESTS
# ==============================================================================

@pytest.mark.django_db
class TestQueryMethods:
    """Tests for query methods."""

    @pytest.fixture
    def orders(self, waiter, table, espresso):
        first = OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(espresso)])
        second = OrderService.create_order(
            waiter_id=waiter.id, items=[line(espresso)], order_type=Order.OrderType.TAKEAWAY,
        )
        done = OrderService.create_order(waiter_id=waiter.id, table_id=table.id, items=[line(espresso)])
        OrderService.complete_order(done.id)
        return first, second, done

    def test_get_active_orders(self, orders):
        first, second, _ = orders
        assert [o.id for o in OrderService.get_active_orders()] == [first.id, second.id]

    def test_get_orders_by_table(self, orders, table):
        first, _, _ = orders
        assert [o.id for o in OrderService.get_orders_by_table(table.id)] == [first.id]

    def test_get_orders_filters(self, orders, waiter):
        assert len(OrderService.get_orders(waiter_id=waiter.id)) == 3
        completed = OrderService.get_orders(status=Order.Status.COMPLETED)
        assert [o.id for o in completed] == [orders[2].id]

    def test_get_order_missing(self):
        with pytest.raises(NotFoundError):
            OrderService.get_order('00000000-0000-0000-0000-000000000000')

    def test_serialize_order(self, waiter, table, burger, mayo):
        order = OrderService.create_order(
            waiter_id=waiter.id, table_id=table.id,
            items=[line(burger, accompaniment_ids=[mayo.id])],
        )

        data = OrderService.serialize_order(order)

        assert data['order_number'] == order.order_number
        assert data['table_number'] == 'T1'
        assert data['waiter_name'] == 'Marko Waiter'
        assert data['total_amount'] == '8.30'
        assert data['items'][0]['product_name'] == 'Burger'
        assert data['items'][0]['preparation_location'] == 'kitchen'
        assert data['items'][0]['accompaniments'][0]['price_at_order'] == '0.30'
