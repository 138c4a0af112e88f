"""
Pytest fixtures for Orders module tests.
"""

import pytest
from decimal import Decimal

from orders.models import (
    Accompaniment,
    AccompanimentGroup,
    CafeTable,
    Employee,
    OrdersSettings,
    Product,
    ProductIngredient,
    Store,
    StoreProduct,
)


@pytest.fixture
def admin(db):
    """Create an active admin who receives stock alerts."""
    return Employee.objects.create(
        name='Ana Admin',
        email='admin@example.com',
        role=Employee.Role.ADMIN,
    )


@pytest.fixture
def waiter(db):
    """Create an active waiter."""
    return Employee.objects.create(
        name='Marko Waiter',
        email='waiter@example.com',
        role=Employee.Role.WAITER,
    )


@pytest.fixture
def inactive_waiter(db):
    return Employee.objects.create(
        name='Former Waiter',
        email='former@example.com',
        role=Employee.Role.WAITER,
        is_active=False,
    )


@pytest.fixture
def table(db):
    """Create an available table."""
    return CafeTable.objects.create(number='T1', capacity=4, location='Terrace')


@pytest.fixture
def orders_settings(db):
    """Create orders settings with defaults."""
    return OrdersSettings.get_settings()


@pytest.fixture
def reject_shortfall(orders_settings):
    """Switch the ingredient shortfall policy to reject."""
    orders_settings.ingredient_shortfall_policy = OrdersSettings.ShortfallPolicy.REJECT
    orders_settings.save()
    return orders_settings


@pytest.fixture
def store(db):
    return Store.objects.create(name='Main Store')


@pytest.fixture
def coffee_beans(store):
    """Store item with plenty of stock."""
    return StoreProduct.objects.create(
        store=store,
        name='Coffee Beans',
        current_stock=100,
        minimum_stock=10,
        unit='g',
    )


@pytest.fixture
def milk(store):
    """Store item close to its minimum."""
    return StoreProduct.objects.create(
        store=store,
        name='Milk',
        current_stock=12,
        minimum_stock=10,
        unit='dl',
    )


@pytest.fixture
def espresso(db):
    """Bar product with no ingredients."""
    return Product.objects.create(
        name='Espresso',
        price=Decimal('2.50'),
        stock=100,
        preparation_location=Product.PreparationLocation.BAR,
    )


@pytest.fixture
def latte(coffee_beans, milk):
    """Bar product made from coffee beans and milk (1.5 dl per cup)."""
    product = Product.objects.create(
        name='Latte',
        price=Decimal('3.00'),
        stock=50,
        preparation_location=Product.PreparationLocation.BAR,
    )
    ProductIngredient.objects.create(product=product, store_product=coffee_beans, quantity=Decimal('2'))
    ProductIngredient.objects.create(product=product, store_product=milk, quantity=Decimal('1.5'))
    return product


@pytest.fixture
def burger(db):
    """Kitchen product."""
    return Product.objects.create(
        name='Burger',
        price=Decimal('8.00'),
        stock=20,
        preparation_location=Product.PreparationLocation.KITCHEN,
    )


@pytest.fixture
def sauce_group(burger):
    """Single, required sauce choice on the burger."""
    group = AccompanimentGroup.objects.create(
        product=burger,
        name='Sauce',
        selection_type=AccompanimentGroup.SelectionType.SINGLE,
        is_required=True,
    )
    Accompaniment.objects.create(group=group, name='Ketchup', sort_order=1)
    Accompaniment.objects.create(group=group, name='Mayo', extra_charge=Decimal('0.30'), sort_order=2)
    return group


@pytest.fixture
def ketchup(sauce_group):
    return sauce_group.accompaniments.get(name='Ketchup')


@pytest.fixture
def mayo(sauce_group):
    return sauce_group.accompaniments.get(name='Mayo')


@pytest.fixture
def sides_group(burger):
    """Optional multiple-choice sides, at most two."""
    group = AccompanimentGroup.objects.create(
        product=burger,
        name='Sides',
        selection_type=AccompanimentGroup.SelectionType.MULTIPLE,
        max_selections=2,
        sort_order=1,
    )
    Accompaniment.objects.create(group=group, name='Fries', extra_charge=Decimal('1.50'))
    Accompaniment.objects.create(group=group, name='Salad', extra_charge=Decimal('1.00'))
    Accompaniment.objects.create(group=group, name='Onion Rings', extra_charge=Decimal('2.00'))
    return group
