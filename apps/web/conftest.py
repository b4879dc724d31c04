"""
Pytest configuration for Django app tests.
"""

from decimal import Decimal

from django.test import Client as DjangoClient

import pytest

from apps.web.core.models import User
from apps.web.restaurant.models import Menu, MenuItem, Restaurant, VariationSize
from apps.web.restaurant.tests.factories import (
    MenuFactory,
    MenuItemFactory,
    RestaurantFactory,
    UserFactory,
    VariationFactory,
)


@pytest.fixture
def api_client() -> DjangoClient:
    """Django test client for API requests."""
    return DjangoClient()


@pytest.fixture
def customer() -> User:
    """A customer account."""
    return UserFactory(username="jane", first_name="Jane", last_name="Doe")


@pytest.fixture
def marketplace_admin() -> User:
    """An account with the admin role."""
    return UserFactory(username="ops", role=User.Role.ADMIN)


@pytest.fixture
def restaurant() -> Restaurant:
    """A restaurant with its owner account."""
    return RestaurantFactory(name="Tony's Pizza")


@pytest.fixture
def menu(restaurant: Restaurant) -> Menu:
    """Dinner menu of the restaurant."""
    return MenuFactory(restaurant=restaurant, name="Dinner")


@pytest.fixture
def pizza(menu: Menu) -> MenuItem:
    """
    Margherita with three sizes.

    Small 7.50, Medium 8.25, Large 10.00; all available.
    """
    item = MenuItemFactory(menu=menu, name="Margherita", categories=["pizza"])
    VariationFactory(menu_item=item, size=VariationSize.SMALL, price=Decimal("7.50"))
    VariationFactory(
        menu_item=item, size=VariationSize.MEDIUM, price=Decimal("8.25")
    )
    VariationFactory(
        menu_item=item, size=VariationSize.LARGE, price=Decimal("10.00")
    )
    return item
