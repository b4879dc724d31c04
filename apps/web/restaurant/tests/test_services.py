"""Tests for catalog lookup services."""

import pytest

from apps.web.core.exceptions import NotFoundError
from apps.web.restaurant.models import ParentType, VariationSize
from apps.web.restaurant.services import (
    fetch_menu_items,
    get_restaurant_for_owner,
    resolve_restaurant_id,
)

from .factories import (
    MenuFactory,
    MenuItemFactory,
    RestaurantFactory,
    SubmenuFactory,
    UserFactory,
    VariationFactory,
)


@pytest.mark.django_db
class TestFetchMenuItems:
    """Tests for fetch_menu_items."""

    def test_returns_items_keyed_by_id(self) -> None:
        """Found items are keyed by their id."""
        first = MenuItemFactory()
        second = MenuItemFactory()

        catalog = fetch_menu_items([first.pk, second.pk])

        assert catalog == {first.pk: first, second.pk: second}

    def test_missing_ids_are_absent(self) -> None:
        """Unknown ids are left out instead of raising."""
        item = MenuItemFactory()

        catalog = fetch_menu_items([item.pk, 999999])

        assert list(catalog) == [item.pk]

    def test_duplicate_ids_collapse(self) -> None:
        """Repeated ids resolve to a single entry."""
        item = MenuItemFactory()

        catalog = fetch_menu_items([item.pk, item.pk])

        assert list(catalog) == [item.pk]

    def test_empty_input_skips_query(self, django_assert_num_queries) -> None:
        """No ids means no query at all."""
        with django_assert_num_queries(0):
            assert fetch_menu_items([]) == {}

    def test_variations_are_prefetched(self, django_assert_num_queries) -> None:
        """Items and variations load in two queries regardless of cart size."""
        items = [MenuItemFactory() for _ in range(3)]
        for item in items:
            VariationFactory(menu_item=item, size=VariationSize.SMALL)
            VariationFactory(menu_item=item, size=VariationSize.LARGE)

        with django_assert_num_queries(2):
            catalog = fetch_menu_items(item.pk for item in items)
            sizes = [
                [v.size for v in menu_item.variations.all()]
                for menu_item in catalog.values()
            ]

        assert sizes == [["Small", "Large"]] * 3


@pytest.mark.django_db
class TestResolveRestaurantId:
    """Tests for resolve_restaurant_id."""

    def test_item_on_menu(self) -> None:
        """Items on a menu resolve through the menu."""
        menu = MenuFactory()
        item = MenuItemFactory(menu=menu)

        assert resolve_restaurant_id(item) == menu.restaurant_id

    def test_item_on_submenu(self) -> None:
        """Items on a submenu resolve through submenu and menu."""
        submenu = SubmenuFactory()
        item = MenuItemFactory(submenu=submenu)

        assert resolve_restaurant_id(item) == submenu.menu.restaurant_id

    def test_missing_menu(self) -> None:
        """A dangling menu reference raises NotFoundError."""
        item = MenuItemFactory(parent_type=ParentType.MENU, parent_id=999999)

        with pytest.raises(NotFoundError) as exc_info:
            resolve_restaurant_id(item)

        assert "Menu 999999" in exc_info.value.message

    def test_missing_submenu(self) -> None:
        """A dangling submenu reference raises NotFoundError."""
        item = MenuItemFactory(parent_type=ParentType.SUBMENU, parent_id=999999)

        with pytest.raises(NotFoundError) as exc_info:
            resolve_restaurant_id(item)

        assert "Submenu 999999" in exc_info.value.message


@pytest.mark.django_db
class TestGetRestaurantForOwner:
    """Tests for get_restaurant_for_owner."""

    def test_returns_owned_restaurant(self) -> None:
        """Owners get their restaurant back."""
        restaurant = RestaurantFactory()

        assert get_restaurant_for_owner(restaurant.owner.pk) == restaurant

    def test_none_when_owner_has_no_restaurant(self) -> None:
        """Accounts without a restaurant get None."""
        user = UserFactory()

        assert get_restaurant_for_owner(user.pk) is None
