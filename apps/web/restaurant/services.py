"""
Catalog lookup services - menu item resolution for ordering and access checks.
"""

from collections.abc import Iterable

from apps.web.core.exceptions import NotFoundError
from apps.web.restaurant.models import (
    Menu,
    MenuItem,
    MenuParent,
    Restaurant,
    Submenu,
    SubmenuParent,
)


def fetch_menu_items(ids: Iterable[int]) -> dict[int, MenuItem]:
    """
    Batch-load menu items with their variations in one query.

    Ids that don't exist are simply absent from the result; callers decide
    how to report them.
    """
    unique_ids = set(ids)
    if not unique_ids:
        return {}
    return MenuItem.objects.prefetch_related("variations").in_bulk(unique_ids)


def resolve_restaurant_id(menu_item: MenuItem) -> int:
    """
    Find the restaurant owning a menu item by walking its parent chain.

    Menu items on a menu resolve through the menu; items on a submenu
    resolve through submenu -> menu.

    Raises:
        NotFoundError: If any link in the chain is missing.
    """
    parent = menu_item.parent

    if isinstance(parent, SubmenuParent):
        menu_id = (
            Submenu.objects.filter(pk=parent.submenu_id)
            .values_list("menu_id", flat=True)
            .first()
        )
        if menu_id is None:
            raise NotFoundError(
                f"Submenu {parent.submenu_id} for menu item {menu_item.pk} not found"
            )
        parent = MenuParent(menu_id=menu_id)

    restaurant_id = (
        Menu.objects.filter(pk=parent.menu_id)
        .values_list("restaurant_id", flat=True)
        .first()
    )
    if restaurant_id is None:
        raise NotFoundError(
            f"Menu {parent.menu_id} for menu item {menu_item.pk} not found"
        )
    return restaurant_id


def get_restaurant_for_owner(user_id: int) -> Restaurant | None:
    """Return the restaurant owned by a user, or None if they own none."""
    return Restaurant.objects.filter(owner_id=user_id).first()
