"""
Restaurant models - Restaurants, menus, submenus, menu items and variations.

A MenuItem hangs off either a Menu or a Submenu. The parent is stored as a
parent_type/parent_id pair and exposed as a typed MenuParent/SubmenuParent
value through MenuItem.parent.
"""

from dataclasses import dataclass

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from apps.web.core.models import TimestampedModel


class Restaurant(TimestampedModel):
    """
    A restaurant on the marketplace.

    Owned by exactly one user with the "restaurant" role.
    """

    owner = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="restaurant",
    )
    name = models.CharField(max_length=200)
    address = models.TextField(blank=True)
    phone = models.CharField(max_length=20, blank=True)
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Menu(TimestampedModel):
    """
    A menu (e.g., Breakfast, Lunch, Drinks) belonging to a restaurant.
    """

    restaurant = models.ForeignKey(
        Restaurant,
        on_delete=models.CASCADE,
        related_name="menus",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Submenu(TimestampedModel):
    """
    Section within a menu (e.g., Pizzas inside Dinner).
    """

    menu = models.ForeignKey(
        Menu,
        on_delete=models.CASCADE,
        related_name="submenus",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return f"{self.menu.name} > {self.name}"


class ParentType(models.TextChoices):
    """Kind of container a menu item belongs to."""

    MENU = "Menu", "Menu"
    SUBMENU = "Submenu", "Submenu"


@dataclass(frozen=True)
class MenuParent:
    """Menu item placed directly on a menu."""

    menu_id: int


@dataclass(frozen=True)
class SubmenuParent:
    """Menu item placed on a submenu."""

    submenu_id: int


class MenuItem(TimestampedModel):
    """
    Individual menu item.

    Prices and availability live on its variations.
    """

    parent_type = models.CharField(max_length=10, choices=ParentType.choices)
    parent_id = models.PositiveBigIntegerField()
    name = models.CharField(max_length=200)
    description = models.TextField()
    categories = models.JSONField(
        default=list,
        blank=True,
        help_text='List of categories (e.g., ["pizza", "vegetarian"])',
    )
    image_url = models.URLField(blank=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["parent_type", "parent_id", "name"],
                name="unique_menu_item_name_per_parent",
            ),
        ]
        indexes = [
            models.Index(
                fields=["parent_type", "parent_id"], name="menu_item_parent_idx"
            ),
        ]

    def __str__(self) -> str:
        return self.name

    @property
    def parent(self) -> MenuParent | SubmenuParent:
        """Typed reference to the menu or submenu holding this item."""
        if self.parent_type == ParentType.SUBMENU:
            return SubmenuParent(submenu_id=self.parent_id)
        return MenuParent(menu_id=self.parent_id)


class VariationSize(models.TextChoices):
    """Sizes a menu item can be offered in."""

    SMALL = "Small", "Small"
    MEDIUM = "Medium", "Medium"
    LARGE = "Large", "Large"


class Variation(models.Model):
    """
    A priced size of a menu item.

    Owned by the menu item; sizes are unique per item.
    """

    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.CASCADE,
        related_name="variations",
    )
    size = models.CharField(max_length=10, choices=VariationSize.choices)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(0)],
    )
    is_available = models.BooleanField(default=True)

    class Meta:
        ordering = ["pk"]
        constraints = [
            models.UniqueConstraint(
                fields=["menu_item", "size"],
                name="unique_variation_size_per_item",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gte=0),
                name="variation_price_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.menu_item.name} ({self.size}) ${self.price}"
