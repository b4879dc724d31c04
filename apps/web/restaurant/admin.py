"""Admin registration for restaurant models."""

from django import forms
from django.contrib import admin

from apps.web.core.exceptions import ValidationError
from apps.web.restaurant.models import Menu, MenuItem, Restaurant, Submenu, Variation
from apps.web.restaurant.validators import validate_variations


class MenuInline(admin.TabularInline):
    """Inline for menus within a restaurant."""

    model = Menu
    extra = 0
    fields = ["name", "description"]


class SubmenuInline(admin.TabularInline):
    """Inline for submenus within a menu."""

    model = Submenu
    extra = 0
    fields = ["name", "description"]


class VariationInlineFormSet(forms.BaseInlineFormSet):
    """Runs the variation list rules across all inline rows."""

    def clean(self) -> None:
        super().clean()
        variations = [
            {
                "size": form.cleaned_data.get("size"),
                "price": form.cleaned_data.get("price"),
                "isAvailable": form.cleaned_data.get("is_available", False),
            }
            for form in self.forms
            if form.cleaned_data and not form.cleaned_data.get("DELETE", False)
        ]
        try:
            validate_variations(variations)
        except ValidationError as e:
            raise forms.ValidationError(e.message) from e


class VariationInline(admin.TabularInline):
    """Inline for variations within a menu item."""

    model = Variation
    formset = VariationInlineFormSet
    extra = 0
    fields = ["size", "price", "is_available"]


@admin.register(Restaurant)
class RestaurantAdmin(admin.ModelAdmin):
    """Admin for restaurants."""

    list_display = ["name", "owner", "phone", "is_active"]
    list_filter = ["is_active"]
    search_fields = ["name", "owner__username", "owner__email"]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [MenuInline]


@admin.register(Menu)
class MenuAdmin(admin.ModelAdmin):
    """Admin for menus."""

    list_display = ["name", "restaurant"]
    list_filter = ["restaurant"]
    search_fields = ["name", "restaurant__name"]
    inlines = [SubmenuInline]


@admin.register(Submenu)
class SubmenuAdmin(admin.ModelAdmin):
    """Admin for submenus."""

    list_display = ["name", "menu"]
    search_fields = ["name", "menu__name"]


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    """Admin for menu items."""

    list_display = ["name", "parent_type", "parent_id"]
    list_filter = ["parent_type"]
    search_fields = ["name", "description"]
    readonly_fields = ["created_at", "updated_at"]
    inlines = [VariationInline]
