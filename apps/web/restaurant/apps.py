"""Django app configuration for the restaurant catalog."""

from django.apps import AppConfig


class RestaurantConfig(AppConfig):
    """Restaurant catalog app configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.web.restaurant"
    verbose_name = "Restaurant catalog"
