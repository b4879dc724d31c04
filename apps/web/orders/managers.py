"""
Order querysets - role-based scoping for order listings.
"""

from typing import TYPE_CHECKING

from django.db import models

if TYPE_CHECKING:
    from .models import Order


class OrderQuerySet(models.QuerySet["Order"]):
    """
    QuerySet with order filters used by the list endpoint.

    Usage in views:
        orders = Order.objects.for_customer(user.pk).with_status("pending")

    SECURITY: Views go through OrderAccessPolicy.scope(), never raw querysets.
    """

    def for_customer(self, customer_id: int) -> "OrderQuerySet":
        """Orders placed by (or on behalf of) a customer."""
        return self.filter(customer_id=customer_id)

    def for_restaurant(self, restaurant_id: int) -> "OrderQuerySet":
        """Orders bound to a restaurant."""
        return self.filter(restaurant_id=restaurant_id)

    def with_status(self, status: str | None) -> "OrderQuerySet":
        """
        Filter by status, ignoring values outside OrderStatus.

        Args:
            status: Raw status from the query string, may be None or junk.
        """
        from .models import OrderStatus  # noqa: PLC0415

        if status not in OrderStatus.values:
            return self
        return self.filter(status=status)

    def with_related(self) -> "OrderQuerySet":
        """Load customer and restaurant in the same query."""
        return self.select_related("customer", "restaurant")
