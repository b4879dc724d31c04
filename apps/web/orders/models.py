"""
Order models - order headers and their line items.

Line items snapshot the price and size at placement time so later menu
edits never change an existing order.
"""

from django.conf import settings
from django.db import models

from apps.web.core.models import TimestampedModel
from apps.web.orders.managers import OrderQuerySet
from apps.web.restaurant.models import MenuItem, Restaurant


class OrderStatus(models.TextChoices):
    """Order lifecycle status."""

    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    PREPARING = "preparing", "Preparing"
    READY = "ready", "Ready"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class Order(TimestampedModel):
    """
    Customer order placed against a single restaurant.

    Only the status changes after creation; cancellation is a status,
    orders are never deleted.
    """

    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    restaurant = models.ForeignKey(
        Restaurant,
        on_delete=models.PROTECT,
        related_name="orders",
    )
    placed_by_admin = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="admin_placed_orders",
        help_text="Admin who placed the order on the customer's behalf",
    )

    # Delivery
    delivery_address = models.TextField()
    delivery_fee = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    time_to_deliver = models.PositiveIntegerField(
        default=0,
        help_text="Estimated delivery time in minutes",
    )
    notes = models.TextField(blank=True)

    # Payment
    payment_method = models.CharField(max_length=30)
    total_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Sum of line totals plus delivery fee",
    )

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )

    objects = OrderQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at", "-pk"]
        indexes = [
            models.Index(
                fields=["customer", "status"], name="order_customer_status_idx"
            ),
            models.Index(
                fields=["restaurant", "status"], name="order_restaurant_status_idx"
            ),
            models.Index(fields=["created_at"], name="order_created_at_idx"),
        ]

    def __str__(self) -> str:
        return f"Order {self.pk} - {self.status}"


class OrderItem(models.Model):
    """
    Line item in an order.

    Stores a snapshot of the variation price and size at order time.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )
    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.PROTECT,
        related_name="order_items",
    )

    # Snapshot of item at order time
    item_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField()
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="Unit price of the variation when ordered",
    )
    variation_size = models.CharField(max_length=10)
    line_total = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="price * quantity",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["pk"]

    def __str__(self) -> str:
        return f"{self.quantity}x {self.item_name} ({self.variation_size})"
