"""Admin registration for order models."""

from collections.abc import Callable

from django.contrib import admin, messages
from django.db.models import QuerySet
from django.http import HttpRequest

from apps.web.core.exceptions import InvalidTransitionError
from apps.web.orders.models import Order, OrderItem, OrderStatus
from apps.web.orders.services import cancel_order, update_status


class OrderItemInline(admin.TabularInline):
    """Inline for items within an order."""

    model = OrderItem
    extra = 0
    can_delete = False
    fields = ["item_name", "variation_size", "quantity", "price", "line_total"]
    readonly_fields = ["item_name", "variation_size", "quantity", "price", "line_total"]

    def has_add_permission(
        self, request: HttpRequest, obj: Order | None = None
    ) -> bool:
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """
    Admin for orders.

    Every field is read-only. Status only changes through the actions,
    which go through the lifecycle services like the API does.
    """

    list_display = [
        "id",
        "customer",
        "restaurant",
        "status",
        "payment_method",
        "total_price",
        "created_at",
    ]
    list_filter = ["status", "payment_method", "restaurant"]
    search_fields = ["customer__username", "customer__email", "restaurant__name"]
    readonly_fields = [
        "customer",
        "restaurant",
        "placed_by_admin",
        "status",
        "delivery_address",
        "delivery_fee",
        "time_to_deliver",
        "payment_method",
        "notes",
        "total_price",
        "created_at",
        "updated_at",
    ]
    inlines = [OrderItemInline]
    actions = [
        "mark_approved",
        "mark_preparing",
        "mark_ready",
        "mark_completed",
        "cancel_orders",
    ]

    def has_add_permission(self, request: HttpRequest) -> bool:
        # Orders are only placed through the API
        return False

    def has_delete_permission(
        self, request: HttpRequest, obj: Order | None = None
    ) -> bool:
        # Orders are cancelled, never deleted
        return False

    def _apply(
        self,
        request: HttpRequest,
        queryset: QuerySet[Order],
        change: Callable[[Order], Order],
    ) -> None:
        changed = 0
        for order in queryset:
            try:
                change(order)
            except InvalidTransitionError as e:
                self.message_user(
                    request, f"Order {order.pk}: {e.message}", messages.WARNING
                )
            else:
                changed += 1
        if changed:
            self.message_user(request, f"Updated {changed} order(s)")

    @admin.action(description="Approve selected orders")
    def mark_approved(self, request: HttpRequest, queryset: QuerySet[Order]) -> None:
        self._apply(
            request, queryset, lambda order: update_status(order, OrderStatus.APPROVED)
        )

    @admin.action(description="Start preparing selected orders")
    def mark_preparing(self, request: HttpRequest, queryset: QuerySet[Order]) -> None:
        self._apply(
            request,
            queryset,
            lambda order: update_status(order, OrderStatus.PREPARING),
        )

    @admin.action(description="Mark selected orders ready")
    def mark_ready(self, request: HttpRequest, queryset: QuerySet[Order]) -> None:
        self._apply(
            request, queryset, lambda order: update_status(order, OrderStatus.READY)
        )

    @admin.action(description="Complete selected orders")
    def mark_completed(self, request: HttpRequest, queryset: QuerySet[Order]) -> None:
        self._apply(
            request,
            queryset,
            lambda order: update_status(order, OrderStatus.COMPLETED),
        )

    @admin.action(description="Cancel selected orders")
    def cancel_orders(self, request: HttpRequest, queryset: QuerySet[Order]) -> None:
        self._apply(request, queryset, cancel_order)
