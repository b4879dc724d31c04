"""
Order placement - persists an order header and its lines together.
"""

import logging
from decimal import Decimal

from django.db import DatabaseError, transaction

from apps.web.core.exceptions import InternalError, ValidationError
from apps.web.core.models import User
from apps.web.orders.models import Order, OrderItem, OrderStatus
from apps.web.orders.serializers import MenuValidationResult, PlaceOrderRequest

logger = logging.getLogger(__name__)

# Largest amount a DecimalField(max_digits=10, decimal_places=2) column holds
MAX_AMOUNT = Decimal("99999999.99")


class OrderPlacementError(InternalError):
    """Order header or lines could not be written; nothing was kept."""


def _create_items(order: Order, validation: MenuValidationResult) -> list[OrderItem]:
    return OrderItem.objects.bulk_create(
        [
            OrderItem(
                order=order,
                menu_item_id=line.menu_item_id,
                item_name=line.item_name,
                quantity=line.quantity,
                price=line.price,
                variation_size=line.variation_size,
                line_total=line.line_total,
            )
            for line in validation.accepted_lines
        ]
    )


def place_order(
    customer: User,
    request: PlaceOrderRequest,
    validation: MenuValidationResult,
    placed_by: User | None = None,
) -> tuple[Order, list[OrderItem]]:
    """
    Write an accepted order and its line items in one transaction.

    Total price is the items subtotal plus the delivery fee (0 if absent).
    When an admin places the order (for a customer, or for themselves) they
    are recorded in placed_by_admin.

    Args:
        customer: User the order belongs to.
        request: Structurally valid placement request.
        validation: Result of validate_menu_items() with no unavailable lines.
        placed_by: Caller, when different from the customer.

    Returns:
        Tuple of (order, order_items).

    Raises:
        ValidationError: If the validation result still has rejected lines,
            or the total is larger than the price columns hold.
        OrderPlacementError: If any write fails; the header is rolled back.
    """
    if not validation.is_acceptable:
        raise ValidationError("Order has unavailable items", field="orderItems")

    delivery_fee = request.delivery_fee or Decimal("0")
    placer = placed_by or customer
    total_price = validation.items_subtotal + delivery_fee
    if total_price > MAX_AMOUNT or any(
        line.line_total > MAX_AMOUNT for line in validation.accepted_lines
    ):
        raise ValidationError(
            f"Order total exceeds the maximum of {MAX_AMOUNT}", field="orderItems"
        )

    try:
        with transaction.atomic():
            order = Order.objects.create(
                customer=customer,
                restaurant_id=validation.restaurant_id,
                placed_by_admin=placer if placer.is_marketplace_admin else None,
                delivery_address=request.delivery_address,
                delivery_fee=delivery_fee,
                time_to_deliver=request.time_to_deliver or 0,
                payment_method=request.payment_method,
                notes=request.notes or "",
                total_price=total_price,
                status=OrderStatus.PENDING,
            )
            items = _create_items(order, validation)
    except DatabaseError as e:
        logger.exception(
            "Failed to write order for customer %s at restaurant %s (%d lines)",
            customer.pk,
            validation.restaurant_id,
            len(validation.accepted_lines),
        )
        raise OrderPlacementError("Order could not be saved") from e

    logger.info(
        "Order %s placed by user %s for customer %s: %d lines, total %s",
        order.pk,
        placer.pk,
        customer.pk,
        len(items),
        total_price,
    )
    return order, items
