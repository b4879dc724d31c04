"""
Order validation service - checks a placement request before anything is written.

Handles:
1. Structural checks on the raw request body (fail fast, first field named)
2. Pricing and availability checks against the live catalog (collected)
"""

import logging
from decimal import Decimal
from typing import Any

from django.conf import settings

from pydantic import ValidationError as PydanticValidationError

from apps.web.core.exceptions import NotFoundError, ValidationError
from apps.web.orders.serializers import (
    AcceptedLine,
    MenuValidationResult,
    OrderLineRequestSchema,
    PlaceOrderRequest,
    UnavailableItem,
)
from apps.web.restaurant.models import MenuItem, Variation
from apps.web.restaurant.services import resolve_restaurant_id

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Menu item not found"
MIXED_RESTAURANT_MESSAGE = "Items must be from the same restaurant"
RESTAURANT_NOT_FOUND_MESSAGE = "Menu item restaurant not found"
VARIATION_UNAVAILABLE_MESSAGE = "Selected variation is not available"


def accepted_payment_methods() -> list[str]:
    """Payment methods accepted at checkout, lower-cased."""
    return [method.lower() for method in settings.ORDER_PAYMENT_METHODS]


def _format_loc(loc: tuple[Any, ...]) -> str:
    """Render a pydantic error location as orderItems[0].variation."""
    field = ""
    for part in loc:
        if isinstance(part, int):
            field += f"[{part}]"
        else:
            field += f".{part}" if field else str(part)
    return field


def validate_order_request(payload: Any) -> PlaceOrderRequest:
    """
    Validate the shape of an order placement request.

    Args:
        payload: Decoded JSON body.

    Returns:
        Parsed request with the payment method normalized to lower case.

    Raises:
        ValidationError: Message names the first offending field; `errors`
            lists every problem found.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object", field="body")

    try:
        request = PlaceOrderRequest.model_validate(payload)
    except PydanticValidationError as e:
        errors = [
            {"field": _format_loc(err["loc"]), "message": err["msg"]}
            for err in e.errors()
        ]
        first = errors[0]
        raise ValidationError(
            f"Invalid {first['field']}: {first['message']}",
            errors=errors,
            field=first["field"],
        ) from e

    methods = accepted_payment_methods()
    payment_method = request.payment_method.strip().lower()
    if payment_method not in methods:
        raise ValidationError(
            f"Invalid payment method. Valid options: {', '.join(methods)}",
            errors=[{"field": "PaymentMethod", "message": "unsupported method"}],
            field="PaymentMethod",
        )

    return request.model_copy(update={"payment_method": payment_method})


def _match_variation(
    menu_item: MenuItem, line: OrderLineRequestSchema
) -> Variation | None:
    """Find the requested variation: exact size label first, then id."""
    variations = list(menu_item.variations.all())
    selector = line.variation

    if selector.size:
        for variation in variations:
            if variation.size == selector.size:
                return variation

    if selector.id is not None:
        for variation in variations:
            if variation.pk == selector.id:
                return variation

    return None


def validate_menu_items(
    catalog: dict[int, MenuItem],
    order_items: list[OrderLineRequestSchema],
) -> MenuValidationResult:
    """
    Price a cart against the catalog, collecting every problem.

    The first line whose restaurant resolves fixes the order's restaurant;
    later lines from another restaurant are rejected. Rejected lines never
    contribute to the subtotal.

    Args:
        catalog: Menu items keyed by id, from fetch_menu_items().
        order_items: Lines from a structurally valid request.

    Returns:
        MenuValidationResult with subtotal, diagnostics, accepted lines and
        the restaurant id (None if no line resolved).
    """
    result = MenuValidationResult()
    subtotal = Decimal("0")

    for line in order_items:
        item_id = line.item.id
        menu_item = catalog.get(item_id)

        if menu_item is None:
            result.unavailable_items.append(
                UnavailableItem(item=item_id, message=NOT_FOUND_MESSAGE)
            )
            continue

        try:
            item_restaurant_id = resolve_restaurant_id(menu_item)
        except NotFoundError as e:
            logger.warning("Cannot resolve restaurant for item %s: %s", item_id, e)
            result.unavailable_items.append(
                UnavailableItem(
                    item=item_id,
                    name=menu_item.name,
                    message=RESTAURANT_NOT_FOUND_MESSAGE,
                )
            )
            continue

        if result.restaurant_id is None:
            result.restaurant_id = item_restaurant_id
        elif item_restaurant_id != result.restaurant_id:
            result.unavailable_items.append(
                UnavailableItem(
                    item=item_id,
                    name=menu_item.name,
                    message=MIXED_RESTAURANT_MESSAGE,
                )
            )
            continue

        variation = _match_variation(menu_item, line)
        if variation is None:
            result.unavailable_items.append(
                UnavailableItem(
                    item=item_id,
                    name=menu_item.name,
                    message=f'Variation "{line.variation.label}" not found',
                )
            )
            continue

        if not variation.is_available:
            result.unavailable_items.append(
                UnavailableItem(
                    item=item_id,
                    name=menu_item.name,
                    variation=variation.size,
                    message=VARIATION_UNAVAILABLE_MESSAGE,
                )
            )
            continue

        line_total = variation.price * line.quantity
        subtotal += line_total
        result.accepted_lines.append(
            AcceptedLine(
                menu_item_id=menu_item.pk,
                item_name=menu_item.name,
                quantity=line.quantity,
                price=variation.price,
                variation_size=variation.size,
                line_total=line_total,
            )
        )

    result.items_subtotal = subtotal
    return result
