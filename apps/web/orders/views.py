"""
Order API views - placement, listing, detail, status changes and cancellation.

All endpoints require an authenticated user; per-order access goes through
OrderAccessPolicy. Errors are raised as ApiError subclasses and rendered by
ApiErrorMiddleware.
"""

import json
import logging
from decimal import Decimal
from typing import Any

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_http_methods, require_POST

from pydantic import ValidationError as PydanticValidationError

from apps.web.core.decorators import api_login_required, roles_required
from apps.web.core.exceptions import ForbiddenError, NotFoundError, ValidationError
from apps.web.core.models import User
from apps.web.core.pagination import paginate
from apps.web.core.responses import error_response, success_response
from apps.web.orders.models import Order, OrderItem
from apps.web.orders.serializers import (
    OrderDetailResponse,
    OrderItemResponseSchema,
    OrderStatusResponse,
    OrderSummarySchema,
    PlaceOrderRequest,
    PlaceOrderResponse,
    UpdateStatusRequest,
)
from apps.web.orders.services import (
    OrderAction,
    cancel_order,
    order_access_policy,
    place_order,
    update_status,
    validate_menu_items,
    validate_order_request,
)
from apps.web.restaurant.services import fetch_menu_items

logger = logging.getLogger(__name__)

ORDER_NOT_FOUND_MESSAGE = "Order not found"


def _parse_json(request: HttpRequest) -> Any:
    """Decode a JSON body, keeping fractional numbers exact."""
    try:
        return json.loads(request.body or b"{}", parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise ValidationError("Invalid JSON in request body", field="body") from e


def _get_order_or_404(order_id: int) -> Order:
    try:
        return Order.objects.with_related().get(pk=order_id)
    except Order.DoesNotExist as exc:
        raise NotFoundError(ORDER_NOT_FOUND_MESSAGE) from exc


def _serialize_order(order: Order) -> OrderSummarySchema:
    """Serialize an Order header (customer and restaurant must be loaded)."""
    return OrderSummarySchema(
        id=order.pk,
        customer_id=order.customer_id,
        customer_name=order.customer.get_full_name() or order.customer.username,
        restaurant_id=order.restaurant_id,
        restaurant_name=order.restaurant.name,
        admin_id=order.placed_by_admin_id,
        delivery_address=order.delivery_address,
        delivery_fee=order.delivery_fee,
        time_to_deliver=order.time_to_deliver,
        payment_method=order.payment_method,
        notes=order.notes,
        total_price=order.total_price,
        status=order.status,
        created_at=order.created_at,
        updated_at=order.updated_at,
    )


def _serialize_item(item: OrderItem) -> OrderItemResponseSchema:
    return OrderItemResponseSchema(
        id=item.pk,
        menu_item_id=item.menu_item_id,
        item_name=item.item_name,
        quantity=item.quantity,
        price=item.price,
        variation_size=item.variation_size,
        line_total=item.line_total,
    )


def _resolve_customer(user: User, order_request: PlaceOrderRequest) -> User:
    """
    Pick the customer an order is placed for.

    Admins may name a customer with customerId; everyone else orders for
    themselves.
    """
    customer_id = order_request.customer_id
    if customer_id is None or customer_id == user.pk:
        return user

    if not user.is_marketplace_admin:
        raise ForbiddenError("Only admins can place orders for other customers")

    try:
        return User.objects.get(pk=customer_id, role=User.Role.CUSTOMER)
    except User.DoesNotExist as exc:
        raise NotFoundError(f"Customer {customer_id} not found") from exc


# =============================================================================
# Order API Endpoints
# =============================================================================


@csrf_exempt
@require_http_methods(["GET", "POST"])
@api_login_required
def orders(request: HttpRequest) -> JsonResponse:
    """
    GET  /api/orders - list orders visible to the caller
    POST /api/orders - place an order (customers and admins)
    """
    if request.method == "POST":
        return _place_order(request)
    return _list_orders(request)


@roles_required(User.Role.CUSTOMER, User.Role.ADMIN)
def _place_order(request: HttpRequest) -> JsonResponse:
    """
    Place an order from a cart of menu item variations.

    Request body: PlaceOrderRequest schema
    Response: PlaceOrderResponse (201), or 400 with unAvailableItems when any
    line can't be ordered. No order is written in that case.
    """
    order_request = validate_order_request(_parse_json(request))
    customer = _resolve_customer(request.user, order_request)  # type: ignore[arg-type]

    catalog = fetch_menu_items(line.item.id for line in order_request.order_items)
    validation = validate_menu_items(catalog, order_request.order_items)

    if validation.unavailable_items:
        logger.warning(
            "Order rejected for user %s: %d of %d lines unavailable",
            request.user.pk,
            len(validation.unavailable_items),
            len(order_request.order_items),
        )
        return error_response(
            "Order could not be placed, some items are unavailable",
            status=400,
            result=len(validation.unavailable_items),
            unAvailableItems=[
                item.model_dump(exclude_none=True)
                for item in validation.unavailable_items
            ],
        )

    order, items = place_order(
        customer,
        order_request,
        validation,
        placed_by=request.user,  # type: ignore[arg-type]
    )

    response = PlaceOrderResponse(
        order_id=order.pk,
        items_total=validation.items_subtotal,
        total_price=order.total_price,
        delivery_fee=order.delivery_fee,
        time_to_deliver=order.time_to_deliver,
        status=order.status,
        order_items=[_serialize_item(item) for item in items],
    )
    data = response.model_dump(mode="json", by_alias=True)

    return success_response(
        "Order placed successfully",
        data=data,
        meta={
            "orderId": order.pk,
            "orderItems": len(items),
            "itemsTotal": data["itemsTotal"],
            "deliveryFee": data["deliveryFee"],
            "totalPrice": data["totalPrice"],
        },
        status=201,
    )


def _list_orders(request: HttpRequest) -> JsonResponse:
    """
    List orders, filtered by role and optional ?status=.

    Unknown status values are ignored. Pagination via ?page= and ?limit=.
    """
    queryset = order_access_policy.scope(request.user, Order.objects.all())
    queryset = queryset.with_status(request.GET.get("status")).with_related()

    page = paginate(request, queryset)

    return success_response(
        "Orders retrieved successfully",
        data=[
            _serialize_order(order).model_dump(mode="json", by_alias=True)
            for order in page.items
        ],
        meta={
            "totalOrders": page.total,
            "currentPage": page.page,
            "itemsPerPage": page.limit,
            "role": getattr(request.user, "role", None),
        },
    )


@csrf_exempt
@require_http_methods(["GET", "PATCH", "PUT"])
@api_login_required
def order_detail(request: HttpRequest, order_id: int) -> JsonResponse:
    """
    GET       /api/orders/{order_id} - order with its line items
    PATCH/PUT /api/orders/{order_id} - change status
    """
    if request.method in ("PATCH", "PUT"):
        return _change_status(request, order_id)

    order = _get_order_or_404(order_id)
    order_access_policy.authorize(request.user, order, OrderAction.VIEW)

    items = list(order.items.all())
    response = OrderDetailResponse(
        order=_serialize_order(order),
        order_items=[_serialize_item(item) for item in items],
    )

    return success_response(
        "Order retrieved successfully",
        data=response.model_dump(mode="json", by_alias=True),
        meta={
            "orderItems": len(items),
            "totalPrice": f"{order.total_price:.2f}",
            "status": order.status,
        },
    )


@csrf_exempt
@require_http_methods(["PATCH", "PUT"])
@api_login_required
def order_status(request: HttpRequest, order_id: int) -> JsonResponse:
    """
    PATCH/PUT /api/orders/{order_id}/status

    Request body: {"status": "<new status>"}
    """
    return _change_status(request, order_id)


def _change_status(request: HttpRequest, order_id: int) -> JsonResponse:
    try:
        status_request = UpdateStatusRequest.model_validate(_parse_json(request))
    except PydanticValidationError as e:
        raise ValidationError(
            "Status is required",
            errors=[{"field": "status", "message": err["msg"]} for err in e.errors()],
            field="status",
        ) from e

    order = _get_order_or_404(order_id)
    order_access_policy.authorize(request.user, order, OrderAction.UPDATE)
    update_status(order, status_request.status)

    response = OrderStatusResponse(
        order_id=order.pk, status=order.status, updated_at=order.updated_at
    )
    return success_response(
        "Order status updated successfully",
        data=response.model_dump(mode="json", by_alias=True),
    )


@csrf_exempt
@require_POST
@api_login_required
def order_cancel(request: HttpRequest, order_id: int) -> JsonResponse:
    """
    POST /api/orders/{order_id}/cancel

    Cancels from any status except completed and cancelled.
    """
    order = _get_order_or_404(order_id)
    order_access_policy.authorize(request.user, order, OrderAction.CANCEL)
    cancel_order(order)

    response = OrderStatusResponse(
        order_id=order.pk, status=order.status, updated_at=order.updated_at
    )
    return success_response(
        "Order cancelled successfully",
        data=response.model_dump(mode="json", by_alias=True),
    )
