"""Order services - validation, placement, lifecycle and access control."""

from apps.web.orders.services.access import (
    OrderAccessPolicy,
    OrderAction,
    order_access_policy,
)
from apps.web.orders.services.lifecycle import (
    allowed_transitions,
    can_transition,
    cancel_order,
    update_status,
)
from apps.web.orders.services.placement import OrderPlacementError, place_order
from apps.web.orders.services.validation import (
    accepted_payment_methods,
    validate_menu_items,
    validate_order_request,
)

__all__ = [
    "OrderAccessPolicy",
    "OrderAction",
    "OrderPlacementError",
    "accepted_payment_methods",
    "allowed_transitions",
    "can_transition",
    "cancel_order",
    "order_access_policy",
    "place_order",
    "update_status",
    "validate_menu_items",
    "validate_order_request",
]
