"""
Order lifecycle - the status state machine.

    pending   -> approved, cancelled
    approved  -> preparing, cancelled
    preparing -> ready, cancelled
    ready     -> completed
    completed, cancelled are terminal
"""

import logging

from apps.web.core.exceptions import InvalidStateError, InvalidTransitionError
from apps.web.orders.models import Order, OrderStatus

logger = logging.getLogger(__name__)

TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.APPROVED, OrderStatus.CANCELLED}),
    OrderStatus.APPROVED: frozenset({OrderStatus.PREPARING, OrderStatus.CANCELLED}),
    OrderStatus.PREPARING: frozenset({OrderStatus.READY, OrderStatus.CANCELLED}),
    OrderStatus.READY: frozenset({OrderStatus.COMPLETED}),
    OrderStatus.COMPLETED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in TRANSITIONS.items() if not targets
)


def _as_status(value: str) -> OrderStatus | None:
    try:
        return OrderStatus(value)
    except ValueError:
        return None


def allowed_transitions(current: str) -> frozenset[OrderStatus]:
    """Statuses reachable from `current`; empty for terminal or unknown values."""
    status = _as_status(current)
    if status is None:
        return frozenset()
    return TRANSITIONS[status]


def can_transition(current: str, target: str) -> bool:
    """
    Check a status change against the transition table.

    Total over arbitrary strings: unknown values on either side are
    simply not allowed.
    """
    target_status = _as_status(target)
    return target_status is not None and target_status in allowed_transitions(
        current
    )


def update_status(order: Order, requested_status: str) -> Order:
    """
    Move an order to a new status.

    Args:
        order: Order to update.
        requested_status: Raw status value from the client.

    Returns:
        The saved order.

    Raises:
        InvalidTransitionError: If the table doesn't allow the change,
            including unrecognized status values.
    """
    current = order.status
    if not can_transition(current, requested_status):
        raise InvalidTransitionError(
            f'Cannot change status from "{current}" to "{requested_status}"',
            current_status=current,
            requested_status=requested_status,
        )

    order.status = OrderStatus(requested_status)
    order.save(update_fields=["status", "updated_at"])

    logger.info(
        "Order %s status changed: %s -> %s", order.pk, current, order.status
    )
    return order


def cancel_order(order: Order) -> Order:
    """
    Cancel an order from any non-terminal status.

    Cancellation bypasses the transition table, so a ready order can be
    cancelled even though ready -> cancelled isn't a regular transition.

    Raises:
        InvalidStateError: If the order is already completed or cancelled.
    """
    current = order.status
    if current in TERMINAL_STATUSES:
        raise InvalidStateError(
            f"Cannot cancel an order that is already {current}",
            current_status=current,
            requested_status=OrderStatus.CANCELLED,
        )

    order.status = OrderStatus.CANCELLED
    order.save(update_fields=["status", "updated_at"])

    logger.info("Order %s cancelled (was %s)", order.pk, current)
    return order
