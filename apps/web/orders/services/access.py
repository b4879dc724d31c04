"""
Order access policy - who may view, update or cancel an order.

One policy object covers both single-order checks and list scoping so the
role rules live in a single place.
"""

import logging
from typing import Any

from django.db import models

from apps.web.core.exceptions import ForbiddenError, NotFoundError
from apps.web.core.models import User
from apps.web.orders.managers import OrderQuerySet
from apps.web.orders.models import Order
from apps.web.restaurant.services import get_restaurant_for_owner

logger = logging.getLogger(__name__)

FORBIDDEN_MESSAGE = "You don't have permission to access this order"
RESTAURANT_NOT_FOUND_MESSAGE = "No restaurant found for this account"


class OrderAction(models.TextChoices):
    """Operations guarded by the access policy."""

    VIEW = "view", "View"
    UPDATE = "update", "Update"
    CANCEL = "cancel", "Cancel"


class OrderAccessPolicy:
    """
    Role-based authorization for orders.

    - admin: every order
    - customer: orders they placed
    - restaurant: orders bound to the restaurant they own
    - any other role: nothing

    The action is accepted so rules can diverge per action later; today
    view, update and cancel share the same rule.
    """

    def _owned_restaurant_id(self, user: User) -> int:
        restaurant = get_restaurant_for_owner(user.pk)
        if restaurant is None:
            raise NotFoundError(RESTAURANT_NOT_FOUND_MESSAGE)
        return restaurant.pk

    def authorize(
        self, user: Any, order: Order, action: str = OrderAction.VIEW
    ) -> None:
        """
        Check that `user` may perform `action` on `order`.

        Raises:
            ForbiddenError: If the role doesn't grant access to this order.
            NotFoundError: If a restaurant user owns no restaurant.
        """
        role = getattr(user, "role", None)

        if role == User.Role.ADMIN:
            return

        if role == User.Role.CUSTOMER:
            if order.customer_id == user.pk:
                return
        elif role == User.Role.RESTAURANT:
            if order.restaurant_id == self._owned_restaurant_id(user):
                return

        logger.warning(
            "User %s (role=%s) denied %s on order %s",
            getattr(user, "pk", None),
            role,
            action,
            order.pk,
        )
        raise ForbiddenError(FORBIDDEN_MESSAGE)

    def scope(self, user: Any, queryset: OrderQuerySet) -> OrderQuerySet:
        """
        Restrict an order queryset to what `user` may view.

        Raises:
            ForbiddenError: For roles with no order access.
            NotFoundError: If a restaurant user owns no restaurant.
        """
        role = getattr(user, "role", None)

        if role == User.Role.ADMIN:
            return queryset
        if role == User.Role.CUSTOMER:
            return queryset.for_customer(user.pk)
        if role == User.Role.RESTAURANT:
            return queryset.for_restaurant(self._owned_restaurant_id(user))

        raise ForbiddenError(FORBIDDEN_MESSAGE)


order_access_policy = OrderAccessPolicy()
