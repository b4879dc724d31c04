"""
Decorators for API request handling and access control.
"""

from collections.abc import Callable
from functools import wraps
from typing import Any

from django.http import HttpRequest

from .exceptions import ForbiddenError
from .responses import error_response


def api_login_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that requires an authenticated user for API views.

    Unlike django's login_required, anonymous callers get a JSON 401
    envelope instead of a redirect to the login page.

    Usage:
        @api_login_required
        def list_orders(request):
            ...
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        if not request.user.is_authenticated:
            return error_response("Authentication required", status=401)
        return view_func(request, *args, **kwargs)

    return wrapper


def roles_required(*roles: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator that restricts an API view to users with one of the given roles.

    Must be applied below api_login_required so the user is authenticated.

    Usage:
        @api_login_required
        @roles_required("customer", "admin")
        def place_order(request):
            ...
    """

    def decorator(view_func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view_func)
        def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
            role = getattr(request.user, "role", None)
            if role not in roles:
                raise ForbiddenError(
                    "You don't have permission to perform this action"
                )
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator
