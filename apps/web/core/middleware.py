"""
API error middleware - turns exceptions into JSON error envelopes.
"""

import logging
import traceback
from collections.abc import Callable

from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.http import Http404, HttpRequest, HttpResponse

from .exceptions import ApiError
from .responses import error_response

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


class ApiErrorMiddleware:
    """
    Middleware that renders exceptions raised by API views.

    - ApiError subclasses become {success: false, message, errors?} with
      the exception's status code.
    - Anything else is logged with its traceback and returned as a generic
      500. Detail and stack are only exposed when DEBUG is on.

    Only /api/ paths are handled; admin keeps Django's own error pages.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        return self.get_response(request)

    def process_exception(
        self, request: HttpRequest, exception: Exception
    ) -> HttpResponse | None:
        if not request.path.startswith("/api/"):
            return None

        if isinstance(exception, Http404):
            return error_response(str(exception) or "Not found", status=404)

        if isinstance(exception, PermissionDenied):
            return error_response(str(exception) or "Forbidden", status=403)

        if isinstance(exception, ApiError) and exception.status_code < 500:
            logger.info(
                "%s %s rejected with %d: %s",
                request.method,
                request.path,
                exception.status_code,
                exception.message,
            )
            return error_response(
                exception.message,
                status=exception.status_code,
                errors=exception.errors,
            )

        logger.exception(
            "Unhandled error on %s %s", request.method, request.path
        )

        if settings.DEBUG:
            return error_response(
                INTERNAL_ERROR_MESSAGE,
                status=500,
                detail=str(exception),
                stack=traceback.format_exception(exception),
            )
        return error_response(INTERNAL_ERROR_MESSAGE, status=500)
