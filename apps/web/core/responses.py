"""
JSON response envelope helpers.

Success: {"success": true, "message": ..., "meta"?: ..., "data"?: ...}
Failure: {"success": false, "message": ..., "errors"?: ...}
"""

from typing import Any

from django.core.serializers.json import DjangoJSONEncoder
from django.http import JsonResponse


def success_response(
    message: str,
    data: Any = None,
    meta: dict[str, Any] | None = None,
    status: int = 200,
) -> JsonResponse:
    """Create a success envelope response."""
    body: dict[str, Any] = {"success": True, "message": message}
    if meta is not None:
        body["meta"] = meta
    if data is not None:
        body["data"] = data
    return JsonResponse(body, status=status, encoder=DjangoJSONEncoder)


def error_response(
    message: str,
    status: int,
    errors: list[dict[str, Any]] | None = None,
    **extra: Any,
) -> JsonResponse:
    """Create an error envelope response."""
    body: dict[str, Any] = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    body.update(extra)
    return JsonResponse(body, status=status, encoder=DjangoJSONEncoder)
