"""
Page/limit pagination for list endpoints.
"""

from typing import Any, NamedTuple

from django.conf import settings
from django.core.paginator import EmptyPage, Paginator
from django.db.models import QuerySet
from django.http import HttpRequest


class Page(NamedTuple):
    """A single page of results."""

    items: list[Any]
    total: int
    page: int
    limit: int


def _positive_int(raw: str | None, default: int) -> int:
    try:
        value = int(raw) if raw is not None else default
    except ValueError:
        return default
    return value if value > 0 else default


def paginate(request: HttpRequest, queryset: QuerySet[Any]) -> Page:
    """
    Slice a queryset using the `page` and `limit` query parameters.

    Invalid values fall back to the defaults; `limit` is capped at
    ORDER_MAX_PAGE_SIZE. A page past the end returns no items.
    """
    limit = min(
        _positive_int(request.GET.get("limit"), settings.ORDER_PAGE_SIZE),
        settings.ORDER_MAX_PAGE_SIZE,
    )
    page_number = _positive_int(request.GET.get("page"), 1)

    paginator = Paginator(queryset, limit)
    try:
        items = list(paginator.page(page_number).object_list)
    except EmptyPage:
        items = []

    return Page(items=items, total=paginator.count, page=page_number, limit=limit)
