"""Success envelope helpers."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from app.domain.value_objects.pagination import Page

T = TypeVar("T")


def ok(data: Any, message: str = "Success") -> dict:
    return {"success": True, "message": message, "data": data}


def paginated(page: Page[T], serialize: Callable[[T], dict], message: str = "Success") -> dict:
    body = ok([serialize(item) for item in page.items], message)
    body["pagination"] = page.pagination()
    return body
