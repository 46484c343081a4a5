from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel


@dataclass
class Listing:
    rows: list[dict[str, Any]]
    page: int
    page_size: int
    total: int | None
    total_pages: int | None = None
    has_next: bool | None = None
    has_prev: bool | None = None
    raw_meta: dict[str, Any] = field(default_factory=dict)


def normalize_listing(
    payload: Any,
    *,
    model: type[BaseModel] | None = None,
    page: int = 1,
    page_size: int = 10,
) -> Listing:
    """Accept a bare array or a ``PaginatedResult`` envelope and return snake_case rows."""
    safe_page = max(1, int(page or 1))
    safe_page_size = max(1, int(page_size or 10))

    rows: list[Any] = []
    total: int | None = None
    total_pages: int | None = None
    has_next: bool | None = None
    has_prev: bool | None = None
    raw_meta: dict[str, Any] = {}

    if isinstance(payload, list):
        rows = payload
    elif isinstance(payload, dict):
        for key in ("items", "data", "rows"):
            if isinstance(payload.get(key), list):
                rows = payload[key]
                break
        raw_meta = {key: value for key, value in payload.items() if key not in {"items", "data", "rows"}}
        total = _to_int(payload.get("totalCount"))
        if total is None:
            total = _to_int(payload.get("total"))
        total_pages = _to_int(payload.get("totalPages"))
        safe_page = _to_int(payload.get("pageNumber")) or safe_page
        safe_page_size = _to_int(payload.get("pageSize")) or safe_page_size
        has_next = _to_bool(payload.get("hasNextPage"))
        has_prev = _to_bool(payload.get("hasPreviousPage"))

    safe_page = max(1, safe_page)
    safe_page_size = max(1, safe_page_size)

    if total is None and len(rows) < safe_page_size and safe_page == 1:
        total = len(rows)
    if total_pages is None and total is not None:
        total_pages = -(-total // safe_page_size)
    if has_prev is None:
        has_prev = safe_page > 1
    if has_next is None and total is not None:
        has_next = safe_page * safe_page_size < total

    return Listing(
        rows=[to_record(row, model) for row in rows if isinstance(row, dict)],
        page=safe_page,
        page_size=safe_page_size,
        total=total,
        total_pages=total_pages,
        has_next=has_next,
        has_prev=has_prev,
        raw_meta=raw_meta,
    )


def to_record(row: dict[str, Any], model: type[BaseModel] | None) -> dict[str, Any]:
    if model is None:
        return dict(row)
    return model.model_validate(row).model_dump()


def normalize_active_flag(row: dict[str, Any]) -> dict[str, Any]:
    """SIM providers, types and plans carry ``isActive`` instead of a status enum."""
    if "status" in row or "isActive" not in row:
        return row
    normalized = {key: value for key, value in row.items() if key != "isActive"}
    normalized["status"] = "active" if _to_bool(row["isActive"]) else "inactive"
    return normalized


def _to_int(value: Any) -> int | None:
    try:
        if value is None or value == "":
            return None
        return int(value)
    except (TypeError, ValueError):
        return None


def _to_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "y", "on"}:
            return True
        if normalized in {"0", "false", "no", "n", "off"}:
            return False
    return None
