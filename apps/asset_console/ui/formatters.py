from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

EMPTY_CELL = "-"
EXPIRY_WARNING_DAYS = 90


def _to_date(value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00")).date()
    except ValueError:
        return None


def format_date(value: Any) -> str:
    parsed = _to_date(value)
    if parsed is None:
        return EMPTY_CELL if value in (None, "") else str(value)
    return parsed.isoformat()


def format_currency(value: Any, currency: str = "USD") -> str:
    if value is None or value == "":
        return EMPTY_CELL
    try:
        amount = Decimal(str(value))
    except InvalidOperation:
        return str(value)
    return f"{currency} {amount:,.2f}"


def format_status(value: Any) -> str:
    if value is None or value == "":
        return EMPTY_CELL
    text = str(getattr(value, "value", value))
    return text.replace("_", " ").title()


def format_text(value: Any) -> str:
    if value is None or value == "":
        return EMPTY_CELL
    return str(value)


def days_until(value: Any, *, today: date | None = None) -> int | None:
    parsed = _to_date(value)
    if parsed is None:
        return None
    return (parsed - (today or datetime.now(timezone.utc).date())).days


def format_expiry(value: Any, *, today: date | None = None) -> str:
    """Expiry date with a marker when it falls inside the warning window."""
    remaining = days_until(value, today=today)
    label = format_date(value)
    if remaining is None:
        return label
    if remaining <= 0:
        return f"{label} (expired)"
    if remaining <= EXPIRY_WARNING_DAYS:
        return f"{label} (expires in {remaining}d)"
    return label
