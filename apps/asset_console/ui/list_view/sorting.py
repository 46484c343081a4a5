from __future__ import annotations

import math
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from functools import cmp_to_key
from typing import Any, Iterable, Mapping


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> "SortDirection":
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


class ValueKind(str, Enum):
    STRING = "string"
    NUMBER = "number"
    DATE = "date"


_MIN_DATE = datetime.min.replace(tzinfo=timezone.utc)


def _as_string(value: Any) -> tuple[str, str]:
    if value is None:
        text = ""
    elif isinstance(value, Enum):
        text = str(value.value)
    else:
        text = str(value)
    return (text.casefold(), text)


def _as_number(value: Any) -> float:
    if value is None or value == "" or isinstance(value, bool):
        return -math.inf
    if isinstance(value, (int, float)):
        return -math.inf if math.isnan(value) else float(value)
    try:
        return float(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError):
        return -math.inf


def _as_date(value: Any) -> datetime:
    if value is None or value == "":
        return _MIN_DATE
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
        except ValueError:
            return _MIN_DATE
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


_NORMALIZERS = {
    ValueKind.STRING: _as_string,
    ValueKind.NUMBER: _as_number,
    ValueKind.DATE: _as_date,
}


def sort_value(value: Any, kind: ValueKind | str = ValueKind.STRING) -> Any:
    return _NORMALIZERS[ValueKind(kind)](value)


def compare(
    a: Mapping[str, Any],
    b: Mapping[str, Any],
    sort_key: str,
    sort_direction: SortDirection | str = SortDirection.ASC,
    kind: ValueKind | str = ValueKind.STRING,
) -> int:
    """Three-way comparison of two records on ``sort_key``; missing values sort lowest."""
    left = sort_value(a.get(sort_key), kind)
    right = sort_value(b.get(sort_key), kind)
    result = (left > right) - (left < right)
    if SortDirection(sort_direction) is SortDirection.DESC:
        return -result
    return result


def sort_records(
    records: Iterable[Mapping[str, Any]],
    sort_key: str | None,
    sort_direction: SortDirection | str = SortDirection.ASC,
    kind: ValueKind | str = ValueKind.STRING,
) -> list[Mapping[str, Any]]:
    rows = list(records)
    if not sort_key:
        return rows
    # sorted() is stable, so ties keep their input order in both directions
    return sorted(rows, key=cmp_to_key(lambda a, b: compare(a, b, sort_key, sort_direction, kind)))
