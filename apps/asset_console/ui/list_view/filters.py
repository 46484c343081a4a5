from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

ALL = "all"


def is_match_all(value: Any) -> bool:
    return value is None or value == "" or value == ALL


def _text(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, "value") and isinstance(getattr(value, "value"), str):
        return value.value
    return str(value)


def matches(
    record: Mapping[str, Any],
    search_term: str | None,
    active_filters: Mapping[str, Any] | None,
    searchable_fields: Iterable[str],
) -> bool:
    """True when the record contains the search term in a searchable field and satisfies every filter."""
    term = (search_term or "").casefold()
    if term and not any(term in _text(record.get(field)).casefold() for field in searchable_fields):
        return False
    for field, expected in (active_filters or {}).items():
        if is_match_all(expected):
            continue
        if _text(record.get(field)) != _text(expected):
            return False
    return True


def filter_records(
    records: Iterable[Mapping[str, Any]],
    search_term: str | None,
    active_filters: Mapping[str, Any] | None,
    searchable_fields: Sequence[str],
) -> list[Mapping[str, Any]]:
    return [record for record in records if matches(record, search_term, active_filters, searchable_fields)]


def filter_options(records: Iterable[Mapping[str, Any]], field: str) -> list[str]:
    values = {_text(record.get(field)) for record in records}
    values.discard("")
    return [ALL, *sorted(values, key=lambda value: (value.casefold(), value))]
