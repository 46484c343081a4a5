from __future__ import annotations

from typing import TextIO

from apps.asset_console.ui.list_view.controller import RenderedListView
from apps.asset_console.ui.list_view.sorting import SortDirection

_ARROWS = {SortDirection.ASC: " ^", SortDirection.DESC: " v"}


def format_table(view: RenderedListView, *, sort_field_labels: dict[str, str] | None = None) -> str:
    """Plain-text rendering of one list-view page, used by the console shell."""
    lines = [view.title]
    if view.search_term:
        lines.append(f"Search: {view.search_term}")
    active = {name: value for name, value in view.active_filters.items() if value != "all"}
    if active:
        lines.append("Filters: " + ", ".join(f"{name}={value}" for name, value in sorted(active.items())))
    if view.is_empty:
        lines.append(view.empty_message or "")
        return "\n".join(lines)

    sort_label = (sort_field_labels or {}).get(view.sort_key or "")
    headers = [header + (_ARROWS[view.sort_direction] if header == sort_label else "") for header in view.headers]
    widths = [len(header) for header in headers]
    for row in view.rows:
        widths = [max(width, len(cell)) for width, cell in zip(widths, row.cells)]

    lines.append("  ".join(header.ljust(width) for header, width in zip(headers, widths)))
    lines.append("  ".join("-" * width for width in widths))
    for row in view.rows:
        lines.append("  ".join(cell.ljust(width) for cell, width in zip(row.cells, widths)))
    lines.append(f"Page {view.current_page} of {view.total_pages} ({view.total_records} records)")
    return "\n".join(lines)


def print_table(view: RenderedListView, stream: TextIO, *, sort_field_labels: dict[str, str] | None = None) -> None:
    stream.write(format_table(view, sort_field_labels=sort_field_labels) + "\n")
