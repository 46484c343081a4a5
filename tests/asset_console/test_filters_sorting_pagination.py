from __future__ import annotations

from datetime import datetime, timezone

import pytest

from apps.asset_console.ui.list_view.filters import ALL, filter_options, filter_records, matches
from apps.asset_console.ui.list_view.pagination import clamp_page, paginate, total_pages
from apps.asset_console.ui.list_view.sorting import SortDirection, ValueKind, compare, sort_records

RECORDS = [
    {"id": "1", "name": "Bravo", "status": "active", "description": "Front desk"},
    {"id": "2", "name": "Alpha", "status": "inactive", "description": None},
    {"id": "3", "name": "charlie", "status": "active", "description": "Warehouse"},
]


def test_search_is_case_insensitive_substring_over_searchable_fields() -> None:
    assert matches(RECORDS[0], "FRONT", {}, ("name", "description"))
    assert not matches(RECORDS[0], "front", {}, ("name",))
    assert matches(RECORDS[1], "", {}, ("name",))
    assert not matches(RECORDS[1], "desk", {}, ("description",))


def test_whitespace_search_is_matched_literally() -> None:
    names = [record["name"] for record in filter_records(RECORDS, " ", {}, ("name", "description"))]
    assert names == ["Bravo"]
    assert [record["name"] for record in filter_records(RECORDS, "  ", {}, ("name",))] == []


def test_filters_are_conjunctive_and_all_is_a_wildcard() -> None:
    visible = filter_records(RECORDS, "", {"status": "active"}, ("name",))
    assert [row["name"] for row in visible] == ["Bravo", "charlie"]

    visible = filter_records(RECORDS, "char", {"status": "active"}, ("name",))
    assert [row["name"] for row in visible] == ["charlie"]

    assert filter_records(RECORDS, "", {"status": ALL}, ("name",)) == RECORDS


def test_filtering_is_idempotent() -> None:
    once = filter_records(RECORDS, "a", {"status": "active"}, ("name",))
    twice = filter_records(once, "a", {"status": "active"}, ("name",))
    assert once == twice


def test_filter_options_are_distinct_sorted_with_all_first() -> None:
    assert filter_options(RECORDS, "status") == [ALL, "active", "inactive"]
    assert filter_options(RECORDS, "description") == [ALL, "Front desk", "Warehouse"]


def test_string_sort_is_case_insensitive_and_reversible() -> None:
    ascending = sort_records(RECORDS, "name", SortDirection.ASC)
    descending = sort_records(RECORDS, "name", SortDirection.DESC)
    assert [row["name"] for row in ascending] == ["Alpha", "Bravo", "charlie"]
    assert [row["name"] for row in descending] == ["charlie", "Bravo", "Alpha"]


def test_sort_is_stable_for_ties_in_both_directions() -> None:
    rows = [
        {"id": "a", "status": "active"},
        {"id": "b", "status": "inactive"},
        {"id": "c", "status": "active"},
        {"id": "d", "status": "inactive"},
    ]
    assert [row["id"] for row in sort_records(rows, "status", "asc")] == ["a", "c", "b", "d"]
    assert [row["id"] for row in sort_records(rows, "status", "desc")] == ["b", "d", "a", "c"]


def test_missing_values_sort_lowest() -> None:
    rows = [{"id": "1", "seats": 5}, {"id": "2"}, {"id": "3", "seats": "12"}]
    assert [row["id"] for row in sort_records(rows, "seats", "asc", ValueKind.NUMBER)] == ["2", "1", "3"]
    assert [row["id"] for row in sort_records(rows, "seats", "desc", ValueKind.NUMBER)] == ["3", "1", "2"]


def test_date_sort_is_chronological() -> None:
    rows = [
        {"id": "1", "created_at": "2024-05-01T00:00:00Z"},
        {"id": "2", "created_at": datetime(2023, 1, 1, tzinfo=timezone.utc)},
        {"id": "3", "created_at": "2024-01-15"},
    ]
    assert [row["id"] for row in sort_records(rows, "created_at", "asc", ValueKind.DATE)] == ["2", "3", "1"]


def test_compare_returns_three_way_result() -> None:
    a, b = {"name": "Alpha"}, {"name": "Bravo"}
    assert compare(a, b, "name") == -1
    assert compare(b, a, "name") == 1
    assert compare(a, {"name": "alpha"}, "name", kind=ValueKind.STRING) == -1
    assert compare(a, dict(a), "name") == 0
    assert compare(a, b, "name", SortDirection.DESC) == 1


def test_no_sort_key_keeps_input_order() -> None:
    assert sort_records(RECORDS, None) == RECORDS


def test_paginate_third_page_of_twenty_five() -> None:
    page = paginate(list(range(25)), 3, 10)
    assert page.items == [20, 21, 22, 23, 24]
    assert page.total_pages == 3


def test_paginate_edges() -> None:
    assert paginate([], 1, 10).total_pages == 0
    assert paginate([], 1, 10).items == []
    assert paginate(list(range(5)), 4, 2).items == []
    assert paginate(list(range(5)), 0, 2).items == []
    assert paginate(list(range(7)), 1, 10).items == list(range(7))


def test_total_pages_rejects_non_positive_page_size() -> None:
    assert total_pages(0, 10) == 0
    assert total_pages(11, 10) == 2
    with pytest.raises(ValueError):
        total_pages(3, 0)


def test_clamp_page() -> None:
    assert clamp_page(5, 3) == 3
    assert clamp_page(0, 3) == 1
    assert clamp_page(4, 0) == 1
