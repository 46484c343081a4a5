from __future__ import annotations

import json

import pytest
import responses
from responses import matchers

from ams_client_sdk import load_config
from ams_client_sdk.clients.resources import (
    AccessoriesClient,
    AssetsClient,
    EmployeesClient,
    PurchaseOrdersClient,
    SoftwareLicensesClient,
)
from ams_client_sdk.exceptions import ValidationError
from ams_client_sdk.http_client import HttpClient
from ams_client_sdk.tracing import TraceContext


def _client(base_url: str) -> HttpClient:
    cfg = load_config()
    object.__setattr__(cfg, "api_base_url", base_url)
    return HttpClient(cfg, trace=TraceContext())


@responses.activate
def test_list_assets_normalizes_paginated_envelope(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(
        responses.GET,
        "https://api.example.com/api/Assets",
        match=[
            matchers.query_param_matcher(
                {"pageNumber": "2", "pageSize": "5", "searchTerm": "dell", "status": "2"}
            ),
            matchers.header_matcher({"Authorization": "Bearer token-1"}),
        ],
        json={
            "items": [
                {
                    "id": "a-1",
                    "assetTag": "AST-001",
                    "name": "Dell Latitude",
                    "status": 2,
                    "createdAt": "2024-03-01T10:00:00Z",
                }
            ],
            "totalCount": 6,
            "pageNumber": 2,
            "pageSize": 5,
            "totalPages": 2,
            "hasNextPage": False,
            "hasPreviousPage": True,
        },
        status=200,
    )

    listing = AssetsClient(http=http, access_token="token-1").list(
        page_number=2, page_size=5, search_term="dell", status=2
    )

    assert listing.total == 6
    assert listing.total_pages == 2
    assert listing.has_prev is True
    assert listing.has_next is False
    row = listing.rows[0]
    assert row["asset_tag"] == "AST-001"
    assert row["status"] == "assigned"
    assert row["created_at"].year == 2024


def test_list_rejects_unknown_filter(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    with pytest.raises(ValueError):
        EmployeesClient(http=http).list(colour="red")


@responses.activate
def test_list_all_uses_single_large_page(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(
        responses.GET,
        "https://api.example.com/api/Employees",
        match=[matchers.query_param_matcher({"pageNumber": "1", "pageSize": "1000"})],
        json={"items": [{"id": "e-1", "employeeId": "EMP-1", "firstName": "Ada", "lastName": "Lovelace", "status": 1}]},
        status=200,
    )

    rows = EmployeesClient(http=http).list_all()

    assert rows[0]["employee_id"] == "EMP-1"
    assert rows[0]["status"] == "active"


@responses.activate
def test_create_sends_camel_case_body_with_enum_ordinal(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(responses.POST, "https://api.example.com/api/PurchaseOrders", json={"id": "po-1"}, status=201)

    handle = PurchaseOrdersClient(http=http).create(
        {"po_number": "PO-100", "status": "approved", "notes": "", "supplier_id": "s-1"}
    )
    result = handle.retry()

    assert result == {"id": "po-1"}
    body = json.loads(responses.calls[0].request.body)
    assert body == {"poNumber": "PO-100", "status": 3, "notes": None, "supplierId": "s-1"}


@responses.activate
def test_update_includes_id_and_can_be_replayed(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(responses.PUT, "https://api.example.com/api/Accessories/x-1", json={"message": "busy"}, status=400)
    responses.add(responses.PUT, "https://api.example.com/api/Accessories/x-1", status=204)

    handle = AccessoriesClient(http=http).update("x-1", {"name": "Mouse", "quantity": 4})
    with pytest.raises(ValidationError):
        handle.retry()
    assert handle.retry() is None

    bodies = [json.loads(call.request.body) for call in responses.calls]
    assert bodies[0] == bodies[1] == {"name": "Mouse", "quantity": 4, "id": "x-1"}


@responses.activate
def test_delete_targets_record_path(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(responses.DELETE, "https://api.example.com/api/Assets/a-9", status=204)

    AssetsClient(http=http).delete("a-9").retry()

    assert responses.calls[0].request.method == "DELETE"


@responses.activate
def test_asset_assign_and_license_unassign_paths(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(responses.POST, "https://api.example.com/api/Assets/a-1/assign", status=204)
    responses.add(
        responses.POST,
        "https://api.example.com/api/SoftwareLicenses/assignments/as-1/unassign",
        match=[matchers.query_param_matcher({"notes": "returned"})],
        status=204,
    )

    AssetsClient(http=http).assign("a-1", "e-1", notes="desk").retry()
    SoftwareLicensesClient(http=http).unassign("as-1", notes="returned").retry()

    assert json.loads(responses.calls[0].request.body) == {"assetId": "a-1", "employeeId": "e-1", "notes": "desk"}


@responses.activate
def test_license_assignments_are_parsed(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(
        responses.GET,
        "https://api.example.com/api/SoftwareLicenses/l-1/assignments",
        json=[{"id": "as-1", "employeeId": "e-1", "employeeName": "Ada Lovelace"}],
        status=200,
    )

    assignments = SoftwareLicensesClient(http=http).assignments("l-1")

    assert assignments[0].employee_name == "Ada Lovelace"
