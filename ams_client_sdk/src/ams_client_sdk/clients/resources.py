from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar

from pydantic import BaseModel
from pydantic.alias_generators import to_camel

from ..models import (
    Accessory,
    Asset,
    AssetStatus,
    Employee,
    PurchaseOrder,
    PurchaseOrderStatus,
    SimCard,
    SimCardStatus,
    SoftwareLicense,
    SoftwareLicenseAssignment,
    SoftwareLicenseStatus,
    Status,
    status_ordinal,
)
from ..normalizers import Listing, normalize_listing, to_record
from .base import BaseClient, RetryableMutation

# the dropdown loaders fetch whole collections in one page
LIST_ALL_PAGE_SIZE = 1000

_FILTER_PARAMS = {
    "project_id": "projectId",
    "item_id": "itemId",
    "status": "status",
    "assigned_to": "assignedTo",
    "assigned": "assigned",
    "department_id": "departmentId",
    "supplier_id": "supplierId",
}


@dataclass
class ResourceClient(BaseClient):
    """CRUD over one ``/api/<Resource>`` controller."""

    resource: ClassVar[str] = ""
    model: ClassVar[type[BaseModel] | None] = None
    # fields the backend binds to a numeric enum
    enum_fields: ClassVar[dict[str, type[Enum]]] = {}

    @property
    def module(self) -> str:
        return self.resource.lower()

    @property
    def base_path(self) -> str:
        return f"/api/{self.resource}"

    def list(
        self,
        *,
        page_number: int = 1,
        page_size: int | None = None,
        search_term: str | None = None,
        sort_by: str | None = None,
        sort_descending: bool = False,
        **filters: Any,
    ) -> Listing:
        resolved_size = page_size or self.http.config.default_page_size
        params: dict[str, Any] = {"pageNumber": page_number, "pageSize": resolved_size}
        if search_term:
            params["searchTerm"] = search_term
        if sort_by:
            params["sortBy"] = sort_by
            params["sortDescending"] = "true" if sort_descending else "false"
        for key, value in filters.items():
            if value is None or value == "":
                continue
            if key not in _FILTER_PARAMS:
                raise ValueError(f"Unsupported filter for {self.resource}: {key}")
            params[_FILTER_PARAMS[key]] = str(value).lower() if isinstance(value, bool) else value
        payload = self._request("GET", self.base_path, params=params, module=self.module, operation="list")
        return normalize_listing(self._prepare(payload), model=self.model, page=page_number, page_size=resolved_size)

    def list_all(self, **filters: Any) -> list[dict[str, Any]]:
        return self.list(page_size=LIST_ALL_PAGE_SIZE, **filters).rows

    def get(self, record_id: str) -> dict[str, Any]:
        payload = self._request("GET", f"{self.base_path}/{record_id}", module=self.module, operation="get")
        return to_record(self._prepare_row(payload or {}), self.model)

    def create(self, payload: dict[str, Any]) -> RetryableMutation:
        return self._mutation_handle("POST", self.base_path, self._outgoing(payload), operation="create")

    def update(self, record_id: str, payload: dict[str, Any]) -> RetryableMutation:
        body = {**self._outgoing(payload), "id": record_id}
        return self._mutation_handle("PUT", f"{self.base_path}/{record_id}", body, operation="update")

    def delete(self, record_id: str) -> RetryableMutation:
        return self._mutation_handle("DELETE", f"{self.base_path}/{record_id}", None, operation="delete")

    def _outgoing(self, payload: dict[str, Any]) -> dict[str, Any]:
        body: dict[str, Any] = {}
        for key, value in payload.items():
            if key in self.enum_fields:
                value = status_ordinal(value, self.enum_fields[key])
            elif value == "":
                value = None
            body[to_camel(key) if "_" in key else key] = value
        return body

    def _prepare(self, payload: Any) -> Any:
        if isinstance(payload, dict) and isinstance(payload.get("items"), list):
            return {**payload, "items": [self._prepare_row(row) for row in payload["items"]]}
        if isinstance(payload, list):
            return [self._prepare_row(row) for row in payload]
        return payload

    def _prepare_row(self, row: dict[str, Any]) -> dict[str, Any]:
        return row

    def _mutation_handle(
        self,
        method: str,
        path: str,
        payload: dict[str, Any] | None,
        *,
        operation: str,
    ) -> RetryableMutation:
        def _run():
            return self._request(
                method,
                path,
                json_body=payload,
                module=self.module,
                operation=operation,
                invalidate_paths=[self.base_path],
            )

        return RetryableMutation(execute_fn=_run)


class AssetsClient(ResourceClient):
    resource = "Assets"
    model = Asset
    enum_fields = {"status": AssetStatus}

    def assign(self, asset_id: str, employee_id: str, *, notes: str | None = None) -> RetryableMutation:
        body = {"assetId": asset_id, "employeeId": employee_id, "notes": notes}
        return self._mutation_handle("POST", f"{self.base_path}/{asset_id}/assign", body, operation="assign")

    def unassign(self, asset_id: str, *, notes: str | None = None) -> RetryableMutation:
        body = {"assetId": asset_id, "notes": notes}
        return self._mutation_handle("POST", f"{self.base_path}/{asset_id}/unassign", body, operation="unassign")


class EmployeesClient(ResourceClient):
    resource = "Employees"
    model = Employee
    enum_fields = {"status": Status}


class SimCardsClient(ResourceClient):
    resource = "SimCards"
    model = SimCard
    enum_fields = {"sim_status": SimCardStatus}

    def assign(self, sim_card_id: str, employee_id: str, *, notes: str | None = None) -> RetryableMutation:
        body = {"simCardId": sim_card_id, "employeeId": employee_id, "notes": notes}
        return self._mutation_handle("POST", f"{self.base_path}/{sim_card_id}/assign", body, operation="assign")

    def unassign(self, sim_card_id: str, *, notes: str | None = None) -> RetryableMutation:
        body = {"simCardId": sim_card_id, "notes": notes}
        return self._mutation_handle("POST", f"{self.base_path}/{sim_card_id}/unassign", body, operation="unassign")


class SoftwareLicensesClient(ResourceClient):
    resource = "SoftwareLicenses"
    model = SoftwareLicense
    enum_fields = {"status": SoftwareLicenseStatus}

    def assign(self, license_id: str, employee_id: str, *, notes: str | None = None) -> RetryableMutation:
        body = {"employeeId": employee_id, "notes": notes}
        return self._mutation_handle("POST", f"{self.base_path}/{license_id}/assign", body, operation="assign")

    def unassign(self, assignment_id: str, *, notes: str | None = None) -> RetryableMutation:
        path = f"{self.base_path}/assignments/{assignment_id}/unassign"

        def _run():
            return self._request(
                "POST",
                path,
                params={"notes": notes} if notes else None,
                module=self.module,
                operation="unassign",
                invalidate_paths=[self.base_path],
            )

        return RetryableMutation(execute_fn=_run)

    def assignments(self, license_id: str) -> list[SoftwareLicenseAssignment]:
        payload = self._request(
            "GET",
            f"{self.base_path}/{license_id}/assignments",
            module=self.module,
            operation="assignments",
        )
        return [SoftwareLicenseAssignment.model_validate(row) for row in payload or []]


class PurchaseOrdersClient(ResourceClient):
    resource = "PurchaseOrders"
    model = PurchaseOrder
    enum_fields = {"status": PurchaseOrderStatus}


class AccessoriesClient(ResourceClient):
    resource = "Accessories"
    model = Accessory

    def assign(
        self,
        accessory_id: str,
        employee_id: str,
        *,
        quantity: int = 1,
        notes: str | None = None,
    ) -> RetryableMutation:
        body = {"employeeId": employee_id, "quantity": quantity, "notes": notes}
        return self._mutation_handle("POST", f"{self.base_path}/{accessory_id}/assign", body, operation="assign")

    def unassign(
        self,
        accessory_id: str,
        employee_id: str,
        *,
        quantity: int | None = None,
        notes: str | None = None,
    ) -> RetryableMutation:
        body = {"employeeId": employee_id, "quantity": quantity, "notes": notes}
        return self._mutation_handle("POST", f"{self.base_path}/{accessory_id}/unassign", body, operation="unassign")
