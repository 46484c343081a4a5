from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from ..models import MasterDataItem, MasterDataStatistics, Status
from ..normalizers import Listing, normalize_active_flag
from .base import BaseClient
from .resources import ResourceClient

MASTER_DATA_ENDPOINTS: dict[str, str] = {
    "companies": "Companies",
    "projects": "Projects",
    "departments": "Departments",
    "sub_departments": "SubDepartments",
    "cost_centers": "CostCenters",
    "employee_categories": "EmployeeCategories",
    "employee_positions": "EmployeePositions",
    "nationalities": "Nationalities",
    "suppliers": "Suppliers",
    "item_categories": "ItemCategories",
    "items": "Items",
    "sim_providers": "SimProviders",
    "sim_types": "SimTypes",
    "sim_card_plans": "SimCardPlans",
    "accessories": "Accessories",
}

MASTER_DATA_ALIASES: dict[str, str] = {"vendors": "suppliers"}

# these controllers expose a boolean isActive instead of a status enum
ACTIVE_FLAG_TYPES = frozenset({"sim_providers", "sim_types", "sim_card_plans"})
# these bind status to the numeric Status enum; the rest take the lowercase string
ENUM_STATUS_TYPES = frozenset({"companies", "projects"})


def resolve_master_data_type(data_type: str) -> str:
    key = data_type.strip().lower().replace("-", "_")
    key = MASTER_DATA_ALIASES.get(key, key)
    if key not in MASTER_DATA_ENDPOINTS:
        raise ValueError(f"Unknown master data type: {data_type}")
    return key


@dataclass
class MasterDataResourceClient(ResourceClient):
    data_type: str = "departments"
    model = MasterDataItem

    def __post_init__(self) -> None:
        self.data_type = resolve_master_data_type(self.data_type)

    @property
    def base_path(self) -> str:
        return f"/api/{MASTER_DATA_ENDPOINTS[self.data_type]}"

    @property
    def module(self) -> str:
        return f"master_data.{self.data_type}"

    def _prepare_row(self, row: dict[str, Any]) -> dict[str, Any]:
        if self.data_type in ACTIVE_FLAG_TYPES:
            return normalize_active_flag(row)
        return row

    @property
    def enum_fields(self) -> dict[str, type[Enum]]:
        return {"status": Status} if self.data_type in ENUM_STATUS_TYPES else {}

    def _outgoing(self, payload: dict[str, Any]) -> dict[str, Any]:
        if self.data_type in ACTIVE_FLAG_TYPES and "status" in payload:
            body = {key: value for key, value in payload.items() if key != "status"}
            body["is_active"] = str(payload["status"]).lower() == "active"
            return super()._outgoing(body)
        return super()._outgoing(payload)


class MasterDataClient(BaseClient):
    """Entry point for the lookup tables plus the aggregate statistics endpoint."""

    module = "master_data"

    def resource(self, data_type: str) -> MasterDataResourceClient:
        return MasterDataResourceClient(http=self.http, access_token=self.access_token, data_type=data_type)

    def list(self, data_type: str, **kwargs: Any) -> Listing:
        return self.resource(data_type).list(**kwargs)

    def list_all(self, data_type: str) -> list[dict[str, Any]]:
        return self.resource(data_type).list_all()

    def statistics(self) -> MasterDataStatistics:
        payload = self._request("GET", "/api/MasterData/statistics", module=self.module, operation="statistics")
        return MasterDataStatistics.model_validate(payload or {})
