from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from apps.asset_console.ui.formatters import format_currency, format_date, format_expiry, format_status
from apps.asset_console.ui.list_view.controller import Column, ListViewConfig
from apps.asset_console.ui.list_view.sorting import SortDirection, ValueKind

Enricher = Callable[[dict[str, Any]], dict[str, Any]]


@dataclass(frozen=True)
class EntityAdapter:
    key: str
    config: ListViewConfig
    enrich: Enricher | None = None
    master_data: bool = False

    def prepare(self, record: Mapping[str, Any]) -> dict[str, Any]:
        row = dict(record)
        return self.enrich(row) if self.enrich else row


def _created_at() -> Column:
    return Column("created_at", "Created", kind=ValueKind.DATE, formatter=format_date)


def master_data_config(title: str) -> ListViewConfig:
    return ListViewConfig(
        title=title,
        columns=(
            Column("name", "Name"),
            Column("description", "Description", sortable=False),
            Column("status", "Status", formatter=format_status),
            _created_at(),
        ),
        searchable_fields=("name", "description", "status", "created_at"),
        filterable_fields=("status",),
        required_fields=("name",),
        editable_fields=("name", "description", "status"),
        draft_defaults={"name": "", "description": "", "status": "active"},
        permission_scope="master_data",
    )


MASTER_DATA_TITLES: dict[str, str] = {
    "projects": "Projects",
    "departments": "Departments",
    "sub_departments": "Sub Departments",
    "companies": "Companies",
    "cost_centers": "Cost Centers",
    "employee_categories": "Employee Categories",
    "employee_positions": "Employee Positions",
    "nationalities": "Nationalities",
    "vendors": "Vendors",
    "item_categories": "Item Categories",
    "items": "Items",
    "sim_card_plans": "SIM Card Plans",
    "sim_providers": "SIM Providers",
    "sim_types": "SIM Types",
}


def _employee_full_name(row: dict[str, Any]) -> dict[str, Any]:
    row.setdefault("full_name", f"{row.get('first_name') or ''} {row.get('last_name') or ''}".strip())
    return row


ASSETS = EntityAdapter(
    key="assets",
    config=ListViewConfig(
        title="Assets",
        columns=(
            Column("asset_tag", "Asset Tag"),
            Column("name", "Name"),
            Column("serial_number", "Serial Number"),
            Column("item_name", "Item"),
            Column("project_name", "Project"),
            Column("assigned_employee_name", "Assigned To"),
            Column("status", "Status", formatter=format_status),
            Column("condition", "Condition", formatter=format_status),
            _created_at(),
        ),
        searchable_fields=("name", "asset_tag", "serial_number", "assigned_employee_name", "po_number"),
        filterable_fields=("status", "project_name", "condition"),
        required_fields=("asset_tag", "name"),
        editable_fields=(
            "asset_tag",
            "name",
            "description",
            "serial_number",
            "status",
            "condition",
            "po_number",
            "location",
            "item_id",
            "project_id",
            "notes",
        ),
        draft_defaults={"status": "available", "condition": "good"},
        default_sort_key="asset_tag",
        permission_scope="assets",
    ),
)

EMPLOYEES = EntityAdapter(
    key="employees",
    config=ListViewConfig(
        title="Employees",
        columns=(
            Column("employee_id", "Employee ID"),
            Column("full_name", "Name"),
            Column("email", "Email"),
            Column("phone", "Phone", sortable=False),
            Column("department_name", "Department"),
            Column("project_name", "Project"),
            Column("status", "Status", formatter=format_status),
        ),
        searchable_fields=("employee_id", "full_name", "email", "department_name", "employee_position_name"),
        filterable_fields=("status", "department_name", "project_name"),
        required_fields=("employee_id", "first_name", "last_name"),
        editable_fields=(
            "employee_id",
            "first_name",
            "last_name",
            "email",
            "phone",
            "status",
            "department_id",
            "project_id",
        ),
        draft_defaults={"status": "active"},
        default_sort_key="full_name",
        permission_scope="employees",
    ),
    enrich=_employee_full_name,
)

SIM_CARDS = EntityAdapter(
    key="sim_cards",
    config=ListViewConfig(
        title="SIM Cards",
        columns=(
            Column("sim_account_no", "Account No"),
            Column("sim_service_no", "Service No"),
            Column("sim_provider_name", "Provider"),
            Column("sim_card_plan_name", "Plan"),
            Column("sim_type_name", "Type"),
            Column("assigned_employee_name", "Assigned To"),
            Column("sim_status", "Status", formatter=format_status),
            Column("sim_start_date", "Start Date", kind=ValueKind.DATE, formatter=format_date),
        ),
        searchable_fields=("sim_account_no", "sim_service_no", "sim_serial_no", "assigned_employee_name"),
        filterable_fields=("sim_status", "sim_provider_name", "sim_card_plan_name"),
        required_fields=("sim_account_no", "sim_service_no"),
        editable_fields=(
            "sim_account_no",
            "sim_service_no",
            "sim_serial_no",
            "sim_start_date",
            "sim_status",
            "sim_provider_id",
            "sim_card_plan_id",
            "sim_type_id",
            "project_id",
        ),
        draft_defaults={"sim_status": "active"},
        default_sort_key="sim_account_no",
        permission_scope="sim_cards",
    ),
)

SOFTWARE_LICENSES = EntityAdapter(
    key="software_licenses",
    config=ListViewConfig(
        title="Software Licenses",
        columns=(
            Column("software_name", "Software"),
            Column("license_type", "Type"),
            Column("vendor", "Vendor"),
            Column("seats", "Seats", kind=ValueKind.NUMBER),
            Column("cost", "Cost", kind=ValueKind.NUMBER, formatter=format_currency),
            Column("purchase_date", "Purchased", kind=ValueKind.DATE, formatter=format_date),
            Column("expiry_date", "Expires", kind=ValueKind.DATE, formatter=format_expiry),
            Column("status", "Status", formatter=format_status),
        ),
        searchable_fields=("software_name", "vendor", "license_key", "po_number"),
        filterable_fields=("status", "vendor"),
        required_fields=("software_name",),
        editable_fields=(
            "software_name",
            "license_key",
            "license_type",
            "seats",
            "vendor",
            "purchase_date",
            "expiry_date",
            "cost",
            "status",
            "po_number",
            "project_id",
            "notes",
        ),
        draft_defaults={"status": "active"},
        default_sort_key="software_name",
        permission_scope="software_licenses",
    ),
)

PURCHASE_ORDERS = EntityAdapter(
    key="purchase_orders",
    config=ListViewConfig(
        title="Purchase Orders",
        columns=(
            Column("po_number", "PO Number"),
            Column("po_date", "PO Date", kind=ValueKind.DATE, formatter=format_date),
            Column("expected_delivery_date", "Expected", kind=ValueKind.DATE, formatter=format_date),
            Column("supplier_name", "Supplier"),
            Column("project_name", "Project"),
            Column("total_amount", "Total", kind=ValueKind.NUMBER, formatter=format_currency),
            Column("status", "Status", formatter=format_status),
        ),
        searchable_fields=("po_number", "supplier_name", "project_name", "notes"),
        filterable_fields=("status", "supplier_name", "project_name"),
        required_fields=("po_number", "supplier_id", "project_id"),
        editable_fields=(
            "po_number",
            "po_date",
            "expected_delivery_date",
            "status",
            "supplier_id",
            "project_id",
            "notes",
        ),
        draft_defaults={"status": "draft"},
        default_sort_key="po_date",
        default_sort_direction=SortDirection.DESC,
        permission_scope="purchase_orders",
    ),
)

ACCESSORIES = EntityAdapter(
    key="accessories",
    config=ListViewConfig(
        title="Accessories",
        columns=(
            Column("name", "Name"),
            Column("description", "Description", sortable=False),
            Column("quantity", "Quantity", kind=ValueKind.NUMBER),
            Column("assigned_employee_name", "Assigned To"),
            Column("status", "Status", formatter=format_status),
            _created_at(),
        ),
        searchable_fields=("name", "description", "status"),
        filterable_fields=("status",),
        required_fields=("name",),
        editable_fields=("name", "description", "status"),
        draft_defaults={"name": "", "description": "", "status": "active"},
        permission_scope="master_data",
    ),
)

ENTITY_ADAPTERS: dict[str, EntityAdapter] = {
    adapter.key: adapter
    for adapter in (ASSETS, EMPLOYEES, SIM_CARDS, SOFTWARE_LICENSES, PURCHASE_ORDERS, ACCESSORIES)
}
ENTITY_ADAPTERS.update(
    {key: EntityAdapter(key=key, config=master_data_config(title), master_data=True) for key, title in MASTER_DATA_TITLES.items()}
)


def get_adapter(key: str) -> EntityAdapter:
    normalized = key.strip().lower().replace("-", "_")
    try:
        return ENTITY_ADAPTERS[normalized]
    except KeyError as exc:
        raise ValueError(f"Unknown entity: {key}") from exc
