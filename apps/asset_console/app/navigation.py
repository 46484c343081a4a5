from __future__ import annotations

from dataclasses import dataclass

from apps.asset_console.ui.widgets.permissioned_actions import Capability, gate_permission


@dataclass(frozen=True)
class NavItem:
    label: str
    route: str
    permission: str | None
    entity: str | None = None


MAIN_NAV: tuple[NavItem, ...] = (
    NavItem("Dashboard", "/", None),
    NavItem("Assets", "/assets", "assets:read", "assets"),
    NavItem("Inventory", "/inventory", "assets:read"),
    NavItem("Employees", "/employees", "employees:read", "employees"),
    NavItem("Purchase Orders", "/purchase-orders", "purchase_orders:read", "purchase_orders"),
    NavItem("SIM Cards", "/sim-cards", "sim_cards:read", "sim_cards"),
    NavItem("Software Licenses", "/software-licenses", "software_licenses:read", "software_licenses"),
    NavItem("Reports", "/reports", "reports:read"),
    NavItem("User Management", "/user-management", "users:read"),
)

MASTER_DATA_NAV: tuple[NavItem, ...] = (
    NavItem("Projects", "/master-data/projects", "master_data:read", "projects"),
    NavItem("Departments", "/master-data/departments", "master_data:read", "departments"),
    NavItem("Sub Departments", "/master-data/sub-departments", "master_data:read", "sub_departments"),
    NavItem("Companies", "/master-data/companies", "master_data:read", "companies"),
    NavItem("Cost Centers", "/master-data/cost-centers", "master_data:read", "cost_centers"),
    NavItem("Employee Categories", "/master-data/employee-categories", "master_data:read", "employee_categories"),
    NavItem("Employee Positions", "/master-data/employee-positions", "master_data:read", "employee_positions"),
    NavItem("Nationalities", "/master-data/nationalities", "master_data:read", "nationalities"),
    NavItem("Vendors", "/master-data/vendors", "master_data:read", "vendors"),
    NavItem("Item Categories", "/master-data/item-categories", "master_data:read", "item_categories"),
    NavItem("Items", "/master-data/items", "master_data:read", "items"),
    NavItem("Accessories", "/master-data/accessories", "master_data:read", "accessories"),
    NavItem("SIM Card Plans", "/master-data/sim-card-plans", "master_data:read", "sim_card_plans"),
    NavItem("SIM Providers", "/master-data/sim-providers", "master_data:read", "sim_providers"),
    NavItem("SIM Types", "/master-data/sim-types", "master_data:read", "sim_types"),
)


def build_navigation(capability: Capability) -> list[tuple[NavItem, bool, str | None]]:
    return [
        (item, gate.allowed, gate.reason)
        for item in (*MAIN_NAV, *MASTER_DATA_NAV)
        for gate in [gate_permission(capability, item.permission, deny_message="Missing permission")]
    ]


def visible_navigation(capability: Capability) -> dict[str, list[NavItem]]:
    """Sidebar sections with the entries the user may open."""
    return {
        "main": [item for item in MAIN_NAV if item.permission is None or capability.can(item.permission)],
        "master_data": [item for item in MASTER_DATA_NAV if capability.can(item.permission or "master_data:read")],
    }


def find_route(route: str) -> NavItem | None:
    return next((item for item in (*MAIN_NAV, *MASTER_DATA_NAV) if item.route == route), None)
