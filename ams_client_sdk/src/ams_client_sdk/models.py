from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Status(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class AssetStatus(str, Enum):
    AVAILABLE = "available"
    ASSIGNED = "assigned"
    MAINTENANCE = "maintenance"
    RETIRED = "retired"


class PurchaseOrderStatus(str, Enum):
    DRAFT = "draft"
    PENDING = "pending"
    APPROVED = "approved"
    ORDERED = "ordered"
    RECEIVED = "received"
    CANCELLED = "cancelled"


class SimCardStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"
    EXPIRED = "expired"


class SoftwareLicenseStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    EXPIRED = "expired"


class UserRole(str, Enum):
    SUPERADMIN = "SuperAdmin"
    ADMIN = "Admin"
    MANAGER = "Manager"
    USER = "User"


def coerce_status(value: Any, enum_cls: type[Enum]) -> str | None:
    """Map backend enum payloads (1-based ordinals or PascalCase names) to lowercase values."""
    if value is None or value == "":
        return None
    members = list(enum_cls)
    if isinstance(value, bool):
        return members[0].value if value else members[1].value
    if isinstance(value, int) or (isinstance(value, str) and value.strip().isdigit()):
        index = int(value) - 1
        if 0 <= index < len(members):
            return members[index].value
        raise ValueError(f"Unknown {enum_cls.__name__} ordinal: {value}")
    probe = str(value).strip().lower()
    for member in members:
        if member.value == probe:
            return member.value
    raise ValueError(f"Unknown {enum_cls.__name__} value: {value}")


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class UserProfile(ApiModel):
    id: str
    user_name: str
    email: str
    first_name: str | None = None
    last_name: str | None = None
    department: str | None = None
    role: str = UserRole.USER.value
    is_active: bool = True
    permissions: list[str] = Field(default_factory=list)
    project_ids: list[str] = Field(default_factory=list)

    @property
    def full_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class LoginResponse(ApiModel):
    token: str
    refresh_token: str | None = None
    expires_at: datetime | None = None
    user: UserProfile


class SessionData(BaseModel):
    access_token: str
    refresh_token: str | None = None
    user: UserProfile | None = None
    env_name: str | None = None


class PaginatedResult(ApiModel):
    items: list[dict[str, Any]] = Field(default_factory=list)
    total_count: int = 0
    page_number: int = 1
    page_size: int = 10
    total_pages: int = 0


class Record(ApiModel):
    id: str
    created_at: datetime | None = None
    created_by: str | None = None
    updated_at: datetime | None = None


class MasterDataItem(Record):
    name: str
    description: str | None = None
    status: str | None = Status.ACTIVE.value
    code: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> str | None:
        return coerce_status(value, Status)


class Asset(Record):
    asset_tag: str
    name: str
    description: str | None = None
    serial_number: str | None = None
    status: str | None = AssetStatus.AVAILABLE.value
    condition: str | None = None
    po_number: str | None = None
    location: str | None = None
    notes: str | None = None
    item_id: str | None = None
    project_id: str | None = None
    item_name: str | None = None
    project_name: str | None = None
    assigned_employee_id: str | None = None
    assigned_employee_name: str | None = None
    assignment_date: datetime | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> str | None:
        return coerce_status(value, AssetStatus)


class Employee(Record):
    employee_id: str
    first_name: str
    last_name: str = ""
    email: str | None = None
    phone: str | None = None
    status: str | None = Status.ACTIVE.value
    department_id: str | None = None
    department_name: str | None = None
    sub_department_name: str | None = None
    employee_position_name: str | None = None
    employee_category_name: str | None = None
    nationality_name: str | None = None
    project_id: str | None = None
    project_name: str | None = None
    company_name: str | None = None
    cost_center_name: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> str | None:
        return coerce_status(value, Status)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class SimCard(Record):
    sim_account_no: str
    sim_service_no: str
    sim_start_date: datetime | None = None
    sim_status: str | None = SimCardStatus.ACTIVE.value
    sim_serial_no: str | None = None
    sim_type_id: str | None = None
    sim_card_plan_id: str | None = None
    sim_provider_id: str | None = None
    sim_type_name: str | None = None
    sim_card_plan_name: str | None = None
    sim_provider_name: str | None = None
    project_id: str | None = None
    project_name: str | None = None
    assigned_employee_name: str | None = None

    @field_validator("sim_status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> str | None:
        return coerce_status(value, SimCardStatus)


class SoftwareLicense(Record):
    software_name: str
    license_key: str | None = None
    license_type: str | None = None
    seats: int | None = None
    vendor: str | None = None
    purchase_date: datetime | None = None
    expiry_date: datetime | None = None
    cost: Decimal | None = None
    status: str | None = SoftwareLicenseStatus.ACTIVE.value
    notes: str | None = None
    po_number: str | None = None
    project_id: str | None = None
    project_name: str | None = None
    assigned_employee_name: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> str | None:
        return coerce_status(value, SoftwareLicenseStatus)


class PurchaseOrder(Record):
    po_number: str
    po_date: datetime | None = None
    expected_delivery_date: datetime | None = None
    actual_delivery_date: datetime | None = None
    status: str | None = PurchaseOrderStatus.DRAFT.value
    total_amount: Decimal | None = None
    notes: str | None = None
    supplier_id: str | None = None
    supplier_name: str | None = None
    project_id: str | None = None
    project_name: str | None = None
    requested_by_name: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> str | None:
        return coerce_status(value, PurchaseOrderStatus)


class Accessory(Record):
    name: str
    description: str | None = None
    status: str | None = Status.ACTIVE.value
    quantity: int = 0
    assigned_employee_name: str | None = None

    @field_validator("status", mode="before")
    @classmethod
    def _status(cls, value: Any) -> str | None:
        return coerce_status(value, Status)


class SoftwareLicenseAssignment(ApiModel):
    id: str
    software_license_id: str | None = None
    employee_id: str | None = None
    employee_name: str | None = None
    assigned_date: datetime | None = None
    notes: str | None = None


class MasterDataStatistics(ApiModel):
    total_companies: int = 0
    total_departments: int = 0
    total_projects: int = 0
    total_employees: int = 0
    total_assets: int = 0
    total_sim_cards: int = 0
    total_software_licenses: int = 0


def status_ordinal(value: Any, enum_cls: type[Enum]) -> int | None:
    """Inverse of ``coerce_status``: the backend deserializes enums from their 1-based ordinal."""
    label = coerce_status(value, enum_cls)
    if label is None:
        return None
    return [member.value for member in enum_cls].index(label) + 1
