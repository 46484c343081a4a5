from .auth_store import AuthStore
from .config import ClientConfig, ConfigError, load_config
from .exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    RateLimitError,
    ServerError,
    TransportError,
    ValidationError,
)
from .http_client import HttpClient
from .models import (
    Accessory,
    Asset,
    AssetStatus,
    Employee,
    LoginResponse,
    MasterDataItem,
    MasterDataStatistics,
    PaginatedResult,
    PurchaseOrder,
    PurchaseOrderStatus,
    SessionData,
    SimCard,
    SimCardStatus,
    SoftwareLicense,
    SoftwareLicenseStatus,
    Status,
    UserProfile,
    UserRole,
)
from .normalizers import Listing, normalize_listing
from .session import ApiSession
from .tracing import TraceContext

__version__ = "0.1.0"

__all__ = [
    "Accessory",
    "ApiError",
    "ApiSession",
    "Asset",
    "AssetStatus",
    "AuthError",
    "AuthStore",
    "ClientConfig",
    "ConfigError",
    "ConflictError",
    "Employee",
    "HttpClient",
    "Listing",
    "LoginResponse",
    "MasterDataItem",
    "MasterDataStatistics",
    "NotFoundError",
    "PaginatedResult",
    "PermissionDeniedError",
    "PurchaseOrder",
    "PurchaseOrderStatus",
    "RateLimitError",
    "ServerError",
    "SessionData",
    "SimCard",
    "SimCardStatus",
    "SoftwareLicense",
    "SoftwareLicenseStatus",
    "Status",
    "TraceContext",
    "TransportError",
    "UserProfile",
    "UserRole",
    "ValidationError",
    "load_config",
    "normalize_listing",
]
