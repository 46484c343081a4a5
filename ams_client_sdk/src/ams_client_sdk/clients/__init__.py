from .auth import AuthClient
from .base import BaseClient, RetryableMutation
from .master_data import MasterDataClient, MasterDataResourceClient
from .resources import (
    AccessoriesClient,
    AssetsClient,
    EmployeesClient,
    PurchaseOrdersClient,
    ResourceClient,
    SimCardsClient,
    SoftwareLicensesClient,
)

__all__ = [
    "AccessoriesClient",
    "AssetsClient",
    "AuthClient",
    "BaseClient",
    "EmployeesClient",
    "MasterDataClient",
    "MasterDataResourceClient",
    "PurchaseOrdersClient",
    "ResourceClient",
    "RetryableMutation",
    "SimCardsClient",
    "SoftwareLicensesClient",
]
