from __future__ import annotations

from dataclasses import dataclass

from .auth_store import AuthStore
from .clients.auth import AuthClient
from .clients.master_data import MasterDataClient
from .clients.resources import (
    AccessoriesClient,
    AssetsClient,
    EmployeesClient,
    PurchaseOrdersClient,
    SimCardsClient,
    SoftwareLicensesClient,
)
from .config import ClientConfig
from .http_client import HttpClient
from .models import LoginResponse, SessionData, UserProfile
from .tracing import TraceContext


@dataclass
class ApiSession:
    config: ClientConfig
    auth_store: AuthStore | None = None
    trace: TraceContext | None = None
    token: str | None = None
    user: UserProfile | None = None
    http: HttpClient | None = None

    def __post_init__(self) -> None:
        self.auth_store = self.auth_store or AuthStore()
        self.trace = self.trace or TraceContext()
        # one HttpClient per session so cookies and the GET cache are shared
        self.http = self.http or HttpClient(config=self.config, trace=self.trace)
        stored = self.auth_store.load()
        if stored and not self.token and stored.env_name in {None, self.config.env_name}:
            self.token = stored.access_token
            self.user = stored.user

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def auth_client(self) -> AuthClient:
        return AuthClient(http=self.http, access_token=self.token)

    def assets_client(self) -> AssetsClient:
        return AssetsClient(http=self.http, access_token=self.token)

    def employees_client(self) -> EmployeesClient:
        return EmployeesClient(http=self.http, access_token=self.token)

    def sim_cards_client(self) -> SimCardsClient:
        return SimCardsClient(http=self.http, access_token=self.token)

    def software_licenses_client(self) -> SoftwareLicensesClient:
        return SoftwareLicensesClient(http=self.http, access_token=self.token)

    def purchase_orders_client(self) -> PurchaseOrdersClient:
        return PurchaseOrdersClient(http=self.http, access_token=self.token)

    def accessories_client(self) -> AccessoriesClient:
        return AccessoriesClient(http=self.http, access_token=self.token)

    def master_data_client(self) -> MasterDataClient:
        return MasterDataClient(http=self.http, access_token=self.token)

    def establish(self, login: LoginResponse) -> None:
        self.token = login.token
        self.user = login.user
        self.http.clear_cache()
        self.auth_store.save(
            SessionData(
                access_token=login.token,
                refresh_token=login.refresh_token,
                user=login.user,
                env_name=self.config.env_name,
            )
        )

    def clear(self) -> None:
        self.token = None
        self.user = None
        if self.http:
            self.http.clear_cache()
        if self.auth_store:
            self.auth_store.clear()
