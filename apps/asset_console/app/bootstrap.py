from __future__ import annotations

from ams_client_sdk import ApiSession, ClientConfig, load_config
from ams_client_sdk.clients.resources import ResourceClient
from ams_client_sdk.models import UserProfile
from shared.telemetry.events import EventCategory, build_event
from shared.telemetry.logger import TelemetryLogger

from apps.asset_console.app.state import AssetConsoleState
from apps.asset_console.infrastructure.logging.logger import get_logger, log_action
from apps.asset_console.services.entity_service import EntityService
from apps.asset_console.ui.entity_adapters import get_adapter
from apps.asset_console.ui.shared.notification_center import NotificationCenter
from apps.asset_console.ui.widgets.permissioned_actions import Capability

logger = get_logger(__name__)


class AssetConsoleBootstrap:
    def __init__(
        self,
        config: ClientConfig | None = None,
        session: ApiSession | None = None,
        telemetry: TelemetryLogger | None = None,
    ) -> None:
        self.config = config or load_config()
        self.session = session or ApiSession(self.config)
        self.state = AssetConsoleState()
        self.notifications = NotificationCenter()
        self.telemetry = telemetry or TelemetryLogger(app_name="asset_console")
        self._services: dict[str, EntityService] = {}
        if self.session.authenticated and self.session.user is not None:
            self._apply_user(self.session.user)

    def login(self, email: str, password: str) -> UserProfile:
        response = self.session.auth_client().login(email, password)
        self.session.establish(response)
        self._services.clear()
        self._apply_user(response.user)
        trace_id = self.session.trace.trace_id
        log_action(logger, "auth", "login", response.user.role, trace_id, "success")
        self.telemetry.emit(
            build_event(EventCategory.SESSION, "auth", "login", trace_id=trace_id, attributes={"role": response.user.role})
        )
        return response.user

    def logout(self) -> None:
        try:
            if self.session.authenticated:
                self.session.auth_client().logout()
        finally:
            self.session.clear()
            self.state.session.reset()
            self._services.clear()

    def _apply_user(self, user: UserProfile) -> None:
        self.state.session.actor = user.email
        self.state.session.user_id = user.id
        self.state.session.capability = Capability.from_user(user.role, user.permissions)
        self.state.session.project_ids = list(user.project_ids)

    def client_for(self, entity_key: str) -> ResourceClient:
        adapter = get_adapter(entity_key)
        factories = {
            "assets": self.session.assets_client,
            "employees": self.session.employees_client,
            "sim_cards": self.session.sim_cards_client,
            "software_licenses": self.session.software_licenses_client,
            "purchase_orders": self.session.purchase_orders_client,
            "accessories": self.session.accessories_client,
        }
        if adapter.master_data:
            return self.session.master_data_client().resource(adapter.key)
        return factories[adapter.key]()

    def service_for(self, entity_key: str) -> EntityService:
        """Services are cached per entity and dropped whenever the signed-in user changes."""
        adapter = get_adapter(entity_key)
        if adapter.key not in self._services:
            self._services[adapter.key] = EntityService(
                self.client_for(adapter.key),
                adapter,
                self.state.session,
                notifications=self.notifications,
                telemetry=self.telemetry,
            )
        return self._services[adapter.key]
