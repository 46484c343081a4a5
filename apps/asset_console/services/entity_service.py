from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from ams_client_sdk.clients.base import RetryableMutation
from ams_client_sdk.clients.resources import ResourceClient
from ams_client_sdk.exceptions import ApiError
from shared.telemetry.events import EventCategory, build_event
from shared.telemetry.logger import TelemetryLogger

from apps.asset_console.app.state import OperationRecord, SessionState
from apps.asset_console.infrastructure.logging.logger import get_logger, log_action
from apps.asset_console.ui.entity_adapters import EntityAdapter
from apps.asset_console.ui.list_view.controller import ListViewController
from apps.asset_console.ui.shared.error_presenter import AdminErrorPresenter, PresentedError
from apps.asset_console.ui.shared.notification_center import NotificationCenter

logger = get_logger(__name__)


@dataclass
class MutationResult:
    record_id: str | None
    trace_id: str | None
    operation: OperationRecord
    refresh_required: bool = True


class EntityService:
    """Loads one entity collection and persists list-view mutations through the API client."""

    def __init__(
        self,
        client: ResourceClient,
        adapter: EntityAdapter,
        state: SessionState,
        *,
        notifications: NotificationCenter | None = None,
        telemetry: TelemetryLogger | None = None,
        presenter: AdminErrorPresenter | None = None,
    ) -> None:
        self.client = client
        self.adapter = adapter
        self.state = state
        self.notifications = notifications or NotificationCenter()
        self.telemetry = telemetry or TelemetryLogger(app_name="asset_console", enabled=False)
        self.presenter = presenter or AdminErrorPresenter()
        self.records: list[dict[str, Any]] = []
        self.controller: ListViewController | None = None
        self.pending_retry: RetryableMutation | None = None

    @property
    def module(self) -> str:
        return self.adapter.key

    def build_controller(self) -> ListViewController:
        self.controller = ListViewController(
            self.adapter.config,
            records=self.records,
            on_add=self.on_add,
            on_edit=self.on_edit,
            on_delete=self.on_delete,
            capability=self.state.capability,
            notifications=self.notifications,
        )
        return self.controller

    def load(self) -> list[dict[str, Any]]:
        started = time.monotonic()
        try:
            rows = self.client.list_all()
        except ApiError as exc:
            self._report(exc, action="load")
            self._emit(EventCategory.LIST_LOAD, "load", False, started, trace_id=exc.trace_id, error_code=exc.code)
            raise
        self.records = [self.adapter.prepare(row) for row in rows]
        if self.controller is not None:
            self.controller.set_records(self.records)
        self._emit(EventCategory.LIST_LOAD, "load", True, started, attributes={"count": len(self.records)})
        return self.records

    def on_add(self, values: dict[str, Any]) -> MutationResult:
        return self._mutate("create", None, self.client.create(values))

    def on_edit(self, record_id: str, values: dict[str, Any]) -> MutationResult:
        return self._mutate("update", record_id, self.client.update(record_id, values))

    def on_delete(self, record_id: str) -> MutationResult:
        return self._mutate("delete", record_id, self.client.delete(record_id))

    def retry_pending(self) -> MutationResult | None:
        """Replays the last failed mutation when the failure was transient."""
        if self.pending_retry is None:
            return None
        handle, self.pending_retry = self.pending_retry, None
        return self._mutate("retry", None, handle)

    def _mutate(self, action: str, record_id: str | None, handle: RetryableMutation) -> MutationResult:
        started = time.monotonic()
        try:
            response = handle.retry()
        except ApiError as exc:
            presented = self._report(exc, action=action)
            if presented.safe_to_retry:
                self.pending_retry = handle
            self._emit(EventCategory.MUTATION, action, False, started, trace_id=exc.trace_id, error_code=exc.code)
            raise
        if isinstance(response, dict) and response.get("id"):
            record_id = str(response["id"])
        trace_id = self.client.http.last_operation.trace_id if self.client.http.last_operation else None
        operation = self._record(f"{self.module}.{action}", target=record_id or "-", trace_id=trace_id)
        self._emit(EventCategory.MUTATION, action, True, started, trace_id=trace_id)
        self.notifications.toast(
            level="success",
            message=f"{self.adapter.config.singular_title} {_past_tense(action)}",
            trace_id=trace_id,
        )
        try:
            self.load()
        except ApiError:
            # the mutation itself succeeded; load() already reported the refresh failure
            logger.warning("refresh after %s failed for %s", action, self.module)
        return MutationResult(record_id=record_id, trace_id=trace_id, operation=operation)

    def _report(self, error: ApiError, *, action: str) -> PresentedError:
        # creates and updates are not replayed: the payload may already have been applied
        presented = self.presenter.present(
            error,
            action=f"{self.module}.{action}",
            noun=self.adapter.config.singular_title.lower(),
            allow_retry=action in {"load", "delete", "retry"},
        )
        log_action(
            logger,
            self.module,
            action,
            self.state.role,
            error.trace_id,
            "error",
            category=presented.category.value,
            code=error.code,
        )
        self._record(f"{self.module}.{action}", target="-", trace_id=error.trace_id, outcome="error")
        if action == "load":
            self.notifications.toast(level="error", message=presented.message, trace_id=error.trace_id)
        return presented

    def _record(self, action: str, *, target: str, trace_id: str | None, outcome: str = "success") -> OperationRecord:
        operation = OperationRecord(
            actor=self.state.actor or "unknown",
            target=target,
            action=action,
            at=datetime.now(timezone.utc),
            trace_id=trace_id,
            outcome=outcome,
        )
        self.state.add_operation(operation)
        return operation

    def _emit(
        self,
        category: EventCategory,
        operation: str,
        ok: bool,
        started: float,
        *,
        trace_id: str | None = None,
        error_code: str | None = None,
        attributes: dict[str, Any] | None = None,
    ) -> None:
        self.telemetry.emit(
            build_event(
                category,
                self.module,
                operation,
                ok=ok,
                duration_ms=int((time.monotonic() - started) * 1000),
                trace_id=trace_id,
                error_code=error_code,
                attributes=attributes,
            )
        )


def _past_tense(action: str) -> str:
    return {"create": "created", "update": "updated", "delete": "deleted"}.get(action, "saved")
