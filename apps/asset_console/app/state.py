from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from apps.asset_console.ui.widgets.permissioned_actions import ANONYMOUS, Capability

MAX_OPERATIONS = 30


@dataclass(frozen=True)
class OperationRecord:
    actor: str
    target: str
    action: str
    at: datetime
    trace_id: str | None = None
    outcome: str = "success"
    metadata: dict[str, Any] = field(default_factory=dict)


@dataclass
class SessionState:
    actor: str | None = None
    user_id: str | None = None
    capability: Capability = ANONYMOUS
    project_ids: list[str] = field(default_factory=list)
    operations: list[OperationRecord] = field(default_factory=list)

    @property
    def role(self) -> str | None:
        return self.capability.role

    def add_operation(self, operation: OperationRecord) -> None:
        self.operations.insert(0, operation)
        del self.operations[MAX_OPERATIONS:]

    def reset(self) -> None:
        self.actor = None
        self.user_id = None
        self.capability = ANONYMOUS
        self.project_ids = []
        self.operations.clear()


@dataclass
class AssetConsoleState:
    session: SessionState = field(default_factory=SessionState)
    current_route: str = "/"
