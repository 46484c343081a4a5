from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Mapping

REDACTED = "[redacted]"

_SENSITIVE_ATTRIBUTES = {
    "email",
    "password",
    "token",
    "refresh_token",
    "authorization",
    "license_key",
    "id_number",
    "mobile_number",
    "phone",
    "full_name",
}
_SCALAR_TYPES = (str, int, float, bool)


class EventCategory(str, Enum):
    SESSION = "session"
    NAVIGATION = "navigation"
    LIST_LOAD = "list_load"
    MUTATION = "mutation"
    PERMISSION_DENIED = "permission_denied"


@dataclass(frozen=True)
class TelemetryEvent:
    """One console operation against an entity collection."""

    category: EventCategory
    entity: str
    operation: str
    ok: bool
    occurred_at: datetime
    duration_ms: int | None = None
    trace_id: str | None = None
    error_code: str | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def to_record(self) -> dict[str, Any]:
        record: dict[str, Any] = {
            "category": self.category.value,
            "entity": self.entity,
            "operation": self.operation,
            "outcome": "ok" if self.ok else "failed",
            "occurred_at": self.occurred_at.isoformat(),
        }
        for key in ("duration_ms", "trace_id", "error_code"):
            value = getattr(self, key)
            if value is not None:
                record[key] = value
        if self.attributes:
            record["attributes"] = dict(self.attributes)
        return record


def scrub_attributes(attributes: Mapping[str, Any] | None) -> dict[str, Any]:
    """Redacts personal fields and rejects values that are not plain scalars."""
    scrubbed: dict[str, Any] = {}
    for key, value in (attributes or {}).items():
        if key.lower() in _SENSITIVE_ATTRIBUTES:
            scrubbed[key] = REDACTED
            continue
        if value is not None and not isinstance(value, _SCALAR_TYPES):
            raise ValueError(f"telemetry attribute {key!r} must be a scalar, got {type(value).__name__}")
        scrubbed[key] = value
    return scrubbed


def build_event(
    category: EventCategory | str,
    entity: str,
    operation: str,
    *,
    ok: bool = True,
    duration_ms: int | None = None,
    trace_id: str | None = None,
    error_code: str | None = None,
    attributes: Mapping[str, Any] | None = None,
    now: datetime | None = None,
) -> TelemetryEvent:
    return TelemetryEvent(
        category=EventCategory(category),
        entity=entity,
        operation=operation,
        ok=ok,
        occurred_at=now or datetime.now(timezone.utc),
        duration_ms=duration_ms,
        trace_id=trace_id,
        error_code=error_code,
        attributes=scrub_attributes(attributes),
    )
