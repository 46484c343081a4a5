from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from typing import Mapping

TRACE_HEADER = "X-Trace-ID"

# W3C trace context, which ASP.NET also echoes back as ProblemDetails.traceId
_TRACEPARENT = re.compile(r"^[0-9a-f]{2}-([0-9a-f]{32})-[0-9a-f]{16}-[0-9a-f]{2}$")


def normalize_trace_id(value: object) -> str | None:
    """Reduces a ``traceparent`` value to its trace id; other non-empty strings pass through."""
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()
    match = _TRACEPARENT.match(value.lower())
    return match.group(1) if match else value


@dataclass
class TraceContext:
    trace_id: str | None = None

    def ensure(self) -> str:
        if not self.trace_id:
            self.trace_id = uuid.uuid4().hex
        return self.trace_id

    def update_from_headers(self, headers: Mapping[str, str]) -> None:
        # requests exposes a case-insensitive mapping; plain dicts in tests may not be
        lowered = {str(key).lower(): value for key, value in headers.items()}
        for key in (TRACE_HEADER.lower(), "traceparent"):
            trace_id = normalize_trace_id(lowered.get(key))
            if trace_id:
                self.trace_id = trace_id
                return

    def update_from_payload(self, payload: Mapping[str, object]) -> None:
        trace_id = normalize_trace_id(payload.get("traceId") or payload.get("trace_id"))
        if trace_id:
            self.trace_id = trace_id
