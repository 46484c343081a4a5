from __future__ import annotations

from typing import Any, Mapping

from .exceptions import ApiError, error_class_for
from .tracing import normalize_trace_id

_DEFAULT_CODES = {
    400: "VALIDATION_ERROR",
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    409: "CONFLICT",
    422: "VALIDATION_ERROR",
    429: "RATE_LIMITED",
}


def _flatten_model_state(errors: Any) -> dict[str, str] | None:
    """ASP.NET model state: ``{"Name": ["The Name field is required."]}``."""
    if not isinstance(errors, Mapping):
        return None
    flattened: dict[str, str] = {}
    for key, value in errors.items():
        if isinstance(value, list) and value:
            flattened[_camel(str(key))] = str(value[0])
        elif isinstance(value, str):
            flattened[_camel(str(key))] = value
    return flattened or None


def _camel(key: str) -> str:
    key = key.lstrip("$.")
    return key[:1].lower() + key[1:] if key else key


def map_error(status_code: int, payload: Mapping[str, Any] | None, trace_id: str | None) -> ApiError:
    """Builds the typed error for a non-2xx response.

    Accepts the API's ``{message, code}`` bodies as well as ProblemDetails
    (``title``/``detail``/``errors``/``traceId``).
    """
    payload = payload or {}
    default_code = _DEFAULT_CODES.get(status_code, "SERVER_ERROR" if status_code >= 500 else "HTTP_ERROR")
    details = payload.get("details")
    if details is None:
        details = _flatten_model_state(payload.get("errors"))
    return error_class_for(status_code)(
        code=str(payload.get("code") or default_code),
        message=str(payload.get("message") or payload.get("title") or payload.get("detail") or "Request failed"),
        details=details,
        trace_id=normalize_trace_id(payload.get("traceId") or payload.get("trace_id")) or trace_id,
        status_code=status_code,
        raw_payload=dict(payload),
    )
