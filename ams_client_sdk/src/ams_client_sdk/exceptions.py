from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"

    @property
    def transient(self) -> bool:
        """True when repeating the same request may succeed: no response, throttling or a 5xx."""
        return self.status_code == 0 or self.status_code == 429 or self.status_code >= 500


class AuthError(ApiError):
    """401: bad credentials or an expired bearer token."""


class PermissionDeniedError(ApiError):
    """403: the role or permission claims do not cover the endpoint."""


class NotFoundError(ApiError):
    pass


class ValidationError(ApiError):
    """400/422. ``details`` holds ``{camelField: message}`` flattened from model state."""

    @property
    def field_messages(self) -> dict[str, str]:
        return dict(self.details) if isinstance(self.details, dict) else {}


class ConflictError(ApiError):
    """409: duplicate asset tag, serial or code, or an asset that is already assigned."""


class RateLimitError(ApiError):
    pass


class ServerError(ApiError):
    pass


class TransportError(ApiError):
    """No HTTP response: DNS, connection refused, timeout."""


STATUS_ERRORS: dict[int, type[ApiError]] = {
    400: ValidationError,
    401: AuthError,
    403: PermissionDeniedError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}


def error_class_for(status_code: int) -> type[ApiError]:
    if status_code in STATUS_ERRORS:
        return STATUS_ERRORS[status_code]
    if status_code == 0:
        return TransportError
    if status_code >= 500:
        return ServerError
    return ApiError
