from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from ams_client_sdk.exceptions import (
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


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    AUTH = "auth"
    PERMISSION = "permission"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    NETWORK = "network"
    SERVER = "server"
    UNEXPECTED = "unexpected"


_CATEGORY_BY_ERROR: tuple[tuple[type[ApiError], ErrorCategory], ...] = (
    (TransportError, ErrorCategory.NETWORK),
    (ValidationError, ErrorCategory.VALIDATION),
    (AuthError, ErrorCategory.AUTH),
    (PermissionDeniedError, ErrorCategory.PERMISSION),
    (NotFoundError, ErrorCategory.NOT_FOUND),
    (ConflictError, ErrorCategory.CONFLICT),
    (RateLimitError, ErrorCategory.SERVER),
    (ServerError, ErrorCategory.SERVER),
)

_TEMPLATES = {
    ErrorCategory.VALIDATION: "Please correct the highlighted values for this {noun}.",
    ErrorCategory.AUTH: "Your session has expired. Please sign in again.",
    ErrorCategory.PERMISSION: "Your role does not allow this action on {noun} records.",
    ErrorCategory.NOT_FOUND: "This {noun} no longer exists. Refresh the list.",
    ErrorCategory.CONFLICT: "This {noun} conflicts with existing data, such as a duplicate code or an active assignment.",
    ErrorCategory.NETWORK: "Network issue: the server could not be reached. Retry when connectivity is stable.",
    ErrorCategory.SERVER: "The server failed to process the {noun}. Retry in a moment.",
    ErrorCategory.UNEXPECTED: "An unexpected error occurred. Review the technical details.",
}

# server text is shown verbatim only where it names the offending value
_SERVER_TEXT_CATEGORIES = {ErrorCategory.VALIDATION, ErrorCategory.CONFLICT}
_GENERIC_SERVER_TEXT = {"", "Request failed", "One or more validation errors occurred."}


@dataclass(frozen=True)
class PresentedError:
    category: ErrorCategory
    message: str
    safe_to_retry: bool
    trace_id: str | None
    technical: dict[str, Any]

    def render(self, *, expanded: bool = False) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "category": self.category.value,
            "message": self.message,
            "safe_to_retry": self.safe_to_retry,
        }
        if expanded:
            payload["technical_details"] = self.technical
        return payload


def categorize(error: BaseException) -> ErrorCategory:
    for error_type, category in _CATEGORY_BY_ERROR:
        if isinstance(error, error_type):
            return category
    return ErrorCategory.UNEXPECTED


class AdminErrorPresenter:
    """Turns SDK errors into the message, retry hint and support details shown by the console."""

    def present(
        self,
        error: BaseException,
        *,
        action: str,
        noun: str = "record",
        allow_retry: bool = False,
        timestamp: datetime | None = None,
    ) -> PresentedError:
        category = categorize(error)
        api_error = error if isinstance(error, ApiError) else None
        server_text = api_error.message if api_error else str(error)

        message = _TEMPLATES[category].format(noun=noun)
        if category in _SERVER_TEXT_CATEGORIES and server_text not in _GENERIC_SERVER_TEXT:
            message = server_text

        trace_id = api_error.trace_id if api_error else None
        return PresentedError(
            category=category,
            message=message,
            safe_to_retry=bool(allow_retry and api_error and api_error.transient),
            trace_id=trace_id,
            technical={
                "action": action,
                "trace_id": trace_id,
                "code": api_error.code if api_error else type(error).__name__,
                "status_code": api_error.status_code if api_error else None,
                "server_message": server_text,
                "details": api_error.details if api_error else None,
                "timestamp": (timestamp or datetime.now(timezone.utc)).isoformat(),
            },
        )
