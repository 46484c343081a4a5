from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterable, Mapping

from pydantic.alias_generators import to_snake

from apps.asset_console.infrastructure.logging.logger import get_logger, log_action

logger = get_logger(__name__)

IMMUTABLE_FIELDS = frozenset({"id", "created_at"})

AddCallback = Callable[[dict[str, Any]], Any | Awaitable[Any]]
EditCallback = Callable[[str, dict[str, Any]], Any | Awaitable[Any]]


class FormMode(str, Enum):
    CLOSED = "closed"
    ADD = "add"
    EDIT = "edit"


class FormStatus(str, Enum):
    IDLE = "idle"
    DIRTY = "dirty"
    SUBMITTING = "submitting"
    ERROR = "error"


class SubmitOutcome(str, Enum):
    BLOCKED = "blocked"
    INVALID = "invalid"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(frozen=True)
class Draft:
    """Immutable editable field set; every change yields a new draft."""

    values: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        illegal = IMMUTABLE_FIELDS.intersection(self.values)
        if illegal:
            raise ValueError(f"Draft cannot carry immutable fields: {sorted(illegal)}")
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    @classmethod
    def from_record(cls, record: Mapping[str, Any], fields: Iterable[str] | None = None) -> "Draft":
        keys = list(fields) if fields is not None else [key for key in record if key not in IMMUTABLE_FIELDS]
        return cls({key: record.get(key) for key in keys if key not in IMMUTABLE_FIELDS})

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def with_value(self, name: str, value: Any) -> "Draft":
        if name in IMMUTABLE_FIELDS:
            raise ValueError(f"Field '{name}' is read-only")
        return Draft({**self.values, name: value})

    def as_payload(self) -> dict[str, Any]:
        return dict(self.values)


@dataclass
class FormResult:
    values: dict[str, Any]
    field_errors: dict[str, str]

    @property
    def first_invalid_field(self) -> str | None:
        return next(iter(self.field_errors), None)

    @property
    def is_valid(self) -> bool:
        return len(self.field_errors) == 0


def _label(name: str, labels: Mapping[str, str] | None) -> str:
    if labels and name in labels:
        return labels[name]
    return name.replace("_", " ").capitalize()


def validate_required(
    values: Mapping[str, Any],
    required_fields: Iterable[str],
    labels: Mapping[str, str] | None = None,
) -> FormResult:
    normalized = {key: value.strip() if isinstance(value, str) else value for key, value in values.items()}
    field_errors: dict[str, str] = {}
    for name in required_fields:
        value = normalized.get(name)
        if value is None or (isinstance(value, str) and not value):
            field_errors[name] = f"{_label(name, labels)} is required"
    return FormResult(values=normalized, field_errors=field_errors)


def map_api_validation_errors(error_details: Any) -> dict[str, str]:
    if not error_details:
        return {}

    mapped: dict[str, str] = {}
    if isinstance(error_details, dict):
        nested = error_details.get("errors")
        if isinstance(nested, dict):
            mapped.update(map_api_validation_errors(nested))
        for key, value in error_details.items():
            if key == "errors":
                continue
            if isinstance(value, str):
                mapped[to_snake(str(key))] = value
            elif isinstance(value, list) and value and isinstance(value[0], str):
                mapped[to_snake(str(key))] = value[0]
    elif isinstance(error_details, list):
        for item in error_details:
            if isinstance(item, dict) and item.get("field") and item.get("message"):
                mapped[to_snake(str(item["field"]))] = str(item["message"])
    return mapped


def describe_failure(error: Exception) -> str:
    message = getattr(error, "message", None) or str(error)
    return message or "The record could not be saved"


class FormController:
    """Owns the add/edit draft, its validation and the submit lock of one list view."""

    def __init__(
        self,
        *,
        required_fields: Iterable[str] = ("name",),
        defaults: Mapping[str, Any] | None = None,
        editable_fields: Iterable[str] | None = None,
        labels: Mapping[str, str] | None = None,
        module: str = "list_view",
    ) -> None:
        self.required_fields = tuple(required_fields)
        self.defaults = dict(defaults or {})
        self.editable_fields = tuple(editable_fields) if editable_fields is not None else None
        self.labels = dict(labels or {})
        self.module = module
        self.mode = FormMode.CLOSED
        self.target_id: str | None = None
        self.draft: Draft | None = None
        self.field_errors: dict[str, str] = {}
        self.submit_error: str | None = None
        self.status = FormStatus.IDLE

    @property
    def is_open(self) -> bool:
        return self.mode is not FormMode.CLOSED

    @property
    def submitting(self) -> bool:
        return self.status is FormStatus.SUBMITTING

    def open_add(self) -> bool:
        if self.is_open:
            return False
        fields = self.editable_fields or tuple(self.defaults)
        self._open(FormMode.ADD, None, Draft({name: self.defaults.get(name, "") for name in fields}))
        return True

    def open_edit(self, record: Mapping[str, Any]) -> bool:
        if self.is_open:
            return False
        self._open(FormMode.EDIT, str(record["id"]), Draft.from_record(record, self.editable_fields))
        return True

    def set_field(self, name: str, value: Any) -> None:
        if self.draft is None:
            raise RuntimeError("No draft is open")
        if self.submitting:
            return
        self.draft = self.draft.with_value(name, value)
        self.field_errors.pop(name, None)
        self.status = FormStatus.DIRTY

    def cancel(self) -> None:
        if self.submitting:
            return
        self._close()

    def validate(self) -> FormResult:
        values = self.draft.as_payload() if self.draft else {}
        return validate_required(values, self.required_fields, self.labels)

    def submit(self, on_add: AddCallback, on_edit: EditCallback) -> SubmitOutcome:
        prepared = self._begin()
        if isinstance(prepared, SubmitOutcome):
            return prepared
        try:
            result = self._dispatch(on_add, on_edit, prepared)
            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                raise TypeError("Callback returned an awaitable; use asubmit()")
        except Exception as exc:
            return self._fail(exc)
        return self._succeed()

    async def asubmit(self, on_add: AddCallback, on_edit: EditCallback) -> SubmitOutcome:
        prepared = self._begin()
        if isinstance(prepared, SubmitOutcome):
            return prepared
        try:
            result = self._dispatch(on_add, on_edit, prepared)
            if inspect.isawaitable(result):
                await result
        except asyncio.CancelledError:
            # the draft stays open and editable; the caller owns the cancellation
            self.submit_error = "Submission was cancelled"
            self.status = FormStatus.ERROR
            raise
        except Exception as exc:
            return self._fail(exc)
        return self._succeed()

    def _open(self, mode: FormMode, target_id: str | None, draft: Draft) -> None:
        self.mode = mode
        self.target_id = target_id
        self.draft = draft
        self.field_errors = {}
        self.submit_error = None
        self.status = FormStatus.IDLE

    def _close(self) -> None:
        self.mode = FormMode.CLOSED
        self.target_id = None
        self.draft = None
        self.field_errors = {}
        self.submit_error = None
        self.status = FormStatus.IDLE

    def _begin(self) -> dict[str, Any] | SubmitOutcome:
        if not self.is_open or self.submitting:
            return SubmitOutcome.BLOCKED
        result = self.validate()
        if not result.is_valid:
            self.field_errors = result.field_errors
            self.status = FormStatus.ERROR
            return SubmitOutcome.INVALID
        self.field_errors = {}
        self.submit_error = None
        self.status = FormStatus.SUBMITTING
        return result.values

    def _dispatch(self, on_add: AddCallback, on_edit: EditCallback, values: dict[str, Any]) -> Any:
        if self.mode is FormMode.ADD:
            return on_add(values)
        return on_edit(self.target_id or "", values)

    def _succeed(self) -> SubmitOutcome:
        log_action(logger, self.module, f"form.{self.mode.value}", None, None, "success", target=self.target_id)
        self._close()
        return SubmitOutcome.SUCCEEDED

    def _fail(self, error: Exception) -> SubmitOutcome:
        self.submit_error = describe_failure(error)
        self.field_errors = map_api_validation_errors(getattr(error, "details", None))
        self.status = FormStatus.ERROR
        log_action(
            logger,
            self.module,
            f"form.{self.mode.value}",
            None,
            getattr(error, "trace_id", None),
            "error",
            target=self.target_id,
            error=self.submit_error,
        )
        return SubmitOutcome.FAILED
