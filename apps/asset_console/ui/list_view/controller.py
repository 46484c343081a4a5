from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Iterable, Mapping

from apps.asset_console.infrastructure.logging.logger import get_logger, log_action
from apps.asset_console.ui.list_view.filters import ALL, filter_options, filter_records
from apps.asset_console.ui.list_view.forms import (
    AddCallback,
    EditCallback,
    FormController,
    FormMode,
    SubmitOutcome,
    describe_failure,
)
from apps.asset_console.ui.list_view.pagination import clamp_page, paginate, total_pages
from apps.asset_console.ui.list_view.sorting import SortDirection, ValueKind, sort_records
from apps.asset_console.ui.shared.notification_center import NotificationCenter
from apps.asset_console.ui.widgets.permissioned_actions import ANONYMOUS, Capability

logger = get_logger(__name__)

EMPTY_MESSAGE = "No records found"
EMPTY_CELL = "-"

DeleteCallback = Callable[[str], Any | Awaitable[Any]]
Formatter = Callable[[Any], str]


@dataclass(frozen=True)
class Column:
    field: str
    label: str
    sortable: bool = True
    kind: ValueKind = ValueKind.STRING
    formatter: Formatter | None = None

    def render(self, record: Mapping[str, Any]) -> str:
        value = record.get(self.field)
        if self.formatter is not None:
            return self.formatter(value)
        if value is None or value == "":
            return EMPTY_CELL
        return str(getattr(value, "value", value))


def singularize(title: str) -> str:
    if title.endswith("ies"):
        return title[:-3] + "y"
    if title.endswith(("ses", "xes")):
        return title[:-2]
    if title.endswith("s") and not title.endswith("ss"):
        return title[:-1]
    return title


@dataclass(frozen=True)
class ListViewConfig:
    title: str
    columns: tuple[Column, ...]
    searchable_fields: tuple[str, ...]
    filterable_fields: tuple[str, ...] = ()
    required_fields: tuple[str, ...] = ("name",)
    editable_fields: tuple[str, ...] | None = None
    draft_defaults: Mapping[str, Any] = field(default_factory=dict)
    default_sort_key: str | None = "name"
    default_sort_direction: SortDirection = SortDirection.ASC
    page_size: int = 10
    permission_scope: str | None = None

    @property
    def singular_title(self) -> str:
        return singularize(self.title)

    @property
    def labels(self) -> dict[str, str]:
        return {column.field: column.label for column in self.columns}

    def column(self, name: str | None) -> Column | None:
        return next((column for column in self.columns if column.field == name), None)


@dataclass
class ViewState:
    search_term: str = ""
    active_filters: dict[str, str] = field(default_factory=dict)
    sort_key: str | None = None
    sort_direction: SortDirection = SortDirection.ASC
    current_page: int = 1
    page_size: int = 10
    pending_delete_id: str | None = None


@dataclass(frozen=True)
class RenderedRow:
    id: str
    cells: tuple[str, ...]
    record: Mapping[str, Any]


@dataclass(frozen=True)
class RenderedListView:
    title: str
    headers: tuple[str, ...]
    rows: tuple[RenderedRow, ...]
    current_page: int
    total_pages: int
    total_records: int
    filter_options: dict[str, list[str]]
    empty_message: str | None
    search_term: str
    active_filters: dict[str, str]
    sort_key: str | None
    sort_direction: SortDirection
    can_add: bool
    can_edit: bool
    can_delete: bool
    pending_delete_id: str | None
    form_mode: FormMode
    form_errors: dict[str, str]
    submit_error: str | None
    submitting: bool

    @property
    def is_empty(self) -> bool:
        return not self.rows

    def render(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "headers": list(self.headers),
            "rows": [list(row.cells) for row in self.rows],
            "page": self.current_page,
            "total_pages": self.total_pages,
            "total_records": self.total_records,
            "empty_message": self.empty_message,
            "sort": {"key": self.sort_key, "direction": self.sort_direction.value},
            "actions": {"add": self.can_add, "edit": self.can_edit, "delete": self.can_delete},
        }


class ListViewController:
    """Searchable, filterable, sortable, paginated table over a caller-owned record collection."""

    def __init__(
        self,
        config: ListViewConfig,
        *,
        on_add: AddCallback,
        on_edit: EditCallback,
        on_delete: DeleteCallback,
        records: Iterable[Mapping[str, Any]] = (),
        capability: Capability = ANONYMOUS,
        notifications: NotificationCenter | None = None,
    ) -> None:
        if config.page_size <= 0:
            raise ValueError(f"page_size must be positive, got {config.page_size}")
        self.config = config
        self.on_add = on_add
        self.on_edit = on_edit
        self.on_delete = on_delete
        self.capability = capability
        self.notifications = notifications or NotificationCenter()
        self.records: list[Mapping[str, Any]] = list(records)
        self.state = ViewState(
            active_filters={name: ALL for name in config.filterable_fields},
            sort_key=config.default_sort_key,
            sort_direction=config.default_sort_direction,
            page_size=config.page_size,
        )
        self.form = FormController(
            required_fields=config.required_fields,
            defaults=config.draft_defaults,
            editable_fields=config.editable_fields,
            labels=config.labels,
            module=self.module,
        )

    @property
    def module(self) -> str:
        return self.config.permission_scope or self.config.title.lower().replace(" ", "_")

    def set_records(self, records: Iterable[Mapping[str, Any]]) -> None:
        self.records = list(records)

    # permission gating

    def _allowed(self, action: str) -> bool:
        if self.config.permission_scope is None:
            return True
        return self.capability.can(f"{self.config.permission_scope}:{action}")

    @property
    def dialog_open(self) -> bool:
        return self.form.is_open or self.state.pending_delete_id is not None

    @property
    def can_add(self) -> bool:
        return self._allowed("create") and not self.dialog_open

    @property
    def can_edit(self) -> bool:
        return self._allowed("update") and not self.dialog_open

    @property
    def can_delete(self) -> bool:
        return self._allowed("delete") and not self.dialog_open

    # view state

    def set_search(self, term: str | None) -> None:
        self.state.search_term = term or ""
        self.state.current_page = 1

    def set_filter(self, name: str, value: str | None) -> None:
        if name not in self.config.filterable_fields:
            raise ValueError(f"'{name}' is not a filterable field of {self.config.title}")
        self.state.active_filters[name] = value or ALL
        self.state.current_page = 1

    def clear_filters(self) -> None:
        self.state.search_term = ""
        self.state.active_filters = {name: ALL for name in self.config.filterable_fields}
        self.state.current_page = 1

    def toggle_sort(self, name: str) -> None:
        column = self.config.column(name)
        if column is None or not column.sortable:
            return
        if self.state.sort_key == name:
            self.state.sort_direction = self.state.sort_direction.toggled()
        else:
            self.state.sort_key = name
            self.state.sort_direction = SortDirection.ASC
        self.state.current_page = 1

    def set_sort(self, name: str | None, direction: SortDirection = SortDirection.ASC) -> None:
        """Sets key and direction outright, unlike the header toggle."""
        column = self.config.column(name)
        if column is None or not column.sortable:
            raise ValueError(f"'{name}' is not a sortable column of {self.config.title}")
        self.state.sort_key = name
        self.state.sort_direction = direction
        self.state.current_page = 1

    def set_page(self, page: int) -> None:
        self.state.current_page = page

    def next_page(self) -> None:
        self.state.current_page += 1

    def previous_page(self) -> None:
        self.state.current_page = max(1, self.state.current_page - 1)

    def visible_records(self) -> list[Mapping[str, Any]]:
        filtered = filter_records(
            self.records,
            self.state.search_term,
            self.state.active_filters,
            self.config.searchable_fields,
        )
        column = self.config.column(self.state.sort_key)
        kind = column.kind if column else ValueKind.STRING
        return sort_records(filtered, self.state.sort_key, self.state.sort_direction, kind)

    def render(self) -> RenderedListView:
        visible = self.visible_records()
        pages = total_pages(len(visible), self.state.page_size)
        self.state.current_page = clamp_page(self.state.current_page, pages)
        page = paginate(visible, self.state.current_page, self.state.page_size)
        rows = tuple(
            RenderedRow(
                id=str(record.get("id")),
                cells=tuple(column.render(record) for column in self.config.columns),
                record=record,
            )
            for record in page.items
        )
        return RenderedListView(
            title=self.config.title,
            headers=tuple(column.label for column in self.config.columns),
            rows=rows,
            current_page=self.state.current_page,
            total_pages=page.total_pages,
            total_records=len(visible),
            filter_options={name: filter_options(self.records, name) for name in self.config.filterable_fields},
            empty_message=None if rows else EMPTY_MESSAGE,
            search_term=self.state.search_term,
            active_filters=dict(self.state.active_filters),
            sort_key=self.state.sort_key,
            sort_direction=self.state.sort_direction,
            can_add=self.can_add,
            can_edit=self.can_edit,
            can_delete=self.can_delete,
            pending_delete_id=self.state.pending_delete_id,
            form_mode=self.form.mode,
            form_errors=dict(self.form.field_errors),
            submit_error=self.form.submit_error,
            submitting=self.form.submitting,
        )

    # add / edit

    def open_add(self) -> bool:
        if not self.can_add:
            return False
        return self.form.open_add()

    def open_edit(self, record_id: str) -> bool:
        if not self.can_edit:
            return False
        record = self.find(record_id)
        if record is None:
            return False
        return self.form.open_edit(record)

    def set_field(self, name: str, value: Any) -> None:
        self.form.set_field(name, value)

    def cancel_form(self) -> None:
        self.form.cancel()

    def submit(self) -> SubmitOutcome:
        return self.form.submit(self.on_add, self.on_edit)

    async def asubmit(self) -> SubmitOutcome:
        return await self.form.asubmit(self.on_add, self.on_edit)

    def find(self, record_id: str) -> Mapping[str, Any] | None:
        return next((record for record in self.records if str(record.get("id")) == str(record_id)), None)

    # delete

    def request_delete(self, record_id: str) -> bool:
        if not self.can_delete or self.find(record_id) is None:
            return False
        self.state.pending_delete_id = str(record_id)
        return True

    def cancel_delete(self) -> None:
        self.state.pending_delete_id = None

    def release_dialogs(self) -> None:
        """Drops an open draft and any pending delete when the hosting view goes away."""
        self.form.cancel()
        self.state.pending_delete_id = None

    def confirm_delete(self) -> bool:
        record_id = self.state.pending_delete_id
        if record_id is None:
            return False
        try:
            result = self.on_delete(record_id)
            if inspect.isawaitable(result):
                if inspect.iscoroutine(result):
                    result.close()
                raise TypeError("Delete callback returned an awaitable; use aconfirm_delete()")
        except Exception as exc:
            return self._delete_failed(record_id, exc)
        finally:
            self.state.pending_delete_id = None
        return self._delete_succeeded(record_id)

    async def aconfirm_delete(self) -> bool:
        record_id = self.state.pending_delete_id
        if record_id is None:
            return False
        try:
            result = self.on_delete(record_id)
            if inspect.isawaitable(result):
                await result
        except Exception as exc:
            return self._delete_failed(record_id, exc)
        finally:
            self.state.pending_delete_id = None
        return self._delete_succeeded(record_id)

    def _delete_succeeded(self, record_id: str) -> bool:
        log_action(logger, self.module, "delete", self.capability.role, None, "success", target=record_id)
        return True

    def _delete_failed(self, record_id: str, error: Exception) -> bool:
        trace_id = getattr(error, "trace_id", None)
        message = describe_failure(error)
        log_action(
            logger,
            self.module,
            "delete",
            self.capability.role,
            trace_id,
            "error",
            target=record_id,
            error=message,
        )
        self.notifications.toast(
            level="error",
            title=f"Could not delete {self.config.singular_title.lower()}",
            message=message,
            trace_id=trace_id,
            details={"id": record_id},
        )
        return False

