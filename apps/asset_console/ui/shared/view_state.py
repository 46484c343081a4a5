from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ams_client_sdk.exceptions import ApiError

from apps.asset_console.ui.list_view.controller import EMPTY_MESSAGE


class ListPageStatus(str, Enum):
    NO_PERMISSION = "no_permission"
    LOADING = "loading"
    FAILED = "failed"
    STALE = "stale"
    EMPTY = "empty"
    READY = "ready"

    @property
    def shows_table(self) -> bool:
        return self in {ListPageStatus.STALE, ListPageStatus.EMPTY, ListPageStatus.READY}


@dataclass(frozen=True)
class ListPageState:
    status: ListPageStatus
    message: str
    trace_id: str | None = None

    @property
    def banner(self) -> str:
        """Status line text; the trace id is appended so users can quote it to support."""
        return f"{self.message} (trace {self.trace_id})" if self.trace_id else self.message


def resolve_list_page_state(
    *,
    can_view: bool,
    loading: bool = False,
    record_count: int,
    error: ApiError | None = None,
) -> ListPageState:
    """A failed reload over rows that are already loaded keeps them on screen as STALE."""
    if not can_view:
        return ListPageState(ListPageStatus.NO_PERMISSION, "You do not have permission to view this page.")
    if loading:
        return ListPageState(ListPageStatus.LOADING, "Loading...")
    if error is not None:
        status = ListPageStatus.STALE if record_count else ListPageStatus.FAILED
        prefix = "Showing previously loaded records. " if record_count else ""
        return ListPageState(status, prefix + error.message, error.trace_id)
    if record_count == 0:
        return ListPageState(ListPageStatus.EMPTY, EMPTY_MESSAGE)
    return ListPageState(ListPageStatus.READY, f"{record_count} records")
