from __future__ import annotations

import tkinter as tk
from tkinter import messagebox, ttk

from apps.asset_console.ui.list_view.controller import ListViewController, RenderedListView
from apps.asset_console.ui.list_view.filters import ALL
from apps.asset_console.ui.list_view.forms import FormMode, SubmitOutcome
from apps.asset_console.ui.list_view.sorting import SortDirection

_ARROWS = {SortDirection.ASC: " ▲", SortDirection.DESC: " ▼"}


class ListViewFrame(ttk.Frame):
    """Tk rendering of a ListViewController: toolbar, table, pager and the add/edit dialog."""

    def __init__(self, master: tk.Misc, controller: ListViewController) -> None:
        super().__init__(master, padding=10)
        self.controller = controller
        self.search_var = tk.StringVar(value=controller.state.search_term)
        self.page_var = tk.StringVar(value="")
        self.message_var = tk.StringVar(value="")
        self.filter_vars: dict[str, tk.StringVar] = {}
        self.filter_boxes: dict[str, ttk.Combobox] = {}
        self.dialog: tk.Toplevel | None = None
        self.field_vars: dict[str, tk.StringVar] = {}
        self.field_error_vars: dict[str, tk.StringVar] = {}
        self.submit_error_var = tk.StringVar(value="")
        self._build()
        self.refresh()
        self.bind("<Destroy>", self._on_destroy, add="+")

    def _build(self) -> None:
        config = self.controller.config

        header = ttk.Frame(self)
        header.pack(fill="x")
        ttk.Label(header, text=config.title, font=("TkDefaultFont", 12, "bold")).pack(side="left")
        self.add_button = ttk.Button(header, text=f"Add {config.singular_title}", command=self._open_add)
        self.add_button.pack(side="right")

        toolbar = ttk.Frame(self)
        toolbar.pack(fill="x", pady=(8, 4))
        ttk.Label(toolbar, text="Search").pack(side="left")
        ttk.Entry(toolbar, textvariable=self.search_var, width=30).pack(side="left", padx=(4, 12))
        self.search_var.trace_add("write", lambda *_: self._on_search())
        for name in config.filterable_fields:
            ttk.Label(toolbar, text=config.labels.get(name, name)).pack(side="left")
            var = tk.StringVar(value=ALL)
            box = ttk.Combobox(toolbar, textvariable=var, state="readonly", width=16)
            box.bind("<<ComboboxSelected>>", lambda _event, field=name: self._on_filter(field))
            box.pack(side="left", padx=(4, 12))
            self.filter_vars[name] = var
            self.filter_boxes[name] = box
        ttk.Button(toolbar, text="Clear", command=self._on_clear).pack(side="left")

        fields = [column.field for column in config.columns]
        self.tree = ttk.Treeview(self, columns=fields, show="headings", selectmode="browse", height=config.page_size)
        for column in config.columns:
            if column.sortable:
                self.tree.heading(column.field, text=column.label, command=lambda field=column.field: self._on_sort(field))
            else:
                self.tree.heading(column.field, text=column.label)
            self.tree.column(column.field, width=140, anchor="w")
        self.tree.pack(fill="both", expand=True, pady=(4, 4))
        self.tree.bind("<Double-1>", lambda _event: self._open_edit())

        ttk.Label(self, textvariable=self.message_var, foreground="gray").pack(anchor="w")

        footer = ttk.Frame(self)
        footer.pack(fill="x", pady=(4, 0))
        self.edit_button = ttk.Button(footer, text="Edit", command=self._open_edit)
        self.edit_button.pack(side="left")
        self.delete_button = ttk.Button(footer, text="Delete", command=self._request_delete)
        self.delete_button.pack(side="left", padx=(4, 0))
        self.next_button = ttk.Button(footer, text="Next", command=self._next_page)
        self.next_button.pack(side="right")
        ttk.Label(footer, textvariable=self.page_var).pack(side="right", padx=8)
        self.prev_button = ttk.Button(footer, text="Previous", command=self._previous_page)
        self.prev_button.pack(side="right")

    def refresh(self) -> RenderedListView:
        view = self.controller.render()
        self.tree.delete(*self.tree.get_children())
        for row in view.rows:
            self.tree.insert("", "end", iid=row.id, values=row.cells)
        for column in self.controller.config.columns:
            arrow = _ARROWS[view.sort_direction] if column.field == view.sort_key else ""
            self.tree.heading(column.field, text=column.label + arrow)
        for name, box in self.filter_boxes.items():
            box.configure(values=view.filter_options.get(name, [ALL]))
            self.filter_vars[name].set(view.active_filters.get(name, ALL))
        self.message_var.set(view.empty_message or "")
        self.page_var.set(f"Page {view.current_page} of {view.total_pages}")
        self.prev_button.configure(state=tk.NORMAL if view.current_page > 1 else tk.DISABLED)
        self.next_button.configure(state=tk.NORMAL if view.current_page < view.total_pages else tk.DISABLED)
        self.add_button.configure(state=tk.NORMAL if view.can_add else tk.DISABLED)
        self.edit_button.configure(state=tk.NORMAL if view.can_edit else tk.DISABLED)
        self.delete_button.configure(state=tk.NORMAL if view.can_delete else tk.DISABLED)
        return view

    def _selected_id(self) -> str | None:
        selection = self.tree.selection()
        return selection[0] if selection else None

    def _on_search(self) -> None:
        self.controller.set_search(self.search_var.get())
        self.refresh()

    def _on_filter(self, name: str) -> None:
        self.controller.set_filter(name, self.filter_vars[name].get())
        self.refresh()

    def _on_clear(self) -> None:
        self.controller.clear_filters()
        self.search_var.set("")
        self.refresh()

    def _on_sort(self, name: str) -> None:
        self.controller.toggle_sort(name)
        self.refresh()

    def _next_page(self) -> None:
        self.controller.next_page()
        self.refresh()

    def _previous_page(self) -> None:
        self.controller.previous_page()
        self.refresh()

    # dialogs

    def _open_add(self) -> None:
        if self.controller.open_add():
            self._show_form()

    def _open_edit(self) -> None:
        record_id = self._selected_id()
        if record_id and self.controller.open_edit(record_id):
            self._show_form()

    def _show_form(self) -> None:
        form = self.controller.form
        config = self.controller.config
        title = f"{'Add' if form.mode is FormMode.ADD else 'Edit'} {config.singular_title}"
        self.dialog = tk.Toplevel(self)
        self.dialog.title(title)
        self.dialog.transient(self.winfo_toplevel())
        self.dialog.protocol("WM_DELETE_WINDOW", self._cancel_form)
        self.dialog.grab_set()
        body = ttk.Frame(self.dialog, padding=12)
        body.pack(fill="both", expand=True)

        self.field_vars = {}
        self.field_error_vars = {}
        values = form.draft.as_payload() if form.draft else {}
        for index, (name, value) in enumerate(values.items()):
            label = config.labels.get(name, name.replace("_", " ").capitalize())
            marker = " *" if name in config.required_fields else ""
            ttk.Label(body, text=label + marker).grid(row=index * 2, column=0, sticky="w")
            var = tk.StringVar(value="" if value is None else str(getattr(value, "value", value)))
            ttk.Entry(body, textvariable=var, width=36).grid(row=index * 2, column=1, sticky="ew")
            error_var = tk.StringVar(value="")
            ttk.Label(body, textvariable=error_var, foreground="red").grid(row=index * 2 + 1, column=1, sticky="w")
            self.field_vars[name] = var
            self.field_error_vars[name] = error_var

        row = len(values) * 2
        self.submit_error_var.set("")
        ttk.Label(body, textvariable=self.submit_error_var, foreground="red").grid(row=row, column=0, columnspan=2, sticky="w")
        buttons = ttk.Frame(body)
        buttons.grid(row=row + 1, column=0, columnspan=2, pady=(8, 0), sticky="e")
        self.save_button = ttk.Button(buttons, text="Save", command=self._submit_form)
        self.save_button.pack(side="right")
        ttk.Button(buttons, text="Cancel", command=self._cancel_form).pack(side="right", padx=(0, 4))
        body.columnconfigure(1, weight=1)

    def _submit_form(self) -> None:
        form = self.controller.form
        current = form.draft.as_payload() if form.draft else {}
        for name, var in self.field_vars.items():
            text = var.get()
            original = current.get(name)
            if text != ("" if original is None else str(getattr(original, "value", original))):
                self.controller.set_field(name, text)
        self.save_button.configure(state=tk.DISABLED)
        outcome = self.controller.submit()
        if outcome is SubmitOutcome.SUCCEEDED:
            self._close_dialog()
            self.refresh()
            return
        self.save_button.configure(state=tk.NORMAL)
        for name, error_var in self.field_error_vars.items():
            error_var.set(form.field_errors.get(name, ""))
        self.submit_error_var.set(form.submit_error or "")

    def _cancel_form(self) -> None:
        self.controller.cancel_form()
        if not self.controller.form.is_open:
            self._close_dialog()
        self.refresh()

    def _on_destroy(self, event: tk.Event) -> None:
        # child widgets propagate their own <Destroy> to this binding
        if event.widget is self:
            self.controller.release_dialogs()

    def _close_dialog(self) -> None:
        if self.dialog is not None:
            self.dialog.destroy()
            self.dialog = None

    def _request_delete(self) -> None:
        record_id = self._selected_id()
        if not record_id or not self.controller.request_delete(record_id):
            return
        singular = self.controller.config.singular_title.lower()
        confirmed = messagebox.askyesno(
            f"Delete {singular}",
            f"Are you sure you want to delete this {singular}? This action cannot be undone.",
            parent=self,
        )
        if confirmed:
            self.controller.confirm_delete()
        else:
            self.controller.cancel_delete()
        self.refresh()
