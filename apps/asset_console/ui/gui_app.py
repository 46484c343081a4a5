from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Any

from ams_client_sdk.exceptions import ApiError

from apps.asset_console.app.bootstrap import AssetConsoleBootstrap
from apps.asset_console.app.navigation import NavItem, visible_navigation
from apps.asset_console.ui.shared.view_state import ListPageStatus, resolve_list_page_state
from apps.asset_console.ui.widgets.list_view_frame import ListViewFrame


def _ensure_default_root() -> None:
    if tk._default_root is not None:
        return
    try:
        root = tk.Tk()
        root.withdraw()
    except tk.TclError:
        root = tk.Tcl()
    tk._default_root = root


class AssetConsoleApp:
    def __init__(self, bootstrap: AssetConsoleBootstrap | None = None) -> None:
        _ensure_default_root()
        self.bootstrap = bootstrap or AssetConsoleBootstrap()
        self.root: tk.Tk | None = tk._default_root if isinstance(tk._default_root, tk.Tk) else None
        self.error_var = tk.StringVar(value="")
        self.toast_var = tk.StringVar(value="")
        self.content_frame: ttk.Frame | None = None
        self.bootstrap.notifications.subscribe(self._on_toast)

    def start(self, headless: bool = False) -> None:
        if headless:
            return
        if self.root is None:
            self.root = tk.Tk()
        else:
            self.root.deiconify()
        self.root.title("Asset Management")
        if self.bootstrap.session.authenticated:
            self._show_main_ui()
        else:
            self._build_login_ui()
        self.root.mainloop()

    def _clear_root(self) -> None:
        if self.root is None:
            return
        for child in self.root.winfo_children():
            child.destroy()

    def _build_login_ui(self) -> None:
        if self.root is None:
            return
        self._clear_root()
        frame = ttk.Frame(self.root, padding=20)
        frame.pack(fill="both", expand=True)

        ttk.Label(frame, text="Asset Management Login").grid(row=0, column=0, columnspan=2, pady=(0, 12))
        ttk.Label(frame, text="Email").grid(row=1, column=0, sticky="w")
        email_entry = ttk.Entry(frame, width=30)
        email_entry.grid(row=1, column=1, sticky="ew")
        ttk.Label(frame, text="Password").grid(row=2, column=0, sticky="w")
        password_entry = ttk.Entry(frame, width=30, show="*")
        password_entry.grid(row=2, column=1, sticky="ew")

        ttk.Button(
            frame,
            text="Login",
            command=lambda: self._login(email_entry.get(), password_entry.get()),
        ).grid(row=3, column=0, columnspan=2, pady=(10, 0))
        ttk.Label(frame, textvariable=self.error_var, foreground="red").grid(row=4, column=0, columnspan=2, pady=(8, 0))
        frame.columnconfigure(1, weight=1)

    def _login(self, email: str, password: str) -> None:
        self.error_var.set("")
        try:
            self.bootstrap.login(email, password)
        except ApiError as exc:
            self.error_var.set(exc.message)
            return
        self._show_main_ui()

    def _logout(self) -> None:
        try:
            self.bootstrap.logout()
        except ApiError as exc:
            self.error_var.set(exc.message)
        self._build_login_ui()

    def _show_main_ui(self) -> None:
        if self.root is None:
            return
        self._clear_root()
        session = self.bootstrap.state.session
        frame = ttk.Frame(self.root, padding=20)
        frame.pack(fill="both", expand=True)

        header = ttk.Frame(frame)
        header.pack(fill="x")
        status_text = f"Connected: {session.actor} ({session.role or 'User'}) [env: {self.bootstrap.config.env_name}]"
        ttk.Label(header, text=status_text).pack(side="left")
        ttk.Button(header, text="Logout", command=self._logout).pack(side="right")
        ttk.Label(frame, textvariable=self.toast_var, foreground="gray").pack(anchor="w")

        body = ttk.Frame(frame)
        body.pack(fill="both", expand=True, pady=(10, 0))
        sidebar = ttk.Frame(body)
        sidebar.pack(side="left", fill="y")
        sections = visible_navigation(session.capability)
        for title, items in (("Main Menu", sections["main"]), ("Master Data", sections["master_data"])):
            if not items:
                continue
            group = ttk.LabelFrame(sidebar, text=title, padding=6)
            group.pack(fill="x", pady=(0, 8))
            for item in items:
                ttk.Button(group, text=item.label, command=lambda nav=item: self._open(nav)).pack(fill="x", pady=1)

        self.content_frame = ttk.Frame(body)
        self.content_frame.pack(side="left", fill="both", expand=True, padx=(12, 0))
        self._show_placeholder("Select a menu option.")

    def _show_placeholder(self, message: str) -> None:
        if self.content_frame is None:
            return
        for child in self.content_frame.winfo_children():
            child.destroy()
        ttk.Label(self.content_frame, text=message, foreground="gray").pack(anchor="w")

    def _open(self, item: NavItem) -> None:
        self.bootstrap.state.current_route = item.route
        if item.entity is None:
            self._show_placeholder(f"{item.label} is not available in this console.")
            return
        can_view = item.permission is None or self.bootstrap.state.session.capability.can(item.permission)
        if not can_view:
            self._show_placeholder(resolve_list_page_state(can_view=False, record_count=0).message)
            return
        service = self.bootstrap.service_for(item.entity)
        controller = service.controller or service.build_controller()
        error: ApiError | None = None
        try:
            service.load()
        except ApiError as exc:
            error = exc
        page = resolve_list_page_state(can_view=True, record_count=len(service.records), error=error)
        if not page.status.shows_table:
            self._show_placeholder(page.banner)
            return
        if self.content_frame is None:
            return
        for child in self.content_frame.winfo_children():
            child.destroy()
        if page.status is ListPageStatus.STALE:
            ttk.Label(self.content_frame, text=page.banner, foreground="darkorange").pack(anchor="w")
        ListViewFrame(self.content_frame, controller).pack(fill="both", expand=True)

    def _on_toast(self, toast: dict[str, Any]) -> None:
        title = toast.get("title")
        self.toast_var.set(f"{title}: {toast['message']}" if title else toast["message"])


def main() -> None:
    app = AssetConsoleApp()
    app.start()


if __name__ == "__main__":
    main()
