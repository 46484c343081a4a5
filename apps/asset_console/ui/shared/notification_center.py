from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

ToastListener = Callable[[dict[str, Any]], None]

TOAST_LEVELS = ("success", "info", "warning", "error")


@dataclass
class NotificationCenter:
    items: list[dict[str, Any]] = field(default_factory=list)
    listeners: list[ToastListener] = field(default_factory=list)
    max_items: int = 50

    def toast(
        self,
        *,
        level: str,
        message: str,
        title: str | None = None,
        trace_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        if level not in TOAST_LEVELS:
            raise ValueError(f"Unsupported toast level: {level}")
        payload = {"level": level, "title": title, "message": message, "trace_id": trace_id, "details": details or {}}
        self.items.append(payload)
        del self.items[: -self.max_items]
        for listener in list(self.listeners):
            listener(payload)
        return payload

    def subscribe(self, listener: ToastListener) -> None:
        self.listeners.append(listener)

    def latest(self, level: str | None = None) -> dict[str, Any] | None:
        for item in reversed(self.items):
            if level is None or item["level"] == level:
                return item
        return None

    def render(self) -> dict[str, Any]:
        return {"count": len(self.items), "messages": list(self.items)}

    def clear(self) -> None:
        self.items.clear()
