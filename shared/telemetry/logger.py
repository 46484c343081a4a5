from __future__ import annotations

import json
import os
from pathlib import Path
from typing import TextIO

from platformdirs import user_log_dir

from .events import TelemetryEvent

DEFAULT_MAX_BYTES = 1_000_000


def telemetry_enabled_from_env() -> bool:
    return os.getenv("AMS_TELEMETRY_ENABLED", "").strip().lower() in {"1", "true", "yes", "on"}


class TelemetryLogger:
    """Opt-in JSONL sink. The file rolls over to ``<name>.1`` once it passes ``max_bytes``."""

    def __init__(
        self,
        *,
        app_name: str,
        enabled: bool | None = None,
        log_file: str | Path | None = None,
        max_bytes: int = DEFAULT_MAX_BYTES,
        mirror: TextIO | None = None,
    ) -> None:
        self.app_name = app_name
        self.enabled = telemetry_enabled_from_env() if enabled is None else enabled
        self.log_file = Path(log_file) if log_file else Path(user_log_dir("ams", "AMS")) / f"{app_name}.jsonl"
        self.max_bytes = max_bytes
        self.mirror = mirror
        self.emitted = 0

    def emit(self, event: TelemetryEvent) -> bool:
        if not self.enabled:
            return False
        record = event.to_record()
        record["app"] = self.app_name
        line = json.dumps(record, sort_keys=True, default=str) + "\n"

        self.log_file.parent.mkdir(parents=True, exist_ok=True)
        self._roll_over_if_full()
        with self.log_file.open("a", encoding="utf-8") as fp:
            fp.write(line)
        if self.mirror is not None:
            self.mirror.write(line)
            self.mirror.flush()
        self.emitted += 1
        return True

    def _roll_over_if_full(self) -> None:
        if self.max_bytes <= 0 or not self.log_file.exists():
            return
        if self.log_file.stat().st_size < self.max_bytes:
            return
        self.log_file.replace(self.log_file.with_name(self.log_file.name + ".1"))
