from __future__ import annotations

import sys
from pathlib import Path

import pytest

BASE_DIR = Path(__file__).resolve().parents[1]
SDK_SRC = BASE_DIR / "ams_client_sdk" / "src"

for path in (BASE_DIR, SDK_SRC):
    sys.path.insert(0, str(path))


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("AMS_ENV", "AMS_API_BASE_URL_DEV", "AMS_CACHE_TTL_SECONDS", "AMS_PAGE_SIZE", "AMS_TELEMETRY_ENABLED"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("AMS_RETRY_BACKOFF_SECONDS", "0")
