from __future__ import annotations

import pytest

from ams_client_sdk.config import ConfigError, load_config


def test_load_config_requires_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("AMS_API_BASE_URL", raising=False)
    with pytest.raises(ConfigError):
        load_config()


def test_load_config_profile(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AMS_ENV", "staging")
    monkeypatch.setenv("AMS_API_BASE_URL_STAGING", "https://staging.example.com/")
    cfg = load_config()
    assert cfg.api_base_url == "https://staging.example.com"
    assert cfg.env_name == "staging"


def test_load_config_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    cfg = load_config()
    assert cfg.env_name == "dev"
    assert cfg.default_page_size == 10
    assert cfg.cache_ttl_seconds == 3.0
    assert cfg.verify_ssl is True


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("AMS_TIMEOUT_SECONDS", "0"),
        ("AMS_CONNECT_TIMEOUT_SECONDS", "0"),
        ("AMS_READ_TIMEOUT_SECONDS", "0"),
        ("AMS_RETRIES", "-1"),
        ("AMS_RETRY_BACKOFF_SECONDS", "-0.1"),
        ("AMS_MAX_CONNECTIONS", "0"),
        ("AMS_CACHE_TTL_SECONDS", "-1"),
        ("AMS_PAGE_SIZE", "0"),
    ],
)
def test_load_config_rejects_invalid_ranges(monkeypatch: pytest.MonkeyPatch, key: str, value: str) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv(key, value)
    with pytest.raises(ConfigError) as exc_info:
        load_config()
    assert key in str(exc_info.value)


def test_load_config_rejects_non_http_base_url(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "ftp://files.example.com")
    with pytest.raises(ConfigError, match="AMS_API_BASE_URL"):
        load_config()


def test_load_config_reports_unparseable_numbers(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("AMS_PAGE_SIZE", "ten")
    with pytest.raises(ConfigError, match="expected an integer"):
        load_config()
