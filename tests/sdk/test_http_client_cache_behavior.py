from __future__ import annotations

import pytest
import requests
import responses

from ams_client_sdk import load_config
from ams_client_sdk.exceptions import ServerError, TransportError
from ams_client_sdk.http_client import HttpClient, ResponseCache, collection_root
from ams_client_sdk.tracing import TRACE_HEADER, TraceContext


def _client(base_url: str) -> HttpClient:
    cfg = load_config()
    object.__setattr__(cfg, "api_base_url", base_url)
    return HttpClient(cfg, trace=TraceContext())


@responses.activate
def test_get_cache_reuses_response_within_ttl(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(responses.GET, "https://api.example.com/api/Assets", json={"value": 1}, status=200)

    first = http.request("GET", "/api/Assets")
    second = http.request("GET", "/api/Assets")

    assert first == second == {"value": 1}
    assert len(responses.calls) == 1
    assert http.last_operation is not None
    assert http.last_operation.result == "success(cache)"


@responses.activate
def test_use_get_cache_false_skips_cache(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(responses.GET, "https://api.example.com/api/Auth/me", json={"value": 1}, status=200)
    responses.add(responses.GET, "https://api.example.com/api/Auth/me", json={"value": 2}, status=200)

    assert http.request("GET", "/api/Auth/me", use_get_cache=False) == {"value": 1}
    assert http.request("GET", "/api/Auth/me", use_get_cache=False) == {"value": 2}
    assert len(http.cache) == 0


@responses.activate
def test_mutation_invalidates_cached_collection(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(responses.GET, "https://api.example.com/api/Assets", json=[{"id": "1"}], status=200)
    responses.add(responses.POST, "https://api.example.com/api/Assets", json={"id": "2"}, status=201)
    responses.add(responses.GET, "https://api.example.com/api/Assets", json=[{"id": "1"}, {"id": "2"}], status=200)

    http.request("GET", "/api/Assets")
    http.request("POST", "/api/Assets", json_body={"name": "Laptop"})
    after = http.request("GET", "/api/Assets")

    assert after == [{"id": "1"}, {"id": "2"}]
    assert len(responses.calls) == 3


@responses.activate
def test_zero_ttl_disables_cache(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("AMS_CACHE_TTL_SECONDS", "0")
    http = _client("https://api.example.com")
    responses.add(responses.GET, "https://api.example.com/api/Assets", json=[], status=200)

    http.request("GET", "/api/Assets")
    http.request("GET", "/api/Assets")

    assert len(responses.calls) == 2


@responses.activate
def test_get_retries_server_errors_then_succeeds(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("AMS_RETRIES", "2")
    http = _client("https://api.example.com")
    responses.add(responses.GET, "https://api.example.com/api/Employees", json={"message": "boom"}, status=503)
    responses.add(responses.GET, "https://api.example.com/api/Employees", json=[], status=200)

    assert http.request("GET", "/api/Employees") == []
    assert len(responses.calls) == 2
    assert TRACE_HEADER in responses.calls[0].request.headers


@responses.activate
def test_post_is_not_retried(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("AMS_RETRIES", "3")
    http = _client("https://api.example.com")
    responses.add(responses.POST, "https://api.example.com/api/Assets", json={"message": "down"}, status=500)

    with pytest.raises(ServerError):
        http.request("POST", "/api/Assets", json_body={})
    assert len(responses.calls) == 1


@responses.activate
def test_transport_error_is_normalized(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    monkeypatch.setenv("AMS_RETRIES", "0")
    http = _client("https://api.example.com")
    responses.add(
        responses.GET,
        "https://api.example.com/api/Assets",
        body=requests.ConnectionError("refused"),
    )

    with pytest.raises(TransportError) as exc_info:
        http.request("GET", "/api/Assets")
    normalized = http.normalize_error(exc_info.value)
    assert normalized.type == "network"
    assert exc_info.value.status_code == 0


@responses.activate
def test_empty_body_returns_none(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(responses.DELETE, "https://api.example.com/api/Assets/7", status=204)

    assert http.request("DELETE", "/api/Assets/7") is None


@responses.activate
def test_item_update_invalidates_collection_listing(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(responses.GET, "https://api.example.com/api/Employees", json=[{"id": "1"}], status=200)
    responses.add(responses.GET, "https://api.example.com/api/Assets", json=[], status=200)
    responses.add(responses.PUT, "https://api.example.com/api/Assets/7", status=204)

    http.request("GET", "/api/Employees")
    http.request("GET", "/api/Assets")
    http.request("PUT", "/api/Assets/7", json_body={"name": "Dock"})

    assert len(http.cache) == 1


def test_collection_root_groups_by_controller() -> None:
    assert collection_root("/api/Assets/7/assign") == "/api/assets"
    assert collection_root("api/MasterData/statistics?x=1") == "/api/masterdata"


def test_storing_an_entry_sweeps_expired_ones(monkeypatch) -> None:
    clock = {"now": 100.0}
    monkeypatch.setattr("ams_client_sdk.http_client.time.monotonic", lambda: clock["now"])
    cache = ResponseCache(ttl_seconds=5)

    cache.put("search=a", "/api/Assets", [{"id": "1"}])
    clock["now"] = 200.0
    cache.put("search=b", "/api/Assets", [{"id": "2"}])

    assert len(cache) == 1
    assert cache.get("search=b") == [{"id": "2"}]
