from __future__ import annotations

import pytest
import responses
from ams_client_sdk import ApiSession, load_config
from ams_client_sdk.auth_store import AuthStore
from ams_client_sdk.clients.master_data import MasterDataResourceClient
from ams_client_sdk.clients.resources import AssetsClient
from ams_client_sdk.exceptions import ServerError

from apps.asset_console.app.bootstrap import AssetConsoleBootstrap
from apps.asset_console.main import main

LOGIN_PAYLOAD = {
    "token": "jwt-token",
    "user": {
        "id": "u-1",
        "userName": "manager",
        "email": "manager@example.com",
        "role": "Manager",
        "permissions": ["assets:read", "assets:update", "master_data:read"],
    },
}


def _bootstrap(monkeypatch, tmp_path) -> AssetConsoleBootstrap:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    config = load_config()
    return AssetConsoleBootstrap(config=config, session=ApiSession(config, auth_store=AuthStore(base_dir=tmp_path)))


@responses.activate
def test_login_builds_capability(monkeypatch, tmp_path) -> None:
    responses.add(responses.POST, "https://api.example.com/api/Auth/login", json=LOGIN_PAYLOAD, status=200)
    bootstrap = _bootstrap(monkeypatch, tmp_path)

    user = bootstrap.login("manager@example.com", "secret")

    session = bootstrap.state.session
    assert user.id == "u-1"
    assert session.actor == "manager@example.com"
    assert session.capability.can("assets:update")
    assert not session.capability.can("assets:delete")


@responses.activate
def test_service_for_maps_entities_to_clients(monkeypatch, tmp_path) -> None:
    responses.add(responses.POST, "https://api.example.com/api/Auth/login", json=LOGIN_PAYLOAD, status=200)
    bootstrap = _bootstrap(monkeypatch, tmp_path)
    bootstrap.login("manager@example.com", "secret")

    assets = bootstrap.service_for("assets")
    vendors = bootstrap.service_for("vendors")

    assert isinstance(assets.client, AssetsClient)
    assert assets.client.access_token == "jwt-token"
    assert isinstance(vendors.client, MasterDataResourceClient)
    assert vendors.client.base_path == "/api/Suppliers"
    assert bootstrap.service_for("assets") is assets


@responses.activate
def test_logout_resets_state_even_when_api_fails(monkeypatch, tmp_path) -> None:
    responses.add(responses.POST, "https://api.example.com/api/Auth/login", json=LOGIN_PAYLOAD, status=200)
    responses.add(responses.POST, "https://api.example.com/api/Auth/logout", json={"message": "down"}, status=503)
    bootstrap = _bootstrap(monkeypatch, tmp_path)
    bootstrap.login("manager@example.com", "secret")

    with pytest.raises(ServerError):
        bootstrap.logout()

    assert not bootstrap.session.authenticated
    assert bootstrap.state.session.actor is None


def test_main_listing_requires_a_stored_session(monkeypatch, tmp_path, capsys) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    monkeypatch.setattr("apps.asset_console.main.AssetConsoleBootstrap", lambda config: _bootstrap(monkeypatch, tmp_path))

    assert main(["--list", "assets"]) == 2
    assert "No stored session" in capsys.readouterr().err


@responses.activate
def test_main_prints_one_page(monkeypatch, tmp_path, capsys) -> None:
    responses.add(responses.POST, "https://api.example.com/api/Auth/login", json=LOGIN_PAYLOAD, status=200)
    responses.add(
        responses.GET,
        "https://api.example.com/api/Assets",
        json={"items": [{"id": "a-1", "assetTag": "AST-1", "name": "Laptop", "status": 1}], "totalCount": 1},
        status=200,
    )
    bootstrap = _bootstrap(monkeypatch, tmp_path)
    bootstrap.login("manager@example.com", "secret")
    monkeypatch.setattr("apps.asset_console.main.AssetConsoleBootstrap", lambda config: bootstrap)

    assert main(["--list", "assets"]) == 0
    out = capsys.readouterr().out
    assert "AST-1" in out
    assert "Available" in out


def _departments_bootstrap(monkeypatch, tmp_path) -> AssetConsoleBootstrap:
    responses.add(responses.POST, "https://api.example.com/api/Auth/login", json=LOGIN_PAYLOAD, status=200)
    responses.add(
        responses.GET,
        "https://api.example.com/api/Departments",
        json=[
            {"id": "d-1", "name": "Bravo", "status": "active"},
            {"id": "d-2", "name": "Alpha", "status": "active"},
        ],
        status=200,
    )
    bootstrap = _bootstrap(monkeypatch, tmp_path)
    bootstrap.login("manager@example.com", "secret")
    monkeypatch.setattr("apps.asset_console.main.AssetConsoleBootstrap", lambda config: bootstrap)
    return bootstrap


@responses.activate
def test_main_sort_on_default_key_stays_ascending(monkeypatch, tmp_path, capsys) -> None:
    _departments_bootstrap(monkeypatch, tmp_path)

    assert main(["--list", "departments", "--sort", "name"]) == 0
    out = capsys.readouterr().out
    assert out.index("Alpha") < out.index("Bravo")


@responses.activate
def test_main_desc_reverses_the_sort(monkeypatch, tmp_path, capsys) -> None:
    _departments_bootstrap(monkeypatch, tmp_path)

    assert main(["--list", "departments", "--sort", "name", "--desc"]) == 0
    out = capsys.readouterr().out
    assert out.index("Bravo") < out.index("Alpha")


@responses.activate
def test_main_rejects_unknown_sort_column(monkeypatch, tmp_path, capsys) -> None:
    _departments_bootstrap(monkeypatch, tmp_path)

    assert main(["--list", "departments", "--sort", "colour"]) == 2
    assert "not a sortable column" in capsys.readouterr().err
