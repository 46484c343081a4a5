from __future__ import annotations

import responses

from ams_client_sdk import ApiSession, load_config
from ams_client_sdk.auth_store import AuthStore
from ams_client_sdk.clients.auth import AuthClient
from ams_client_sdk.exceptions import AuthError
from ams_client_sdk.http_client import HttpClient
from ams_client_sdk.models import SessionData, UserProfile
from ams_client_sdk.tracing import TraceContext

LOGIN_PAYLOAD = {
    "token": "jwt-token",
    "refreshToken": "refresh-1",
    "expiresAt": "2030-01-01T00:00:00Z",
    "user": {
        "id": "u-1",
        "userName": "admin",
        "email": "admin@example.com",
        "firstName": "Grace",
        "lastName": "Hopper",
        "role": "Admin",
        "isActive": True,
        "permissions": ["assets:read"],
    },
}


def _client(base_url: str) -> HttpClient:
    cfg = load_config()
    object.__setattr__(cfg, "api_base_url", base_url)
    return HttpClient(cfg, trace=TraceContext())


@responses.activate
def test_login_me_flow(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(responses.POST, "https://api.example.com/api/Auth/login", json=LOGIN_PAYLOAD, status=200)
    responses.add(responses.GET, "https://api.example.com/api/Auth/me", json=LOGIN_PAYLOAD["user"], status=200)

    login = AuthClient(http=http).login("admin@example.com", "secret")
    user = AuthClient(http=http, access_token=login.token).me()

    assert login.refresh_token == "refresh-1"
    assert user.full_name == "Grace Hopper"
    assert user.role == "Admin"
    assert responses.calls[1].request.headers["Authorization"] == "Bearer jwt-token"


@responses.activate
def test_login_rejected(monkeypatch) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    http = _client("https://api.example.com")
    responses.add(
        responses.POST,
        "https://api.example.com/api/Auth/login",
        json={"message": "Invalid email or password"},
        status=401,
    )

    try:
        AuthClient(http=http).login("admin@example.com", "wrong")
    except AuthError as exc:
        assert exc.message == "Invalid email or password"
        assert exc.code == "UNAUTHORIZED"
    else:
        raise AssertionError("expected AuthError")


def test_auth_store_round_trip(tmp_path) -> None:
    store = AuthStore(base_dir=tmp_path)
    user = UserProfile(id="u-1", user_name="admin", email="admin@example.com")
    store.save(SessionData(access_token="tok", user=user, env_name="dev"))

    loaded = store.load()

    assert loaded is not None
    assert loaded.access_token == "tok"
    assert loaded.user is not None and loaded.user.email == "admin@example.com"
    store.clear()
    assert store.load() is None


def test_auth_store_discards_corrupt_file(tmp_path) -> None:
    store = AuthStore(base_dir=tmp_path)
    (tmp_path / "session.json").write_text("{not json")

    assert store.load() is None
    assert not (tmp_path / "session.json").exists()


@responses.activate
def test_session_establish_persists_and_restores(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    responses.add(responses.POST, "https://api.example.com/api/Auth/login", json=LOGIN_PAYLOAD, status=200)
    config = load_config()
    session = ApiSession(config, auth_store=AuthStore(base_dir=tmp_path))
    assert not session.authenticated

    session.establish(session.auth_client().login("admin@example.com", "secret"))
    restored = ApiSession(config, auth_store=AuthStore(base_dir=tmp_path))

    assert restored.authenticated
    assert restored.token == "jwt-token"
    assert restored.assets_client().access_token == "jwt-token"

    restored.clear()
    assert ApiSession(config, auth_store=AuthStore(base_dir=tmp_path)).authenticated is False


def test_session_ignores_other_environment(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("AMS_API_BASE_URL", "https://api.example.com")
    AuthStore(base_dir=tmp_path).save(SessionData(access_token="prod-token", env_name="prod"))

    session = ApiSession(load_config(), auth_store=AuthStore(base_dir=tmp_path))

    assert session.authenticated is False
