from __future__ import annotations

import asyncio
import logging
from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from auth import schemas, security
from auth import service as auth_service


def test_parse_credentials_skips_incomplete_entries() -> None:
    users = auth_service.parse_credentials(" admin:admin123 , broken, :nope, bob:, eve:p:w ")

    assert users == {"admin": "admin123", "eve": "p:w"}


def test_loaded_credentials_cannot_be_mutated(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AUTH_USERS", "ops:secret")
    users = auth_service.load_credentials()

    assert dict(users) == {"ops": "secret"}
    with pytest.raises(TypeError):
        users["intruder"] = "x"  # type: ignore[index]


def test_login_service_issues_token_for_valid_credentials() -> None:
    result = asyncio.run(auth_service.login(schemas.LoginRequest(username="admin", password="admin123")))

    assert result.success is True
    assert result.username == "admin"
    assert security.decode_access_token(result.token or "")["name"] == "admin"


def test_login_service_password_check_is_case_sensitive() -> None:
    with pytest.raises(auth_service.LoginRejected) as excinfo:
        asyncio.run(auth_service.login(schemas.LoginRequest(username="admin", password="ADMIN123")))

    assert excinfo.value.status_code == 401


def test_login_service_uses_injected_credentials() -> None:
    payload = schemas.LoginRequest(username="ops", password="secret")

    result = asyncio.run(auth_service.login(payload, credentials={"ops": "secret"}))

    assert result.username == "ops"


def test_current_username_falls_back_to_unknown() -> None:
    assert auth_service.current_username({"name": "alice"}) == "alice"
    assert auth_service.current_username({"sub": "alice"}) == "Unknown"
    assert auth_service.current_username({"name": "  "}) == "Unknown"


def test_login_endpoint_returns_token(client: TestClient) -> None:
    resp = client.post("/login", json={"username": "admin", "password": "admin123"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Login successful."
    assert body["username"] == "admin"
    assert security.decode_access_token(body["token"])["sub"] == "admin"


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"username": "admin"},
        {"password": "admin123"},
        {"username": "", "password": "admin123"},
        {"username": "admin", "password": ""},
    ],
)
def test_login_endpoint_requires_both_fields(client: TestClient, payload: dict) -> None:
    resp = client.post("/login", json=payload)

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Username and password are required."}


def test_wrong_password_and_unknown_user_look_identical(client: TestClient) -> None:
    wrong_password = client.post("/login", json={"username": "admin", "password": "nope"})
    unknown_user = client.post("/login", json={"username": "ghost", "password": "admin123"})

    assert wrong_password.status_code == unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json()
    assert wrong_password.json() == {"success": False, "message": "Invalid username or password."}


def test_login_attempts_are_logged_without_password(
    client: TestClient, caplog: pytest.LogCaptureFixture
) -> None:
    caplog.set_level(logging.INFO, logger="auth.service")

    client.post("/login", json={"username": "admin", "password": "admin123"})
    client.post("/login", json={"username": "mallory", "password": "hunter2"})

    messages = [record.getMessage() for record in caplog.records if record.name == "auth.service"]
    assert "login_succeeded username=admin" in messages
    assert "login_failed username=mallory" in messages
    assert not any("admin123" in m or "hunter2" in m for m in messages)


def test_login_endpoint_hides_unexpected_errors(
    client: TestClient, monkeypatch: pytest.MonkeyPatch
) -> None:
    def boom(**_: object) -> str:
        raise RuntimeError("signing key unavailable")

    monkeypatch.setattr(security, "build_access_token", boom)

    resp = client.post("/login", json={"username": "admin", "password": "admin123"})

    assert resp.status_code == 500
    assert resp.json() == {"success": False, "message": "An error occurred during login."}


def test_record_endpoints_require_a_token(client: TestClient, store) -> None:
    resp = client.get("/requests")

    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.parametrize("header", ["Token abc", "Bearer", "Bearer not.a.jwt", "Basic YWRtaW46YWRtaW4xMjM="])
def test_record_endpoints_reject_bad_authorization_headers(client: TestClient, store, header: str) -> None:
    resp = client.get("/requests", headers={"Authorization": header})

    assert resp.status_code == 401


def test_record_endpoints_reject_expired_tokens(client: TestClient, store) -> None:
    issued_at = security.utc_now() - timedelta(minutes=61)
    token = security.build_access_token(username="admin", issued_at=issued_at)

    resp = client.get("/requests", headers={"Authorization": f"Bearer {token}"})

    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid or expired token."


def test_health_does_not_require_a_token(client: TestClient) -> None:
    assert client.get("/health").json() == {"status": "ok"}


@pytest.mark.parametrize(
    "kwargs",
    [
        {"json": {"username": 1, "password": "admin123"}},
        {"json": ["admin", "admin123"]},
        {"content": b"username=admin", "headers": {"Content-Type": "application/json"}},
    ],
)
def test_malformed_login_body_keeps_the_login_response_shape(client: TestClient, kwargs: dict) -> None:
    resp = client.post("/login", **kwargs)

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "message": "Invalid login request."}


def test_openapi_declares_bearer_scheme_on_record_endpoints(client: TestClient) -> None:
    document = client.get("/openapi.json").json()

    schemes = document["components"]["securitySchemes"]
    assert any(s.get("type") == "http" and s.get("scheme") == "bearer" for s in schemes.values())
    assert document["paths"]["/requests"]["get"]["security"]
    assert "security" not in document["paths"]["/login"]["post"]
