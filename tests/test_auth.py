"""Admin login, credential verification and login rate limiting."""

from __future__ import annotations

from datetime import timedelta

from fastapi.testclient import TestClient
from pydantic import SecretStr

from aemoz.main import create_app
from aemoz.middleware.rate_limit import FixedWindowCounter
from aemoz.utils import create_access_token

from conftest import ADMIN_PASSWORD, make_settings


def test_login_issues_eight_hour_token(client: TestClient):
    response = client.post("/auth/login", json={"password": ADMIN_PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["token"]
    assert body["tokenType"] == "bearer"
    assert body["expiresIn"] == 8 * 3600


def test_login_with_wrong_password_is_unauthorized(client: TestClient):
    response = client.post("/auth/login", json={"password": "nope"})

    assert response.status_code == 401
    assert response.json()["code"] == "unauthorized"


def test_login_without_password_is_a_validation_error(client: TestClient):
    response = client.post("/auth/login", json={})

    assert response.status_code == 400
    assert response.json()["fields"] == {"password": "required"}


def test_validate_exposes_admin_role(client: TestClient, admin_headers):
    response = client.get("/auth/validate", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["valid"] is True
    assert body["user"]["role"] == "admin"
    assert body["user"]["expiresAt"]


def test_admin_routes_require_a_token(client: TestClient):
    for method, path in [
        ("get", "/auth/validate"),
        ("get", "/admin/participants"),
        ("post", "/admin/sorteio"),
        ("get", "/admin/sorteio/result"),
        ("delete", "/admin/clear-all"),
        ("get", "/admin/pdf/groups"),
    ]:
        response = getattr(client, method)(path)
        assert response.status_code == 401, path
        assert response.json()["code"] == "unauthenticated"


def test_forged_token_is_rejected(client: TestClient, settings):
    forged_settings = settings.security.model_copy(
        update={"jwt_secret_key": SecretStr("some-other-key")}
    )
    token = create_access_token(forged_settings)

    response = client.get(
        "/admin/participants", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 403
    assert response.json()["code"] == "invalid_credential"


def test_expired_token_is_rejected(client: TestClient, settings):
    token = create_access_token(settings.security, expires_delta=timedelta(seconds=-5))

    response = client.get("/auth/validate", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 403


def test_garbage_token_is_rejected(client: TestClient):
    response = client.get(
        "/auth/validate", headers={"Authorization": "Bearer not.a.jwt"}
    )

    assert response.status_code == 403


def test_login_is_limited_more_strictly_than_other_traffic(tmp_path):
    app = create_app(
        make_settings(tmp_path, enabled=True, login_max_attempts=3, max_requests=50)
    )
    with TestClient(app) as client:
        statuses = [
            client.post("/auth/login", json={"password": "guess"}).status_code
            for _ in range(4)
        ]
        assert statuses == [401, 401, 401, 429]

        blocked = client.post("/auth/login", json={"password": ADMIN_PASSWORD})
        assert blocked.status_code == 429
        assert int(blocked.headers["Retry-After"]) >= 1

        assert client.get("/stats").status_code == 200


def test_fixed_window_counter_resets_after_window():
    now = [0.0]
    counter = FixedWindowCounter(limit=2, window_seconds=60, clock=lambda: now[0])

    assert counter.hit("10.0.0.1") is None
    assert counter.hit("10.0.0.1") is None
    assert counter.hit("10.0.0.1") == 60
    assert counter.hit("10.0.0.2") is None

    now[0] = 61.0
    assert counter.hit("10.0.0.1") is None
