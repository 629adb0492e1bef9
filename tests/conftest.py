"""Shared fixtures: an app wired to a throwaway SQLite database."""

from __future__ import annotations

from pathlib import Path
import sys
from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from aemoz.config.settings import (  # noqa: E402
    DatabaseConfig,
    RateLimitConfig,
    SecurityConfig,
    Settings,
)
from aemoz.main import create_app  # noqa: E402

ADMIN_PASSWORD = "correct-horse"
COURSES = ("Medicina", "Direito", "Engenharia", "Letras", "Agronomia")


def make_settings(tmp_path: Path, **rate_limit) -> Settings:
    return Settings(
        log_file=str(tmp_path / "logs" / "app.log"),
        database=DatabaseConfig(
            connection_url=f"sqlite+aiosqlite:///{tmp_path / 'aemoz.db'}",
            timeout_seconds=5,
        ),
        security=SecurityConfig(
            admin_password=ADMIN_PASSWORD,
            jwt_secret_key="test-signing-key",
        ),
        rate_limit=RateLimitConfig(**({"enabled": False} | rate_limit)),
    )


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    app = create_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    response = client.post("/auth/login", json={"password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def register(client: TestClient) -> Callable[..., dict]:
    """Register ``count`` participants spread round-robin over ``courses`` courses."""

    def _register(count: int, courses: int = 4, prefix: str = "Student") -> list[dict]:
        created = []
        for index in range(count):
            response = client.post(
                "/participants",
                json={
                    "name": f"{prefix} {index:03d}",
                    "course": COURSES[index % courses],
                    "semester": index % 10 + 1,
                },
            )
            assert response.status_code == 201, response.text
            created.append(response.json()["participant"])
        return created

    return _register
