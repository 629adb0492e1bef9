"""Storage bounding: timeouts and unreachable stores become ``Unavailable``."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from aemoz.config.settings import DatabaseConfig
from aemoz.database import Database
from aemoz.services import Unavailable


def test_slow_operation_surfaces_as_unavailable(tmp_path: Path):
    db = Database(
        DatabaseConfig(
            connection_url=f"sqlite+aiosqlite:///{tmp_path / 'slow.db'}",
            timeout_seconds=0.05,
        )
    )

    async def slow() -> None:
        await asyncio.sleep(1)

    with pytest.raises(Unavailable):
        asyncio.run(db.run(slow))


def test_unreachable_store_surfaces_as_unavailable(tmp_path: Path):
    missing = tmp_path / "missing-dir" / "db.sqlite"
    db = Database(DatabaseConfig(connection_url=f"sqlite+aiosqlite:///{missing}"))

    with pytest.raises(Unavailable):
        asyncio.run(db.ping())


def test_postgres_urls_are_mapped_to_asyncpg():
    config = DatabaseConfig(connection_url="postgres://u:p@db:5432/aemoz")

    assert config.url == "postgresql+asyncpg://u:p@db:5432/aemoz"


def test_health_degrades_when_store_is_down(client: TestClient, monkeypatch):
    async def down() -> None:
        raise Unavailable()

    monkeypatch.setattr(client.app.state.database, "ping", down)

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "ERROR"


def test_storage_outage_maps_to_503(client: TestClient, admin_headers, monkeypatch):
    async def down(operation):
        raise Unavailable()

    monkeypatch.setattr(client.app.state.database, "run", down)

    response = client.get("/admin/participants", headers=admin_headers)

    assert response.status_code == 503
    assert response.json()["code"] == "unavailable"


def test_refused_postgres_connection_surfaces_as_unavailable():
    db = Database(
        DatabaseConfig(
            connection_url="postgresql+asyncpg://u:p@127.0.0.1:1/aemoz",
            timeout_seconds=5,
        )
    )

    async def scenario() -> None:
        try:
            await db.ping()
        finally:
            await db.dispose()

    with pytest.raises(Unavailable):
        asyncio.run(scenario())


def test_health_reports_refused_postgres_as_503(client: TestClient, monkeypatch):
    unreachable = Database(
        DatabaseConfig(
            connection_url="postgresql+asyncpg://u:p@127.0.0.1:1/aemoz",
            timeout_seconds=5,
        )
    )
    monkeypatch.setattr(client.app.state, "database", unreachable)

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "ERROR"
    assert response.json()["database"] == "unreachable"


def test_connection_errors_map_to_unavailable(tmp_path: Path):
    db = Database(
        DatabaseConfig(connection_url=f"sqlite+aiosqlite:///{tmp_path / 'x.db'}")
    )

    async def refused() -> None:
        raise ConnectionRefusedError(111, "Connect call failed")

    with pytest.raises(Unavailable):
        asyncio.run(db.run(refused))
