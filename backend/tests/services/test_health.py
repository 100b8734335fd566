"""Health probes — liveness always up, readiness follows the database."""

import draws.infrastructure.database as db_module
from draws.infrastructure.database import DatabaseSessionManager


async def test_liveness(client):
    res = await client.get("/api/v1/health/")
    assert res.status_code == 200
    assert res.json()["service"] == "draws-api"


async def test_readiness(client):
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 200
    assert res.json()["checks"]["database"] == "healthy"


async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)
    res = await client.get("/api/v1/health/ready")
    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"


async def test_readiness_with_unreachable_database(client, monkeypatch):
    """Driver-level connection failures (OSError) still report 503."""
    manager = DatabaseSessionManager("postgresql+asyncpg://u:p@127.0.0.1:1/none")
    monkeypatch.setattr(db_module, "db_manager", manager)
    try:
        res = await client.get("/api/v1/health/ready")
    finally:
        await manager.dispose()
    assert res.status_code == 503
    assert res.json()["status"] == "not_ready"
