"""Health routes — liveness, readiness against the patched db_manager, integrations."""

import photobooth.infrastructure.database as db_module


async def test_liveness(client):
    res = await client.get("/api/v1/health/")

    assert res.status_code == 200
    assert res.json()["status"] == "healthy"
    assert res.json()["service"] == "photobooth-api"


async def test_readiness_with_database(client):
    res = await client.get("/api/v1/health/ready")

    assert res.status_code == 200
    assert res.json() == {"status": "ready", "checks": {"database": "healthy"}}


async def test_readiness_without_database(client, monkeypatch):
    monkeypatch.setattr(db_module, "db_manager", None)

    res = await client.get("/api/v1/health/ready")

    assert res.status_code == 503
    assert res.json()["reason"] == "database_unavailable"


async def test_integrations_never_expose_secrets(client, override_settings):
    override_settings(fal_key="fal-secret-key", stripe_secret_key="")

    res = await client.get("/api/v1/health/integrations")

    body = res.json()["integrations"]
    assert body["fal"] is True
    assert body["stripe"] is False
    assert body["storage"] is True
    assert "fal-secret-key" not in res.text


async def test_unknown_route_uses_error_envelope(client):
    res = await client.get("/api/v1/does-not-exist")

    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_wrong_method_uses_error_envelope(client):
    res = await client.delete("/api/v1/health/ready")

    assert res.status_code == 405
    assert res.json()["error"]["code"] == "METHOD_NOT_ALLOWED"
    assert "GET" in res.headers["allow"]
