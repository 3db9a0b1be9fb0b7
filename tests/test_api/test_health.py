"""Test service endpoints"""
import pytest


@pytest.mark.asyncio
async def test_health_check(client):
    """Test /health endpoint"""
    response = await client.get("/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "storefront"
    assert data["cache"] == "up"
    assert "version" in data


@pytest.mark.asyncio
async def test_health_reports_cache_down(client, cache_store):
    cache_store.failing.add("ping")

    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["cache"] == "down"


@pytest.mark.asyncio
async def test_health_reports_cache_disabled(client, cache_store):
    cache_store.enabled = False

    response = await client.get("/health")

    assert response.json()["cache"] == "disabled"


@pytest.mark.asyncio
async def test_root_lists_endpoints(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["endpoints"]["products"] == "/api/v1/products"


@pytest.mark.asyncio
async def test_correlation_id_is_echoed(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "req-42"})

    assert response.headers["X-Correlation-ID"] == "req-42"


@pytest.mark.asyncio
async def test_unknown_route_uses_error_shape(client):
    response = await client.get("/api/v1/nope")

    assert response.status_code == 404
    assert response.json()["success"] is False
