"""Test cache administration endpoints"""
import pytest

from utils.cache_keys import CacheKeys


@pytest.mark.asyncio
async def test_cache_stats(client, auth_headers, sample_products):
    await client.get("/api/v1/products", headers=auth_headers)
    await client.get(f"/api/v1/products/{sample_products[0].id}", headers=auth_headers)

    response = await client.get("/api/v1/cache/stats", headers=auth_headers)

    assert response.status_code == 200
    stats = response.json()["cache_stats"]
    assert stats["products:all"] == 1
    assert stats["product:*"] == 1
    assert stats["cached_products_count"] == 5


@pytest.mark.asyncio
async def test_cache_stats_with_failing_scan(client, auth_headers, cache_store):
    cache_store.failing_patterns.add("product:*")

    response = await client.get("/api/v1/cache/stats", headers=auth_headers)

    assert response.status_code == 200
    stats = response.json()["cache_stats"]
    assert stats["product:*"] == "error"
    assert stats["products:all"] == 0
    assert stats["cached_products_count"] == 0


@pytest.mark.asyncio
async def test_cache_stats_requires_auth(client):
    response = await client.get("/api/v1/cache/stats")

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_invalidate_cache(client, admin_headers, sample_products, cache_store):
    await client.get("/api/v1/products", headers=admin_headers)
    await client.get(f"/api/v1/products/{sample_products[0].id}", headers=admin_headers)

    response = await client.post("/api/v1/cache/invalidate", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["success"] is True
    assert CacheKeys.PRODUCTS_ALL not in cache_store.data
    assert CacheKeys.product(sample_products[0].id) in cache_store.data


@pytest.mark.asyncio
async def test_invalidate_cache_failure(client, admin_headers, cache_store):
    cache_store.failing.add("delete_pattern")

    response = await client.post("/api/v1/cache/invalidate", headers=admin_headers)

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "cache_invalidation_failed"


@pytest.mark.asyncio
async def test_invalidate_cache_requires_admin(client, auth_headers):
    response = await client.post("/api/v1/cache/invalidate", headers=auth_headers)

    assert response.status_code == 403
