"""Tests for the Redis cache store."""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from redis.exceptions import ConnectionError as RedisConnectionError

from utils.cache import (
    CacheError,
    CacheMiss,
    CacheSerializationError,
    CacheUnavailable,
    RedisCacheStore,
)


class AsyncIter:
    """Async iterator over a fixed list, standing in for scan_iter."""

    def __init__(self, items):
        self._items = list(items)

    def __aiter__(self):
        return self

    async def __anext__(self):
        if not self._items:
            raise StopAsyncIteration
        return self._items.pop(0)


@pytest.fixture
def mock_redis():
    """Mock Redis client."""
    redis_mock = AsyncMock()
    redis_mock.ping = AsyncMock(return_value=True)
    redis_mock.get = AsyncMock(return_value=None)
    redis_mock.setex = AsyncMock(return_value=True)
    redis_mock.exists = AsyncMock(return_value=0)
    redis_mock.delete = AsyncMock(return_value=1)
    redis_mock.scan_iter = MagicMock(return_value=AsyncIter([]))
    redis_mock.aclose = AsyncMock()
    return redis_mock


@pytest.fixture
def store(mock_redis):
    return RedisCacheStore(client=mock_redis, ttl=600, timeout=0.5)


def test_error_hierarchy():
    for error in (CacheMiss, CacheSerializationError, CacheUnavailable):
        assert issubclass(error, CacheError)
    assert CacheMiss("gone", key="product:1").key == "product:1"


async def test_get_hit_decodes_json(store, mock_redis):
    mock_redis.get.return_value = '{"id": 7, "price": 9.99}'

    value = await store.get("product:7")

    assert value == {"id": 7, "price": 9.99}
    mock_redis.get.assert_called_once_with("product:7")


async def test_get_missing_key_raises_miss(store, mock_redis):
    mock_redis.get.return_value = None

    with pytest.raises(CacheMiss) as exc_info:
        await store.get("product:7")

    assert exc_info.value.key == "product:7"


async def test_get_invalid_json_raises_serialization_error(store, mock_redis):
    mock_redis.get.return_value = "{not json"

    with pytest.raises(CacheSerializationError):
        await store.get("products:all")


async def test_set_uses_ttl(store, mock_redis):
    await store.set("product:7", {"id": 7})

    key, ttl, payload = mock_redis.setex.call_args[0]
    assert key == "product:7"
    assert ttl == 600
    assert payload == '{"id": 7}'


async def test_set_explicit_ttl(store, mock_redis):
    await store.set("product:7", {"id": 7}, ttl=30)

    assert mock_redis.setex.call_args[0][1] == 30


async def test_set_unserializable_value(store, mock_redis):
    circular = {}
    circular["self"] = circular

    with pytest.raises(CacheSerializationError):
        await store.set("product:1", circular)
    mock_redis.setex.assert_not_called()


async def test_exists(store, mock_redis):
    mock_redis.exists.return_value = 1

    assert await store.exists("products:all") is True


async def test_delete_absent_key_is_not_an_error(store, mock_redis):
    mock_redis.delete.return_value = 0

    assert await store.delete("product:404") == 0


async def test_delete_pattern(store, mock_redis):
    mock_redis.scan_iter.return_value = AsyncIter(["products:all", "products:category:2"])
    mock_redis.delete.return_value = 2

    count = await store.delete_pattern("products:*")

    assert count == 2
    mock_redis.scan_iter.assert_called_once_with(match="products:*", count=500)
    mock_redis.delete.assert_called_once_with("products:all", "products:category:2")


async def test_delete_pattern_without_matches(store, mock_redis):
    assert await store.delete_pattern("products:*") == 0
    mock_redis.delete.assert_not_called()


async def test_count_pattern(store, mock_redis):
    mock_redis.scan_iter.return_value = AsyncIter(["product:1", "product:2", "product:3"])

    assert await store.count_pattern("product:*") == 3


async def test_connection_error_becomes_unavailable(store, mock_redis):
    mock_redis.get.side_effect = RedisConnectionError("connection refused")

    with pytest.raises(CacheUnavailable):
        await store.get("products:all")


async def test_slow_call_times_out(store, mock_redis):
    async def slow_get(key):
        await asyncio.sleep(5)

    mock_redis.get.side_effect = slow_get

    with pytest.raises(CacheUnavailable, match="timed out"):
        await store.get("products:all")


async def test_disabled_store_raises_unavailable():
    store = RedisCacheStore()

    assert store.enabled is False
    with pytest.raises(CacheUnavailable):
        await store.get("products:all")
    with pytest.raises(CacheUnavailable):
        await store.set("products:all", [])
    assert await store.ping() is False


async def test_connect_respects_configuration():
    with patch("utils.cache.settings") as mock_settings:
        mock_settings.REDIS_ENABLED = False
        store = RedisCacheStore()

        assert await store.connect() is False
        assert store.enabled is False


async def test_connect_failure_disables_store():
    client = AsyncMock()
    client.ping = AsyncMock(side_effect=RedisConnectionError("down"))

    with patch("utils.cache.settings") as mock_settings, patch("utils.cache.redis.Redis", return_value=client):
        mock_settings.REDIS_ENABLED = True
        store = RedisCacheStore()

        assert await store.connect() is False
        assert store.enabled is False


async def test_disconnect_closes_client(store, mock_redis):
    await store.disconnect()

    mock_redis.aclose.assert_awaited_once()
    assert store.enabled is False
