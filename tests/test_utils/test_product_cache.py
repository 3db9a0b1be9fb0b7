"""Tests for the product cache policy."""

from datetime import datetime

import pytest

from schemas.product import ProductResponse
from utils.cache_keys import CacheKeys
from utils.product_cache import ProductCache, filter_by_category, paginate, parse_category_id


def make_product(product_id: int, price: float = 10.0, category_id=None) -> ProductResponse:
    return ProductResponse(
        id=product_id,
        name=f"Product {product_id}",
        price=price,
        category_id=category_id,
        stock=5,
        created_at=datetime(2026, 1, 1, 12, 0, 0),
        updated_at=datetime(2026, 1, 1, 12, 0, 0),
    )


@pytest.fixture
def catalog():
    return [make_product(i) for i in range(1, 26)]


def test_cache_keys():
    assert CacheKeys.PRODUCTS_ALL == "products:all"
    assert CacheKeys.product(7) == "product:7"
    assert CacheKeys.invalidate_products() == "products:*"
    assert CacheKeys.stats_patterns() == ["products:all", "product:*", "products:category:*"]


def test_paginate_bounds():
    items = list(range(25))

    assert paginate(items, 1, 10) == list(range(10))
    assert paginate(items, 3, 10) == [20, 21, 22, 23, 24]
    assert paginate(items, 4, 10) == []
    assert paginate(items, 0, 10) == []
    assert paginate([], 1, 10) == []


@pytest.mark.parametrize("total,page,limit", [(25, 1, 10), (25, 3, 10), (7, 2, 3), (10, 1, 10), (3, 1, 50)])
def test_paginate_size(total, page, limit):
    result = paginate(list(range(total)), page, limit)

    assert len(result) == max(0, min(limit, total - (page - 1) * limit))


def test_filter_by_category():
    products = [make_product(1, category_id=1), make_product(2, category_id=2), make_product(3)]

    assert [p.id for p in filter_by_category(products, "2")] == [2]
    assert filter_by_category(products, "not-a-number") == []
    assert filter_by_category(products, "9") == []


@pytest.mark.parametrize("value", ["1_0", " 2 ", "2\n", "\u0662", "", "+", "1.0", None])
def test_category_filter_rejects_loose_integers(value):
    products = [make_product(1, category_id=10), make_product(2, category_id=2)]

    assert parse_category_id(value) is None
    assert filter_by_category(products, value) == []


def test_parse_category_id_accepts_signed_digits():
    assert parse_category_id("10") == 10
    assert parse_category_id("+2") == 2
    assert parse_category_id("-3") == -3
    assert parse_category_id("007") == 7


async def test_list_miss_then_pages(product_cache, catalog):
    assert await product_cache.get_product_list(1, 10, "") is None

    assert await product_cache.set_product_list(catalog) is True

    page1 = await product_cache.get_product_list(1, 10, "")
    page3 = await product_cache.get_product_list(3, 10, "")
    page4 = await product_cache.get_product_list(4, 10, "")

    assert [p.id for p in page1] == list(range(1, 11))
    assert [p.id for p in page3] == [21, 22, 23, 24, 25]
    assert page4 == []


async def test_page_reports_filtered_total(product_cache):
    products = [make_product(1, category_id=1), make_product(2, category_id=2), make_product(3, category_id=2)]
    await product_cache.set_product_list(products)

    items, total = await product_cache.get_product_page(1, 1, "2")

    assert [p.id for p in items] == [2]
    assert total == 2


async def test_category_filter_on_cached_catalog(product_cache):
    await product_cache.set_product_list(
        [make_product(1, category_id=1), make_product(2, category_id=2), make_product(3)]
    )

    by_two = await product_cache.get_product_list(1, 10, "2")
    garbage = await product_cache.get_product_list(1, 10, "not-a-number")

    assert [p.id for p in by_two] == [2]
    assert garbage == []


async def test_empty_catalog_is_a_hit(product_cache):
    await product_cache.set_product_list([])

    assert await product_cache.get_product_list(1, 10) == []
    assert await product_cache.has_catalog() is True


async def test_product_roundtrip_and_invalidation(product_cache, cache_store):
    await product_cache.set_product(make_product(7, price=9.99))

    cached = await product_cache.get_product(7)
    assert cached.price == 9.99

    # The database now holds 12.99; the write path invalidates
    assert await product_cache.invalidate_product(7) is True
    assert await product_cache.get_product(7) is None
    assert "product:7" not in cache_store.data


async def test_invalidate_product_drops_lists(product_cache, catalog):
    await product_cache.set_product_list(catalog)
    await product_cache.set_product(catalog[0])

    await product_cache.invalidate_product(catalog[0].id)

    assert await product_cache.get_product_list(1, 10) is None
    assert await product_cache.get_product(catalog[0].id) is None


async def test_invalidate_products_scans_lists_once(product_cache, cache_store, catalog):
    await product_cache.set_product_list(catalog)
    for product in catalog[:3]:
        await product_cache.set_product(product)
    cache_store.calls.clear()

    assert await product_cache.invalidate_products([3, 1, 2, 1]) is True

    assert cache_store.calls.count("delete_pattern") == 1
    assert cache_store.calls.count("delete") == 3
    assert all(await product_cache.get_product(p.id) is None for p in catalog[:3])
    assert await product_cache.get_product_list(1, 10) is None


async def test_invalidate_all_keeps_single_products(product_cache, cache_store, catalog):
    await product_cache.set_product_list(catalog)
    await product_cache.set_product(catalog[4])
    cache_store.data["products:category:2"] = "[]"

    assert await product_cache.invalidate_all() is True

    assert await product_cache.get_product_list(1, 10) is None
    assert "products:category:2" not in cache_store.data
    assert (await product_cache.get_product(catalog[4].id)).id == catalog[4].id


async def test_unavailable_store_reads_as_miss(product_cache, cache_store, catalog):
    await product_cache.set_product_list(catalog)
    await product_cache.set_product(catalog[0])
    cache_store.failing.update({"get", "exists"})

    assert await product_cache.get_product_list(1, 10) is None
    assert await product_cache.get_product(catalog[0].id) is None
    assert await product_cache.has_catalog() is False


async def test_failed_writes_report_false(product_cache, cache_store, catalog):
    cache_store.failing.update({"set", "delete_pattern"})

    assert await product_cache.set_product_list(catalog) is False
    assert await product_cache.set_product(catalog[0]) is False
    assert await product_cache.invalidate_all() is False


async def test_invalidate_product_attempts_both_deletes(product_cache, cache_store, catalog):
    await product_cache.set_product_list(catalog)
    await product_cache.set_product(catalog[0])
    cache_store.failing.add("delete")

    assert await product_cache.invalidate_product(catalog[0].id) is False
    # The list pattern delete still ran
    assert CacheKeys.PRODUCTS_ALL not in cache_store.data


async def test_malformed_entries_are_misses(product_cache, cache_store):
    cache_store.data["products:all"] = '{"not": "a list"}'
    cache_store.data["product:3"] = '{"id": "three"}'

    assert await product_cache.get_product_list(1, 10) is None
    assert await product_cache.get_product(3) is None


async def test_undecodable_entries_are_misses(product_cache, cache_store, catalog):
    cache_store.data["products:all"] = "[{not json"
    cache_store.data["product:3"] = "\x00garbage"

    assert await product_cache.get_product_list(1, 10) is None
    assert await product_cache.get_product_page(1, 10, "2") is None
    assert await product_cache.get_product(3) is None
    assert (await product_cache.get_cache_stats())["cached_products_count"] == 0

    assert await product_cache.set_product_list(catalog) is True
    assert len(await product_cache.get_product_list(1, 10)) == 10


async def test_cache_stats(product_cache, cache_store, catalog):
    await product_cache.set_product_list(catalog)
    await product_cache.set_product(catalog[0])
    await product_cache.set_product(catalog[1])

    stats = await product_cache.get_cache_stats()

    assert stats == {
        "products:all": 1,
        "product:*": 2,
        "products:category:*": 0,
        "cached_products_count": 25,
    }


async def test_cache_stats_marks_failed_pattern(product_cache, cache_store):
    cache_store.failing_patterns.add("product:*")

    stats = await product_cache.get_cache_stats()

    assert stats["product:*"] == "error"
    assert stats["products:all"] == 0
    assert stats["cached_products_count"] == 0


async def test_cached_value_matches_fresh_serialization(product_cache, cache_store):
    product = make_product(11, price=12.5, category_id=2)
    await product_cache.set_product(product)

    cached = await product_cache.get_product(11)

    assert cached.model_dump(mode="json") == product.model_dump(mode="json")
