"""Pytest configuration and fixtures"""
import fnmatch
import json
import os

# Must be set before config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["REDIS_ENABLED"] = "false"
os.environ["JWT_SECRET"] = "test-secret-key"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import AsyncGenerator, Dict, List, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from database.models import Base, Category, Product, User
from utils.cache import CacheMiss, CacheSerializationError, CacheUnavailable
from utils.product_cache import ProductCache
from utils.security import create_access_token, hash_password


class InMemoryStore:
    """
    Dict-backed stand-in for RedisCacheStore.

    Operation names listed in ``failing`` raise CacheUnavailable; patterns in
    ``failing_patterns`` make count_pattern fail for that pattern only.
    Every operation is recorded in ``calls``.
    """

    def __init__(self):
        self.data: Dict[str, str] = {}
        self.enabled = True
        self.failing = set()
        self.failing_patterns = set()
        self.calls: List[str] = []

    def _check(self, operation: str, key: Optional[str] = None):
        self.calls.append(operation)
        if operation in self.failing:
            raise CacheUnavailable(f"{operation} failed", key=key)

    def _match(self, pattern: str) -> List[str]:
        return [k for k in self.data if fnmatch.fnmatchcase(k, pattern)]

    async def ping(self) -> bool:
        return "ping" not in self.failing

    async def get(self, key: str):
        self._check("get", key)
        if key not in self.data:
            raise CacheMiss("key not found", key=key)
        try:
            return json.loads(self.data[key])
        except ValueError as exc:
            raise CacheSerializationError(f"undecodable value: {exc}", key=key) from exc

    async def set(self, key: str, value, ttl: Optional[int] = None):
        self._check("set", key)
        self.data[key] = json.dumps(value, default=str)

    async def exists(self, key: str) -> bool:
        self._check("exists", key)
        return key in self.data

    async def delete(self, key: str) -> int:
        self._check("delete", key)
        return 1 if self.data.pop(key, None) is not None else 0

    async def delete_pattern(self, pattern: str) -> int:
        self._check("delete_pattern", pattern)
        keys = self._match(pattern)
        for key in keys:
            del self.data[key]
        return len(keys)

    async def count_pattern(self, pattern: str) -> int:
        self._check("count_pattern", pattern)
        if pattern in self.failing_patterns:
            raise CacheUnavailable("scan failed", key=pattern)
        return len(self._match(pattern))


@pytest.fixture(autouse=True)
def reset_rate_limits():
    """Limits are per process; start every test with fresh counters"""
    from middlewares.rate_limit import limiter

    limiter.reset()
    yield


@pytest.fixture(scope="function")
async def test_engine(tmp_path):
    """Create test database engine (SQLite file per test)"""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        poolclass=NullPool,
        echo=False
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture(scope="function")
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(scope="function")
async def test_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def cache_store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def product_cache(cache_store) -> ProductCache:
    return ProductCache(cache_store)


@pytest.fixture
def app(session_factory, cache_store, product_cache):
    """Application wired to the test database and the in-memory cache"""
    from database.engine import get_session
    from webapp.api import create_app

    application = create_app()
    application.state.cache_store = cache_store
    application.state.product_cache = product_cache

    async def override_get_session():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_session] = override_get_session
    return application


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


async def _create_user(session: AsyncSession, username: str, role: str) -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password=hash_password("password123"),
        role=role,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture
async def test_user(test_session) -> User:
    return await _create_user(test_session, "alice", "user")


@pytest.fixture
async def other_user(test_session) -> User:
    return await _create_user(test_session, "bob", "user")


@pytest.fixture
async def test_admin(test_session) -> User:
    return await _create_user(test_session, "root", "admin")


def bearer(user: User) -> Dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id, user.username, user.role)}"}


@pytest.fixture
def auth_headers(test_user) -> Dict[str, str]:
    return bearer(test_user)


@pytest.fixture
def other_headers(other_user) -> Dict[str, str]:
    return bearer(other_user)


@pytest.fixture
def admin_headers(test_admin) -> Dict[str, str]:
    return bearer(test_admin)


@pytest.fixture
async def categories(test_session) -> List[Category]:
    items = [
        Category(name="Books", slug="books", description="", image_url="", is_active=True, sort_order=0),
        Category(name="Peripherals", slug="peripherals", description="", image_url="", is_active=True, sort_order=1),
    ]
    test_session.add_all(items)
    await test_session.commit()
    for item in items:
        await test_session.refresh(item)
    return items


@pytest.fixture
async def sample_products(test_session, categories) -> List[Product]:
    """Five active products across two categories plus one without, and one inactive"""
    books, peripherals = categories
    specs = [
        ("Python Cookbook", 39.99, books.id, 10),
        ("Fluent Python", 49.5, books.id, 5),
        ("Mechanical keyboard", 89.99, peripherals.id, 40),
        ("Wireless mouse", 19.99, peripherals.id, 2),
        ("Gift card", 25.0, None, 100),
    ]
    products = [
        Product(name=name, description=f"{name} description", price=price, category_id=category_id, stock=stock)
        for name, price, category_id, stock in specs
    ]
    products.append(Product(name="Discontinued lamp", description="", price=15.0, stock=3, is_active=False))

    test_session.add_all(products)
    await test_session.commit()
    for product in products:
        await test_session.refresh(product)
    return products


@pytest.fixture
def make_headers():
    return bearer
