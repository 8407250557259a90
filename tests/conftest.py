"""
Pytest configuration and fixtures for catalog tests.
"""
import os
import pytest
import pytest_asyncio
from typing import AsyncGenerator
from unittest.mock import MagicMock, AsyncMock

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from storefront.core.database import get_db, init_db
from storefront.models import Brand, Category
from storefront.schemas.product import ProductCreate
from storefront.services.product_service import product_service


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create mock async database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.execute = AsyncMock()
    return db


@pytest_asyncio.fixture
async def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def seeded(db) -> dict:
    """Brands and categories referenced by sample products."""
    brands = [Brand(id=1, name="Nike"), Brand(id=3, name="Puma"), Brand(id=7, name="Adidas"), Brand(id=37, name="Reebok")]
    categories = [Category(id=1, name="Shoes"), Category(id=2, name="Shirts"), Category(id=3, name="Accessories")]
    db.add_all(brands + categories)
    await db.commit()
    return {"brands": brands, "categories": categories}


@pytest.fixture
def sample_product_data() -> dict:
    """Sample product payload in the shape the product form submits."""
    return {
        "name": "Trail Runner",
        "description": "Lightweight trail running shoe",
        "old_price": 200.0,
        "discount": 10,
        "rating": 4.5,
        "colors": "red,black",
        "brands": "[3,7]",
        "categories": [1, 3],
        "gender": "men",
        "occasion": "sports,casual",
        "image_url": "https://i.ibb.co/example/shoe.jpg",
    }


@pytest.fixture
def make_product(db, sample_product_data):
    """Insert a product through the service, overriding sample fields."""
    async def _make(**overrides):
        payload = ProductCreate(**{**sample_product_data, **overrides})
        return await product_service.save_product(db, payload)
    return _make


@pytest_asyncio.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the test database."""
    from storefront.main import app

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
