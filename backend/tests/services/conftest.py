"""Service test fixtures — async DB + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - db_manager patched so session_scope() (used by every SqlAlchemyCrudService) hits the test DB
    - Catalog dispatcher toggles and hooks restored after every test

Design Decisions:
    - SQLite in-memory with StaticPool: one shared connection, so every session
      sees the tables created at setup
    - db_manager patched rather than dependency_overrides: services open their own
      sessions, they do not take one from the request
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from crudflow.api.routes import catalog
from crudflow.db.base import Base
from crudflow.infrastructure.database import DatabaseSessionManager
from crudflow.models.category import Category
from crudflow.models.product import Product
import crudflow.infrastructure.database as db_module
from crudflow.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def patched_db_manager(test_engine, test_session_factory):
    """Point the process-wide db_manager at the test engine."""
    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager
    yield fake_manager
    db_module.db_manager = original_manager


@pytest.fixture
def restore_catalog_config():
    """Snapshot toggles + hooks of the module-level catalog dispatchers."""
    dispatchers = (
        catalog.category_views, catalog.category_api,
        catalog.product_views, catalog.product_api,
    )
    saved = [
        (d, dict(d.config.toggles), d.config.on_prepare_form)
        for d in dispatchers
    ]
    yield
    for dispatcher, toggles, hook in saved:
        dispatcher.config.toggles = toggles
        dispatcher.config.on_prepare_form = hook


@pytest.fixture
async def client(patched_db_manager, restore_catalog_config):
    """FastAPI test client backed by the test DB."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
async def seed_category(test_db):
    category = Category(name="Tools", description="Hand tools")
    test_db.add(category)
    await test_db.commit()
    await test_db.refresh(category)
    return category


@pytest.fixture
async def seed_product(test_db, seed_category):
    product = Product(
        name="Hammer", sku="hammer-01", price=12.5,
        category_id=seed_category.id,
    )
    test_db.add(product)
    await test_db.commit()
    await test_db.refresh(product)
    return product
