"""Pytest configuration and shared fixtures.

Organization:
    - Environment: settings isolation between tests
    - Database Fixtures: SQLAlchemy engine and session on in-memory SQLite
    - Catalog Fixtures: factories for catalog rows
"""

from __future__ import annotations

import os
from collections.abc import AsyncGenerator, Awaitable, Callable
from datetime import UTC, datetime, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from catalog_pager.core.settings import clear_all_caches

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

    from catalog_pager.features.catalog.models import CatalogItem

# Ensure tests run without external infrastructure
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_JSON", "false")

BASE_TIME = datetime(2025, 1, 1, tzinfo=UTC)


# ============================================================================
# Environment
# ============================================================================


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Reload settings in every test so monkeypatched env vars apply."""
    clear_all_caches()
    yield
    clear_all_caches()


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Create async SQLAlchemy engine with in-memory SQLite.

    Yields:
        Async SQLAlchemy engine connected to in-memory SQLite.
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Create async database session with catalog tables.

    Creates all tables from Base.metadata, yields a session, rolls back
    afterwards and drops the tables.
    """
    from catalog_pager.core.database.base import Base
    from catalog_pager.features.catalog import models  # noqa: F401

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session_maker = async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ============================================================================
# Catalog Fixtures
# ============================================================================


ItemFactory = Callable[..., Awaitable[list["CatalogItem"]]]


@pytest.fixture
def make_items(db_session: AsyncSession) -> ItemFactory:
    """Factory persisting catalog items.

    Item ``i`` of a batch is named ``f"{prefix} {i}"``, created ``i``
    minutes after ``start`` and has popularity ``i``, so newest-first
    ordering returns the highest index first.

    Example:
        async def test_listing(make_items):
            items = await make_items(10, price=Decimal("0"))
    """
    from catalog_pager.features.catalog.models import CatalogItem
    from catalog_pager.features.catalog.repository import CatalogItemRepository

    repo = CatalogItemRepository()

    async def _make(
        count: int,
        *,
        prefix: str = "Page Icon",
        start: datetime = BASE_TIME,
        price: Decimal | Callable[[int], Decimal] = Decimal("0"),
        **overrides: Any,
    ) -> list[CatalogItem]:
        items = [
            CatalogItem(
                name=f"{prefix} {i}",
                price=price(i) if callable(price) else price,
                popularity=i,
                created_at=start + timedelta(minutes=i),
                **overrides,
            )
            for i in range(count)
        ]
        return list(await repo.create_many(db_session, items))

    return _make
