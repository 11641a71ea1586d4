from __future__ import annotations

import os
from datetime import UTC, datetime
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from marketplace_store.adapters.sqlalchemy import (
    SqlAlchemyVendorPersistenceFactory,
    create_all_tables,
    shutdown,
)
from marketplace_store.config import PersistenceConfig
from tests.helpers.releases import FakeClock

os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite:///:memory:")

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from sqlalchemy.ext.asyncio import AsyncEngine


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 1, 15, 12, tzinfo=UTC))


@pytest.fixture
async def sqlite_engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as connection:
        await create_all_tables(connection)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def persistence_factory(
    sqlite_engine: AsyncEngine, clock: FakeClock
) -> SqlAlchemyVendorPersistenceFactory:
    return SqlAlchemyVendorPersistenceFactory(
        sqlite_engine, config=PersistenceConfig(), clock=clock
    )


@pytest.fixture
async def reset_persistence_state() -> AsyncIterator[None]:
    await shutdown()
    yield
    await shutdown()
