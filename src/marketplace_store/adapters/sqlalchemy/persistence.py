"""Engine lifecycle and per-vendor persistence built on the SQLAlchemy repositories."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from logging import Logger, getLogger
from typing import TYPE_CHECKING, Final

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from marketplace_store.config import (
    PersistenceConfig,
    get_database_config,
    get_persistence_config,
)
from marketplace_store.domain.model import Vendor
from marketplace_store.domain.reconciliation import ReconciliationEngine
from marketplace_store.domain.time_source import utcnow

from .mappings import create_all_tables, update_time_table
from .repositories import (
    SqlAlchemyReleaseInfoRepository,
    SqlAlchemyReleaseRepository,
    SqlAlchemyUpdateLogRepository,
    SqlAlchemyUpdateTimeRepository,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime

    from sqlalchemy.ext.asyncio import AsyncEngine

    from marketplace_store.domain.model import (
        ReleaseInfo,
        ReleaseList,
        ReleaseUpdateInfo,
        UpdatedInfo,
    )
    from marketplace_store.domain.time_source import Clock

log = getLogger(__name__)

SEED_UPDATE_TIME_AGE: Final[timedelta] = timedelta(minutes=5)


class StartupError(RuntimeError):
    """Raised when persistence is used before initialisation."""


@dataclass(slots=True)
class _AdapterState:
    engine: AsyncEngine | None = None


_STATE = _AdapterState()


def create_engine_for_uri(database_uri: str) -> AsyncEngine:
    if ":memory:" in database_uri or database_uri.endswith("://"):
        # in-memory SQLite lives inside one connection; share it
        return create_async_engine(database_uri, poolclass=StaticPool)
    return create_async_engine(database_uri)


async def startup(
    *,
    engine: AsyncEngine | None = None,
    database_uri: str | None = None,
    config: PersistenceConfig | None = None,
    vendors: Iterable[Vendor] = tuple(Vendor),
    clock: Clock = utcnow,
    force: bool = False,
) -> AsyncEngine:
    """Create the engine and tables, optionally seeding the freshness markers."""

    if _STATE.engine is not None and not force:
        raise StartupError("Persistence already initialised. Pass force=True to reconfigure.")

    effective_config = config or get_persistence_config()
    resolved_engine = engine or create_engine_for_uri(
        database_uri or get_database_config().uri
    )
    async with resolved_engine.begin() as connection:
        await create_all_tables(connection)

    if effective_config.seed_update_time:
        await _seed_update_times(resolved_engine, vendors, clock() - SEED_UPDATE_TIME_AGE)

    _STATE.engine = resolved_engine
    return resolved_engine


async def _seed_update_times(
    engine: AsyncEngine, vendors: Iterable[Vendor], seeded_at: datetime
) -> None:
    for vendor in vendors:
        try:
            async with engine.begin() as connection:
                marker = select(update_time_table.c.id).where(update_time_table.c.vendor == vendor)
                if (await connection.execute(marker.limit(1))).first() is not None:
                    continue
                await connection.execute(
                    insert(update_time_table).values(vendor=vendor, time=seeded_at)
                )
        except Exception:
            # a failed seed leaves the marker empty; startup carries on
            log.exception("Failed to seed update time for %s", vendor)


def configured_engine() -> AsyncEngine | None:
    return _STATE.engine


def is_started() -> bool:
    return _STATE.engine is not None


async def shutdown() -> None:
    """Dispose the managed engine and reset state."""

    if _STATE.engine is not None:
        await _STATE.engine.dispose()
    _STATE.engine = None


class SqlAlchemyVendorPersistence:
    """Release record of one vendor: reconciliation plus the read side."""

    def __init__(
        self,
        engine: AsyncEngine,
        vendor: Vendor,
        *,
        config: PersistenceConfig | None = None,
        clock: Clock = utcnow,
        logger: Logger | None = None,
    ) -> None:
        effective_config = config or PersistenceConfig()
        self._vendor = vendor
        self.releases = SqlAlchemyReleaseRepository(engine, vendor)
        self.release_info = SqlAlchemyReleaseInfoRepository(engine, vendor)
        self.update_time = SqlAlchemyUpdateTimeRepository(engine, vendor)
        self.update_log = SqlAlchemyUpdateLogRepository(
            engine, vendor, retention=effective_config.update_log_retention
        )
        self._reconciler = ReconciliationEngine(
            vendor,
            releases=self.releases,
            update_time=self.update_time,
            update_log=self.update_log,
            clock=clock,
            logger=logger,
        )

    @property
    def vendor(self) -> Vendor:
        return self._vendor

    async def write_releases(self, releases: ReleaseList) -> ReleaseUpdateInfo:
        return await self._reconciler.write_releases(releases)

    async def set_release_info(self, release_info: ReleaseInfo) -> None:
        await self.release_info.set_release_info(release_info)

    async def get_updated_info_if_updated_since(self, since: datetime) -> UpdatedInfo | None:
        return await self.update_time.get_updated_info_if_updated_since(since)

    async def get_release_vendor_status(self) -> list[ReleaseUpdateInfo]:
        return await self.update_log.get_release_vendor_status()

    async def get_release_info(self) -> ReleaseInfo | None:
        return await self.release_info.get_release_info()

    async def get_all_releases(self) -> ReleaseList:
        return await self.releases.find_all()


class SqlAlchemyVendorPersistenceFactory:
    """Hand out vendor persistence bound to one engine."""

    def __init__(
        self,
        engine: AsyncEngine | None = None,
        *,
        config: PersistenceConfig | None = None,
        clock: Clock = utcnow,
        logger: Logger | None = None,
    ) -> None:
        resolved_engine = engine or _STATE.engine
        if resolved_engine is None:
            raise StartupError(
                "Persistence not initialised. Call marketplace_store.adapters.sqlalchemy."
                "persistence.startup() or pass an engine."
            )
        self.engine = resolved_engine
        self.config = config or get_persistence_config()
        self.clock = clock
        self.logger = logger

    def for_vendor(self, vendor: Vendor) -> SqlAlchemyVendorPersistence:
        return SqlAlchemyVendorPersistence(
            self.engine,
            vendor,
            config=self.config,
            clock=self.clock,
            logger=self.logger,
        )


if TYPE_CHECKING:
    from typing import cast

    from marketplace_store.domain.ports import VendorPersistence, VendorPersistenceFactory

    _engine_stub = cast("AsyncEngine", object())
    _persistence_check: VendorPersistence = SqlAlchemyVendorPersistence(
        _engine_stub, Vendor.ADOPTIUM
    )
    _factory_check: VendorPersistenceFactory = SqlAlchemyVendorPersistenceFactory(_engine_stub)
