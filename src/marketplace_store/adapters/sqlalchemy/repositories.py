"""Repository implementations backed by an async SQLAlchemy engine.

Every call runs in its own short transaction, mirroring the single-document
atomicity of a document store.
"""

from __future__ import annotations

from datetime import timedelta
from logging import getLogger
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import and_, delete, insert, select, update

from marketplace_store.adapters.snapshot import (
    release_from_document,
    release_info_from_document,
    release_info_to_document,
    release_to_document,
    update_info_from_document,
    update_info_to_document,
)
from marketplace_store.config import DEFAULT_RETENTION_DAYS
from marketplace_store.domain.model import (
    ReleaseList,
    UpdatedInfo,
    UpsertOutcome,
)

from .mappings import (
    RELEASE_FIELD_COLUMNS,
    release_info_table,
    release_table,
    update_log_table,
    update_time_table,
)

if TYPE_CHECKING:
    from datetime import datetime

    from sqlalchemy import ColumnElement
    from sqlalchemy.ext.asyncio import AsyncEngine

    from marketplace_store.domain.model import (
        Release,
        ReleaseInfo,
        ReleaseUpdateInfo,
        Vendor,
    )
    from marketplace_store.domain.reconciliation import ReleaseMatcher

log = getLogger(__name__)


def _release_values(release: Release, document: dict[str, Any]) -> dict[str, Any]:
    version = release.version_data
    return {
        "vendor": release.vendor,
        "release_name": release.release_name,
        "release_link": release.release_link,
        "openjdk_version": version.openjdk_version,
        "major": version.major,
        "minor": version.minor,
        "security": version.security,
        "patch": version.patch,
        "build": version.build,
        "pre": version.pre,
        "optional": version.optional,
        "document": document,
    }


class SqlAlchemyReleaseRepository:
    def __init__(self, engine: AsyncEngine, vendor: Vendor) -> None:
        self.engine = engine
        self.vendor = vendor

    def _where(self, matcher: ReleaseMatcher) -> ColumnElement[bool]:
        terms = [RELEASE_FIELD_COLUMNS[term.field] == term.value for term in matcher.terms]
        return and_(release_table.c.vendor == self.vendor, *terms)

    async def upsert(self, matcher: ReleaseMatcher, release: Release) -> UpsertOutcome:
        document = release_to_document(release)
        values = _release_values(release, document)
        async with self.engine.begin() as connection:
            stmt = (
                select(release_table.c.id, release_table.c.document)
                .where(self._where(matcher))
                .order_by(release_table.c.id)
                .limit(1)
            )
            existing = (await connection.execute(stmt)).first()
            if existing is None:
                await connection.execute(insert(release_table).values(**values))
                return UpsertOutcome.INSERTED
            if existing.document == document:
                return UpsertOutcome.UNCHANGED
            await connection.execute(
                update(release_table).where(release_table.c.id == existing.id).values(**values)
            )
            return UpsertOutcome.MODIFIED

    async def find_all(self) -> ReleaseList:
        stmt = (
            select(release_table.c.document)
            .where(release_table.c.vendor == self.vendor)
            .order_by(release_table.c.id)
        )
        async with self.engine.connect() as connection:
            documents = (await connection.execute(stmt)).scalars().all()
        return ReleaseList.of(release_from_document(document) for document in documents)

    async def delete_matching(self, matcher: ReleaseMatcher) -> int:
        async with self.engine.begin() as connection:
            result = await connection.execute(delete(release_table).where(self._where(matcher)))
        return result.rowcount


class SqlAlchemyUpdateTimeRepository:
    """Freshness marker: at most one row per vendor after every write."""

    def __init__(self, engine: AsyncEngine, vendor: Vendor) -> None:
        self.engine = engine
        self.vendor = vendor

    async def update_updated_time(self, time: datetime) -> None:
        own_rows = update_time_table.c.vendor == self.vendor
        async with self.engine.begin() as connection:
            stmt = select(update_time_table.c.id).where(own_rows).order_by(update_time_table.c.id)
            existing_id = (await connection.execute(stmt.limit(1))).scalar_one_or_none()
            if existing_id is None:
                await connection.execute(
                    insert(update_time_table).values(vendor=self.vendor, time=time)
                )
            else:
                await connection.execute(
                    update(update_time_table)
                    .where(update_time_table.c.id == existing_id)
                    .values(time=time)
                )
            await connection.execute(
                delete(update_time_table).where(own_rows, update_time_table.c.time < time)
            )

    async def get_updated_info_if_updated_since(self, since: datetime) -> UpdatedInfo | None:
        stmt = (
            select(update_time_table.c.time)
            .where(update_time_table.c.vendor == self.vendor, update_time_table.c.time > since)
            .order_by(update_time_table.c.time.desc())
            .limit(1)
        )
        async with self.engine.connect() as connection:
            time = (await connection.execute(stmt)).scalar_one_or_none()
        return None if time is None else UpdatedInfo(time)


class SqlAlchemyUpdateLogRepository:
    """Append-only audit log; entries past the retention window are pruned on write."""

    def __init__(
        self,
        engine: AsyncEngine,
        vendor: Vendor,
        *,
        retention: timedelta = timedelta(days=DEFAULT_RETENTION_DAYS),
    ) -> None:
        self.engine = engine
        self.vendor = vendor
        self.retention = retention

    async def log_update(self, update_info: ReleaseUpdateInfo) -> None:
        cutoff = update_info.timestamp - self.retention
        async with self.engine.begin() as connection:
            await connection.execute(
                insert(update_log_table).values(
                    vendor=self.vendor,
                    timestamp=update_info.timestamp,
                    document=update_info_to_document(update_info),
                )
            )
            pruned = await connection.execute(
                delete(update_log_table).where(
                    update_log_table.c.vendor == self.vendor,
                    update_log_table.c.timestamp < cutoff,
                )
            )
        if pruned.rowcount:
            log.debug(
                "Pruned %s update log entries of %s older than %s",
                pruned.rowcount,
                self.vendor,
                cutoff,
            )

    async def get_release_vendor_status(self) -> list[ReleaseUpdateInfo]:
        stmt = (
            select(update_log_table.c.document)
            .where(update_log_table.c.vendor == self.vendor)
            .order_by(update_log_table.c.id)
        )
        async with self.engine.connect() as connection:
            documents = (await connection.execute(stmt)).scalars().all()
        return [update_info_from_document(document) for document in documents]


class SqlAlchemyReleaseInfoRepository:
    def __init__(self, engine: AsyncEngine, vendor: Vendor) -> None:
        self.engine = engine
        self.vendor = vendor

    def _tip_version_entry(self) -> ColumnElement[bool]:
        return and_(
            release_info_table.c.vendor == self.vendor,
            release_info_table.c.tip_version.is_not(None),
        )

    async def set_release_info(self, release_info: ReleaseInfo) -> None:
        values = {
            "vendor": self.vendor,
            "tip_version": release_info.tip_version,
            "document": release_info_to_document(release_info),
        }
        async with self.engine.begin() as connection:
            await connection.execute(delete(release_info_table).where(self._tip_version_entry()))
            await connection.execute(insert(release_info_table).values(**values))

    async def get_release_info(self) -> ReleaseInfo | None:
        stmt = (
            select(release_info_table.c.document)
            .where(self._tip_version_entry())
            .order_by(release_info_table.c.id)
            .limit(1)
        )
        async with self.engine.connect() as connection:
            document = (await connection.execute(stmt)).scalar_one_or_none()
        return None if document is None else release_info_from_document(document)


if TYPE_CHECKING:
    from marketplace_store.domain.model import Vendor as _Vendor
    from marketplace_store.domain.ports import (
        ReleaseInfoRepository,
        ReleaseRepository,
        UpdateLogRepository,
        UpdateTimeRepository,
    )

    _engine_stub = cast("AsyncEngine", object())
    _vendor_stub = cast("_Vendor", "adoptium")
    _release_repo: ReleaseRepository = SqlAlchemyReleaseRepository(_engine_stub, _vendor_stub)
    _time_repo: UpdateTimeRepository = SqlAlchemyUpdateTimeRepository(_engine_stub, _vendor_stub)
    _log_repo: UpdateLogRepository = SqlAlchemyUpdateLogRepository(_engine_stub, _vendor_stub)
    _info_repo: ReleaseInfoRepository = SqlAlchemyReleaseInfoRepository(_engine_stub, _vendor_stub)
