from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import func, select

from marketplace_store.adapters.sqlalchemy import (
    SqlAlchemyReleaseInfoRepository,
    SqlAlchemyReleaseRepository,
    SqlAlchemyUpdateLogRepository,
    SqlAlchemyUpdateTimeRepository,
)
from marketplace_store.adapters.sqlalchemy.mappings import release_info_table, update_time_table
from marketplace_store.domain.model import (
    ReleaseInfo,
    ReleaseList,
    ReleaseUpdateInfo,
    UpsertOutcome,
    Vendor,
)
from marketplace_store.domain.reconciliation import ReleaseMatcher
from tests.helpers.releases import make_release, make_version

if TYPE_CHECKING:
    from sqlalchemy import Table
    from sqlalchemy.ext.asyncio import AsyncEngine

T0 = datetime(2026, 1, 15, 12, tzinfo=UTC)


async def _count(engine: AsyncEngine, table: Table) -> int:
    async with engine.connect() as connection:
        return (await connection.execute(select(func.count()).select_from(table))).scalar_one()


async def test_release_upsert_reports_insert_noop_and_modification(
    sqlite_engine: AsyncEngine,
) -> None:
    repository = SqlAlchemyReleaseRepository(sqlite_engine, Vendor.ADOPTIUM)
    release = make_release(release_date=T0)
    changed = make_release(release_date=T0 + timedelta(days=1))
    matcher = ReleaseMatcher.for_release(release)

    assert await repository.upsert(matcher, release) is UpsertOutcome.INSERTED
    assert await repository.upsert(matcher, release) is UpsertOutcome.UNCHANGED
    assert await repository.upsert(matcher, changed) is UpsertOutcome.MODIFIED
    assert list(await repository.find_all()) == [changed]


async def test_release_upsert_replaces_fields_absent_on_incoming_release(
    sqlite_engine: AsyncEngine,
) -> None:
    repository = SqlAlchemyReleaseRepository(sqlite_engine, Vendor.ADOPTIUM)
    stored = make_release(version=make_version(patch=5))
    incoming = make_release(version=make_version(patch=None))
    await repository.upsert(ReleaseMatcher.for_release(stored), stored)

    outcome = await repository.upsert(ReleaseMatcher.for_release(incoming), incoming)

    assert outcome is UpsertOutcome.MODIFIED
    assert list(await repository.find_all()) == [incoming]


async def test_release_delete_returns_deleted_count(sqlite_engine: AsyncEngine) -> None:
    repository = SqlAlchemyReleaseRepository(sqlite_engine, Vendor.ADOPTIUM)
    with_patch = make_release(version=make_version(patch=1))
    other_patch = make_release(version=make_version(patch=2))
    for release in (with_patch, other_patch):
        await repository.upsert(ReleaseMatcher.for_release(release), release)

    broad = ReleaseMatcher.for_release(make_release(version=make_version(patch=None)))

    assert await repository.delete_matching(ReleaseMatcher.for_release(with_patch)) == 1
    assert await repository.delete_matching(ReleaseMatcher.for_release(with_patch)) == 0
    assert await repository.delete_matching(broad) == 1
    assert await repository.find_all() == ReleaseList()


async def test_release_partitions_are_separated_by_vendor(sqlite_engine: AsyncEngine) -> None:
    adoptium = SqlAlchemyReleaseRepository(sqlite_engine, Vendor.ADOPTIUM)
    azul = SqlAlchemyReleaseRepository(sqlite_engine, Vendor.AZUL)
    release = make_release()
    await adoptium.upsert(ReleaseMatcher.for_release(release), release)

    assert list(await adoptium.find_all()) == [release]
    assert list(await azul.find_all()) == []


async def test_updated_time_is_absent_before_first_write(sqlite_engine: AsyncEngine) -> None:
    repository = SqlAlchemyUpdateTimeRepository(sqlite_engine, Vendor.ADOPTIUM)

    assert await repository.get_updated_info_if_updated_since(T0 - timedelta(days=365)) is None


async def test_updated_time_keeps_single_latest_row(sqlite_engine: AsyncEngine) -> None:
    repository = SqlAlchemyUpdateTimeRepository(sqlite_engine, Vendor.ADOPTIUM)
    later = T0 + timedelta(minutes=10)

    await repository.update_updated_time(T0)
    await repository.update_updated_time(later)

    info = await repository.get_updated_info_if_updated_since(T0)
    assert info is not None
    assert info.time == later
    assert await _count(sqlite_engine, update_time_table) == 1


async def test_updated_since_is_strictly_greater(sqlite_engine: AsyncEngine) -> None:
    repository = SqlAlchemyUpdateTimeRepository(sqlite_engine, Vendor.ADOPTIUM)
    await repository.update_updated_time(T0)

    assert await repository.get_updated_info_if_updated_since(T0) is None
    assert await repository.get_updated_info_if_updated_since(T0 - timedelta(seconds=1)) is not None


async def test_update_log_prunes_entries_older_than_retention(sqlite_engine: AsyncEngine) -> None:
    repository = SqlAlchemyUpdateLogRepository(
        sqlite_engine, Vendor.ADOPTIUM, retention=timedelta(days=30)
    )
    old = ReleaseUpdateInfo(added=ReleaseList.of([make_release("old")]), timestamp=T0)
    recent = ReleaseUpdateInfo(
        added=ReleaseList.of([make_release("recent")]), timestamp=T0 + timedelta(days=20)
    )
    latest = ReleaseUpdateInfo(
        removed=ReleaseList.of([make_release("old")]), timestamp=T0 + timedelta(days=31)
    )

    for entry in (old, recent, latest):
        await repository.log_update(entry)

    assert await repository.get_release_vendor_status() == [recent, latest]


async def test_update_log_keeps_empty_diffs(sqlite_engine: AsyncEngine) -> None:
    repository = SqlAlchemyUpdateLogRepository(sqlite_engine, Vendor.ADOPTIUM)
    empty = ReleaseUpdateInfo(timestamp=T0)

    await repository.log_update(empty)

    assert await repository.get_release_vendor_status() == [empty]


async def test_release_info_is_a_replaced_singleton(sqlite_engine: AsyncEngine) -> None:
    repository = SqlAlchemyReleaseInfoRepository(sqlite_engine, Vendor.ADOPTIUM)
    first = ReleaseInfo(tip_version=22, available_releases=(8, 11, 17, 21))
    second = ReleaseInfo(tip_version=23, most_recent_lts=21)

    assert await repository.get_release_info() is None

    await repository.set_release_info(first)
    await repository.set_release_info(second)

    assert await repository.get_release_info() == second
    assert await _count(sqlite_engine, release_info_table) == 1


async def test_release_info_replacement_leaves_other_vendors_alone(
    sqlite_engine: AsyncEngine,
) -> None:
    adoptium = SqlAlchemyReleaseInfoRepository(sqlite_engine, Vendor.ADOPTIUM)
    azul = SqlAlchemyReleaseInfoRepository(sqlite_engine, Vendor.AZUL)
    azul_info = ReleaseInfo(tip_version=21)
    await azul.set_release_info(azul_info)

    for tip in (22, 23, 24):
        await adoptium.set_release_info(ReleaseInfo(tip_version=tip))

    assert await adoptium.get_release_info() == ReleaseInfo(tip_version=24)
    assert await azul.get_release_info() == azul_info
    assert await _count(sqlite_engine, release_info_table) == 2
