"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections import defaultdict
from logging import getLogger
from typing import TYPE_CHECKING

from marketplace_store.adapters.snapshot import load_snapshot
from marketplace_store.adapters.sqlalchemy import (
    SqlAlchemyVendorPersistenceFactory,
    shutdown,
    startup,
)

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import datetime
    from pathlib import Path

    from marketplace_store.domain.model import (
        ReleaseList,
        ReleaseUpdateInfo,
        UpdatedInfo,
        Vendor,
    )
    from marketplace_store.domain.ports import VendorPersistenceFactory


log = getLogger(__name__)


class ReleaseUpdateService:
    """Run reconciliation passes, one at a time per vendor.

    Passes for the same vendor are serialised with a lock held for the whole
    pass; different vendors proceed concurrently.
    """

    def __init__(self, persistence_factory: VendorPersistenceFactory) -> None:
        self.persistence_factory = persistence_factory
        self._locks: defaultdict[Vendor, asyncio.Lock] = defaultdict(asyncio.Lock)

    async def update_vendor(self, vendor: Vendor, releases: ReleaseList) -> ReleaseUpdateInfo:
        persistence = self.persistence_factory.for_vendor(vendor)
        async with self._locks[vendor]:
            return await persistence.write_releases(releases)

    async def update_vendors(
        self,
        releases: ReleaseList,
        vendors: Iterable[Vendor] | None = None,
    ) -> dict[Vendor, ReleaseUpdateInfo]:
        targets = tuple(vendors) if vendors is not None else releases.vendors()
        results = await asyncio.gather(
            *(self.update_vendor(vendor, releases) for vendor in targets)
        )
        return dict(zip(targets, results, strict=True))


async def sync_snapshot(
    snapshot_path: Path,
    *,
    vendors: Iterable[Vendor] | None = None,
    database_uri: str | None = None,
) -> dict[Vendor, ReleaseUpdateInfo]:
    """Reconcile a snapshot file against the configured store."""

    releases = load_snapshot(snapshot_path)
    engine = await startup(database_uri=database_uri, force=True)
    try:
        service = ReleaseUpdateService(SqlAlchemyVendorPersistenceFactory(engine))
        log.info("Starting snapshot sync from %s", snapshot_path)
        results = await service.update_vendors(releases, vendors)
    finally:
        await shutdown()

    for vendor, update in results.items():
        log.info(
            f"Finished {vendor} sync: added={len(update.added)}, "
            f"updated={len(update.updated)}, removed={len(update.removed)}"
        )
    return results


async def vendor_status(
    vendor: Vendor, *, database_uri: str | None = None
) -> list[ReleaseUpdateInfo]:
    engine = await startup(database_uri=database_uri, force=True)
    try:
        persistence = SqlAlchemyVendorPersistenceFactory(engine).for_vendor(vendor)
        return await persistence.get_release_vendor_status()
    finally:
        await shutdown()


async def updated_since(
    vendor: Vendor, since: datetime, *, database_uri: str | None = None
) -> UpdatedInfo | None:
    engine = await startup(database_uri=database_uri, force=True)
    try:
        persistence = SqlAlchemyVendorPersistenceFactory(engine).for_vendor(vendor)
        return await persistence.get_updated_info_if_updated_since(since)
    finally:
        await shutdown()
