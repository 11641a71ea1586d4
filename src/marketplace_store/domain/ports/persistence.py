"""Ports for persisting vendor release data."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datetime import datetime

    from marketplace_store.domain.model import (
        Release,
        ReleaseInfo,
        ReleaseList,
        ReleaseUpdateInfo,
        UpdatedInfo,
        UpsertOutcome,
        Vendor,
    )
    from marketplace_store.domain.reconciliation.identity import ReleaseMatcher


@runtime_checkable
class ReleaseRepository(Protocol):
    """Document partition holding one entry per release of a vendor."""

    async def upsert(self, matcher: ReleaseMatcher, release: Release) -> UpsertOutcome: ...

    async def find_all(self) -> ReleaseList: ...

    async def delete_matching(self, matcher: ReleaseMatcher) -> int: ...


@runtime_checkable
class UpdateTimeRepository(Protocol):
    """Freshness marker partition (a single logical row)."""

    async def update_updated_time(self, time: datetime) -> None: ...

    async def get_updated_info_if_updated_since(self, since: datetime) -> UpdatedInfo | None: ...


@runtime_checkable
class UpdateLogRepository(Protocol):
    """Append-only audit log of reconciliation diffs."""

    async def log_update(self, update_info: ReleaseUpdateInfo) -> None: ...

    async def get_release_vendor_status(self) -> list[ReleaseUpdateInfo]: ...


@runtime_checkable
class ReleaseInfoRepository(Protocol):
    """Singleton tip-version descriptor partition."""

    async def set_release_info(self, release_info: ReleaseInfo) -> None: ...

    async def get_release_info(self) -> ReleaseInfo | None: ...


@runtime_checkable
class VendorPersistence(Protocol):
    """Everything the fetch job and the read layer need for one vendor."""

    @property
    def vendor(self) -> Vendor: ...

    async def write_releases(self, releases: ReleaseList) -> ReleaseUpdateInfo: ...

    async def set_release_info(self, release_info: ReleaseInfo) -> None: ...

    async def get_updated_info_if_updated_since(self, since: datetime) -> UpdatedInfo | None: ...

    async def get_release_vendor_status(self) -> list[ReleaseUpdateInfo]: ...

    async def get_release_info(self) -> ReleaseInfo | None: ...

    async def get_all_releases(self) -> ReleaseList: ...


@runtime_checkable
class VendorPersistenceFactory(Protocol):
    def for_vendor(self, vendor: Vendor) -> VendorPersistence: ...
