"""Release records and the documents derived from reconciling them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from datetime import datetime

    from .enums import Vendor
    from .version import VersionData


@dataclass(frozen=True, slots=True, kw_only=True)
class Release:
    """A single published release artifact of a vendor."""

    vendor: Vendor
    release_name: str
    release_link: str
    version_data: VersionData
    release_date: datetime | None = None
    vendor_public_key_link: str | None = None

    def is_same_release(self, other: Release) -> bool:
        """Full identity check used to decide whether a stored release is stale."""

        return (
            self.vendor == other.vendor
            and self.release_name == other.release_name
            and self.release_link == other.release_link
            and self.version_data.compare_to(other.version_data) == 0
        )


@dataclass(frozen=True, slots=True)
class ReleaseList:
    """Ordered collection of releases, possibly spanning several vendors."""

    releases: tuple[Release, ...] = ()

    @classmethod
    def of(cls, releases: Iterable[Release]) -> ReleaseList:
        return cls(tuple(releases))

    def __iter__(self) -> Iterator[Release]:
        return iter(self.releases)

    def __len__(self) -> int:
        return len(self.releases)

    def __bool__(self) -> bool:
        return bool(self.releases)

    def for_vendor(self, vendor: Vendor) -> ReleaseList:
        return ReleaseList(tuple(release for release in self.releases if release.vendor == vendor))

    def vendors(self) -> tuple[Vendor, ...]:
        seen: dict[Vendor, None] = {}
        for release in self.releases:
            seen.setdefault(release.vendor, None)
        return tuple(seen)


@dataclass(frozen=True, slots=True, kw_only=True)
class ReleaseUpdateInfo:
    """Diff produced by one reconciliation pass. Never mutated once written."""

    added: ReleaseList = field(default_factory=ReleaseList)
    updated: ReleaseList = field(default_factory=ReleaseList)
    removed: ReleaseList = field(default_factory=ReleaseList)
    timestamp: datetime

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.updated or self.removed)


@dataclass(frozen=True, slots=True)
class UpdatedInfo:
    """Freshness marker: the vendor's data last changed at ``time``."""

    time: datetime


@dataclass(frozen=True, slots=True, kw_only=True)
class ReleaseInfo:
    """Vendor-scoped descriptor of the currently available versions."""

    tip_version: int
    available_releases: tuple[int, ...] = ()
    available_lts_releases: tuple[int, ...] = ()
    most_recent_lts: int | None = None
    most_recent_feature_release: int | None = None
    most_recent_feature_version: int | None = None
