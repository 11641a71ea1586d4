"""Pydantic models describing release snapshots and stored documents."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from marketplace_store.domain.model import Vendor
from marketplace_store.domain.time_source import ensure_utc


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


def _optional_utc(value: datetime | None) -> datetime | None:
    return None if value is None else ensure_utc(value)


class MarketplaceBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class VersionDataPayload(MarketplaceBaseModel):
    openjdk_version: str
    major: int
    minor: int | None = None
    security: int | None = None
    patch: int | None = None
    build: int | None = None
    pre: str | None = None
    optional: str | None = None


class ReleasePayload(MarketplaceBaseModel):
    vendor: Vendor
    release_name: str
    release_link: str
    version_data: VersionDataPayload
    release_date: datetime | None = None
    vendor_public_key_link: str | None = None

    @field_validator("release_date")
    @classmethod
    def _release_date_in_utc(cls, value: datetime | None) -> datetime | None:
        return _optional_utc(value)


class ReleaseListPayload(MarketplaceBaseModel):
    releases: list[ReleasePayload] = Field(default_factory=list)


# Incoming snapshots only. Stored documents must round-trip exactly, so blank
# labels are cleaned up here and never when reading documents back.


class SnapshotVersionDataPayload(VersionDataPayload):
    _normalize_labels = field_validator("pre", "optional", mode="before")(_blank_to_none)


class SnapshotReleasePayload(ReleasePayload):
    version_data: SnapshotVersionDataPayload

    _normalize_key_link = field_validator("vendor_public_key_link", mode="before")(
        _blank_to_none
    )


class SnapshotPayload(ReleaseListPayload):
    releases: list[SnapshotReleasePayload] = Field(default_factory=list)


class ReleaseUpdateInfoPayload(MarketplaceBaseModel):
    added: ReleaseListPayload = Field(default_factory=ReleaseListPayload)
    updated: ReleaseListPayload = Field(default_factory=ReleaseListPayload)
    removed: ReleaseListPayload = Field(default_factory=ReleaseListPayload)
    timestamp: datetime

    @field_validator("timestamp")
    @classmethod
    def _timestamp_in_utc(cls, value: datetime) -> datetime:
        return ensure_utc(value)


class ReleaseInfoPayload(MarketplaceBaseModel):
    tip_version: int
    available_releases: list[int] = Field(default_factory=list)
    available_lts_releases: list[int] = Field(default_factory=list)
    most_recent_lts: int | None = None
    most_recent_feature_release: int | None = None
    most_recent_feature_version: int | None = None
