"""Translate snapshot payloads and stored documents to and from domain objects."""

from __future__ import annotations

from typing import Any, TypeAlias

from marketplace_store.domain.model import (
    Release,
    ReleaseInfo,
    ReleaseList,
    ReleaseUpdateInfo,
    VersionData,
)

from .schema import (
    ReleaseInfoPayload,
    ReleaseListPayload,
    ReleasePayload,
    ReleaseUpdateInfoPayload,
    VersionDataPayload,
)

Document: TypeAlias = dict[str, Any]


def parse_release(payload: ReleasePayload) -> Release:
    version = payload.version_data
    return Release(
        vendor=payload.vendor,
        release_name=payload.release_name,
        release_link=payload.release_link,
        version_data=VersionData(
            openjdk_version=version.openjdk_version,
            major=version.major,
            minor=version.minor,
            security=version.security,
            patch=version.patch,
            build=version.build,
            pre=version.pre,
            optional=version.optional,
        ),
        release_date=payload.release_date,
        vendor_public_key_link=payload.vendor_public_key_link,
    )


def parse_release_list(payload: ReleaseListPayload) -> ReleaseList:
    return ReleaseList.of(parse_release(release) for release in payload.releases)


def release_payload(release: Release) -> ReleasePayload:
    version = release.version_data
    return ReleasePayload(
        vendor=release.vendor,
        release_name=release.release_name,
        release_link=release.release_link,
        version_data=VersionDataPayload(
            openjdk_version=version.openjdk_version,
            major=version.major,
            minor=version.minor,
            security=version.security,
            patch=version.patch,
            build=version.build,
            pre=version.pre,
            optional=version.optional,
        ),
        release_date=release.release_date,
        vendor_public_key_link=release.vendor_public_key_link,
    )


def release_list_payload(releases: ReleaseList) -> ReleaseListPayload:
    return ReleaseListPayload(releases=[release_payload(release) for release in releases])


# Stored documents drop absent fields so that "absent" and "set" stay distinct.


def release_to_document(release: Release) -> Document:
    return release_payload(release).model_dump(mode="json", exclude_none=True)


def release_from_document(document: Document) -> Release:
    return parse_release(ReleasePayload.model_validate(document))


def update_info_to_document(update: ReleaseUpdateInfo) -> Document:
    payload = ReleaseUpdateInfoPayload(
        added=release_list_payload(update.added),
        updated=release_list_payload(update.updated),
        removed=release_list_payload(update.removed),
        timestamp=update.timestamp,
    )
    return payload.model_dump(mode="json", exclude_none=True)


def update_info_from_document(document: Document) -> ReleaseUpdateInfo:
    payload = ReleaseUpdateInfoPayload.model_validate(document)
    return ReleaseUpdateInfo(
        added=parse_release_list(payload.added),
        updated=parse_release_list(payload.updated),
        removed=parse_release_list(payload.removed),
        timestamp=payload.timestamp,
    )


def release_info_to_document(release_info: ReleaseInfo) -> Document:
    payload = ReleaseInfoPayload(
        tip_version=release_info.tip_version,
        available_releases=list(release_info.available_releases),
        available_lts_releases=list(release_info.available_lts_releases),
        most_recent_lts=release_info.most_recent_lts,
        most_recent_feature_release=release_info.most_recent_feature_release,
        most_recent_feature_version=release_info.most_recent_feature_version,
    )
    return payload.model_dump(mode="json", exclude_none=True)


def release_info_from_document(document: Document) -> ReleaseInfo:
    payload = ReleaseInfoPayload.model_validate(document)
    return ReleaseInfo(
        tip_version=payload.tip_version,
        available_releases=tuple(payload.available_releases),
        available_lts_releases=tuple(payload.available_lts_releases),
        most_recent_lts=payload.most_recent_lts,
        most_recent_feature_release=payload.most_recent_feature_release,
        most_recent_feature_version=payload.most_recent_feature_version,
    )
