"""Snapshot wire format: schema, translation and loading."""

from __future__ import annotations

from .loader import SnapshotError, load_snapshot, parse_snapshot
from .schema import (
    ReleaseInfoPayload,
    ReleaseListPayload,
    ReleasePayload,
    ReleaseUpdateInfoPayload,
    SnapshotPayload,
    VersionDataPayload,
)
from .translator import (
    parse_release,
    parse_release_list,
    release_from_document,
    release_info_from_document,
    release_info_to_document,
    release_list_payload,
    release_payload,
    release_to_document,
    update_info_from_document,
    update_info_to_document,
)

__all__ = [
    "ReleaseInfoPayload",
    "ReleaseListPayload",
    "ReleasePayload",
    "ReleaseUpdateInfoPayload",
    "SnapshotError",
    "SnapshotPayload",
    "VersionDataPayload",
    "load_snapshot",
    "parse_release",
    "parse_release_list",
    "parse_snapshot",
    "release_from_document",
    "release_info_from_document",
    "release_info_to_document",
    "release_list_payload",
    "release_payload",
    "release_to_document",
    "update_info_from_document",
    "update_info_to_document",
]
