"""Domain model for vendor release records."""

from __future__ import annotations

from .enums import UpsertOutcome, Vendor
from .release import Release, ReleaseInfo, ReleaseList, ReleaseUpdateInfo, UpdatedInfo
from .version import ORDERED_COMPONENTS, VersionData

__all__ = [
    "ORDERED_COMPONENTS",
    "Release",
    "ReleaseInfo",
    "ReleaseList",
    "ReleaseUpdateInfo",
    "UpdatedInfo",
    "UpsertOutcome",
    "Vendor",
    "VersionData",
]
