"""Domain port definitions for adapters."""

from __future__ import annotations

from .persistence import (
    ReleaseInfoRepository,
    ReleaseRepository,
    UpdateLogRepository,
    UpdateTimeRepository,
    VendorPersistence,
    VendorPersistenceFactory,
)

__all__ = [
    "ReleaseInfoRepository",
    "ReleaseRepository",
    "UpdateLogRepository",
    "UpdateTimeRepository",
    "VendorPersistence",
    "VendorPersistenceFactory",
]
