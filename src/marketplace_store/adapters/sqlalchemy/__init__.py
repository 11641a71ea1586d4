"""SQLAlchemy adapter package for the marketplace store."""

from __future__ import annotations

from .mappings import UTCDateTime, create_all_tables, metadata
from .persistence import (
    SqlAlchemyVendorPersistence,
    SqlAlchemyVendorPersistenceFactory,
    StartupError,
    configured_engine,
    create_engine_for_uri,
    is_started,
    shutdown,
    startup,
)
from .repositories import (
    SqlAlchemyReleaseInfoRepository,
    SqlAlchemyReleaseRepository,
    SqlAlchemyUpdateLogRepository,
    SqlAlchemyUpdateTimeRepository,
)

__all__ = [
    "SqlAlchemyReleaseInfoRepository",
    "SqlAlchemyReleaseRepository",
    "SqlAlchemyUpdateLogRepository",
    "SqlAlchemyUpdateTimeRepository",
    "SqlAlchemyVendorPersistence",
    "SqlAlchemyVendorPersistenceFactory",
    "StartupError",
    "UTCDateTime",
    "configured_engine",
    "create_all_tables",
    "create_engine_for_uri",
    "is_started",
    "metadata",
    "shutdown",
    "startup",
]
