"""SQLAlchemy table metadata for the vendor release partitions.

Each logical partition is a table keyed by ``vendor``. The full document is
kept as JSON next to the columns that identity predicates query.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Final

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    Enum,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
)

from marketplace_store.domain.model import Vendor
from marketplace_store.domain.time_source import ensure_utc

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncConnection


class UTCDateTime(TypeDecorator[datetime]):
    """Store aware datetimes and read them back as UTC, whatever the dialect keeps."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        return None if value is None else ensure_utc(value)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        return None if value is None else ensure_utc(value)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

VendorColumnType = Enum(
    Vendor,
    native_enum=False,
    length=32,
    values_callable=lambda members: [member.value for member in members],
)

release_table = Table(
    "release",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("vendor", VendorColumnType, nullable=False),
    Column("release_name", String, nullable=False),
    Column("release_link", String, nullable=False),
    Column("openjdk_version", String, nullable=False),
    Column("major", Integer, nullable=False),
    Column("minor", Integer, nullable=True),
    Column("security", Integer, nullable=True),
    Column("patch", Integer, nullable=True),
    Column("build", Integer, nullable=True),
    Column("pre", String, nullable=True),
    Column("optional", String, nullable=True),
    Column("document", JSON, nullable=False),
    Index("ix_release_vendor_name", "vendor", "release_name"),
)

release_info_table = Table(
    "release_info",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("vendor", VendorColumnType, nullable=False, index=True),
    Column("tip_version", Integer, nullable=True),
    Column("document", JSON, nullable=False),
)

update_time_table = Table(
    "update_time",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("vendor", VendorColumnType, nullable=False, index=True),
    Column("time", UTCDateTime(), nullable=False),
)

update_log_table = Table(
    "update_log",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("vendor", VendorColumnType, nullable=False, index=True),
    Column("timestamp", UTCDateTime(), nullable=False),
    Column("document", JSON, nullable=False),
)

# Dotted document paths used by identity predicates, resolved to columns.
RELEASE_FIELD_COLUMNS: Final = {
    "vendor": release_table.c.vendor,
    "release_name": release_table.c.release_name,
    "release_link": release_table.c.release_link,
    "version_data.openjdk_version": release_table.c.openjdk_version,
    "version_data.major": release_table.c.major,
    "version_data.minor": release_table.c.minor,
    "version_data.security": release_table.c.security,
    "version_data.patch": release_table.c.patch,
    "version_data.build": release_table.c.build,
    "version_data.pre": release_table.c.pre,
    "version_data.optional": release_table.c.optional,
}


async def create_all_tables(connection: AsyncConnection) -> None:
    await connection.run_sync(metadata.create_all)


__all__ = [
    "RELEASE_FIELD_COLUMNS",
    "UTCDateTime",
    "create_all_tables",
    "metadata",
    "release_info_table",
    "release_table",
    "update_log_table",
    "update_time_table",
]
