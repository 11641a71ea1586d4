"""Where the release store lives on disk."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final

APP_DIR_NAME: Final[str] = "marketplace-store"
DEFAULT_DB_FILENAME: Final[str] = "marketplace.db"
SQLITE_DRIVER: Final[str] = "sqlite+aiosqlite"


@dataclass(frozen=True, slots=True)
class StorageConfig:
    data_dir: Path
    database_filename: str = DEFAULT_DB_FILENAME

    def database_file(self, *, create_dir: bool = True) -> Path:
        directory = self.data_dir.expanduser().resolve()
        if create_dir:
            directory.mkdir(parents=True, exist_ok=True)
        return directory / self.database_filename

    def database_uri(self) -> str:
        return f"{SQLITE_DRIVER}:///{self.database_file()}"


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    uri: str


def _platform_data_home() -> Path:
    # LOCALAPPDATA on Windows, XDG_DATA_HOME elsewhere
    if os.name == "nt":
        override, fallback = "LOCALAPPDATA", Path.home() / "AppData" / "Local"
    else:
        override, fallback = "XDG_DATA_HOME", Path.home() / ".local" / "share"
    value = os.getenv(override)
    return Path(value) if value else fallback


def get_storage_config() -> StorageConfig:
    configured = os.getenv("MARKETPLACE_DATA_DIR")
    if configured:
        return StorageConfig(data_dir=Path(configured))
    return StorageConfig(data_dir=_platform_data_home() / APP_DIR_NAME)


def get_database_config(*, storage: StorageConfig | None = None) -> DatabaseConfig:
    """Resolve the database URI, preferring ``DATABASE_URI`` over the data directory."""
    uri = os.getenv("DATABASE_URI")
    if not uri:
        uri = (storage or get_storage_config()).database_uri()
    return DatabaseConfig(uri=uri)
