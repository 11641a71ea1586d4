"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .logging import configure_logging
from .persistence import DEFAULT_RETENTION_DAYS, PersistenceConfig, get_persistence_config
from .storage import DatabaseConfig, StorageConfig, get_database_config, get_storage_config

__all__ = [
    "DEFAULT_RETENTION_DAYS",
    "ConfigurationError",
    "DatabaseConfig",
    "PersistenceConfig",
    "StorageConfig",
    "configure_logging",
    "get_database_config",
    "get_persistence_config",
    "get_storage_config",
]
