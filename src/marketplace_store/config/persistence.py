"""Settings governing how vendor release data is kept."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from typing import Final

from .errors import ConfigurationError

DEFAULT_RETENTION_DAYS: Final[int] = 30
_TRUTHY: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})
_FALSY: Final[frozenset[str]] = frozenset({"0", "false", "no", "off", ""})


@dataclass(frozen=True, slots=True)
class PersistenceConfig:
    """Retention of the audit log and start-up seeding of the freshness marker."""

    update_log_retention: timedelta = timedelta(days=DEFAULT_RETENTION_DAYS)
    seed_update_time: bool = False


def _parse_retention_days(raw: str) -> timedelta:
    try:
        days = int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid retention days: {raw!r}") from exc
    if days <= 0:
        raise ConfigurationError(f"Retention days must be positive, got {days}")
    return timedelta(days=days)


def _parse_flag(name: str, raw: str) -> bool:
    normalized = raw.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ConfigurationError(f"Invalid boolean for {name}: {raw!r}")


def get_persistence_config() -> PersistenceConfig:
    retention_raw = os.getenv("MARKETPLACE_UPDATE_LOG_RETENTION_DAYS")
    seed_raw = os.getenv("MARKETPLACE_SEED_UPDATE_TIME")
    return PersistenceConfig(
        update_log_retention=(
            _parse_retention_days(retention_raw)
            if retention_raw
            else timedelta(days=DEFAULT_RETENTION_DAYS)
        ),
        seed_update_time=(
            _parse_flag("MARKETPLACE_SEED_UPDATE_TIME", seed_raw) if seed_raw else False
        ),
    )
