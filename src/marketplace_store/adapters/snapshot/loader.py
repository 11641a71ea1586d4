"""Read release snapshots written by the fetch job."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .schema import SnapshotPayload
from .translator import parse_release_list

if TYPE_CHECKING:
    from pathlib import Path

    from marketplace_store.domain.model import ReleaseList

log = getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot cannot be read or does not match the schema."""


def parse_snapshot(raw: str | bytes) -> ReleaseList:
    try:
        payload = SnapshotPayload.model_validate_json(raw)
    except ValidationError as exc:
        raise SnapshotError(f"Invalid release snapshot: {exc}") from exc
    return parse_release_list(payload)


def load_snapshot(path: Path) -> ReleaseList:
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise SnapshotError(f"Cannot read release snapshot {path}: {exc}") from exc
    releases = parse_snapshot(raw)
    log.info("Loaded %s releases from %s", len(releases), path)
    return releases
