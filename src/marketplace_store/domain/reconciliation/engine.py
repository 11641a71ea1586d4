"""Reconcile a full release snapshot against the stored record of a vendor.

The engine keeps no state between passes. Each pass upserts the incoming
releases, re-reads what is stored and derives the stale entries from that,
so a crashed or repeated pass converges on the same end state.
"""

from __future__ import annotations

from logging import Logger, getLogger
from typing import TYPE_CHECKING

from marketplace_store.domain.model import (
    Release,
    ReleaseList,
    ReleaseUpdateInfo,
    UpsertOutcome,
)
from marketplace_store.domain.time_source import utcnow

from .identity import ReleaseMatcher

if TYPE_CHECKING:
    from collections.abc import Iterable

    from marketplace_store.domain.model import Vendor
    from marketplace_store.domain.ports import (
        ReleaseRepository,
        UpdateLogRepository,
        UpdateTimeRepository,
    )
    from marketplace_store.domain.time_source import Clock


log = getLogger(__name__)


def find_removed(current: Iterable[Release], incoming: Iterable[Release]) -> list[Release]:
    """Return the stored releases that have no counterpart in ``incoming``."""

    candidates = tuple(incoming)
    return [
        stored
        for stored in current
        if not any(release.is_same_release(stored) for release in candidates)
    ]


class ReconciliationEngine:
    """Apply a snapshot for one vendor and record what changed."""

    def __init__(
        self,
        vendor: Vendor,
        *,
        releases: ReleaseRepository,
        update_time: UpdateTimeRepository,
        update_log: UpdateLogRepository,
        clock: Clock = utcnow,
        logger: Logger | None = None,
    ) -> None:
        self.vendor = vendor
        self._releases = releases
        self._update_time = update_time
        self._update_log = update_log
        self._clock = clock
        self._log = logger or log

    async def write_releases(self, releases: ReleaseList) -> ReleaseUpdateInfo:
        added, updated = await self._upsert_all(releases.for_vendor(self.vendor))

        current = await self._releases.find_all()
        removed = await self._remove_stale(find_removed(current, releases))

        now = self._clock()
        if added or updated or removed:
            await self._update_time.update_updated_time(now)

        result = ReleaseUpdateInfo(
            added=ReleaseList.of(added),
            updated=ReleaseList.of(updated),
            removed=ReleaseList.of(removed),
            timestamp=now,
        )
        await self._update_log.log_update(result)
        self._log.info(
            "Reconciled %s releases: added=%s, updated=%s, removed=%s",
            self.vendor,
            len(added),
            len(updated),
            len(removed),
        )
        return result

    async def _upsert_all(self, releases: ReleaseList) -> tuple[list[Release], list[Release]]:
        added: list[Release] = []
        updated: list[Release] = []
        for release in releases:
            outcome = await self._releases.upsert(ReleaseMatcher.for_release(release), release)
            if outcome is UpsertOutcome.INSERTED:
                added.append(release)
            elif outcome is UpsertOutcome.MODIFIED:
                updated.append(release)
        return added, updated

    async def _remove_stale(self, stale: list[Release]) -> list[Release]:
        for release in stale:
            self._log.info("Removing old release %s", release.release_name)
            deleted = await self._releases.delete_matching(ReleaseMatcher.for_release(release))
            if deleted != 1:
                # integrity mismatch: report it but keep going with the batch
                self._log.error(
                    "Failed to delete release %s: expected 1 deletion, got %s",
                    release.release_name,
                    deleted,
                )
        return stale


__all__ = ["ReconciliationEngine", "find_removed"]
