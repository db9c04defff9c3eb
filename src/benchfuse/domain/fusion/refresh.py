"""Refresh one source snapshot, falling back to the stored one on failure."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from benchfuse.domain.errors import FetchError, SnapshotWriteError
from benchfuse.domain.model import Snapshot

from .validity import utc_now

if TYPE_CHECKING:
    from benchfuse.domain.model import SourceRole
    from benchfuse.domain.ports import SnapshotStore, SourceAdapter

    from .validity import Clock, ValidityPolicy

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SourceRefreshOutcome:
    """The snapshot to fuse with, and whether it could not be refreshed.

    ``stale`` is the side-channel warning flag: the refresh was attempted and
    failed, so ``snapshot`` is the previously stored one (or ``None``).
    """

    role: SourceRole
    snapshot: Snapshot | None
    refreshed: bool = False
    stale: bool = False
    error: str | None = None

    @property
    def fingerprint(self) -> str | None:
        return self.snapshot.fingerprint if self.snapshot is not None else None


@dataclass(slots=True)
class SourceRefresher:
    """Apply a validity policy to one source and keep its snapshot store current."""

    role: SourceRole
    adapter: SourceAdapter
    store: SnapshotStore
    policy: ValidityPolicy
    clock: Clock = field(default=utc_now)

    async def refresh(self, *, force: bool = False) -> SourceRefreshOutcome:
        current = self.store.load()
        now = self.clock()
        if not self.policy.needs_refresh(current, now=now, force=force):
            log.info(
                "Reusing %s snapshot from %s",
                self.role,
                current.fetched_at if current else "-",
            )
            return SourceRefreshOutcome(role=self.role, snapshot=current)

        try:
            batch = await self.adapter.fetch()
        except FetchError as exc:
            return self._fallback(current, f"fetch failed: {exc}")

        snapshot = Snapshot.create(
            self.role,
            batch.records,
            fetched_at=now,
            dropped_records=batch.dropped,
        )
        if batch.dropped:
            log.warning("Dropped %d invalid %s records", batch.dropped, self.role)
        try:
            self.store.save(snapshot)
        except SnapshotWriteError as exc:
            return self._fallback(current, f"snapshot write failed: {exc}")

        log.info(
            "Stored %s snapshot with %d records (fingerprint %s)",
            self.role,
            len(snapshot),
            snapshot.fingerprint[:12],
        )
        return SourceRefreshOutcome(role=self.role, snapshot=snapshot, refreshed=True)

    def _fallback(self, current: Snapshot | None, reason: str) -> SourceRefreshOutcome:
        if current is None:
            log.warning("%s %s; no stored snapshot to fall back to", self.role, reason)
        else:
            log.warning(
                "%s %s; using snapshot from %s",
                self.role,
                reason,
                current.fetched_at.isoformat(),
            )
        return SourceRefreshOutcome(role=self.role, snapshot=current, stale=True, error=reason)


__all__ = ["SourceRefreshOutcome", "SourceRefresher"]
