"""Decide whether to re-fuse and commit the merged dataset.

A run moves through ``idle -> fetching -> deciding_fusion -> fusing`` and ends
in ``committed``, ``reused`` (fingerprints unchanged, nothing rewritten) or
``failed`` (the merged dataset could not be written; the previous one stays).

The stale flags in the stored provenance describe the sources at commit time.
A reused dataset is returned with the stale flags of the current run; the file
itself is not rewritten.
"""

from __future__ import annotations

import asyncio
import threading
from dataclasses import dataclass, field, replace
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from benchfuse.domain.errors import FusionWriteError
from benchfuse.domain.model import MergedDataset, MergedProvenance

from .combining import combine_all
from .matching import RecordMatcher
from .validity import utc_now

if TYPE_CHECKING:
    from benchfuse.domain.ports import MergedStore

    from .matching import MatchReport
    from .refresh import SourceRefresher, SourceRefreshOutcome
    from .validity import Clock

log = getLogger(__name__)


class FusionState(StrEnum):
    IDLE = "idle"
    FETCHING = "fetching"
    DECIDING_FUSION = "deciding_fusion"
    FUSING = "fusing"
    COMMITTED = "committed"
    REUSED = "reused"
    FAILED = "failed"


_LOCKS: dict[str, threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def _fusion_lock(key: str) -> threading.Lock:
    """Return the process-wide lock serialising fusions of one dataset directory.

    A thread lock rather than an ``asyncio.Lock``: callers on different threads
    each run their own event loop.
    """

    with _LOCKS_GUARD:
        return _LOCKS.setdefault(key, threading.Lock())


@dataclass(frozen=True, slots=True)
class FusionOutcome:
    state: FusionState
    primary: SourceRefreshOutcome
    secondary: SourceRefreshOutcome
    dataset: MergedDataset | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.state in {FusionState.COMMITTED, FusionState.REUSED}

    @property
    def warnings(self) -> tuple[str, ...]:
        return tuple(
            f"{outcome.role} data is stale: {outcome.error}"
            for outcome in (self.primary, self.secondary)
            if outcome.stale
        )


@dataclass(slots=True)
class MergeOrchestrator:
    """Refresh both sources concurrently and fuse only when their contents changed."""

    primary: SourceRefresher
    secondary: SourceRefresher
    merged_store: MergedStore
    lock_key: str
    matcher: RecordMatcher = field(default_factory=RecordMatcher)
    clock: Clock = field(default=utc_now)
    state: FusionState = FusionState.IDLE
    history: list[FusionState] = field(default_factory=list[FusionState])

    async def run(self, *, force: bool = False) -> FusionOutcome:
        lock = _fusion_lock(self.lock_key)
        # blocking acquire, off the event loop
        await asyncio.to_thread(lock.acquire)
        try:
            self.history.clear()
            self._enter(FusionState.IDLE)
            return await self._run(force=force)
        finally:
            lock.release()

    async def _run(self, *, force: bool) -> FusionOutcome:
        self._enter(FusionState.FETCHING)
        primary, secondary = await asyncio.gather(
            self.primary.refresh(force=force),
            self.secondary.refresh(force=force),
        )

        self._enter(FusionState.DECIDING_FUSION)
        if primary.snapshot is None:
            return self._finish(
                FusionState.FAILED,
                primary,
                secondary,
                error="no primary snapshot is available to fuse",
            )

        existing = self.merged_store.load_provenance()
        if existing is not None and existing.produced_by(
            primary_fingerprint=primary.fingerprint,
            secondary_fingerprint=secondary.fingerprint,
        ):
            stored = self.merged_store.load()
            if stored is not None:
                log.info("Source fingerprints unchanged; reusing merged dataset")
                dataset = replace(
                    stored,
                    provenance=replace(
                        stored.provenance,
                        primary_stale=primary.stale,
                        secondary_stale=secondary.stale,
                    ),
                )
                return self._finish(FusionState.REUSED, primary, secondary, dataset=dataset)

        self._enter(FusionState.FUSING)
        report = self.matcher.match(
            primary.snapshot.records,
            secondary.snapshot.records if secondary.snapshot is not None else (),
        )
        dataset = MergedDataset(
            entities=combine_all(report.results),
            provenance=self._provenance(primary, secondary, report),
        )
        try:
            self.merged_store.save(dataset)
        except FusionWriteError as exc:
            log.warning("Merged dataset commit failed; previous dataset kept: %s", exc)
            return self._finish(FusionState.FAILED, primary, secondary, error=str(exc))

        log.info(
            "Committed %d merged models (%d exact, %d fuzzy, %d unmatched)",
            len(dataset),
            report.exact,
            report.fuzzy,
            report.unmatched,
        )
        return self._finish(FusionState.COMMITTED, primary, secondary, dataset=dataset)

    def _provenance(
        self,
        primary: SourceRefreshOutcome,
        secondary: SourceRefreshOutcome,
        report: MatchReport,
    ) -> MergedProvenance:
        return MergedProvenance(
            fused_at=self.clock(),
            primary_fingerprint=primary.fingerprint,
            secondary_fingerprint=secondary.fingerprint,
            primary_stale=primary.stale,
            secondary_stale=secondary.stale,
            exact_matches=report.exact,
            fuzzy_matches=report.fuzzy,
            unmatched=report.unmatched,
            ambiguous_keys=len(report.ambiguities),
            ambiguous_fuzzy=report.ambiguous_fuzzy,
        )

    def _enter(self, state: FusionState) -> None:
        log.debug("Fusion state %s -> %s", self.state, state)
        self.state = state
        self.history.append(state)

    def _finish(
        self,
        state: FusionState,
        primary: SourceRefreshOutcome,
        secondary: SourceRefreshOutcome,
        *,
        dataset: MergedDataset | None = None,
        error: str | None = None,
    ) -> FusionOutcome:
        self._enter(state)
        if error is not None and state is FusionState.FAILED:
            log.warning("Fusion failed: %s", error)
        return FusionOutcome(
            state=state,
            primary=primary,
            secondary=secondary,
            dataset=dataset,
            error=error,
        )


__all__ = ["FusionOutcome", "FusionState", "MergeOrchestrator"]
