from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

from benchfuse.domain.errors import FetchError, SnapshotWriteError
from benchfuse.domain.fusion import ExplicitRefreshPolicy, MaxAgePolicy, SourceRefresher
from benchfuse.domain.model import RawRecord, Snapshot, SourceRole
from benchfuse.domain.ports import FetchedBatch

if TYPE_CHECKING:
    from benchfuse.domain.fusion import SourceRefreshOutcome, ValidityPolicy

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)
RECORDS = (RawRecord("openai", "gpt-4o", {"tool_call": True}),)


class InMemorySnapshotStore:
    def __init__(self, snapshot: Snapshot | None = None, *, fail_writes: bool = False) -> None:
        self.snapshot = snapshot
        self.fail_writes = fail_writes
        self.saves = 0

    def load(self) -> Snapshot | None:
        return self.snapshot

    def save(self, snapshot: Snapshot) -> None:
        if self.fail_writes:
            raise SnapshotWriteError("disk full")
        self.saves += 1
        self.snapshot = snapshot


class ScriptedAdapter:
    name = "scripted"
    role = SourceRole.SECONDARY

    def __init__(self, outcome: FetchedBatch | Exception) -> None:
        self.outcome = outcome
        self.calls = 0

    async def fetch(self) -> FetchedBatch:
        self.calls += 1
        if isinstance(self.outcome, Exception):
            raise self.outcome
        return self.outcome


def _refresh(
    adapter: ScriptedAdapter,
    store: InMemorySnapshotStore,
    policy: ValidityPolicy,
    *,
    force: bool = False,
) -> SourceRefreshOutcome:
    refresher = SourceRefresher(
        role=SourceRole.SECONDARY,
        adapter=adapter,
        store=store,
        policy=policy,
        clock=lambda: NOW,
    )
    return asyncio.run(refresher.refresh(force=force))


def _stored(age: timedelta) -> Snapshot:
    return Snapshot.create(
        SourceRole.SECONDARY,
        (RawRecord("openai", "gpt-4o", {"tool_call": False}),),
        fetched_at=NOW - age,
    )


def test_fresh_snapshot_is_reused_without_fetching() -> None:
    stored = _stored(timedelta(hours=1))
    adapter = ScriptedAdapter(FetchedBatch(RECORDS))

    outcome = _refresh(adapter, InMemorySnapshotStore(stored), MaxAgePolicy(timedelta(hours=24)))

    assert adapter.calls == 0
    assert outcome.snapshot is stored
    assert not outcome.refreshed
    assert not outcome.stale


def test_expired_snapshot_is_refetched_and_stored() -> None:
    store = InMemorySnapshotStore(_stored(timedelta(hours=30)))
    adapter = ScriptedAdapter(FetchedBatch(RECORDS, dropped=2))

    outcome = _refresh(adapter, store, MaxAgePolicy(timedelta(hours=24)))

    assert adapter.calls == 1
    assert outcome.refreshed
    assert outcome.snapshot is store.snapshot
    assert outcome.snapshot is not None
    assert outcome.snapshot.records == RECORDS
    assert outcome.snapshot.fetched_at == NOW
    assert outcome.snapshot.dropped_records == 2


def test_fetch_failure_falls_back_to_stored_snapshot() -> None:
    stored = _stored(timedelta(hours=30))
    adapter = ScriptedAdapter(FetchError("models_dev", "HTTP 503"))

    outcome = _refresh(adapter, InMemorySnapshotStore(stored), MaxAgePolicy(timedelta(hours=24)))

    assert outcome.snapshot is stored
    assert outcome.stale
    assert outcome.error is not None
    assert "HTTP 503" in outcome.error


def test_fetch_failure_without_snapshot_yields_none() -> None:
    adapter = ScriptedAdapter(FetchError("models_dev", "timeout"))

    outcome = _refresh(adapter, InMemorySnapshotStore(), MaxAgePolicy(timedelta(hours=24)))

    assert outcome.snapshot is None
    assert outcome.fingerprint is None
    assert outcome.stale


def test_snapshot_write_failure_is_handled_like_fetch_failure() -> None:
    stored = _stored(timedelta(days=2))
    store = InMemorySnapshotStore(stored, fail_writes=True)

    adapter = ScriptedAdapter(FetchedBatch(RECORDS))

    outcome = _refresh(adapter, store, ExplicitRefreshPolicy(), force=True)

    assert outcome.snapshot is stored
    assert outcome.stale
    assert outcome.error is not None
    assert "snapshot write failed" in outcome.error


def test_force_refetches_under_explicit_policy() -> None:
    adapter = ScriptedAdapter(FetchedBatch(RECORDS))
    store = InMemorySnapshotStore(_stored(timedelta(minutes=5)))

    outcome = _refresh(adapter, store, ExplicitRefreshPolicy(), force=True)

    assert adapter.calls == 1
    assert store.saves == 1
    assert outcome.refreshed
