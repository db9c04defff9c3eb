from __future__ import annotations

import asyncio
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta
from typing import TYPE_CHECKING, Any

import pytest

from benchfuse.adapters.parquet import ParquetMergedStore, merged_store
from benchfuse.app import build_orchestrator, refresh_dataset
from benchfuse.config import FusionConfig
from benchfuse.domain.errors import FetchError
from benchfuse.domain.fusion import FusionState, MergeOrchestrator, RecordMatcher
from benchfuse.domain.model import MatchConfidence, RawRecord, SourceRole, TriState

if TYPE_CHECKING:
    from benchfuse.config import StorageConfig
    from benchfuse.domain.fusion import FusionOutcome


def _aa(creator: str, slug: str, intelligence: float = 50.0) -> RawRecord:
    return RawRecord(
        provider_key=creator,
        model_key=slug,
        attributes={
            "id": f"aa-{slug}",
            "name": slug,
            "slug": slug,
            "creator": creator.title(),
            "creator_slug": creator,
            "intelligence": intelligence,
        },
    )


def _md(provider: str, model: str, **attributes: object) -> RawRecord:
    return RawRecord(
        provider_key=provider,
        model_key=model,
        attributes={"provider_id": provider, "model_id": model, **attributes},
    )


PRIMARY = (
    _aa("openai", "gpt-4o-mini-2024-07-18"),
    _aa("meta", "llama-3-70b"),
    _aa("nobody", "obscure-1"),
)
SECONDARY = (
    _md("openai", "gpt-4o-mini", tool_call=True, context_window=128000),
    _md("llama", "llama-3-70b", tool_call=False),
)


class ExplodingMatcher:
    def match(self, *_: object) -> None:
        raise AssertionError("matcher must not run on the cheap path")


class OverlapTrackingMatcher:
    """Slow matcher recording how many fusions are inside ``match`` at once."""

    def __init__(self, inner: RecordMatcher) -> None:
        self.inner = inner
        self.active = 0
        self.peak = 0
        self._guard = threading.Lock()

    def match(self, primary: Any, secondary: Any) -> Any:
        with self._guard:
            self.active += 1
            self.peak = max(self.peak, self.active)
        try:
            time.sleep(0.05)
            return self.inner.match(primary, secondary)
        finally:
            with self._guard:
                self.active -= 1


@pytest.fixture
def make_orchestrator(
    storage: StorageConfig,
    clock: Any,
    fake_adapter_class: Any,
) -> Any:
    def factory(
        primary: tuple[Any, ...] = (PRIMARY,),
        secondary: tuple[Any, ...] = (SECONDARY,),
    ) -> tuple[MergeOrchestrator, Any, Any]:
        primary_adapter = fake_adapter_class("artificial_analysis", SourceRole.PRIMARY, *primary)
        secondary_adapter = fake_adapter_class("models_dev", SourceRole.SECONDARY, *secondary)
        orchestrator = build_orchestrator(
            storage=storage,
            fusion=FusionConfig(provider_aliases={"meta": "llama"}),
            primary=primary_adapter,
            secondary=secondary_adapter,
            clock=clock,
        )
        return orchestrator, primary_adapter, secondary_adapter

    return factory


def _run(orchestrator: MergeOrchestrator, *, force: bool = False) -> FusionOutcome:
    return asyncio.run(orchestrator.run(force=force))


def _by_slug(outcome: FusionOutcome) -> dict[str, Any]:
    assert outcome.dataset is not None
    return {entity.slug: entity for entity in outcome.dataset.entities}


def test_first_run_commits_fused_dataset(make_orchestrator: Any, storage: StorageConfig) -> None:
    orchestrator, _, _ = make_orchestrator()

    outcome = _run(orchestrator)

    assert outcome.state is FusionState.COMMITTED
    assert orchestrator.history == [
        FusionState.IDLE,
        FusionState.FETCHING,
        FusionState.DECIDING_FUSION,
        FusionState.FUSING,
        FusionState.COMMITTED,
    ]
    entities = _by_slug(outcome)
    assert entities["gpt-4o-mini-2024-07-18"].match_confidence is MatchConfidence.FUZZY
    assert entities["gpt-4o-mini-2024-07-18"].tool_call is TriState.TRUE
    assert entities["llama-3-70b"].match_confidence is MatchConfidence.EXACT
    assert entities["llama-3-70b"].tool_call is TriState.FALSE
    assert entities["obscure-1"].match_confidence is MatchConfidence.UNMATCHED
    assert entities["obscure-1"].tool_call is TriState.UNKNOWN

    provenance = ParquetMergedStore(storage.merged_path()).load_provenance()
    assert provenance is not None
    assert (provenance.exact_matches, provenance.fuzzy_matches, provenance.unmatched) == (1, 1, 1)
    assert provenance.primary_fingerprint == outcome.primary.fingerprint
    assert provenance.secondary_fingerprint == outcome.secondary.fingerprint


def test_unchanged_fingerprints_reuse_merged_file(
    make_orchestrator: Any,
    storage: StorageConfig,
) -> None:
    orchestrator, primary_adapter, secondary_adapter = make_orchestrator()
    _run(orchestrator)
    merged_bytes = storage.merged_path().read_bytes()

    orchestrator.matcher = ExplodingMatcher()  # type: ignore[assignment]
    outcome = _run(orchestrator)

    assert outcome.state is FusionState.REUSED
    assert FusionState.FUSING not in orchestrator.history
    assert storage.merged_path().read_bytes() == merged_bytes
    assert primary_adapter.calls == 1
    assert secondary_adapter.calls == 1
    assert outcome.dataset is not None
    assert len(outcome.dataset) == len(PRIMARY)


def test_force_refetches_primary_but_not_fresh_secondary(make_orchestrator: Any) -> None:
    orchestrator, primary_adapter, secondary_adapter = make_orchestrator()
    _run(orchestrator)

    outcome = _run(orchestrator, force=True)

    assert primary_adapter.calls == 2
    assert secondary_adapter.calls == 1
    assert outcome.state is FusionState.REUSED


def test_secondary_refreshes_after_validity_window(make_orchestrator: Any, clock: Any) -> None:
    orchestrator, primary_adapter, secondary_adapter = make_orchestrator()
    _run(orchestrator)

    clock.now += timedelta(hours=25)
    _run(orchestrator)

    assert primary_adapter.calls == 1
    assert secondary_adapter.calls == 2


def test_primary_change_keeps_secondary_values(make_orchestrator: Any) -> None:
    changed = (*PRIMARY[:2], _aa("nobody", "obscure-1", intelligence=99.0))
    orchestrator, _, secondary_adapter = make_orchestrator(primary=(PRIMARY, changed))
    before = _by_slug(_run(orchestrator))

    outcome = _run(orchestrator, force=True)

    assert outcome.state is FusionState.COMMITTED
    after = _by_slug(outcome)
    assert secondary_adapter.calls == 1
    assert after["obscure-1"].intelligence == 99.0
    for slug in ("gpt-4o-mini-2024-07-18", "llama-3-70b"):
        assert after[slug].secondary_values() == before[slug].secondary_values()
        assert after[slug].match_confidence is before[slug].match_confidence


def test_failed_secondary_fetch_fuses_with_stale_snapshot(
    make_orchestrator: Any,
    clock: Any,
    storage: StorageConfig,
) -> None:
    changed = (*PRIMARY, _aa("openai", "gpt-5"))
    orchestrator, _, _ = make_orchestrator(
        primary=(PRIMARY, changed),
        secondary=(SECONDARY, FetchError("models_dev", "HTTP 503")),
    )
    _run(orchestrator)

    clock.now += timedelta(hours=25)
    outcome = _run(orchestrator, force=True)

    assert outcome.state is FusionState.COMMITTED
    assert outcome.secondary.stale
    assert outcome.warnings
    assert _by_slug(outcome)["gpt-4o-mini-2024-07-18"].tool_call is TriState.TRUE
    provenance = ParquetMergedStore(storage.merged_path()).load_provenance()
    assert provenance is not None
    assert provenance.secondary_stale
    assert not provenance.primary_stale


def test_failed_secondary_without_snapshot_leaves_everything_unknown(
    make_orchestrator: Any,
) -> None:
    orchestrator, _, _ = make_orchestrator(secondary=(FetchError("models_dev", "timeout"),))

    outcome = _run(orchestrator)

    assert outcome.state is FusionState.COMMITTED
    assert outcome.secondary.fingerprint is None
    for entity in _by_slug(outcome).values():
        assert entity.match_confidence is MatchConfidence.UNMATCHED
        assert entity.tool_call is TriState.UNKNOWN
        assert entity.context_window is None


def test_missing_primary_fails_without_touching_merged_store(
    make_orchestrator: Any,
    storage: StorageConfig,
) -> None:
    orchestrator, _, _ = make_orchestrator(primary=(FetchError("artificial_analysis", "401"),))

    outcome = _run(orchestrator)

    assert outcome.state is FusionState.FAILED
    assert not outcome.ok
    assert not storage.merged_path().exists()


def test_commit_failure_keeps_previous_merged_file(
    make_orchestrator: Any,
    storage: StorageConfig,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    changed = (*PRIMARY, _aa("openai", "gpt-5"))
    orchestrator, _, _ = make_orchestrator(primary=(PRIMARY, changed))
    _run(orchestrator)
    merged_bytes = storage.merged_path().read_bytes()

    def failing_write(*_: object) -> None:
        raise OSError("read-only file system")

    monkeypatch.setattr(merged_store, "write_table_atomic", failing_write)
    outcome = _run(orchestrator, force=True)

    assert outcome.state is FusionState.FAILED
    assert outcome.error is not None
    assert "read-only" in outcome.error
    assert storage.merged_path().read_bytes() == merged_bytes


def test_corrupt_merged_file_forces_refusion(
    make_orchestrator: Any,
    storage: StorageConfig,
) -> None:
    orchestrator, _, _ = make_orchestrator()
    _run(orchestrator)
    storage.merged_path().write_bytes(b"not a parquet file")

    outcome = _run(orchestrator)

    assert outcome.state is FusionState.COMMITTED
    assert ParquetMergedStore(storage.merged_path()).load() is not None


def test_concurrent_runs_are_serialised(make_orchestrator: Any) -> None:
    orchestrator, _, secondary_adapter = make_orchestrator()

    async def run_twice() -> list[FusionOutcome]:
        return list(await asyncio.gather(orchestrator.run(), orchestrator.run()))

    first, second = asyncio.run(run_twice())

    assert first.state is FusionState.COMMITTED
    assert second.state is FusionState.REUSED
    assert secondary_adapter.calls == 1


def test_runs_on_separate_threads_are_serialised(make_orchestrator: Any) -> None:
    first, _, _ = make_orchestrator()
    second, _, _ = make_orchestrator()
    matcher = OverlapTrackingMatcher(first.matcher)
    first.matcher = second.matcher = matcher  # type: ignore[assignment]
    barrier = threading.Barrier(2)

    def refresh(orchestrator: MergeOrchestrator) -> FusionState:
        barrier.wait()
        return refresh_dataset(orchestrator=orchestrator).state

    with ThreadPoolExecutor(max_workers=2) as executor:
        states = list(executor.map(refresh, [first, second]))

    assert matcher.peak == 1
    assert sorted(states) == [FusionState.COMMITTED, FusionState.REUSED]


def test_reused_dataset_reports_current_stale_flags(
    make_orchestrator: Any,
    clock: Any,
    storage: StorageConfig,
) -> None:
    orchestrator, _, secondary_adapter = make_orchestrator(
        secondary=(SECONDARY, FetchError("models_dev", "HTTP 503")),
    )
    _run(orchestrator)
    merged_bytes = storage.merged_path().read_bytes()

    clock.now += timedelta(hours=25)
    outcome = _run(orchestrator)

    assert outcome.state is FusionState.REUSED
    assert secondary_adapter.calls == 2
    assert outcome.secondary.stale
    assert outcome.dataset is not None
    assert outcome.dataset.provenance.secondary_stale
    assert not outcome.dataset.provenance.primary_stale
    assert storage.merged_path().read_bytes() == merged_bytes


def test_recovered_secondary_clears_stale_flag_on_reuse(
    make_orchestrator: Any,
    clock: Any,
) -> None:
    changed = (*PRIMARY, _aa("openai", "gpt-5"))
    orchestrator, _, _ = make_orchestrator(
        primary=(PRIMARY, changed),
        secondary=(SECONDARY, FetchError("models_dev", "HTTP 503"), SECONDARY),
    )
    _run(orchestrator)
    clock.now += timedelta(hours=25)
    stale = _run(orchestrator, force=True)
    assert stale.state is FusionState.COMMITTED
    assert stale.dataset is not None
    assert stale.dataset.provenance.secondary_stale

    clock.now += timedelta(hours=25)
    outcome = _run(orchestrator)

    assert outcome.state is FusionState.REUSED
    assert not outcome.secondary.stale
    assert outcome.dataset is not None
    assert not outcome.dataset.provenance.secondary_stale
