"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING

from benchfuse.adapters.artificial_analysis import ArtificialAnalysisAdapter
from benchfuse.adapters.models_dev import ModelsDevAdapter
from benchfuse.adapters.parquet import ParquetMergedStore, ParquetSnapshotStore
from benchfuse.adapters.parquet import cache_status as _cache_status
from benchfuse.adapters.parquet import clear_cache as _clear_cache
from benchfuse.config import get_fusion_config, get_storage_config
from benchfuse.domain.fusion import (
    ExplicitRefreshPolicy,
    MaxAgePolicy,
    MergeOrchestrator,
    RecordMatcher,
    SourceRefresher,
    utc_now,
)
from benchfuse.domain.model import SourceRole

if TYPE_CHECKING:
    from pathlib import Path

    import pyarrow as pa

    from benchfuse.adapters.parquet import CacheStatus
    from benchfuse.config import FusionConfig, StorageConfig
    from benchfuse.domain.fusion import Clock, FusionOutcome
    from benchfuse.domain.model import MergedDataset
    from benchfuse.domain.ports import SourceAdapter

log = getLogger(__name__)


def build_orchestrator(
    *,
    storage: StorageConfig | None = None,
    fusion: FusionConfig | None = None,
    primary: SourceAdapter | None = None,
    secondary: SourceAdapter | None = None,
    clock: Clock = utc_now,
) -> MergeOrchestrator:
    """Wire adapters, stores and policies for one cache directory."""

    effective_storage = storage or get_storage_config()
    effective_fusion = fusion or get_fusion_config()
    return MergeOrchestrator(
        primary=SourceRefresher(
            role=SourceRole.PRIMARY,
            adapter=primary or ArtificialAnalysisAdapter(),
            store=ParquetSnapshotStore(
                effective_storage.primary_snapshot_path(), SourceRole.PRIMARY
            ),
            policy=ExplicitRefreshPolicy(),
            clock=clock,
        ),
        secondary=SourceRefresher(
            role=SourceRole.SECONDARY,
            adapter=secondary or ModelsDevAdapter(),
            store=ParquetSnapshotStore(
                effective_storage.secondary_snapshot_path(), SourceRole.SECONDARY
            ),
            policy=MaxAgePolicy(effective_fusion.secondary_max_age),
            clock=clock,
        ),
        merged_store=ParquetMergedStore(effective_storage.merged_path()),
        lock_key=str(effective_storage.resolve_cache_dir()),
        matcher=RecordMatcher(provider_aliases=effective_fusion.provider_aliases),
        clock=clock,
    )


async def refresh_dataset_async(
    *,
    force: bool = False,
    orchestrator: MergeOrchestrator | None = None,
) -> FusionOutcome:
    effective = orchestrator or build_orchestrator()
    log.info("Starting refresh: force=%s", force)
    outcome = await effective.run(force=force)
    for warning in outcome.warnings:
        log.warning(warning)
    log.info(
        "Finished refresh: state=%s, models=%s",
        outcome.state,
        len(outcome.dataset) if outcome.dataset is not None else "-",
    )
    return outcome


def refresh_dataset(
    *,
    force: bool = False,
    orchestrator: MergeOrchestrator | None = None,
) -> FusionOutcome:
    """Refresh sources per their validity policies and re-fuse when contents changed."""

    return asyncio.run(refresh_dataset_async(force=force, orchestrator=orchestrator))


def cache_status(storage: StorageConfig | None = None) -> CacheStatus:
    return _cache_status(storage or get_storage_config())


def clear_cache(storage: StorageConfig | None = None) -> list[Path]:
    return _clear_cache(storage or get_storage_config())


def load_merged(storage: StorageConfig | None = None) -> MergedDataset | None:
    """Return the committed merged dataset, or ``None`` when there is none yet."""

    effective = storage or get_storage_config()
    return ParquetMergedStore(effective.merged_path(ensure=False)).load()


def read_merged_table(storage: StorageConfig | None = None) -> pa.Table | None:
    """Return the merged Arrow table as read by the query layer.

    Raises ``CacheCorruptionError`` when the file exists but cannot be parsed.
    """

    effective = storage or get_storage_config()
    loaded = ParquetMergedStore(effective.merged_path(ensure=False)).read_table()
    return None if loaded is None else loaded[0]
