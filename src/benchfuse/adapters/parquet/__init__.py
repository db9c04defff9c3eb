"""Parquet persistence for raw snapshots and the merged dataset."""

from __future__ import annotations

from .columns import MERGED_SCHEMA, METADATA_KEY, snapshot_schema
from .maintenance import ArtifactStatus, CacheStatus, cache_status, clear_cache, human_size
from .merged_store import ParquetMergedStore
from .snapshot_store import ParquetSnapshotStore

__all__ = [
    "MERGED_SCHEMA",
    "METADATA_KEY",
    "ArtifactStatus",
    "CacheStatus",
    "ParquetMergedStore",
    "ParquetSnapshotStore",
    "cache_status",
    "clear_cache",
    "human_size",
    "snapshot_schema",
]
