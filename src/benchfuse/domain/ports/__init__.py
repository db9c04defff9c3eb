"""Domain port definitions for adapters."""

from __future__ import annotations

from .fetching import FetchedBatch, SourceAdapter
from .persistence import MergedStore, SnapshotStore

__all__ = ["FetchedBatch", "MergedStore", "SnapshotStore", "SourceAdapter"]
