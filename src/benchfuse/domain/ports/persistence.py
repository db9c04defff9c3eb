"""Ports for persisting snapshots and the merged dataset."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from benchfuse.domain.model import MergedDataset, MergedProvenance, Snapshot


@runtime_checkable
class SnapshotStore(Protocol):
    """Persistence contract for the raw snapshot of one source."""

    def load(self) -> Snapshot | None:
        """Return the stored snapshot, or ``None`` when absent or unreadable."""
        ...

    def save(self, snapshot: Snapshot) -> None:
        """Replace the stored snapshot atomically; raise ``SnapshotWriteError`` on failure."""
        ...


@runtime_checkable
class MergedStore(Protocol):
    """Persistence contract for the fused dataset."""

    def load_provenance(self) -> MergedProvenance | None: ...

    def load(self) -> MergedDataset | None: ...

    def save(self, dataset: MergedDataset) -> None:
        """Replace the stored dataset atomically; raise ``FusionWriteError`` on failure."""
        ...


__all__ = ["MergedStore", "SnapshotStore"]
