"""Parquet-backed store for the fused dataset consumed by downstream queries."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING

import pyarrow as pa

from benchfuse.domain.errors import CacheCorruptionError, FusionWriteError
from benchfuse.domain.model import (
    SECONDARY_FLAG_FIELDS,
    SECONDARY_MODALITY_FIELDS,
    FieldSource,
    MatchConfidence,
    MergedDataset,
    MergedEntity,
    MergedProvenance,
    TriState,
)

from ._atomic import read_metadata, read_table, require_columns, write_table_atomic
from .columns import FORMAT_VERSION, MERGED_SCHEMA

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

_SOURCE_FIELDS = ("input_price_source", "output_price_source", "release_date_source")
_PROVENANCE_COUNTERS = (
    "exact_matches",
    "fuzzy_matches",
    "unmatched",
    "ambiguous_keys",
    "ambiguous_fuzzy",
)


@dataclass(frozen=True, slots=True)
class ParquetMergedStore:
    path: Path

    def load_provenance(self) -> MergedProvenance | None:
        """Read provenance from the file footer only; ``None`` when absent or corrupt."""

        try:
            metadata = read_metadata(self.path)
            return None if metadata is None else provenance_from_metadata(self.path, metadata)
        except CacheCorruptionError as exc:
            log.warning("Ignoring corrupt merged dataset: %s", exc)
            return None

    def load(self) -> MergedDataset | None:
        try:
            return self.read()
        except CacheCorruptionError as exc:
            log.warning("Ignoring corrupt merged dataset: %s", exc)
            return None

    def read(self) -> MergedDataset | None:
        loaded = self.read_table()
        if loaded is None:
            return None
        table, provenance = loaded
        entities = tuple(entity_from_row(row) for row in table.to_pylist())
        return MergedDataset(entities=entities, provenance=provenance)

    def read_table(self) -> tuple[pa.Table, MergedProvenance] | None:
        """Return the raw Arrow table (the query-layer contract) and its provenance."""

        loaded = read_table(self.path)
        if loaded is None:
            return None
        table, metadata = loaded
        provenance = provenance_from_metadata(self.path, metadata)
        return require_columns(self.path, table, MERGED_SCHEMA), provenance

    def save(self, dataset: MergedDataset) -> None:
        try:
            table = pa.Table.from_pylist(
                [entity_to_row(entity) for entity in dataset.entities],
                schema=MERGED_SCHEMA,
            )
            write_table_atomic(table, self.path, provenance_to_metadata(dataset.provenance))
        except (OSError, pa.ArrowException) as exc:
            raise FusionWriteError(f"{self.path}: {exc}") from exc


def entity_to_row(entity: MergedEntity) -> dict[str, object]:
    row: dict[str, object] = {}
    for entry in fields(entity):
        value = getattr(entity, entry.name)
        if isinstance(value, TriState):
            value = value.as_optional()
        elif isinstance(value, (MatchConfidence, FieldSource)):
            value = value.value
        elif isinstance(value, tuple):
            value = list(value)  # pyright: ignore[reportUnknownArgumentType]
        row[entry.name] = value
    row["models_dev_matched"] = entity.models_dev_matched
    return row


def entity_from_row(row: dict[str, object]) -> MergedEntity:
    values = {entry.name: row.get(entry.name) for entry in fields(MergedEntity)}
    for name in SECONDARY_FLAG_FIELDS:
        values[name] = TriState.from_optional(row.get(name))  # pyright: ignore[reportArgumentType]
    for name in SECONDARY_MODALITY_FIELDS:
        modalities = row.get(name)
        values[name] = tuple(modalities) if isinstance(modalities, list) else None  # pyright: ignore[reportUnknownArgumentType]
    values["match_confidence"] = MatchConfidence(row["match_confidence"])
    for name in _SOURCE_FIELDS:
        values[name] = FieldSource(row[name])
    return MergedEntity(**values)  # pyright: ignore[reportArgumentType]


def provenance_to_metadata(provenance: MergedProvenance) -> dict[str, object]:
    return {
        "kind": "merged",
        "format_version": FORMAT_VERSION,
        "fused_at": provenance.fused_at.isoformat(),
        "primary_fingerprint": provenance.primary_fingerprint,
        "secondary_fingerprint": provenance.secondary_fingerprint,
        "primary_stale": provenance.primary_stale,
        "secondary_stale": provenance.secondary_stale,
        **{name: getattr(provenance, name) for name in _PROVENANCE_COUNTERS},
    }


def provenance_from_metadata(path: Path, metadata: dict[str, object]) -> MergedProvenance:
    if metadata.get("kind") != "merged":
        raise CacheCorruptionError(path, "not a merged dataset")
    try:
        return MergedProvenance(
            fused_at=datetime.fromisoformat(str(metadata["fused_at"])),
            primary_fingerprint=_optional_text(metadata["primary_fingerprint"]),
            secondary_fingerprint=_optional_text(metadata["secondary_fingerprint"]),
            primary_stale=bool(metadata.get("primary_stale", False)),
            secondary_stale=bool(metadata.get("secondary_stale", False)),
            **{name: int(metadata.get(name, 0)) for name in _PROVENANCE_COUNTERS},  # pyright: ignore[reportArgumentType]
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise CacheCorruptionError(path, f"incomplete provenance: {exc}") from exc


def _optional_text(value: object) -> str | None:
    return None if value is None else str(value)
