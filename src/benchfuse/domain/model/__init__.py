"""Domain model for raw source snapshots and the fused view."""

from __future__ import annotations

from .enums import FieldSource, MatchConfidence, SourceRole, TriState
from .merged import (
    MERGED_FIELD_NAMES,
    PRIMARY_FIELDS,
    PRIMARY_IDENTITY_FIELDS,
    PRIMARY_METRIC_FIELDS,
    SECONDARY_FLAG_FIELDS,
    SECONDARY_LIMIT_FIELDS,
    SECONDARY_MODALITY_FIELDS,
    SECONDARY_ONLY_FIELDS,
    SECONDARY_TEXT_FIELDS,
    SHARED_FIELDS,
    MergedDataset,
    MergedEntity,
    MergedProvenance,
    is_unknown,
)
from .records import (
    CompositeKey,
    RawRecord,
    Snapshot,
    composite_key,
    fingerprint_records,
    normalize_key,
)

__all__ = [
    "MERGED_FIELD_NAMES",
    "PRIMARY_FIELDS",
    "PRIMARY_IDENTITY_FIELDS",
    "PRIMARY_METRIC_FIELDS",
    "SECONDARY_FLAG_FIELDS",
    "SECONDARY_LIMIT_FIELDS",
    "SECONDARY_MODALITY_FIELDS",
    "SECONDARY_ONLY_FIELDS",
    "SECONDARY_TEXT_FIELDS",
    "SHARED_FIELDS",
    "CompositeKey",
    "FieldSource",
    "MatchConfidence",
    "MergedDataset",
    "MergedEntity",
    "MergedProvenance",
    "RawRecord",
    "Snapshot",
    "SourceRole",
    "TriState",
    "composite_key",
    "fingerprint_records",
    "is_unknown",
    "normalize_key",
]
