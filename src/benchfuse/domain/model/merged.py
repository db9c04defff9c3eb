"""The fused, user-visible view of one model."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import UTC, datetime
from typing import Final

from .enums import FieldSource, MatchConfidence, TriState

# Attributes owned by the Primary source. Secondary data never touches them.
PRIMARY_IDENTITY_FIELDS: Final[tuple[str, ...]] = (
    "id",
    "name",
    "slug",
    "creator",
    "creator_slug",
)
PRIMARY_METRIC_FIELDS: Final[tuple[str, ...]] = (
    "intelligence",
    "coding",
    "math",
    "mmlu_pro",
    "gpqa",
    "hle",
    "livecodebench",
    "scicode",
    "math_500",
    "aime",
    "price",
    "tps",
    "latency",
)
PRIMARY_FIELDS: Final[tuple[str, ...]] = (*PRIMARY_IDENTITY_FIELDS, *PRIMARY_METRIC_FIELDS)

# Attributes present on both sources; Primary wins when it has a value.
SHARED_FIELDS: Final[tuple[str, ...]] = ("input_price", "output_price", "release_date")

SECONDARY_FLAG_FIELDS: Final[tuple[str, ...]] = (
    "reasoning",
    "tool_call",
    "structured_output",
    "attachment",
    "temperature",
    "open_weights",
)
SECONDARY_LIMIT_FIELDS: Final[tuple[str, ...]] = (
    "context_window",
    "max_input_tokens",
    "max_output_tokens",
)
SECONDARY_MODALITY_FIELDS: Final[tuple[str, ...]] = ("input_modalities", "output_modalities")
SECONDARY_TEXT_FIELDS: Final[tuple[str, ...]] = (
    "knowledge_cutoff",
    "last_updated",
    "family",
    "status",
    "models_dev_provider",
    "models_dev_model",
)

SECONDARY_ONLY_FIELDS: Final[tuple[str, ...]] = (
    *SECONDARY_FLAG_FIELDS,
    *SECONDARY_LIMIT_FIELDS,
    *SECONDARY_MODALITY_FIELDS,
    *SECONDARY_TEXT_FIELDS,
)


def is_unknown(value: object) -> bool:
    """Return ``True`` for the explicit unknown markers (``None`` or ``TriState.UNKNOWN``)."""

    return value is None or value is TriState.UNKNOWN


@dataclass(frozen=True, slots=True, kw_only=True)
class MergedEntity:
    """One Primary model enriched with whatever the Secondary source knows about it.

    Non-flag attributes use ``None`` for unknown; flags use :class:`TriState`.
    Neither is ever replaced by a zero or empty default.
    """

    id: str
    name: str
    slug: str
    creator: str | None
    creator_slug: str

    intelligence: float | None = None
    coding: float | None = None
    math: float | None = None
    mmlu_pro: float | None = None
    gpqa: float | None = None
    hle: float | None = None
    livecodebench: float | None = None
    scicode: float | None = None
    math_500: float | None = None
    aime: float | None = None
    price: float | None = None
    tps: float | None = None
    latency: float | None = None

    input_price: float | None = None
    output_price: float | None = None
    release_date: str | None = None

    reasoning: TriState = TriState.UNKNOWN
    tool_call: TriState = TriState.UNKNOWN
    structured_output: TriState = TriState.UNKNOWN
    attachment: TriState = TriState.UNKNOWN
    temperature: TriState = TriState.UNKNOWN
    open_weights: TriState = TriState.UNKNOWN
    context_window: int | None = None
    max_input_tokens: int | None = None
    max_output_tokens: int | None = None
    input_modalities: tuple[str, ...] | None = None
    output_modalities: tuple[str, ...] | None = None
    knowledge_cutoff: str | None = None
    last_updated: str | None = None
    family: str | None = None
    status: str | None = None
    models_dev_provider: str | None = None
    models_dev_model: str | None = None

    match_confidence: MatchConfidence = MatchConfidence.UNMATCHED
    input_price_source: FieldSource = FieldSource.NONE
    output_price_source: FieldSource = FieldSource.NONE
    release_date_source: FieldSource = FieldSource.NONE

    @property
    def models_dev_matched(self) -> bool:
        return self.match_confidence is not MatchConfidence.UNMATCHED

    def secondary_values(self) -> dict[str, object]:
        return {name: getattr(self, name) for name in SECONDARY_ONLY_FIELDS}


MERGED_FIELD_NAMES: Final[tuple[str, ...]] = tuple(entry.name for entry in fields(MergedEntity))


@dataclass(frozen=True, slots=True, kw_only=True)
class MergedProvenance:
    """Which source snapshots produced a merged collection, plus fusion diagnostics."""

    fused_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    primary_fingerprint: str | None
    secondary_fingerprint: str | None
    primary_stale: bool = False
    secondary_stale: bool = False
    exact_matches: int = 0
    fuzzy_matches: int = 0
    unmatched: int = 0
    ambiguous_keys: int = 0
    ambiguous_fuzzy: int = 0

    def produced_by(
        self,
        *,
        primary_fingerprint: str | None,
        secondary_fingerprint: str | None,
    ) -> bool:
        return (
            self.primary_fingerprint == primary_fingerprint
            and self.secondary_fingerprint == secondary_fingerprint
        )


@dataclass(frozen=True, slots=True)
class MergedDataset:
    entities: tuple[MergedEntity, ...]
    provenance: MergedProvenance

    def __len__(self) -> int:
        return len(self.entities)
