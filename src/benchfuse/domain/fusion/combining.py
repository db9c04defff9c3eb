"""Field precedence rules that turn a match result into a merged entity."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from benchfuse.domain.model import (
    PRIMARY_METRIC_FIELDS,
    SECONDARY_FLAG_FIELDS,
    SECONDARY_LIMIT_FIELDS,
    SECONDARY_MODALITY_FIELDS,
    SECONDARY_TEXT_FIELDS,
    SHARED_FIELDS,
    FieldSource,
    MergedEntity,
    TriState,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from benchfuse.domain.model import RawRecord

    from .matching import MatchResult

# merged attribute -> (primary attribute, secondary attribute)
_SHARED_SOURCES: Final[dict[str, tuple[str, str]]] = {
    "input_price": ("input_price", "cost_input"),
    "output_price": ("output_price", "cost_output"),
    "release_date": ("release_date", "release_date"),
}

# merged attribute -> secondary attribute, where the names differ
_SECONDARY_RENAMES: Final[dict[str, str]] = {
    "knowledge_cutoff": "knowledge",
    "models_dev_provider": "provider_id",
    "models_dev_model": "model_id",
}


def combine(result: MatchResult) -> MergedEntity:
    """Build the merged view of one Primary record.

    Primary-only attributes are copied verbatim. Secondary-only attributes come
    from the matched record when it has them and stay unknown otherwise. Shared
    attributes prefer the Primary value and record which side supplied them.
    """

    primary = result.primary
    secondary = result.secondary
    values: dict[str, object] = {
        "id": _text(primary.get("id")) or primary.model_key,
        "name": _text(primary.get("name")) or primary.model_key,
        "slug": _text(primary.get("slug")) or primary.model_key,
        "creator": _text(primary.get("creator")),
        "creator_slug": _text(primary.get("creator_slug")) or primary.provider_key,
        "match_confidence": result.confidence,
    }
    for name in PRIMARY_METRIC_FIELDS:
        values[name] = _number(primary.get(name))

    for name in SHARED_FIELDS:
        primary_name, secondary_name = _SHARED_SOURCES[name]
        convert = _text if name == "release_date" else _number
        value, source = _prefer_primary(
            convert(primary.get(primary_name)),
            convert(secondary.get(secondary_name)) if secondary is not None else None,
        )
        values[name] = value
        values[f"{name}_source"] = source

    if secondary is not None:
        values.update(_secondary_values(secondary))
    return MergedEntity(**values)  # pyright: ignore[reportArgumentType]


def combine_all(results: Iterable[MatchResult]) -> tuple[MergedEntity, ...]:
    return tuple(combine(result) for result in results)


def _secondary_values(record: RawRecord) -> dict[str, object]:
    values: dict[str, object] = {}
    for name in SECONDARY_FLAG_FIELDS:
        values[name] = TriState.from_optional(_flag(record.get(name)))
    for name in SECONDARY_LIMIT_FIELDS:
        values[name] = _integer(record.get(name))
    for name in SECONDARY_MODALITY_FIELDS:
        values[name] = _modalities(record.get(name))
    for name in SECONDARY_TEXT_FIELDS:
        values[name] = _text(record.get(_SECONDARY_RENAMES.get(name, name)))
    return values


def _prefer_primary[T](primary: T | None, secondary: T | None) -> tuple[T | None, FieldSource]:
    if primary is not None:
        return primary, FieldSource.PRIMARY
    if secondary is not None:
        return secondary, FieldSource.SECONDARY
    return None, FieldSource.NONE


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value)
    return text or None


def _number(value: object) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    return None


def _integer(value: object) -> int | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _flag(value: object) -> bool | None:
    if isinstance(value, bool):
        return value
    return None


def _modalities(value: object) -> tuple[str, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        return tuple(part for part in value.split(",") if part)
    if isinstance(value, (list, tuple)):
        return tuple(str(item) for item in value)  # pyright: ignore[reportUnknownVariableType, reportUnknownArgumentType]
    return None


__all__ = ["combine", "combine_all"]
