"""Raw per-source records and the snapshots that hold them."""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from types import MappingProxyType
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from .enums import SourceRole

type CompositeKey = str


def normalize_key(value: str) -> str:
    return value.strip().lower()


def composite_key(provider_key: str, model_key: str) -> CompositeKey:
    """Return the lowercase ``provider/model`` handle used for exact matching."""

    return f"{normalize_key(provider_key)}/{normalize_key(model_key)}"


@dataclass(frozen=True, slots=True)
class RawRecord:
    """One upstream record: two identity fields plus an opaque attribute bag.

    Identity fields keep their upstream casing; comparisons go through
    :func:`normalize_key`. ``attributes`` is frozen on construction so a stored
    record cannot be patched in place.
    """

    provider_key: str
    model_key: str
    attributes: Mapping[str, object] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self) -> None:
        object.__setattr__(self, "attributes", MappingProxyType(dict(self.attributes)))

    @property
    def composite_key(self) -> CompositeKey:
        return composite_key(self.provider_key, self.model_key)

    def get(self, name: str) -> object | None:
        return self.attributes.get(name)


def fingerprint_records(records: Iterable[RawRecord]) -> str:
    """Stable SHA-256 over the canonical JSON form of ``records`` (order-sensitive)."""

    digest = hashlib.sha256()
    for record in records:
        line = json.dumps(
            [record.provider_key, record.model_key, dict(record.attributes)],
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            default=_json_default,
        )
        digest.update(line.encode("utf-8"))
        digest.update(b"\n")
    return digest.hexdigest()


def _json_default(value: object) -> object:
    if isinstance(value, (tuple, frozenset, set)):
        return list(value)  # pyright: ignore[reportUnknownArgumentType]
    if isinstance(value, datetime):
        return value.isoformat()
    raise TypeError(f"Unsupported attribute value for fingerprinting: {type(value).__name__}")


@dataclass(frozen=True, slots=True)
class Snapshot:
    """A complete raw collection for one source at one point in time."""

    source: SourceRole
    records: tuple[RawRecord, ...]
    fetched_at: datetime
    fingerprint: str
    dropped_records: int = 0

    @classmethod
    def create(
        cls,
        source: SourceRole,
        records: Iterable[RawRecord],
        *,
        fetched_at: datetime | None = None,
        dropped_records: int = 0,
    ) -> Snapshot:
        materialized = tuple(records)
        return cls(
            source=source,
            records=materialized,
            fetched_at=fetched_at or datetime.now(UTC),
            fingerprint=fingerprint_records(materialized),
            dropped_records=dropped_records,
        )

    def age(self, now: datetime) -> timedelta:
        return now - self.fetched_at

    def __len__(self) -> int:
        return len(self.records)
