"""Parquet-backed raw snapshot store, one file per source."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from logging import getLogger
from typing import TYPE_CHECKING

import pyarrow as pa

from benchfuse.domain.errors import CacheCorruptionError, SnapshotWriteError
from benchfuse.domain.model import RawRecord, Snapshot

from ._atomic import read_metadata, read_table, require_columns, write_table_atomic
from .columns import FORMAT_VERSION, SNAPSHOT_ATTRIBUTES, snapshot_schema

if TYPE_CHECKING:
    from pathlib import Path

    from benchfuse.domain.model import SourceRole

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ParquetSnapshotStore:
    path: Path
    role: SourceRole

    def load(self) -> Snapshot | None:
        try:
            return self.read()
        except CacheCorruptionError as exc:
            log.warning("Ignoring corrupt %s snapshot: %s", self.role, exc)
            return None

    def read(self) -> Snapshot | None:
        """Like :meth:`load` but raise ``CacheCorruptionError`` instead of hiding it."""

        loaded = read_table(self.path)
        if loaded is None:
            return None
        table, metadata = loaded
        if metadata.get("source") != self.role.value:
            raise CacheCorruptionError(self.path, f"not a {self.role} snapshot")

        table = require_columns(self.path, table, snapshot_schema(self.role))
        attribute_names = SNAPSHOT_ATTRIBUTES[self.role].names
        records = tuple(
            RawRecord(
                provider_key=row["provider_key"],
                model_key=row["model_key"],
                attributes={name: _from_cell(row[name]) for name in attribute_names},
            )
            for row in table.to_pylist()
        )
        try:
            fetched_at = datetime.fromisoformat(str(metadata["fetched_at"]))
            fingerprint = str(metadata["fingerprint"])
            dropped = int(metadata.get("dropped_records", 0))  # pyright: ignore[reportArgumentType]
        except (KeyError, TypeError, ValueError) as exc:
            raise CacheCorruptionError(self.path, f"incomplete snapshot metadata: {exc}") from exc
        return Snapshot(
            source=self.role,
            records=records,
            fetched_at=fetched_at,
            fingerprint=fingerprint,
            dropped_records=dropped,
        )

    def save(self, snapshot: Snapshot) -> None:
        schema = snapshot_schema(self.role)
        attribute_names = SNAPSHOT_ATTRIBUTES[self.role].names
        rows = [
            {
                "provider_key": record.provider_key,
                "model_key": record.model_key,
                **{name: _to_cell(record.get(name)) for name in attribute_names},
            }
            for record in snapshot.records
        ]
        metadata: dict[str, object] = {
            "kind": "snapshot",
            "format_version": FORMAT_VERSION,
            "source": self.role.value,
            "fetched_at": snapshot.fetched_at.isoformat(),
            "fingerprint": snapshot.fingerprint,
            "dropped_records": snapshot.dropped_records,
            "record_count": len(snapshot),
        }
        try:
            table = pa.Table.from_pylist(rows, schema=schema)
            write_table_atomic(table, self.path, metadata)
        except (OSError, pa.ArrowException) as exc:
            raise SnapshotWriteError(f"{self.path}: {exc}") from exc

    def metadata(self) -> dict[str, object] | None:
        return read_metadata(self.path)


def _to_cell(value: object) -> object:
    if isinstance(value, tuple):
        return list(value)  # pyright: ignore[reportUnknownArgumentType]
    return value


def _from_cell(value: object) -> object:
    if isinstance(value, list):
        return tuple(value)  # pyright: ignore[reportUnknownArgumentType]
    return value
