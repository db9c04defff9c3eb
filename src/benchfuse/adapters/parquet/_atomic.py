"""Whole-file parquet replacement and guarded reads."""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from typing import TYPE_CHECKING

import pyarrow as pa
import pyarrow.parquet as pq

from benchfuse.domain.errors import CacheCorruptionError

from .columns import METADATA_KEY

if TYPE_CHECKING:
    from pathlib import Path

TEMP_SUFFIX = ".tmp"


def write_table_atomic(table: pa.Table, path: Path, metadata: dict[str, object]) -> None:
    """Write ``table`` with ``metadata`` to a sibling temporary file, then swap it in.

    Raises ``OSError`` or ``pyarrow.ArrowException``; ``path`` is untouched on failure.
    """

    encoded = json.dumps(metadata, sort_keys=True).encode("utf-8")
    table = table.replace_schema_metadata({METADATA_KEY: encoded})

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, temp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=TEMP_SUFFIX, dir=path.parent)
    os.close(fd)
    try:
        pq.write_table(table, temp_name)
        os.replace(temp_name, path)
    except BaseException:
        with contextlib.suppress(FileNotFoundError):
            os.unlink(temp_name)
        raise


def read_metadata(path: Path) -> dict[str, object] | None:
    """Return the embedded metadata of ``path`` without reading its rows."""

    if not path.exists():
        return None
    try:
        schema = pq.read_schema(path)
    except (OSError, pa.ArrowException) as exc:
        raise CacheCorruptionError(path, f"unreadable parquet footer: {exc}") from exc
    return _decode_metadata(path, schema.metadata)


def read_table(path: Path) -> tuple[pa.Table, dict[str, object]] | None:
    """Return the table stored at ``path`` and its metadata, or ``None`` if absent."""

    if not path.exists():
        return None
    try:
        table = pq.read_table(path)
    except (OSError, pa.ArrowException) as exc:
        raise CacheCorruptionError(path, f"unreadable parquet file: {exc}") from exc
    return table, _decode_metadata(path, table.schema.metadata)


def require_columns(path: Path, table: pa.Table, expected: pa.Schema) -> pa.Table:
    """Select ``expected`` columns from ``table`` in order, casting where needed."""

    missing = [name for name in expected.names if name not in table.column_names]
    if missing:
        raise CacheCorruptionError(path, f"missing columns: {', '.join(missing)}")
    try:
        return table.select(expected.names).cast(expected)
    except (pa.ArrowException, ValueError) as exc:
        raise CacheCorruptionError(path, f"unexpected column types: {exc}") from exc


def _decode_metadata(path: Path, metadata: dict[bytes, bytes] | None) -> dict[str, object]:
    raw = (metadata or {}).get(METADATA_KEY)
    if raw is None:
        raise CacheCorruptionError(path, "missing benchfuse metadata")
    try:
        decoded = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CacheCorruptionError(path, "malformed benchfuse metadata") from exc
    if not isinstance(decoded, dict):
        raise CacheCorruptionError(path, "malformed benchfuse metadata")
    return decoded  # pyright: ignore[reportUnknownVariableType]
