"""Error types raised and recovered inside the fusion core."""

from __future__ import annotations

from dataclasses import dataclass


class FetchError(RuntimeError):
    """An upstream could not be fetched or returned an unusable payload."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class SchemaError(ValueError):
    """A single upstream record cannot be turned into a raw record."""


class CacheCorruptionError(RuntimeError):
    """A persisted artifact exists but cannot be parsed."""

    def __init__(self, path: object, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = path


class SnapshotWriteError(RuntimeError):
    """A raw snapshot could not be persisted."""


class FusionWriteError(RuntimeError):
    """The merged dataset could not be committed."""


@dataclass(frozen=True, slots=True)
class MatchAmbiguity:
    """Diagnostic for a composite key that occurs more than once in one source.

    Never raised; the matcher keeps the first record and reports the rest.
    """

    source: str
    key: str
    occurrences: int


__all__ = [
    "CacheCorruptionError",
    "FetchError",
    "FusionWriteError",
    "MatchAmbiguity",
    "SchemaError",
    "SnapshotWriteError",
]
