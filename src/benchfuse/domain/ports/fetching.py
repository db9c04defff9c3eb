"""Ports for fetching raw source records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from benchfuse.domain.model import RawRecord, SourceRole


@dataclass(frozen=True, slots=True)
class FetchedBatch:
    """Raw records produced by one upstream fetch."""

    records: tuple[RawRecord, ...]
    dropped: int = 0


@runtime_checkable
class SourceAdapter(Protocol):
    """Fetch one upstream and normalise it into raw records.

    Implementations raise :class:`benchfuse.domain.errors.FetchError` on
    transport or payload-shape failures.
    """

    name: str
    role: SourceRole

    async def fetch(self) -> FetchedBatch: ...


__all__ = ["FetchedBatch", "SourceAdapter"]
