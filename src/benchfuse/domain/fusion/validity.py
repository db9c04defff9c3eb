"""Per-source snapshot validity policies."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable

    from benchfuse.domain.model import Snapshot


type Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class ValidityPolicy(Protocol):
    """Decide whether a source must be fetched again."""

    def needs_refresh(self, snapshot: Snapshot | None, *, now: datetime, force: bool) -> bool: ...


@dataclass(frozen=True, slots=True)
class ExplicitRefreshPolicy:
    """Refetch only on explicit request or when nothing usable is stored."""

    def needs_refresh(self, snapshot: Snapshot | None, *, now: datetime, force: bool) -> bool:
        return snapshot is None or force


@dataclass(frozen=True, slots=True)
class MaxAgePolicy:
    """Refetch once the stored snapshot is older than ``max_age``.

    ``force`` is ignored: a forced refresh does not shorten this window.
    """

    max_age: timedelta

    def needs_refresh(self, snapshot: Snapshot | None, *, now: datetime, force: bool) -> bool:
        if snapshot is None:
            return True
        return snapshot.age(now) > self.max_age


__all__ = ["Clock", "ExplicitRefreshPolicy", "MaxAgePolicy", "ValidityPolicy", "utc_now"]
