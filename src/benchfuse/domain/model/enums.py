"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SourceRole(StrEnum):
    """Which upstream a snapshot or attribute came from."""

    PRIMARY = "primary"
    SECONDARY = "secondary"


class MatchConfidence(StrEnum):
    """How a Primary record was linked to a Secondary record."""

    EXACT = "exact"
    FUZZY = "fuzzy"
    UNMATCHED = "unmatched"


class FieldSource(StrEnum):
    """Which side supplied the value of an attribute present on both sources."""

    PRIMARY = "primary"
    SECONDARY = "secondary"
    NONE = "none"


class TriState(StrEnum):
    """Known-true / known-false / unknown, never collapsed into a nullable bool."""

    TRUE = "true"
    FALSE = "false"
    UNKNOWN = "unknown"

    @classmethod
    def from_optional(cls, value: bool | None) -> TriState:
        if value is None:
            return cls.UNKNOWN
        return cls.TRUE if value else cls.FALSE

    def as_optional(self) -> bool | None:
        if self is TriState.UNKNOWN:
            return None
        return self is TriState.TRUE

    @property
    def is_known(self) -> bool:
        return self is not TriState.UNKNOWN
