"""Rule-based matching of Primary records to Secondary records.

Matching is pure: it reads two record collections and an alias table and
returns a :class:`MatchReport`. Exact composite-key matches are tried first,
then a unique match after stripping a trailing date-version suffix.
"""

from __future__ import annotations

import re
from collections import Counter
from dataclasses import dataclass, field
from logging import getLogger
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from benchfuse.domain.errors import MatchAmbiguity
from benchfuse.domain.model import MatchConfidence, normalize_key

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from benchfuse.domain.model import RawRecord

log = getLogger(__name__)

_DATE_SUFFIX: Final = re.compile(r"-(?:\d{8}|\d{4}-\d{2}-\d{2})$")

type ProviderModelKey = tuple[str, str]


@dataclass(frozen=True, slots=True)
class MatchResult:
    primary: RawRecord
    secondary: RawRecord | None
    confidence: MatchConfidence


@dataclass(frozen=True, slots=True)
class MatchReport:
    """All match results, in Primary order, plus ambiguity diagnostics."""

    results: tuple[MatchResult, ...]
    ambiguities: tuple[MatchAmbiguity, ...] = ()
    ambiguous_fuzzy: int = 0

    def count(self, confidence: MatchConfidence) -> int:
        return sum(1 for result in self.results if result.confidence is confidence)

    @property
    def exact(self) -> int:
        return self.count(MatchConfidence.EXACT)

    @property
    def fuzzy(self) -> int:
        return self.count(MatchConfidence.FUZZY)

    @property
    def unmatched(self) -> int:
        return self.count(MatchConfidence.UNMATCHED)


def strip_date_suffix(model_key: str) -> str:
    """Remove a trailing ``-YYYYMMDD`` or ``-YYYY-MM-DD`` version suffix."""

    return _DATE_SUFFIX.sub("", model_key)


@dataclass(slots=True)
class _SecondaryIndex:
    exact: dict[ProviderModelKey, RawRecord] = field(default_factory=dict)
    # provider -> stripped model key -> distinct full model keys, in input order
    stripped: dict[str, dict[str, list[str]]] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class RecordMatcher:
    """Link each Primary record to at most one Secondary record."""

    provider_aliases: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        aliases = {
            normalize_key(source): normalize_key(target)
            for source, target in self.provider_aliases.items()
        }
        object.__setattr__(self, "provider_aliases", MappingProxyType(aliases))

    def canonical_provider(self, provider_key: str) -> str:
        provider = normalize_key(provider_key)
        return normalize_key(self.provider_aliases.get(provider, provider))

    def match(
        self,
        primary: Sequence[RawRecord],
        secondary: Sequence[RawRecord],
    ) -> MatchReport:
        index = self._index(secondary)
        ambiguities = [
            *self._duplicates("primary", primary),
            *self._duplicates("secondary", secondary),
        ]

        results: list[MatchResult] = []
        ambiguous_fuzzy = 0
        for record in primary:
            provider = self.canonical_provider(record.provider_key)
            model = normalize_key(record.model_key)

            exact = index.exact.get((provider, model))
            if exact is not None:
                results.append(MatchResult(record, exact, MatchConfidence.EXACT))
                continue

            candidates = index.stripped.get(provider, {}).get(strip_date_suffix(model), [])
            if len(candidates) == 1:
                fuzzy = index.exact[(provider, candidates[0])]
                results.append(MatchResult(record, fuzzy, MatchConfidence.FUZZY))
                continue
            if len(candidates) > 1:
                ambiguous_fuzzy += 1
                log.debug(
                    "Ambiguous fuzzy candidates for %s/%s: %s",
                    provider,
                    model,
                    ", ".join(candidates),
                )
            results.append(MatchResult(record, None, MatchConfidence.UNMATCHED))

        for ambiguity in ambiguities:
            log.warning(
                "Duplicate %s key %s (%d records); keeping the first",
                ambiguity.source,
                ambiguity.key,
                ambiguity.occurrences,
            )
        return MatchReport(
            results=tuple(results),
            ambiguities=tuple(ambiguities),
            ambiguous_fuzzy=ambiguous_fuzzy,
        )

    def _index(self, secondary: Sequence[RawRecord]) -> _SecondaryIndex:
        index = _SecondaryIndex()
        for record in secondary:
            provider = self.canonical_provider(record.provider_key)
            model = normalize_key(record.model_key)
            if (provider, model) in index.exact:
                continue
            index.exact[(provider, model)] = record
            bucket = index.stripped.setdefault(provider, {})
            bucket.setdefault(strip_date_suffix(model), []).append(model)
        return index

    def _duplicates(self, source: str, records: Sequence[RawRecord]) -> list[MatchAmbiguity]:
        counts = Counter(
            f"{self.canonical_provider(record.provider_key)}/{normalize_key(record.model_key)}"
            for record in records
        )
        return [
            MatchAmbiguity(source=source, key=key, occurrences=occurrences)
            for key, occurrences in counts.items()
            if occurrences > 1
        ]


__all__ = ["MatchReport", "MatchResult", "RecordMatcher", "strip_date_suffix"]
