"""Matching, combining and orchestration of the fused dataset."""

from __future__ import annotations

from .combining import combine, combine_all
from .matching import MatchReport, MatchResult, RecordMatcher, strip_date_suffix
from .orchestrator import FusionOutcome, FusionState, MergeOrchestrator
from .refresh import SourceRefresher, SourceRefreshOutcome
from .validity import Clock, ExplicitRefreshPolicy, MaxAgePolicy, ValidityPolicy, utc_now

__all__ = [
    "Clock",
    "ExplicitRefreshPolicy",
    "FusionOutcome",
    "FusionState",
    "MatchReport",
    "MatchResult",
    "MaxAgePolicy",
    "MergeOrchestrator",
    "RecordMatcher",
    "SourceRefreshOutcome",
    "SourceRefresher",
    "ValidityPolicy",
    "combine",
    "combine_all",
    "strip_date_suffix",
]
