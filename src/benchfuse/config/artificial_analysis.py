"""Artificial Analysis configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import require_env_vars
from .http_resilience import RateLimit, ResilienceConfig

ARTIFICIAL_ANALYSIS_BASE_URL = "https://artificialanalysis.ai/api/v2"
ARTIFICIAL_ANALYSIS_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ArtificialAnalysisConfig:
    """Holds Artificial Analysis API configuration values."""

    api_key: str
    resilience: ResilienceConfig


def default_artificial_analysis_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="artificial_analysis",
        base_url=ARTIFICIAL_ANALYSIS_BASE_URL,
        timeout_seconds=ARTIFICIAL_ANALYSIS_TIMEOUT_SECONDS,
        ratelimit=RateLimit(max_calls=2, per_seconds=1.0),
    )


def get_artificial_analysis_config(
    *,
    resilience: ResilienceConfig | None = None,
) -> ArtificialAnalysisConfig:
    values = require_env_vars(("ARTIFICIAL_ANALYSIS_API_KEY",))
    return ArtificialAnalysisConfig(
        api_key=values["ARTIFICIAL_ANALYSIS_API_KEY"],
        resilience=resilience or default_artificial_analysis_resilience(),
    )
