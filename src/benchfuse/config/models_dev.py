"""models.dev configuration values."""

from __future__ import annotations

from dataclasses import dataclass, field

from .http_resilience import ResilienceConfig, RetryPolicy

MODELS_DEV_BASE_URL = "https://models.dev"
MODELS_DEV_CATALOGUE_PATH = "/api.json"


def default_models_dev_resilience() -> ResilienceConfig:
    return ResilienceConfig(
        name="models_dev",
        base_url=MODELS_DEV_BASE_URL,
        timeout_seconds=20.0,
        retry=RetryPolicy(total=3),
    )


@dataclass(frozen=True, slots=True)
class ModelsDevConfig:
    resilience: ResilienceConfig = field(default_factory=default_models_dev_resilience)
    catalogue_path: str = MODELS_DEV_CATALOGUE_PATH


def get_models_dev_config() -> ModelsDevConfig:
    return ModelsDevConfig()
