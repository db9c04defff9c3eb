"""Application configuration helpers."""

from __future__ import annotations

from .artificial_analysis import ArtificialAnalysisConfig, get_artificial_analysis_config
from .env import require_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .fusion import (
    DEFAULT_PROVIDER_ALIASES,
    DEFAULT_SECONDARY_MAX_AGE,
    FusionConfig,
    get_fusion_config,
)
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .models_dev import ModelsDevConfig, get_models_dev_config
from .storage import StorageConfig, get_storage_config

__all__ = [
    "DEFAULT_PROVIDER_ALIASES",
    "DEFAULT_SECONDARY_MAX_AGE",
    "ArtificialAnalysisConfig",
    "ConfigurationError",
    "FusionConfig",
    "MissingConfigurationError",
    "ModelsDevConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "StorageConfig",
    "configure_logging",
    "get_artificial_analysis_config",
    "get_fusion_config",
    "get_models_dev_config",
    "get_storage_config",
    "require_env_var",
    "require_env_vars",
]
