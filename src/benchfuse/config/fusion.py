"""Fusion defaults: provider aliases and snapshot validity windows."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta
from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from .env import optional_float_env
from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

DEFAULT_SECONDARY_MAX_AGE: Final[timedelta] = timedelta(hours=24)

# Primary creator slug -> Secondary provider id, both lowercase.
DEFAULT_PROVIDER_ALIASES: Final[Mapping[str, str]] = MappingProxyType(
    {
        "meta": "llama",
        "aws": "amazon-bedrock",
        "amazon": "amazon-bedrock",
        "kimi": "moonshotai",
        "zai": "zhipuai",
        "mistral-ai": "mistral",
    }
)


def normalize_aliases(aliases: Mapping[str, str]) -> Mapping[str, str]:
    """Return a read-only copy of ``aliases`` with trimmed, lowercase keys and values."""

    return MappingProxyType(
        {source.strip().lower(): target.strip().lower() for source, target in aliases.items()}
    )


@dataclass(frozen=True, slots=True)
class FusionConfig:
    provider_aliases: Mapping[str, str] = field(default_factory=lambda: DEFAULT_PROVIDER_ALIASES)
    secondary_max_age: timedelta = DEFAULT_SECONDARY_MAX_AGE

    def __post_init__(self) -> None:
        if self.secondary_max_age < timedelta(0):
            raise ConfigurationError("Secondary validity window must be non-negative")
        object.__setattr__(self, "provider_aliases", normalize_aliases(self.provider_aliases))


def get_fusion_config(*, provider_aliases: Mapping[str, str] | None = None) -> FusionConfig:
    hours = optional_float_env("BENCHFUSE_SECONDARY_MAX_AGE_HOURS")
    try:
        max_age = DEFAULT_SECONDARY_MAX_AGE if hours is None else timedelta(hours=hours)
    except OverflowError as exc:
        raise ConfigurationError(f"Secondary validity window is too large: {hours} hours") from exc
    return FusionConfig(
        provider_aliases=DEFAULT_PROVIDER_ALIASES if provider_aliases is None else provider_aliases,
        secondary_max_age=max_age,
    )
