"""Pydantic models describing the Artificial Analysis LLM payloads."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

log = logging.getLogger(__name__)


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class ArtificialAnalysisBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", protected_namespaces=())
    _logged_extra_keys: ClassVar[set[str]] = set()

    def model_post_init(self, _context: object, /) -> None:
        extras = self.__pydantic_extra__
        if not extras:
            return
        new_keys = set(extras).difference(self._logged_extra_keys)
        if not new_keys:
            return
        self._logged_extra_keys.update(new_keys)
        log.warning(
            "Artificial Analysis %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class ModelCreator(ArtificialAnalysisBaseModel):
    _logged_extra_keys: ClassVar[set[str]] = set()

    id: str | None = None
    name: str | None = None
    slug: str | None = None

    _normalize_slug = field_validator("slug", mode="before")(_blank_to_none)


class Evaluations(ArtificialAnalysisBaseModel):
    _logged_extra_keys: ClassVar[set[str]] = set()

    intelligence_index: float | None = Field(
        default=None, alias="artificial_analysis_intelligence_index"
    )
    coding_index: float | None = Field(default=None, alias="artificial_analysis_coding_index")
    math_index: float | None = Field(default=None, alias="artificial_analysis_math_index")
    mmlu_pro: float | None = None
    gpqa: float | None = None
    hle: float | None = None
    livecodebench: float | None = None
    scicode: float | None = None
    math_500: float | None = None
    aime: float | None = None


class Pricing(ArtificialAnalysisBaseModel):
    _logged_extra_keys: ClassVar[set[str]] = set()

    price_1m_blended_3_to_1: float | None = None
    price_1m_input_tokens: float | None = None
    price_1m_output_tokens: float | None = None


class LlmModel(ArtificialAnalysisBaseModel):
    _logged_extra_keys: ClassVar[set[str]] = set()

    id: str
    name: str
    slug: str | None = None
    release_date: str | None = None
    model_creator: ModelCreator = Field(default_factory=ModelCreator)
    evaluations: Evaluations | None = None
    pricing: Pricing | None = None
    median_output_tokens_per_second: float | None = None
    median_time_to_first_token_seconds: float | None = None
    median_time_to_first_answer_token: float | None = None

    _normalize_slug = field_validator("slug", mode="before")(_blank_to_none)
    _normalize_release_date = field_validator("release_date", mode="before")(_blank_to_none)


class LlmModelsEnvelope(BaseModel):
    """Top-level response: records stay raw so each one is validated on its own."""

    model_config = ConfigDict(extra="ignore")

    data: list[object]
