"""Translate Artificial Analysis payloads into Primary raw records."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from benchfuse.domain.errors import SchemaError
from benchfuse.domain.model import RawRecord
from benchfuse.domain.ports import FetchedBatch

from .schema import Evaluations, LlmModel, Pricing

if TYPE_CHECKING:
    from collections.abc import Iterable

log = getLogger(__name__)


def translate_model(model: LlmModel) -> RawRecord:
    """Map one validated payload to a raw record keyed by creator slug and model slug."""

    creator_slug = model.model_creator.slug
    if model.slug is None:
        raise SchemaError(f"model {model.id!r} has no slug")
    if creator_slug is None:
        raise SchemaError(f"model {model.slug!r} has no creator slug")

    evaluations = model.evaluations or Evaluations()
    pricing = model.pricing or Pricing()
    return RawRecord(
        provider_key=creator_slug,
        model_key=model.slug,
        attributes={
            "id": model.id,
            "name": model.name,
            "slug": model.slug,
            "creator": model.model_creator.name,
            "creator_slug": creator_slug,
            "release_date": model.release_date,
            "intelligence": evaluations.intelligence_index,
            "coding": evaluations.coding_index,
            "math": evaluations.math_index,
            "mmlu_pro": evaluations.mmlu_pro,
            "gpqa": evaluations.gpqa,
            "hle": evaluations.hle,
            "livecodebench": evaluations.livecodebench,
            "scicode": evaluations.scicode,
            "math_500": evaluations.math_500,
            "aime": evaluations.aime,
            "input_price": pricing.price_1m_input_tokens,
            "output_price": pricing.price_1m_output_tokens,
            "price": pricing.price_1m_blended_3_to_1,
            "tps": model.median_output_tokens_per_second,
            "latency": model.median_time_to_first_token_seconds,
        },
    )


def translate_models(items: Iterable[object]) -> FetchedBatch:
    """Translate every item, dropping and counting the ones that fail validation."""

    records: list[RawRecord] = []
    dropped = 0
    for position, item in enumerate(items):
        try:
            records.append(translate_model(LlmModel.model_validate(item)))
        except (ValidationError, SchemaError) as exc:
            dropped += 1
            log.warning("Dropping Artificial Analysis record #%d: %s", position, exc)
    return FetchedBatch(records=tuple(records), dropped=dropped)
