"""Translate the models.dev catalogue into Secondary raw records."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from pydantic import ValidationError

from benchfuse.domain.errors import SchemaError
from benchfuse.domain.model import RawRecord
from benchfuse.domain.ports import FetchedBatch

from .schema import Cost, Limits, Model, Provider

if TYPE_CHECKING:
    from collections.abc import Mapping


log = getLogger(__name__)


def _blank(value: str | None) -> str | None:
    if value is None:
        return None
    return value.strip() or None


def translate_model(provider: Provider, model: Model, *, provider_key: str) -> RawRecord:
    """Flatten one provider/model pair into a raw record keyed by provider id and model id."""

    provider_id = _blank(provider.id) or _blank(provider_key)
    model_id = _blank(model.id)
    if provider_id is None:
        raise SchemaError("provider has no id")
    if model_id is None:
        raise SchemaError(f"model under provider {provider_id!r} has no id")

    limit = model.limit or Limits()
    cost = model.cost or Cost()
    modalities = model.modalities
    return RawRecord(
        provider_key=provider_id,
        model_key=model_id,
        attributes={
            "provider_id": provider_id,
            "provider_name": provider.name,
            "model_id": model_id,
            "model_name": model.name,
            "family": model.family,
            "attachment": model.attachment,
            "reasoning": model.reasoning,
            "tool_call": model.tool_call,
            "structured_output": model.structured_output,
            "temperature": model.temperature,
            "knowledge": model.knowledge,
            "release_date": model.release_date,
            "last_updated": model.last_updated,
            "open_weights": model.open_weights,
            "status": model.status,
            "context_window": limit.context,
            "max_input_tokens": limit.input,
            "max_output_tokens": limit.output,
            "cost_input": cost.input,
            "cost_output": cost.output,
            "cost_cache_read": cost.cache_read,
            "cost_cache_write": cost.cache_write,
            "input_modalities": tuple(modalities.input) if modalities else None,
            "output_modalities": tuple(modalities.output) if modalities else None,
        },
    )


def translate_catalogue(catalogue: Mapping[str, object]) -> FetchedBatch:
    """Translate every model of every provider, in catalogue order.

    A malformed provider drops all of its models; a malformed model drops only
    itself. Either way the drop is counted and the batch continues.
    """

    records: list[RawRecord] = []
    dropped = 0
    for provider_key, provider_payload in catalogue.items():
        try:
            provider = Provider.model_validate(provider_payload)
        except ValidationError as exc:
            dropped += _model_count(provider_payload)
            log.warning("Dropping models.dev provider %r: %s", provider_key, exc)
            continue

        for model_key, model_payload in provider.models.items():
            try:
                model = Model.model_validate(model_payload)
                records.append(translate_model(provider, model, provider_key=provider_key))
            except (ValidationError, SchemaError) as exc:
                dropped += 1
                log.warning("Dropping models.dev model %s/%s: %s", provider_key, model_key, exc)
    return FetchedBatch(records=tuple(records), dropped=dropped)


def _model_count(provider_payload: object) -> int:
    if isinstance(provider_payload, dict):
        models = provider_payload.get("models")  # pyright: ignore[reportUnknownMemberType, reportUnknownVariableType]
        if isinstance(models, dict):
            return max(len(models), 1)  # pyright: ignore[reportUnknownArgumentType]
    return 1
