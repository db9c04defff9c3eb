"""HTTP adapter for the Artificial Analysis LLM endpoint."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from benchfuse.adapters.http_resilience import ResilientClient, default_client_factory
from benchfuse.config import ArtificialAnalysisConfig, get_artificial_analysis_config
from benchfuse.domain.errors import FetchError
from benchfuse.domain.model import SourceRole
from benchfuse.domain.ports import FetchedBatch, SourceAdapter

from .schema import LlmModelsEnvelope
from .translator import translate_models

if TYPE_CHECKING:
    from collections.abc import Callable

    from benchfuse.config import ResilienceConfig

log = getLogger(__name__)

LLM_MODELS_PATH = "/data/llms/models"
API_KEY_HEADER = "x-api-key"


@dataclass(slots=True)
class ArtificialAnalysisAdapter:
    """Primary source: benchmark scores, pricing and speed per model."""

    config: ArtificialAnalysisConfig = field(default_factory=get_artificial_analysis_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )
    name: str = "artificial_analysis"
    role: SourceRole = SourceRole.PRIMARY

    async def fetch(self) -> FetchedBatch:
        async with self.client_factory(self.config.resilience) as client:
            envelope = await self._perform_request(client)
        batch = translate_models(envelope.data)
        log.info(
            "Fetched %d Artificial Analysis models (%d dropped)",
            len(batch.records),
            batch.dropped,
        )
        return batch

    async def _perform_request(self, client: ResilientClient) -> LlmModelsEnvelope:
        try:
            response = await client.get(
                LLM_MODELS_PATH,
                headers={API_KEY_HEADER: self.config.api_key},
            )
        except httpx.HTTPError as exc:
            raise FetchError(self.name, f"request failed: {exc}") from exc

        if response.status_code == httpx.codes.UNAUTHORIZED:
            raise FetchError(self.name, "API key was rejected (HTTP 401)")
        if response.is_error:
            raise FetchError(self.name, f"HTTP {response.status_code}")

        try:
            return LlmModelsEnvelope.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise FetchError(self.name, "unexpected response payload") from exc


if TYPE_CHECKING:
    _adapter_check: SourceAdapter = ArtificialAnalysisAdapter()
