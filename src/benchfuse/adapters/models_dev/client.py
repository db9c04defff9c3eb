"""HTTP adapter for the models.dev catalogue."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
from pydantic import ValidationError

from benchfuse.adapters.http_resilience import ResilientClient, default_client_factory
from benchfuse.config import ModelsDevConfig, get_models_dev_config
from benchfuse.domain.errors import FetchError
from benchfuse.domain.model import SourceRole
from benchfuse.domain.ports import FetchedBatch, SourceAdapter

from .schema import Catalogue
from .translator import translate_catalogue

if TYPE_CHECKING:
    from collections.abc import Callable

    from benchfuse.config import ResilienceConfig

log = getLogger(__name__)


@dataclass(slots=True)
class ModelsDevAdapter:
    """Secondary source: capability flags, limits and modalities per provider model."""

    config: ModelsDevConfig = field(default_factory=get_models_dev_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=default_client_factory
    )
    name: str = "models_dev"
    role: SourceRole = SourceRole.SECONDARY

    async def fetch(self) -> FetchedBatch:
        async with self.client_factory(self.config.resilience) as client:
            catalogue = await self._perform_request(client)
        batch = translate_catalogue(catalogue.root)
        log.info("Fetched %d models.dev models (%d dropped)", len(batch.records), batch.dropped)
        return batch

    async def _perform_request(self, client: ResilientClient) -> Catalogue:
        try:
            response = await client.get(self.config.catalogue_path)
        except httpx.HTTPError as exc:
            raise FetchError(self.name, f"request failed: {exc}") from exc

        if response.is_error:
            raise FetchError(self.name, f"HTTP {response.status_code}")

        try:
            return Catalogue.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            raise FetchError(self.name, "unexpected response payload") from exc


if TYPE_CHECKING:
    _adapter_check: SourceAdapter = ModelsDevAdapter()
