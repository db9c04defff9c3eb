from __future__ import annotations

import json
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

import httpx
import pytest

from benchfuse.adapters.http_resilience import ResilientClient
from benchfuse.config import StorageConfig
from benchfuse.domain.ports import FetchedBatch

if TYPE_CHECKING:
    from collections.abc import Callable

    from benchfuse.config import ResilienceConfig
    from benchfuse.domain.model import RawRecord, SourceRole

DATA_DIR = Path(__file__).resolve().parent / "data"


def make_client_factory(
    handler: Callable[[httpx.Request], httpx.Response],
) -> Callable[[ResilienceConfig], ResilientClient]:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    def factory(resilience: ResilienceConfig) -> ResilientClient:
        client = ResilientClient(resilience)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


class FakeSourceAdapter:
    """In-memory source adapter returning scripted batches or errors in order."""

    def __init__(
        self,
        name: str,
        role: SourceRole,
        *outcomes: tuple[RawRecord, ...] | Exception,
    ) -> None:
        self.name = name
        self.role = role
        self._outcomes = list(outcomes)
        self.calls = 0

    async def fetch(self) -> FetchedBatch:
        self.calls += 1
        outcome = self._outcomes.pop(0) if len(self._outcomes) > 1 else self._outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return FetchedBatch(records=outcome)


class FixedClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def artificial_analysis_payload() -> dict[str, object]:
    return json.loads((DATA_DIR / "artificial_analysis_llms.json").read_text())


@pytest.fixture
def models_dev_payload() -> dict[str, object]:
    return json.loads((DATA_DIR / "models_dev_api.json").read_text())


@pytest.fixture
def storage(tmp_path: Path) -> StorageConfig:
    return StorageConfig(cache_dir=tmp_path / "cache")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 3, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def client_factory_builder() -> Callable[
    [Callable[[httpx.Request], httpx.Response]],
    Callable[[ResilienceConfig], ResilientClient],
]:
    return make_client_factory


@pytest.fixture
def fake_adapter_class() -> type[FakeSourceAdapter]:
    return FakeSourceAdapter
