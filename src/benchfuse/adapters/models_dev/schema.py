"""Pydantic models describing the models.dev catalogue."""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field, RootModel

log = logging.getLogger(__name__)


class ModelsDevBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow")
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
            "models.dev %s: unmodeled keys: %s",
            type(self).__name__,
            ", ".join(sorted(new_keys)),
        )


class Limits(ModelsDevBaseModel):
    _logged_extra_keys: ClassVar[set[str]] = set()

    context: int | None = None
    input: int | None = None
    output: int | None = None


class Cost(ModelsDevBaseModel):
    _logged_extra_keys: ClassVar[set[str]] = set()

    input: float | None = None
    output: float | None = None
    cache_read: float | None = None
    cache_write: float | None = None


class Modalities(ModelsDevBaseModel):
    _logged_extra_keys: ClassVar[set[str]] = set()

    input: list[str] = Field(default_factory=list[str])
    output: list[str] = Field(default_factory=list[str])


class Model(ModelsDevBaseModel):
    _logged_extra_keys: ClassVar[set[str]] = set()

    id: str | None = None
    name: str | None = None
    family: str | None = None
    attachment: bool | None = None
    reasoning: bool | None = None
    tool_call: bool | None = None
    structured_output: bool | None = None
    temperature: bool | None = None
    knowledge: str | None = None
    release_date: str | None = None
    last_updated: str | None = None
    open_weights: bool | None = None
    status: str | None = None
    limit: Limits | None = None
    cost: Cost | None = None
    modalities: Modalities | None = None


class Provider(ModelsDevBaseModel):
    """A provider entry; models stay raw so one bad model does not sink the provider."""

    _logged_extra_keys: ClassVar[set[str]] = set()

    id: str | None = None
    name: str | None = None
    env: list[str] = Field(default_factory=list[str])
    npm: str | None = None
    api: str | None = None
    doc: str | None = None
    models: dict[str, object] = Field(default_factory=dict[str, object])


class Catalogue(RootModel[dict[str, object]]):
    """Top-level response: provider id -> provider payload."""
