"""Public interface for the models.dev adapter."""

from __future__ import annotations

from .client import ModelsDevAdapter
from .schema import Catalogue, Model, Provider
from .translator import translate_catalogue, translate_model

__all__ = [
    "Catalogue",
    "Model",
    "ModelsDevAdapter",
    "Provider",
    "translate_catalogue",
    "translate_model",
]
