"""Public interface for the Artificial Analysis adapter."""

from __future__ import annotations

from .client import ArtificialAnalysisAdapter
from .schema import LlmModel, LlmModelsEnvelope
from .translator import translate_model, translate_models

__all__ = [
    "ArtificialAnalysisAdapter",
    "LlmModel",
    "LlmModelsEnvelope",
    "translate_model",
    "translate_models",
]
