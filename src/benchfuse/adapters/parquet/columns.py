"""Arrow schemas for the snapshot and merged parquet files."""

from __future__ import annotations

from typing import Final

import pyarrow as pa

from benchfuse.domain.model import SourceRole

METADATA_KEY: Final[bytes] = b"benchfuse"
FORMAT_VERSION: Final[int] = 1

IDENTITY_FIELDS: Final[tuple[pa.Field, ...]] = (
    pa.field("provider_key", pa.string(), nullable=False),
    pa.field("model_key", pa.string(), nullable=False),
)

_MODALITIES = pa.list_(pa.string())

PRIMARY_ATTRIBUTES: Final[pa.Schema] = pa.schema(
    [
        pa.field("id", pa.string()),
        pa.field("name", pa.string()),
        pa.field("slug", pa.string()),
        pa.field("creator", pa.string()),
        pa.field("creator_slug", pa.string()),
        pa.field("release_date", pa.string()),
        pa.field("intelligence", pa.float64()),
        pa.field("coding", pa.float64()),
        pa.field("math", pa.float64()),
        pa.field("mmlu_pro", pa.float64()),
        pa.field("gpqa", pa.float64()),
        pa.field("hle", pa.float64()),
        pa.field("livecodebench", pa.float64()),
        pa.field("scicode", pa.float64()),
        pa.field("math_500", pa.float64()),
        pa.field("aime", pa.float64()),
        pa.field("input_price", pa.float64()),
        pa.field("output_price", pa.float64()),
        pa.field("price", pa.float64()),
        pa.field("tps", pa.float64()),
        pa.field("latency", pa.float64()),
    ]
)

SECONDARY_ATTRIBUTES: Final[pa.Schema] = pa.schema(
    [
        pa.field("provider_id", pa.string()),
        pa.field("provider_name", pa.string()),
        pa.field("model_id", pa.string()),
        pa.field("model_name", pa.string()),
        pa.field("family", pa.string()),
        pa.field("attachment", pa.bool_()),
        pa.field("reasoning", pa.bool_()),
        pa.field("tool_call", pa.bool_()),
        pa.field("structured_output", pa.bool_()),
        pa.field("temperature", pa.bool_()),
        pa.field("knowledge", pa.string()),
        pa.field("release_date", pa.string()),
        pa.field("last_updated", pa.string()),
        pa.field("open_weights", pa.bool_()),
        pa.field("status", pa.string()),
        pa.field("context_window", pa.int64()),
        pa.field("max_input_tokens", pa.int64()),
        pa.field("max_output_tokens", pa.int64()),
        pa.field("cost_input", pa.float64()),
        pa.field("cost_output", pa.float64()),
        pa.field("cost_cache_read", pa.float64()),
        pa.field("cost_cache_write", pa.float64()),
        pa.field("input_modalities", _MODALITIES),
        pa.field("output_modalities", _MODALITIES),
    ]
)

SNAPSHOT_ATTRIBUTES: Final[dict[SourceRole, pa.Schema]] = {
    SourceRole.PRIMARY: PRIMARY_ATTRIBUTES,
    SourceRole.SECONDARY: SECONDARY_ATTRIBUTES,
}


def snapshot_schema(role: SourceRole) -> pa.Schema:
    return pa.schema([*IDENTITY_FIELDS, *SNAPSHOT_ATTRIBUTES[role]])


# Capability flags are nullable booleans: null is unknown.
MERGED_SCHEMA: Final[pa.Schema] = pa.schema(
    [
        pa.field("id", pa.string(), nullable=False),
        pa.field("name", pa.string(), nullable=False),
        pa.field("slug", pa.string(), nullable=False),
        pa.field("creator", pa.string()),
        pa.field("creator_slug", pa.string(), nullable=False),
        *(
            pa.field(name, pa.float64())
            for name in (
                "intelligence",
                "coding",
                "math",
                "mmlu_pro",
                "gpqa",
                "hle",
                "livecodebench",
                "scicode",
                "math_500",
                "aime",
                "price",
                "tps",
                "latency",
                "input_price",
                "output_price",
            )
        ),
        pa.field("release_date", pa.string()),
        *(
            pa.field(name, pa.bool_())
            for name in (
                "reasoning",
                "tool_call",
                "structured_output",
                "attachment",
                "temperature",
                "open_weights",
            )
        ),
        pa.field("context_window", pa.int64()),
        pa.field("max_input_tokens", pa.int64()),
        pa.field("max_output_tokens", pa.int64()),
        pa.field("input_modalities", _MODALITIES),
        pa.field("output_modalities", _MODALITIES),
        *(
            pa.field(name, pa.string())
            for name in (
                "knowledge_cutoff",
                "last_updated",
                "family",
                "status",
                "models_dev_provider",
                "models_dev_model",
            )
        ),
        pa.field("models_dev_matched", pa.bool_(), nullable=False),
        pa.field("match_confidence", pa.string(), nullable=False),
        pa.field("input_price_source", pa.string(), nullable=False),
        pa.field("output_price_source", pa.string(), nullable=False),
        pa.field("release_date_source", pa.string(), nullable=False),
    ]
)
