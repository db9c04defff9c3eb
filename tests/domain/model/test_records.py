from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from benchfuse.domain.model import (
    RawRecord,
    Snapshot,
    SourceRole,
    TriState,
    composite_key,
    fingerprint_records,
)


def _record(provider: str, model: str, **attributes: object) -> RawRecord:
    return RawRecord(provider_key=provider, model_key=model, attributes=attributes)


def test_composite_key_is_lowercase_and_trimmed() -> None:
    assert composite_key(" OpenAI ", "GPT-4o") == "openai/gpt-4o"
    assert _record("Meta", "Llama-3-70B").composite_key == "meta/llama-3-70b"


def test_raw_record_keeps_source_casing() -> None:
    record = _record("OpenAI", "GPT-4o")

    assert record.provider_key == "OpenAI"
    assert record.model_key == "GPT-4o"


def test_raw_record_attributes_are_read_only() -> None:
    source = {"tool_call": True}
    record = RawRecord(provider_key="openai", model_key="gpt-4o", attributes=source)
    source["tool_call"] = False

    assert record.get("tool_call") is True
    with pytest.raises(TypeError):
        record.attributes["tool_call"] = False  # type: ignore[index]


def test_fingerprint_is_stable_and_order_sensitive() -> None:
    first = _record("openai", "gpt-4o", price=1.0, modalities=("text",))
    second = _record("meta", "llama-3-70b", price=None)

    assert fingerprint_records([first, second]) == fingerprint_records([first, second])
    assert fingerprint_records([first, second]) != fingerprint_records([second, first])


def test_fingerprint_ignores_attribute_insertion_order() -> None:
    left = RawRecord("openai", "gpt-4o", {"a": 1, "b": 2})
    right = RawRecord("openai", "gpt-4o", {"b": 2, "a": 1})

    assert fingerprint_records([left]) == fingerprint_records([right])


def test_fingerprint_changes_with_content() -> None:
    before = fingerprint_records([_record("openai", "gpt-4o", tool_call=None)])
    after = fingerprint_records([_record("openai", "gpt-4o", tool_call=True)])

    assert before != after


def test_snapshot_create_computes_fingerprint_and_age() -> None:
    fetched_at = datetime(2025, 1, 1, tzinfo=UTC)
    records = [_record("openai", "gpt-4o")]

    snapshot = Snapshot.create(SourceRole.SECONDARY, records, fetched_at=fetched_at)

    assert len(snapshot) == 1
    assert snapshot.fingerprint == fingerprint_records(records)
    assert snapshot.age(fetched_at + timedelta(hours=3)) == timedelta(hours=3)


@pytest.mark.parametrize(
    ("value", "expected"),
    [(True, TriState.TRUE), (False, TriState.FALSE), (None, TriState.UNKNOWN)],
)
def test_tristate_round_trips_optional_bool(value: bool | None, expected: TriState) -> None:
    state = TriState.from_optional(value)

    assert state is expected
    assert state.as_optional() is value
    assert state.is_known is (value is not None)
