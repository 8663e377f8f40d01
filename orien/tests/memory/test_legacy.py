"""Tests for merging legacy memory fields into the canonical view."""

from datetime import UTC, datetime, timedelta

from orien.memory import (
    FactEntry,
    LegacyAutoFact,
    MemoryView,
    SummaryEntry,
    merge_legacy_and_canonical,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def _auto_facts(count: int) -> list[LegacyAutoFact]:
    return [
        LegacyAutoFact(fact=f"auto {i}", timestamp=NOW - timedelta(hours=i)) for i in range(count)
    ]


def test_legacy_facts_used_when_no_canonical_facts():
    memory = MemoryView(manual_facts=["likes jazz"], auto_facts=_auto_facts(7))

    unified = merge_legacy_and_canonical(memory)

    assert unified.manual_notes == ["likes jazz"]
    assert unified.recent_legacy == ["auto 0", "auto 1", "auto 2", "auto 3", "auto 4"]


def test_legacy_facts_hidden_once_canonical_facts_exist():
    memory = MemoryView(
        facts=[FactEntry(id=1, text="canonical", timestamp=NOW)],
        manual_facts=["likes jazz"],
        auto_facts=_auto_facts(2),
    )

    unified = merge_legacy_and_canonical(memory)

    assert [f.text for f in unified.facts] == ["canonical"]
    assert unified.manual_notes == []
    assert unified.recent_legacy == []


def test_legacy_summary_only_without_canonical_summaries():
    legacy_only = MemoryView(current_summary="We talked about tea.")
    assert merge_legacy_and_canonical(legacy_only).legacy_summary == "We talked about tea."

    with_canonical = MemoryView(
        summaries=[SummaryEntry(id=1, text="new", timestamp=NOW)],
        current_summary="We talked about tea.",
    )
    assert merge_legacy_and_canonical(with_canonical).legacy_summary is None


def test_legacy_auto_fact_accepts_camel_case_conversation_id():
    fact = LegacyAutoFact.model_validate(
        {"fact": "x", "timestamp": NOW.isoformat(), "conversationId": "abc"}
    )
    assert fact.conversation_id == "abc"
