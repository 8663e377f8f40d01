"""Read path for legacy memory fields (manualFacts, autoFacts, currentSummary)."""

from orien.constants import LEGACY_RECENT_LIMIT
from orien.memory.models import MemoryView, UnifiedMemory


def merge_legacy_and_canonical(memory: MemoryView) -> UnifiedMemory:
    """Merge legacy fields into a unified view without double-reporting.

    Legacy facts are only surfaced when no canonical fact exists, and the
    legacy summary only when no canonical summary exists.
    """
    unified = UnifiedMemory(facts=list(memory.facts), summaries=list(memory.summaries))

    if not memory.facts:
        unified.manual_notes = [f for f in memory.manual_facts if f.strip()]
        recent = sorted(memory.auto_facts, key=lambda f: f.timestamp, reverse=True)
        unified.recent_legacy = [f.fact for f in recent[:LEGACY_RECENT_LIMIT]]

    if not memory.summaries and memory.current_summary:
        unified.legacy_summary = memory.current_summary

    return unified
