"""Persona memory views and dedup rules."""

from orien.memory.dedup import fact_key, is_near_duplicate, normalize_fact
from orien.memory.legacy import merge_legacy_and_canonical
from orien.memory.models import (
    FactEntry,
    LegacyAutoFact,
    MemoryView,
    SummaryEntry,
    UnifiedMemory,
)

__all__ = [
    "FactEntry",
    "LegacyAutoFact",
    "MemoryView",
    "SummaryEntry",
    "UnifiedMemory",
    "fact_key",
    "is_near_duplicate",
    "merge_legacy_and_canonical",
    "normalize_fact",
]
