"""Tests for fact near-duplicate detection."""

from orien.memory import fact_key, is_near_duplicate, normalize_fact
from orien.memory.dedup import word_overlap_ratio


def test_normalize_collapses_whitespace_and_case():
    assert normalize_fact("  User   LIKES\ttea \n") == "user likes tea"


def test_fact_key_is_first_fifty_normalized_chars():
    text = "The user " + "x" * 100
    assert fact_key(text) == normalize_fact(text)[:50]
    assert len(fact_key(text)) == 50


def test_same_prefix_is_duplicate():
    base = "User's favourite band is the one they saw live in Berlin"
    assert is_near_duplicate(base + " in 2019", base + " last summer")


def test_high_word_overlap_is_duplicate():
    """Every word of the new fact appears in the existing one."""
    assert is_near_duplicate("user loves green tea", "The user really loves green tea daily")


def test_overlap_at_threshold_is_not_duplicate():
    """Exactly 80% overlap does not exceed the threshold."""
    new = "alpha beta gamma delta epsilon"
    existing = "alpha beta gamma delta zeta"
    assert word_overlap_ratio(new, existing) == 0.8
    assert not is_near_duplicate(new, existing)


def test_unrelated_facts_are_not_duplicates():
    assert not is_near_duplicate("User has a cat named Miso", "User works as a nurse")


def test_empty_fact_has_zero_overlap():
    assert word_overlap_ratio("   ", "anything") == 0.0
