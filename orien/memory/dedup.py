"""Near-duplicate detection for saved facts."""

import re

from orien.constants import FACT_KEY_LENGTH, FACT_WORD_OVERLAP_THRESHOLD

_WORD_RE = re.compile(r"\w+")


def normalize_fact(text: str) -> str:
    """Lowercase and collapse whitespace."""
    return " ".join(text.lower().split())


def fact_key(text: str) -> str:
    """Identity key of a fact: its first 50 normalized characters."""
    return normalize_fact(text)[:FACT_KEY_LENGTH]


def word_overlap_ratio(new_fact: str, existing_fact: str) -> float:
    """Share of the new fact's words that also appear in the existing fact."""
    new_words = _WORD_RE.findall(normalize_fact(new_fact))
    if not new_words:
        return 0.0
    existing_words = set(_WORD_RE.findall(normalize_fact(existing_fact)))
    matched = sum(1 for word in new_words if word in existing_words)
    return matched / len(new_words)


def is_near_duplicate(new_fact: str, existing_fact: str) -> bool:
    """True when the prefixes match or the word overlap exceeds the threshold."""
    if fact_key(new_fact) == fact_key(existing_fact):
        return True
    return word_overlap_ratio(new_fact, existing_fact) > FACT_WORD_OVERLAP_THRESHOLD
