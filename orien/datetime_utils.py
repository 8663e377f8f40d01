"""Utility functions for date/time operations."""

from __future__ import annotations

from datetime import UTC, datetime


def ensure_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on round-trip)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def format_now(now: datetime | None = None) -> str:
    """Human-readable timestamp used in prompt annotations."""
    now = ensure_utc(now) if now else datetime.now(UTC)
    return now.strftime("%A, %B %d, %Y at %I:%M %p UTC")


def format_elapsed(seconds: float | None) -> str:
    """Describe an elapsed duration for prompts, e.g. '3.5 hours' or 'never'."""
    if seconds is None:
        return "never"
    hours = seconds / 3600
    if hours >= 48:
        return f"{hours / 24:.1f} days"
    return f"{hours:.1f} hours"
