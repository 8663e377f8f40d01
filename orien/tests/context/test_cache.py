"""Tests for the cache breakpoint tracker and cache_control annotation."""

import pytest

from orien.context import CacheBreakpointTracker, InMemoryBreakpointStore, apply_cache_control


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def _messages(count: int, content: str = "hello") -> list[dict]:
    roles = ["user", "assistant"]
    return [
        {"role": roles[i % 2], "content": content, "id": i + 1} for i in range(count)
    ]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tracker(clock):
    return CacheBreakpointTracker(InMemoryBreakpointStore(), clock=clock)


def test_skipped_for_new_conversation(tracker):
    assert tracker.resolve("new", _messages(10)) is None
    assert tracker.resolve(None, _messages(10)) is None


def test_skipped_for_short_history(tracker):
    assert tracker.resolve("c1", _messages(3)) is None


def test_skipped_when_message_lacks_id(tracker):
    messages = _messages(6)
    messages[-1].pop("id")
    assert tracker.resolve("c1", messages) is None


def test_fresh_anchor_leaves_three_uncached(tracker):
    plan = tracker.resolve("c1", _messages(8))

    assert plan is not None
    assert not plan.reused
    assert plan.anchor_message_id == 5


def test_reuse_within_ttl_keeps_maxima_and_timestamp(tracker, clock):
    plan = tracker.resolve("c1", _messages(8))
    tracker.commit(plan, max_fact_id=5, max_summary_id=2)

    clock.now += 120
    reused = tracker.resolve("c1", _messages(10))

    assert reused.reused
    assert reused.anchor_message_id == 5
    assert reused.breakpoint.max_fact_id == 5
    state = tracker.commit(reused, max_fact_id=9, max_summary_id=9)
    assert state.max_fact_id == 5
    assert state.timestamp == 1000.0


def test_expired_entry_replaced(tracker, clock):
    tracker.commit(tracker.resolve("c1", _messages(8)), 1, 1)

    clock.now += 301
    plan = tracker.resolve("c1", _messages(10))

    assert not plan.reused
    assert plan.anchor_message_id == 7


def test_anchor_outside_window_replaced(tracker):
    tracker.commit(tracker.resolve("c1", _messages(8)), 1, 1)

    window = _messages(20)[10:]
    plan = tracker.resolve("c1", window)

    assert not plan.reused
    assert plan.anchor_message_id == 17


def test_cache_control_applied_for_claude():
    system = {"role": "system", "content": "x" * 5000}
    messages = _messages(6)

    annotated = apply_cache_control(system, messages, 2, "anthropic/claude-sonnet-4.5")

    assert annotated[1]["content"] == [
        {"type": "text", "text": "hello", "cache_control": {"type": "ephemeral"}}
    ]
    assert annotated[0]["content"] == "hello"
    assert messages[1]["content"] == "hello"


def test_cache_control_skipped_below_minimum():
    system = {"role": "system", "content": "x" * 1000}
    messages = _messages(6)
    assert apply_cache_control(system, messages, 2, "anthropic/claude-sonnet-4.5") is messages


def test_larger_minimum_for_opus_and_haiku():
    system = {"role": "system", "content": "x" * 8000}
    messages = _messages(6)

    assert apply_cache_control(system, messages, 2, "anthropic/claude-opus-4.5") is messages
    assert apply_cache_control(system, messages, 2, "anthropic/claude-sonnet-4.5") is not messages


def test_cache_control_skipped_for_other_providers():
    system = {"role": "system", "content": "x" * 50000}
    messages = _messages(6)
    assert apply_cache_control(system, messages, 2, "openai/gpt-4o") is messages
