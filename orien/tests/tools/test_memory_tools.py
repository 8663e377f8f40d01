"""Tests for save_fact and save_summary guards."""

from orien.tools import ToolCall, ToolContext, ToolExecutor, build_chat_tools


def _setup(db, persona):
    context = ToolContext(persona=persona, conversation_id="1")
    executor = ToolExecutor(build_chat_tools(db, context), timeout=5.0)
    return context, executor


async def test_save_fact_stores_with_next_id(db, persona):
    _, executor = _setup(db, persona)

    result = await executor.execute(ToolCall(tool="save_fact", arguments={"fact": "Likes tea"}))

    assert result.result == "Fact saved (id 1)."
    [fact] = db.memory.get_memory(persona.id).facts
    assert fact.text == "Likes tea"
    assert fact.source_conversation == "1"


async def test_same_fact_twice_stores_once(db, persona):
    _, executor = _setup(db, persona)
    call = ToolCall(tool="save_fact", arguments={"fact": "User lives in Lisbon"})

    first = await executor.execute(call)
    second = await executor.execute(call)

    assert not first.skipped
    assert second.skipped
    assert second.error is None
    assert len(db.memory.get_memory(persona.id).facts) == 1


async def test_near_duplicate_across_requests_is_skipped(db, persona):
    db.memory.add_fact(persona.id, "The user really loves green tea in the morning")
    _, executor = _setup(db, persona)

    result = await executor.execute(
        ToolCall(tool="save_fact", arguments={"fact": "user loves green tea"})
    )

    assert result.skipped
    assert len(db.memory.get_memory(persona.id).facts) == 1


async def test_only_one_summary_per_request(db, persona):
    context, executor = _setup(db, persona)

    first = await executor.execute(ToolCall(tool="save_summary", arguments={"summary": "One"}))
    second = await executor.execute(ToolCall(tool="save_summary", arguments={"summary": "Two"}))

    assert first.result == "Summary saved (id 1)."
    assert second.skipped
    assert context.summary_saved
    assert [s.text for s in db.memory.get_memory(persona.id).summaries] == ["One"]


async def test_store_failure_is_a_tool_error(db, persona, monkeypatch):
    _, executor = _setup(db, persona)
    monkeypatch.setattr(db.memory, "add_fact", lambda *args, **kwargs: None)

    result = await executor.execute(ToolCall(tool="save_fact", arguments={"fact": "Anything"}))

    assert result.error
    assert not result.skipped


async def test_send_notification_creates_record(db, persona):
    _, executor = _setup(db, persona)

    result = await executor.execute(
        ToolCall(
            tool="send_notification",
            arguments={"message": "Thinking of you", "urgency": "medium"},
        )
    )

    assert result.error is None
    [notification] = db.notifications.get_unread()
    assert notification.message == "Thinking of you"
    assert notification.urgency == "medium"
    assert notification.persona_avatar == "💙"


async def test_get_loop_state(db, persona):
    db.state.record_activity("hello there")
    _, executor = _setup(db, persona)

    result = await executor.execute(ToolCall(tool="get_loop_state"))

    assert '"isOnline": true' in result.result
    assert "hello there" in result.result
