"""Tests for conversation message ids."""


def test_message_ids_are_contiguous_across_appends(db):
    conversation = db.conversations.create()

    first = db.conversations.append_messages(
        conversation.id,
        [{"role": "user", "content": "hi"}, {"role": "assistant", "content": "hello"}],
    )
    second = db.conversations.append_messages(
        conversation.id, [{"role": "user", "content": "how are you?"}]
    )

    assert [m.seq for m in first] == [1, 2]
    assert [m.seq for m in second] == [3]
    assert [m.seq for m in db.conversations.get_messages(conversation.id)] == [1, 2, 3]


def test_append_parses_iso_timestamps(db):
    conversation = db.conversations.create()
    [message] = db.conversations.append_messages(
        conversation.id,
        [{"role": "user", "content": "hi", "timestamp": "2025-01-02T03:04:05Z"}],
    )
    assert message.timestamp.year == 2025
    assert message.timestamp.hour == 3


def test_append_to_missing_conversation(db):
    assert db.conversations.append_messages(42, [{"role": "user", "content": "hi"}]) == []
