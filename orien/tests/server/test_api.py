"""End-to-end tests for the HTTP API."""

import pytest
from aiohttp.test_utils import TestClient, TestServer

from orien.server import OrienServer
from orien.tests.mocks.openrouter import make_text_response, make_tool_call_response


@pytest.fixture
async def api(db, chat_agent, wakeup_agent):
    server = OrienServer(db=db, chat_agent=chat_agent, wakeup_agent=wakeup_agent)
    client = TestClient(TestServer(server.build_app()))
    await client.start_server()
    yield client
    await client.close()


async def test_chat_save_fact_end_to_end(api, mock_openrouter, db, persona):
    """A save_fact call shows up in persona memory with the next id."""
    db.memory.add_fact(persona.id, "User's favourite colour is teal")
    before = await (await api.get(f"/api/personas/{persona.id}/memory")).json()
    prior_max = max(f["id"] for f in before["facts"])

    saved = await api.post(
        "/api/conversations/autosave",
        json={"conversationId": "new", "messages": [{"role": "user", "content": "hello"}]},
    )
    conversation = await saved.json()
    mock_openrouter.set_responses(
        make_tool_call_response([("save_fact", {"fact": "User said hello"})], content="Hello!")
    )

    resp = await api.post(
        "/api/chat",
        json={
            "model": persona.model,
            "personaId": persona.id,
            "conversationId": conversation["conversationId"],
            "messages": conversation["messages"],
        },
    )

    assert resp.status == 200
    body = await resp.json()
    assert body["message"] == "Hello!"
    assert body["toolCalls"][0]["tool"] == "save_fact"
    assert body["usage"]["total_tokens"] == 30
    assert body["searchResults"] == []

    after = await (await api.get(f"/api/personas/{persona.id}/memory")).json()
    new_facts = [f for f in after["facts"] if f["id"] > prior_max]
    assert len(new_facts) == 1
    assert new_facts[0]["id"] == prior_max + 1
    assert new_facts[0]["text"] == "User said hello"


async def test_chat_notification_only(api, mock_openrouter, db, persona):
    mock_openrouter.set_responses(
        make_tool_call_response([("send_notification", {"message": "Hey"})], content="")
    )

    resp = await api.post(
        "/api/chat",
        json={
            "model": persona.model,
            "personaId": persona.id,
            "messages": [{"role": "user", "content": "hi"}],
        },
    )

    assert resp.status == 200
    assert (await resp.json())["message"] == ""
    assert len(db.notifications.get_unread()) == 1


async def test_chat_provider_error_is_500(api, mock_openrouter):
    mock_openrouter.set_responses((401, {"error": {"message": "No auth"}}))

    resp = await api.post(
        "/api/chat",
        json={"model": "openai/gpt-4o", "messages": [{"role": "user", "content": "hi"}]},
    )

    assert resp.status == 500
    assert "401" in (await resp.json())["error"]


async def test_chat_invalid_body_is_400(api, mock_openrouter):
    resp = await api.post("/api/chat", json={"messages": []})
    assert resp.status == 400
    assert mock_openrouter.requests == []


async def test_chat_search_results_in_response(api, mock_openrouter, db, persona):
    db.knowledge.add("Notes", "tea at five")

    def handler(request: dict, count: int) -> dict:
        if count == 1:
            return make_tool_call_response([("search_knowledge", {"query": "tea"})])
        return make_text_response("At five.")

    mock_openrouter.set_response_handler(handler)

    resp = await api.post(
        "/api/chat",
        json={
            "model": persona.model,
            "personaId": persona.id,
            "messages": [{"role": "user", "content": "when is tea?"}],
        },
    )

    body = await resp.json()
    assert body["message"] == "At five."
    [search] = body["searchResults"]
    assert search["matches"][0] == {"file": "Notes", "lineNumber": 1, "context": "tea at five"}


async def test_autosave_assigns_contiguous_ids(api):
    first = await (
        await api.post(
            "/api/conversations/autosave",
            json={
                "conversationId": "new",
                "messages": [
                    {"role": "user", "content": "hi"},
                    {"role": "assistant", "content": "hello"},
                ],
            },
        )
    ).json()

    second = await (
        await api.post(
            "/api/conversations/autosave",
            json={
                "conversationId": first["conversationId"],
                "messages": [*first["messages"], {"role": "user", "content": "again"}],
            },
        )
    ).json()

    assert [m["id"] for m in first["messages"]] == [1, 2]
    assert [m["id"] for m in second["messages"]] == [1, 2, 3]


async def test_autosave_unknown_conversation(api):
    resp = await api.post(
        "/api/conversations/autosave", json={"conversationId": "999", "messages": []}
    )
    assert resp.status == 404


async def test_memory_unknown_persona(api):
    resp = await api.get("/api/personas/999/memory")
    assert resp.status == 404


async def test_state_reflects_chat_activity(api, mock_openrouter):
    mock_openrouter.set_responses(make_text_response("ok"))
    await api.post(
        "/api/chat",
        json={"model": "openai/gpt-4o", "messages": [{"role": "user", "content": "ping"}]},
    )

    state = await (await api.get("/api/state")).json()

    assert state["isOnline"] is True
    assert state["lastMessage"] == "ping"
    assert state["conversationCount"] == 1


async def test_agent_check(api, mock_openrouter, db):
    db.personas.create(name="Auto", model="openai/gpt-4o", autonomy_enabled=True)
    mock_openrouter.set_responses(make_text_response("Not now."))

    resp = await api.post("/api/agent/check")

    assert (await resp.json()) == {"checked": True}
    assert len(mock_openrouter.requests) == 1


async def test_health(api):
    resp = await api.get("/api/health")
    assert resp.status == 200
    assert (await resp.json()) == {"status": "ok", "database": True}


async def test_autosave_rejects_message_without_role(api):
    resp = await api.post(
        "/api/conversations/autosave",
        json={"conversationId": "new", "messages": [{"content": "no role"}]},
    )
    assert resp.status == 400


async def test_autosave_rejects_bad_timestamp(api, db):
    resp = await api.post(
        "/api/conversations/autosave",
        json={
            "conversationId": "new",
            "messages": [{"role": "user", "content": "hi", "timestamp": "yesterday-ish"}],
        },
    )
    assert resp.status == 400


async def test_delete_fact_keeps_id_retired(api, db, persona):
    db.memory.add_fact(persona.id, "User plays chess")
    second = db.memory.add_fact(persona.id, "User dislikes olives")

    resp = await api.delete(f"/api/personas/{persona.id}/memory/facts/{second.seq}")
    assert resp.status == 200
    missing = await api.delete(f"/api/personas/{persona.id}/memory/facts/{second.seq}")
    assert missing.status == 404

    third = db.memory.add_fact(persona.id, "User grows tomatoes")
    assert third.seq == 3


async def test_unread_notifications(api, mock_openrouter, persona):
    mock_openrouter.set_responses(
        make_tool_call_response([("send_notification", {"message": "Hey", "urgency": "high"})])
    )
    await api.post(
        "/api/chat",
        json={
            "model": persona.model,
            "personaId": persona.id,
            "messages": [{"role": "user", "content": "hi"}],
        },
    )

    [notification] = await (await api.get("/api/notifications/unread")).json()

    assert notification["message"] == "Hey"
    assert notification["urgency"] == "high"
    assert notification["personaName"] == "Levo"
    assert notification["read"] is False
