"""HTTP API for Orien."""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from aiohttp import web
from pydantic import ValidationError

from orien.agents import ChatAgent, ChatRequest, WakeupAgent
from orien.constants import NEW_CONVERSATION_ID
from orien.database import Database
from orien.database.models import ConversationMessage
from orien.errors import ProviderError
from orien.responses import OrienResponse
from orien.server.models import AutosaveRequest

if TYPE_CHECKING:
    from orien.scheduler import BackgroundScheduler

logger = logging.getLogger(__name__)


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def _serialize_message(message: ConversationMessage) -> dict[str, Any]:
    return {
        "id": message.seq,
        "role": message.role,
        "content": message.content,
        "timestamp": _iso(message.timestamp),
        "model": message.model,
    }


class OrienServer:
    """aiohttp application exposing the chat endpoint and its companions."""

    def __init__(
        self,
        db: Database,
        chat_agent: ChatAgent,
        wakeup_agent: WakeupAgent | None = None,
        scheduler: BackgroundScheduler | None = None,
    ):
        self.db = db
        self.chat_agent = chat_agent
        self.wakeup_agent = wakeup_agent
        self.scheduler = scheduler
        self._runner: web.AppRunner | None = None

    def build_app(self) -> web.Application:
        """Create the aiohttp application with all routes registered."""
        app = web.Application()
        app.router.add_post("/api/chat", self._handle_chat)
        app.router.add_get("/api/personas/{persona_id}/memory", self._handle_memory)
        app.router.add_delete(
            "/api/personas/{persona_id}/memory/facts/{fact_id}", self._handle_delete_fact
        )
        app.router.add_post("/api/conversations/autosave", self._handle_autosave)
        app.router.add_get("/api/state", self._handle_state)
        app.router.add_get("/api/notifications/unread", self._handle_unread_notifications)
        app.router.add_post("/api/agent/check", self._handle_agent_check)
        app.router.add_get("/api/health", self._handle_health)
        return app

    async def start(self, host: str, port: int) -> None:
        """Start serving on host:port."""
        self._runner = web.AppRunner(self.build_app())
        await self._runner.setup()
        site = web.TCPSite(self._runner, host, port)
        await site.start()
        logger.info("HTTP server listening on %s:%d", host, port)

    async def stop(self) -> None:
        """Stop serving and release the listening socket."""
        if self._runner:
            await self._runner.cleanup()
            self._runner = None

    # ── Handlers ──────────────────────────────────────────────────────────────

    async def _handle_chat(self, request: web.Request) -> web.Response:
        try:
            body = await request.json()
            chat_request = ChatRequest.model_validate(body)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Rejected chat request: %s", e)
            return web.json_response(
                {"error": OrienResponse.INVALID_REQUEST.format(error=e)}, status=400
            )

        if self.scheduler:
            self.scheduler.notify_message()
            self.scheduler.notify_foreground_start()
        try:
            result = await self.chat_agent.chat(chat_request)
        except ProviderError as e:
            logger.error("Chat failed: %s", e)
            return web.json_response({"error": str(e)}, status=500)
        finally:
            if self.scheduler:
                self.scheduler.notify_foreground_end()

        return web.json_response(result.to_response())

    async def _handle_memory(self, request: web.Request) -> web.Response:
        try:
            persona_id = int(request.match_info["persona_id"])
        except ValueError:
            return web.json_response({"error": OrienResponse.PERSONA_NOT_FOUND}, status=404)

        if self.db.personas.get(persona_id) is None:
            return web.json_response({"error": OrienResponse.PERSONA_NOT_FOUND}, status=404)

        memory = self.db.memory.get_memory(persona_id)
        return web.json_response(
            {
                "facts": [
                    {
                        "id": f.id,
                        "text": f.text,
                        "timestamp": _iso(f.timestamp),
                        "sourceConversation": f.source_conversation,
                    }
                    for f in memory.facts
                ],
                "summaries": [
                    {
                        "id": s.id,
                        "text": s.text,
                        "timestamp": _iso(s.timestamp),
                        "conversationId": s.conversation_id,
                    }
                    for s in memory.summaries
                ],
                "manualFacts": memory.manual_facts,
                "autoFacts": [f.model_dump(mode="json", by_alias=True) for f in memory.auto_facts],
                "currentSummary": memory.current_summary,
            }
        )

    async def _handle_delete_fact(self, request: web.Request) -> web.Response:
        try:
            persona_id = int(request.match_info["persona_id"])
            fact_id = int(request.match_info["fact_id"])
        except ValueError:
            return web.json_response({"error": OrienResponse.FACT_NOT_FOUND}, status=404)

        if not self.db.memory.delete_fact(persona_id, fact_id):
            return web.json_response({"error": OrienResponse.FACT_NOT_FOUND}, status=404)
        return web.json_response({"deleted": fact_id})

    async def _handle_autosave(self, request: web.Request) -> web.Response:
        try:
            body = AutosaveRequest.model_validate(await request.json())
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning("Rejected autosave request: %s", e)
            return web.json_response(
                {"error": OrienResponse.INVALID_REQUEST.format(error=e)}, status=400
            )

        if body.conversation_id in (None, NEW_CONVERSATION_ID):
            conversation = self.db.conversations.create(
                title=body.title or "New Conversation",
                persona_id=body.persona_id,
                model=body.model,
            )
        else:
            try:
                conversation = self.db.conversations.get(int(body.conversation_id))
            except ValueError:
                conversation = None
            if conversation is None:
                return web.json_response(
                    {"error": OrienResponse.CONVERSATION_NOT_FOUND}, status=404
                )

        assert conversation.id is not None
        unsaved = [m.to_store_dict() for m in body.unsaved()]
        if unsaved:
            self.db.conversations.append_messages(conversation.id, unsaved)

        stored = self.db.conversations.get_messages(conversation.id)
        return web.json_response(
            {
                "conversationId": str(conversation.id),
                "messages": [_serialize_message(m) for m in stored],
            }
        )

    async def _handle_state(self, request: web.Request) -> web.Response:
        state = self.db.state.get()
        return web.json_response(
            {
                "lastActivity": _iso(state.last_activity),
                "isOnline": state.is_online,
                "lastMessage": state.last_message,
                "status": state.status,
                "conversationCount": state.conversation_count,
                "lastCheck": _iso(state.last_check),
                "activeFields": state.get_active_fields(),
            }
        )

    async def _handle_unread_notifications(self, request: web.Request) -> web.Response:
        return web.json_response(
            [
                {
                    "id": n.id,
                    "personaId": n.persona_id,
                    "personaName": n.persona_name,
                    "personaAvatar": n.persona_avatar,
                    "message": n.message,
                    "urgency": n.urgency,
                    "read": n.read,
                    "createdAt": _iso(n.created_at),
                }
                for n in self.db.notifications.get_unread()
            ]
        )

    async def _handle_agent_check(self, request: web.Request) -> web.Response:
        if self.wakeup_agent is None:
            return web.json_response({"checked": False})
        checked = await self.wakeup_agent.execute()
        return web.json_response({"checked": checked})

    async def _handle_health(self, request: web.Request) -> web.Response:
        healthy = self.db.ping()
        return web.json_response(
            {"status": "ok" if healthy else "error", "database": healthy},
            status=200 if healthy else 503,
        )
