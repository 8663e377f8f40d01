"""Presence tools: send_notification and get_loop_state."""

import json

from orien.constants import ToolName, Urgency
from orien.responses import OrienResponse
from orien.tools.base import Tool
from orien.tools.context import ToolContext
from orien.tools.models import NoArgs, SendNotificationArgs


class SendNotificationTool(Tool):
    name = ToolName.SEND_NOTIFICATION
    description = (
        "Send the user a notification from you. Use sparingly, for things worth "
        "interrupting them for."
    )
    parameters = {
        "type": "object",
        "properties": {
            "message": {"type": "string", "description": "The notification text"},
            "urgency": {
                "type": "string",
                "enum": [u.value for u in Urgency],
                "description": "How urgent the notification is (default low)",
            },
        },
        "required": ["message"],
    }
    args_model = SendNotificationArgs
    salvage_field = "message"

    def __init__(self, db, context: ToolContext):
        self.db = db
        self.context = context

    async def execute(self, args: SendNotificationArgs) -> str:
        persona = self.context.persona
        self.db.notifications.add(
            persona_id=persona.id,
            persona_name=persona.name,
            persona_avatar=persona.avatar,
            message=args.message,
            urgency=args.urgency,
        )
        return OrienResponse.NOTIFICATION_SENT.format(urgency=args.urgency)


class GetLoopStateTool(Tool):
    """Report the user's presence: last activity, online flag and active fields."""

    name = ToolName.GET_LOOP_STATE
    description = "Check whether the user is online and when they were last active."
    args_model = NoArgs

    def __init__(self, db):
        self.db = db

    async def execute(self, args: NoArgs) -> str:
        state = self.db.state.get()
        return json.dumps(
            {
                "lastActivity": state.last_activity.isoformat() if state.last_activity else None,
                "isOnline": state.is_online,
                "lastMessage": state.last_message,
                "status": state.status,
                "conversationCount": state.conversation_count,
                "activeFields": state.get_active_fields(),
            }
        )
