from __future__ import annotations

from chat_relay.core.rules import strip_bot_mention
from chat_relay.infra.transport import InboundMessage

from .models import ReplyState


def build_initial_state(message: InboundMessage) -> ReplyState:
    return {
        "chat_id": int(message.chat_id),
        "user_id": int(message.user_id),
        "user_name": str(message.user_name or ""),
        "text": strip_bot_mention(str(message.text or "")),
        "system_prompt": "",
        "placeholder_id": 0,
        "response": "",
        "error": "",
        "delivery": {},
    }
