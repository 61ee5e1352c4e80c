from __future__ import annotations

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

from vkbottle.bot import Bot

from chat_relay.core.errors import TransportDeliveryFailure
from chat_relay.core.ids import coerce_int, coerce_positive_int
from chat_relay.core.rules import strip_bot_mention
from chat_relay.core.text import markdown_to_format_data

from .transport import InboundMessage

DEFAULT_USER_NAME = "друг"


def _unwrap(response: Any) -> Any:
    if isinstance(response, dict) and "response" in response:
        return response["response"]
    return response


def extract_sent_message_id(response: Any) -> int:
    value = _unwrap(response)
    if isinstance(value, list):
        value = value[0] if value else None
    if isinstance(value, dict):
        return coerce_positive_int(value.get("conversation_message_id")) or coerce_positive_int(
            value.get("message_id")
        )
    return coerce_positive_int(value)


class VkTransport:
    """MessageTransport over the VK Bots Long Poll API."""

    def __init__(self, bot: Bot):
        self.bot = bot
        self.log = logging.getLogger("chat_relay_bot")
        self._names: dict[int, str] = {}

    @classmethod
    def from_token(cls, token: str) -> "VkTransport":
        return cls(Bot(token=token))

    async def _call(self, method: str, payload: dict[str, Any]) -> Any:
        try:
            return await self.bot.api.request(method, payload)
        except Exception as e:
            raise TransportDeliveryFailure(f"{method} failed: {e}") from e

    async def send_message(self, chat_id: int, text: str, formatted: bool = True) -> int:
        payload: dict[str, Any] = {
            "peer_ids": str(int(chat_id)),
            "message": str(text or ""),
            "random_id": 0,
        }
        if formatted:
            plain, format_data = markdown_to_format_data(payload["message"])
            payload["message"] = plain
            if format_data is not None:
                payload["format_data"] = json.dumps(format_data, ensure_ascii=False)
        response = await self._call("messages.send", payload)
        return extract_sent_message_id(response)

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        await self._call(
            "messages.delete",
            {"peer_id": int(chat_id), "cmids": str(int(message_id)), "delete_for_all": 1},
        )

    async def send_typing(self, chat_id: int) -> None:
        await self._call("messages.setActivity", {"peer_id": int(chat_id), "type": "typing"})

    async def resolve_user_name(self, user_id: int) -> str:
        cached = self._names.get(user_id)
        if cached:
            return cached
        try:
            response = _unwrap(await self.bot.api.request("users.get", {"user_ids": str(user_id)}))
        except Exception as e:
            self.log.debug("users.get failed user_id=%s: %s", user_id, e)
            return DEFAULT_USER_NAME
        name = ""
        if isinstance(response, list) and response and isinstance(response[0], dict):
            name = str(response[0].get("first_name") or "").strip()
        if not name:
            return DEFAULT_USER_NAME
        self._names[user_id] = name
        return name

    async def parse_update(self, update: dict[str, Any]) -> InboundMessage | None:
        if update.get("type") != "message_new":
            return None
        obj = update.get("object") or {}
        message = obj.get("message", obj) if isinstance(obj, dict) else {}
        if not isinstance(message, dict):
            return None
        text = str(message.get("text") or "").strip()
        chat_id = coerce_int(message.get("peer_id"))
        user_id = coerce_int(message.get("from_id"))
        if not strip_bot_mention(text) or chat_id <= 0 or user_id <= 0:
            return None
        user_name = await self.resolve_user_name(user_id)
        return InboundMessage.from_text(chat_id=chat_id, user_id=user_id, user_name=user_name, text=text)

    async def receive_updates(self) -> AsyncIterator[InboundMessage]:
        async for event in self.bot.polling.listen():
            for update in event.get("updates", []) or []:
                message = await self.parse_update(update)
                if message is not None:
                    self.log.info("Update from user_id=%s chat_id=%s: %s", message.user_id, message.chat_id, message.text)
                    yield message
