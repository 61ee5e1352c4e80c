from __future__ import annotations

import logging
import time

import aiosqlite

from chat_relay.core.errors import RelayError, TransportDeliveryFailure
from chat_relay.core.text import preview_text
from chat_relay.infra.transport import InboundMessage
from chat_relay.pipeline import DeliveryResult, ReplyState, build_initial_state, build_reply_graph

from .style_service import DEFAULT_STYLE, STYLE_PROMPTS

THINKING_TEXT = "🤔 Обрабатываю ваш запрос..."


def format_completion_error(error: RelayError) -> str:
    return f"❌ Произошла ошибка при обращении к ИИ:\n\n`{error.user_message}`\n\nПопробуйте еще раз позже."


class ReplyService:
    """Freeform message flow: placeholder, completion, cleanup, chunked delivery."""

    def __init__(self, *, transport, completion, styles, delivery, state):
        self.transport = transport
        self.completion = completion
        self.styles = styles
        self.delivery = delivery
        self.state = state
        self.log = logging.getLogger("chat_relay_bot")
        self._graph = None

    @property
    def graph(self):
        if self._graph is None:
            self._graph = build_reply_graph(self)
        return self._graph

    async def handle_message(self, message: InboundMessage) -> DeliveryResult:
        self.log.info(
            "Processing message user=%s (%s) chat_id=%s: %s",
            message.user_name,
            message.user_id,
            message.chat_id,
            message.text,
        )
        result_state = await self.graph.ainvoke(build_initial_state(message))
        result = DeliveryResult.from_value(dict(result_state or {}).get("delivery"))
        self.log.info("Message processed chat_id=%s delivered=%s", message.chat_id, int(result.delivered))
        return result

    async def prepare(self, state: ReplyState) -> ReplyState:
        chat_id = int(state.get("chat_id") or 0)
        user_id = int(state.get("user_id") or 0)

        count = await self.state.increment_messages(user_id)
        self.log.debug("User message count user_id=%s count=%s", user_id, count)

        try:
            await self.transport.send_typing(chat_id)
        except TransportDeliveryFailure as e:
            self.log.warning("Failed to send typing action chat_id=%s: %s", chat_id, e)

        placeholder_id = 0
        try:
            placeholder_id = int(await self.transport.send_message(chat_id, THINKING_TEXT, False) or 0)
            self.log.debug("Thinking message sent chat_id=%s id=%s", chat_id, placeholder_id)
        except TransportDeliveryFailure as e:
            self.log.warning("Failed to send thinking message chat_id=%s: %s", chat_id, e)
        return {"placeholder_id": placeholder_id}

    async def _system_prompt(self, user_id: int) -> str:
        try:
            return await self.styles.system_prompt_for(user_id)
        except aiosqlite.Error as e:
            self.log.warning("Style lookup failed user_id=%s, using %s: %s", user_id, DEFAULT_STYLE, e)
            return STYLE_PROMPTS[DEFAULT_STYLE]

    async def complete(self, state: ReplyState) -> ReplyState:
        user_id = int(state.get("user_id") or 0)
        system_prompt = await self._system_prompt(user_id)
        started = time.monotonic()
        try:
            response = await self.completion.complete(system_prompt, str(state.get("text") or ""))
        except RelayError as e:
            self.log.error("API error after %.2fs user_id=%s: %s", time.monotonic() - started, user_id, e)
            return {"system_prompt": system_prompt, "response": format_completion_error(e), "error": str(e)}
        self.log.debug("Response preview: %s", preview_text(response))
        return {"system_prompt": system_prompt, "response": response, "error": ""}

    async def cleanup(self, state: ReplyState) -> ReplyState:
        chat_id = int(state.get("chat_id") or 0)
        placeholder_id = int(state.get("placeholder_id") or 0)
        if placeholder_id <= 0:
            return {"placeholder_id": 0}
        try:
            await self.transport.delete_message(chat_id, placeholder_id)
            self.log.debug("Thinking message deleted chat_id=%s id=%s", chat_id, placeholder_id)
        except TransportDeliveryFailure as e:
            self.log.warning("Failed to delete thinking message chat_id=%s: %s", chat_id, e)
        return {"placeholder_id": 0}

    async def deliver(self, state: ReplyState) -> ReplyState:
        chat_id = int(state.get("chat_id") or 0)
        result = await self.delivery.deliver(chat_id, str(state.get("response") or ""))
        return {"delivery": result.to_dict()}
