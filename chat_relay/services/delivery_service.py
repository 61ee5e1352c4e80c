from __future__ import annotations

import asyncio
import logging

from chat_relay.core.errors import TransportDeliveryFailure
from chat_relay.core.text import MAX_MESSAGE_LENGTH, split_message
from chat_relay.pipeline.models import DeliveryResult, SendOutcome

SEND_ERROR_TEXT = "❌ Ошибка при отправке ответа"


class DeliveryService:
    """Sends long texts as ordered chunks, one delivery per chat at a time."""

    def __init__(self, transport, *, max_length: int = MAX_MESSAGE_LENGTH, chunk_delay_seconds: float = 0.1):
        self.transport = transport
        self.max_length = int(max_length)
        self.chunk_delay_seconds = float(chunk_delay_seconds)
        self.log = logging.getLogger("chat_relay_bot")
        self._locks: dict[int, asyncio.Lock] = {}

    def get_lock(self, chat_id: int) -> asyncio.Lock:
        key = int(chat_id or 0)
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    async def send_chunk(self, chat_id: int, text: str) -> SendOutcome:
        try:
            message_id = await self.transport.send_message(chat_id, text, True)
            return SendOutcome(message_id=message_id, mode="formatted")
        except TransportDeliveryFailure as e:
            self.log.warning("Formatted send failed chat_id=%s, trying plain text: %s", chat_id, e)
        message_id = await self.transport.send_message(chat_id, text, False)
        return SendOutcome(message_id=message_id, mode="plain")

    async def _send_chunks(self, chat_id: int, chunks: list[str], result: DeliveryResult) -> None:
        async with self.get_lock(chat_id):
            for index, chunk in enumerate(chunks):
                if index > 0 and self.chunk_delay_seconds > 0:
                    await asyncio.sleep(self.chunk_delay_seconds)
                try:
                    outcome = await self.send_chunk(chat_id, chunk)
                except TransportDeliveryFailure as e:
                    self.log.error("Failed to send chunk %s/%s chat_id=%s: %s", index + 1, len(chunks), chat_id, e)
                    raise TransportDeliveryFailure(f"failed to send message chunk {index}: {e}") from e
                result.outcomes.append(outcome)
                self.log.debug(
                    "Chunk %s/%s sent chat_id=%s id=%s mode=%s",
                    index + 1,
                    len(chunks),
                    chat_id,
                    outcome.message_id,
                    outcome.mode,
                )

    async def deliver(self, chat_id: int, text: str) -> DeliveryResult:
        """Send ``text`` in chunks. Never raises; on failure tries a short plain notice."""
        chunks = split_message(text, self.max_length)
        result = DeliveryResult(chunks_total=len(chunks))
        self.log.info("Sending message to chat_id=%s length=%s chunks=%s", chat_id, len(text), len(chunks))
        try:
            await self._send_chunks(chat_id, chunks, result)
            return result
        except TransportDeliveryFailure as e:
            self.log.error("Failed to send response chat_id=%s: %s", chat_id, e)
            result.error = str(e)
        try:
            await self.transport.send_message(chat_id, SEND_ERROR_TEXT, False)
        except TransportDeliveryFailure as e:
            self.log.error("Failed to send error message chat_id=%s: %s", chat_id, e)
        return result
