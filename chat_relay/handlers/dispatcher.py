from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterable

from chat_relay.core.errors import MalformedUserInput, NotFound, RelayError
from chat_relay.infra.transport import InboundMessage

from .commands import UNKNOWN_COMMAND_TEXT, build_command_table


class Dispatcher:
    """Consumes inbound messages one at a time.

    Commands are awaited inline; every freeform message gets its own task so a
    slow completion never holds up the loop.
    """

    def __init__(self, ctx, *, commands=None):
        self.ctx = ctx
        mode = str(getattr(getattr(ctx, "config", None), "mode", "chat") or "chat")
        self.commands = commands if commands is not None else build_command_table(mode)
        self.log = logging.getLogger("chat_relay_bot")
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def run(self, updates: AsyncIterable[InboundMessage]) -> None:
        self.log.info("Bot is listening for updates...")
        async for message in updates:
            await self.dispatch(message)

    async def dispatch(self, message: InboundMessage) -> asyncio.Task | None:
        if message.is_command:
            await self.handle_command(message)
            return None
        task = asyncio.create_task(self._handle_message(message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def command_response(self, message: InboundMessage) -> str:
        handler = self.commands.get(message.command_name)
        self.log.info("Processing command /%s from user_id=%s", message.command_name, message.user_id)
        if handler is None:
            return UNKNOWN_COMMAND_TEXT
        try:
            return await handler(self.ctx, message)
        except (MalformedUserInput, NotFound) as e:
            self.log.info("Command /%s rejected user_id=%s: %s", message.command_name, message.user_id, e)
            return e.user_message
        except RelayError as e:
            self.log.warning("Command /%s failed user_id=%s: %s", message.command_name, message.user_id, e)
            return e.user_message
        except Exception as e:
            self.log.exception("Command /%s crashed user_id=%s: %s", message.command_name, message.user_id, e)
            return RelayError.default_user_message

    async def handle_command(self, message: InboundMessage) -> None:
        response = await self.command_response(message)
        await self.ctx.services["delivery"].deliver(message.chat_id, response)

    async def _handle_message(self, message: InboundMessage) -> None:
        try:
            await self.ctx.services["reply"].handle_message(message)
        except Exception as e:
            self.log.exception("Error handling message chat_id=%s user_id=%s: %s", message.chat_id, message.user_id, e)
