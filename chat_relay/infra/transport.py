from __future__ import annotations

from collections.abc import AsyncIterator
from dataclasses import dataclass
from typing import Protocol

from chat_relay.core.rules import parse_command


@dataclass(frozen=True, slots=True)
class InboundMessage:
    chat_id: int
    user_id: int
    user_name: str
    text: str
    is_command: bool = False
    command_name: str = ""
    command_args: str = ""

    @classmethod
    def from_text(cls, *, chat_id: int, user_id: int, user_name: str, text: str) -> "InboundMessage":
        command = parse_command(text)
        if command is None:
            return cls(chat_id=chat_id, user_id=user_id, user_name=user_name, text=text)
        name, args = command
        return cls(
            chat_id=chat_id,
            user_id=user_id,
            user_name=user_name,
            text=text,
            is_command=True,
            command_name=name,
            command_args=args,
        )


class MessageTransport(Protocol):
    def receive_updates(self) -> AsyncIterator[InboundMessage]: ...

    async def send_message(self, chat_id: int, text: str, formatted: bool = True) -> int: ...

    async def delete_message(self, chat_id: int, message_id: int) -> None: ...

    async def send_typing(self, chat_id: int) -> None: ...
