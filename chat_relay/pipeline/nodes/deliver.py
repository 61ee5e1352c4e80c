from __future__ import annotations

from chat_relay.pipeline.models import ReplyState


async def deliver_node(state: ReplyState, runtime) -> ReplyState:
    return await runtime.deliver(state)
