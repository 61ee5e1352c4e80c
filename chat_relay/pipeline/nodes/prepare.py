from __future__ import annotations

from chat_relay.pipeline.models import ReplyState


async def prepare_node(state: ReplyState, runtime) -> ReplyState:
    return await runtime.prepare(state)
