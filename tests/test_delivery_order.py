import asyncio
import time

import pytest

from chat_relay.core.errors import TransportDeliveryFailure
from chat_relay.pipeline.models import DeliveryResult
from chat_relay.services.delivery_service import SEND_ERROR_TEXT, DeliveryService
from tests.bot_fakes import FakeTransport, make_context, make_message


def three_chunk_text(tag: str) -> str:
    return " ".join(f"{tag}{i:02d}" for i in range(30))


@pytest.mark.asyncio
async def test_chunks_are_sent_in_index_order():
    transport = FakeTransport()
    delivery = DeliveryService(transport, max_length=40, chunk_delay_seconds=0)
    text = " ".join(f"w{i:03d}" for i in range(24))

    result = await delivery.deliver(1, text)

    assert result.chunks_total == 3
    assert result.delivered
    assert transport.texts() == [
        " ".join(f"w{i:03d}" for i in range(0, 8)),
        " ".join(f"w{i:03d}" for i in range(8, 16)),
        " ".join(f"w{i:03d}" for i in range(16, 24)),
    ]
    assert [outcome.mode for outcome in result.outcomes] == ["formatted"] * 3


@pytest.mark.asyncio
async def test_concurrent_deliveries_to_same_chat_do_not_interleave():
    transport = FakeTransport(send_delay=0.005)
    delivery = DeliveryService(transport, max_length=40, chunk_delay_seconds=0.01)

    first, second = await asyncio.gather(
        delivery.deliver(1, three_chunk_text("a")),
        delivery.deliver(1, three_chunk_text("b")),
    )

    tags = [text[0] for text in transport.texts()]
    assert first.chunks_total == 3
    assert second.chunks_total == 3
    assert tags == ["a", "a", "a", "b", "b", "b"]


@pytest.mark.asyncio
async def test_formatted_failure_falls_back_to_plain():
    transport = FakeTransport(fail_formatted=True)
    delivery = DeliveryService(transport, chunk_delay_seconds=0)

    result = await delivery.deliver(1, "*hello*")

    assert transport.sent == [(1, "*hello*", False)]
    assert result.outcomes[0].mode == "plain"


@pytest.mark.asyncio
async def test_chunk_loop_raises_when_plain_also_fails():
    transport = FakeTransport(fail_formatted=True, fail_plain=True)
    delivery = DeliveryService(transport, chunk_delay_seconds=0)

    with pytest.raises(TransportDeliveryFailure, match="chunk 0"):
        await delivery._send_chunks(1, ["hello"], DeliveryResult(chunks_total=1))


@pytest.mark.asyncio
async def test_deliver_reports_failure_and_tries_notice():
    class FailingFirstChunk(FakeTransport):
        async def send_message(self, chat_id, text, formatted=True):
            if text != SEND_ERROR_TEXT:
                raise TransportDeliveryFailure("blocked")
            return await super().send_message(chat_id, text, formatted)

    transport = FailingFirstChunk()
    result = await DeliveryService(transport, chunk_delay_seconds=0).deliver(1, "answer")

    assert result.delivered is False
    assert "chunk 0" in result.error
    assert transport.sent == [(1, SEND_ERROR_TEXT, False)]


@pytest.mark.asyncio
async def test_concurrent_freeform_messages_keep_chunks_contiguous():
    class EchoClient:
        def __init__(self):
            self.calls = 0

        async def create(self, payload):
            self.calls += 1
            user_text = payload["messages"][1]["content"]
            await asyncio.sleep(0.01)
            return {"choices": [{"message": {"content": three_chunk_text(user_text)}}]}

    transport = FakeTransport(send_delay=0.002)
    ctx = make_context(transport=transport, completion_client=EchoClient(), max_length=40)
    ctx.services["delivery"].chunk_delay_seconds = 0.01
    reply = ctx.services["reply"]

    await asyncio.gather(
        reply.handle_message(make_message("a", user_id=1)),
        reply.handle_message(make_message("b", user_id=2)),
    )

    chunk_tags = [text[0] for text in transport.texts() if text[0] in "ab"]
    assert chunk_tags in (["a"] * 3 + ["b"] * 3, ["b"] * 3 + ["a"] * 3)


@pytest.mark.asyncio
async def test_chunk_delay_runs_between_sends_only():
    class TimedTransport(FakeTransport):
        def __init__(self):
            super().__init__()
            self.stamps: list[float] = []

        async def send_message(self, chat_id, text, formatted=True):
            self.stamps.append(time.monotonic())
            return await super().send_message(chat_id, text, formatted)

    transport = TimedTransport()
    delivery = DeliveryService(transport, max_length=40, chunk_delay_seconds=0.05)

    started = time.monotonic()
    result = await delivery.deliver(1, three_chunk_text("a"))

    assert result.chunks_total == 3
    assert transport.stamps[0] - started < 0.04
    gaps = [later - earlier for earlier, later in zip(transport.stamps, transport.stamps[1:])]
    assert len(gaps) == 2
    assert all(gap >= 0.045 for gap in gaps)
