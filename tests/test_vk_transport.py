import json

import pytest

pytest.importorskip("vkbottle")

from chat_relay.core.errors import TransportDeliveryFailure
from chat_relay.infra.vk_transport import VkTransport, extract_sent_message_id


class DummyApi:
    def __init__(self, *, fail_on: set[str] | None = None):
        self.calls: list[tuple[str, dict]] = []
        self.fail_on = fail_on or set()

    async def request(self, method: str, payload: dict):
        self.calls.append((method, dict(payload)))
        if method in self.fail_on:
            raise RuntimeError(f"{method} rejected")
        if method == "messages.send":
            return {"response": [{"peer_id": payload["peer_ids"], "message_id": 0, "conversation_message_id": 55}]}
        if method == "users.get":
            return {"response": [{"id": 1, "first_name": "Мария", "last_name": "И"}]}
        return {"response": 1}


class DummyPolling:
    def __init__(self, events):
        self.events = events

    async def listen(self):
        for event in self.events:
            yield event


class DummyBot:
    def __init__(self, api=None, events=None):
        self.api = api or DummyApi()
        self.polling = DummyPolling(events or [])


def message_update(text: str, *, peer_id: int = 2000000001, from_id: int = 1) -> dict:
    return {
        "type": "message_new",
        "object": {"message": {"peer_id": peer_id, "from_id": from_id, "text": text, "conversation_message_id": 3}},
    }


@pytest.mark.asyncio
async def test_formatted_send_uses_format_data():
    bot = DummyBot()
    transport = VkTransport(bot)

    message_id = await transport.send_message(2000000001, "*Важно*: да", formatted=True)

    method, payload = bot.api.calls[-1]
    assert method == "messages.send"
    assert message_id == 55
    assert payload["message"] == "Важно: да"
    assert json.loads(payload["format_data"])["items"] == [{"type": "bold", "offset": 0, "length": 5}]


@pytest.mark.asyncio
async def test_plain_send_keeps_text_as_is():
    bot = DummyBot()
    await VkTransport(bot).send_message(10, "*raw*", formatted=False)

    _, payload = bot.api.calls[-1]
    assert payload["message"] == "*raw*"
    assert "format_data" not in payload


@pytest.mark.asyncio
async def test_delete_and_typing_methods():
    bot = DummyBot()
    transport = VkTransport(bot)

    await transport.delete_message(10, 55)
    await transport.send_typing(10)

    assert bot.api.calls[0] == ("messages.delete", {"peer_id": 10, "cmids": "55", "delete_for_all": 1})
    assert bot.api.calls[1] == ("messages.setActivity", {"peer_id": 10, "type": "typing"})


@pytest.mark.asyncio
async def test_api_errors_become_delivery_failures():
    transport = VkTransport(DummyBot(api=DummyApi(fail_on={"messages.send"})))
    with pytest.raises(TransportDeliveryFailure):
        await transport.send_message(10, "hi")


@pytest.mark.asyncio
async def test_receive_updates_parses_messages_and_skips_others():
    events = [
        {
            "ts": "2",
            "updates": [
                message_update("/add молоко"),
                {"type": "message_reply", "object": {}},
                message_update("from community", from_id=-5),
                message_update("привет"),
            ],
        }
    ]
    bot = DummyBot(events=events)
    transport = VkTransport(bot)

    received = [message async for message in transport.receive_updates()]

    assert len(received) == 2
    assert received[0].is_command is True
    assert received[0].command_name == "add"
    assert received[0].user_name == "Мария"
    assert received[1].text == "привет"
    assert [method for method, _ in bot.api.calls].count("users.get") == 1


def test_extract_sent_message_id_variants():
    assert extract_sent_message_id({"response": 42}) == 42
    assert extract_sent_message_id([{"message_id": 0, "conversation_message_id": 9}]) == 9
    assert extract_sent_message_id(None) == 0


@pytest.mark.asyncio
async def test_formatted_send_strips_code_markers_without_styles():
    bot = DummyBot()
    await VkTransport(bot).send_message(10, "run `ls -la` now", formatted=True)

    _, payload = bot.api.calls[-1]
    assert payload["message"] == "run ls -la now"
    assert "format_data" not in payload


@pytest.mark.asyncio
async def test_mention_only_update_is_skipped():
    transport = VkTransport(DummyBot())
    assert await transport.parse_update(message_update("[club1|Бот]")) is None
