from __future__ import annotations

import logging
from typing import Any

import groq
from groq import AsyncGroq

from chat_relay.core.errors import ProviderRejected, ProviderUnavailable


class GroqCompletionClient:
    """Groq SDK behind the same ``create(payload) -> dict`` contract as ``CompletionClient``."""

    def __init__(self, *, api_key: str, timeout_seconds: float = 30.0):
        self.api_key = api_key
        self.timeout_seconds = float(timeout_seconds or 30.0)
        self.log = logging.getLogger("chat_relay_bot")
        self._client: AsyncGroq | None = None

    @property
    def client(self) -> AsyncGroq:
        if self._client is None:
            self._client = AsyncGroq(api_key=self.api_key, timeout=self.timeout_seconds, max_retries=0)
        return self._client

    async def start(self) -> None:
        _ = self.client

    async def stop(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        try:
            completion = await self.client.chat.completions.create(**payload)
        except groq.APIConnectionError as e:
            self.log.warning("Groq request failed: %s", e)
            raise ProviderUnavailable(f"API request failed: {e}") from e
        except groq.APIStatusError as e:
            body = e.response.text if e.response is not None else str(e)
            self.log.warning("Groq error response status=%s: %s", e.status_code, body)
            raise ProviderRejected(e.status_code, body) from e
        return completion.model_dump()
