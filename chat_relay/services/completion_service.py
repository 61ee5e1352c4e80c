from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Protocol

from chat_relay.core.errors import ProviderRejected, ProviderUnavailable

NO_ANSWER_TEXT = "Извините, не удалось получить ответ от ИИ"
PING_PROMPT = "Привет! Ответь одним словом."


class CompletionProvider(Protocol):
    async def create(self, payload: dict[str, Any]) -> dict[str, Any]: ...


def _extract_text_from_llm_content(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, list):
        parts: list[str] = []
        for item in value:
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, dict):
                text_value = item.get("text") or item.get("output_text")
                if isinstance(text_value, str):
                    parts.append(text_value)
        return "\n".join(parts)
    if isinstance(value, dict):
        return _extract_text_from_llm_content(value.get("text") or value.get("content"))
    return str(value)


def _extract_error_message(value: Any) -> str:
    if isinstance(value, dict):
        return str(value.get("message") or value.get("type") or json.dumps(value, ensure_ascii=False))
    return str(value)


class CompletionService:
    """Single-shot completion: one system entry, one user entry, fixed sampling."""

    def __init__(
        self,
        provider: CompletionProvider,
        *,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 2000,
        timeout_seconds: float = 30.0,
        provider_name: str = "",
    ):
        self.provider = provider
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_seconds = float(timeout_seconds)
        self.provider_name = provider_name
        self.log = logging.getLogger("chat_relay_bot")

    def build_payload(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }
        if self.temperature:
            payload["temperature"] = self.temperature
        if self.max_tokens:
            payload["max_tokens"] = self.max_tokens
        return payload

    async def complete(self, system_prompt: str, user_prompt: str) -> str:
        payload = self.build_payload(system_prompt, user_prompt)
        self.log.info("Sending completion request provider=%s model=%s", self.provider_name, self.model)
        self.log.debug("Request payload: %s", json.dumps(payload, ensure_ascii=False))

        started = time.monotonic()
        try:
            data = await asyncio.wait_for(self.provider.create(payload), timeout=self.timeout_seconds)
        except asyncio.TimeoutError as e:
            self.log.warning("Completion timed out after %.2fs", time.monotonic() - started)
            raise ProviderUnavailable(f"API request timed out after {self.timeout_seconds:g}s") from e

        error = data.get("error")
        if error:
            message = _extract_error_message(error)
            self.log.warning("API returned error: %s", message)
            raise ProviderRejected(200, message)

        choices = data.get("choices")
        if not isinstance(choices, list) or not choices:
            self.log.warning("No choices in API response")
            return NO_ANSWER_TEXT

        first = choices[0] if isinstance(choices[0], dict) else {}
        message = first.get("message") if isinstance(first.get("message"), dict) else {}
        text = _extract_text_from_llm_content(message.get("content")).strip()
        if not text:
            self.log.warning("Empty content in first choice")
            return NO_ANSWER_TEXT
        self.log.info("API response received in %.2fs: %s characters", time.monotonic() - started, len(text))
        return text

    async def ping(self, prompt: str = PING_PROMPT) -> bool:
        try:
            answer = await self.complete("You are a helpful assistant.", prompt)
        except (ProviderUnavailable, ProviderRejected) as e:
            self.log.warning("API test failed: %s", e)
            self.log.warning("Bot will continue, but API might not work")
            return False
        self.log.info("API test successful: %s", answer)
        return True
