from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from chat_relay.core.errors import ProviderRejected, ProviderUnavailable


class CompletionClient:
    """OpenAI-compatible ``chat/completions`` client. One attempt per call."""

    def __init__(self, *, base_url: str, api_key: str | None, timeout_seconds: float = 30.0):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.api_key = api_key
        self.timeout_seconds = float(timeout_seconds or 30.0)
        self.log = logging.getLogger("chat_relay_bot")
        self._client: httpx.AsyncClient | None = None

    async def start(self) -> None:
        if self._client is None:
            timeout = httpx.Timeout(self.timeout_seconds, connect=min(10.0, self.timeout_seconds))
            self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout)

    async def stop(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _auth_headers(self) -> dict[str, str]:
        if not self.api_key:
            return {}
        return {"Authorization": f"Bearer {self.api_key}"}

    async def request(self, method: str, path: str, **kwargs) -> httpx.Response:
        if self._client is None:
            await self.start()
        assert self._client is not None

        headers = kwargs.pop("headers", {})
        request_headers = {**self._auth_headers(), "Content-Type": "application/json", **headers}

        started = time.monotonic()
        try:
            response = await self._client.request(method, path, headers=request_headers, **kwargs)
        except httpx.TimeoutException as e:
            self.log.warning("API request timed out after %.2fs: %s", time.monotonic() - started, e)
            raise ProviderUnavailable(f"API request timed out: {e}") from e
        except httpx.RequestError as e:
            self.log.warning("API request failed after %.2fs: %s", time.monotonic() - started, e)
            raise ProviderUnavailable(f"API request failed: {e}") from e

        self.log.info(
            "API response status=%s duration=%.2fs size=%s bytes",
            response.status_code,
            time.monotonic() - started,
            len(response.content or b""),
        )
        if response.status_code >= 400:
            self.log.warning("API error response: %s", response.text)
            raise ProviderRejected(response.status_code, response.text)
        return response

    async def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        response = await self.request("POST", "chat/completions", json=payload)
        self.log.debug("Response body: %s", response.text)
        try:
            data = response.json()
        except ValueError as e:
            self.log.warning("Failed to parse JSON response: %s", e)
            raise ProviderRejected(response.status_code, response.text) from e
        if not isinstance(data, dict):
            raise ProviderRejected(response.status_code, response.text)
        return data
