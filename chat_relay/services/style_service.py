from __future__ import annotations

import logging

from chat_relay.core.errors import MalformedUserInput

DEFAULT_STYLE = "friendly"

STYLE_PROMPTS: dict[str, str] = {
    "friendly": (
        "You are a friendly, warm assistant. Respond in the same language as the user's message. "
        "Be concise but informative, and keep a light, encouraging tone."
    ),
    "official": (
        "You are a formal assistant. Respond in the same language as the user's message. "
        "Use a polite, businesslike register, precise wording and no slang or emoji."
    ),
    "meme": (
        "You are a playful assistant who loves internet humor. Respond in the same language as the user's message. "
        "Answer correctly, but with jokes, memes and emoji where they fit."
    ),
}

STYLE_TITLES: dict[str, str] = {
    "friendly": "😊 Дружелюбный",
    "official": "🎩 Официальный",
    "meme": "🤪 Мемный",
}


def normalize_style(value: str | None) -> str:
    key = (value or "").strip().lower()
    return key if key in STYLE_PROMPTS else DEFAULT_STYLE


class StyleService:
    def __init__(self, store=None):
        self.store = store
        self.log = logging.getLogger("chat_relay_bot")

    async def style_for(self, user_id: int) -> str:
        if self.store is None:
            return DEFAULT_STYLE
        stored = await self.store.get(user_id)
        style = normalize_style(stored)
        if stored is not None and stored != style:
            self.log.warning("Unknown stored style user_id=%s style=%r, using %s", user_id, stored, style)
        return style

    async def system_prompt_for(self, user_id: int) -> str:
        return STYLE_PROMPTS[await self.style_for(user_id)]

    async def set_style(self, user_id: int, value: str) -> str:
        key = (value or "").strip().lower()
        if key not in STYLE_PROMPTS:
            raise MalformedUserInput(f"❓ Неизвестный стиль. Доступные: {', '.join(STYLE_PROMPTS)}")
        if self.store is None:
            raise MalformedUserInput("❓ Выбор стиля недоступен в этом режиме")
        await self.store.set(user_id, key)
        self.log.info("Style updated user_id=%s style=%s", user_id, key)
        return key
