from __future__ import annotations

import os
from dataclasses import dataclass, field

from chat_relay.config.env import TRUE_VALUES, first_env, read_float_env, read_str_env
from chat_relay.core.errors import ConfigurationError

BOT_MODES = ("chat", "tasks", "styles")


@dataclass(frozen=True, slots=True)
class ProviderProfile:
    name: str
    base_url: str
    model: str
    key_env: str
    temperature: float = 0.7
    max_tokens: int = 2000


PROVIDERS: dict[str, ProviderProfile] = {
    "deepseek": ProviderProfile(
        name="deepseek",
        base_url="https://api.deepseek.com/v1/",
        model="deepseek-chat",
        key_env="DEEPSEEK_API_KEY",
    ),
    "chutes": ProviderProfile(
        name="chutes",
        base_url="https://llm.chutes.ai/v1/",
        model="deepseek-ai/DeepSeek-V3-0324",
        key_env="CHUTES_API_TOKEN",
    ),
    "groq": ProviderProfile(
        name="groq",
        base_url="",
        model="llama-3.3-70b-versatile",
        key_env="GROQ_API_KEY",
    ),
}


@dataclass(slots=True)
class AppSettings:
    env: dict[str, str] = field(default_factory=dict)
    runtime_overrides: dict[str, str] = field(default_factory=dict)

    def get(self, key: str, default: str | None = None) -> str | None:
        if key in self.runtime_overrides:
            return self.runtime_overrides[key]
        return self.env.get(key, default)

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None or value == "":
            return default
        return value.strip().lower() in TRUE_VALUES


@dataclass(frozen=True, slots=True)
class BotConfig:
    vk_token: str
    provider: ProviderProfile
    api_key: str
    model: str
    base_url: str
    mode: str
    db_path: str
    api_timeout_seconds: float
    chunk_delay_seconds: float


class SettingsService:
    """Runtime settings facade over the process environment."""

    def load_from_env(self) -> AppSettings:
        return AppSettings(env={k: str(v) for k, v in os.environ.items() if v is not None})

    def set_runtime(self, settings: AppSettings, key: str, value: str) -> None:
        settings.runtime_overrides[str(key)] = "" if value is None else str(value)

    def build_config(self) -> BotConfig:
        vk_token = read_str_env("VK_TOKEN")
        if not vk_token:
            raise ConfigurationError("VK_TOKEN not found in environment")

        provider_name = read_str_env("LLM_PROVIDER", "deepseek").lower()
        provider = PROVIDERS.get(provider_name)
        if provider is None:
            raise ConfigurationError(f"Unknown LLM_PROVIDER: {provider_name}")

        api_key = first_env("LLM_API_KEY", provider.key_env)
        if not api_key:
            raise ConfigurationError(f"LLM_API_KEY or {provider.key_env} not found in environment")

        mode = read_str_env("BOT_MODE", "chat").lower()
        if mode not in BOT_MODES:
            raise ConfigurationError(f"Unknown BOT_MODE: {mode}")

        return BotConfig(
            vk_token=vk_token,
            provider=provider,
            api_key=api_key,
            model=read_str_env("LLM_MODEL", provider.model),
            base_url=read_str_env("LLM_BASE_URL", provider.base_url),
            mode=mode,
            db_path=read_str_env("DB_PATH", "data/chat_relay.db"),
            api_timeout_seconds=read_float_env("API_TIMEOUT_SECONDS", default=30.0, min_value=1.0) or 30.0,
            chunk_delay_seconds=read_float_env("CHUNK_DELAY_SECONDS", default=0.1, min_value=0.0) or 0.0,
        )
