import pytest

from chat_relay.config.settings import SettingsService
from chat_relay.core.errors import ConfigurationError


@pytest.fixture
def base_env(monkeypatch):
    for name in ("LLM_PROVIDER", "LLM_API_KEY", "DEEPSEEK_API_KEY", "GROQ_API_KEY", "CHUTES_API_TOKEN", "LLM_MODEL", "BOT_MODE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("VK_TOKEN", "vk-token")


def test_settings_load_and_runtime_override(monkeypatch):
    monkeypatch.setenv("DEBUG", "false")
    service = SettingsService()
    settings = service.load_from_env()

    assert settings.get_bool("DEBUG") is False

    service.set_runtime(settings, "DEBUG", "true")
    assert settings.get("DEBUG") == "true"
    assert settings.get_bool("DEBUG") is True


def test_build_config_defaults_to_deepseek(base_env, monkeypatch):
    monkeypatch.setenv("DEEPSEEK_API_KEY", "sk-deepseek")
    config = SettingsService().build_config()

    assert config.provider.name == "deepseek"
    assert config.api_key == "sk-deepseek"
    assert config.model == "deepseek-chat"
    assert config.mode == "chat"
    assert config.provider.temperature == 0.7
    assert config.provider.max_tokens == 2000


def test_build_config_provider_key_and_model_override(base_env, monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "chutes")
    monkeypatch.setenv("CHUTES_API_TOKEN", "cpk-token")
    monkeypatch.setenv("LLM_MODEL", "custom/model")
    monkeypatch.setenv("BOT_MODE", "tasks")
    config = SettingsService().build_config()

    assert config.api_key == "cpk-token"
    assert config.model == "custom/model"
    assert config.base_url == "https://llm.chutes.ai/v1/"
    assert config.mode == "tasks"


def test_missing_vk_token_is_configuration_error(base_env, monkeypatch):
    monkeypatch.delenv("VK_TOKEN", raising=False)
    monkeypatch.setenv("LLM_API_KEY", "x")
    with pytest.raises(ConfigurationError):
        SettingsService().build_config()


def test_missing_api_key_is_configuration_error(base_env):
    with pytest.raises(ConfigurationError, match="DEEPSEEK_API_KEY"):
        SettingsService().build_config()


def test_unknown_mode_is_configuration_error(base_env, monkeypatch):
    monkeypatch.setenv("LLM_API_KEY", "x")
    monkeypatch.setenv("BOT_MODE", "everything")
    with pytest.raises(ConfigurationError):
        SettingsService().build_config()
