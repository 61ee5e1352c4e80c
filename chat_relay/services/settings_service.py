from __future__ import annotations

from chat_relay.config.settings import AppSettings, SettingsService
from chat_relay.core.logging import set_debug


class SettingsRuntimeService:
    def __init__(self, settings_service: SettingsService, settings: AppSettings):
        self.settings_service = settings_service
        self.settings = settings

    def set_runtime(self, key: str, value: str) -> None:
        self.settings_service.set_runtime(self.settings, key, value)

    @property
    def debug(self) -> bool:
        return self.settings.get_bool("DEBUG", default=False)

    def toggle_debug(self) -> bool:
        enabled = not self.debug
        self.set_runtime("DEBUG", "true" if enabled else "false")
        set_debug(enabled)
        return enabled
