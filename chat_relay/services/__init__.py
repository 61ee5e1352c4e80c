from .completion_service import NO_ANSWER_TEXT, CompletionService
from .delivery_service import SEND_ERROR_TEXT, DeliveryService
from .reply_service import THINKING_TEXT, ReplyService
from .settings_service import SettingsRuntimeService
from .style_service import DEFAULT_STYLE, STYLE_PROMPTS, StyleService

__all__ = [
    "DEFAULT_STYLE",
    "NO_ANSWER_TEXT",
    "SEND_ERROR_TEXT",
    "THINKING_TEXT",
    "STYLE_PROMPTS",
    "CompletionService",
    "DeliveryService",
    "ReplyService",
    "SettingsRuntimeService",
    "StyleService",
]
