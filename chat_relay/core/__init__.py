from .errors import (
    ConfigurationError,
    MalformedUserInput,
    NotFound,
    ProviderRejected,
    ProviderUnavailable,
    RelayError,
    TransportDeliveryFailure,
)
from .ids import coerce_int, coerce_positive_int, parse_item_id
from .logging import set_debug, setup_logging
from .rules import parse_command, strip_bot_mention
from .text import (
    MAX_MESSAGE_LENGTH,
    markdown_to_format_data,
    normalize_spaces,
    preview_text,
    split_message,
)

__all__ = [
    "MAX_MESSAGE_LENGTH",
    "ConfigurationError",
    "MalformedUserInput",
    "NotFound",
    "ProviderRejected",
    "ProviderUnavailable",
    "RelayError",
    "TransportDeliveryFailure",
    "coerce_int",
    "coerce_positive_int",
    "parse_item_id",
    "setup_logging",
    "set_debug",
    "parse_command",
    "strip_bot_mention",
    "markdown_to_format_data",
    "normalize_spaces",
    "preview_text",
    "split_message",
]
