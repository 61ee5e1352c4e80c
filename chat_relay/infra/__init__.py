from .completion_client import CompletionClient
from .db import connect_db
from .groq_client import GroqCompletionClient
from .transport import InboundMessage, MessageTransport
from .vk_transport import VkTransport

__all__ = [
    "CompletionClient",
    "GroqCompletionClient",
    "InboundMessage",
    "MessageTransport",
    "VkTransport",
    "connect_db",
]
