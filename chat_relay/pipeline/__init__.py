from .graph import build_reply_graph
from .models import DeliveryResult, ReplyState, SendOutcome
from .state import build_initial_state

__all__ = [
    "DeliveryResult",
    "ReplyState",
    "SendOutcome",
    "build_initial_state",
    "build_reply_graph",
]
