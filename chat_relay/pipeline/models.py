from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, TypedDict

SendMode = Literal["formatted", "plain"]


@dataclass(slots=True)
class SendOutcome:
    message_id: int = 0
    mode: SendMode = "formatted"

    def to_dict(self) -> dict[str, Any]:
        return {"message_id": int(self.message_id or 0), "mode": self.mode}


@dataclass(slots=True)
class DeliveryResult:
    chunks_total: int = 0
    outcomes: list[SendOutcome] = field(default_factory=list)
    error: str = ""

    @property
    def delivered(self) -> bool:
        return not self.error and len(self.outcomes) == self.chunks_total

    @classmethod
    def from_value(cls, value: Any) -> "DeliveryResult":
        if isinstance(value, cls):
            return value
        if not isinstance(value, dict):
            return cls()
        outcomes = []
        for item in value.get("outcomes") or []:
            if isinstance(item, dict):
                mode = "plain" if item.get("mode") == "plain" else "formatted"
                outcomes.append(SendOutcome(message_id=int(item.get("message_id") or 0), mode=mode))
        return cls(
            chunks_total=int(value.get("chunks_total") or 0),
            outcomes=outcomes,
            error=str(value.get("error") or "").strip(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "chunks_total": int(self.chunks_total),
            "outcomes": [outcome.to_dict() for outcome in self.outcomes],
            "error": self.error,
        }


class ReplyState(TypedDict, total=False):
    chat_id: int
    user_id: int
    user_name: str
    text: str
    system_prompt: str
    placeholder_id: int
    response: str
    error: str
    delivery: dict[str, Any]
