from __future__ import annotations

import re

LEADING_MENTION_RE = re.compile(r"^\s*(?:\[(?:club|public)\d+\|[^\]]*\]|@(?:club|public)\d+)[\s,:]*", flags=re.IGNORECASE)


def strip_bot_mention(text: str) -> str:
    if not text:
        return ""
    return LEADING_MENTION_RE.sub("", text, count=1).strip()


def parse_command(text: str) -> tuple[str, str] | None:
    """Return ``(name, args)`` for ``/name args`` or ``None`` for free text.

    A leading community mention and a ``@botname`` suffix are ignored, so
    ``[club1|bot] /Add@relay milk`` parses as ``("add", "milk")``.
    """
    cleaned = strip_bot_mention(text)
    if not cleaned.startswith("/"):
        return None
    head, _, rest = cleaned.partition(" ")
    name = head[1:].split("@", 1)[0].strip().lower()
    if not name:
        return None
    return name, rest.strip()
