"""Text helpers: chunking for the transport limit, previews and markup."""

from __future__ import annotations

import re

MAX_MESSAGE_LENGTH = 4096

MARKUP_RE = re.compile(
    r"```(?:[\w+-]*\n)?(?P<pre>.*?)```"
    r"|\*\*(?P<strong>[^*\n]+)\*\*"
    r"|\*(?P<bold>[^*\n]+)\*"
    r"|(?<!\w)_(?P<italic>[^_\n]+)_(?!\w)"
    r"|`(?P<code>[^`\n]+)`",
    flags=re.DOTALL,
)


def normalize_spaces(value: str) -> str:
    return " ".join((value or "").strip().split())


def preview_text(text: str, max_chars: int = 100) -> str:
    value = text or ""
    if len(value) > max_chars:
        return value[:max_chars] + "..."
    return value


def split_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> list[str]:
    """Split ``text`` into word-aligned chunks of at most ``max_length`` chars.

    Text that already fits is returned untouched. Longer text is re-joined
    word by word with single spaces, so original newlines and runs of
    whitespace are not preserved. A single word longer than ``max_length``
    becomes its own oversized chunk instead of being cut.
    """
    if len(text) <= max_length:
        return [text]

    chunks: list[str] = []
    current: list[str] = []
    current_len = 0
    for word in text.split():
        if current_len + len(word) + 1 > max_length and current:
            chunks.append(" ".join(current))
            current = []
            current_len = 0
        if current:
            current_len += 1
        current.append(word)
        current_len += len(word)

    if current:
        chunks.append(" ".join(current))
    return chunks


def utf16_length(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


def markdown_to_format_data(text: str) -> tuple[str, dict | None]:
    """Convert light Markdown into plain text plus a VK ``format_data`` object.

    ``*bold*``/``**bold**`` and ``_italic_`` become styled ranges; code spans
    and fences lose their backticks. Returns ``(plain, None)`` when there is
    nothing to style. Offsets and lengths count UTF-16 code units, so an
    emoji outside the Basic Multilingual Plane takes two.
    """
    source = text or ""
    parts: list[str] = []
    items: list[dict] = []
    length = 0
    last = 0
    for match in MARKUP_RE.finditer(source):
        head = source[last : match.start()]
        parts.append(head)
        length += utf16_length(head)
        last = match.end()

        style = None
        if match.group("strong") is not None:
            inner, style = match.group("strong"), "bold"
        elif match.group("bold") is not None:
            inner, style = match.group("bold"), "bold"
        elif match.group("italic") is not None:
            inner, style = match.group("italic"), "italic"
        elif match.group("code") is not None:
            inner = match.group("code")
        else:
            inner = match.group("pre") or ""

        if style and inner:
            items.append({"type": style, "offset": length, "length": utf16_length(inner)})
        parts.append(inner)
        length += utf16_length(inner)

    parts.append(source[last:])
    plain = "".join(parts)
    if not items:
        return plain, None
    return plain, {"version": 1, "items": items}
