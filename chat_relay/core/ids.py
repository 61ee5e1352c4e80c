from __future__ import annotations

from typing import Any


def parse_item_id(value: str) -> int | None:
    cleaned = (value or "").strip()
    if not cleaned.isdecimal() or not cleaned.isascii():
        return None
    try:
        number = int(cleaned)
    except ValueError:
        return None
    return number if number > 0 else None


def coerce_positive_int(value: Any) -> int:
    if value is None or isinstance(value, bool):
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 0
    return number if number > 0 else 0


def coerce_int(value: Any, default: int = 0) -> int:
    if value is None or isinstance(value, bool):
        return int(default)
    try:
        return int(value)
    except (TypeError, ValueError):
        return int(default)
