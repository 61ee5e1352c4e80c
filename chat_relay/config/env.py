from __future__ import annotations

import logging
import os

TRUE_VALUES = {"1", "true", "yes", "on"}


def read_str_env(name: str, default: str = "") -> str:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip()
    return value if value else default


def read_bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in TRUE_VALUES


def read_float_env(name: str, default: float | None = None, min_value: float | None = None) -> float | None:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except ValueError:
        logging.getLogger("chat_relay_bot").warning("%s is not a valid float", name)
        return default
    if min_value is not None and number < min_value:
        return min_value
    return number


def first_env(*names: str) -> str:
    for name in names:
        value = read_str_env(name)
        if value:
            return value
    return ""


def mask_secret(value: str, visible: int = 10) -> str:
    if not value:
        return ""
    return value[: min(visible, len(value))] + "..."
