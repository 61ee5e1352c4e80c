from __future__ import annotations

import os

import aiosqlite


def connect_db(db_path: str) -> aiosqlite.Connection:
    folder = os.path.dirname(db_path)
    if folder and db_path != ":memory:":
        os.makedirs(folder, exist_ok=True)
    return aiosqlite.connect(db_path)
