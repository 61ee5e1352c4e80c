from __future__ import annotations

from chat_relay.infra.db import connect_db


class PreferencesRepo:
    """Per-user style preference stored in SQLite."""

    def __init__(self, db_path: str):
        self.db_path = str(db_path)

    async def init(self) -> None:
        async with connect_db(self.db_path) as db:
            await db.execute(
                "CREATE TABLE IF NOT EXISTS user_preferences (user_id INTEGER PRIMARY KEY, style TEXT NOT NULL)"
            )
            await db.commit()

    async def get(self, user_id: int) -> str | None:
        async with connect_db(self.db_path) as db:
            async with db.execute("SELECT style FROM user_preferences WHERE user_id = ?", (int(user_id),)) as cursor:
                row = await cursor.fetchone()
        if row is None:
            return None
        return str(row[0])

    async def set(self, user_id: int, style: str) -> None:
        async with connect_db(self.db_path) as db:
            await db.execute(
                "INSERT INTO user_preferences (user_id, style) VALUES (?, ?) "
                "ON CONFLICT(user_id) DO UPDATE SET style = excluded.style",
                (int(user_id), str(style)),
            )
            await db.commit()
