from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

EMPTY_LIST_TEXT = "📝 Список задач пуст"
DONE_GLYPH = "✅"
OPEN_GLYPH = "❌"


@dataclass(slots=True)
class TaskItem:
    id: int
    text: str
    done: bool = False

    def render(self) -> str:
        glyph = DONE_GLYPH if self.done else OPEN_GLYPH
        return f"{self.id}. {glyph} {self.text}"


@dataclass(slots=True)
class TaskList:
    """One user's to-do list.

    Ids are ``len(items) + 1`` at insertion time, so an id freed by a removal
    is handed out again by the next add.
    """

    items: list[TaskItem] = field(default_factory=list)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    async def add_item(self, text: str) -> TaskItem:
        async with self.lock:
            item = TaskItem(id=len(self.items) + 1, text=text)
            self.items.append(item)
            return item

    async def remove_item(self, item_id: int) -> bool:
        async with self.lock:
            for index, item in enumerate(self.items):
                if item.id == item_id:
                    del self.items[index]
                    return True
            return False

    async def toggle_item(self, item_id: int) -> bool:
        async with self.lock:
            for item in self.items:
                if item.id == item_id:
                    item.done = not item.done
                    return True
            return False

    async def list_items(self) -> str:
        async with self.lock:
            if not self.items:
                return EMPTY_LIST_TEXT
            return "\n".join(item.render() for item in self.items)

    async def count_open(self) -> int:
        async with self.lock:
            return sum(1 for item in self.items if not item.done)
