from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from .task_list import TaskList


@dataclass(slots=True)
class RuntimeState:
    """Process-wide per-user state; records are created lazily and never evicted."""

    task_lists: dict[int, TaskList] = field(default_factory=dict)
    message_counts: dict[int, int] = field(default_factory=dict)
    counts_lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def tasks_for(self, user_id: int) -> TaskList:
        key = int(user_id)
        record = self.task_lists.get(key)
        if record is None:
            record = TaskList()
            self.task_lists[key] = record
        return record

    async def increment_messages(self, user_id: int) -> int:
        key = int(user_id)
        async with self.counts_lock:
            count = self.message_counts.get(key, 0) + 1
            self.message_counts[key] = count
            return count

    async def message_count(self, user_id: int) -> int:
        async with self.counts_lock:
            return self.message_counts.get(int(user_id), 0)
