from .runtime_state import RuntimeState
from .task_list import EMPTY_LIST_TEXT, TaskItem, TaskList

__all__ = ["EMPTY_LIST_TEXT", "RuntimeState", "TaskItem", "TaskList"]
