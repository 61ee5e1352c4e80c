from .commands import UNKNOWN_COMMAND_TEXT, build_command_table
from .dispatcher import Dispatcher

__all__ = ["Dispatcher", "UNKNOWN_COMMAND_TEXT", "build_command_table"]
