"""
Output and logging for the Strata ecosystem engine.

- DebugLogger: Level/category filtered structured debug log
- FrameLogger: Per-tick frame summaries with CSV/JSON export
"""

from .debug_logger import DebugLogger, LogLevel, LogEntry, create_console_logger
from .frame_logger import FrameLogger, FrameRecord

__all__ = [
    'DebugLogger',
    'LogLevel',
    'LogEntry',
    'create_console_logger',
    'FrameLogger',
    'FrameRecord',
]
