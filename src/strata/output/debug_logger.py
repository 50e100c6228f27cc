"""
Debug logging for the Strata ecosystem engine.

In-memory, level- and category-filtered structured log with optional
console echo. Categories used by the engine:

    engine, depth, store, lifecycle, sync
"""

from dataclasses import dataclass, field
from enum import Enum
import json
import sys
import time
from typing import Any, Callable, Dict, List, Optional, TextIO


class LogLevel(Enum):
    """Log levels for filtering output."""
    TRACE = 0    # Every tick
    DEBUG = 1    # Detailed debugging
    INFO = 2     # General information
    WARNING = 3  # Degraded operation
    ERROR = 4    # Errors
    NONE = 5     # No logging


@dataclass
class LogEntry:
    """A single log entry."""
    timestamp: float
    level: LogLevel
    category: str
    message: str
    data: Dict[str, Any] = field(default_factory=dict)

    def format(self, include_data: bool = True, level_color: str = '',
               category_color: str = '', reset: str = '') -> str:
        """
        Render as one line: ``[time] LEVEL category message (k=v, ...)``.

        Colour codes wrap the level and category columns when given.
        """
        level_col = f"{level_color}{self.level.name[:5]:<5}{reset}"
        cat_col = f"{category_color}{self.category[:12]:<12}{reset}"
        line = f"[{self.timestamp:8.2f}] {level_col} {cat_col} {self.message}"
        if include_data and self.data:
            line += " (" + ", ".join(f"{k}={v}" for k, v in self.data.items()) + ")"
        return line

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'level': self.level.name,
            'category': self.category,
            'message': self.message,
            'data': self.data,
        }


class DebugLogger:
    """
    Debug logger for the Strata engine.

    Example:
        >>> logger = DebugLogger(level=LogLevel.DEBUG)
        >>> logger.debug("depth", "Jump started", target=300.0)
        >>> logger.set_category_filter(["sync"])
        >>> logger.write_log("debug.log")
    """

    CATEGORY_COLORS = {
        'engine': '\033[36m',      # Cyan
        'depth': '\033[34m',       # Blue
        'store': '\033[35m',       # Magenta
        'lifecycle': '\033[37m',   # White
        'sync': '\033[31m',        # Red
    }
    RESET_COLOR = '\033[0m'

    LEVEL_COLORS = {
        LogLevel.TRACE: '\033[90m',
        LogLevel.DEBUG: '\033[37m',
        LogLevel.INFO: '\033[32m',
        LogLevel.WARNING: '\033[33m',
        LogLevel.ERROR: '\033[31m',
    }

    def __init__(self,
                 level: LogLevel = LogLevel.INFO,
                 output: Optional[TextIO] = None,
                 use_colors: bool = True,
                 max_entries: int = 10000):
        """
        Initialize the debug logger.

        Args:
            level: Minimum log level to record
            output: Output stream (None = no console output)
            use_colors: Use ANSI colors in output
            max_entries: Maximum entries to store
        """
        self.level = level
        self.output = output
        self.use_colors = use_colors
        self.max_entries = max_entries

        self._entries: List[LogEntry] = []
        self._category_filter: Optional[set] = None
        self._callbacks: List[Callable[[LogEntry], None]] = []

        self._tick_times: List[float] = []
        self._last_tick_start: float = 0.0

    def set_category_filter(self, categories: Optional[List[str]]) -> None:
        """Only log these categories (None logs all)."""
        self._category_filter = None if categories is None else set(categories)

    def add_callback(self, callback: Callable[[LogEntry], None]) -> None:
        self._callbacks.append(callback)

    def remove_callback(self, callback: Callable[[LogEntry], None]) -> None:
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # =========================================================================
    # Logging Methods
    # =========================================================================

    def log(self, level: LogLevel, category: str, message: str,
            timestamp: float = 0.0, **data) -> Optional[LogEntry]:
        """
        Log a message.

        Args:
            level: Log level
            category: Category (e.g., "depth", "sync")
            message: Log message
            timestamp: Engine time in seconds
            **data: Additional structured data

        Returns:
            LogEntry if logged, None if filtered
        """
        if level.value < self.level.value:
            return None
        if self._category_filter and category not in self._category_filter:
            return None

        entry = LogEntry(
            timestamp=timestamp,
            level=level,
            category=category,
            message=message,
            data=data,
        )

        self._entries.append(entry)
        if len(self._entries) > self.max_entries:
            self._entries = self._entries[-self.max_entries:]

        if self.output:
            self._write_entry(entry)

        for callback in self._callbacks:
            callback(entry)

        return entry

    def trace(self, category: str, message: str, timestamp: float = 0.0, **data) -> Optional[LogEntry]:
        return self.log(LogLevel.TRACE, category, message, timestamp, **data)

    def debug(self, category: str, message: str, timestamp: float = 0.0, **data) -> Optional[LogEntry]:
        return self.log(LogLevel.DEBUG, category, message, timestamp, **data)

    def info(self, category: str, message: str, timestamp: float = 0.0, **data) -> Optional[LogEntry]:
        return self.log(LogLevel.INFO, category, message, timestamp, **data)

    def warning(self, category: str, message: str, timestamp: float = 0.0, **data) -> Optional[LogEntry]:
        return self.log(LogLevel.WARNING, category, message, timestamp, **data)

    def error(self, category: str, message: str, timestamp: float = 0.0, **data) -> Optional[LogEntry]:
        return self.log(LogLevel.ERROR, category, message, timestamp, **data)

    def _write_entry(self, entry: LogEntry) -> None:
        if self.use_colors:
            line = entry.format(
                level_color=self.LEVEL_COLORS.get(entry.level, ''),
                category_color=self.CATEGORY_COLORS.get(entry.category, ''),
                reset=self.RESET_COLOR,
            )
        else:
            line = entry.format()
        self.output.write(line + "\n")
        self.output.flush()

    # =========================================================================
    # Specialized Logging
    # =========================================================================

    def log_tick(self, timestamp: float, depth: float, area: str,
                 window: int, events: int) -> None:
        self.trace("engine", "Tick", timestamp,
                   depth=f"{depth:.1f}", area=area, window=window, events=events)

    def log_area_change(self, timestamp: float, old_area: str, new_area: str,
                        depth: float) -> None:
        self.debug("depth", f"Area {old_area} -> {new_area}", timestamp, depth=f"{depth:.1f}")

    def log_jump(self, timestamp: float, start: float, target: float) -> None:
        self.debug("depth", "Jump", timestamp, start=f"{start:.1f}", target=f"{target:.1f}")

    def log_store_change(self, timestamp: float, action: str, count: int,
                         total: int) -> None:
        self.info("store", action, timestamp, count=count, total=total)

    def log_sync_failure(self, timestamp: float, operation: str, error: Exception) -> None:
        self.warning("sync", f"{operation} failed, keeping current records", timestamp,
                     error=str(error))

    def log_pool_eviction(self, timestamp: float, destroyed: int) -> None:
        self.debug("lifecycle", "Pool overflow", timestamp, destroyed=destroyed)

    # =========================================================================
    # Performance Tracking
    # =========================================================================

    def tick_start(self) -> None:
        self._last_tick_start = time.perf_counter()

    def tick_end(self) -> float:
        """
        Mark the end of a tick.

        Returns:
            Tick duration in milliseconds
        """
        duration = (time.perf_counter() - self._last_tick_start) * 1000
        self._tick_times.append(duration)
        if len(self._tick_times) > 1000:
            self._tick_times = self._tick_times[-1000:]
        return duration

    def get_performance_stats(self) -> Dict[str, float]:
        if not self._tick_times:
            return {'avg_ms': 0.0, 'min_ms': 0.0, 'max_ms': 0.0, 'samples': 0}
        return {
            'avg_ms': sum(self._tick_times) / len(self._tick_times),
            'min_ms': min(self._tick_times),
            'max_ms': max(self._tick_times),
            'samples': len(self._tick_times),
        }

    # =========================================================================
    # Query Methods
    # =========================================================================

    def get_warnings(self) -> List[LogEntry]:
        return [e for e in self._entries if e.level == LogLevel.WARNING]

    def get_by_category(self, category: str) -> List[LogEntry]:
        return [e for e in self._entries if e.category == category]

    def search(self, text: str) -> List[LogEntry]:
        text_lower = text.lower()
        return [e for e in self._entries if text_lower in e.message.lower()]

    # =========================================================================
    # Export Methods
    # =========================================================================

    def to_text(self, include_data: bool = True) -> str:
        return "\n".join(e.format(include_data) for e in self._entries)

    def to_json(self, pretty: bool = False) -> str:
        data = [e.to_dict() for e in self._entries]
        return json.dumps(data, indent=2 if pretty else None)

    def write_log(self, filepath: str, format: str = "text") -> int:
        """
        Write log to file.

        Args:
            filepath: Output file path
            format: "text" or "json"

        Returns:
            Number of entries written
        """
        with open(filepath, 'w', encoding='utf-8') as f:
            if format == "json":
                f.write(self.to_json(pretty=True))
            else:
                f.write(self.to_text())
        return len(self._entries)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @property
    def count(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()
        self._tick_times.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"DebugLogger(entries={len(self._entries)}, level={self.level.name})"


def create_console_logger(level: LogLevel = LogLevel.INFO,
                          use_colors: bool = True) -> DebugLogger:
    """Create a logger that echoes to stdout."""
    return DebugLogger(level=level, output=sys.stdout, use_colors=use_colors)
