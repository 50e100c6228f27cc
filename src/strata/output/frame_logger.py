"""
Frame logging for the Strata ecosystem engine.

Keeps a bounded per-tick summary of what the engine produced, for
analysis of scroll sessions and CSV/JSON export.
"""

from dataclasses import dataclass
import csv
import io
import json
from typing import Any, Dict, List


@dataclass
class FrameRecord:
    """
    Summary of one tick.

    Attributes:
        timestamp: Engine time in seconds
        tick: Tick number
        depth: Displayed depth
        area: Area name
        window_size: Records in the window
        dominant: Dominant category of the window ("" when empty)
        fog_density: Fog density
        ambient: Ambient light intensity
        background: Background colour hex
        active_handles: Attached handles after the tick
        created / updated / retired / destroyed: Event counts of the tick
    """
    timestamp: float
    tick: int
    depth: float
    area: str
    window_size: int
    dominant: str = ""
    fog_density: float = 0.0
    ambient: float = 0.0
    background: str = ""
    active_handles: int = 0
    created: int = 0
    updated: int = 0
    retired: int = 0
    destroyed: int = 0
    is_jump: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'tick': self.tick,
            'depth': self.depth,
            'area': self.area,
            'window_size': self.window_size,
            'dominant': self.dominant,
            'fog_density': self.fog_density,
            'ambient': self.ambient,
            'background': self.background,
            'active_handles': self.active_handles,
            'created': self.created,
            'updated': self.updated,
            'retired': self.retired,
            'destroyed': self.destroyed,
            'is_jump': self.is_jump,
        }


class FrameLogger:
    """
    Logs per-tick frame summaries.

    Example:
        >>> logger = FrameLogger(max_frames=5000)
        >>> engine.on_frame(logger.log_frame)
        >>> logger.get_by_area("underground")
        >>> csv_data = logger.to_csv()
    """

    CSV_COLUMNS = [
        'timestamp', 'tick', 'depth', 'area', 'window_size', 'dominant',
        'fog_density', 'ambient', 'background', 'active_handles',
        'created', 'updated', 'retired', 'destroyed', 'is_jump',
    ]

    def __init__(self, max_frames: int = 10000):
        self.max_frames = max_frames
        self._frames: List[FrameRecord] = []
        self._stats = {
            'total_logged': 0,
            'by_area': {},
            'events': {'created': 0, 'updated': 0, 'retired': 0, 'destroyed': 0},
            'jumps': 0,
        }

    def log_frame(self, frame: Any) -> FrameRecord:
        """
        Log a TickFrame.

        Returns:
            The created FrameRecord
        """
        counts = frame.event_counts()
        dominant = "" if frame.distribution.is_empty else frame.distribution.dominant().value
        record = FrameRecord(
            timestamp=frame.timestamp,
            tick=frame.tick,
            depth=frame.smoothed_depth,
            area=frame.area.value,
            window_size=frame.window_size,
            dominant=dominant,
            fog_density=frame.fields.fog.density,
            ambient=frame.fields.lighting.ambient,
            background=frame.fields.background.to_hex(),
            active_handles=frame.active_handles,
            created=counts.get('create', 0) + counts.get('reattach', 0),
            updated=counts.get('update', 0),
            retired=counts.get('retire', 0),
            destroyed=counts.get('destroy', 0),
            is_jump=frame.is_jump,
        )

        self._frames.append(record)
        if len(self._frames) > self.max_frames:
            self._frames = self._frames[-self.max_frames:]

        self._stats['total_logged'] += 1
        by_area = self._stats['by_area']
        by_area[record.area] = by_area.get(record.area, 0) + 1
        for key in ('created', 'updated', 'retired', 'destroyed'):
            self._stats['events'][key] += getattr(record, key)
        if record.is_jump:
            self._stats['jumps'] += 1

        return record

    # =========================================================================
    # Query Methods
    # =========================================================================

    def get_all(self) -> List[FrameRecord]:
        return list(self._frames)

    def get_recent(self, count: int = 10) -> List[FrameRecord]:
        return self._frames[-count:]

    def get_by_area(self, area: str) -> List[FrameRecord]:
        return [f for f in self._frames if f.area == area]

    def get_in_range(self, start_time: float, end_time: float) -> List[FrameRecord]:
        return [f for f in self._frames if start_time <= f.timestamp <= end_time]

    # =========================================================================
    # Statistics
    # =========================================================================

    @property
    def count(self) -> int:
        return len(self._frames)

    @property
    def total_logged(self) -> int:
        return self._stats['total_logged']

    def get_stats(self) -> Dict[str, Any]:
        depths = [f.depth for f in self._frames]
        return {
            'stored_frames': len(self._frames),
            'total_logged': self._stats['total_logged'],
            'by_area': dict(self._stats['by_area']),
            'events': dict(self._stats['events']),
            'jumps': self._stats['jumps'],
            'min_depth': min(depths) if depths else 0.0,
            'max_depth': max(depths) if depths else 0.0,
            'peak_handles': max((f.active_handles for f in self._frames), default=0),
        }

    # =========================================================================
    # Export Methods
    # =========================================================================

    def to_csv(self, include_header: bool = True) -> str:
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=self.CSV_COLUMNS, extrasaction='ignore')
        if include_header:
            writer.writeheader()
        for frame in self._frames:
            writer.writerow(frame.to_dict())
        return output.getvalue()

    def write_csv(self, filepath: str) -> int:
        with open(filepath, 'w', newline='', encoding='utf-8') as f:
            f.write(self.to_csv())
        return len(self._frames)

    def to_json(self, pretty: bool = False) -> str:
        data = [f.to_dict() for f in self._frames]
        return json.dumps(data, indent=2 if pretty else None)

    def write_json(self, filepath: str, pretty: bool = True) -> int:
        with open(filepath, 'w', encoding='utf-8') as f:
            f.write(self.to_json(pretty=pretty))
        return len(self._frames)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def clear(self) -> None:
        """Clear stored frames (keeps stats)."""
        self._frames.clear()

    def reset(self) -> None:
        """Clear frames and stats."""
        self._frames.clear()
        self._stats = {
            'total_logged': 0,
            'by_area': {},
            'events': {'created': 0, 'updated': 0, 'retired': 0, 'destroyed': 0},
            'jumps': 0,
        }

    def __len__(self) -> int:
        return len(self._frames)

    def __repr__(self) -> str:
        return f"FrameLogger(stored={len(self._frames)}, total={self._stats['total_logged']})"
