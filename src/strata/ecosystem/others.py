"""
Other users' records: fetch scheduling and light markers.

Other people's records contribute to the distribution and population like
any other record. On top of that, the ones close to the viewer show up as
small coloured lights. They never carry text, and their placement only has
a simple positional jitter.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config.models import OthersConfig
from ..core.records import EmotionCategory, EmotionRecord
from .projection import Viewport

CATEGORY_COLORS: Dict[EmotionCategory, str] = {
    EmotionCategory.JOY: "#FFD700",
    EmotionCategory.PEACE: "#4DD0E1",
    EmotionCategory.STRESS: "#FF1744",
    EmotionCategory.SADNESS: "#5C6BC0",
    EmotionCategory.INSPIRATION: "#FFA726",
    EmotionCategory.NOSTALGIA: "#8D6E63",
    EmotionCategory.CONFUSION: "#66BB6A",
}


@dataclass(frozen=True)
class OtherLight:
    id: str
    category: EmotionCategory
    strength: float
    x: float
    y: float
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'category': self.category.value,
            'strength': self.strength,
            'x': self.x,
            'y': self.y,
            'color': self.color,
        }


def visible_lights(records: Iterable[EmotionRecord], depth: float,
                   viewport: Optional[Viewport] = None,
                   config: Optional[OthersConfig] = None) -> List[OtherLight]:
    """
    Light markers for other users' records near ``depth``.

    Own records are skipped. Lights that project off screen are dropped.
    """
    viewport = viewport or Viewport()
    config = config or OthersConfig()

    nearby = [r for r in records
              if not r.is_own and abs(r.depth - depth) <= config.light_radius]
    lights = []
    for index, record in enumerate(nearby):
        x = viewport.width * (0.2 + (index % 80) / 100.0)
        y = viewport.depth_to_y(record.depth, depth)
        if not viewport.is_visible(x, y):
            continue
        lights.append(OtherLight(
            id=f"light-{record.id}",
            category=record.category,
            strength=record.strength,
            x=x,
            y=y,
            color=CATEGORY_COLORS[record.category],
        ))
    return lights


class OthersFetchPolicy:
    """
    Decides when to ask persistence for other users' records.

    Fetches immediately the first time and whenever the viewer has moved
    far enough since the last fetch; otherwise waits out a debounce.

    Example:
        >>> policy = OthersFetchPolicy()
        >>> policy.should_fetch(0.0, now=0.0)
        True
        >>> policy.mark_fetched(0.0, now=0.0)
        >>> policy.should_fetch(50.0, now=1.0)
        False
        >>> policy.should_fetch(250.0, now=1.0)
        True
    """

    def __init__(self, config: Optional[OthersConfig] = None):
        self.config = config or OthersConfig()
        self._last_depth: Optional[float] = None
        self._last_time: Optional[float] = None

    def window(self, depth: float) -> Tuple[float, float]:
        """Depth range to request around ``depth``."""
        radius = self.config.fetch_radius
        return max(0.0, depth - radius), depth + radius

    def should_fetch(self, depth: float, now: float) -> bool:
        if self._last_depth is None or self._last_time is None:
            return True
        if abs(depth - self._last_depth) >= self.config.refetch_distance:
            return True
        return now - self._last_time >= self.config.debounce_seconds

    def mark_fetched(self, depth: float, now: float) -> None:
        self._last_depth = depth
        self._last_time = now

    def reset(self) -> None:
        self._last_depth = None
        self._last_time = None
