"""
Record window selection.

The surface shows the accumulated garden, so by default it draws on the
whole store (or only on records at or above the ground plane). Below
ground only records near the viewer matter.
"""

from typing import Iterable, List, Optional

from ..config.models import WindowConfig
from ..core.records import EmotionRecord
from .area import Area

GROUND_PLANE = 0.0


def in_surface_scope(record: EmotionRecord, config: WindowConfig) -> bool:
    if config.surface_scope == "all":
        return True
    return record.depth <= GROUND_PLANE


def select_window(records: Iterable[EmotionRecord], depth: float, area: Area,
                  config: Optional[WindowConfig] = None) -> List[EmotionRecord]:
    """
    Select the records relevant to the current view.

    Args:
        records: Candidate records (any order)
        depth: Current depth
        area: Area of the current depth
        config: Window radius and surface scope

    Returns:
        Matching records in input order. The radius bound is inclusive.
    """
    config = config or WindowConfig()
    if area == Area.SURFACE:
        return [r for r in records if in_surface_scope(r, config)]
    radius = config.radius
    return [r for r in records if abs(r.depth - depth) <= radius]
