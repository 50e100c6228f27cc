"""
Depth map: a coarse overview of where records sit on the depth axis.

Records are bucketed into fixed-size depth groups; the map's range is padded
so the extremes are not glued to its edges. The map also converts between a
vertical position on the overview (0 = top, 1 = bottom) and a depth, which
is how jump targets are picked.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List

from ..core.records import EmotionCategory, EmotionRecord
from ..utils.math_utils import clamp, inverse_lerp, lerp

BUCKET_SIZE = 10.0
MIN_PADDING = 100.0
PADDING_RATIO = 0.1
EMPTY_RANGE = (0.0, 1000.0)


@dataclass
class DepthGroup:
    """Records in one bucket."""
    depth: float
    count: int = 0
    total_strength: float = 0.0
    categories: Dict[EmotionCategory, int] = field(default_factory=dict)

    @property
    def avg_strength(self) -> float:
        return self.total_strength / self.count if self.count else 0.0

    @property
    def dominant_category(self) -> EmotionCategory:
        return max(self.categories, key=lambda c: self.categories[c])

    def to_dict(self) -> Dict[str, Any]:
        return {
            'depth': self.depth,
            'count': self.count,
            'avg_strength': self.avg_strength,
            'dominant': self.dominant_category.value,
        }


@dataclass
class DepthMap:
    """Bucketed overview with a padded depth range."""
    groups: List[DepthGroup]
    min_depth: float
    max_depth: float

    @property
    def span(self) -> float:
        return self.max_depth - self.min_depth

    def depth_at_ratio(self, ratio: float) -> float:
        """Depth at a vertical position on the map (clamped to [0, 1])."""
        return lerp(self.min_depth, self.max_depth, clamp(ratio, 0.0, 1.0))

    def ratio_for_depth(self, depth: float) -> float:
        """Vertical map position of a depth, in [0, 1]."""
        return clamp(inverse_lerp(self.min_depth, self.max_depth, depth), 0.0, 1.0)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'min_depth': self.min_depth,
            'max_depth': self.max_depth,
            'groups': [g.to_dict() for g in self.groups],
        }


def bucket_depth(depth: float, bucket_size: float = BUCKET_SIZE) -> float:
    return round(depth / bucket_size) * bucket_size


def build_depth_map(records: Iterable[EmotionRecord],
                    bucket_size: float = BUCKET_SIZE) -> DepthMap:
    """
    Build the overview for a set of records.

    Example:
        >>> depth_map = build_depth_map([])
        >>> (depth_map.min_depth, depth_map.max_depth)
        (0.0, 1000.0)
    """
    buckets: Dict[float, DepthGroup] = {}
    for record in records:
        key = bucket_depth(record.depth, bucket_size)
        group = buckets.get(key)
        if group is None:
            group = buckets[key] = DepthGroup(depth=key)
        group.count += 1
        group.total_strength += record.strength
        group.categories[record.category] = group.categories.get(record.category, 0) + 1

    if not buckets:
        return DepthMap(groups=[], min_depth=EMPTY_RANGE[0], max_depth=EMPTY_RANGE[1])

    groups = [buckets[key] for key in sorted(buckets)]
    low, high = groups[0].depth, groups[-1].depth
    padding = max((high - low) * PADDING_RATIO, MIN_PADDING)
    return DepthMap(
        groups=groups,
        min_depth=max(0.0, low - padding),
        max_depth=high + padding,
    )
