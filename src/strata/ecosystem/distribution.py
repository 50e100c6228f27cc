"""
Emotion distribution of a record window.

Shares are strength-weighted: a strong record pulls the scenery further
than a weak one of another category.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable

from ..core.records import CATEGORY_GROUPS, CategoryGroup, EmotionCategory, EmotionRecord


def _zero_shares() -> Dict[EmotionCategory, float]:
    return {category: 0.0 for category in EmotionCategory}


@dataclass(frozen=True)
class Distribution:
    """
    Strength-weighted category shares of a window.

    Attributes:
        shares: Share per category; sums to 1 when count > 0, all zero otherwise
        avg_strength: Mean strength (0 when empty)
        count: Number of records
        total_strength: Sum of strengths
    """
    shares: Dict[EmotionCategory, float] = field(default_factory=_zero_shares)
    avg_strength: float = 0.0
    count: int = 0
    total_strength: float = 0.0

    def share(self, category: EmotionCategory) -> float:
        return self.shares.get(category, 0.0)

    def group_share(self, group: CategoryGroup) -> float:
        return sum(self.share(c) for c in CATEGORY_GROUPS[group])

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def dominant(self) -> EmotionCategory:
        """Category with the largest share (first in enum order on ties)."""
        return max(EmotionCategory, key=lambda c: self.share(c))

    def to_dict(self) -> Dict[str, Any]:
        return {
            'shares': {c.value: s for c, s in self.shares.items()},
            'avg_strength': self.avg_strength,
            'count': self.count,
            'total_strength': self.total_strength,
        }


EMPTY_DISTRIBUTION = Distribution()


def analyze(records: Iterable[EmotionRecord]) -> Distribution:
    """
    Compute the distribution of a record window in one pass.

    Example:
        >>> dist = analyze([joy_record_09, stress_record_03])
        >>> round(dist.share(EmotionCategory.JOY), 2)
        0.75
    """
    sums = _zero_shares()
    counts = _zero_shares()
    count = 0
    for record in records:
        sums[record.category] += record.strength
        counts[record.category] += 1
        count += 1

    total = sum(sums.values())
    if total > 0:
        shares = {c: s / total for c, s in sums.items()}
    elif count > 0:
        # all strengths zero: fall back to record counts
        shares = {c: n / count for c, n in counts.items()}
    else:
        shares = _zero_shares()

    return Distribution(
        shares=shares,
        avg_strength=total / count if count > 0 else 0.0,
        count=count,
        total_strength=total,
    )
