"""
Terrarium: a growth summary of the user's own history, shown near the
ground plane.

Each category the user has written about grows a small cluster of plants;
the more (and the stronger) the messages, the larger the cluster and the
taller its plants. Positions come from seeded hashes, so the terrarium
only changes when the records do.
"""

from dataclasses import dataclass, field
import math
from typing import Any, Dict, Iterable, List

from ..core.records import EmotionCategory, EmotionRecord
from ..utils.rng import SeedStream, string_seed


@dataclass(frozen=True)
class TerrariumPlant:
    id: str
    category: EmotionCategory
    x: float
    z: float
    height: float
    growth: float


@dataclass
class TerrariumState:
    total_growth: float = 0.0
    plants: List[TerrariumPlant] = field(default_factory=list)
    category_growth: Dict[EmotionCategory, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_growth': self.total_growth,
            'category_growth': {c.value: g for c, g in self.category_growth.items()},
            'plant_count': len(self.plants),
        }


def plant_count(record_count: int) -> int:
    """Plants for a category with ``record_count`` records (3 to 15)."""
    return min(15, max(3, record_count // 3 + 3))


def analyze_growth(records: Iterable[EmotionRecord]) -> TerrariumState:
    """Build the terrarium for a set of records."""
    records = list(records)
    if not records:
        return TerrariumState()

    total = len(records)
    avg = sum(r.strength for r in records) / total
    state = TerrariumState(total_growth=min(1.0, (total / 100.0) * 0.5 + avg * 0.5))

    by_category: Dict[EmotionCategory, List[EmotionRecord]] = {}
    for record in records:
        by_category.setdefault(record.category, []).append(record)

    for category in EmotionCategory:
        group = by_category.get(category)
        if not group:
            continue
        count = len(group)
        cat_avg = sum(r.strength for r in group) / count
        growth = min(1.0, (count / 20.0) * 0.6 + cat_avg * 0.4)
        state.category_growth[category] = growth

        category_seed = string_seed(category.value)
        for i in range(plant_count(count)):
            stream = SeedStream(category_seed + i * 1000 + total)
            angle = stream.angle(0)
            radius = stream.uniform(1, 5.0, 15.0)
            state.plants.append(TerrariumPlant(
                id=f"terrarium-{category.value}-{i}",
                category=category,
                x=math.cos(angle) * radius,
                z=math.sin(angle) * radius,
                height=stream.uniform(2, 0.0, 3.0),
                growth=growth * (0.8 + stream.at(3) * 0.2),
            ))
    return state
