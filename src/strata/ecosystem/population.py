"""
Procedural population generator.

Expands emotion records into decorative plants and creatures. Everything is
derived from hashes of stable identities (record ids, category names), so
the same inputs always produce bit-identical entities and nothing needs to
be stored.

Two count policies:
- Per record (underground and in the ground band): a handful of children
  around each record, more for stronger records.
- Surface (global): one garden for the whole history, apportioned across
  categories by share and capped.
"""

from dataclasses import dataclass
from enum import Enum
import math
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config.models import PopulationConfig
from ..core.records import EmotionCategory, EmotionRecord
from ..utils.math_utils import clamp
from ..utils.rng import SeedStream, record_seed, string_seed
from .area import Area
from .distribution import Distribution


# =============================================================================
# Entity Kinds
# =============================================================================

class EntityFamily(Enum):
    PLANT = "plant"
    CREATURE = "creature"


class EntityKind(Enum):
    """Render kinds. Each kind has its own handle pool."""
    # Plants, one per category
    JOY_PLANT = "joy_plant"
    PEACE_PLANT = "peace_plant"
    STRESS_PLANT = "stress_plant"
    SADNESS_PLANT = "sadness_plant"
    INSPIRATION_PLANT = "inspiration_plant"
    NOSTALGIA_PLANT = "nostalgia_plant"
    CONFUSION_PLANT = "confusion_plant"

    # Creatures
    BUTTERFLY = "butterfly"
    BIRD = "bird"
    INSECT = "insect"
    BUBBLE = "bubble"
    ENERGY = "energy"
    MEMORY = "memory"
    LOST_LIGHT = "lost_light"
    GLOW_FUNGUS = "glow_fungus"
    MICROBE = "microbe"

    @property
    def family(self) -> EntityFamily:
        if self.value.endswith("_plant"):
            return EntityFamily.PLANT
        return EntityFamily.CREATURE


PLANT_KINDS: Dict[EmotionCategory, EntityKind] = {
    EmotionCategory.JOY: EntityKind.JOY_PLANT,
    EmotionCategory.PEACE: EntityKind.PEACE_PLANT,
    EmotionCategory.STRESS: EntityKind.STRESS_PLANT,
    EmotionCategory.SADNESS: EntityKind.SADNESS_PLANT,
    EmotionCategory.INSPIRATION: EntityKind.INSPIRATION_PLANT,
    EmotionCategory.NOSTALGIA: EntityKind.NOSTALGIA_PLANT,
    EmotionCategory.CONFUSION: EntityKind.CONFUSION_PLANT,
}

SURFACE_CREATURES: Dict[EmotionCategory, Tuple[EntityKind, ...]] = {
    EmotionCategory.JOY: (EntityKind.BUTTERFLY,),
    EmotionCategory.INSPIRATION: (EntityKind.BUTTERFLY, EntityKind.ENERGY),
    EmotionCategory.PEACE: (EntityKind.BIRD,),
    EmotionCategory.SADNESS: (EntityKind.BIRD,),
    EmotionCategory.STRESS: (EntityKind.INSECT,),
    EmotionCategory.NOSTALGIA: (EntityKind.MEMORY,),
    EmotionCategory.CONFUSION: (EntityKind.LOST_LIGHT,),
}

UNDERGROUND_CREATURES: Dict[EmotionCategory, Tuple[EntityKind, ...]] = {
    EmotionCategory.JOY: (EntityKind.GLOW_FUNGUS,),
    EmotionCategory.INSPIRATION: (EntityKind.GLOW_FUNGUS, EntityKind.ENERGY),
    EmotionCategory.PEACE: (EntityKind.BUBBLE, EntityKind.MICROBE),
    EmotionCategory.SADNESS: (EntityKind.BUBBLE,),
    EmotionCategory.STRESS: (EntityKind.ENERGY,),
    EmotionCategory.NOSTALGIA: (EntityKind.MEMORY,),
    EmotionCategory.CONFUSION: (EntityKind.LOST_LIGHT,),
}

# Sample offsets within one entity's seed stream
_ANGLE, _RADIUS, _JITTER_SIGN, _JITTER, _STRENGTH, _FAMILY, _KIND = range(7)
# Record anchor samples (kept clear of the per-entity offsets)
_ANCHOR_ANGLE, _ANCHOR_RADIUS = 10, 11


# =============================================================================
# Entity Types
# =============================================================================

@dataclass(frozen=True)
class Offset:
    """Position relative to the parent anchor (scene units; depth units for ``depth``)."""
    x: float
    y: float
    depth: float


@dataclass(frozen=True)
class Anchor:
    """Un-projected parent position: lateral scene offset and depth."""
    x: float
    depth: float


@dataclass(frozen=True)
class ChildEntity:
    """
    A decorative plant or creature. Ephemeral, recomputed every tick.

    Attributes:
        id: ``"<parent_id>-<index>"``
        parent_id: Record id (or surface anchor id)
        index: Generator index under the parent
        kind: Render kind
        category: Emotion category that produced it
        offset: Position relative to the parent anchor
        strength: Scale / brightness in [0, 1]
        phase_seed: Animation phase seed
        anchor: Parent position
    """
    id: str
    parent_id: str
    index: int
    kind: EntityKind
    category: EmotionCategory
    offset: Offset
    strength: float
    phase_seed: int
    anchor: Anchor

    @property
    def depth(self) -> float:
        """Absolute depth of the entity."""
        return self.anchor.depth + self.offset.depth

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'parent_id': self.parent_id,
            'kind': self.kind.value,
            'category': self.category.value,
            'offset': [self.offset.x, self.offset.y, self.offset.depth],
            'strength': self.strength,
            'phase_seed': self.phase_seed,
            'anchor': [self.anchor.x, self.anchor.depth],
        }


# =============================================================================
# Generator
# =============================================================================

class ProceduralPopulationGenerator:
    """
    Deterministic expansion of records into child entities.

    Example:
        >>> gen = ProceduralPopulationGenerator()
        >>> children = gen.populate_record(record)
        >>> children == gen.populate_record(record)
        True
        >>> all(c.id.startswith(record.id) for c in children)
        True
    """

    def __init__(self, config: Optional[PopulationConfig] = None):
        self.config = config or PopulationConfig()

    # =========================================================================
    # Counts
    # =========================================================================

    def record_count(self, strength: float) -> int:
        """Children per record; non-decreasing in strength."""
        cfg = self.config
        raw = math.floor(strength * cfg.count_gain + cfg.count_base + 0.5)
        return int(clamp(raw, cfg.min_count, cfg.max_count))

    def surface_total(self, distribution: Distribution) -> int:
        cfg = self.config
        return min(int(math.floor(distribution.total_strength * cfg.surface_scale)), cfg.surface_cap)

    @staticmethod
    def uses_default_garden(distribution: Distribution) -> bool:
        """An empty or strengthless history falls back to the default garden."""
        return distribution.count == 0 or distribution.total_strength == 0

    def surface_counts(self, distribution: Distribution) -> Dict[EmotionCategory, int]:
        """Per-category surface counts (floor of share * total)."""
        if self.uses_default_garden(distribution):
            n = self.config.empty_surface_per_category
            return {category: n for category in EmotionCategory}
        total = self.surface_total(distribution)
        return {
            category: int(math.floor(distribution.share(category) * total))
            for category in EmotionCategory
        }

    # =========================================================================
    # Anchors
    # =========================================================================

    def anchor_for(self, record: EmotionRecord) -> Anchor:
        """Lateral placement of a record, fixed by its id."""
        stream = SeedStream(record_seed(record.id))
        angle = stream.angle(_ANCHOR_ANGLE)
        radius = stream.at(_ANCHOR_RADIUS) * self.config.anchor_radius
        return Anchor(x=math.cos(angle) * radius, depth=record.depth)

    # =========================================================================
    # Expansion
    # =========================================================================

    def _kind(self, stream: SeedStream, category: EmotionCategory,
              creatures: Dict[EmotionCategory, Tuple[EntityKind, ...]]) -> EntityKind:
        if stream.at(_FAMILY) < self.config.creature_ratio:
            return stream.pick(_KIND, creatures[category])
        return PLANT_KINDS[category]

    def _offset(self, stream: SeedStream, radius_band: Tuple[float, float],
                jitter_band: Tuple[float, float]) -> Offset:
        angle = stream.angle(_ANGLE)
        radius = stream.uniform(_RADIUS, *radius_band)
        sign = 1.0 if stream.at(_JITTER_SIGN) >= 0.5 else -1.0
        jitter = sign * stream.uniform(_JITTER, *jitter_band)
        return Offset(x=math.cos(angle) * radius, y=math.sin(angle) * radius, depth=jitter)

    def populate_record(self, record: EmotionRecord) -> List[ChildEntity]:
        """
        Children of one record (underground and ground-band policy).

        Creatures come from the surface table for records at or above the
        ground plane and from the underground table below it.
        """
        cfg = self.config
        base = SeedStream(record_seed(record.id))
        anchor = self.anchor_for(record)
        creatures = SURFACE_CREATURES if record.depth <= 0 else UNDERGROUND_CREATURES

        children = []
        for index in range(self.record_count(record.strength)):
            stream = base.child(index, cfg.child_stride)
            strength = record.strength * (cfg.strength_floor + stream.at(_STRENGTH) * (1.0 - cfg.strength_floor))
            children.append(ChildEntity(
                id=f"{record.id}-{index}",
                parent_id=record.id,
                index=index,
                kind=self._kind(stream, record.category, creatures),
                category=record.category,
                offset=self._offset(stream, cfg.underground_radius, cfg.underground_jitter),
                strength=strength,
                phase_seed=record.phase_seed + index,
                anchor=anchor,
            ))
        return children

    def populate_surface(self, distribution: Distribution) -> List[ChildEntity]:
        """
        The surface garden for a whole-history distribution.

        An empty or strengthless history gets a default garden so the
        surface is never bare.
        """
        cfg = self.config
        empty = self.uses_default_garden(distribution)
        prefix = "surface-default" if empty else "surface"
        anchor = Anchor(x=0.0, depth=cfg.surface_anchor_depth)

        children = []
        for category, count in self.surface_counts(distribution).items():
            parent_id = f"{prefix}-{category.value}"
            base = SeedStream(string_seed(parent_id))
            for index in range(count):
                stream = base.child(index, cfg.child_stride)
                u = stream.at(_STRENGTH)
                if empty:
                    strength = 0.5 + u * 0.3
                else:
                    strength = distribution.avg_strength * (cfg.strength_floor + u * (1.0 - cfg.strength_floor))
                children.append(ChildEntity(
                    id=f"{parent_id}-{index}",
                    parent_id=parent_id,
                    index=index,
                    kind=self._kind(stream, category, SURFACE_CREATURES),
                    category=category,
                    offset=self._offset(stream, cfg.surface_radius, cfg.surface_jitter),
                    strength=strength,
                    phase_seed=base.seed + index,
                    anchor=anchor,
                ))
        return children

    def populate(self, records: Iterable[EmotionRecord], area: Area,
                 distribution: Distribution) -> List[ChildEntity]:
        """
        Target entity set for one tick.

        Args:
            records: The selected window
            area: Current area
            distribution: Distribution of ``records``
        """
        if area == Area.SURFACE:
            return self.populate_surface(distribution)
        children: List[ChildEntity] = []
        for record in records:
            children.extend(self.populate_record(record))
        return children
