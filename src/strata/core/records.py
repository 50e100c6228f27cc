"""
Emotion records: the only persistent input of the ecosystem.

A record is what one classified message leaves behind: a category, an
intensity and a place on the depth axis. Records are immutable and are
validated once at construction, so every later stage can trust them.

Other users' records arrive as partial records (no id, no text) and are
converted to ordinary records with a content-derived id.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union
import hashlib

from ..utils.validators import (
    ValidationError,
    validate_not_empty,
    validate_number,
    validate_strength,
    validate_max_length,
    validate_in_set,
)

MAX_ANALYSIS_LENGTH = 15


# =============================================================================
# Categories
# =============================================================================

class EmotionCategory(Enum):
    """The seven emotion categories."""
    JOY = "joy"
    PEACE = "peace"
    STRESS = "stress"
    SADNESS = "sadness"
    INSPIRATION = "inspiration"
    NOSTALGIA = "nostalgia"
    CONFUSION = "confusion"

    @classmethod
    def parse(cls, value: Union[str, 'EmotionCategory'], field: str = "category") -> 'EmotionCategory':
        """
        Coerce a string (case-insensitive) or enum member to a category.

        Raises:
            ValidationError: If the value names no category
        """
        if isinstance(value, cls):
            return value
        key = value.strip().lower() if isinstance(value, str) else str(value)
        validate_in_set(key, {c.value for c in cls}, field)
        return cls(key)


class CategoryGroup(Enum):
    """Category groups used by the environment fields."""
    WARM = "warm"       # joy + inspiration
    CALM = "calm"       # sadness + peace
    ALARM = "alarm"     # stress
    SEPIA = "sepia"     # nostalgia
    MURK = "murk"       # confusion


CATEGORY_GROUPS: Dict[CategoryGroup, Tuple[EmotionCategory, ...]] = {
    CategoryGroup.WARM: (EmotionCategory.JOY, EmotionCategory.INSPIRATION),
    CategoryGroup.CALM: (EmotionCategory.SADNESS, EmotionCategory.PEACE),
    CategoryGroup.ALARM: (EmotionCategory.STRESS,),
    CategoryGroup.SEPIA: (EmotionCategory.NOSTALGIA,),
    CategoryGroup.MURK: (EmotionCategory.CONFUSION,),
}


def parse_timestamp(value: Union[str, datetime], field: str = "created_at") -> datetime:
    """
    Parse an ISO-8601 timestamp (``Z`` suffix allowed) into an aware datetime.

    Naive datetimes are taken to be UTC.

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"invalid timestamp '{value}'", field)
    else:
        raise ValidationError(f"must be a datetime or ISO string, got {type(value).__name__}", field)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


# =============================================================================
# Records
# =============================================================================

@dataclass(frozen=True)
class EmotionRecord:
    """
    One classified message placed on the depth axis.

    Attributes:
        id: Stable unique identifier
        category: Emotion category
        strength: Intensity in [0, 1]
        depth: Position on the navigation axis (0 = ground, + = deeper/older)
        analysis: Short decorative annotation (at most 15 characters)
        created_at: Creation time, used only to seed animation phase
        owner_id: Owning user, None for other users' partial records
    """
    id: str
    category: EmotionCategory
    strength: float
    depth: float
    analysis: str = ""
    created_at: datetime = datetime(1970, 1, 1, tzinfo=timezone.utc)
    owner_id: Optional[str] = None

    def __post_init__(self):
        validate_not_empty(self.id, "id")
        if not isinstance(self.id, str):
            raise ValidationError(f"must be a string, got {type(self.id).__name__}", "id")
        object.__setattr__(self, 'category', EmotionCategory.parse(self.category))
        object.__setattr__(self, 'strength', validate_strength(self.strength))
        object.__setattr__(self, 'depth', validate_number(self.depth, "depth"))
        validate_max_length(self.analysis, MAX_ANALYSIS_LENGTH, "analysis")
        object.__setattr__(self, 'created_at', parse_timestamp(self.created_at))

    @property
    def is_own(self) -> bool:
        """True for the signed-in user's own records."""
        return self.owner_id is not None

    @property
    def phase_seed(self) -> int:
        """Animation phase seed (creation time in milliseconds)."""
        return int(self.created_at.timestamp() * 1000)

    def with_depth(self, depth: float) -> 'EmotionRecord':
        """Copy of this record placed at another depth."""
        return EmotionRecord(
            id=self.id,
            category=self.category,
            strength=self.strength,
            depth=depth,
            analysis=self.analysis,
            created_at=self.created_at,
            owner_id=self.owner_id,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'category': self.category.value,
            'strength': self.strength,
            'depth': self.depth,
            'analysis': self.analysis,
            'created_at': self.created_at.isoformat(),
            'owner_id': self.owner_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'EmotionRecord':
        """
        Build a record from a persistence-shaped dict.

        Raises:
            ValidationError: If a field is missing or invalid
        """
        for key in ('id', 'category', 'strength', 'depth'):
            if key not in data:
                raise ValidationError("missing field", key)
        return cls(
            id=data['id'],
            category=data['category'],
            strength=data['strength'],
            depth=data['depth'],
            analysis=data.get('analysis', ""),
            created_at=data.get('created_at', datetime(1970, 1, 1, tzinfo=timezone.utc)),
            owner_id=data.get('owner_id'),
        )


@dataclass(frozen=True)
class PartialRecord:
    """
    Another user's record as exposed by persistence.

    Carries no id and no text; only what the scenery needs.
    """
    category: EmotionCategory
    strength: float
    depth: float
    created_at: datetime

    def __post_init__(self):
        object.__setattr__(self, 'category', EmotionCategory.parse(self.category))
        object.__setattr__(self, 'strength', validate_strength(self.strength))
        object.__setattr__(self, 'depth', validate_number(self.depth, "depth"))
        object.__setattr__(self, 'created_at', parse_timestamp(self.created_at))

    @property
    def content_id(self) -> str:
        """Deterministic id derived from the record's content."""
        key = f"{self.category.value}|{self.strength!r}|{self.depth!r}|{self.created_at.isoformat()}"
        return "other-" + hashlib.sha256(key.encode('utf-8')).hexdigest()[:24]

    def to_record(self) -> EmotionRecord:
        """Convert to a full record with no owner and no annotation."""
        return EmotionRecord(
            id=self.content_id,
            category=self.category,
            strength=self.strength,
            depth=self.depth,
            analysis="",
            created_at=self.created_at,
            owner_id=None,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'PartialRecord':
        for key in ('category', 'strength', 'depth', 'created_at'):
            if key not in data:
                raise ValidationError("missing field", key)
        return cls(
            category=data['category'],
            strength=data['strength'],
            depth=data['depth'],
            created_at=data['created_at'],
        )
