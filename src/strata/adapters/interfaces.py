"""
Contracts for the engine's external collaborators.

The engine never talks to a network, a database or a renderer directly;
it goes through these interfaces so any backend can be plugged in and
tests can use in-memory fakes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from ..core.records import EmotionCategory, EmotionRecord, PartialRecord


# =============================================================================
# Errors
# =============================================================================

class ClassificationError(Exception):
    """
    Raised when a message cannot be classified.

    Attributes:
        reason: One of ``malformed``, ``invalid_category``, ``invalid_strength``,
            ``invalid_annotation``, ``empty_message``, ``transport``
        message: Human-readable detail
    """

    REASONS = frozenset({
        'malformed', 'invalid_category', 'invalid_strength',
        'invalid_annotation', 'empty_message', 'transport',
    })

    def __init__(self, reason: str, message: str = ""):
        self.reason = reason
        self.message = message
        super().__init__(f"{reason}: {message}" if message else reason)


class PersistenceError(Exception):
    """Raised when the persistence service fails."""

    def __init__(self, operation: str, message: str = ""):
        self.operation = operation
        self.message = message
        super().__init__(f"{operation} failed: {message}" if message else f"{operation} failed")


# =============================================================================
# Classification
# =============================================================================

@dataclass(frozen=True)
class Classification:
    """A validated classifier response."""
    category: EmotionCategory
    strength: float
    annotation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'category': self.category.value,
            'strength': self.strength,
            'annotation': self.annotation,
        }


class ClassificationService(ABC):
    """Turns a free-text message into a category, strength and annotation."""

    @abstractmethod
    def classify(self, text: str) -> Classification:
        """
        Classify a message.

        Raises:
            ClassificationError: On transport failure or an invalid response
        """


# =============================================================================
# Persistence
# =============================================================================

class PersistenceService(ABC):
    """Stores the user's records and exposes other users' partial records."""

    @abstractmethod
    def list_own(self) -> List[EmotionRecord]:
        """All records of the signed-in user."""

    @abstractmethod
    def list_others(self, depth_min: float, depth_max: float) -> List[PartialRecord]:
        """Other users' records within a depth range."""

    @abstractmethod
    def append(self, record: EmotionRecord) -> Optional[EmotionRecord]:
        """Persist a new record; may return the stored version."""


class InMemoryPersistence(PersistenceService):
    """
    Persistence held in memory.

    Used by the simulator and tests. ``fail_next`` makes the next call raise
    a PersistenceError, to exercise degraded paths.
    """

    def __init__(self, own: Optional[List[EmotionRecord]] = None,
                 others: Optional[List[PartialRecord]] = None):
        self._own: List[EmotionRecord] = list(own or [])
        self._others: List[PartialRecord] = list(others or [])
        self.fail_next: Optional[str] = None
        self.calls: List[str] = []

    def _check(self, operation: str) -> None:
        self.calls.append(operation)
        if self.fail_next:
            message, self.fail_next = self.fail_next, None
            raise PersistenceError(operation, message)

    def list_own(self) -> List[EmotionRecord]:
        self._check('list_own')
        return list(self._own)

    def list_others(self, depth_min: float, depth_max: float) -> List[PartialRecord]:
        self._check('list_others')
        return [p for p in self._others if depth_min <= p.depth <= depth_max]

    def append(self, record: EmotionRecord) -> Optional[EmotionRecord]:
        self._check('append')
        self._own.append(record)
        return record

    def add_other(self, partial: PartialRecord) -> None:
        self._others.append(partial)
