"""
Append-only record store.

The store is an explicit state object owned by whoever runs an engine
(never a module-level singleton), so several engines can coexist.
"""

from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .records import EmotionRecord
from ..utils.validators import ValidationError


class EmotionRecordStore:
    """
    Collection of emotion records, local and hydrated.

    Records are never mutated. Appending a record whose id is already
    present is a no-op when the records are identical and an error when
    they differ, since an id determines every other field.

    Example:
        >>> store = EmotionRecordStore()
        >>> store.append(record)
        True
        >>> len(store)
        1
        >>> store.clear()
    """

    def __init__(self, records: Optional[Iterable[EmotionRecord]] = None):
        self._records: Dict[str, EmotionRecord] = {}
        self._version = 0
        if records:
            self.extend(records)

    def append(self, record: EmotionRecord) -> bool:
        """
        Add a record.

        Returns:
            True if the record was added, False if it was already present

        Raises:
            ValidationError: If a different record with the same id exists
        """
        if not isinstance(record, EmotionRecord):
            raise ValidationError(f"expected EmotionRecord, got {type(record).__name__}", "record")

        existing = self._records.get(record.id)
        if existing is not None:
            if existing == record:
                return False
            raise ValidationError(f"conflicting record for id '{record.id}'", "id")

        self._records[record.id] = record
        self._version += 1
        return True

    def extend(self, records: Iterable[EmotionRecord]) -> int:
        """Append many records; returns how many were new."""
        added = 0
        for record in records:
            if self.append(record):
                added += 1
        return added

    def merge(self, records: Iterable[EmotionRecord]) -> int:
        """
        Add a batch of records, keeping any record already present.

        Used for hydration, where the same id can come back with a
        recomputed depth: the local record wins. The batch is checked
        before anything is added, so a bad batch leaves the store as it was.

        Returns:
            Number of records added

        Raises:
            ValidationError: If the batch holds two different records with one id
        """
        fresh: Dict[str, EmotionRecord] = {}
        for record in records:
            if not isinstance(record, EmotionRecord):
                raise ValidationError(f"expected EmotionRecord, got {type(record).__name__}", "record")
            seen = fresh.get(record.id)
            if seen is not None and seen != record:
                raise ValidationError(f"conflicting record for id '{record.id}'", "id")
            fresh[record.id] = record

        added = 0
        for record_id, record in fresh.items():
            if record_id not in self._records:
                self._records[record_id] = record
                added += 1
        if added:
            self._version += 1
        return added

    def clear(self) -> None:
        """Remove every record (sign-out)."""
        if self._records:
            self._records.clear()
            self._version += 1

    # =========================================================================
    # Queries
    # =========================================================================

    def get(self, record_id: str) -> Optional[EmotionRecord]:
        return self._records.get(record_id)

    def records(self) -> Tuple[EmotionRecord, ...]:
        """Snapshot of all records in insertion order."""
        return tuple(self._records.values())

    def own_records(self) -> List[EmotionRecord]:
        return [r for r in self._records.values() if r.is_own]

    def other_records(self) -> List[EmotionRecord]:
        return [r for r in self._records.values() if not r.is_own]

    @property
    def version(self) -> int:
        """Increments on every mutation."""
        return self._version

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[EmotionRecord]:
        return iter(tuple(self._records.values()))

    def __contains__(self, record_id: object) -> bool:
        return record_id in self._records

    def __repr__(self) -> str:
        return f"EmotionRecordStore(records={len(self._records)}, version={self._version})"
