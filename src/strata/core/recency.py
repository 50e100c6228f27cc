"""
Depth from recency.

Owned records are placed on the depth axis by age: the newest record sits
at a shallow baseline and every record is pushed deeper by a fixed number
of depth units per day of age. Depths are floored to whole units, which
keeps the ordering non-strict: an older record is never shallower than a
newer one.
"""

import math
from datetime import datetime
from typing import Iterable, List, Sequence, Union

from .records import EmotionRecord, parse_timestamp

MS_PER_DAY = 86_400_000
UNITS_PER_DAY = 10

Timestamp = Union[str, datetime]


def _age_ms(created_at: datetime, reference: datetime) -> float:
    return (reference - created_at).total_seconds() * 1000.0


def depth_from_created_at(created_at: Timestamp, reference: Timestamp,
                          baseline: float = 0.0,
                          units_per_day: float = UNITS_PER_DAY,
                          allow_negative: bool = False) -> float:
    """
    Depth of one timestamp relative to a reference time.

    Args:
        created_at: When the record was created
        reference: Time that maps to ``baseline`` (usually the newest record)
        baseline: Depth of the reference time
        units_per_day: Depth units per day of age
        allow_negative: Keep records newer than the reference above baseline

    Example:
        >>> depth_from_created_at("2024-01-01T00:00:00Z", "2024-01-02T00:00:00Z")
        10.0
    """
    created = parse_timestamp(created_at)
    ref = parse_timestamp(reference, "reference")
    unit_ms = MS_PER_DAY / units_per_day
    units = math.floor(_age_ms(created, ref) / unit_ms)
    if not allow_negative:
        units = max(0, units)
    return baseline + float(units)


def depths_from_timestamps(timestamps: Sequence[Timestamp],
                           baseline: float = 0.0,
                           units_per_day: float = UNITS_PER_DAY) -> List[float]:
    """
    Depths for a batch of timestamps, newest at ``baseline``.

    The result is aligned with the input order.
    """
    if not timestamps:
        return []
    parsed = [parse_timestamp(ts) for ts in timestamps]
    newest = max(parsed)
    return [
        depth_from_created_at(ts, newest, baseline, units_per_day)
        for ts in parsed
    ]


def place_by_recency(records: Iterable[EmotionRecord],
                     baseline: float = 0.0,
                     units_per_day: float = UNITS_PER_DAY) -> List[EmotionRecord]:
    """Copies of ``records`` with depths recomputed from their creation times."""
    records = list(records)
    depths = depths_from_timestamps([r.created_at for r in records], baseline, units_per_day)
    return [record.with_depth(depth) for record, depth in zip(records, depths)]
