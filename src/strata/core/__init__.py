"""
Core state for the Strata ecosystem engine.

- records: EmotionRecord, PartialRecord, EmotionCategory and groups
- store: Append-only EmotionRecordStore
- depth: DepthController (scroll, drag, animated jumps)
- recency: Depth placement from creation time
"""

from .records import (
    EmotionCategory,
    CategoryGroup,
    CATEGORY_GROUPS,
    EmotionRecord,
    PartialRecord,
    MAX_ANALYSIS_LENGTH,
    parse_timestamp,
)
from .store import EmotionRecordStore
from .depth import DepthController, JumpState
from .recency import depth_from_created_at, depths_from_timestamps, place_by_recency

__all__ = [
    'EmotionCategory',
    'CategoryGroup',
    'CATEGORY_GROUPS',
    'EmotionRecord',
    'PartialRecord',
    'MAX_ANALYSIS_LENGTH',
    'parse_timestamp',
    'EmotionRecordStore',
    'DepthController',
    'JumpState',
    'depth_from_created_at',
    'depths_from_timestamps',
    'place_by_recency',
]
