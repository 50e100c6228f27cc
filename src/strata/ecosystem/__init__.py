"""
Depth-indexed procedural ecosystem.

Per-tick pipeline stages:
- area: Surface / Transition / Underground classification
- window: Record selection around the viewer
- distribution: Strength-weighted category shares
- environment: Background colour, fog and lighting fields
- population: Deterministic child entities per record
- projection: Screen placement
- lifecycle: Render handle pooling and diff events

Supporting views:
- depth_map: Bucketed overview and jump targets
- terrarium: Growth summary near the ground
- others: Other users' lights and fetch scheduling
"""

from .area import Area, classify_area, band_position
from .window import select_window
from .distribution import Distribution, EMPTY_DISTRIBUTION, analyze
from .environment import (
    BackgroundColor,
    FogField,
    LightingField,
    EnvironmentFields,
    EnvironmentFieldCalculator,
    fog_opacity,
    overlay_opacity,
    pulse_multiplier,
)
from .population import (
    EntityFamily,
    EntityKind,
    Offset,
    Anchor,
    ChildEntity,
    ProceduralPopulationGenerator,
)
from .projection import Viewport
from .lifecycle import (
    LifecycleEventType,
    LifecycleEvent,
    LifecycleStats,
    RenderHandle,
    EntityLifecycleManager,
)
from .depth_map import DepthGroup, DepthMap, build_depth_map
from .terrarium import TerrariumPlant, TerrariumState, analyze_growth
from .others import OtherLight, OthersFetchPolicy, visible_lights

__all__ = [
    'Area',
    'classify_area',
    'band_position',
    'select_window',
    'Distribution',
    'EMPTY_DISTRIBUTION',
    'analyze',
    'BackgroundColor',
    'FogField',
    'LightingField',
    'EnvironmentFields',
    'EnvironmentFieldCalculator',
    'fog_opacity',
    'overlay_opacity',
    'pulse_multiplier',
    'EntityFamily',
    'EntityKind',
    'Offset',
    'Anchor',
    'ChildEntity',
    'ProceduralPopulationGenerator',
    'Viewport',
    'LifecycleEventType',
    'LifecycleEvent',
    'LifecycleStats',
    'RenderHandle',
    'EntityLifecycleManager',
    'DepthGroup',
    'DepthMap',
    'build_depth_map',
    'TerrariumPlant',
    'TerrariumState',
    'analyze_growth',
    'OtherLight',
    'OthersFetchPolicy',
    'visible_lights',
]
