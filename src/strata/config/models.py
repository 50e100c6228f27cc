"""
Configuration data models for the Strata ecosystem engine.

These dataclasses represent the structure of configuration loaded from
JSON files. Every field has a default, so ``StrataConfig()`` is a complete
working configuration and JSON files only need to list overrides.
"""

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, Tuple

Color = Tuple[float, float, float]


# =============================================================================
# Navigation
# =============================================================================

@dataclass
class DepthConfig:
    """Depth controller input mapping and animation."""
    wheel_sensitivity: float = 0.1      # depth units per wheel delta unit
    touch_sensitivity: float = 0.15     # depth units per dragged pixel
    min_depth: float = 0.0              # floor for continuous input
    jump_duration: float = 1.0          # seconds
    smoothing_factor: float = 0.35      # exp smoothing of the displayed depth
    jump_threshold: float = 100.0       # per-tick change reported as a jump


@dataclass
class AreaConfig:
    """Area classification."""
    half_width: float = 10.0            # transition band is [-T, T]


@dataclass
class WindowConfig:
    """Record window selection."""
    radius: float = 800.0
    surface_scope: str = "all"  # or "above_ground"


# =============================================================================
# Environment
# =============================================================================

@dataclass
class EnvironmentConfig:
    """Background colour, fog and lighting constants."""

    # Background
    sky_color: Color = (100.0, 140.0, 180.0)
    earth_color: Color = (139.0, 115.0, 85.0)
    deep_color: Color = (10.0, 10.0, 20.0)
    horizon: float = 900.0
    perturbation: float = 0.10
    channel_ceilings: Color = (150.0, 150.0, 180.0)
    group_palettes: Dict[str, Color] = field(default_factory=lambda: {
        'warm': (255.0, 215.0, 0.0),
        'calm': (77.0, 208.0, 225.0),
        'alarm': (255.0, 23.0, 68.0),
        'sepia': (141.0, 110.0, 99.0),
        'murk': (102.0, 187.0, 106.0),
    })

    # Fog
    fog_band_floor: float = 0.0005
    fog_base: float = 0.01
    fog_depth_scale: float = 2000.0
    fog_depth_gain: float = 0.05
    fog_strength_relief: float = 0.5
    fog_max_relief: float = 0.03
    fog_min: float = 0.005
    fog_sparse_count: int = 3
    fog_sparse_bonus: float = 0.01
    fog_max: float = 0.08
    surface_fog_ratio: float = 0.5

    # Lighting
    ambient_base: float = 0.3
    ambient_warm_gain: float = 0.4
    ambient_sadness_loss: float = 0.2
    ambient_range: Tuple[float, float] = (0.1, 0.7)
    directional_base: float = 0.5
    directional_warm_gain: float = 0.3
    directional_range: Tuple[float, float] = (0.3, 0.8)
    light_color_threshold: float = 0.3
    pulse_threshold: float = 0.2
    transition_ambient_boost: float = 0.3
    transition_directional_boost: float = 0.4
    surface_boost: float = 0.2
    surface_ambient_floor: float = 0.5
    surface_directional_floor: float = 0.7


# =============================================================================
# Population
# =============================================================================

@dataclass
class PopulationConfig:
    """Procedural expansion of records into child entities."""

    # Per-record count: clamp(round(strength * gain + base), min, max)
    count_gain: float = 4.0
    count_base: float = 2.0
    min_count: int = 2
    max_count: int = 6

    # Offsets (radius in scene units, jitter in depth units)
    underground_radius: Tuple[float, float] = (15.0, 45.0)
    underground_jitter: Tuple[float, float] = (0.5, 2.0)
    surface_radius: Tuple[float, float] = (40.0, 320.0)
    surface_jitter: Tuple[float, float] = (1.0, 3.0)

    # Surface apportionment
    surface_scale: float = 15.0
    surface_cap: int = 80
    surface_anchor_depth: float = -20.0
    empty_surface_per_category: int = 6

    strength_floor: float = 0.7         # child strength = parent * (floor + u * (1 - floor))
    creature_ratio: float = 0.35
    child_stride: int = 1000
    anchor_radius: float = 15.0


# =============================================================================
# Lifecycle / viewport
# =============================================================================

@dataclass
class ViewportConfig:
    """Screen projection parameters."""
    width: float = 1280.0
    height: float = 800.0
    ground_ratio: float = 2.0 / 3.0
    pixels_per_depth: float = 10.0
    lateral_scale: float = 10.0


@dataclass
class LifecycleConfig:
    """Render handle pooling."""
    visibility_margin: float = 100.0
    pool_capacity: int = 64


@dataclass
class OthersConfig:
    """Other users' records: fetch window and light markers."""
    fetch_radius: float = 500.0
    refetch_distance: float = 200.0
    debounce_seconds: float = 10.0
    light_radius: float = 200.0


# =============================================================================
# Master Configuration
# =============================================================================

@dataclass
class StrataConfig:
    """
    Master configuration container for the Strata engine.

    Holds all loaded configuration data from the various JSON files.
    """
    depth: DepthConfig = field(default_factory=DepthConfig)
    area: AreaConfig = field(default_factory=AreaConfig)
    window: WindowConfig = field(default_factory=WindowConfig)
    environment: EnvironmentConfig = field(default_factory=EnvironmentConfig)
    population: PopulationConfig = field(default_factory=PopulationConfig)
    viewport: ViewportConfig = field(default_factory=ViewportConfig)
    lifecycle: LifecycleConfig = field(default_factory=LifecycleConfig)
    others: OthersConfig = field(default_factory=OthersConfig)

    @property
    def half_width(self) -> float:
        """Transition band half-width, used by most stages."""
        return self.area.half_width

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
