"""
Environment field calculator.

Derives the three continuous scene fields from depth and the emotion
distribution of the current window:

- Background colour: sky -> earth across the ground band, then earth ->
  deep toward a horizon depth, pulled slightly toward each emotion group's
  palette and clamped to a dim ceiling so the scenery never washes out.
- Fog density: thickens with depth, thins with stronger emotions, and fades
  to a near-clear floor at the ground plane.
- Lighting: ambient/directional intensity from the warm and sad shares,
  brightened around the ground plane and on the surface, with a light
  colour keyed to the dominant group and a pulse flag under stress.

All three fields are continuous across the band edges at +/-T, so scrolling
through the ground plane never pops.
"""

from dataclasses import dataclass
import math
from typing import Any, Dict, Optional, Tuple

from ..config.models import Color, EnvironmentConfig
from ..core.records import CategoryGroup, EmotionCategory
from ..utils.math_utils import clamp, fract, lerp, lerp_color
from .area import Area, DEFAULT_HALF_WIDTH, band_position, classify_area
from .distribution import Distribution

NEUTRAL_LIGHT = "#ffffff"

# Light colour candidates in priority order
LIGHT_COLORS: Tuple[Tuple[str, str], ...] = (
    ('warm', "#fff4e6"),
    ('peace', "#e6f3ff"),
    ('stress', "#ffe6e6"),
    ('sadness', "#e6e6ff"),
)


# =============================================================================
# Field Types
# =============================================================================

@dataclass(frozen=True)
class BackgroundColor:
    """Background colour with float channels in [0, 255]."""
    r: float
    g: float
    b: float

    def to_rgb(self) -> Tuple[int, int, int]:
        return (int(round(self.r)), int(round(self.g)), int(round(self.b)))

    def to_hex(self) -> str:
        r, g, b = self.to_rgb()
        return f"#{r:02x}{g:02x}{b:02x}"

    def as_tuple(self) -> Tuple[float, float, float]:
        return (self.r, self.g, self.b)


@dataclass(frozen=True)
class FogField:
    """Fog density (exponential fog coefficient)."""
    density: float

    @property
    def opacity(self) -> float:
        return fog_opacity(self.density)


@dataclass(frozen=True)
class LightingField:
    """
    Scene lighting.

    Attributes:
        ambient: Ambient intensity
        directional: Directional intensity
        color: Light colour as a hex string
        pulse: Whether the backend should animate a stress pulse
    """
    ambient: float
    directional: float
    color: str
    pulse: bool

    @property
    def overlay_opacity(self) -> float:
        return overlay_opacity(self.ambient)


@dataclass(frozen=True)
class EnvironmentFields:
    """Everything a backend needs to paint the scene at one depth."""
    depth: float
    area: Area
    background: BackgroundColor
    fog: FogField
    lighting: LightingField

    def to_dict(self) -> Dict[str, Any]:
        return {
            'depth': self.depth,
            'area': self.area.value,
            'background': self.background.to_hex(),
            'background_rgb': list(self.background.to_rgb()),
            'fog_density': self.fog.density,
            'fog_opacity': self.fog.opacity,
            'ambient': self.lighting.ambient,
            'directional': self.lighting.directional,
            'light_color': self.lighting.color,
            'pulse': self.lighting.pulse,
            'overlay_opacity': self.lighting.overlay_opacity,
        }


# =============================================================================
# Backend Helpers
# =============================================================================

def fog_opacity(density: float) -> float:
    """Map a fog density to an overlay opacity for 2D backends."""
    return clamp(density * 10.0, 0.1, 0.8)


def overlay_opacity(ambient: float) -> float:
    """Map ambient intensity to a light overlay opacity for 2D backends."""
    return clamp(ambient * 0.35, 0.05, 0.25)


def pulse_multiplier(time_ms: float, period_ms: float = 500.0) -> float:
    """
    Intensity multiplier for a pulsing light, in [0.4, 1.0].

    The calculator only sets the pulse flag; backends animate it with this.
    """
    phase = fract(time_ms / period_ms)
    return math.sin(phase * 2.0 * math.pi) * 0.3 + 0.7


# =============================================================================
# Calculator
# =============================================================================

class EnvironmentFieldCalculator:
    """
    Pure function of (depth, distribution, area) to scene fields.

    Example:
        >>> calc = EnvironmentFieldCalculator()
        >>> fields = calc.calculate(0.0, Distribution())
        >>> fields.fog.density
        0.0005
    """

    def __init__(self, config: Optional[EnvironmentConfig] = None,
                 half_width: float = DEFAULT_HALF_WIDTH):
        self.config = config or EnvironmentConfig()
        self.half_width = half_width

    def calculate(self, depth: float, distribution: Distribution,
                  area: Optional[Area] = None) -> EnvironmentFields:
        """
        Compute all fields.

        Args:
            depth: Current depth
            distribution: Distribution of the current window
            area: Area of ``depth`` (classified here when omitted)
        """
        if area is None:
            area = classify_area(depth, self.half_width)
        return EnvironmentFields(
            depth=depth,
            area=area,
            background=self.background_color(depth, distribution),
            fog=FogField(self.fog_density(depth, distribution, area)),
            lighting=self.lighting(depth, distribution, area),
        )

    # =========================================================================
    # Background
    # =========================================================================

    def base_color(self, depth: float) -> Color:
        """Depth-only gradient before the emotional tint."""
        cfg = self.config
        t_half = self.half_width
        if depth <= -t_half:
            return cfg.sky_color
        if depth <= t_half:
            return lerp_color(cfg.sky_color, cfg.earth_color, (depth + t_half) / (2.0 * t_half))
        t = min((depth - t_half) / cfg.horizon, 1.0)
        return lerp_color(cfg.earth_color, cfg.deep_color, t)

    def background_color(self, depth: float, distribution: Distribution) -> BackgroundColor:
        cfg = self.config
        base = self.base_color(depth)
        channels = list(base)

        for group in CategoryGroup:
            palette = cfg.group_palettes.get(group.value)
            if palette is None:
                continue
            pull = distribution.group_share(group) * cfg.perturbation
            if pull <= 0:
                continue
            for i in range(3):
                channels[i] += (palette[i] - base[i]) * pull

        ceilings = cfg.channel_ceilings
        return BackgroundColor(
            r=clamp(channels[0], 0.0, ceilings[0]),
            g=clamp(channels[1], 0.0, ceilings[1]),
            b=clamp(channels[2], 0.0, ceilings[2]),
        )

    # =========================================================================
    # Fog
    # =========================================================================

    def underground_fog(self, depth: float, distribution: Distribution) -> float:
        """Below-ground fog; non-decreasing in depth."""
        cfg = self.config
        density = cfg.fog_base + min(max(depth, 0.0) / cfg.fog_depth_scale, 1.0) * cfg.fog_depth_gain
        density -= min(distribution.avg_strength * cfg.fog_strength_relief, cfg.fog_max_relief)
        density = max(cfg.fog_min, density)
        if distribution.count < cfg.fog_sparse_count:
            density += cfg.fog_sparse_bonus
        return min(density, cfg.fog_max)

    def fog_density(self, depth: float, distribution: Distribution,
                    area: Optional[Area] = None) -> float:
        cfg = self.config
        if area is None:
            area = classify_area(depth, self.half_width)

        edge = self.underground_fog(self.half_width, distribution)
        if area == Area.UNDERGROUND:
            return self.underground_fog(depth, distribution)
        if area == Area.SURFACE:
            return edge * cfg.surface_fog_ratio

        p = band_position(depth, self.half_width)
        density = lerp(cfg.fog_band_floor, edge, p)
        if depth < 0:
            # fades to the surface ratio at -T
            density *= lerp(1.0, cfg.surface_fog_ratio, p)
        return density

    # =========================================================================
    # Lighting
    # =========================================================================

    def base_intensities(self, distribution: Distribution) -> Tuple[float, float]:
        cfg = self.config
        warm = distribution.group_share(CategoryGroup.WARM)
        sadness = distribution.share(EmotionCategory.SADNESS)
        ambient = clamp(cfg.ambient_base + warm * cfg.ambient_warm_gain
                        - sadness * cfg.ambient_sadness_loss, *cfg.ambient_range)
        directional = clamp(cfg.directional_base + warm * cfg.directional_warm_gain,
                            *cfg.directional_range)
        return ambient, directional

    def surface_intensities(self, distribution: Distribution) -> Tuple[float, float]:
        cfg = self.config
        ambient, directional = self.base_intensities(distribution)
        return (
            min(1.0, max(cfg.surface_ambient_floor, ambient + cfg.surface_boost)),
            min(1.0, max(cfg.surface_directional_floor, directional + cfg.surface_boost)),
        )

    def light_color(self, distribution: Distribution) -> str:
        threshold = self.config.light_color_threshold
        shares = {
            'warm': distribution.group_share(CategoryGroup.WARM),
            'peace': distribution.share(EmotionCategory.PEACE),
            'stress': distribution.share(EmotionCategory.STRESS),
            'sadness': distribution.share(EmotionCategory.SADNESS),
        }
        for key, color in LIGHT_COLORS:
            if shares[key] > threshold:
                return color
        return NEUTRAL_LIGHT

    def lighting(self, depth: float, distribution: Distribution,
                 area: Optional[Area] = None) -> LightingField:
        cfg = self.config
        if area is None:
            area = classify_area(depth, self.half_width)
        pulse = distribution.share(EmotionCategory.STRESS) > cfg.pulse_threshold

        if area == Area.UNDERGROUND:
            ambient, directional = self.base_intensities(distribution)
            return LightingField(ambient, directional, self.light_color(distribution), pulse)

        if area == Area.SURFACE:
            ambient, directional = self.surface_intensities(distribution)
            return LightingField(ambient, directional, NEUTRAL_LIGHT, pulse)

        base_ambient, base_directional = self.base_intensities(distribution)
        peak_ambient = base_ambient + cfg.transition_ambient_boost
        peak_directional = base_directional + cfg.transition_directional_boost
        if depth < 0:
            edge_ambient, edge_directional = self.surface_intensities(distribution)
        else:
            edge_ambient, edge_directional = base_ambient, base_directional

        p = band_position(depth, self.half_width)
        ambient = clamp(lerp(peak_ambient, edge_ambient, p), cfg.ambient_range[0], 1.0)
        directional = clamp(lerp(peak_directional, edge_directional, p), cfg.directional_range[0], 1.0)
        return LightingField(ambient, directional, NEUTRAL_LIGHT, pulse)
