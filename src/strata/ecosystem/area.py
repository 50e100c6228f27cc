"""
Area classification along the depth axis.

    depth < -T        SURFACE       (sky, above ground)
    -T <= depth <= T  TRANSITION    (the band around the ground plane)
    depth > T         UNDERGROUND
"""

from enum import Enum

from ..utils.math_utils import clamp

DEFAULT_HALF_WIDTH = 10.0


class Area(Enum):
    """Depth regime."""
    SURFACE = "surface"
    TRANSITION = "transition"
    UNDERGROUND = "underground"


def classify_area(depth: float, half_width: float = DEFAULT_HALF_WIDTH) -> Area:
    """
    Classify a depth.

    Example:
        >>> classify_area(0.0)
        <Area.TRANSITION: 'transition'>
        >>> classify_area(10.0)
        <Area.TRANSITION: 'transition'>
        >>> classify_area(10.5)
        <Area.UNDERGROUND: 'underground'>
    """
    if depth < -half_width:
        return Area.SURFACE
    if depth > half_width:
        return Area.UNDERGROUND
    return Area.TRANSITION


def band_position(depth: float, half_width: float = DEFAULT_HALF_WIDTH) -> float:
    """Distance from the ground plane as a fraction of the band, in [0, 1]."""
    if half_width <= 0:
        return 1.0
    return clamp(abs(depth) / half_width, 0.0, 1.0)
