"""
Screen projection.

The ground line sits two thirds down the viewport at depth 0 and scrolls up
by ``pixels_per_depth`` for every unit of depth, so an entity's screen
position is a function of the current depth.
"""

from typing import Optional, Tuple

from ..config.models import ViewportConfig
from .population import ChildEntity


class Viewport:
    """
    Projection from (anchor, offset, current depth) to screen pixels.

    Example:
        >>> vp = Viewport()
        >>> vp.ground_y(0.0)
        533.3333333333333
        >>> vp.depth_to_y(60.0, 50.0)
        633.3333333333333
    """

    def __init__(self, config: Optional[ViewportConfig] = None):
        self.config = config or ViewportConfig()

    @property
    def width(self) -> float:
        return self.config.width

    @property
    def height(self) -> float:
        return self.config.height

    def ground_y(self, depth: float) -> float:
        """Screen y of the ground plane when viewing ``depth``."""
        cfg = self.config
        return cfg.height * cfg.ground_ratio - depth * cfg.pixels_per_depth

    def depth_to_y(self, target_depth: float, depth: float) -> float:
        """Screen y of ``target_depth`` when viewing ``depth``."""
        return self.ground_y(depth) + target_depth * self.config.pixels_per_depth

    def lateral_to_x(self, lateral: float) -> float:
        return self.config.width / 2.0 + lateral * self.config.lateral_scale

    def project(self, entity: ChildEntity, depth: float) -> Tuple[float, float]:
        """Screen position of an entity at the current depth."""
        x = self.lateral_to_x(entity.anchor.x) + entity.offset.x
        y = self.depth_to_y(entity.anchor.depth + entity.offset.depth, depth) + entity.offset.y
        return x, y

    def is_visible(self, x: float, y: float, margin: float = 0.0) -> bool:
        """Inside the viewport grown by ``margin`` on every side."""
        cfg = self.config
        return -margin <= x <= cfg.width + margin and -margin <= y <= cfg.height + margin

    def __repr__(self) -> str:
        return f"Viewport({self.config.width:.0f}x{self.config.height:.0f})"
