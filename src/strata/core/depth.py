"""
Depth controller: turns scroll, drag and jump requests into one depth scalar.

Continuous input (wheel, touch drag) accumulates into a raw depth that is
clamped at the surface floor. Jumps animate to an arbitrary target with a
cubic ease and may leave the floor, which is the only way to reach the sky
above ground. The displayed depth trails the raw depth with exponential
smoothing.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from ..config.models import DepthConfig
from ..utils.math_utils import ease_in_out_cubic, exp_smooth, lerp


@dataclass
class JumpState:
    """An in-flight animated jump."""
    start: float
    target: float
    duration: float
    elapsed: float = 0.0

    @property
    def progress(self) -> float:
        if self.duration <= 0:
            return 1.0
        return min(1.0, self.elapsed / self.duration)

    @property
    def done(self) -> bool:
        return self.progress >= 1.0

    def value(self) -> float:
        return lerp(self.start, self.target, ease_in_out_cubic(self.progress))


class DepthController:
    """
    Owns the current depth.

    Example:
        >>> controller = DepthController()
        >>> controller.apply_wheel(120)
        12.0
        >>> controller.jump_to(300)
        >>> for _ in range(60):
        ...     controller.update(1 / 60)
        >>> round(controller.depth)
        300
    """

    SNAP_EPSILON = 1e-3

    def __init__(self, config: Optional[DepthConfig] = None, initial_depth: float = 0.0):
        """
        Initialize the controller.

        Args:
            config: Input mapping and animation settings
            initial_depth: Starting depth (not clamped)
        """
        self.config = config or DepthConfig()
        self._depth = initial_depth
        self._smoothed = initial_depth
        self._jump: Optional[JumpState] = None
        self._input_focused = False
        self._touch_y: Optional[float] = None

    # =========================================================================
    # Continuous Input
    # =========================================================================

    def _accepts_input(self) -> bool:
        return not self._input_focused and self._jump is None

    def _move_by(self, delta: float) -> float:
        self._depth = max(self.config.min_depth, self._depth + delta)
        return self._depth

    def apply_wheel(self, delta_y: float) -> float:
        """
        Apply a wheel delta.

        Ignored while a text input has focus or a jump is running.

        Returns:
            The raw depth after the input
        """
        if not self._accepts_input():
            return self._depth
        return self._move_by(delta_y * self.config.wheel_sensitivity)

    def begin_touch(self, y: float) -> None:
        """Start a drag at screen coordinate ``y``."""
        self._touch_y = y

    def move_touch(self, y: float) -> float:
        """
        Continue a drag. Dragging upward (decreasing ``y``) goes deeper.

        Returns:
            The raw depth after the input
        """
        if self._touch_y is None:
            self._touch_y = y
            return self._depth
        delta = self._touch_y - y
        self._touch_y = y
        if not self._accepts_input():
            return self._depth
        return self._move_by(delta * self.config.touch_sensitivity)

    def end_touch(self) -> None:
        self._touch_y = None

    def set_input_focus(self, focused: bool) -> None:
        """Suppress continuous input while a text field has focus."""
        self._input_focused = bool(focused)

    # =========================================================================
    # Jumps
    # =========================================================================

    def jump_to(self, target: float, duration: Optional[float] = None) -> None:
        """
        Animate to ``target``.

        The target is not clamped. Calling again mid-flight restarts the
        animation from the current depth.
        """
        self._jump = JumpState(
            start=self._depth,
            target=float(target),
            duration=self.config.jump_duration if duration is None else duration,
        )
        if self._jump.done:
            self._finish_jump()

    def _finish_jump(self) -> None:
        self._depth = self._jump.target
        self._smoothed = self._depth
        self._jump = None

    # =========================================================================
    # Update
    # =========================================================================

    def update(self, delta_time: float) -> float:
        """
        Advance animation and smoothing by ``delta_time`` seconds.

        Returns:
            The displayed (smoothed) depth
        """
        if self._jump is not None:
            self._jump.elapsed += max(0.0, delta_time)
            if self._jump.done:
                self._finish_jump()
            else:
                self._depth = self._jump.value()
                self._smoothed = self._depth
            return self._smoothed

        self._smoothed = exp_smooth(self._smoothed, self._depth, self.config.smoothing_factor)
        if abs(self._smoothed - self._depth) < self.SNAP_EPSILON:
            self._smoothed = self._depth
        return self._smoothed

    # =========================================================================
    # State
    # =========================================================================

    @property
    def depth(self) -> float:
        """Raw depth (input accumulator or jump position)."""
        return self._depth

    @property
    def smoothed_depth(self) -> float:
        return self._smoothed

    @property
    def is_jumping(self) -> bool:
        return self._jump is not None

    @property
    def jump_progress(self) -> float:
        """0..1 progress of the running jump, 1.0 when idle."""
        return self._jump.progress if self._jump is not None else 1.0

    @property
    def input_focused(self) -> bool:
        return self._input_focused

    def reset(self, depth: float = 0.0) -> None:
        self._depth = depth
        self._smoothed = depth
        self._jump = None
        self._touch_y = None

    def get_state(self) -> Dict[str, Any]:
        return {
            'depth': self._depth,
            'smoothed_depth': self._smoothed,
            'is_jumping': self.is_jumping,
            'jump_target': self._jump.target if self._jump else None,
            'jump_progress': self.jump_progress,
            'input_focused': self._input_focused,
        }

    def __repr__(self) -> str:
        return (f"DepthController(depth={self._depth:.1f}, "
                f"smoothed={self._smoothed:.1f}, jumping={self.is_jumping})")
