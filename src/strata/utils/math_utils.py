"""
Numeric helpers shared by the depth controller and the field calculators.

Everything here is a pure function of its arguments. Colours are handled as
plain (r, g, b) float triples in 0-255 space.
"""

import math
from typing import Sequence, Tuple, Union

Number = Union[int, float]
RGB = Tuple[float, float, float]


def clamp(value: Number, min_val: Number, max_val: Number) -> Number:
    """
    Constrain a value to [min_val, max_val].

    Example:
        >>> clamp(1.3, 0.0, 1.0)
        1.0
        >>> clamp(7, 2, 6)
        6
    """
    return max(min_val, min(max_val, value))


def lerp(a: Number, b: Number, t: float) -> float:
    """
    Linear interpolation from a (t = 0) to b (t = 1).

    t is not clamped; the depth map relies on extrapolation being linear.

    Example:
        >>> lerp(100.0, 200.0, 0.25)
        125.0
    """
    return a + (b - a) * t


def inverse_lerp(a: Number, b: Number, value: Number) -> float:
    """
    Position of value between a and b, where a maps to 0 and b to 1.

    A zero-width range maps everything to 0.0.

    Example:
        >>> inverse_lerp(-10.0, 10.0, 0.0)
        0.5
    """
    if b - a == 0:
        return 0.0
    return (value - a) / (b - a)


def exp_smooth(current: float, target: float, factor: float) -> float:
    """
    Move current a fixed fraction of the way toward target.

    Args:
        current: Displayed value from the previous tick
        target: Value being chased
        factor: Fraction of the remaining gap closed per call (0-1)

    Example:
        >>> exp_smooth(0.0, 100.0, 0.35)
        35.0
    """
    return current + (target - current) * factor


def ease_in_out_cubic(t: float) -> float:
    """
    Cubic ease-in-out on [0, 1], used to animate depth jumps.

    t is clamped first so elapsed/duration can be passed straight in.

    Example:
        >>> ease_in_out_cubic(0.25)
        0.0625
        >>> ease_in_out_cubic(1.5)
        1.0
    """
    t = clamp(t, 0.0, 1.0)
    if t < 0.5:
        return 4.0 * t * t * t
    return 1.0 - ((-2.0 * t + 2.0) ** 3) / 2.0


def lerp_color(a: Sequence[float], b: Sequence[float], t: float) -> RGB:
    """Channel-wise lerp of two RGB triples."""
    return (lerp(a[0], b[0], t), lerp(a[1], b[1], t), lerp(a[2], b[2], t))


def fract(value: float) -> float:
    # always in [0, 1), also for negatives
    return value - math.floor(value)
