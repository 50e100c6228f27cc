"""
Utility functions for the Strata ecosystem engine.

Modules:
- math_utils: interpolation, easing and smoothing
- rng: hash-based deterministic randomness
- validators: boundary validation and ValidationError
"""

from .math_utils import (
    clamp,
    lerp,
    inverse_lerp,
    exp_smooth,
    ease_in_out_cubic,
    lerp_color,
    fract,
)
from .rng import SeedStream, seeded_random, string_seed, record_seed
from .validators import (
    ValidationError,
    validate_number,
    validate_range,
    validate_strength,
    validate_not_empty,
    validate_max_length,
    validate_in_set,
)

__all__ = [
    'clamp',
    'lerp',
    'inverse_lerp',
    'exp_smooth',
    'ease_in_out_cubic',
    'lerp_color',
    'fract',
    'SeedStream',
    'seeded_random',
    'string_seed',
    'record_seed',
    'ValidationError',
    'validate_number',
    'validate_range',
    'validate_strength',
    'validate_not_empty',
    'validate_max_length',
    'validate_in_set',
]
