"""
Configuration loading and data models for the Strata ecosystem engine.
"""

from .loader import ConfigLoader, ConfigError, load_config
from .models import (
    DepthConfig,
    AreaConfig,
    WindowConfig,
    EnvironmentConfig,
    PopulationConfig,
    ViewportConfig,
    LifecycleConfig,
    OthersConfig,
    StrataConfig,
)

__all__ = [
    'ConfigLoader',
    'ConfigError',
    'load_config',
    'DepthConfig',
    'AreaConfig',
    'WindowConfig',
    'EnvironmentConfig',
    'PopulationConfig',
    'ViewportConfig',
    'LifecycleConfig',
    'OthersConfig',
    'StrataConfig',
]
