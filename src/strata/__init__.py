"""
Strata Ecosystem Engine

A depth-indexed procedural ecosystem: emotion records placed on a single
depth axis are turned into continuous environment fields (background,
fog, lighting) and a deterministic population of decorative entities,
kept in sync with any rendering backend through pooled render handles.

Main entry points:
- StrataEngine: The main engine class for integration
- SimulationRunner: For running scripted scroll sessions and demos
- load_config: For loading configuration from JSON files

Example:
    >>> from strata import StrataEngine
    >>> engine = StrataEngine(config_path="config/")
    >>> engine.jump_to(600.0)
    >>> frame = engine.tick(delta_time=1 / 60)
"""

__version__ = "0.3.0"
__author__ = "Strata Project"

# Lazy imports to avoid circular dependencies
def __getattr__(name):
    if name == 'StrataEngine':
        from .engine import StrataEngine
        return StrataEngine
    elif name == 'TickFrame':
        from .engine import TickFrame
        return TickFrame
    elif name == 'EngineStats':
        from .engine import EngineStats
        return EngineStats
    elif name == 'SimulationRunner':
        from .simulation import SimulationRunner
        return SimulationRunner
    elif name == 'SimulationResults':
        from .simulation import SimulationResults
        return SimulationResults
    elif name == 'run_demo':
        from .simulation import run_demo
        return run_demo
    elif name == 'load_config':
        from .config import load_config
        return load_config
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")

__all__ = [
    'StrataEngine',
    'TickFrame',
    'EngineStats',
    'SimulationRunner',
    'SimulationResults',
    'run_demo',
    'load_config',
]
