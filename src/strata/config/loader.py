"""
Configuration loader for the Strata ecosystem engine.

Loads JSON configuration files and converts them to typed dataclass objects.
Missing keys fall back to the dataclass defaults; keys starting with ``_``
are treated as comments.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from .models import (
    StrataConfig,
    DepthConfig,
    AreaConfig,
    WindowConfig,
    EnvironmentConfig,
    PopulationConfig,
    ViewportConfig,
    LifecycleConfig,
    OthersConfig,
)


class ConfigError(Exception):
    """Raised when configuration loading or validation fails."""

    def __init__(self, message: str, file: Optional[str] = None,
                 path: Optional[str] = None):
        self.message = message
        self.file = file
        self.path = path

        full_msg = message
        if file:
            full_msg = f"[{file}] {full_msg}"
        if path:
            full_msg = f"{full_msg} (at {path})"

        super().__init__(full_msg)


class ConfigLoader:
    """
    Loads and parses Strata configuration files.

    Usage:
        loader = ConfigLoader("./config")
        config = loader.load_all()

        # Or load individual files:
        depth, area, window = loader.load_navigation()
        environment = loader.load_environment()
    """

    def __init__(self, config_dir: str):
        """
        Initialize the config loader.

        Args:
            config_dir: Path to directory containing config JSON files
        """
        self.config_dir = Path(config_dir)

        if not self.config_dir.exists():
            raise ConfigError(f"Config directory not found: {config_dir}")

    def _load_json(self, filename: str) -> Dict[str, Any]:
        """Load a JSON file from the config directory."""
        filepath = self.config_dir / filename

        if not filepath.exists():
            raise ConfigError(f"Config file not found: {filepath}", file=filename)

        try:
            with open(filepath, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON: {e}", file=filename)

        if not isinstance(data, dict):
            raise ConfigError("Top level must be an object", file=filename)
        return data

    def _section(self, data: dict, key: str, file: str) -> Dict[str, Any]:
        """Get a sub-object, skipping comment keys."""
        section = data.get(key, {})
        if not isinstance(section, dict):
            raise ConfigError("Section must be an object", file=file, path=key)
        return {k: v for k, v in section.items() if not k.startswith('_')}

    def _build(self, cls, values: Dict[str, Any], file: str, path: str):
        """Instantiate a config dataclass, rejecting unknown keys."""
        known = cls.__dataclass_fields__
        for key in values:
            if key not in known:
                raise ConfigError(f"Unknown field: {key}", file=file, path=path)
        return cls(**values)

    @staticmethod
    def _color(value: Any, file: str, path: str) -> Tuple[float, float, float]:
        if not isinstance(value, (list, tuple)) or len(value) != 3:
            raise ConfigError("Colour must be a list of three numbers", file=file, path=path)
        return (float(value[0]), float(value[1]), float(value[2]))

    @staticmethod
    def _pair(value: Any, file: str, path: str) -> Tuple[float, float]:
        if not isinstance(value, (list, tuple)) or len(value) != 2:
            raise ConfigError("Range must be a list of two numbers", file=file, path=path)
        low, high = float(value[0]), float(value[1])
        if low > high:
            raise ConfigError(f"Range is inverted: {low} > {high}", file=file, path=path)
        return (low, high)

    # =========================================================================
    # Navigation
    # =========================================================================

    def load_navigation(self) -> Tuple[DepthConfig, AreaConfig, WindowConfig]:
        """Load navigation.json."""
        file = "navigation.json"
        data = self._load_json(file)

        depth = self._build(DepthConfig, self._section(data, "depth", file), file, "depth")
        area = self._build(AreaConfig, self._section(data, "area", file), file, "area")
        window = self._build(WindowConfig, self._section(data, "window", file), file, "window")

        if area.half_width <= 0:
            raise ConfigError("half_width must be positive", file=file, path="area.half_width")
        if window.surface_scope not in ("above_ground", "all"):
            raise ConfigError(
                f"surface_scope must be 'above_ground' or 'all', got '{window.surface_scope}'",
                file=file, path="window.surface_scope"
            )
        return depth, area, window

    # =========================================================================
    # Environment
    # =========================================================================

    def load_environment(self) -> EnvironmentConfig:
        """Load environment.json."""
        file = "environment.json"
        data = self._load_json(file)

        values: Dict[str, Any] = {}
        for section in ("background", "fog", "lighting"):
            values.update(self._section(data, section, file))

        for key in ("sky_color", "earth_color", "deep_color", "channel_ceilings"):
            if key in values:
                values[key] = self._color(values[key], file, key)
        for key in ("ambient_range", "directional_range"):
            if key in values:
                values[key] = self._pair(values[key], file, key)
        if "group_palettes" in values:
            values["group_palettes"] = {
                group: self._color(color, file, f"group_palettes.{group}")
                for group, color in values["group_palettes"].items()
                if not group.startswith('_')
            }

        config = self._build(EnvironmentConfig, values, file, "environment")
        if config.horizon <= 0:
            raise ConfigError("horizon must be positive", file=file, path="background.horizon")
        return config

    # =========================================================================
    # Population
    # =========================================================================

    def load_population(self) -> PopulationConfig:
        """Load population.json."""
        file = "population.json"
        data = self._load_json(file)

        values: Dict[str, Any] = {}
        for section in ("count", "offsets", "surface", "entities"):
            values.update(self._section(data, section, file))

        for key in ("underground_radius", "underground_jitter",
                    "surface_radius", "surface_jitter"):
            if key in values:
                values[key] = self._pair(values[key], file, key)

        config = self._build(PopulationConfig, values, file, "population")
        if config.min_count > config.max_count:
            raise ConfigError(
                f"min_count ({config.min_count}) exceeds max_count ({config.max_count})",
                file=file, path="count"
            )
        return config

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def load_lifecycle(self) -> Tuple[LifecycleConfig, ViewportConfig, OthersConfig]:
        """Load lifecycle.json."""
        file = "lifecycle.json"
        data = self._load_json(file)

        lifecycle = self._build(LifecycleConfig, self._section(data, "pool", file), file, "pool")
        viewport = self._build(ViewportConfig, self._section(data, "viewport", file), file, "viewport")
        others = self._build(OthersConfig, self._section(data, "others", file), file, "others")

        if lifecycle.pool_capacity < 0:
            raise ConfigError("pool_capacity must be non-negative", file=file, path="pool")
        if viewport.width <= 0 or viewport.height <= 0:
            raise ConfigError("viewport must have positive size", file=file, path="viewport")
        return lifecycle, viewport, others

    # =========================================================================
    # Load All
    # =========================================================================

    def load_all(self) -> StrataConfig:
        """
        Load all configuration files and return a complete StrataConfig.

        Returns:
            Fully populated StrataConfig object

        Raises:
            ConfigError: If any config file is missing or malformed
        """
        depth, area, window = self.load_navigation()
        environment = self.load_environment()
        population = self.load_population()
        lifecycle, viewport, others = self.load_lifecycle()

        return StrataConfig(
            depth=depth,
            area=area,
            window=window,
            environment=environment,
            population=population,
            viewport=viewport,
            lifecycle=lifecycle,
            others=others,
        )


def load_config(config_dir: str) -> StrataConfig:
    """
    Convenience function to load all configuration.

    Args:
        config_dir: Path to config directory

    Returns:
        Fully populated StrataConfig object
    """
    loader = ConfigLoader(config_dir)
    return loader.load_all()
