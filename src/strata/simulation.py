"""
Simulation runner for the Strata ecosystem engine.

Provides a high-level interface for running scroll sessions with:
- Seed records
- Scripted navigation (wheel, touch, jumps)
- Record changes and external sync
- Frame and depth logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple
import csv
import io
import json

from .adapters.classification import ResponseClassifier, keyword_transport
from .adapters.interfaces import InMemoryPersistence, PersistenceService
from .adapters.render import RecordingRenderAdapter
from .core.recency import UNITS_PER_DAY
from .core.records import EmotionCategory, EmotionRecord
from .output.frame_logger import FrameLogger
from .utils.rng import SeedStream


ACTIONS = frozenset({
    "wheel", "touch", "jump", "jump_ratio", "focus", "add_record",
    "submit", "clear", "hydrate", "refresh_others",
})


@dataclass
class ScenarioStep:
    """A single step in a simulation scenario."""
    time: float  # When this step occurs
    action: str  # One of ACTIONS
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class SimulationConfig:
    """Configuration for a simulation run."""
    duration: float = 10.0       # Total simulation duration (seconds)
    tick_interval: float = 0.05  # Time between ticks

    # Initial state
    initial_depth: float = 0.0
    records: List[EmotionRecord] = field(default_factory=list)

    # Scenario steps (time-based changes)
    scenario: List[ScenarioStep] = field(default_factory=list)

    # Logging
    log_frames: bool = True
    log_depth: bool = True
    log_interval: float = 0.5  # How often to sample the depth log (seconds)


def sample_records(count: int = 40, seed: int = 7, max_depth: float = 1500.0,
                   owner_id: Optional[str] = "local") -> List[EmotionRecord]:
    """
    Deterministic set of records spread over the depth axis.

    The same arguments always give the same records. Creation times agree
    with the depths, so placing the records by recency keeps them in order.
    """
    categories = list(EmotionCategory)
    newest = datetime(2024, 6, 1, tzinfo=timezone.utc)
    records = []
    for i in range(count):
        stream = SeedStream(seed).child(i)
        depth = round(stream.uniform(2, 0.0, max_depth), 1)
        records.append(EmotionRecord(
            id=f"sample-{seed}-{i}",
            category=stream.pick(0, categories),
            strength=round(stream.uniform(1, 0.1, 1.0), 3),
            depth=depth,
            created_at=newest - timedelta(days=depth / UNITS_PER_DAY),
            owner_id=owner_id,
        ))
    return records


class SimulationRunner:
    """
    Runs Strata sessions with scripted scenarios and logging.

    Example:
        >>> runner = SimulationRunner()
        >>> runner.configure(duration=5.0, records=sample_records())
        >>> runner.add_step(1.0, "jump", {"target": 600.0})
        >>> results = runner.run()
        >>> print(results.summary())
    """

    def __init__(self, config_path: Optional[str] = None,
                 config: Optional[Any] = None,
                 persistence: Optional[PersistenceService] = None):
        """
        Initialize the runner.

        Args:
            config_path: Path to config directory
            config: Pre-loaded StrataConfig object
            persistence: Persistence used by hydrate / refresh_others / submit steps
        """
        self.config_path = config_path
        self.strata_config = config
        self.persistence = persistence if persistence is not None else InMemoryPersistence()
        self.classifier = ResponseClassifier(keyword_transport)

        self.sim_config = SimulationConfig()
        self._engine = None
        self._renderer: Optional[RecordingRenderAdapter] = None

        self._frame_logger = FrameLogger()
        self._depth_log: List[Dict] = []
        self._step_log: List[Dict] = []

    def configure(self, **kwargs) -> 'SimulationRunner':
        """
        Configure simulation parameters.

        Returns self for chaining.
        """
        for key, value in kwargs.items():
            if hasattr(self.sim_config, key):
                setattr(self.sim_config, key, value)
        return self

    def add_step(self, time: float, action: str, params: Optional[Dict[str, Any]] = None) -> 'SimulationRunner':
        """
        Add a scenario step.

        Raises:
            ValueError: If the action is unknown

        Returns self for chaining.
        """
        if action not in ACTIONS:
            raise ValueError(f"Unknown scenario action '{action}'")
        self.sim_config.scenario.append(ScenarioStep(time=time, action=action, params=params or {}))
        return self

    def set_scenario(self, steps: List[Tuple[float, str, Dict]]) -> 'SimulationRunner':
        """
        Set the full scenario.

        Args:
            steps: List of (time, action, params) tuples
        """
        self.sim_config.scenario = []
        for t, a, p in steps:
            self.add_step(t, a, p)
        return self

    @property
    def engine(self):
        """Engine of the last run (None before the first run)."""
        return self._engine

    @property
    def renderer(self) -> Optional[RecordingRenderAdapter]:
        return self._renderer

    def run(self, progress_callback: Optional[Callable] = None) -> 'SimulationResults':
        """
        Run the simulation.

        Args:
            progress_callback: Optional callback(current_time, total_time)

        Returns:
            SimulationResults object
        """
        from .engine import StrataEngine

        self._engine = StrataEngine(config=self.strata_config, config_path=self.config_path)
        self._renderer = RecordingRenderAdapter()
        self._engine.add_adapter(self._renderer)

        self._frame_logger = FrameLogger()
        self._depth_log = []
        self._step_log = []
        if self.sim_config.log_frames:
            self._engine.on_frame(self._frame_logger.log_frame)

        self._engine.add_records(self.sim_config.records)
        if self.sim_config.initial_depth:
            self._engine.depth_controller.reset(self.sim_config.initial_depth)

        scenario = sorted(self.sim_config.scenario, key=lambda s: s.time)
        scenario_index = 0

        current_time = 0.0
        last_log_time = -self.sim_config.log_interval
        tick_interval = self.sim_config.tick_interval
        duration = self.sim_config.duration

        while current_time < duration:
            while scenario_index < len(scenario) and scenario[scenario_index].time <= current_time:
                self._execute_step(scenario[scenario_index], current_time)
                scenario_index += 1

            frame = self._engine.tick(delta_time=tick_interval)

            if self.sim_config.log_depth and current_time - last_log_time >= self.sim_config.log_interval:
                self._log_depth(current_time, frame)
                last_log_time = current_time

            if progress_callback:
                progress_callback(current_time, duration)

            current_time += tick_interval

        return SimulationResults(
            frames=[f.to_dict() for f in self._frame_logger.get_all()],
            depth_log=self._depth_log,
            step_log=self._step_log,
            final_state=self._engine.get_state(),
            stats=self._engine.stats.to_dict(),
            frame_stats=self._frame_logger.get_stats(),
            config=self.sim_config,
        )

    def _execute_step(self, step: ScenarioStep, current_time: float) -> None:
        """Execute a scenario step."""
        engine = self._engine
        action = step.action
        params = step.params
        result: Any = None

        if action == "wheel":
            result = engine.wheel(params.get("delta_y", 0.0))
        elif action == "touch":
            engine.touch_start(params.get("from_y", 0.0))
            result = engine.touch_move(params.get("to_y", 0.0))
            engine.touch_end()
        elif action == "jump":
            engine.jump_to(params.get("target", 0.0), params.get("duration"))
        elif action == "jump_ratio":
            result = engine.jump_to_map_ratio(params.get("ratio", 0.0), params.get("duration"))
        elif action == "focus":
            engine.set_input_focus(params.get("focused", True))
        elif action == "add_record":
            data = dict(params)
            data.setdefault("owner_id", engine.owner_id)
            result = engine.add_record(EmotionRecord.from_dict(data))
        elif action == "submit":
            record = engine.submit_message(params.get("text", ""), self.classifier, self.persistence)
            result = record.id
        elif action == "clear":
            result = len(engine.clear_records())
        elif action == "hydrate":
            result = engine.hydrate(self.persistence)
        elif action == "refresh_others":
            result = engine.refresh_others(self.persistence)

        self._step_log.append({
            'time': current_time,
            'action': action,
            'params': params,
            'result': result,
        })

    def _log_depth(self, current_time: float, frame: Any) -> None:
        """Sample the current depth and fields."""
        fields = frame.fields
        self._depth_log.append({
            'time': current_time,
            'depth': frame.smoothed_depth,
            'target': frame.depth,
            'area': frame.area.value,
            'window_size': frame.window_size,
            'fog_density': fields.fog.density,
            'ambient': fields.lighting.ambient,
            'directional': fields.lighting.directional,
            'light_color': fields.lighting.color,
            'pulse': fields.lighting.pulse,
            'background': fields.background.to_hex(),
            'active_handles': frame.active_handles,
        })


@dataclass
class SimulationResults:
    """Results from a simulation run."""
    frames: List[Dict]
    depth_log: List[Dict]
    step_log: List[Dict]
    final_state: Dict[str, Any]
    stats: Dict[str, Any]
    frame_stats: Dict[str, Any]
    config: SimulationConfig

    def summary(self) -> str:
        """Get a text summary of the simulation."""
        lines = [
            "=" * 60,
            "SIMULATION RESULTS",
            "=" * 60,
            "",
            f"Duration: {self.config.duration:.1f}s",
            f"Tick interval: {self.config.tick_interval:.3f}s",
            f"Seed records: {len(self.config.records)}",
            "",
            "--- Statistics ---",
            f"Total ticks: {self.stats['total_ticks']}",
            f"Total events: {self.stats['total_events']}",
            f"Entities created: {self.stats['entities_created']}",
            f"Entities reattached: {self.stats['entities_reattached']}",
            f"Entities retired: {self.stats['entities_retired']}",
            f"Entities destroyed: {self.stats['entities_destroyed']}",
            f"Jumps: {self.stats['jumps']}",
            f"Area changes: {self.stats['area_changes']}",
            "",
            "--- Final State ---",
            f"Depth: {self.stats['current_depth']:.1f}",
            f"Area: {self.stats['current_area']}",
            f"Window size: {self.stats['window_size']}",
            f"Active handles: {self.stats['active_handles']}",
            f"Records: {self.final_state['records']['total']}",
            "",
            "--- Depth Range ---",
            f"Min depth: {self.frame_stats.get('min_depth', 0.0):.1f}",
            f"Max depth: {self.frame_stats.get('max_depth', 0.0):.1f}",
            f"Peak handles: {self.frame_stats.get('peak_handles', 0)}",
        ]

        by_area = self.frame_stats.get('by_area', {})
        if by_area:
            lines.extend(["", "--- Ticks by Area ---"])
            for area, count in sorted(by_area.items(), key=lambda x: -x[1]):
                lines.append(f"  {area}: {count}")

        lines.append("")
        lines.append("=" * 60)

        return "\n".join(lines)

    def frames_to_csv(self) -> str:
        """Export frame summaries to CSV string."""
        if not self.frames:
            return ""

        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=FrameLogger.CSV_COLUMNS, extrasaction='ignore')
        writer.writeheader()
        writer.writerows(self.frames)
        return output.getvalue()

    def depth_to_csv(self) -> str:
        """Export depth log to CSV string."""
        if not self.depth_log:
            return ""

        output = io.StringIO()
        fieldnames = list(self.depth_log[0].keys())
        writer = csv.DictWriter(output, fieldnames=fieldnames)
        writer.writeheader()
        writer.writerows(self.depth_log)
        return output.getvalue()

    def to_json(self) -> str:
        """Export results to JSON string."""
        return json.dumps({
            'frames': self.frames,
            'depth_log': self.depth_log,
            'step_log': self.step_log,
            'final_state': self.final_state,
            'stats': self.stats,
            'frame_stats': self.frame_stats,
        }, indent=2, default=str)


def run_demo(config_path: Optional[str] = None, duration: float = 12.0,
             verbose: bool = True) -> SimulationResults:
    """
    Run a demo session over sample records.

    This demonstrates the engine responding to:
    - Scrolling down from the ground into the underground
    - A long jump to the deepest records and back into the sky
    - A newly submitted message
    """
    runner = SimulationRunner(config_path=config_path)
    runner.configure(
        duration=duration,
        tick_interval=0.05,
        records=sample_records(),
        log_interval=0.5,
    )

    for i in range(10):
        runner.add_step(0.2 + i * 0.1, "wheel", {"delta_y": 300.0})
    runner.add_step(duration / 4, "jump_ratio", {"ratio": 0.9})
    runner.add_step(duration / 2, "submit", {"text": "Finally finished the project, so happy!"})
    runner.add_step(duration * 5 / 8, "jump", {"target": -40.0})
    runner.add_step(duration * 3 / 4, "jump", {"target": 0.0})

    def progress(current, total):
        if int(current * 20) % 40 == 0:
            print(f"  Progress: {current:.0f}/{total:.0f}s", end="\r")

    if verbose:
        print(f"Running demo session ({duration}s)...")
    results = runner.run(progress_callback=progress if verbose else None)
    if verbose:
        print()

    return results
