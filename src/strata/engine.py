"""
Main Strata Ecosystem Engine.

The StrataEngine is the top-level class that integrates all components:
- Configuration loading
- Record store and depth navigation
- Area classification, window selection and distribution
- Environment fields and procedural population
- Render handle lifecycle and frame delivery to render adapters
- Synchronisation with external classification and persistence services

This is the primary interface for rendering backends.
"""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
import time
import uuid
from typing import Any, Callable, Dict, Iterable, List, Optional

from .config import StrataConfig, load_config
from .core import (
    DepthController,
    EmotionRecord,
    EmotionRecordStore,
    place_by_recency,
)
from .ecosystem import (
    Area,
    Distribution,
    EnvironmentFieldCalculator,
    EnvironmentFields,
    EntityLifecycleManager,
    LifecycleEvent,
    LifecycleEventType,
    ProceduralPopulationGenerator,
    Viewport,
    analyze,
    classify_area,
    select_window,
)
from .ecosystem.depth_map import DepthMap, build_depth_map
from .ecosystem.others import OtherLight, OthersFetchPolicy, visible_lights
from .ecosystem.terrarium import TerrariumState, analyze_growth
from .adapters.interfaces import (
    ClassificationService,
    PersistenceError,
    PersistenceService,
)
from .adapters.render import RenderAdapter
from .output.debug_logger import DebugLogger, LogLevel
from .utils.validators import ValidationError


@dataclass
class TickFrame:
    """
    Everything produced by one tick.

    Attributes:
        tick: Tick number (1-based)
        timestamp: Engine time in seconds
        depth: Target depth of the controller
        smoothed_depth: Displayed depth used by every stage
        area: Area of the displayed depth
        window_size: Number of selected records
        distribution: Distribution of the window
        fields: Environment fields to paint
        events: Ordered lifecycle events to apply
        active_handles: Attached handles after the events
        others_lights: Other users' light markers on screen
        terrarium: Growth summary, only near the ground
        is_jump: Displayed depth moved at least the jump threshold this tick
    """
    tick: int
    timestamp: float
    depth: float
    smoothed_depth: float
    area: Area
    window_size: int
    distribution: Distribution
    fields: EnvironmentFields
    events: List[LifecycleEvent] = field(default_factory=list)
    active_handles: int = 0
    others_lights: List[OtherLight] = field(default_factory=list)
    terrarium: Optional[TerrariumState] = None
    is_jump: bool = False

    def event_counts(self) -> Dict[str, int]:
        """Number of events per type value."""
        counts: Dict[str, int] = {}
        for event in self.events:
            counts[event.type.value] = counts.get(event.type.value, 0) + 1
        return counts

    def to_dict(self, include_events: bool = True) -> Dict[str, Any]:
        data = {
            'tick': self.tick,
            'timestamp': self.timestamp,
            'depth': self.depth,
            'smoothed_depth': self.smoothed_depth,
            'area': self.area.value,
            'window_size': self.window_size,
            'distribution': self.distribution.to_dict(),
            'fields': self.fields.to_dict(),
            'active_handles': self.active_handles,
            'event_counts': self.event_counts(),
            'others_lights': [light.to_dict() for light in self.others_lights],
            'terrarium': self.terrarium.to_dict() if self.terrarium else None,
            'is_jump': self.is_jump,
        }
        if include_events:
            data['events'] = [event.to_dict() for event in self.events]
        return data


@dataclass
class EngineStats:
    """Engine runtime statistics."""
    total_ticks: int = 0
    total_events: int = 0
    entities_created: int = 0
    entities_reattached: int = 0
    entities_retired: int = 0
    entities_destroyed: int = 0
    jumps: int = 0
    area_changes: int = 0
    messages_submitted: int = 0
    sync_failures: int = 0
    runtime_seconds: float = 0.0
    current_depth: float = 0.0
    current_area: str = Area.TRANSITION.value
    window_size: int = 0
    active_handles: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'total_ticks': self.total_ticks,
            'total_events': self.total_events,
            'entities_created': self.entities_created,
            'entities_reattached': self.entities_reattached,
            'entities_retired': self.entities_retired,
            'entities_destroyed': self.entities_destroyed,
            'jumps': self.jumps,
            'area_changes': self.area_changes,
            'messages_submitted': self.messages_submitted,
            'sync_failures': self.sync_failures,
            'runtime_seconds': self.runtime_seconds,
            'current_depth': self.current_depth,
            'current_area': self.current_area,
            'window_size': self.window_size,
            'active_handles': self.active_handles,
        }


class StrataEngine:
    """
    Main Strata Ecosystem Engine.

    Integrates all subsystems and provides a single interface for:
    - Feeding navigation input (wheel, touch, jumps)
    - Running ticks that produce render frames
    - Adding records locally or from persistence
    - Inspecting engine state

    Engines own all of their state, so several can run side by side.

    Example:
        >>> engine = StrataEngine(config_path="config/")
        >>> engine.add_adapter(RecordingRenderAdapter())
        >>> engine.add_record(record)
        >>>
        >>> while running:
        ...     engine.wheel(delta_y)
        ...     frame = engine.tick(delta_time=1 / 60)
    """

    def __init__(self,
                 config: Optional[StrataConfig] = None,
                 config_path: Optional[str] = None,
                 viewport: Optional[Viewport] = None,
                 logger: Optional[DebugLogger] = None,
                 owner_id: str = "local"):
        """
        Initialize the engine.

        Args:
            config: Pre-loaded StrataConfig
            config_path: Path to config directory (used when config is None)
            viewport: Screen projection (built from config when omitted)
            logger: Debug logger (a silent one is created when omitted)
            owner_id: Owner assigned to records created by this engine
        """
        if config is not None:
            self.config = config
        elif config_path is not None:
            self.config = load_config(config_path)
        else:
            self.config = StrataConfig()

        self.owner_id = owner_id
        self.logger = logger if logger is not None else DebugLogger(level=LogLevel.WARNING)
        self.viewport = viewport or Viewport(self.config.viewport)

        half_width = self.config.half_width
        self.store = EmotionRecordStore()
        self.depth_controller = DepthController(self.config.depth)
        self.calculator = EnvironmentFieldCalculator(self.config.environment, half_width)
        self.generator = ProceduralPopulationGenerator(self.config.population)
        self.lifecycle = EntityLifecycleManager(self.config.lifecycle, self.viewport)
        self.others_policy = OthersFetchPolicy(self.config.others)

        self._simulation_time: float = 0.0
        self._real_start_time: float = time.time()
        self._last_depth: Optional[float] = None
        self._last_area: Optional[Area] = None
        self._last_frame: Optional[TickFrame] = None

        self.stats = EngineStats()

        self._adapters: List[RenderAdapter] = []
        self._frame_callbacks: List[Callable[[TickFrame], None]] = []

    # =========================================================================
    # Navigation Input
    # =========================================================================

    def wheel(self, delta_y: float) -> float:
        """Apply a wheel delta; returns the new target depth."""
        return self.depth_controller.apply_wheel(delta_y)

    def touch_start(self, y: float) -> None:
        self.depth_controller.begin_touch(y)

    def touch_move(self, y: float) -> float:
        return self.depth_controller.move_touch(y)

    def touch_end(self) -> None:
        self.depth_controller.end_touch()

    def set_input_focus(self, focused: bool) -> None:
        """While a text input has focus, wheel and touch input is ignored."""
        self.depth_controller.set_input_focus(focused)

    def jump_to(self, target: float, duration: Optional[float] = None) -> None:
        """
        Start an animated jump.

        Args:
            target: Target depth (may be negative, into the sky)
            duration: Override the configured jump duration (seconds)
        """
        start = self.depth_controller.smoothed_depth
        self.depth_controller.jump_to(target, duration)
        self.logger.log_jump(self._simulation_time, start, target)

    def jump_to_map_ratio(self, ratio: float, duration: Optional[float] = None) -> float:
        """
        Jump to a vertical position on the depth map.

        Returns:
            The target depth
        """
        target = self.depth_map().depth_at_ratio(ratio)
        self.jump_to(target, duration)
        return target

    def depth_map(self) -> DepthMap:
        """Bucketed overview of every stored record."""
        return build_depth_map(self.store.records())

    # =========================================================================
    # Records
    # =========================================================================

    def add_record(self, record: EmotionRecord) -> bool:
        """
        Add a record to the store.

        Returns:
            True if added, False if an identical record was present

        Raises:
            ValidationError: If a different record with the same id exists
        """
        added = self.store.append(record)
        if added:
            self.logger.log_store_change(self._simulation_time, "Record added", 1, len(self.store))
        return added

    def add_records(self, records: Iterable[EmotionRecord]) -> int:
        """Add many records; returns how many were new."""
        added = self.store.extend(records)
        if added:
            self.logger.log_store_change(self._simulation_time, "Records added", added, len(self.store))
        return added

    def clear_records(self) -> List[LifecycleEvent]:
        """
        Remove every record and destroy every render handle (sign-out).

        Returns:
            The DESTROY events, which are also sent to the adapters
        """
        self.store.clear()
        self.others_policy.reset()
        events = self._teardown_handles()
        self.stats.entities_destroyed += len(events)
        self.stats.total_events += len(events)
        self.logger.log_store_change(self._simulation_time, "Records cleared", 0, 0)
        return events

    def _teardown_handles(self) -> List[LifecycleEvent]:
        events = self.lifecycle.clear()
        if events:
            for adapter in self._adapters:
                adapter.apply_events(events)
        return events

    # =========================================================================
    # External Sync
    # =========================================================================

    def hydrate(self, persistence: PersistenceService) -> bool:
        """
        Load the user's own records and place them by recency.

        Records already in the store keep their local placement. On
        failure, or when the returned batch is inconsistent, the store is
        left untouched.

        Returns:
            True if the store was refreshed
        """
        try:
            own = persistence.list_own()
            owned = [r if r.is_own else replace(r, owner_id=self.owner_id) for r in own]
            added = self.store.merge(place_by_recency(owned))
        except (PersistenceError, ValidationError) as e:
            self.stats.sync_failures += 1
            self.logger.log_sync_failure(self._simulation_time, "hydrate", e)
            return False

        self.logger.log_store_change(self._simulation_time, "Hydrated", added, len(self.store))
        return True

    def refresh_others(self, persistence: PersistenceService,
                       now: Optional[float] = None) -> bool:
        """
        Fetch other users' records around the current depth when due.

        Args:
            persistence: Persistence service
            now: Time in seconds (engine time when omitted)

        Returns:
            True if a fetch happened and succeeded
        """
        now = self._simulation_time if now is None else now
        depth = self.depth_controller.smoothed_depth
        if not self.others_policy.should_fetch(depth, now):
            return False

        depth_min, depth_max = self.others_policy.window(depth)
        try:
            partials = persistence.list_others(depth_min, depth_max)
        except PersistenceError as e:
            self.stats.sync_failures += 1
            self.logger.log_sync_failure(self._simulation_time, "list_others", e)
            return False

        try:
            added = self.store.merge(p.to_record() for p in partials)
        except ValidationError as e:
            self.stats.sync_failures += 1
            self.logger.log_sync_failure(self._simulation_time, "list_others", e)
            return False
        self.others_policy.mark_fetched(depth, now)
        self.logger.debug("sync", "Fetched others", self._simulation_time,
                          received=len(partials), added=added,
                          window=f"{depth_min:.0f}-{depth_max:.0f}")
        return True

    def submit_message(self, text: str, classifier: ClassificationService,
                       persistence: Optional[PersistenceService] = None) -> EmotionRecord:
        """
        Classify a message and add it as a record at the current depth.

        Args:
            text: Message text
            classifier: Classification service
            persistence: Optional persistence service to append to

        Returns:
            The new record

        Raises:
            ClassificationError: If classification fails (the store is untouched)
        """
        classification = classifier.classify(text)
        record = EmotionRecord(
            id=f"msg-{uuid.uuid4().hex[:12]}",
            category=classification.category,
            strength=classification.strength,
            depth=self.depth_controller.depth,
            analysis=classification.annotation,
            created_at=datetime.now(timezone.utc),
            owner_id=self.owner_id,
        )
        self.store.append(record)
        self.stats.messages_submitted += 1
        self.logger.info("store", "Message classified", self._simulation_time,
                         emotion=record.category.value, strength=f"{record.strength:.2f}")

        if persistence is not None:
            try:
                persistence.append(record)
            except PersistenceError as e:
                self.stats.sync_failures += 1
                self.logger.log_sync_failure(self._simulation_time, "append", e)

        return record

    # =========================================================================
    # Main Tick
    # =========================================================================

    def tick(self, delta_time: float = 1.0 / 60.0) -> TickFrame:
        """
        Run one tick of the pipeline.

        Args:
            delta_time: Time elapsed since last tick (seconds)

        Returns:
            TickFrame, also delivered to every adapter and callback
        """
        self.logger.tick_start()
        self._simulation_time += delta_time
        self.stats.total_ticks += 1

        # 1. Navigation
        depth = self.depth_controller.update(delta_time)
        is_jump = (self._last_depth is not None and
                   abs(depth - self._last_depth) >= self.config.depth.jump_threshold)
        self._last_depth = depth

        # 2. Area and window
        half_width = self.config.half_width
        area = classify_area(depth, half_width)
        if self._last_area is not None and area != self._last_area:
            self.stats.area_changes += 1
            self.logger.log_area_change(self._simulation_time, self._last_area.value,
                                        area.value, depth)
        self._last_area = area

        records = self.store.records()
        window = select_window(records, depth, area, self.config.window)
        distribution = analyze(window)

        # 3. Fields
        fields = self.calculator.calculate(depth, distribution, area)

        # 4. Population and handles
        entities = self.generator.populate(window, area, distribution)
        events = self.lifecycle.update(entities, depth)

        # 5. Supporting views
        lights = visible_lights(self.store.other_records(), depth, self.viewport,
                                self.config.others)
        terrarium = None
        if depth <= half_width:
            terrarium = analyze_growth(self.store.own_records())

        frame = TickFrame(
            tick=self.stats.total_ticks,
            timestamp=self._simulation_time,
            depth=self.depth_controller.depth,
            smoothed_depth=depth,
            area=area,
            window_size=len(window),
            distribution=distribution,
            fields=fields,
            events=events,
            active_handles=self.lifecycle.active_count,
            others_lights=lights,
            terrarium=terrarium,
            is_jump=is_jump,
        )

        self._update_stats(frame)
        self._last_frame = frame
        self.logger.log_tick(self._simulation_time, depth, area.value, len(window), len(events))

        # 6. Deliver
        for adapter in self._adapters:
            adapter.apply_frame(frame)
        for callback in self._frame_callbacks:
            callback(frame)

        self.logger.tick_end()
        return frame

    def _update_stats(self, frame: TickFrame) -> None:
        stats = self.stats
        destroyed = 0
        for event in frame.events:
            stats.total_events += 1
            if event.type == LifecycleEventType.CREATE:
                stats.entities_created += 1
            elif event.type == LifecycleEventType.REATTACH:
                stats.entities_reattached += 1
            elif event.type == LifecycleEventType.RETIRE:
                stats.entities_retired += 1
            elif event.type == LifecycleEventType.DESTROY:
                destroyed += 1
        if destroyed:
            stats.entities_destroyed += destroyed
            self.logger.log_pool_eviction(self._simulation_time, destroyed)
        if frame.is_jump:
            stats.jumps += 1

        stats.current_depth = frame.smoothed_depth
        stats.current_area = frame.area.value
        stats.window_size = frame.window_size
        stats.active_handles = frame.active_handles
        stats.runtime_seconds = time.time() - self._real_start_time

    # =========================================================================
    # Adapters and Callbacks
    # =========================================================================

    def add_adapter(self, adapter: RenderAdapter) -> None:
        self._adapters.append(adapter)

    def remove_adapter(self, adapter: RenderAdapter) -> None:
        if adapter in self._adapters:
            self._adapters.remove(adapter)

    def on_frame(self, callback: Callable[[TickFrame], None]) -> None:
        """
        Register a frame callback.

        The callback is called once per tick with the TickFrame.
        """
        self._frame_callbacks.append(callback)

    def remove_callback(self, callback: Callable[[TickFrame], None]) -> None:
        if callback in self._frame_callbacks:
            self._frame_callbacks.remove(callback)

    # =========================================================================
    # State Inspection
    # =========================================================================

    @property
    def simulation_time(self) -> float:
        return self._simulation_time

    @property
    def depth(self) -> float:
        """Displayed (smoothed) depth."""
        return self.depth_controller.smoothed_depth

    @property
    def area(self) -> Area:
        return classify_area(self.depth, self.config.half_width)

    @property
    def last_frame(self) -> Optional[TickFrame]:
        return self._last_frame

    def get_state(self) -> Dict[str, Any]:
        """Get complete engine state for inspection/logging."""
        return {
            'simulation_time': self._simulation_time,
            'depth': self.depth_controller.get_state(),
            'area': self.area.value,
            'records': {
                'total': len(self.store),
                'own': len(self.store.own_records()),
                'others': len(self.store.other_records()),
                'version': self.store.version,
            },
            'lifecycle': self.lifecycle.get_state(),
            'stats': self.stats.to_dict(),
            'performance': self.logger.get_performance_stats(),
        }

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def reset(self) -> None:
        """
        Reset navigation, handles and statistics.

        Stored records are kept; use clear_records() to drop them.
        """
        self._simulation_time = 0.0
        self._real_start_time = time.time()
        self._last_depth = None
        self._last_area = None
        self._last_frame = None

        self.depth_controller.reset()
        self._teardown_handles()
        self.lifecycle = EntityLifecycleManager(self.config.lifecycle, self.viewport)
        self.others_policy.reset()
        for adapter in self._adapters:
            adapter.reset()

        self.stats = EngineStats()

    def __repr__(self) -> str:
        return (f"StrataEngine(time={self._simulation_time:.1f}s, "
                f"depth={self.depth:.1f}, "
                f"records={len(self.store)}, "
                f"active={self.lifecycle.active_count})")
