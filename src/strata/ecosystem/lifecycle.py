"""
Entity lifecycle manager.

Keeps a live set of render handles in step with the per-tick target set of
child entities. Each tick the targets are projected and culled, diffed
against the active handles by id, and turned into an ordered list of
events for the render backend:

    RETIRE    handle detached and returned to its kind's pool
    UPDATE    handle moved to the entity's new screen position
    CREATE    new handle allocated and attached
    REATTACH  pooled handle attached again (same id first, then any of the kind)
    DESTROY   pooled handle released for good (pool overflow or clear)

Apart from clear(), handles are only destroyed out of a pool, never while
attached.
"""

from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ..config.models import LifecycleConfig
from .population import ChildEntity, EntityKind
from .projection import Viewport


class LifecycleEventType(Enum):
    RETIRE = "retire"
    UPDATE = "update"
    CREATE = "create"
    REATTACH = "reattach"
    DESTROY = "destroy"


@dataclass
class RenderHandle:
    """
    Backend-facing handle owned by the lifecycle manager.

    Attributes:
        handle_id: Monotonic identifier, never reused
        kind: Entity kind (selects the pool)
        entity_id: Current binding, or the last one while pooled
        x: Screen x
        y: Screen y
        attached: False while pooled
        detached_tick: Tick the handle was pooled, None while attached
    """
    handle_id: int
    kind: EntityKind
    entity_id: str
    x: float = 0.0
    y: float = 0.0
    attached: bool = True
    detached_tick: Optional[int] = None


@dataclass(frozen=True)
class LifecycleEvent:
    """One instruction for the render backend."""
    type: LifecycleEventType
    handle_id: int
    kind: EntityKind
    entity_id: str
    tick: int
    x: float = 0.0
    y: float = 0.0
    entity: Optional[ChildEntity] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            'type': self.type.value,
            'handle_id': self.handle_id,
            'kind': self.kind.value,
            'entity_id': self.entity_id,
            'tick': self.tick,
            'x': self.x,
            'y': self.y,
        }
        if self.entity is not None:
            data['strength'] = self.entity.strength
            data['category'] = self.entity.category.value
            data['phase_seed'] = self.entity.phase_seed
        return data


@dataclass
class LifecycleStats:
    """Running totals."""
    created: int = 0
    reattached: int = 0
    retired: int = 0
    destroyed: int = 0
    updates: int = 0
    culled_last_tick: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'created': self.created,
            'reattached': self.reattached,
            'retired': self.retired,
            'destroyed': self.destroyed,
            'updates': self.updates,
            'culled_last_tick': self.culled_last_tick,
        }


class EntityLifecycleManager:
    """
    Diff-based handle synchroniser with per-kind pools.

    Example:
        >>> manager = EntityLifecycleManager()
        >>> events = manager.update(children, depth=600.0)
        >>> manager.active_count == len({e.entity_id for e in events})
        True
    """

    def __init__(self, config: Optional[LifecycleConfig] = None,
                 viewport: Optional[Viewport] = None):
        self.config = config or LifecycleConfig()
        self.viewport = viewport or Viewport()

        self._active: Dict[str, RenderHandle] = {}
        self._pools: Dict[EntityKind, "OrderedDict[int, RenderHandle]"] = {}
        self._next_handle_id = 1
        self._tick = 0
        self.stats = LifecycleStats()

    # =========================================================================
    # Tick
    # =========================================================================

    def _targets(self, entities: Iterable[ChildEntity],
                 depth: float) -> "OrderedDict[str, Tuple[ChildEntity, float, float]]":
        margin = self.config.visibility_margin
        targets: "OrderedDict[str, Tuple[ChildEntity, float, float]]" = OrderedDict()
        culled = 0
        for entity in entities:
            if entity.id in targets:
                continue
            x, y = self.viewport.project(entity, depth)
            if not self.viewport.is_visible(x, y, margin):
                culled += 1
                continue
            targets[entity.id] = (entity, x, y)
        self.stats.culled_last_tick = culled
        return targets

    def update(self, entities: Iterable[ChildEntity], depth: float) -> List[LifecycleEvent]:
        """
        Synchronise handles with this tick's entities.

        Args:
            entities: Target entity set (duplicate ids after the first are ignored)
            depth: Current depth, for projection and culling

        Returns:
            Events ordered RETIRE, UPDATE, CREATE/REATTACH, DESTROY
        """
        self._tick += 1
        targets = self._targets(entities, depth)
        events: List[LifecycleEvent] = []

        for entity_id in list(self._active):
            target = targets.get(entity_id)
            handle = self._active[entity_id]
            if target is None or target[0].kind != handle.kind:
                events.append(self._retire(entity_id))

        entering = []
        for entity_id, (entity, x, y) in targets.items():
            handle = self._active.get(entity_id)
            if handle is None:
                entering.append((entity, x, y))
                continue
            handle.x, handle.y = x, y
            self.stats.updates += 1
            events.append(self._event(LifecycleEventType.UPDATE, handle, entity))

        for entity, x, y in entering:
            events.append(self._attach(entity, x, y))

        events.extend(self._evict_overflow())
        return events

    # =========================================================================
    # Handle Management
    # =========================================================================

    def _event(self, event_type: LifecycleEventType, handle: RenderHandle,
               entity: Optional[ChildEntity] = None) -> LifecycleEvent:
        return LifecycleEvent(
            type=event_type,
            handle_id=handle.handle_id,
            kind=handle.kind,
            entity_id=handle.entity_id,
            tick=self._tick,
            x=handle.x,
            y=handle.y,
            entity=entity,
        )

    def _pool(self, kind: EntityKind) -> "OrderedDict[int, RenderHandle]":
        if kind not in self._pools:
            self._pools[kind] = OrderedDict()
        return self._pools[kind]

    def _retire(self, entity_id: str) -> LifecycleEvent:
        handle = self._active.pop(entity_id)
        handle.attached = False
        handle.detached_tick = self._tick
        self._pool(handle.kind)[handle.handle_id] = handle
        self.stats.retired += 1
        return self._event(LifecycleEventType.RETIRE, handle)

    def _take_pooled(self, entity: ChildEntity) -> Optional[RenderHandle]:
        pool = self._pools.get(entity.kind)
        if not pool:
            return None
        for handle_id, handle in pool.items():
            if handle.entity_id == entity.id:
                return pool.pop(handle_id)
        _, handle = pool.popitem(last=False)
        return handle

    def _attach(self, entity: ChildEntity, x: float, y: float) -> LifecycleEvent:
        handle = self._take_pooled(entity)
        if handle is None:
            handle = RenderHandle(handle_id=self._next_handle_id, kind=entity.kind,
                                  entity_id=entity.id)
            self._next_handle_id += 1
            event_type = LifecycleEventType.CREATE
            self.stats.created += 1
        else:
            event_type = LifecycleEventType.REATTACH
            self.stats.reattached += 1

        handle.entity_id = entity.id
        handle.x, handle.y = x, y
        handle.attached = True
        handle.detached_tick = None
        self._active[entity.id] = handle
        return self._event(event_type, handle, entity)

    def _destroy(self, handle: RenderHandle) -> LifecycleEvent:
        handle.attached = False
        self.stats.destroyed += 1
        return self._event(LifecycleEventType.DESTROY, handle)

    def _evict_overflow(self) -> List[LifecycleEvent]:
        capacity = self.config.pool_capacity
        events = []
        for pool in self._pools.values():
            while len(pool) > capacity:
                _, handle = pool.popitem(last=False)
                events.append(self._destroy(handle))
        return events

    def clear(self) -> List[LifecycleEvent]:
        """Destroy every handle, attached or pooled."""
        events = []
        for entity_id in list(self._active):
            events.append(self._destroy(self._active.pop(entity_id)))
        for pool in self._pools.values():
            while pool:
                _, handle = pool.popitem(last=False)
                events.append(self._destroy(handle))
        return events

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def active_count(self) -> int:
        return len(self._active)

    def pooled_count(self, kind: Optional[EntityKind] = None) -> int:
        if kind is not None:
            return len(self._pools.get(kind, ()))
        return sum(len(pool) for pool in self._pools.values())

    def handle_for(self, entity_id: str) -> Optional[RenderHandle]:
        return self._active.get(entity_id)

    def active_handles(self) -> List[RenderHandle]:
        return list(self._active.values())

    @property
    def tick_count(self) -> int:
        return self._tick

    def get_state(self) -> Dict[str, Any]:
        return {
            'tick': self._tick,
            'active': len(self._active),
            'pooled': {kind.value: len(pool) for kind, pool in self._pools.items() if pool},
            'stats': self.stats.to_dict(),
        }

    def __repr__(self) -> str:
        return f"EntityLifecycleManager(active={len(self._active)}, pooled={self.pooled_count()})"
