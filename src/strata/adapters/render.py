"""
Render adapters.

A render adapter receives one frame per tick: the environment fields to
paint and the ordered lifecycle events to apply to its scene graph. The
engine is backend-agnostic; a canvas, a 3D scene or a remote client all
sit behind this one interface.
"""

from abc import ABC, abstractmethod
import json
from typing import Any, Dict, List, Optional, TextIO

from ..ecosystem.lifecycle import LifecycleEventType


class RenderAdapter(ABC):
    """Consumes engine frames."""

    @abstractmethod
    def apply_frame(self, frame: Any) -> None:
        """Apply one TickFrame."""

    @abstractmethod
    def apply_events(self, events: List[Any]) -> None:
        """
        Apply lifecycle events raised outside a tick.

        Sign-out and engine reset tear down every handle between frames;
        the DESTROY events arrive here.
        """

    def reset(self) -> None:
        """Drop all backend state."""


class RecordingRenderAdapter(RenderAdapter):
    """
    In-memory backend that mirrors the scene graph from the event stream.

    ``nodes`` maps handle id to the node the backend would be drawing, so
    tests and the simulator can check that applying events keeps the
    backend in step with the engine.
    """

    def __init__(self, max_frames: int = 1000):
        self.max_frames = max_frames
        self.frames: List[Any] = []
        self.nodes: Dict[int, Dict[str, Any]] = {}
        self.pooled: Dict[int, Dict[str, Any]] = {}
        self.destroyed: int = 0

    def apply_frame(self, frame: Any) -> None:
        self.frames.append(frame)
        if len(self.frames) > self.max_frames:
            self.frames = self.frames[-self.max_frames:]
        self.apply_events(frame.events)

    def apply_events(self, events: List[Any]) -> None:
        for event in events:
            if event.type in (LifecycleEventType.CREATE, LifecycleEventType.REATTACH):
                node = self.pooled.pop(event.handle_id, None) or {'kind': event.kind.value}
                node.update(entity_id=event.entity_id, x=event.x, y=event.y, visible=True)
                self.nodes[event.handle_id] = node
            elif event.type == LifecycleEventType.UPDATE:
                node = self.nodes[event.handle_id]
                node.update(x=event.x, y=event.y)
            elif event.type == LifecycleEventType.RETIRE:
                node = self.nodes.pop(event.handle_id)
                node['visible'] = False
                self.pooled[event.handle_id] = node
            elif event.type == LifecycleEventType.DESTROY:
                self.nodes.pop(event.handle_id, None)
                self.pooled.pop(event.handle_id, None)
                self.destroyed += 1

    @property
    def last_frame(self) -> Optional[Any]:
        return self.frames[-1] if self.frames else None

    def visible_entity_ids(self) -> List[str]:
        return sorted(node['entity_id'] for node in self.nodes.values())

    def reset(self) -> None:
        self.frames.clear()
        self.nodes.clear()
        self.pooled.clear()
        self.destroyed = 0


class JsonLinesRenderAdapter(RenderAdapter):
    """
    Streams frames as JSON lines, one object per tick.

    Suitable for piping into an external renderer process.
    """

    def __init__(self, output: TextIO, include_events: bool = True):
        self.output = output
        self.include_events = include_events
        self.frames_written = 0
        self.events_written = 0

    def apply_frame(self, frame: Any) -> None:
        data = frame.to_dict(include_events=self.include_events)
        self.output.write(json.dumps(data) + "\n")
        self.frames_written += 1

    def apply_events(self, events: List[Any]) -> None:
        # Written as an event-only line with no tick; skipped when the
        # consumer does not track handles.
        if not self.include_events or not events:
            return
        data = {'tick': None, 'events': [event.to_dict() for event in events]}
        self.output.write(json.dumps(data) + "\n")
        self.events_written += len(events)
