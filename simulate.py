#!/usr/bin/env python3
"""
Command-Based Strata Ecosystem Simulator

A simple command-line interface for scrolling through a Strata ecosystem.
Works in any terminal.

Usage:
    python simulate.py [--records N] [--seed SEED] [--config PATH]

Commands:
    wheel <dy>          Scroll by a wheel delta
    drag <from> <to>    Touch-drag between two screen y positions
    jump <depth>        Animated jump to a depth
    mapjump <0-1>       Jump to a position on the depth map
    tick [count]        Run ticks (default: 30)
    run <seconds>       Run for N seconds
    add <cat> <s> [d]   Add a record (category, strength, depth)
    say <text>          Classify a message and add it
    status              Show current state
    fields              Show environment fields
    events              Show recent lifecycle events
    map                 Show the depth map
    help                Show commands
    quit                Exit

Examples:
    > wheel 400
    > tick 60
    > fields
    > jump -30
"""

import sys
import os
import argparse
import uuid

# Add src to path
src_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src')
sys.path.insert(0, src_path)

from strata.engine import StrataEngine
from strata.adapters import (
    ClassificationError,
    InMemoryPersistence,
    RecordingRenderAdapter,
    ResponseClassifier,
    keyword_transport,
)
from strata.config import ConfigError
from strata.core import EmotionCategory, EmotionRecord
from strata.output import FrameLogger, LogLevel, create_console_logger
from strata.simulation import sample_records
from strata.utils import ValidationError


TICK_SECONDS = 1.0 / 30.0


class CommandSimulator:
    """
    Command-based simulator for the Strata engine.
    """

    EVENT_MARKS = {
        'create': '+',
        'reattach': '^',
        'update': '.',
        'retire': '-',
        'destroy': 'x',
    }

    def __init__(self, config_path: str = "config/", record_count: int = 40,
                 seed: int = 7, verbose: bool = False):
        """Initialize the simulator."""
        print(f"Initializing Strata ({record_count} sample records, seed {seed})...")

        logger = create_console_logger(LogLevel.DEBUG if verbose else LogLevel.WARNING)
        try:
            self.engine = StrataEngine(config_path=config_path, logger=logger)
        except ConfigError as e:
            print(f"Config problem ({e}); using built-in defaults.")
            self.engine = StrataEngine(logger=logger)

        self.renderer = RecordingRenderAdapter(max_frames=200)
        self.frame_logger = FrameLogger(max_frames=5000)
        self.engine.add_adapter(self.renderer)
        self.engine.on_frame(self.frame_logger.log_frame)

        self.persistence = InMemoryPersistence(own=sample_records(record_count, seed))
        self.classifier = ResponseClassifier(keyword_transport)
        self.engine.hydrate(self.persistence)

        self.recent_events = []
        self.engine.on_frame(self._on_frame)

        self.engine.tick(TICK_SECONDS)
        print("Ready! Type 'help' for commands.\n")

    def _on_frame(self, frame) -> None:
        """Keep the non-update events for the events view."""
        for event in frame.events:
            if event.type.value == 'update':
                continue
            self.recent_events.append((frame.timestamp, event))

        if len(self.recent_events) > 100:
            self.recent_events = self.recent_events[-100:]

    def run(self) -> None:
        """Run the command loop."""
        while True:
            try:
                frame = self.engine.last_frame
                prompt = (f"[{frame.area.value}|depth:{frame.smoothed_depth:.0f}"
                          f"|window:{frame.window_size}|handles:{frame.active_handles}] > ")

                line = input(prompt).strip()
                if not line:
                    continue

                parts = line.split()
                cmd = parts[0].lower()
                args = parts[1:]

                self._handle_command(cmd, args)

            except KeyboardInterrupt:
                print("\nUse 'quit' to exit.")
            except EOFError:
                break

    def _handle_command(self, cmd: str, args: list) -> None:
        """Handle a command."""

        if cmd in ('quit', 'exit', 'q'):
            self._cmd_quit()
            sys.exit(0)

        elif cmd == 'help' or cmd == '?':
            self._cmd_help()

        elif cmd == 'wheel' or cmd == 'w':
            self._cmd_wheel(args)

        elif cmd == 'drag':
            self._cmd_drag(args)

        elif cmd == 'jump' or cmd == 'j':
            self._cmd_jump(args)

        elif cmd == 'mapjump':
            self._cmd_mapjump(args)

        elif cmd == 'tick':
            self._cmd_tick(args)

        elif cmd == 'run':
            self._cmd_run(args)

        elif cmd == 'add':
            self._cmd_add(args)

        elif cmd == 'say':
            self._cmd_say(args)

        elif cmd == 'status' or cmd == 'st':
            self._cmd_status()

        elif cmd == 'fields' or cmd == 'f':
            self._cmd_fields()

        elif cmd == 'events' or cmd == 'e':
            self._cmd_events()

        elif cmd == 'map' or cmd == 'm':
            self._cmd_map()

        elif cmd == 'scenario':
            self._cmd_scenario(args)

        elif cmd == 'export':
            self._cmd_export(args)

        else:
            print(f"Unknown command: {cmd}. Type 'help' for commands.")

    def _cmd_help(self) -> None:
        """Show help."""
        print("""
Commands:
  wheel <dy>          Scroll by a wheel delta (positive = deeper)
  drag <from> <to>    Touch-drag from screen y to screen y
  jump <depth>        Animated jump to a depth (negative = sky)
  mapjump <0-1>       Jump to a position on the depth map

  tick [count]        Run N ticks (default: 30)
  run <seconds>       Run for N seconds

  add <cat> <s> [d]   Add a record: category, strength, depth
  say <text>          Classify a message and add it at the current depth

  status              Show current engine state
  fields              Show environment fields
  events              Show recent lifecycle events
  map                 Show the depth map

  scenario <name>     Run a predefined scenario
  export <file>       Export frame log to CSV

  help                Show this help
  quit                Exit simulator

Scenarios:
  descent             Scroll from the sky down to the deepest records
  jumps               Long jumps back and forth, showing handle reuse
""")

    def _ticks(self, count: int) -> None:
        for _ in range(count):
            self.engine.tick(TICK_SECONDS)

    def _cmd_wheel(self, args: list) -> None:
        """Apply a wheel delta and settle."""
        try:
            delta = float(args[0])
        except (IndexError, ValueError):
            print("Usage: wheel <dy>")
            return

        target = self.engine.wheel(delta)
        self._ticks(30)
        print(f"Target depth: {target:.1f}  (displayed {self.engine.depth:.1f})")

    def _cmd_drag(self, args: list) -> None:
        """Touch-drag between two y positions."""
        try:
            from_y, to_y = float(args[0]), float(args[1])
        except (IndexError, ValueError):
            print("Usage: drag <from> <to>")
            return

        self.engine.touch_start(from_y)
        target = self.engine.touch_move(to_y)
        self.engine.touch_end()
        self._ticks(30)
        print(f"Target depth: {target:.1f}")

    def _cmd_jump(self, args: list) -> None:
        """Jump to a depth and run until it lands."""
        try:
            target = float(args[0])
        except (IndexError, ValueError):
            print("Usage: jump <depth>")
            return

        self.engine.jump_to(target)
        self._run_jump()

    def _cmd_mapjump(self, args: list) -> None:
        """Jump to a depth map position."""
        try:
            ratio = float(args[0])
        except (IndexError, ValueError):
            print("Usage: mapjump <0-1>")
            return

        target = self.engine.jump_to_map_ratio(ratio)
        print(f"Map position {ratio:.2f} -> depth {target:.1f}")
        self._run_jump()

    def _run_jump(self) -> None:
        created_before = self.engine.stats.entities_created
        reused_before = self.engine.stats.entities_reattached
        ticks = 0
        while self.engine.depth_controller.is_jumping and ticks < 600:
            self.engine.tick(TICK_SECONDS)
            ticks += 1
        self.engine.tick(TICK_SECONDS)

        print(f"  Landed at {self.engine.depth:.1f} after {ticks} ticks")
        print(f"  Handles created: {self.engine.stats.entities_created - created_before}")
        print(f"  Handles reused:  {self.engine.stats.entities_reattached - reused_before}")

    def _cmd_tick(self, args: list) -> None:
        """Run ticks."""
        count = 30
        if args:
            try:
                count = int(args[0])
            except ValueError:
                print("Usage: tick [count]")
                return

        start_depth = self.engine.depth
        events_before = self.engine.stats.total_events
        self._ticks(count)
        end_depth = self.engine.depth

        direction = "↓" if end_depth > start_depth else "↑" if end_depth < start_depth else "→"
        print(f"  Time: {self.engine.simulation_time:.2f}s")
        print(f"  Depth: {start_depth:.1f} {direction} {end_depth:.1f}")
        print(f"  Events: {self.engine.stats.total_events - events_before}")
        print(f"  Active handles: {self.engine.lifecycle.active_count}")

    def _cmd_run(self, args: list) -> None:
        """Run for a duration."""
        try:
            duration = float(args[0])
        except (IndexError, ValueError):
            print("Usage: run <seconds>")
            return

        self._cmd_tick([str(int(duration / TICK_SECONDS))])

    def _cmd_add(self, args: list) -> None:
        """Add a record."""
        if len(args) < 2:
            print("Usage: add <category> <strength> [depth]")
            print(f"Categories: {', '.join(c.value for c in EmotionCategory)}")
            return

        try:
            depth = float(args[2]) if len(args) > 2 else self.engine.depth_controller.depth
            record = EmotionRecord(
                id=f"cli-{uuid.uuid4().hex[:8]}",
                category=args[0],
                strength=float(args[1]),
                depth=depth,
                owner_id=self.engine.owner_id,
            )
        except (ValueError, ValidationError) as e:
            print(f"Invalid record: {e}")
            return

        self.engine.add_record(record)
        self._ticks(1)
        print(f"Added {record.category.value} ({record.strength:.2f}) at depth {record.depth:.1f}")

    def _cmd_say(self, args: list) -> None:
        """Classify a message."""
        text = " ".join(args)
        try:
            record = self.engine.submit_message(text, self.classifier, self.persistence)
        except ClassificationError as e:
            print(f"Could not classify message: {e}")
            return

        self._ticks(1)
        print(f"Classified as {record.category.value} ({record.strength:.2f}) "
              f"'{record.analysis}' at depth {record.depth:.1f}")

    def _cmd_status(self) -> None:
        """Show engine status."""
        state = self.engine.get_state()
        stats = self.engine.stats
        depth = state['depth']
        records = state['records']
        perf = state['performance']

        print(f"""
=== Engine Status ===
  Simulation time: {self.engine.simulation_time:.2f}s

  Navigation:
    Depth: {depth['depth']:.1f} (displayed {depth['smoothed_depth']:.1f})
    Area: {state['area']}
    Jumping: {depth['is_jumping']}
    Input focused: {depth['input_focused']}

  Records:
    Total: {records['total']}
    Own: {records['own']}
    Others: {records['others']}

  Statistics:
    Total ticks: {stats.total_ticks}
    Window size: {stats.window_size}
    Active handles: {stats.active_handles}
    Pooled handles: {self.engine.lifecycle.pooled_count()}
    Created / reused / retired / destroyed: {stats.entities_created} / {stats.entities_reattached} / {stats.entities_retired} / {stats.entities_destroyed}
    Jumps: {stats.jumps}
    Area changes: {stats.area_changes}
    Avg tick: {perf['avg_ms']:.2f}ms
""")

    def _cmd_fields(self) -> None:
        """Show environment fields."""
        frame = self.engine.last_frame
        fields = frame.fields
        dist = frame.distribution

        print(f"\n=== Environment at depth {frame.smoothed_depth:.1f} ({frame.area.value}) ===")
        print(f"  Background: {fields.background.to_hex()} {fields.background.to_rgb()}")
        print(f"  Fog density: {fields.fog.density:.4f} (opacity {fields.fog.opacity:.2f})")
        print(f"  Ambient: {fields.lighting.ambient:.3f}")
        print(f"  Directional: {fields.lighting.directional:.3f}")
        print(f"  Light colour: {fields.lighting.color}")
        print(f"  Pulse: {fields.lighting.pulse}")
        print()
        print(f"  Window: {dist.count} records, avg strength {dist.avg_strength:.2f}")
        for category in EmotionCategory:
            share = dist.share(category)
            if share > 0:
                bar = "#" * int(share * 30)
                print(f"    {category.value:12} {share:5.1%} {bar}")
        if frame.terrarium is not None:
            print(f"\n  Terrarium growth: {frame.terrarium.total_growth:.2f} "
                  f"({len(frame.terrarium.plants)} plants)")
        if frame.others_lights:
            print(f"  Others' lights on screen: {len(frame.others_lights)}")
        print()

    def _cmd_events(self) -> None:
        """Show recent lifecycle events."""
        if not self.recent_events:
            print("No events yet.")
            return

        print(f"\nRecent Events (last {min(20, len(self.recent_events))}):")
        print("-" * 60)
        for timestamp, event in self.recent_events[-20:]:
            mark = self.EVENT_MARKS.get(event.type.value, '?')
            print(f"  {timestamp:7.2f}s  {mark} #{event.handle_id:<4} {event.kind.value:12} {event.entity_id}")
        print()

    def _cmd_map(self) -> None:
        """Show the depth map."""
        depth_map = self.engine.depth_map()
        if not depth_map.groups:
            print("Depth map is empty.")
            return

        print(f"\nDepth map {depth_map.min_depth:.0f} .. {depth_map.max_depth:.0f}")
        print("-" * 50)
        for group in depth_map.groups:
            here = " <" if abs(group.depth - self.engine.depth) < 5 else ""
            bar = "#" * group.count
            print(f"  {group.depth:7.0f}  {group.dominant_category.value:12} {bar}{here}")
        print()

    def _cmd_scenario(self, args: list) -> None:
        """Run a predefined scenario."""
        if not args:
            print("Scenarios: descent, jumps")
            return

        scenario = args[0].lower()
        if scenario == 'descent':
            self._scenario_descent()
        elif scenario == 'jumps':
            self._scenario_jumps()
        else:
            print(f"Unknown scenario: {scenario}")

    def _scenario_descent(self) -> None:
        """Scroll from the sky to the bottom."""
        print("\n=== SCENARIO: Descent ===")
        self.engine.jump_to(-40.0)
        self._run_jump()

        bottom = self.engine.depth_map().max_depth
        while self.engine.depth_controller.depth < bottom:
            self.engine.wheel(1000.0)
            self._ticks(15)
            frame = self.engine.last_frame
            print(f"  {frame.smoothed_depth:7.1f}  {frame.area.value:12} "
                  f"window={frame.window_size:<3} fog={frame.fields.fog.density:.4f} "
                  f"ambient={frame.fields.lighting.ambient:.2f} bg={frame.fields.background.to_hex()}")

        print("\nOBSERVATION: Fog thickens and the background darkens with depth,")
        print("while the window's emotions tint colour and light.")

    def _scenario_jumps(self) -> None:
        """Jump back and forth."""
        print("\n=== SCENARIO: Jumps ===")
        for ratio in (0.9, 0.1, 0.9, 0.1):
            print(f"Jump to map position {ratio}")
            self.engine.jump_to_map_ratio(ratio)
            self._run_jump()
            print(f"  Pooled handles: {self.engine.lifecycle.pooled_count()}")

        print("\nOBSERVATION: Returning to a visited depth reattaches pooled handles")
        print("instead of creating new ones.")

    def _cmd_export(self, args: list) -> None:
        """Export frame log."""
        filename = args[0] if args else "frames.csv"

        count = self.frame_logger.write_csv(filename)
        print(f"Exported {count} frames to {filename}")

    def _cmd_quit(self) -> None:
        """Clean exit."""
        print(f"\nSession Summary:")
        print(f"  Total ticks: {self.engine.stats.total_ticks}")
        print(f"  Handles created: {self.engine.stats.entities_created}")
        print(f"  Handles reused: {self.engine.stats.entities_reattached}")
        print(f"  Final depth: {self.engine.depth:.1f}")
        print("\nGoodbye!")


def main():
    parser = argparse.ArgumentParser(
        description="Command-based Strata Simulator"
    )
    parser.add_argument('--records', type=int, default=40, help='Sample record count')
    parser.add_argument('--seed', type=int, default=7, help='Sample record seed')
    parser.add_argument('--config', default='config/', help='Config path')
    parser.add_argument('--verbose', action='store_true', help='Echo debug log')

    args = parser.parse_args()

    sim = CommandSimulator(
        config_path=args.config,
        record_count=args.records,
        seed=args.seed,
        verbose=args.verbose,
    )

    sim.run()


if __name__ == "__main__":
    main()
