"""
Phase 6 Tests: Engine, Adapters, Logging and Simulation

Tests:
- Tick frames across areas, jumps and input focus
- Render adapters mirroring the handle set
- Hydration, other users' records and message submission (including failures)
- Classifier response parsing
- Debug and frame logging
- Simulation runner and demo session
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import io
import json
import tempfile
import unittest

from strata.adapters import (
    ClassificationError,
    InMemoryPersistence,
    JsonLinesRenderAdapter,
    RecordingRenderAdapter,
    ResponseClassifier,
    keyword_transport,
    parse_classification,
    strip_code_fence,
)
from strata.core import EmotionCategory, EmotionRecord, PartialRecord
from strata.ecosystem import Area, LifecycleEventType
from strata.engine import StrataEngine, TickFrame
from strata.output import DebugLogger, FrameLogger, LogLevel
from strata.simulation import SimulationRunner, run_demo, sample_records


def make_record(record_id, category="joy", strength=0.9, depth=5.0, owner_id="local"):
    return EmotionRecord(id=record_id, category=category, strength=strength,
                         depth=depth, owner_id=owner_id)


def failing_transport(text):
    raise RuntimeError("endpoint down")


class TestEngineTick(unittest.TestCase):
    """Test the per-tick pipeline."""

    def setUp(self):
        self.engine = StrataEngine()

    def test_empty_ground_frame(self):
        frame = self.engine.tick()
        self.assertIsInstance(frame, TickFrame)
        self.assertEqual(frame.tick, 1)
        self.assertEqual(frame.area, Area.TRANSITION)
        self.assertEqual(frame.window_size, 0)
        self.assertEqual(frame.events, [])
        self.assertAlmostEqual(frame.fields.fog.density, 0.0005)
        self.assertIsNotNone(frame.terrarium)
        self.assertEqual(frame.terrarium.total_growth, 0.0)

    def test_record_near_ground_creates_handles(self):
        self.engine.add_record(make_record("r1"))
        frame = self.engine.tick()
        self.assertEqual(frame.window_size, 1)
        self.assertEqual(set(e.type for e in frame.events), {LifecycleEventType.CREATE})
        self.assertEqual(frame.active_handles, 6)
        self.assertEqual(frame.active_handles, len(frame.events))

        frame = self.engine.tick()
        self.assertEqual(set(e.type for e in frame.events), {LifecycleEventType.UPDATE})
        self.assertEqual(self.engine.stats.entities_created, 6)

    def test_jump_underground(self):
        self.engine.add_record(make_record("near", depth=5.0))
        self.engine.add_record(make_record("deep", "stress", 1.0, depth=600.0))
        self.engine.tick()

        self.engine.jump_to(600.0, duration=0.0)
        frame = self.engine.tick()
        self.assertTrue(frame.is_jump)
        self.assertEqual(frame.area, Area.UNDERGROUND)
        self.assertEqual(frame.depth, 600.0)
        self.assertIsNone(frame.terrarium)
        self.assertEqual(self.engine.stats.jumps, 1)
        self.assertEqual(self.engine.stats.area_changes, 1)
        self.assertTrue(frame.fields.lighting.pulse)

        retired = [e for e in frame.events if e.type == LifecycleEventType.RETIRE]
        self.assertTrue(all(e.entity_id.startswith("near-") for e in retired))
        for handle in self.engine.lifecycle.active_handles():
            self.assertTrue(handle.entity_id.startswith("deep-"))

    def test_animated_jump(self):
        self.engine.jump_to(300.0, duration=1.0)
        for _ in range(30):
            self.engine.tick(delta_time=1.0 / 60.0)
        self.assertTrue(self.engine.depth_controller.is_jumping)
        self.assertGreater(self.engine.depth, 0.0)
        self.assertLess(self.engine.depth, 300.0)
        for _ in range(40):
            self.engine.tick(delta_time=1.0 / 60.0)
        self.assertEqual(self.engine.depth, 300.0)

    def test_wheel_and_focus(self):
        self.assertEqual(self.engine.wheel(1000.0), 100.0)
        self.engine.set_input_focus(True)
        self.assertEqual(self.engine.wheel(1000.0), 100.0)
        self.engine.set_input_focus(False)
        self.assertEqual(self.engine.wheel(-5000.0), 0.0)

    def test_touch(self):
        self.engine.touch_start(500.0)
        self.assertAlmostEqual(self.engine.touch_move(400.0), 15.0)
        self.engine.touch_end()

    def test_jump_to_map_ratio(self):
        self.engine.add_record(make_record("a", depth=100.0))
        self.engine.add_record(make_record("b", depth=500.0))
        target = self.engine.jump_to_map_ratio(0.5)
        self.assertAlmostEqual(target, 300.0)
        self.assertTrue(self.engine.depth_controller.is_jumping)

    def test_others_lights(self):
        self.engine.add_record(make_record("other", "peace", 0.5, depth=3.0, owner_id=None))
        frame = self.engine.tick()
        self.assertEqual([l.id for l in frame.others_lights], ["light-other"])
        self.assertEqual(frame.terrarium.plants, [])

    def test_callbacks(self):
        frames = []
        self.engine.on_frame(frames.append)
        self.engine.tick()
        self.engine.tick()
        self.engine.remove_callback(frames.append)
        self.engine.tick()
        self.assertEqual([f.tick for f in frames], [1, 2])

    def test_engines_are_independent(self):
        other = StrataEngine()
        self.engine.add_record(make_record("only-here"))
        self.assertEqual(len(other.store), 0)
        self.assertEqual(other.tick().window_size, 0)

    def test_state_and_reset(self):
        self.engine.add_record(make_record("r1"))
        self.engine.tick()
        state = self.engine.get_state()
        self.assertEqual(state['records']['total'], 1)
        self.assertEqual(state['records']['own'], 1)
        self.assertEqual(state['stats']['total_ticks'], 1)
        self.assertEqual(state['lifecycle']['active'], 6)

        self.engine.reset()
        self.assertEqual(self.engine.stats.total_ticks, 0)
        self.assertEqual(self.engine.simulation_time, 0.0)
        self.assertEqual(len(self.engine.store), 1)
        frame = self.engine.tick()
        self.assertEqual(frame.tick, 1)
        self.assertEqual(set(e.type for e in frame.events), {LifecycleEventType.CREATE})

    def test_frame_to_dict_is_json(self):
        self.engine.add_record(make_record("r1"))
        data = json.loads(json.dumps(self.engine.tick().to_dict()))
        self.assertEqual(data['area'], "transition")
        self.assertEqual(data['event_counts'], {'create': 6})
        self.assertEqual(len(data['events']), 6)


class TestRenderAdapters(unittest.TestCase):
    """Test backends driven by the event stream."""

    def assertMirrors(self, engine, adapter):
        self.assertEqual(len(adapter.nodes), engine.lifecycle.active_count)
        self.assertEqual(adapter.visible_entity_ids(),
                         sorted(h.entity_id for h in engine.lifecycle.active_handles()))

    def test_recording_adapter_mirrors_handles(self):
        engine = StrataEngine()
        adapter = RecordingRenderAdapter()
        engine.add_adapter(adapter)
        engine.add_records(sample_records(count=60, max_depth=800.0))
        engine.add_record(make_record("ground", depth=2.0))

        for target in (0.0, 400.0, 420.0, 800.0, -40.0, 0.0):
            engine.jump_to(target, duration=0.2)
            for _ in range(15):
                engine.tick(delta_time=1.0 / 30.0)
                self.assertMirrors(engine, adapter)
        self.assertEqual(len(adapter.frames), 90)

    def test_clear_records(self):
        engine = StrataEngine()
        adapter = RecordingRenderAdapter()
        engine.add_adapter(adapter)
        engine.add_record(make_record("r1"))
        engine.tick()

        events = engine.clear_records()
        self.assertEqual(len(events), 6)
        self.assertEqual({e.type for e in events}, {LifecycleEventType.DESTROY})
        self.assertEqual(len(engine.store), 0)
        self.assertEqual(engine.lifecycle.active_count, 0)
        self.assertEqual(adapter.nodes, {})
        self.assertEqual(engine.tick().events, [])

    def test_json_lines_adapter(self):
        stream = io.StringIO()
        engine = StrataEngine()
        engine.add_adapter(JsonLinesRenderAdapter(stream))
        engine.add_record(make_record("r1"))
        engine.tick()
        engine.tick()

        lines = stream.getvalue().strip().split("\n")
        self.assertEqual(len(lines), 2)
        first = json.loads(lines[0])
        self.assertEqual(first['tick'], 1)
        self.assertEqual(first['events'][0]['type'], "create")

    def test_json_lines_without_events(self):
        stream = io.StringIO()
        engine = StrataEngine()
        engine.add_adapter(JsonLinesRenderAdapter(stream, include_events=False))
        engine.tick()
        self.assertNotIn('events', json.loads(stream.getvalue()))

    def test_clear_records_streams_destroy_events(self):
        stream = io.StringIO()
        engine = StrataEngine()
        engine.add_adapter(JsonLinesRenderAdapter(stream))
        engine.add_record(make_record("r1"))
        engine.tick()
        events = engine.clear_records()
        engine.tick()

        lines = [json.loads(line) for line in stream.getvalue().strip().split("\n")]
        self.assertEqual(len(lines), 3)
        created = {e['handle_id'] for e in lines[0]['events'] if e['type'] == "create"}
        self.assertIsNone(lines[1]['tick'])
        destroyed = {e['handle_id'] for e in lines[1]['events'] if e['type'] == "destroy"}
        self.assertEqual(len(created), 6)
        self.assertEqual(destroyed, created)
        self.assertEqual(len(events), 6)
        self.assertEqual(lines[2]['events'], [])

    def test_reset_destroys_backend_nodes(self):
        stream = io.StringIO()
        engine = StrataEngine()
        recorder = RecordingRenderAdapter()
        engine.add_adapter(recorder)
        engine.add_adapter(JsonLinesRenderAdapter(stream))
        engine.add_record(make_record("r1"))
        engine.tick()
        self.assertEqual(len(recorder.nodes), 6)

        engine.reset()
        self.assertEqual(recorder.nodes, {})
        last = json.loads(stream.getvalue().strip().split("\n")[-1])
        self.assertEqual([e['type'] for e in last['events']], ["destroy"] * 6)


class TestSync(unittest.TestCase):
    """Test hydration, other users' records and submission."""

    def setUp(self):
        self.engine = StrataEngine()
        self.classifier = ResponseClassifier(keyword_transport)

    def test_hydrate_places_by_recency(self):
        persistence = InMemoryPersistence(own=[
            EmotionRecord(id="new", category="joy", strength=0.5, depth=999.0,
                          created_at="2024-06-02T00:00:00Z"),
            EmotionRecord(id="old", category="peace", strength=0.5, depth=0.0,
                          created_at="2024-06-01T00:00:00Z"),
        ])
        self.assertTrue(self.engine.hydrate(persistence))
        self.assertEqual(self.engine.store.get("new").depth, 0.0)
        self.assertEqual(self.engine.store.get("old").depth, 10.0)
        self.assertEqual(self.engine.store.get("old").owner_id, "local")

    def test_hydrate_failure_keeps_records(self):
        self.engine.add_record(make_record("kept"))
        persistence = InMemoryPersistence()
        persistence.fail_next = "offline"
        self.assertFalse(self.engine.hydrate(persistence))
        self.assertIn("kept", self.engine.store)
        self.assertEqual(self.engine.stats.sync_failures, 1)
        self.assertEqual(len(self.engine.logger.get_warnings()), 1)

    def test_hydrate_keeps_others(self):
        self.engine.add_record(make_record("theirs", owner_id=None))
        self.engine.add_record(make_record("earlier"))
        self.assertTrue(self.engine.hydrate(InMemoryPersistence()))
        self.assertIn("theirs", self.engine.store)
        self.assertIn("earlier", self.engine.store)

    def test_hydrate_keeps_local_placement(self):
        self.engine.add_record(make_record("m1", depth=300.0))
        persistence = InMemoryPersistence(own=[
            make_record("m1", depth=300.0),
            EmotionRecord(id="m2", category="peace", strength=0.5, depth=0.0,
                          created_at="2024-06-01T00:00:00Z", owner_id="local"),
        ])
        self.assertTrue(self.engine.hydrate(persistence))
        self.assertEqual(self.engine.store.get("m1").depth, 300.0)
        self.assertIn("m2", self.engine.store)
        self.assertEqual(len(self.engine.store), 2)

    def test_hydrate_conflicting_batch_leaves_store(self):
        self.engine.add_record(make_record("kept"))
        version = self.engine.store.version
        persistence = InMemoryPersistence(own=[
            make_record("fresh"),
            make_record("dup", strength=0.2),
            make_record("dup", strength=0.8),
        ])
        self.assertFalse(self.engine.hydrate(persistence))
        self.assertEqual([r.id for r in self.engine.store.records()], ["kept"])
        self.assertEqual(self.engine.store.version, version)
        self.assertEqual(self.engine.stats.sync_failures, 1)

    def test_refresh_others(self):
        persistence = InMemoryPersistence(others=[
            PartialRecord(category="joy", strength=0.7, depth=100.0,
                          created_at="2024-01-01T00:00:00Z"),
            PartialRecord(category="stress", strength=0.7, depth=2000.0,
                          created_at="2024-01-01T00:00:00Z"),
        ])
        self.assertTrue(self.engine.refresh_others(persistence))
        others = self.engine.store.other_records()
        self.assertEqual(len(others), 1)
        self.assertTrue(others[0].id.startswith("other-"))
        self.assertEqual(others[0].analysis, "")

        self.assertFalse(self.engine.refresh_others(persistence))
        self.assertTrue(self.engine.refresh_others(persistence, now=30.0))
        self.assertEqual(len(self.engine.store.other_records()), 1)

    def test_refresh_others_failure_retries(self):
        persistence = InMemoryPersistence()
        persistence.fail_next = "timeout"
        self.assertFalse(self.engine.refresh_others(persistence))
        self.assertEqual(self.engine.stats.sync_failures, 1)
        self.assertTrue(self.engine.refresh_others(persistence))

    def test_refresh_others_colliding_ids_logged(self):
        class SameIdPartial:
            def __init__(self, strength):
                self.depth = 50.0
                self.strength = strength

            def to_record(self):
                return EmotionRecord(id="other-clash", category="joy",
                                     strength=self.strength, depth=self.depth)

        persistence = InMemoryPersistence(others=[SameIdPartial(0.3), SameIdPartial(0.6)])
        self.assertFalse(self.engine.refresh_others(persistence))
        self.assertEqual(len(self.engine.store), 0)
        self.assertEqual(self.engine.stats.sync_failures, 1)
        self.assertEqual(len(self.engine.logger.get_warnings()), 1)

    def test_partial_ids_are_wide(self):
        partial = PartialRecord(category="joy", strength=0.7, depth=100.0,
                                created_at="2024-01-01T00:00:00Z")
        self.assertEqual(len(partial.content_id), len("other-") + 24)

    def test_submit_message(self):
        persistence = InMemoryPersistence()
        self.engine.wheel(1000.0)
        record = self.engine.submit_message("so happy today", self.classifier, persistence)
        self.assertTrue(record.id.startswith("msg-"))
        self.assertEqual(record.category, EmotionCategory.JOY)
        self.assertAlmostEqual(record.strength, 0.6)
        self.assertEqual(record.depth, 100.0)
        self.assertEqual(record.owner_id, "local")
        self.assertIn(record.id, self.engine.store)
        self.assertEqual(persistence.calls, ['append'])
        self.assertEqual(self.engine.stats.messages_submitted, 1)

    def test_submit_transport_failure(self):
        classifier = ResponseClassifier(failing_transport)
        with self.assertRaises(ClassificationError) as ctx:
            self.engine.submit_message("anything", classifier)
        self.assertEqual(ctx.exception.reason, 'transport')
        self.assertEqual(len(self.engine.store), 0)

    def test_submit_malformed_response(self):
        classifier = ResponseClassifier(lambda text: "I think it is joy")
        with self.assertRaises(ClassificationError) as ctx:
            self.engine.submit_message("anything", classifier)
        self.assertEqual(ctx.exception.reason, 'malformed')
        self.assertEqual(len(self.engine.store), 0)

    def test_submit_empty_message(self):
        with self.assertRaises(ClassificationError) as ctx:
            self.engine.submit_message("   ", self.classifier)
        self.assertEqual(ctx.exception.reason, 'empty_message')

    def test_submit_persistence_failure_keeps_record(self):
        persistence = InMemoryPersistence()
        persistence.fail_next = "disk full"
        record = self.engine.submit_message("deadline stress", self.classifier, persistence)
        self.assertIn(record.id, self.engine.store)
        self.assertEqual(record.category, EmotionCategory.STRESS)
        self.assertEqual(self.engine.stats.sync_failures, 1)


class TestClassificationParsing(unittest.TestCase):
    """Test classifier response validation."""

    def assertReason(self, raw, reason):
        with self.assertRaises(ClassificationError) as ctx:
            parse_classification(raw)
        self.assertEqual(ctx.exception.reason, reason)

    def test_fenced_json(self):
        result = parse_classification(
            '```json\n{"category": "joy", "strength": 0.8, "analysis": "bright"}\n```'
        )
        self.assertEqual(result.category, EmotionCategory.JOY)
        self.assertEqual(result.strength, 0.8)
        self.assertEqual(result.annotation, "bright")

    def test_plain_json(self):
        result = parse_classification('{"category": "peace", "strength": 1, "analysis": "still"}')
        self.assertEqual(result.strength, 1.0)

    def test_strip_code_fence(self):
        self.assertEqual(strip_code_fence('```\n{"a": 1}\n```'), '{"a": 1}')
        self.assertEqual(strip_code_fence('  {"a": 1} '), '{"a": 1}')

    def test_errors(self):
        self.assertReason("", 'malformed')
        self.assertReason("not json", 'malformed')
        self.assertReason("[1, 2]", 'malformed')
        self.assertReason('{"category": "anger", "strength": 0.5, "analysis": "x"}',
                          'invalid_category')
        self.assertReason('{"category": "joy", "strength": 1.5, "analysis": "x"}',
                          'invalid_strength')
        self.assertReason('{"category": "joy", "strength": true, "analysis": "x"}',
                          'invalid_strength')
        self.assertReason('{"category": "joy", "strength": 0.5, "analysis": ""}',
                          'invalid_annotation')
        self.assertReason('{"category": "joy", "strength": 0.5, "analysis": "sixteen chars!!!"}',
                          'invalid_annotation')

    def test_keyword_transport(self):
        result = parse_classification(keyword_transport("I remember my childhood"))
        self.assertEqual(result.category, EmotionCategory.NOSTALGIA)
        self.assertAlmostEqual(result.strength, 0.8)
        self.assertEqual(result.annotation, "I")
        self.assertEqual(keyword_transport("hello"), keyword_transport("hello"))


class TestLogging(unittest.TestCase):
    """Test the debug and frame loggers."""

    def test_level_filter(self):
        logger = DebugLogger(level=LogLevel.INFO)
        self.assertIsNone(logger.debug("depth", "hidden"))
        self.assertIsNotNone(logger.info("store", "shown", 1.0, count=2))
        self.assertEqual(len(logger), 1)

    def test_category_filter_and_callbacks(self):
        logger = DebugLogger(level=LogLevel.TRACE)
        seen = []
        logger.add_callback(seen.append)
        logger.set_category_filter(["sync"])
        logger.info("store", "ignored")
        logger.warning("sync", "kept")
        self.assertEqual([e.message for e in seen], ["kept"])
        self.assertEqual(len(logger.get_by_category("sync")), 1)

    def test_console_output(self):
        stream = io.StringIO()
        logger = DebugLogger(level=LogLevel.DEBUG, output=stream, use_colors=False)
        logger.log_jump(2.5, 0.0, 300.0)
        self.assertIn("Jump", stream.getvalue())
        self.assertIn("target=300.0", stream.getvalue())

    def test_export(self):
        logger = DebugLogger(level=LogLevel.DEBUG)
        logger.log_store_change(0.0, "Records added", 3, 3)
        logger.log_sync_failure(1.0, "append", RuntimeError("offline"))
        self.assertEqual(len(logger.search("failed")), 1)
        data = json.loads(logger.to_json())
        self.assertEqual(data[1]['level'], "WARNING")

        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "debug.log")
            self.assertEqual(logger.write_log(path), 2)
            with open(path, encoding='utf-8') as f:
                self.assertIn("Records added", f.read())

    def test_engine_logging(self):
        logger = DebugLogger(level=LogLevel.TRACE)
        engine = StrataEngine(logger=logger)
        self.assertIs(engine.logger, logger)
        engine.tick()
        engine.jump_to(600.0, duration=0.0)
        engine.tick()
        self.assertEqual(len(logger.get_by_category("engine")), 2)
        self.assertEqual(len(logger.search("Area transition -> underground")), 1)
        self.assertEqual(logger.get_performance_stats()['samples'], 2)

    def test_submit_is_logged(self):
        logger = DebugLogger(level=LogLevel.INFO)
        engine = StrataEngine(logger=logger)
        persistence = InMemoryPersistence()
        engine.submit_message("so happy today", ResponseClassifier(keyword_transport), persistence)
        entries = logger.search("Message classified")
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0].category, "store")
        self.assertEqual(entries[0].data['emotion'], "joy")
        self.assertEqual(persistence.calls, ['append'])

    def test_runner_keeps_injected_persistence(self):
        persistence = InMemoryPersistence()
        self.assertIs(SimulationRunner(persistence=persistence).persistence, persistence)

    def test_frame_logger(self):
        frame_logger = FrameLogger(max_frames=2)
        engine = StrataEngine()
        engine.on_frame(frame_logger.log_frame)
        engine.add_record(make_record("r1"))
        for _ in range(3):
            engine.tick()

        self.assertEqual(len(frame_logger), 2)
        stats = frame_logger.get_stats()
        self.assertEqual(stats['total_logged'], 3)
        self.assertEqual(stats['by_area'], {'transition': 3})
        self.assertEqual(stats['events']['created'], 6)
        self.assertEqual(stats['events']['updated'], 12)
        self.assertEqual(frame_logger.get_recent(1)[0].dominant, "joy")
        self.assertTrue(frame_logger.to_csv().startswith("timestamp,tick,depth"))

        frame_logger.clear()
        self.assertEqual(frame_logger.get_stats()['total_logged'], 3)
        frame_logger.reset()
        self.assertEqual(frame_logger.get_stats()['total_logged'], 0)


class TestSimulation(unittest.TestCase):
    """Test the scripted session runner."""

    def test_sample_records(self):
        first = sample_records(count=12, seed=3)
        self.assertEqual(first, sample_records(count=12, seed=3))
        self.assertEqual(len({r.id for r in first}), 12)
        for record in first:
            self.assertGreaterEqual(record.depth, 0.0)
            self.assertLessEqual(record.depth, 1500.0)
            self.assertEqual(record.owner_id, "local")

    def test_unknown_action(self):
        with self.assertRaises(ValueError):
            SimulationRunner().add_step(1.0, "teleport")

    def test_run(self):
        runner = SimulationRunner()
        runner.configure(duration=1.0, tick_interval=0.05, records=sample_records(count=10))
        runner.add_step(0.1, "jump", {"target": 600.0, "duration": 0.0})
        runner.add_step(0.5, "submit", {"text": "feeling calm and quiet"})
        results = runner.run()

        self.assertGreaterEqual(results.stats['total_ticks'], 20)
        self.assertEqual(results.stats['jumps'], 1)
        self.assertEqual(results.stats['messages_submitted'], 1)
        self.assertEqual([s['action'] for s in results.step_log], ["jump", "submit"])
        self.assertEqual(results.final_state['records']['total'], 11)
        self.assertEqual(runner.engine.area, Area.UNDERGROUND)
        self.assertEqual(len(runner.renderer.nodes), runner.engine.lifecycle.active_count)

        self.assertIn("SIMULATION RESULTS", results.summary())
        self.assertTrue(results.frames_to_csv().startswith("timestamp,tick"))
        self.assertTrue(results.depth_to_csv().startswith("time,depth"))
        self.assertIn('frame_stats', json.loads(results.to_json()))

    def test_demo(self):
        results = run_demo(duration=4.0, verbose=False)
        self.assertGreater(results.stats['total_ticks'], 0)
        self.assertEqual(len(results.step_log), 14)
        self.assertEqual(results.stats['messages_submitted'], 1)
        self.assertGreater(results.stats['entities_created'], 0)


def run_tests():
    """Run all Phase 6 tests."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    suite.addTests(loader.loadTestsFromTestCase(TestEngineTick))
    suite.addTests(loader.loadTestsFromTestCase(TestRenderAdapters))
    suite.addTests(loader.loadTestsFromTestCase(TestSync))
    suite.addTests(loader.loadTestsFromTestCase(TestClassificationParsing))
    suite.addTests(loader.loadTestsFromTestCase(TestLogging))
    suite.addTests(loader.loadTestsFromTestCase(TestSimulation))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return result.wasSuccessful()


if __name__ == '__main__':
    success = run_tests()
    sys.exit(0 if success else 1)
