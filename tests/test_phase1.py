"""
Phase 1 Tests: Foundations

Tests:
- Math utilities and deterministic hashing
- Validators
- Configuration models and loading
- Emotion records and partial records
- Record store
- Depth controller (wheel, touch, focus, jumps, smoothing)
- Depth from recency
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import json
import shutil
import tempfile
import unittest
from datetime import datetime, timedelta, timezone

from strata.utils import (
    clamp, lerp, inverse_lerp, exp_smooth, ease_in_out_cubic, lerp_color,
    seeded_random, string_seed, SeedStream,
    ValidationError, validate_range, validate_strength, validate_number,
    validate_max_length, validate_in_set,
)
from strata.config import (
    ConfigError, ConfigLoader, load_config,
    StrataConfig, DepthConfig, EnvironmentConfig,
)
from strata.core import (
    EmotionCategory, CategoryGroup, CATEGORY_GROUPS,
    EmotionRecord, PartialRecord, parse_timestamp,
    EmotionRecordStore, DepthController,
    depth_from_created_at, depths_from_timestamps, place_by_recency,
)


CONFIG_DIR = os.path.join(os.path.dirname(__file__), '..', 'config')


def make_record(record_id="r1", category="joy", strength=0.5, depth=100.0, **kwargs):
    return EmotionRecord(id=record_id, category=category, strength=strength,
                         depth=depth, **kwargs)


class TestMathUtils(unittest.TestCase):
    """Test interpolation and smoothing helpers."""

    def test_clamp(self):
        self.assertEqual(clamp(1.5, 0.0, 1.0), 1.0)
        self.assertEqual(clamp(-0.5, 0.0, 1.0), 0.0)
        self.assertEqual(clamp(0.3, 0.0, 1.0), 0.3)

    def test_lerp_and_inverse(self):
        self.assertAlmostEqual(lerp(10.0, 20.0, 0.25), 12.5)
        self.assertAlmostEqual(inverse_lerp(10.0, 20.0, 12.5), 0.25)
        self.assertEqual(inverse_lerp(5.0, 5.0, 5.0), 0.0)

    def test_exp_smooth(self):
        self.assertAlmostEqual(exp_smooth(0.0, 10.0, 0.35), 3.5)

    def test_ease_endpoints_and_symmetry(self):
        self.assertEqual(ease_in_out_cubic(0.0), 0.0)
        self.assertEqual(ease_in_out_cubic(1.0), 1.0)
        self.assertAlmostEqual(ease_in_out_cubic(0.5), 0.5)
        self.assertAlmostEqual(ease_in_out_cubic(0.25) + ease_in_out_cubic(0.75), 1.0)
        self.assertEqual(ease_in_out_cubic(2.0), 1.0)

    def test_ease_monotonic(self):
        values = [ease_in_out_cubic(i / 20.0) for i in range(21)]
        for a, b in zip(values, values[1:]):
            self.assertLessEqual(a, b)

    def test_lerp_color(self):
        self.assertEqual(lerp_color((0, 0, 0), (10, 20, 30), 0.5), (5.0, 10.0, 15.0))


class TestSeededRandom(unittest.TestCase):
    """Test stateless hashing randomness."""

    def test_known_value(self):
        self.assertAlmostEqual(seeded_random(0), 49297 / 233280)
        self.assertAlmostEqual(seeded_random(1), (9301 + 49297) / 233280)

    def test_range(self):
        for seed in range(-500, 500, 7):
            value = seeded_random(seed)
            self.assertGreaterEqual(value, 0.0)
            self.assertLess(value, 1.0)

    def test_string_seed_stable(self):
        self.assertEqual(string_seed("record-1"), string_seed("record-1"))
        self.assertNotEqual(string_seed("record-1"), string_seed("record-2"))

    def test_seed_stream(self):
        stream = SeedStream(1234)
        self.assertEqual(stream.at(3), seeded_random(1237))
        value = stream.uniform(1, 15.0, 45.0)
        self.assertGreaterEqual(value, 15.0)
        self.assertLess(value, 45.0)
        self.assertEqual(stream.child(2), SeedStream(3234))
        self.assertIn(stream.pick(0, ['a', 'b', 'c']), ['a', 'b', 'c'])

    def test_pick_empty_raises(self):
        with self.assertRaises(IndexError):
            SeedStream(1).pick(0, [])


class TestValidators(unittest.TestCase):
    """Test validation helpers."""

    def test_validate_range(self):
        self.assertEqual(validate_range(0.5, 0.0, 1.0), 0.5)
        with self.assertRaises(ValidationError):
            validate_range(1.5, 0.0, 1.0)

    def test_strength_rejects_bool_and_nan(self):
        with self.assertRaises(ValidationError):
            validate_strength(True)
        with self.assertRaises(ValidationError):
            validate_number(float('nan'))
        with self.assertRaises(ValidationError):
            validate_number("0.5")

    def test_error_carries_field(self):
        try:
            validate_strength(2.0)
        except ValidationError as e:
            self.assertEqual(e.field, "strength")
            self.assertIn("strength", str(e))
        else:
            self.fail("ValidationError not raised")

    def test_max_length_and_set(self):
        self.assertEqual(validate_max_length("short", 15), "short")
        with self.assertRaises(ValidationError):
            validate_max_length("x" * 16, 15)
        with self.assertRaises(ValidationError):
            validate_in_set("c", {"a", "b"})


class TestConfig(unittest.TestCase):
    """Test configuration models and loader."""

    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        for name in os.listdir(CONFIG_DIR):
            shutil.copy(os.path.join(CONFIG_DIR, name), self.tmp)

    def tearDown(self):
        shutil.rmtree(self.tmp)

    def _rewrite(self, filename, mutate):
        path = os.path.join(self.tmp, filename)
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
        mutate(data)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f)

    def test_defaults(self):
        config = StrataConfig()
        self.assertEqual(config.half_width, 10.0)
        self.assertEqual(config.window.radius, 800.0)
        self.assertEqual(config.population.min_count, 2)
        self.assertEqual(config.population.max_count, 6)
        self.assertEqual(config.environment.fog_band_floor, 0.0005)

    def test_shipped_files_match_defaults(self):
        config = load_config(CONFIG_DIR)
        defaults = StrataConfig()
        self.assertEqual(config.depth, defaults.depth)
        self.assertEqual(config.area, defaults.area)
        self.assertEqual(config.window, defaults.window)
        self.assertEqual(config.environment, defaults.environment)
        self.assertEqual(config.population, defaults.population)
        self.assertEqual(config.lifecycle, defaults.lifecycle)
        self.assertEqual(config.others, defaults.others)

    def test_override(self):
        self._rewrite("navigation.json", lambda d: d["window"].update(radius=300.0))
        config = load_config(self.tmp)
        self.assertEqual(config.window.radius, 300.0)

    def test_missing_directory(self):
        with self.assertRaises(ConfigError):
            ConfigLoader(os.path.join(self.tmp, "nope"))

    def test_invalid_json(self):
        with open(os.path.join(self.tmp, "population.json"), 'w', encoding='utf-8') as f:
            f.write("{ not json")
        with self.assertRaises(ConfigError) as ctx:
            load_config(self.tmp)
        self.assertEqual(ctx.exception.file, "population.json")

    def test_unknown_key(self):
        self._rewrite("navigation.json", lambda d: d["depth"].update(wheel_speed=1.0))
        with self.assertRaises(ConfigError):
            load_config(self.tmp)

    def test_inverted_counts(self):
        self._rewrite("population.json", lambda d: d["count"].update(min_count=7))
        with self.assertRaises(ConfigError):
            load_config(self.tmp)

    def test_bad_surface_scope(self):
        self._rewrite("navigation.json", lambda d: d["window"].update(surface_scope="sky"))
        with self.assertRaises(ConfigError):
            load_config(self.tmp)

    def test_to_dict(self):
        data = StrataConfig().to_dict()
        self.assertIn('environment', data)
        self.assertEqual(data['area']['half_width'], 10.0)


class TestRecords(unittest.TestCase):
    """Test emotion records."""

    def test_category_parse(self):
        self.assertEqual(EmotionCategory.parse("Joy"), EmotionCategory.JOY)
        self.assertEqual(EmotionCategory.parse(EmotionCategory.PEACE), EmotionCategory.PEACE)
        with self.assertRaises(ValidationError):
            EmotionCategory.parse("anger")

    def test_groups_cover_all_categories(self):
        covered = [c for group in CategoryGroup for c in CATEGORY_GROUPS[group]]
        self.assertEqual(sorted(c.value for c in covered),
                         sorted(c.value for c in EmotionCategory))

    def test_record_coerces_category(self):
        record = make_record(category="stress")
        self.assertEqual(record.category, EmotionCategory.STRESS)

    def test_record_validation(self):
        with self.assertRaises(ValidationError):
            make_record(strength=1.2)
        with self.assertRaises(ValidationError):
            make_record(record_id="")
        with self.assertRaises(ValidationError):
            make_record(analysis="much too long annotation")
        with self.assertRaises(ValidationError):
            make_record(depth=float('inf'))

    def test_record_is_immutable(self):
        record = make_record()
        with self.assertRaises(Exception):
            record.depth = 5.0

    def test_with_depth(self):
        record = make_record(owner_id="u1")
        moved = record.with_depth(42.0)
        self.assertEqual(moved.depth, 42.0)
        self.assertEqual(moved.id, record.id)
        self.assertEqual(record.depth, 100.0)
        self.assertTrue(moved.is_own)

    def test_dict_round_trip(self):
        record = make_record(analysis="sunny", owner_id="u1",
                             created_at="2024-03-01T12:00:00Z")
        self.assertEqual(EmotionRecord.from_dict(record.to_dict()), record)

    def test_from_dict_missing_field(self):
        with self.assertRaises(ValidationError) as ctx:
            EmotionRecord.from_dict({'id': 'x', 'category': 'joy', 'strength': 0.5})
        self.assertEqual(ctx.exception.field, 'depth')

    def test_phase_seed(self):
        record = make_record(created_at="1970-01-01T00:00:01Z")
        self.assertEqual(record.phase_seed, 1000)

    def test_partial_record(self):
        partial = PartialRecord(category="peace", strength=0.4, depth=320.0,
                                created_at="2024-01-01T00:00:00Z")
        again = PartialRecord(category="peace", strength=0.4, depth=320.0,
                              created_at="2024-01-01T00:00:00Z")
        self.assertEqual(partial.content_id, again.content_id)
        self.assertTrue(partial.content_id.startswith("other-"))
        record = partial.to_record()
        self.assertFalse(record.is_own)
        self.assertEqual(record.analysis, "")

    def test_parse_timestamp(self):
        parsed = parse_timestamp("2024-01-01T00:00:00Z")
        self.assertEqual(parsed, datetime(2024, 1, 1, tzinfo=timezone.utc))
        self.assertEqual(parse_timestamp(datetime(2024, 1, 1)).tzinfo, timezone.utc)
        with self.assertRaises(ValidationError):
            parse_timestamp("yesterday")


class TestStore(unittest.TestCase):
    """Test the record store."""

    def setUp(self):
        self.store = EmotionRecordStore()

    def test_append_and_query(self):
        self.assertTrue(self.store.append(make_record("a")))
        self.assertEqual(len(self.store), 1)
        self.assertIn("a", self.store)
        self.assertEqual(self.store.get("a").id, "a")

    def test_duplicate_identical_is_noop(self):
        self.store.append(make_record("a"))
        version = self.store.version
        self.assertFalse(self.store.append(make_record("a")))
        self.assertEqual(len(self.store), 1)
        self.assertEqual(self.store.version, version)

    def test_conflicting_duplicate_raises(self):
        self.store.append(make_record("a", strength=0.5))
        with self.assertRaises(ValidationError):
            self.store.append(make_record("a", strength=0.6))

    def test_rejects_non_records(self):
        with self.assertRaises(ValidationError):
            self.store.append({'id': 'a'})

    def test_own_and_others(self):
        self.store.extend([
            make_record("mine", owner_id="u1"),
            make_record("theirs"),
        ])
        self.assertEqual([r.id for r in self.store.own_records()], ["mine"])
        self.assertEqual([r.id for r in self.store.other_records()], ["theirs"])

    def test_merge_keeps_present_records(self):
        self.store.extend([
            make_record("m1", depth=300.0, owner_id="u1"),
            make_record("theirs"),
        ])
        added = self.store.merge([
            make_record("m1", depth=0.0, owner_id="u1"),
            make_record("new", owner_id="u1"),
        ])
        self.assertEqual(added, 1)
        self.assertEqual(self.store.get("m1").depth, 300.0)
        self.assertIn("new", self.store)
        self.assertIn("theirs", self.store)

    def test_merge_rejects_conflicting_batch_atomically(self):
        self.store.append(make_record("kept", owner_id="u1"))
        version = self.store.version
        with self.assertRaises(ValidationError):
            self.store.merge([
                make_record("fresh", owner_id="u1"),
                make_record("dup", strength=0.2, owner_id="u1"),
                make_record("dup", strength=0.9, owner_id="u1"),
            ])
        self.assertEqual([r.id for r in self.store.records()], ["kept"])
        self.assertEqual(self.store.version, version)

    def test_merge_identical_duplicates(self):
        self.assertEqual(self.store.merge([make_record("a"), make_record("a")]), 1)
        self.assertEqual(self.store.merge([make_record("a")]), 0)

    def test_clear(self):
        self.store.extend([make_record("a"), make_record("b")])
        self.store.clear()
        self.assertEqual(len(self.store), 0)

    def test_records_snapshot_order(self):
        self.store.extend([make_record("b"), make_record("a")])
        self.assertEqual([r.id for r in self.store.records()], ["b", "a"])


class TestDepthController(unittest.TestCase):
    """Test depth navigation."""

    def setUp(self):
        self.controller = DepthController(DepthConfig())

    def settle(self, ticks=200):
        for _ in range(ticks):
            self.controller.update(1 / 60)

    def test_wheel(self):
        self.assertAlmostEqual(self.controller.apply_wheel(120), 12.0)
        self.assertAlmostEqual(self.controller.apply_wheel(-50), 7.0)

    def test_wheel_clamps_at_floor(self):
        self.controller.apply_wheel(100)
        self.assertEqual(self.controller.apply_wheel(-10000), 0.0)

    def test_touch_drag_up_goes_deeper(self):
        self.controller.begin_touch(500)
        self.assertAlmostEqual(self.controller.move_touch(400), 15.0)
        self.assertAlmostEqual(self.controller.move_touch(300), 30.0)
        self.controller.end_touch()
        self.controller.begin_touch(100)
        self.assertAlmostEqual(self.controller.move_touch(200), 15.0)

    def test_focus_suppresses_input(self):
        self.controller.set_input_focus(True)
        self.assertEqual(self.controller.apply_wheel(500), 0.0)
        self.controller.set_input_focus(False)
        self.assertAlmostEqual(self.controller.apply_wheel(500), 50.0)

    def test_smoothing_converges(self):
        self.controller.apply_wheel(1000)
        first = self.controller.update(1 / 60)
        self.assertGreater(first, 0.0)
        self.assertLess(first, 100.0)
        self.settle()
        self.assertEqual(self.controller.smoothed_depth, 100.0)

    def test_jump_reaches_target(self):
        self.controller.jump_to(300.0)
        self.assertTrue(self.controller.is_jumping)
        self.settle(90)
        self.assertFalse(self.controller.is_jumping)
        self.assertEqual(self.controller.depth, 300.0)
        self.assertEqual(self.controller.smoothed_depth, 300.0)

    def test_jump_is_eased(self):
        self.controller.jump_to(100.0, duration=1.0)
        self.controller.update(0.1)
        early = self.controller.depth
        self.controller.update(0.4)
        middle = self.controller.depth
        self.assertLess(early, 10.0)
        self.assertAlmostEqual(middle, 50.0)

    def test_jump_can_reach_sky(self):
        self.controller.jump_to(-40.0)
        self.settle(90)
        self.assertEqual(self.controller.depth, -40.0)

    def test_wheel_ignored_during_jump(self):
        self.controller.jump_to(200.0)
        self.controller.update(0.1)
        before = self.controller.depth
        self.assertEqual(self.controller.apply_wheel(1000), before)

    def test_new_jump_restarts_from_current(self):
        self.controller.jump_to(400.0)
        self.controller.update(0.5)
        midway = self.controller.depth
        self.controller.jump_to(0.0)
        self.controller.update(0.0)
        self.assertAlmostEqual(self.controller.depth, midway)
        self.settle(90)
        self.assertEqual(self.controller.depth, 0.0)

    def test_zero_duration_jump_is_immediate(self):
        self.controller.jump_to(250.0, duration=0.0)
        self.assertFalse(self.controller.is_jumping)
        self.assertEqual(self.controller.smoothed_depth, 250.0)

    def test_state_and_reset(self):
        self.controller.apply_wheel(300)
        state = self.controller.get_state()
        self.assertEqual(state['depth'], 30.0)
        self.controller.reset()
        self.assertEqual(self.controller.depth, 0.0)


class TestRecency(unittest.TestCase):
    """Test depth placement from timestamps."""

    def test_one_day_is_ten_units(self):
        self.assertEqual(depth_from_created_at("2024-01-01T00:00:00Z",
                                               "2024-01-02T00:00:00Z"), 10.0)

    def test_floor(self):
        self.assertEqual(depth_from_created_at("2024-01-01T00:00:00Z",
                                               "2024-01-01T03:00:00Z"), 1.0)

    def test_newer_than_reference(self):
        self.assertEqual(depth_from_created_at("2024-01-02T00:00:00Z",
                                               "2024-01-01T00:00:00Z"), 0.0)
        self.assertEqual(depth_from_created_at("2024-01-02T00:00:00Z",
                                               "2024-01-01T00:00:00Z",
                                               allow_negative=True), -10.0)

    def test_newest_at_baseline(self):
        depths = depths_from_timestamps([
            "2024-01-01T00:00:00Z",
            "2024-01-05T00:00:00Z",
            "2024-01-03T00:00:00Z",
        ], baseline=5.0)
        self.assertEqual(depths, [45.0, 5.0, 25.0])

    def test_older_is_never_shallower(self):
        base = datetime(2024, 1, 1, tzinfo=timezone.utc)
        stamps = [base - timedelta(hours=7 * i) for i in range(50)]
        depths = depths_from_timestamps(stamps)
        for newer, older in zip(depths, depths[1:]):
            self.assertLessEqual(newer, older)

    def test_empty(self):
        self.assertEqual(depths_from_timestamps([]), [])

    def test_place_by_recency(self):
        records = [
            make_record("old", created_at="2024-01-01T00:00:00Z", depth=0.0),
            make_record("new", created_at="2024-01-11T00:00:00Z", depth=0.0),
        ]
        placed = {r.id: r.depth for r in place_by_recency(records)}
        self.assertEqual(placed, {"old": 100.0, "new": 0.0})


def run_tests():
    """Run all Phase 1 tests."""
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()

    suite.addTests(loader.loadTestsFromTestCase(TestMathUtils))
    suite.addTests(loader.loadTestsFromTestCase(TestSeededRandom))
    suite.addTests(loader.loadTestsFromTestCase(TestValidators))
    suite.addTests(loader.loadTestsFromTestCase(TestConfig))
    suite.addTests(loader.loadTestsFromTestCase(TestRecords))
    suite.addTests(loader.loadTestsFromTestCase(TestStore))
    suite.addTests(loader.loadTestsFromTestCase(TestDepthController))
    suite.addTests(loader.loadTestsFromTestCase(TestRecency))

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return result.wasSuccessful()


if __name__ == '__main__':
    success = run_tests()
    sys.exit(0 if success else 1)
