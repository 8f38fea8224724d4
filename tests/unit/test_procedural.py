"""Unit tests for procedural track generation."""

from __future__ import annotations

import unittest

import numpy as np

from circuitforge.generation.config import GenerationOptions
from circuitforge.generation.procedural import (
    adjust_difficulty,
    difficulty_speed_multiplier,
    difficulty_width_multiplier,
    ensure_minimum_straights,
    generate_base_points,
    generate_track,
    generate_track_or_fallback,
    insert_corner_templates,
    select_insert_positions,
)
from circuitforge.track.geometry import sort_points_counter_clockwise
from circuitforge.track.models import VALID_DIFFICULTIES, Point2D, Waypoint
from circuitforge.track.validation import validate_waypoints
from circuitforge.utils.exceptions import ConfigurationError

LOGGER_NAME = "circuitforge.generation.procedural"


def _reachable_options(**overrides: object) -> GenerationOptions:
    """Options for which a plain base layout regularly validates.

    Args:
        **overrides: Field overrides applied on top of the defaults.

    Returns:
        Generation options without corner templates in a 300 m world.
    """
    fields: dict[str, object] = {
        "world_size": 300.0,
        "include_corner_templates": False,
        "max_attempts": 25,
    }
    fields.update(overrides)
    return GenerationOptions(**fields)  # type: ignore[arg-type]


def _first_generated(
    options: GenerationOptions,
    seeds: range,
) -> tuple[Waypoint, ...] | None:
    """First successful generation over a sequence of seeds.

    Args:
        options: Generation options.
        seeds: Seeds tried in order.

    Returns:
        Waypoints of the first seed that produced a track, or ``None``.
    """
    for seed in seeds:
        track = generate_track(options, np.random.default_rng(seed))
        if track is not None:
            return track
    return None


class AttemptStepTests(unittest.TestCase):
    """Validate the individual steps of a generation attempt."""

    def test_base_points_stay_inside_margin(self) -> None:
        """Scatter the requested number of points inside the world margin."""
        points = generate_base_points(8, 200.0, np.random.default_rng(1))

        self.assertEqual(len(points), 8)
        for point in points:
            self.assertLessEqual(abs(point.x), 70.0)
            self.assertLessEqual(abs(point.z), 70.0)

    def test_insert_positions_are_distinct_and_non_adjacent(self) -> None:
        """Pick descending positions that are at least two indices apart."""
        for seed in range(20):
            rng = np.random.default_rng(seed)
            positions = select_insert_positions(10, 4, rng)
            with self.subTest(seed=seed):
                self.assertGreaterEqual(len(positions), 1)
                self.assertLessEqual(len(positions), 4)
                self.assertEqual(positions, sorted(positions, reverse=True))
                for a, b in zip(positions, positions[1:]):
                    self.assertGreater(a - b, 1)
                for pos in positions:
                    self.assertGreaterEqual(pos, 1)
                    self.assertLessEqual(pos, 8)

    def test_insert_positions_for_tiny_layouts(self) -> None:
        """Return fewer positions when the layout cannot host them."""
        rng = np.random.default_rng(0)
        self.assertEqual(select_insert_positions(3, 4, rng), [1])
        self.assertEqual(select_insert_positions(2, 1, rng), [])

    def test_templates_are_spliced_between_base_points(self) -> None:
        """Keep every base point in order and add template points between them."""
        rng = np.random.default_rng(5)
        base = sort_points_counter_clockwise(generate_base_points(8, 200.0, rng))
        spliced = insert_corner_templates(base, "expert", rng)

        self.assertGreater(len(spliced), len(base))
        remaining = iter(spliced)
        self.assertTrue(all(point in remaining for point in base))

    def test_long_gaps_are_subdivided_including_closing_pair(self) -> None:
        """Insert evenly spaced points into gaps longer than three straights."""
        points = [Point2D(0.0, 0.0), Point2D(100.0, 0.0), Point2D(0.0, 20.0)]
        result = ensure_minimum_straights(points, world_size=100.0)

        self.assertEqual(len(result), 21)
        self.assertEqual(result[0], points[0])
        for i in range(1, 10):
            self.assertAlmostEqual(result[i].x, 10.0 * i)
            self.assertAlmostEqual(result[i].z, 0.0)
        self.assertEqual(result[10], points[1])
        self.assertEqual(result[-1], points[2])

    def test_short_gaps_are_left_alone(self) -> None:
        """Leave layouts without long gaps unchanged."""
        points = [Point2D(0.0, 0.0), Point2D(20.0, 0.0), Point2D(10.0, 15.0)]
        self.assertEqual(ensure_minimum_straights(points, world_size=100.0), points)


class DifficultyTests(unittest.TestCase):
    """Validate difficulty rescaling of waypoint attributes."""

    def test_width_multiplier_is_monotonic(self) -> None:
        """Shrink widths and speeds strictly from easy to expert."""
        widths = [difficulty_width_multiplier(d) for d in VALID_DIFFICULTIES]
        speeds = [difficulty_speed_multiplier(d) for d in VALID_DIFFICULTIES]

        self.assertEqual(widths, sorted(widths, reverse=True))
        self.assertEqual(len(set(widths)), len(widths))
        self.assertEqual(speeds, sorted(speeds, reverse=True))

    def test_adjustment_rounds_and_clamps(self) -> None:
        """Round widths to metres and speeds to tens within their limits."""
        waypoints = (
            Waypoint(x=1.0, z=2.0, width=18.0, speed_limit=180.0, is_checkpoint=True),
            Waypoint(x=3.0, z=4.0, width=10.0, speed_limit=50.0),
        )

        expert = adjust_difficulty(waypoints, "expert")
        self.assertEqual((expert[0].width, expert[0].speed_limit), (14.0, 140.0))
        self.assertEqual((expert[1].width, expert[1].speed_limit), (10.0, 40.0))
        self.assertTrue(expert[0].is_checkpoint)
        self.assertEqual(expert[1].point, Point2D(3.0, 4.0))

        easy = adjust_difficulty(waypoints, "easy")
        self.assertEqual((easy[0].width, easy[0].speed_limit), (18.0, 180.0))
        self.assertEqual((easy[1].width, easy[1].speed_limit), (12.0, 60.0))

        medium = adjust_difficulty(waypoints, "medium")
        self.assertEqual(medium, waypoints)


class GenerateTrackTests(unittest.TestCase):
    """Validate the bounded retry loop and its fallback."""

    def test_generation_succeeds_for_some_seed(self) -> None:
        """Produce at least one valid track across a handful of seeds."""
        tracks = [
            generate_track(_reachable_options(), np.random.default_rng(seed)) for seed in range(5)
        ]
        generated = [track for track in tracks if track is not None]

        self.assertTrue(generated)
        for track in generated:
            result = validate_waypoints(track)
            self.assertTrue(result.is_valid, msg=[e.message for e in result.errors])
            self.assertTrue(result.stats.is_closed)
            self.assertEqual(sum(wp.is_checkpoint for wp in track), 4)

    def test_generated_tracks_respect_difficulty_ranges(self) -> None:
        """Keep widths and speeds inside their clamped ranges for every tier."""
        for difficulty in VALID_DIFFICULTIES:
            options = _reachable_options(difficulty=difficulty)
            track = _first_generated(options, seeds=range(5))
            with self.subTest(difficulty=difficulty):
                self.assertIsNotNone(track)
                assert track is not None
                for wp in track:
                    self.assertGreaterEqual(wp.width, 10.0)
                    self.assertLessEqual(wp.width, 18.0)
                    self.assertGreaterEqual(wp.speed_limit, 40.0)
                    self.assertLessEqual(wp.speed_limit, 180.0)
                    self.assertEqual(wp.speed_limit % 10.0, 0.0)

    def test_generation_with_corner_templates_in_large_world(self) -> None:
        """Accept a layout with spliced corner templates once the world is large enough."""
        options = GenerationOptions(world_size=1000.0, difficulty="hard", max_attempts=10)
        track = _first_generated(options, seeds=range(20))

        self.assertIsNotNone(track)
        assert track is not None
        result = validate_waypoints(track)
        self.assertTrue(result.is_valid, msg=[e.message for e in result.errors])
        self.assertTrue(result.stats.is_closed)
        self.assertEqual(sum(wp.is_checkpoint for wp in track), 4)

    def test_same_seed_reproduces_track(self) -> None:
        """Generate identical output from identically seeded generators."""
        options = _reachable_options(max_attempts=5)
        first = generate_track(options, np.random.default_rng(3))
        second = generate_track(options, np.random.default_rng(3))
        self.assertEqual(first, second)

    def test_exhausted_budget_returns_none_and_warns(self) -> None:
        """Return ``None`` and log a warning when every attempt fails."""
        options = GenerationOptions(world_size=20.0, max_attempts=2)
        with self.assertLogs(LOGGER_NAME, level="WARNING") as captured:
            track = generate_track(options, np.random.default_rng(0))

        self.assertIsNone(track)
        self.assertTrue(any("2 attempts" in line for line in captured.output))

    def test_fallback_returns_oval(self) -> None:
        """Fall back to the oval layout when generation gives up."""
        options = GenerationOptions(world_size=20.0, max_attempts=1)
        with self.assertLogs(LOGGER_NAME, level="INFO"):
            track = generate_track_or_fallback(options, np.random.default_rng(0))

        self.assertEqual(len(track), 32)
        self.assertAlmostEqual(max(wp.x for wp in track), 12.0)

    def test_invalid_options_raise(self) -> None:
        """Reject invalid options before any attempt runs."""
        with self.assertRaises(ConfigurationError):
            generate_track(GenerationOptions(min_points=2))
        with self.assertRaises(ConfigurationError):
            invalid = GenerationOptions(difficulty="impossible")  # type: ignore[arg-type]
            generate_track_or_fallback(invalid)


if __name__ == "__main__":
    unittest.main()
