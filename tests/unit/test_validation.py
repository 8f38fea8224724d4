"""Unit tests for track validation checks and helpers."""

from __future__ import annotations

import unittest

from circuitforge.track.models import Point2D
from circuitforge.track.validation import (
    DEFAULT_TRACK_WIDTH,
    can_auto_close,
    find_self_intersections,
    has_self_intersections,
    suggest_fixes,
    validate_track,
    would_cause_intersection,
)
from tests.helpers import circle_points, square_points


def _bowtie_points() -> list[Point2D]:
    """Closed loop whose diagonal legs cross once at (45, 45)."""
    return [
        Point2D(0.0, 0.0),
        Point2D(30.0, 30.0),
        Point2D(60.0, 60.0),
        Point2D(90.0, 90.0),
        Point2D(90.0, 60.0),
        Point2D(90.0, 30.0),
        Point2D(90.0, 0.0),
        Point2D(60.0, 30.0),
        Point2D(30.0, 60.0),
        Point2D(0.0, 90.0),
        Point2D(0.0, 72.0),
        Point2D(0.0, 54.0),
        Point2D(0.0, 36.0),
        Point2D(0.0, 18.0),
    ]


class ValidateTrackTests(unittest.TestCase):
    """Validate error and warning reporting of ``validate_track``."""

    def test_regular_loop_is_valid(self) -> None:
        """Accept a closed 40-point loop of radius 50 m."""
        result = validate_track(circle_points(50.0, 40))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.errors, ())
        self.assertTrue(result.stats.is_closed)
        self.assertEqual(result.stats.point_count, 40)
        self.assertAlmostEqual(result.stats.avg_width, DEFAULT_TRACK_WIDTH)
        self.assertAlmostEqual(result.stats.min_width, DEFAULT_TRACK_WIDTH)
        self.assertAlmostEqual(result.stats.bounds.width, 100.0)

    def test_five_points_report_every_failed_check(self) -> None:
        """Report too few points and keep running the remaining checks."""
        points = circle_points(100.0, 5)
        result = validate_track(points)

        self.assertFalse(result.is_valid)
        self.assertIn("too_few_points", result.error_types)
        self.assertIn("not_closed", result.error_types)
        self.assertEqual(result.stats.point_count, 5)
        self.assertFalse(result.stats.is_closed)
        self.assertGreater(result.stats.length, 0.0)

    def test_not_closed_error_points_at_last_point(self) -> None:
        """Attach the last path point as the location of the closure gap."""
        points = circle_points(100.0, 5)
        not_closed = [e for e in validate_track(points).errors if e.type == "not_closed"]

        self.assertEqual(len(not_closed), 1)
        self.assertEqual(not_closed[0].location, points[-1])

    def test_square_is_too_small(self) -> None:
        """Reject the 10 m square for point count and length."""
        result = validate_track(square_points())

        self.assertEqual(result.error_types, frozenset({"too_few_points", "too_short"}))
        self.assertAlmostEqual(result.stats.length, 40.0)

    def test_crossing_path_reports_intersection_location(self) -> None:
        """Report one crossing located at the average of its four endpoints."""
        result = validate_track(_bowtie_points())

        self.assertEqual(result.error_types, frozenset({"self_intersection"}))
        (issue,) = result.errors
        assert issue.location is not None
        self.assertAlmostEqual(issue.location.x, 45.0)
        self.assertAlmostEqual(issue.location.z, 45.0)

    def test_short_segments_are_invalid_geometry(self) -> None:
        """Flag segments shorter than the minimum at their start point."""
        points = circle_points(50.0, 100)
        result = validate_track(points)

        self.assertEqual(result.error_types, frozenset({"invalid_geometry"}))
        self.assertEqual(len(result.errors), 99)
        self.assertEqual(result.errors[0].location, points[0])

    def test_narrow_widths_are_rejected(self) -> None:
        """Reject widths below the minimum and summarise the width stats."""
        widths = [14.0] * 39 + [6.0]
        result = validate_track(circle_points(50.0, 40), widths)

        self.assertEqual(result.error_types, frozenset({"too_narrow"}))
        self.assertAlmostEqual(result.stats.min_width, 6.0)
        self.assertAlmostEqual(result.stats.avg_width, 13.8)

    def test_empty_widths_use_default(self) -> None:
        """Fall back to the default width for an empty width sequence."""
        result = validate_track(circle_points(50.0, 40), [])

        self.assertTrue(result.is_valid)
        self.assertAlmostEqual(result.stats.avg_width, DEFAULT_TRACK_WIDTH)

    def test_long_track_is_only_a_warning(self) -> None:
        """Warn about very long tracks without rejecting them."""
        result = validate_track(circle_points(900.0, 600))

        self.assertTrue(result.is_valid)
        self.assertEqual(result.warning_types, frozenset({"too_long"}))

    def test_curved_loop_warns_about_missing_straights(self) -> None:
        """Warn when a track longer than ten points has no straight point."""
        result = validate_track(circle_points(50.0, 40))
        self.assertIn("no_straights", result.warning_types)

    def test_hairpin_loop_warns_about_tight_turns(self) -> None:
        """Warn when hairpins dominate a small loop."""
        result = validate_track(circle_points(9.0, 12))

        self.assertIn("very_tight_turn", result.warning_types)
        self.assertIn("no_straights", result.warning_types)
        self.assertIn("too_short", result.error_types)

    def test_empty_input_does_not_raise(self) -> None:
        """Report errors for an empty path instead of raising."""
        result = validate_track([])

        self.assertIn("too_few_points", result.error_types)
        self.assertIn("not_closed", result.error_types)
        self.assertEqual(result.stats.length, 0.0)

    def test_input_is_not_modified(self) -> None:
        """Leave the caller's point list untouched."""
        points = _bowtie_points()
        snapshot = list(points)
        validate_track(points, [12.0] * len(points))
        self.assertEqual(points, snapshot)


class IntersectionHelperTests(unittest.TestCase):
    """Validate self-intersection helpers used by editors."""

    def test_neighbouring_segments_are_skipped(self) -> None:
        """Do not report a smooth loop as crossing itself."""
        self.assertFalse(has_self_intersections(circle_points(50.0, 40)))
        self.assertEqual(find_self_intersections(square_points()[:3]), [])

    def test_bowtie_crossing_is_found(self) -> None:
        """Find the crossing of the bowtie legs."""
        self.assertTrue(has_self_intersections(_bowtie_points()))

    def test_would_cause_intersection(self) -> None:
        """Detect crossings of the next segment and of the closing segment."""
        existing = [
            Point2D(0.0, 0.0),
            Point2D(0.0, 10.0),
            Point2D(10.0, 10.0),
            Point2D(10.0, 20.0),
        ]
        self.assertFalse(would_cause_intersection(existing, Point2D(12.0, 18.0)))
        self.assertTrue(would_cause_intersection(existing, Point2D(12.0, 18.0), closed=True))
        self.assertTrue(would_cause_intersection(existing, Point2D(5.0, 5.0)))
        self.assertFalse(would_cause_intersection(existing[:1], Point2D(5.0, 5.0)))

    def test_can_auto_close(self) -> None:
        """Allow closing only for long enough paths with a small end gap."""
        loop = circle_points(50.0, 24)

        self.assertTrue(can_auto_close(loop[:-1]))
        self.assertFalse(can_auto_close(loop[:-3]))
        self.assertFalse(can_auto_close(circle_points(50.0, 6)))


class SuggestFixesTests(unittest.TestCase):
    """Validate user-facing fix hints."""

    def test_hints_follow_error_order(self) -> None:
        """Return one hint per error type in reporting order."""
        hints = suggest_fixes(validate_track(circle_points(100.0, 5)))

        self.assertEqual(
            hints,
            [
                "Add more detail to your track",
                "Bring the end of the track closer to the start",
            ],
        )

    def test_hints_are_deduplicated(self) -> None:
        """Collapse repeated errors of one type into a single hint."""
        hints = suggest_fixes(validate_track(circle_points(50.0, 100)))
        self.assertEqual(hints, ["Spread out points that are bunched together"])

    def test_valid_track_needs_no_hints(self) -> None:
        """Return no hints for a valid track."""
        self.assertEqual(suggest_fixes(validate_track(circle_points(50.0, 40))), [])


if __name__ == "__main__":
    unittest.main()
