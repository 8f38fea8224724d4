"""Unit tests for closed-form fallback layouts."""

from __future__ import annotations

import unittest

from circuitforge.track.layouts import generate_figure8_track, generate_oval_track
from circuitforge.track.validation import has_self_intersections, validate_waypoints
from circuitforge.utils.exceptions import TrackDataError


class TrackLayoutBuilderTests(unittest.TestCase):
    """Validate geometry properties of the fallback layout builders."""

    def test_oval_validates_as_closed_without_crossings(self) -> None:
        """Accept the default oval as a closed, non-self-intersecting track."""
        oval = generate_oval_track()
        result = validate_waypoints(oval)

        self.assertTrue(result.is_valid, msg=[e.message for e in result.errors])
        self.assertTrue(result.stats.is_closed)
        self.assertFalse(has_self_intersections([wp.point for wp in oval]))
        self.assertEqual(len(oval), 32)

    def test_large_world_oval_stays_closed(self) -> None:
        """Add samples for large worlds so the seam gap stays within the closure limit."""
        oval = generate_oval_track(world_size=400.0)
        result = validate_waypoints(oval)

        self.assertTrue(result.is_valid, msg=[e.message for e in result.errors])
        self.assertEqual(len(oval), 51)

    def test_oval_extent_follows_world_size(self) -> None:
        """Scale the minor radius to 40 % of the world and stretch along x."""
        result = validate_waypoints(generate_oval_track(world_size=200.0, aspect_ratio=1.5))

        self.assertAlmostEqual(result.stats.bounds.max_x, 120.0)
        self.assertAlmostEqual(result.stats.bounds.min_x, -120.0)
        self.assertAlmostEqual(result.stats.bounds.max_z, 80.0, delta=0.5)

    def test_oval_checkpoints_and_attributes(self) -> None:
        """Mark four checkpoints and keep widths and speeds in range."""
        oval = generate_oval_track()

        flagged = [i for i, wp in enumerate(oval) if wp.is_checkpoint]
        self.assertEqual(flagged, [0, 8, 16, 24])
        for wp in oval:
            self.assertGreaterEqual(wp.width, 10.0)
            self.assertLessEqual(wp.width, 18.0)
            self.assertIn(wp.speed_limit, (50.0, 80.0, 120.0, 150.0, 180.0))

    def test_figure_eight_crosses_itself(self) -> None:
        """Report the crossing of the figure-eight lobes at the origin."""
        figure8 = generate_figure8_track(sample_count=30)
        result = validate_waypoints(figure8)

        self.assertIn("self_intersection", result.error_types)
        crossings = [e for e in result.errors if e.type == "self_intersection"]
        location = crossings[0].location
        assert location is not None
        self.assertAlmostEqual(location.x, 0.0, delta=1e-6)
        self.assertAlmostEqual(location.z, 0.0, delta=1e-6)

    def test_layout_builders_reject_invalid_parameters(self) -> None:
        """Reject non-physical geometric parameters for layout generation."""
        with self.assertRaises(TrackDataError):
            generate_oval_track(world_size=0.0)
        with self.assertRaises(TrackDataError):
            generate_oval_track(aspect_ratio=-1.0)
        with self.assertRaises(TrackDataError):
            generate_oval_track(sample_count=3)
        with self.assertRaises(TrackDataError):
            generate_figure8_track(world_size=-10.0)


if __name__ == "__main__":
    unittest.main()
