"""Playability validation of closed track paths."""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np

from circuitforge.track.curvature import (
    analyze_track_curvature,
    count_significant_turns,
    estimate_difficulty,
)
from circuitforge.track.geometry import (
    FloatArray,
    calculate_bounds,
    calculate_path_length,
    distance,
    points_to_array,
    segments_intersect,
)
from circuitforge.track.models import (
    Point2D,
    Segment,
    TrackStats,
    ValidationIssue,
    ValidationResult,
    Waypoint,
)

MIN_TRACK_LENGTH = 200.0
MAX_TRACK_LENGTH = 5_000.0
MIN_POINT_COUNT = 8
MAX_CLOSURE_DISTANCE = 20.0
MIN_SEGMENT_LENGTH = 4.0
MIN_TRACK_WIDTH = 8.0
DEFAULT_TRACK_WIDTH = 14.0
INTERSECTION_SKIP_COUNT = 2
HAIRPIN_WARNING_SHARE = 0.3
NO_STRAIGHTS_MIN_POINTS = 10

FIX_SUGGESTIONS = {
    "too_short": "Draw a longer track path",
    "too_few_points": "Add more detail to your track",
    "not_closed": "Bring the end of the track closer to the start",
    "self_intersection": "Avoid crossing over the track path",
    "too_narrow": "Widen the tight sections of the track",
    "invalid_geometry": "Spread out points that are bunched together",
}


def _segment_hits(
    start: FloatArray,
    end: FloatArray,
    others_start: FloatArray,
    others_end: FloatArray,
) -> np.ndarray:
    """Vectorised :func:`segments_intersect` of one segment against many."""

    def cross(o: FloatArray, a: FloatArray, b: FloatArray) -> FloatArray:
        return (a[..., 0] - o[..., 0]) * (b[..., 1] - o[..., 1]) - (a[..., 1] - o[..., 1]) * (
            b[..., 0] - o[..., 0]
        )

    def on_segment(p: FloatArray, q: FloatArray, r: FloatArray) -> np.ndarray:
        return (
            (q[..., 0] <= np.maximum(p[..., 0], r[..., 0]))
            & (q[..., 0] >= np.minimum(p[..., 0], r[..., 0]))
            & (q[..., 1] <= np.maximum(p[..., 1], r[..., 1]))
            & (q[..., 1] >= np.minimum(p[..., 1], r[..., 1]))
        )

    d1 = cross(others_start, others_end, start)
    d2 = cross(others_start, others_end, end)
    d3 = cross(start, end, others_start)
    d4 = cross(start, end, others_end)

    proper = (((d1 > 0) & (d2 < 0)) | ((d1 < 0) & (d2 > 0))) & (
        ((d3 > 0) & (d4 < 0)) | ((d3 < 0) & (d4 > 0))
    )
    start_b = np.broadcast_to(start, others_start.shape)
    end_b = np.broadcast_to(end, others_start.shape)
    touching = (
        ((d1 == 0) & on_segment(others_start, start_b, others_end))
        | ((d2 == 0) & on_segment(others_start, end_b, others_end))
        | ((d3 == 0) & on_segment(start_b, others_start, end_b))
        | ((d4 == 0) & on_segment(start_b, others_end, end_b))
    )
    return np.asarray(proper | touching)


def find_self_intersections(points: Sequence[Point2D], closed: bool = True) -> list[Point2D]:
    """Locate crossings between non-neighbouring segments of a path.

    Segment pairs whose index distance is at most
    :data:`INTERSECTION_SKIP_COUNT` (measured around the seam for closed
    paths) are skipped, so a naturally curving path is not reported as
    crossing itself.

    Args:
        points: Ordered path points.
        closed: Whether the closing segment is part of the path.

    Returns:
        One approximate location per crossing pair, the average of the four
        segment end points.
    """
    n = len(points)
    if n < 4:
        return []

    coords = points_to_array(points)
    segment_count = n if closed else n - 1
    starts = coords[:segment_count]
    ends = np.roll(coords, -1, axis=0)[:segment_count]

    intersections: list[Point2D] = []
    for i in range(segment_count - 1):
        j = np.arange(i + 1, segment_count)
        gap = j - i
        if closed:
            gap = np.minimum(gap, n - gap)
        j = j[gap > INTERSECTION_SKIP_COUNT]
        if j.size == 0:
            continue
        hits = j[_segment_hits(starts[i], ends[i], starts[j], ends[j])]
        for k in hits:
            mid = 0.25 * (starts[i] + ends[i] + starts[k] + ends[k])
            intersections.append(Point2D(float(mid[0]), float(mid[1])))
    return intersections


def has_self_intersections(points: Sequence[Point2D], closed: bool = True) -> bool:
    """Whether any non-neighbouring segments of the path cross."""
    return bool(find_self_intersections(points, closed))


def would_cause_intersection(
    existing_points: Sequence[Point2D],
    new_point: Point2D,
    closed: bool = False,
) -> bool:
    """Check whether appending a point would make a drawn path cross itself.

    Args:
        existing_points: Points drawn so far.
        new_point: Candidate next point.
        closed: Also test the segment that would close the loop from
            ``new_point`` back to the first point.

    Returns:
        ``True`` if the new segment (or the closing segment) crosses an
        existing non-adjacent segment.
    """
    n = len(existing_points)
    if n < 2:
        return False

    new_segment = Segment(existing_points[-1], new_point)
    for i in range(n - 2):
        if segments_intersect(new_segment, Segment(existing_points[i], existing_points[i + 1])):
            return True

    if closed and n >= 3:
        closing_segment = Segment(new_point, existing_points[0])
        for i in range(1, n - 2):
            existing = Segment(existing_points[i], existing_points[i + 1])
            if segments_intersect(closing_segment, existing):
                return True
    return False


def can_auto_close(points: Sequence[Point2D]) -> bool:
    """Whether a drawn path is close enough to be closed without a crossing."""
    if len(points) < MIN_POINT_COUNT - 1:
        return False
    if distance(points[0], points[-1]) > MAX_CLOSURE_DISTANCE:
        return False
    return not would_cause_intersection(points[1:], points[0], closed=False)


def validate_track(
    points: Sequence[Point2D],
    widths: Sequence[float] | None = None,
) -> ValidationResult:
    """Run every playability check on a conditioned path.

    All checks run regardless of earlier failures so that one call reports
    every problem. The input is never modified and no exception is raised for
    geometric reasons.

    Args:
        points: Ordered path points.
        widths: Optional per-point track widths [m].

    Returns:
        Errors, warnings and summary statistics.
    """
    errors: list[ValidationIssue] = []
    warnings: list[ValidationIssue] = []
    n = len(points)

    if n < MIN_POINT_COUNT:
        errors.append(
            ValidationIssue(
                "too_few_points",
                f"Track needs at least {MIN_POINT_COUNT} waypoints (has {n})",
            )
        )

    closure_distance = distance(points[0], points[-1]) if n >= 2 else math.inf
    is_closed = closure_distance <= MAX_CLOSURE_DISTANCE
    if not is_closed:
        errors.append(
            ValidationIssue(
                "not_closed",
                f"Track is not closed. Gap distance: {closure_distance:.1f}m "
                f"(max: {MAX_CLOSURE_DISTANCE:g}m)",
                points[-1] if n else None,
            )
        )

    length = calculate_path_length(points, is_closed)
    if length < MIN_TRACK_LENGTH:
        errors.append(
            ValidationIssue(
                "too_short",
                f"Track is too short: {length:.0f}m (min: {MIN_TRACK_LENGTH:g}m)",
            )
        )
    if length > MAX_TRACK_LENGTH:
        warnings.append(
            ValidationIssue(
                "too_long",
                f"Track is very long: {length:.0f}m. Consider simplifying.",
            )
        )

    for location in find_self_intersections(points, is_closed):
        errors.append(ValidationIssue("self_intersection", "Track intersects itself", location))

    for i in range(n - 1):
        segment_length = distance(points[i], points[i + 1])
        if segment_length < MIN_SEGMENT_LENGTH:
            errors.append(
                ValidationIssue(
                    "invalid_geometry",
                    f"Segment {i} is too short ({segment_length:.1f}m)",
                    points[i],
                )
            )

    has_widths = widths is not None and len(widths) > 0
    if has_widths:
        narrowest = min(widths)
        if narrowest < MIN_TRACK_WIDTH:
            errors.append(
                ValidationIssue(
                    "too_narrow",
                    f"Track is too narrow at some points: {narrowest:.1f}m "
                    f"(min: {MIN_TRACK_WIDTH:g}m)",
                )
            )

    turn_types = [data.turn_type for data in analyze_track_curvature(points)]
    hairpin_count = turn_types.count("hairpin")
    straight_count = turn_types.count("straight")
    if hairpin_count > n * HAIRPIN_WARNING_SHARE:
        warnings.append(
            ValidationIssue(
                "very_tight_turn",
                f"Track has many very tight turns ({hairpin_count}). May be difficult to drive.",
            )
        )
    if straight_count == 0 and n > NO_STRAIGHTS_MIN_POINTS:
        warnings.append(
            ValidationIssue(
                "no_straights",
                "Track has no straight sections. Consider adding some for variety.",
            )
        )

    stats = TrackStats(
        length=length,
        point_count=n,
        turn_count=count_significant_turns(points),
        avg_width=float(np.mean(widths)) if has_widths else DEFAULT_TRACK_WIDTH,
        min_width=float(min(widths)) if has_widths else DEFAULT_TRACK_WIDTH,
        difficulty=estimate_difficulty(points),
        bounds=calculate_bounds(points),
        is_closed=is_closed,
    )
    return ValidationResult(errors=tuple(errors), warnings=tuple(warnings), stats=stats)


def validate_waypoints(waypoints: Sequence[Waypoint]) -> ValidationResult:
    """Validate a waypoint sequence using its own widths."""
    return validate_track(
        [waypoint.point for waypoint in waypoints],
        [waypoint.width for waypoint in waypoints],
    )


def suggest_fixes(result: ValidationResult) -> list[str]:
    """User-facing hints for the errors of a validation result.

    Args:
        result: Validation outcome.

    Returns:
        Distinct hints in the order their errors were reported.
    """
    suggestions: list[str] = []
    for error in result.errors:
        hint = FIX_SUGGESTIONS.get(error.type)
        if hint is not None and hint not in suggestions:
            suggestions.append(hint)
    return suggestions
