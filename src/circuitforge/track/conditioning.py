"""Conditioning of raw point sequences into evenly spaced closed paths.

Two pipelines share the stages defined here:

* hand-drawn input: distance filter, Douglas-Peucker simplification, open
  Laplacian smoothing, endpoint merge, arc-length resampling and one closed
  smoothing pass (:func:`condition_drawn_path`);
* procedural base points: closed Catmull-Rom interpolation followed by two
  closed smoothing passes of decreasing strength
  (:func:`condition_procedural_points`).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from circuitforge.track.config import ProcessingOptions
from circuitforge.track.curvature import analyze_track_curvature
from circuitforge.track.geometry import (
    FloatArray,
    array_to_points,
    distance,
    point_to_segment_distance,
    points_to_array,
)
from circuitforge.track.models import Point2D, Segment, Waypoint
from circuitforge.utils.constants import SMALL_EPS

logger = logging.getLogger(__name__)

DEFAULT_SMOOTHING_FACTOR = 0.25
DEFAULT_SPLINE_SEGMENTS = 10
PROCEDURAL_SPLINE_SEGMENTS = 5
PROCEDURAL_SMOOTHING_FACTORS = (0.3, 0.2)
MIN_RESAMPLED_POINT_COUNT = 8
CHECKPOINT_COUNT = 4

# Catmull-Rom basis rows for the coefficients of 1, t, t^2, t^3 (scaled by 0.5).
_CATMULL_ROM_BASIS = 0.5 * np.array(
    [
        [0.0, 2.0, 0.0, 0.0],
        [-1.0, 0.0, 1.0, 0.0],
        [2.0, -5.0, 4.0, -1.0],
        [-1.0, 3.0, -3.0, 1.0],
    ],
    dtype=np.float64,
)


def filter_min_distance(points: Sequence[Point2D], min_distance: float) -> list[Point2D]:
    """Drop points closer than ``min_distance`` to the last kept point.

    Args:
        points: Ordered raw points.
        min_distance: Minimum spacing between kept points [m].

    Returns:
        Filtered points; the first point is always kept.
    """
    if len(points) == 0:
        return []
    filtered = [points[0]]
    for point in points[1:]:
        if distance(point, filtered[-1]) >= min_distance:
            filtered.append(point)
    return filtered


def douglas_peucker(points: Sequence[Point2D], tolerance: float) -> list[Point2D]:
    """Simplify a path while preserving its shape.

    Every subrange keeps its two end points. Within a subrange, the point
    with the largest distance to the chord between the ends is found; if that
    distance exceeds ``tolerance`` the subrange is split there, otherwise all
    interior points are dropped. Subranges are processed as index pairs over
    the input buffer.

    Args:
        points: Ordered path points.
        tolerance: Maximum allowed deviation from the simplified path [m].

    Returns:
        Simplified path. Paths with two or fewer points are returned as-is.
    """
    n = len(points)
    if n <= 2:
        return list(points)

    keep = np.zeros(n, dtype=bool)
    keep[0] = keep[-1] = True
    ranges = [(0, n - 1)]
    while ranges:
        start, end = ranges.pop()
        chord = Segment(points[start], points[end])
        max_dist = 0.0
        max_index = start
        for i in range(start + 1, end):
            dist = point_to_segment_distance(points[i], chord)
            if dist > max_dist:
                max_dist = dist
                max_index = i
        if max_dist > tolerance:
            keep[max_index] = True
            ranges.append((start, max_index))
            ranges.append((max_index, end))

    return [point for point, kept in zip(points, keep) if kept]


def _laplacian_smooth_array(coords: FloatArray, closed: bool, factor: float) -> FloatArray:
    """Move every point ``factor`` of the way towards its neighbours' midpoint."""
    if coords.shape[0] < 3:
        return coords.copy()
    if closed:
        midpoint = 0.5 * (np.roll(coords, 1, axis=0) + np.roll(coords, -1, axis=0))
        return coords + factor * (midpoint - coords)

    smoothed = coords.copy()
    midpoint = 0.5 * (coords[:-2] + coords[2:])
    smoothed[1:-1] = coords[1:-1] + factor * (midpoint - coords[1:-1])
    return smoothed


def laplacian_smooth(
    points: Sequence[Point2D],
    closed: bool,
    factor: float = DEFAULT_SMOOTHING_FACTOR,
) -> list[Point2D]:
    """One pass of neighbour-averaging smoothing.

    Args:
        points: Ordered path points.
        closed: Whether neighbours wrap around the seam. Open paths keep their
            end points fixed.
        factor: Blend towards the neighbour midpoint; smaller values give a
            gentler correction per pass.

    Returns:
        Smoothed points. Paths with fewer than three points are unchanged.
    """
    if len(points) < 3:
        return list(points)
    return array_to_points(_laplacian_smooth_array(points_to_array(points), closed, factor))


def catmull_rom_smooth(
    points: Sequence[Point2D],
    segments: int = DEFAULT_SPLINE_SEGMENTS,
) -> list[Point2D]:
    """Interpolate a closed loop of control points with a Catmull-Rom spline.

    Args:
        points: Closed-loop control points.
        segments: Number of samples emitted per control segment, starting at
            the segment's first control point.

    Returns:
        Dense closed curve with ``len(points) * segments`` samples. Inputs with
        fewer than four points are returned unchanged.
    """
    if len(points) < 4:
        return list(points)

    coords = points_to_array(points)
    # Control quadruples (p0, p1, p2, p3) for every segment p1 -> p2.
    controls = np.stack(
        [
            np.roll(coords, 1, axis=0),
            coords,
            np.roll(coords, -1, axis=0),
            np.roll(coords, -2, axis=0),
        ],
        axis=1,
    )
    t = np.arange(segments, dtype=np.float64) / segments
    powers = np.stack([np.ones_like(t), t, t * t, t * t * t], axis=1)
    weights = powers @ _CATMULL_ROM_BASIS
    # (segments, 4) x (n, 4, 2) -> (n, segments, 2)
    samples = np.einsum("sk,nkd->nsd", weights, controls)
    return array_to_points(samples.reshape(-1, 2))


def try_auto_close(points: Sequence[Point2D], threshold: float) -> list[Point2D]:
    """Merge nearby endpoints into a single averaged start point.

    Args:
        points: Ordered open path.
        threshold: Maximum endpoint gap that is merged [m].

    Returns:
        Path without the duplicate end point when the gap is positive and
        within ``threshold``; otherwise the input unchanged.
    """
    if len(points) < 3:
        return list(points)
    first, last = points[0], points[-1]
    gap = distance(first, last)
    if 0.0 < gap <= threshold:
        merged = Point2D(0.5 * (first.x + last.x), 0.5 * (first.z + last.z))
        return [merged, *points[1:-1]]
    return list(points)


def resample_path(
    points: Sequence[Point2D],
    target_spacing: float,
    closed: bool = True,
) -> list[Point2D]:
    """Resample a path at uniform arc-length increments.

    Args:
        points: Ordered path points.
        target_spacing: Desired spacing between samples [m].
        closed: Whether the closing segment is part of the path.

    Returns:
        ``max(8, round(length / target_spacing))`` points, starting at the
        first input point. Degenerate paths are returned unchanged.
    """
    if len(points) < 2 or target_spacing <= 0.0:
        return list(points)

    coords = points_to_array(points)
    if closed:
        coords = np.vstack([coords, coords[:1]])
    step = np.hypot(*np.diff(coords, axis=0).T)
    nonzero = np.concatenate([[True], step > 0.0])
    coords = coords[nonzero]
    arc = np.concatenate([[0.0], np.cumsum(step[step > 0.0])])
    total = float(arc[-1])
    if total < SMALL_EPS:
        return list(points)

    count = max(MIN_RESAMPLED_POINT_COUNT, int(np.floor(total / target_spacing + 0.5)))
    targets = np.arange(count, dtype=np.float64) / count * total
    x = np.interp(targets, arc, coords[:, 0])
    z = np.interp(targets, arc, coords[:, 1])
    return array_to_points(np.column_stack([x, z]))


def assign_track_properties(points: Sequence[Point2D]) -> tuple[Waypoint, ...]:
    """Derive waypoints with curvature-based width and speed.

    Checkpoints are placed at index 0 and at each quarter of the point count
    (by index, not by arc length) when there are at least four points.

    Args:
        points: Ordered closed-path points.

    Returns:
        Immutable waypoint sequence in driving order.
    """
    curvature = analyze_track_curvature(points)
    checkpoints: set[int] = set()
    if len(points) >= CHECKPOINT_COUNT:
        quarter = len(points) // CHECKPOINT_COUNT
        checkpoints = {k * quarter for k in range(CHECKPOINT_COUNT)}

    return tuple(
        Waypoint(
            x=point.x,
            z=point.z,
            width=data.suggested_width,
            speed_limit=data.suggested_speed,
            is_checkpoint=i in checkpoints,
        )
        for i, (point, data) in enumerate(zip(points, curvature))
    )


def condition_drawn_path(
    raw_points: Sequence[Point2D],
    options: ProcessingOptions | None = None,
) -> list[Point2D]:
    """Condition a hand-drawn point sequence into an evenly spaced closed path.

    Args:
        raw_points: Raw drawn points in drawing order.
        options: Conditioning options. Defaults to :class:`ProcessingOptions`.

    Returns:
        Conditioned closed-path points. Inputs with fewer than three points
        are returned unchanged.

    Raises:
        circuitforge.utils.exceptions.ConfigurationError: If ``options`` are
            invalid.
    """
    opts = options or ProcessingOptions()
    opts.validate()
    if len(raw_points) < 3:
        return list(raw_points)

    points = filter_min_distance(raw_points, opts.min_point_spacing / 2.0)
    points = douglas_peucker(points, opts.simplification_tolerance)
    for _ in range(opts.smoothing_iterations):
        points = laplacian_smooth(points, closed=False)
    if opts.auto_close:
        points = try_auto_close(points, opts.close_threshold)
    points = resample_path(points, opts.min_point_spacing, closed=True)
    points = laplacian_smooth(points, closed=True)

    logger.debug("Conditioned %d raw points into %d path points", len(raw_points), len(points))
    return points


def process_drawing_to_waypoints(
    raw_points: Sequence[Point2D],
    options: ProcessingOptions | None = None,
) -> tuple[Waypoint, ...]:
    """Convert a hand-drawn point sequence into track waypoints.

    The result is not validated; callers use
    :func:`circuitforge.track.validation.validate_waypoints` before accepting
    it, and may show an invalid result as a live preview.

    Args:
        raw_points: Raw drawn points in drawing order.
        options: Conditioning options. Defaults to :class:`ProcessingOptions`.

    Returns:
        Waypoints of the conditioned path; empty for fewer than three raw
        points.

    Raises:
        circuitforge.utils.exceptions.ConfigurationError: If ``options`` are
            invalid.
    """
    if len(raw_points) < 3:
        return ()
    return assign_track_properties(condition_drawn_path(raw_points, options))


def condition_procedural_points(base_points: Sequence[Point2D]) -> list[Point2D]:
    """Densify and smooth sparse procedural base points into a closed path.

    Args:
        base_points: Sparse closed-loop control points.

    Returns:
        Dense closed-path points ready for validation.
    """
    points = catmull_rom_smooth(base_points, PROCEDURAL_SPLINE_SEGMENTS)
    for factor in PROCEDURAL_SMOOTHING_FACTORS:
        points = laplacian_smooth(points, closed=True, factor=factor)
    return points
