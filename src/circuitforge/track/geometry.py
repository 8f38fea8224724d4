"""Ground-plane geometry primitives.

All functions are pure and never raise for geometric reasons. Degenerate
inputs (empty point sets, zero-length segments) produce well-defined sentinel
answers so callers can decide what validity means in their own context.
"""

from __future__ import annotations

import math
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from circuitforge.track.models import Bounds, Point2D, Segment
from circuitforge.utils.constants import PARALLEL_EPS, SMALL_EPS

FloatArray = npt.NDArray[np.float64]

IDENTITY_TANGENT = Point2D(1.0, 0.0)


def points_to_array(points: Sequence[Point2D]) -> FloatArray:
    """Stack points into an ``(N, 2)`` coordinate array.

    Args:
        points: Ground-plane points. Any object exposing ``x`` and ``z``
            attributes is accepted, including waypoints.

    Returns:
        Array with ``x`` in column 0 and ``z`` in column 1.
    """
    if len(points) == 0:
        return np.zeros((0, 2), dtype=np.float64)
    return np.asarray([(p.x, p.z) for p in points], dtype=np.float64)


def array_to_points(coords: FloatArray) -> list[Point2D]:
    """Convert an ``(N, 2)`` coordinate array back to points.

    Args:
        coords: Array with ``x`` in column 0 and ``z`` in column 1.

    Returns:
        Point list in array row order.
    """
    return [Point2D(float(x), float(z)) for x, z in coords]


def distance(p1: Point2D, p2: Point2D) -> float:
    """Euclidean distance between two points."""
    return math.hypot(p2.x - p1.x, p2.z - p1.z)


def distance_squared(p1: Point2D, p2: Point2D) -> float:
    """Squared Euclidean distance, for comparisons without a square root."""
    dx = p2.x - p1.x
    dz = p2.z - p1.z
    return dx * dx + dz * dz


def cross_product(p1: Point2D, p2: Point2D, p3: Point2D) -> float:
    """Cross product of ``p2 - p1`` and ``p3 - p1``.

    Args:
        p1: Common origin of both vectors.
        p2: Tip of the first vector.
        p3: Tip of the second vector.

    Returns:
        Positive when ``p3`` lies left of the directed line ``p1 -> p2``,
        negative when it lies right, zero when the three points are collinear.
    """
    return (p2.x - p1.x) * (p3.z - p1.z) - (p2.z - p1.z) * (p3.x - p1.x)


def _on_segment(p: Point2D, q: Point2D, r: Point2D) -> bool:
    """Check whether collinear point ``q`` lies within the box spanned by ``p`` and ``r``."""
    return min(p.x, r.x) <= q.x <= max(p.x, r.x) and min(p.z, r.z) <= q.z <= max(p.z, r.z)


def segments_intersect(seg1: Segment, seg2: Segment) -> bool:
    """Check whether two segments touch or cross.

    Proper crossings are detected from the four orientation signs. Collinear
    configurations, including an endpoint lying exactly on the other segment,
    are resolved by an explicit on-segment test.

    Args:
        seg1: First segment.
        seg2: Second segment.

    Returns:
        ``True`` if the segments share at least one point.
    """
    d1 = cross_product(seg2.start, seg2.end, seg1.start)
    d2 = cross_product(seg2.start, seg2.end, seg1.end)
    d3 = cross_product(seg1.start, seg1.end, seg2.start)
    d4 = cross_product(seg1.start, seg1.end, seg2.end)

    if ((d1 > 0.0 > d2) or (d1 < 0.0 < d2)) and ((d3 > 0.0 > d4) or (d3 < 0.0 < d4)):
        return True

    if d1 == 0.0 and _on_segment(seg2.start, seg1.start, seg2.end):
        return True
    if d2 == 0.0 and _on_segment(seg2.start, seg1.end, seg2.end):
        return True
    if d3 == 0.0 and _on_segment(seg1.start, seg2.start, seg1.end):
        return True
    return d4 == 0.0 and _on_segment(seg1.start, seg2.end, seg1.end)


def segment_intersection(seg1: Segment, seg2: Segment) -> Point2D | None:
    """Compute the crossing point of two segments.

    Args:
        seg1: First segment.
        seg2: Second segment.

    Returns:
        Crossing point, or ``None`` for parallel segments and segments whose
        supporting lines cross outside either segment.
    """
    x1, z1 = seg1.start.x, seg1.start.z
    x2, z2 = seg1.end.x, seg1.end.z
    x3, z3 = seg2.start.x, seg2.start.z
    x4, z4 = seg2.end.x, seg2.end.z

    denominator = (x1 - x2) * (z3 - z4) - (z1 - z2) * (x3 - x4)
    if abs(denominator) < PARALLEL_EPS:
        return None

    t = ((x1 - x3) * (z3 - z4) - (z1 - z3) * (x3 - x4)) / denominator
    u = -((x1 - x2) * (z1 - z3) - (z1 - z2) * (x1 - x3)) / denominator

    if 0.0 <= t <= 1.0 and 0.0 <= u <= 1.0:
        return Point2D(x1 + t * (x2 - x1), z1 + t * (z2 - z1))
    return None


def point_to_segment_distance(point: Point2D, seg: Segment) -> float:
    """Shortest distance from a point to a segment.

    The projection parameter is clamped to ``[0, 1]`` so the result is the
    distance to the segment rather than to its supporting line.

    Args:
        point: Query point.
        seg: Target segment.

    Returns:
        Distance [m]. A zero-length segment degrades to point distance.
    """
    dx = seg.end.x - seg.start.x
    dz = seg.end.z - seg.start.z
    length_sq = dx * dx + dz * dz
    if length_sq == 0.0:
        return distance(point, seg.start)

    t = ((point.x - seg.start.x) * dx + (point.z - seg.start.z) * dz) / length_sq
    t = max(0.0, min(1.0, t))
    projection = Point2D(seg.start.x + t * dx, seg.start.z + t * dz)
    return distance(point, projection)


def calculate_centroid(points: Sequence[Point2D]) -> Point2D:
    """Average position of a point set; the origin for an empty input."""
    if len(points) == 0:
        return Point2D(0.0, 0.0)
    mean = points_to_array(points).mean(axis=0)
    return Point2D(float(mean[0]), float(mean[1]))


def angle_from_centroid(point: Point2D, centroid: Point2D) -> float:
    """Polar angle of ``point`` around ``centroid`` [rad]."""
    return math.atan2(point.z - centroid.z, point.x - centroid.x)


def sort_points_counter_clockwise(points: Sequence[Point2D]) -> list[Point2D]:
    """Order a point scatter by increasing polar angle around its centroid.

    Args:
        points: Unordered point scatter.

    Returns:
        New list sorted counter-clockwise. Inputs with fewer than three points
        are returned in their original order.
    """
    if len(points) < 3:
        return list(points)
    centroid = calculate_centroid(points)
    return sorted(points, key=lambda p: angle_from_centroid(p, centroid))


def calculate_path_length(points: Sequence[Point2D], closed: bool = True) -> float:
    """Sum of consecutive segment lengths.

    Args:
        points: Ordered path points.
        closed: Whether to include the segment from the last point back to
            the first. Only applied for paths with more than two points.

    Returns:
        Path length [m]; zero for fewer than two points.
    """
    if len(points) < 2:
        return 0.0
    coords = points_to_array(points)
    if closed and len(points) > 2:
        coords = np.vstack([coords, coords[:1]])
    return float(np.sum(np.hypot(*np.diff(coords, axis=0).T)))


def interpolate_along_path(
    points: Sequence[Point2D],
    target_distance: float,
    closed: bool = True,
) -> Point2D:
    """Locate the point at a given arc-length distance along a path.

    Args:
        points: Ordered path points.
        target_distance: Arc-length position [m]; wrapped modulo the path
            length, so negative values count back from the start.
        closed: Whether the path includes its closing segment.

    Returns:
        Linearly interpolated point. Degenerate paths return their first point
        (or the origin when empty).
    """
    if len(points) == 0:
        return Point2D(0.0, 0.0)
    total = calculate_path_length(points, closed)
    if total < SMALL_EPS:
        return points[0]

    remaining = target_distance % total
    n = len(points)
    segment_count = n if closed else n - 1
    for i in range(segment_count):
        p1 = points[i]
        p2 = points[(i + 1) % n]
        segment_length = distance(p1, p2)
        if segment_length > 0.0 and remaining <= segment_length:
            t = remaining / segment_length
            return Point2D(p1.x + t * (p2.x - p1.x), p1.z + t * (p2.z - p1.z))
        remaining -= segment_length
    return points[0]


def _neighbour_indices(n: int, index: int, closed: bool) -> tuple[int, int]:
    if closed:
        return (index - 1) % n, (index + 1) % n
    return max(0, index - 1), min(n - 1, index + 1)


def get_tangent_at_index(points: Sequence[Point2D], index: int, closed: bool = True) -> Point2D:
    """Unit direction of travel at a path index by central difference.

    Args:
        points: Ordered path points.
        index: Point index.
        closed: Whether neighbour lookup wraps around the seam. Open paths
            clamp to their end points.

    Returns:
        Unit tangent; ``(1, 0)`` when the neighbours coincide.
    """
    n = len(points)
    if n < 2:
        return IDENTITY_TANGENT
    prev_idx, next_idx = _neighbour_indices(n, index, closed)
    dx = points[next_idx].x - points[prev_idx].x
    dz = points[next_idx].z - points[prev_idx].z
    length = math.hypot(dx, dz)
    if length < PARALLEL_EPS:
        return IDENTITY_TANGENT
    return Point2D(dx / length, dz / length)


def get_normal_at_index(points: Sequence[Point2D], index: int, closed: bool = True) -> Point2D:
    """Unit normal at a path index, the tangent rotated by +90 degrees."""
    tangent = get_tangent_at_index(points, index, closed)
    return Point2D(-tangent.z, tangent.x)


def calculate_bounds(points: Sequence[Point2D]) -> Bounds:
    """Axis-aligned bounding box; all-zero for an empty input."""
    if len(points) == 0:
        return Bounds()
    coords = points_to_array(points)
    lower = coords.min(axis=0)
    upper = coords.max(axis=0)
    return Bounds(
        min_x=float(lower[0]),
        max_x=float(upper[0]),
        min_z=float(lower[1]),
        max_z=float(upper[1]),
    )


def is_point_in_polygon(point: Point2D, polygon: Sequence[Point2D]) -> bool:
    """Ray-casting parity test for a point against a closed polygon.

    Args:
        point: Query point.
        polygon: Polygon vertices in order; the closing edge is implicit.

    Returns:
        ``True`` if an odd number of polygon edges cross the ray cast from
        ``point`` towards positive ``x``.
    """
    inside = False
    n = len(polygon)
    j = n - 1
    for i in range(n):
        xi, zi = polygon[i].x, polygon[i].z
        xj, zj = polygon[j].x, polygon[j].z
        if (zi > point.z) != (zj > point.z):
            crossing_x = (xj - xi) * (point.z - zi) / (zj - zi) + xi
            if point.x < crossing_x:
                inside = not inside
        j = i
    return inside
