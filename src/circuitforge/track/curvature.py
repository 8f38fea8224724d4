"""Curvature analysis and derived width/speed suggestions."""

from __future__ import annotations

import math
from collections.abc import Sequence
from itertools import groupby

import numpy as np

from circuitforge.track.geometry import FloatArray, points_to_array
from circuitforge.track.models import TURN_TYPES, CurvatureData, Difficulty, Point2D, TurnType
from circuitforge.utils.constants import DEGENERATE_SIDE_EPS
from circuitforge.utils.numerics import round_half_up, round_to_step

STRAIGHT_WIDTH = 18.0
HAIRPIN_WIDTH = 10.0

STRAIGHT_SPEED = 180.0
GENTLE_SPEED = 150.0
MEDIUM_SPEED = 120.0
TIGHT_SPEED = 80.0
HAIRPIN_SPEED = 50.0
SPEED_ROUNDING_STEP = 10.0

CURVATURE_STRAIGHT = 0.01
CURVATURE_GENTLE = 0.03
CURVATURE_MEDIUM = 0.06
CURVATURE_TIGHT = 0.1

DEFAULT_SMOOTHING_WINDOW = 3
ANALYSIS_SMOOTHING_WINDOW = 5

SPEED_BY_TURN_TYPE: dict[TurnType, float] = {
    "straight": STRAIGHT_SPEED,
    "gentle": GENTLE_SPEED,
    "medium": MEDIUM_SPEED,
    "tight": TIGHT_SPEED,
    "hairpin": HAIRPIN_SPEED,
}


def menger_curvature(coords: FloatArray, closed: bool = True) -> FloatArray:
    """Vectorised unsigned Menger curvature of an ``(N, 2)`` coordinate array.

    Args:
        coords: Ordered path coordinates.
        closed: Whether neighbour lookup wraps around the seam. Open paths
            reuse the end point as its own neighbour, which yields zero.

    Returns:
        Curvature samples [1/m]; zero for collinear or degenerate triples.
    """
    n = coords.shape[0]
    if n < 3:
        return np.zeros(n, dtype=np.float64)

    if closed:
        prev_pts = np.roll(coords, 1, axis=0)
        next_pts = np.roll(coords, -1, axis=0)
    else:
        prev_pts = np.vstack([coords[:1], coords[:-1]])
        next_pts = np.vstack([coords[1:], coords[-1:]])

    a = np.hypot(*(coords - prev_pts).T)
    b = np.hypot(*(next_pts - coords).T)
    c = np.hypot(*(next_pts - prev_pts).T)

    twice_area = np.abs(
        (coords[:, 0] - prev_pts[:, 0]) * (next_pts[:, 1] - prev_pts[:, 1])
        - (next_pts[:, 0] - prev_pts[:, 0]) * (coords[:, 1] - prev_pts[:, 1])
    )
    degenerate = (a < DEGENERATE_SIDE_EPS) | (b < DEGENERATE_SIDE_EPS) | (c < DEGENERATE_SIDE_EPS)
    denominator = np.where(degenerate, 1.0, a * b * c)
    curvature = 2.0 * twice_area / denominator
    return np.asarray(np.where(degenerate, 0.0, curvature), dtype=np.float64)


def calculate_curvature(points: Sequence[Point2D], closed: bool = True) -> list[float]:
    """Menger curvature at every point from its immediate neighbours.

    Curvature is ``4 * area / (a * b * c)`` for the triangle formed by a point
    and its predecessor and successor.

    Args:
        points: Ordered path points.
        closed: Whether neighbour lookup wraps around the seam.

    Returns:
        Unsigned curvature per point [1/m].
    """
    return menger_curvature(points_to_array(points), closed).tolist()


def smooth_curvature(
    curvatures: Sequence[float],
    window_size: int = DEFAULT_SMOOTHING_WINDOW,
) -> list[float]:
    """Centred moving average that wraps around the seam.

    Args:
        curvatures: Raw curvature samples.
        window_size: Averaging window; even sizes behave like the next odd size
            below them.

    Returns:
        Smoothed curvature samples.
    """
    values = np.asarray(curvatures, dtype=np.float64)
    if values.size == 0:
        return []
    half = window_size // 2
    total = np.zeros_like(values)
    for offset in range(-half, half + 1):
        total += np.roll(values, -offset)
    return (total / (2 * half + 1)).tolist()


def classify_turn_type(curvature: float) -> TurnType:
    """Map curvature to its turn class."""
    if curvature < CURVATURE_STRAIGHT:
        return "straight"
    if curvature < CURVATURE_GENTLE:
        return "gentle"
    if curvature < CURVATURE_MEDIUM:
        return "medium"
    if curvature < CURVATURE_TIGHT:
        return "tight"
    return "hairpin"


def calculate_suggested_width(curvature: float) -> float:
    """Track width that narrows linearly from straights to hairpins [m]."""
    if curvature < CURVATURE_STRAIGHT:
        return STRAIGHT_WIDTH
    if curvature >= CURVATURE_TIGHT:
        return HAIRPIN_WIDTH
    t = (curvature - CURVATURE_STRAIGHT) / (CURVATURE_TIGHT - CURVATURE_STRAIGHT)
    return STRAIGHT_WIDTH - t * (STRAIGHT_WIDTH - HAIRPIN_WIDTH)


def calculate_suggested_speed(curvature: float) -> float:
    """Speed limit tier of the turn class [km/h].

    Speed is a step function of turn type rather than of raw curvature, so
    limits read as discrete gears along the lap.
    """
    return SPEED_BY_TURN_TYPE[classify_turn_type(curvature)]


def analyze_track_curvature(points: Sequence[Point2D]) -> list[CurvatureData]:
    """Per-point curvature analysis of a closed path.

    Args:
        points: Ordered closed-path points.

    Returns:
        One ``CurvatureData`` per point, with width rounded to whole metres and
        speed rounded to tens of km/h.
    """
    raw = calculate_curvature(points)
    smoothed = smooth_curvature(raw, ANALYSIS_SMOOTHING_WINDOW)
    return [
        CurvatureData(
            curvature=value,
            suggested_width=float(round_half_up(calculate_suggested_width(value))),
            suggested_speed=float(
                round_to_step(calculate_suggested_speed(value), SPEED_ROUNDING_STEP)
            ),
            turn_type=classify_turn_type(value),
        )
        for value in smoothed
    ]


def find_corners(points: Sequence[Point2D], min_curvature: float = CURVATURE_GENTLE) -> list[int]:
    """Indices of local smoothed-curvature maxima above a threshold.

    The first and last index are never reported since they lack a neighbour
    on one side.
    """
    smoothed = smooth_curvature(calculate_curvature(points), ANALYSIS_SMOOTHING_WINDOW)
    return [
        i
        for i in range(1, len(smoothed) - 1)
        if smoothed[i] >= min_curvature
        and smoothed[i] > smoothed[i - 1]
        and smoothed[i] >= smoothed[i + 1]
    ]


def count_turns_by_type(points: Sequence[Point2D]) -> dict[TurnType, int]:
    """Count contiguous runs of each non-straight turn type.

    A run of consecutive points sharing one turn type counts as a single
    turn. The path is closed, so a run covering both the last and the first
    point is one turn. Straight runs are never counted.

    Args:
        points: Ordered closed-path points.

    Returns:
        Run count per turn type; ``straight`` is always zero.
    """
    counts: dict[TurnType, int] = dict.fromkeys(TURN_TYPES, 0)
    turn_types = [data.turn_type for data in analyze_track_curvature(points)]
    boundaries = [i for i in range(1, len(turn_types)) if turn_types[i] != turn_types[i - 1]]
    if boundaries and turn_types[0] == turn_types[-1]:
        # Start at a type change so the run across the seam is grouped once.
        start = boundaries[0]
        turn_types = turn_types[start:] + turn_types[:start]
    for turn_type, _run in groupby(turn_types):
        if turn_type != "straight":
            counts[turn_type] += 1
    return counts


def count_significant_turns(points: Sequence[Point2D]) -> int:
    """Number of distinct medium, tight and hairpin turns."""
    counts = count_turns_by_type(points)
    return counts["medium"] + counts["tight"] + counts["hairpin"]


def estimate_difficulty(points: Sequence[Point2D]) -> Difficulty:
    """Coarse difficulty tier from the mix of demanding turns.

    Args:
        points: Ordered closed-path points.

    Returns:
        ``expert``, ``hard``, ``medium`` or ``easy``.
    """
    counts = count_turns_by_type(points)
    difficult_turns = counts["tight"] + counts["hairpin"]
    total_turns = difficult_turns + counts["medium"]

    if difficult_turns >= 5 or counts["hairpin"] >= 3:
        return "expert"
    if difficult_turns >= 3 or total_turns >= 8:
        return "hard"
    if difficult_turns >= 1 or total_turns >= 5:
        return "medium"
    return "easy"


def calculate_average_corner_radius(points: Sequence[Point2D]) -> float:
    """Reciprocal of the mean raw curvature over corner samples [m].

    Returns:
        Average corner radius, or ``math.inf`` when no sample exceeds the
        gentle-turn threshold. Infinity means there is no meaningful radius.
    """
    curvature = menger_curvature(points_to_array(points))
    corners = curvature[curvature > CURVATURE_GENTLE]
    if corners.size == 0:
        return math.inf
    return float(1.0 / np.mean(corners))
