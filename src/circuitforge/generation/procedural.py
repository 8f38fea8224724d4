"""Procedural synthesis of closed racing circuits.

Every attempt scatters base points, orders them around their centroid,
splices in corner templates, forces long gaps to read as straights, and then
runs the procedural conditioning and validation pipeline. Attempts share no
state besides the random generator, and a failed attempt is discarded.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

import numpy as np

from circuitforge.generation.config import GenerationOptions
from circuitforge.generation.templates import (
    CORNER_TEMPLATES,
    transform_corner_template,
)
from circuitforge.track.conditioning import assign_track_properties, condition_procedural_points
from circuitforge.track.curvature import HAIRPIN_WIDTH, STRAIGHT_SPEED, STRAIGHT_WIDTH
from circuitforge.track.geometry import distance, sort_points_counter_clockwise
from circuitforge.track.layouts import generate_oval_track
from circuitforge.track.models import Difficulty, Point2D, Waypoint
from circuitforge.track.validation import validate_track
from circuitforge.utils.numerics import clamp, round_half_up, round_to_step

logger = logging.getLogger(__name__)

WORLD_MARGIN_FRACTION = 0.15
MIN_POINT_SEPARATION_FRACTION = 0.15
MAX_PLACEMENT_TRIES = 100
MIN_STRAIGHT_FRACTION = 0.1
STRAIGHT_SPLIT_FACTOR = 3.0

MIN_ADJUSTED_SPEED = 40.0
SPEED_ROUNDING_STEP = 10.0

CORNER_COUNT_BY_DIFFICULTY: dict[Difficulty, int] = {
    "easy": 1,
    "medium": 2,
    "hard": 3,
    "expert": 4,
}
WIDTH_MULTIPLIER_BY_DIFFICULTY: dict[Difficulty, float] = {
    "easy": 1.2,
    "medium": 1.0,
    "hard": 0.85,
    "expert": 0.75,
}
SPEED_MULTIPLIER_BY_DIFFICULTY: dict[Difficulty, float] = {
    "easy": 1.1,
    "medium": 1.0,
    "hard": 0.9,
    "expert": 0.8,
}


def difficulty_width_multiplier(difficulty: Difficulty) -> float:
    """Width rescaling factor applied to generated tracks of a tier."""
    return WIDTH_MULTIPLIER_BY_DIFFICULTY[difficulty]


def difficulty_speed_multiplier(difficulty: Difficulty) -> float:
    """Speed-limit rescaling factor applied to generated tracks of a tier."""
    return SPEED_MULTIPLIER_BY_DIFFICULTY[difficulty]


def generate_base_points(count: int, world_size: float, rng: np.random.Generator) -> list[Point2D]:
    """Scatter base points inside the world with a margin.

    Each placement is redrawn up to :data:`MAX_PLACEMENT_TRIES` times while it
    lands closer than the minimum separation to an already placed point; the
    last draw is kept regardless.

    Args:
        count: Number of points to place.
        world_size: Edge length of the square world centred on the origin [m].
        rng: Random generator.

    Returns:
        Unordered point scatter.
    """
    margin = WORLD_MARGIN_FRACTION * world_size
    min_separation = MIN_POINT_SEPARATION_FRACTION * world_size
    span = world_size - 2.0 * margin
    offset = margin - 0.5 * world_size

    points: list[Point2D] = []
    for _ in range(count):
        for _try in range(MAX_PLACEMENT_TRIES):
            x, z = offset + span * rng.random(2)
            candidate = Point2D(float(x), float(z))
            if all(distance(p, candidate) >= min_separation for p in points):
                break
        points.append(candidate)
    return points


def select_insert_positions(
    point_count: int,
    corner_count: int,
    rng: np.random.Generator,
) -> list[int]:
    """Pick distinct, mutually non-adjacent splice positions.

    Positions range over ``[1, point_count - 2]`` so every splice has a
    predecessor and a successor. Fewer positions are returned when the point
    count cannot host ``corner_count`` non-adjacent splices.

    Args:
        point_count: Number of points in the layout.
        corner_count: Requested number of splices.
        rng: Random generator.

    Returns:
        Splice positions in descending order.
    """
    available = list(range(1, point_count - 1))
    positions: list[int] = []
    while len(positions) < min(corner_count, point_count - 1) and available:
        pos = int(available[rng.integers(len(available))])
        positions.append(pos)
        available = [p for p in available if abs(p - pos) > 1]
    return sorted(positions, reverse=True)


def insert_corner_templates(
    points: Sequence[Point2D],
    difficulty: Difficulty,
    rng: np.random.Generator,
) -> list[Point2D]:
    """Splice randomly chosen corner templates into a base layout.

    The number of corners grows with difficulty. Each template is fitted
    between the point before its splice position and the point at it.

    Args:
        points: Ordered base layout.
        difficulty: Difficulty tier.
        rng: Random generator.

    Returns:
        Layout with template points inserted.
    """
    templates = list(CORNER_TEMPLATES.values())
    positions = select_insert_positions(len(points), CORNER_COUNT_BY_DIFFICULTY[difficulty], rng)

    result = list(points)
    # Descending positions keep the lower splice indices valid.
    for pos in positions:
        template = templates[rng.integers(len(templates))]
        result[pos:pos] = transform_corner_template(
            template, result[pos - 1], result[pos], difficulty
        )
    return result


def ensure_minimum_straights(points: Sequence[Point2D], world_size: float) -> list[Point2D]:
    """Subdivide long gaps so they survive smoothing as straights.

    Wherever consecutive points of the closed loop, including the closing
    pair, are more than :data:`STRAIGHT_SPLIT_FACTOR` minimum straight
    lengths apart, evenly spaced intermediate points are inserted.

    Args:
        points: Ordered closed-loop layout.
        world_size: Edge length of the world [m]; the minimum straight length
            is a fraction of it.

    Returns:
        Layout with intermediate straight points.
    """
    min_straight = MIN_STRAIGHT_FRACTION * world_size
    n = len(points)
    result: list[Point2D] = []
    for i, prev in enumerate(points):
        result.append(prev)
        if n < 2:
            break
        curr = points[(i + 1) % n]
        gap = distance(prev, curr)
        if gap <= STRAIGHT_SPLIT_FACTOR * min_straight:
            continue
        intermediate_count = int(gap // min_straight) - 1
        for j in range(1, intermediate_count + 1):
            t = j / (intermediate_count + 1)
            result.append(Point2D(prev.x + t * (curr.x - prev.x), prev.z + t * (curr.z - prev.z)))
    return result


def adjust_difficulty(
    waypoints: Sequence[Waypoint],
    difficulty: Difficulty,
) -> tuple[Waypoint, ...]:
    """Rescale widths and speed limits for a difficulty tier.

    Widths are rounded to whole metres and clamped to the curvature-derived
    width range; speeds are rounded to tens of km/h and clamped to
    ``[40, 180]``.

    Args:
        waypoints: Waypoints with curvature-derived attributes.
        difficulty: Difficulty tier.

    Returns:
        Rescaled waypoints.
    """
    width_factor = difficulty_width_multiplier(difficulty)
    speed_factor = difficulty_speed_multiplier(difficulty)
    return tuple(
        replace(
            wp,
            width=float(
                clamp(round_half_up(wp.width * width_factor), HAIRPIN_WIDTH, STRAIGHT_WIDTH)
            ),
            speed_limit=float(
                clamp(
                    round_to_step(wp.speed_limit * speed_factor, SPEED_ROUNDING_STEP),
                    MIN_ADJUSTED_SPEED,
                    STRAIGHT_SPEED,
                )
            ),
        )
        for wp in waypoints
    )


def _attempt_generation(
    options: GenerationOptions,
    rng: np.random.Generator,
    attempt: int,
) -> tuple[Waypoint, ...] | None:
    """Run one self-contained generation attempt."""
    count = int(rng.integers(options.min_points, options.max_points + 1))
    points = generate_base_points(count, options.world_size, rng)
    points = sort_points_counter_clockwise(points)
    if options.include_corner_templates:
        points = insert_corner_templates(points, options.difficulty, rng)
    points = ensure_minimum_straights(points, options.world_size)
    points = condition_procedural_points(points)

    validation = validate_track(points)
    if not validation.is_valid:
        logger.debug(
            "Generation attempt %d rejected: %s",
            attempt + 1,
            ", ".join(sorted(validation.error_types)),
        )
        return None

    return adjust_difficulty(assign_track_properties(points), options.difficulty)


def generate_track(
    options: GenerationOptions | None = None,
    rng: np.random.Generator | None = None,
) -> tuple[Waypoint, ...] | None:
    """Generate a random closed circuit that passes validation.

    Args:
        options: Generation options. Defaults to :class:`GenerationOptions`.
        rng: Random generator. A fresh unseeded generator is used when omitted;
            pass a seeded one for reproducible layouts.

    Returns:
        Waypoints of the first valid attempt, or ``None`` when every attempt
        failed validation.

    Raises:
        circuitforge.utils.exceptions.ConfigurationError: If ``options`` are
            invalid.
    """
    opts = options or GenerationOptions()
    opts.validate()
    generator = rng if rng is not None else np.random.default_rng()

    for attempt in range(opts.max_attempts):
        track = _attempt_generation(opts, generator, attempt)
        if track:
            logger.debug("Generated %d waypoints on attempt %d", len(track), attempt + 1)
            return track

    logger.warning("Failed to generate a valid track after %d attempts", opts.max_attempts)
    return None


def generate_track_or_fallback(
    options: GenerationOptions | None = None,
    rng: np.random.Generator | None = None,
) -> tuple[Waypoint, ...]:
    """Generate a circuit, falling back to the deterministic oval.

    Args:
        options: Generation options. Defaults to :class:`GenerationOptions`.
        rng: Random generator.

    Returns:
        Generated waypoints, or the oval layout for the same world size when
        generation exhausts its attempt budget.

    Raises:
        circuitforge.utils.exceptions.ConfigurationError: If ``options`` are
            invalid.
    """
    opts = options or GenerationOptions()
    track = generate_track(opts, rng)
    if track is not None:
        return track
    logger.info("Using oval fallback layout")
    return generate_oval_track(world_size=opts.world_size)

