"""Closed-form fallback layouts used when procedural generation gives up."""

from __future__ import annotations

import math

import numpy as np

from circuitforge.track.conditioning import assign_track_properties
from circuitforge.track.geometry import FloatArray, array_to_points
from circuitforge.track.models import Waypoint
from circuitforge.track.validation import MAX_CLOSURE_DISTANCE
from circuitforge.utils.exceptions import TrackDataError

DEFAULT_WORLD_SIZE = 200.0
DEFAULT_OVAL_ASPECT_RATIO = 1.5
DEFAULT_OVAL_SAMPLE_COUNT = 32
DEFAULT_FIGURE_EIGHT_SAMPLE_COUNT = 32
MIN_LAYOUT_SAMPLE_COUNT = 4
OVAL_RADIUS_FRACTION = 0.4
FIGURE_EIGHT_RADIUS_FRACTION = 0.25
FIGURE_EIGHT_STRETCH = 1.5


def _validate_positive(name: str, value: float) -> None:
    """Validate that a scalar parameter is strictly positive.

    Args:
        name: Parameter name used in error messages.
        value: Parameter value to validate.

    Raises:
        circuitforge.utils.exceptions.TrackDataError: If ``value`` is not
            strictly positive.
    """
    if value <= 0.0:
        msg = f"{name} must be positive"
        raise TrackDataError(msg)


def _validate_sample_count(sample_count: int) -> None:
    """Validate that a layout has enough samples to form a loop.

    Raises:
        circuitforge.utils.exceptions.TrackDataError: If ``sample_count`` is
            below the minimum required count.
    """
    if sample_count < MIN_LAYOUT_SAMPLE_COUNT:
        msg = f"sample_count must be at least {MIN_LAYOUT_SAMPLE_COUNT}"
        raise TrackDataError(msg)


def _loop_angles(sample_count: int) -> FloatArray:
    """Evenly spaced parameter values over one revolution, end point excluded."""
    return np.linspace(0.0, 2.0 * np.pi, int(sample_count), endpoint=False, dtype=float)


def generate_oval_track(
    world_size: float = DEFAULT_WORLD_SIZE,
    aspect_ratio: float = DEFAULT_OVAL_ASPECT_RATIO,
    sample_count: int | None = None,
) -> tuple[Waypoint, ...]:
    """Build an elliptical loop centred on the origin.

    Without an explicit ``sample_count`` the oval uses
    :data:`DEFAULT_OVAL_SAMPLE_COUNT` samples, raised for large worlds so the
    gap between the last and first sample stays within the validator's
    closure threshold.

    Args:
        world_size: Edge length of the square world [m]. The minor radius is
            40 % of it.
        aspect_ratio: Major-to-minor radius ratio along ``x``.
        sample_count: Number of unique samples around the ellipse, or ``None``
            for the world-size dependent default.

    Returns:
        Waypoints of the oval with curvature-derived attributes.

    Raises:
        circuitforge.utils.exceptions.TrackDataError: If geometric inputs are
            outside valid bounds.
    """
    _validate_positive("world_size", world_size)
    _validate_positive("aspect_ratio", aspect_ratio)

    radius_z = OVAL_RADIUS_FRACTION * float(world_size)
    if sample_count is None:
        # The seam chord runs along the minor axis where samples are sparsest.
        sample_count = max(
            DEFAULT_OVAL_SAMPLE_COUNT,
            math.ceil(2.0 * math.pi * radius_z / MAX_CLOSURE_DISTANCE),
        )
    _validate_sample_count(sample_count)
    radius_x = radius_z * float(aspect_ratio)
    angle = _loop_angles(sample_count)
    coords = np.column_stack([radius_x * np.cos(angle), radius_z * np.sin(angle)])
    return assign_track_properties(array_to_points(coords))


def generate_figure8_track(
    world_size: float = DEFAULT_WORLD_SIZE,
    sample_count: int = DEFAULT_FIGURE_EIGHT_SAMPLE_COUNT,
) -> tuple[Waypoint, ...]:
    """Build a figure-eight loop on a lemniscate of Bernoulli.

    The layout crosses itself at the origin by construction and therefore
    does not pass self-intersection validation.

    Args:
        world_size: Edge length of the square world [m].
        sample_count: Number of unique samples along the curve.

    Returns:
        Waypoints of the figure-eight with curvature-derived attributes.

    Raises:
        circuitforge.utils.exceptions.TrackDataError: If geometric inputs are
            outside valid bounds.
    """
    _validate_positive("world_size", world_size)
    _validate_sample_count(sample_count)

    radius = FIGURE_EIGHT_RADIUS_FRACTION * float(world_size) * FIGURE_EIGHT_STRETCH
    t = _loop_angles(sample_count)
    scale = radius / (1.0 + np.sin(t) ** 2)
    coords = np.column_stack([scale * np.cos(t), scale * np.sin(t) * np.cos(t)])
    return assign_track_properties(array_to_points(coords))
