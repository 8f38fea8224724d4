"""Shared test helpers."""

from __future__ import annotations

import numpy as np

from circuitforge.track.models import Point2D


def square_points(size: float = 10.0) -> list[Point2D]:
    """Create a counter-clockwise axis-aligned square anchored at the origin.

    Args:
        size: Edge length [m].

    Returns:
        Four corner points.
    """
    return [
        Point2D(0.0, 0.0),
        Point2D(size, 0.0),
        Point2D(size, size),
        Point2D(0.0, size),
    ]


def circle_points(
    radius: float,
    count: int,
    center: Point2D = Point2D(0.0, 0.0),
) -> list[Point2D]:
    """Sample a regular polygon inscribed in a circle, seam point excluded.

    Args:
        radius: Circle radius [m].
        count: Number of samples.
        center: Circle centre.

    Returns:
        Counter-clockwise points starting on the positive ``x`` axis.
    """
    angle = np.linspace(0.0, 2.0 * np.pi, count, endpoint=False)
    return [
        Point2D(float(center.x + radius * np.cos(a)), float(center.z + radius * np.sin(a)))
        for a in angle
    ]


def drawn_loop_points(
    radius: float = 60.0,
    count: int = 200,
    noise: float = 0.5,
    seed: int = 7,
    gap_fraction: float = 0.02,
) -> list[Point2D]:
    """Emulate a hand-drawn, slightly wobbly loop that stops short of its start.

    Args:
        radius: Nominal loop radius [m].
        count: Number of raw samples.
        noise: Standard deviation of the per-sample jitter [m].
        seed: Seed of the jitter generator.
        gap_fraction: Fraction of the revolution left undrawn at the end.

    Returns:
        Raw drawn points in drawing order.
    """
    rng = np.random.default_rng(seed)
    angle = np.linspace(0.0, 2.0 * np.pi * (1.0 - gap_fraction), count)
    jitter = rng.normal(0.0, noise, size=(count, 2))
    x = radius * np.cos(angle) + jitter[:, 0]
    z = radius * np.sin(angle) + jitter[:, 1]
    return [Point2D(float(xi), float(zi)) for xi, zi in zip(x, z)]
