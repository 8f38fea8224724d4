"""Corner templates modelled on recognisable circuit features."""

from __future__ import annotations

import math
from dataclasses import dataclass

from circuitforge.track.models import Difficulty, Point2D

TEMPLATE_REFERENCE_LENGTH = 100.0

# Shrinking factor applied to templates; harder tiers get tighter corners.
TEMPLATE_DIFFICULTY_SCALE: dict[Difficulty, float] = {
    "easy": 1.2,
    "medium": 1.0,
    "hard": 0.8,
    "expert": 0.7,
}


@dataclass(frozen=True)
class CornerTemplate:
    """Relative point pattern of a corner shape.

    Args:
        name: Display name.
        points: Pattern points in a local frame running along ``+x`` from the
            origin. The first and last points are anchors and are not emitted.
        scale: Base scale multiplier of the pattern.
    """

    name: str
    points: tuple[Point2D, ...]
    scale: float


def _pattern(*coords: tuple[float, float]) -> tuple[Point2D, ...]:
    return tuple(Point2D(x, z) for x, z in coords)


CORNER_TEMPLATES: dict[str, CornerTemplate] = {
    "hairpin": CornerTemplate(
        name="Hairpin",
        points=_pattern((0, 0), (5, 15), (15, 25), (30, 25), (40, 15), (45, 0)),
        scale=1.2,
    ),
    "chicane": CornerTemplate(
        name="Chicane",
        points=_pattern((0, 0), (15, 10), (25, 5), (40, 15), (55, 10), (70, 0)),
        scale=0.8,
    ),
    "sweeper": CornerTemplate(
        name="Sweeper",
        points=_pattern((0, 0), (20, 5), (40, 15), (60, 20), (80, 15), (100, 0)),
        scale=1.0,
    ),
    "s_curve": CornerTemplate(
        name="S-Curve",
        points=_pattern((0, 0), (15, 10), (30, 8), (45, -2), (60, -10), (75, -8), (90, 0)),
        scale=0.9,
    ),
    "kink": CornerTemplate(
        name="Kink",
        points=_pattern((0, 0), (25, 8), (50, 0)),
        scale=1.0,
    ),
}


def get_corner_template_names() -> list[str]:
    """Identifiers of all available corner templates."""
    return list(CORNER_TEMPLATES)


def get_corner_template(name: str) -> CornerTemplate | None:
    """Look up a corner template by identifier, ``None`` if unknown."""
    return CORNER_TEMPLATES.get(name)


def transform_corner_template(
    template: CornerTemplate,
    start_point: Point2D,
    end_point: Point2D,
    difficulty: Difficulty,
) -> list[Point2D]:
    """Fit a template's interior points onto the chord between two points.

    The pattern is rotated to the chord direction, anchored at
    ``start_point`` and scaled by the chord length relative to
    :data:`TEMPLATE_REFERENCE_LENGTH`, the template scale and the difficulty
    scale.

    Args:
        template: Template to place.
        start_point: Chord start, the pattern origin.
        end_point: Chord end, defining the pattern direction.
        difficulty: Difficulty tier selecting the scale factor.

    Returns:
        Interior template points in world coordinates.
    """
    dx = end_point.x - start_point.x
    dz = end_point.z - start_point.z
    chord = math.hypot(dx, dz)
    angle = math.atan2(dz, dx)
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    scale = (
        chord / TEMPLATE_REFERENCE_LENGTH * template.scale * TEMPLATE_DIFFICULTY_SCALE[difficulty]
    )

    return [
        Point2D(
            start_point.x + (p.x * cos_a - p.z * sin_a) * scale,
            start_point.z + (p.x * sin_a + p.z * cos_a) * scale,
        )
        for p in template.points[1:-1]
    ]
