"""Track data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

TurnType = Literal["straight", "gentle", "medium", "tight", "hairpin"]
Difficulty = Literal["easy", "medium", "hard", "expert"]
ErrorType = Literal[
    "too_few_points",
    "not_closed",
    "too_short",
    "self_intersection",
    "invalid_geometry",
    "too_narrow",
]
WarningType = Literal["too_long", "very_tight_turn", "no_straights"]

TURN_TYPES: tuple[TurnType, ...] = ("straight", "gentle", "medium", "tight", "hairpin")
VALID_DIFFICULTIES: tuple[Difficulty, ...] = ("easy", "medium", "hard", "expert")


@dataclass(frozen=True)
class Point2D:
    """Ground-plane point.

    Args:
        x: Lateral ground-plane coordinate [m].
        z: Longitudinal ground-plane coordinate [m].
    """

    x: float
    z: float


@dataclass(frozen=True)
class Segment:
    """Directed line segment between two ground-plane points.

    Args:
        start: Segment start point.
        end: Segment end point.
    """

    start: Point2D
    end: Point2D


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box of a point set [m]."""

    min_x: float = 0.0
    max_x: float = 0.0
    min_z: float = 0.0
    max_z: float = 0.0

    @property
    def width(self) -> float:
        """Extent along ``x`` [m]."""
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        """Extent along ``z`` [m]."""
        return self.max_z - self.min_z


@dataclass(frozen=True)
class Waypoint:
    """Single point of a closed driving line with derived attributes.

    Args:
        x: Lateral ground-plane coordinate [m].
        z: Longitudinal ground-plane coordinate [m].
        width: Track width at this point [m].
        speed_limit: Suggested speed limit [km/h].
        is_checkpoint: Whether the point is a lap checkpoint.
    """

    x: float
    z: float
    width: float
    speed_limit: float
    is_checkpoint: bool = False

    @property
    def point(self) -> Point2D:
        """Ground-plane position of the waypoint."""
        return Point2D(self.x, self.z)


@dataclass(frozen=True)
class CurvatureData:
    """Per-point curvature analysis.

    Args:
        curvature: Smoothed unsigned curvature [1/m].
        suggested_width: Suggested track width [m].
        suggested_speed: Suggested speed limit [km/h].
        turn_type: Turn classification of the point.
    """

    curvature: float
    suggested_width: float
    suggested_speed: float
    turn_type: TurnType


@dataclass(frozen=True)
class ValidationIssue:
    """Single validation error or warning.

    Args:
        type: Machine-readable issue identifier.
        message: Human-readable description.
        location: Approximate location of the problem, when one exists.
    """

    type: str
    message: str
    location: Point2D | None = None


@dataclass(frozen=True)
class TrackStats:
    """Summary statistics computed for every validated track."""

    length: float
    point_count: int
    turn_count: int
    avg_width: float
    min_width: float
    difficulty: Difficulty
    bounds: Bounds
    is_closed: bool


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of track validation.

    Args:
        errors: Issues that block use of the track.
        warnings: Advisory issues.
        stats: Summary statistics, computed regardless of validity.
    """

    errors: tuple[ValidationIssue, ...]
    warnings: tuple[ValidationIssue, ...]
    stats: TrackStats

    @property
    def is_valid(self) -> bool:
        """Whether the track has no blocking errors."""
        return not self.errors

    @property
    def error_types(self) -> frozenset[str]:
        """Distinct error identifiers."""
        return frozenset(e.type for e in self.errors)

    @property
    def warning_types(self) -> frozenset[str]:
        """Distinct warning identifiers."""
        return frozenset(w.type for w in self.warnings)
