"""Closed-loop racing circuit construction from drawn or generated points."""

from circuitforge.generation import GenerationOptions, generate_track, generate_track_or_fallback
from circuitforge.track import (
    Point2D,
    ProcessingOptions,
    ValidationResult,
    Waypoint,
    generate_figure8_track,
    generate_oval_track,
    process_drawing_to_waypoints,
    validate_track,
    validate_waypoints,
)

__all__ = [
    "GenerationOptions",
    "Point2D",
    "ProcessingOptions",
    "ValidationResult",
    "Waypoint",
    "generate_figure8_track",
    "generate_oval_track",
    "generate_track",
    "generate_track_or_fallback",
    "process_drawing_to_waypoints",
    "validate_track",
    "validate_waypoints",
]
