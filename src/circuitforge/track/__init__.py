"""Track geometry, path conditioning, curvature analysis and validation."""

from circuitforge.track.conditioning import (
    assign_track_properties,
    condition_drawn_path,
    condition_procedural_points,
    process_drawing_to_waypoints,
)
from circuitforge.track.config import ProcessingOptions, build_processing_options
from circuitforge.track.curvature import (
    analyze_track_curvature,
    count_turns_by_type,
    estimate_difficulty,
)
from circuitforge.track.layouts import generate_figure8_track, generate_oval_track
from circuitforge.track.models import (
    Bounds,
    CurvatureData,
    Point2D,
    Segment,
    TrackStats,
    ValidationIssue,
    ValidationResult,
    Waypoint,
)
from circuitforge.track.validation import (
    can_auto_close,
    suggest_fixes,
    validate_track,
    validate_waypoints,
    would_cause_intersection,
)

__all__ = [
    "Bounds",
    "CurvatureData",
    "Point2D",
    "ProcessingOptions",
    "Segment",
    "TrackStats",
    "ValidationIssue",
    "ValidationResult",
    "Waypoint",
    "analyze_track_curvature",
    "assign_track_properties",
    "build_processing_options",
    "can_auto_close",
    "condition_drawn_path",
    "condition_procedural_points",
    "count_turns_by_type",
    "estimate_difficulty",
    "generate_figure8_track",
    "generate_oval_track",
    "process_drawing_to_waypoints",
    "suggest_fixes",
    "validate_track",
    "validate_waypoints",
    "would_cause_intersection",
]
