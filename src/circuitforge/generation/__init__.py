"""Procedural circuit generation."""

from circuitforge.generation.config import GenerationOptions, build_generation_options
from circuitforge.generation.procedural import (
    difficulty_width_multiplier,
    generate_track,
    generate_track_or_fallback,
)
from circuitforge.generation.templates import (
    CornerTemplate,
    get_corner_template,
    get_corner_template_names,
)

__all__ = [
    "CornerTemplate",
    "GenerationOptions",
    "build_generation_options",
    "difficulty_width_multiplier",
    "generate_track",
    "generate_track_or_fallback",
    "get_corner_template",
    "get_corner_template_names",
]
