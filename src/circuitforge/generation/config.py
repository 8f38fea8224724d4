"""Procedural generation configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass

from circuitforge.track.models import VALID_DIFFICULTIES, Difficulty
from circuitforge.utils.exceptions import ConfigurationError

DEFAULT_MIN_POINTS = 6
DEFAULT_MAX_POINTS = 10
DEFAULT_WORLD_SIZE = 200.0
DEFAULT_TARGET_LAP_TIME = 75.0
DEFAULT_DIFFICULTY: Difficulty = "medium"
DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_INCLUDE_CORNER_TEMPLATES = True
MIN_BASE_POINTS = 3


@dataclass(frozen=True)
class GenerationOptions:
    """Controls for procedural track generation.

    Args:
        min_points: Minimum number of scattered base points.
        max_points: Maximum number of scattered base points (inclusive).
        world_size: Edge length of the square world the track is placed in
            [m]. Margins, point separation and straight lengths scale with it.
        target_lap_time: Desired lap time [s]. Informational only; it is not
            enforced numerically.
        difficulty: Difficulty tier (``easy``, ``medium``, ``hard`` or
            ``expert``).
        max_attempts: Maximum number of independent generation attempts.
        include_corner_templates: Whether to splice signature corner shapes
            into the base layout.
    """

    min_points: int = DEFAULT_MIN_POINTS
    max_points: int = DEFAULT_MAX_POINTS
    world_size: float = DEFAULT_WORLD_SIZE
    target_lap_time: float = DEFAULT_TARGET_LAP_TIME
    difficulty: Difficulty = DEFAULT_DIFFICULTY
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    include_corner_templates: bool = DEFAULT_INCLUDE_CORNER_TEMPLATES

    def validate(self) -> None:
        """Validate generation settings.

        Raises:
            circuitforge.utils.exceptions.ConfigurationError: If any setting
                violates its bound.
        """
        if self.min_points < MIN_BASE_POINTS:
            msg = f"min_points must be at least {MIN_BASE_POINTS}"
            raise ConfigurationError(msg)
        if self.max_points < self.min_points:
            msg = "max_points must be greater than or equal to min_points"
            raise ConfigurationError(msg)
        if self.world_size <= 0.0:
            msg = "world_size must be positive"
            raise ConfigurationError(msg)
        if self.target_lap_time <= 0.0:
            msg = "target_lap_time must be positive"
            raise ConfigurationError(msg)
        if self.difficulty not in VALID_DIFFICULTIES:
            msg = (
                "difficulty must be one of "
                f"{VALID_DIFFICULTIES}, got: {self.difficulty!r}"
            )
            raise ConfigurationError(msg)
        if self.max_attempts < 1:
            msg = "max_attempts must be at least 1"
            raise ConfigurationError(msg)
        if not isinstance(self.include_corner_templates, bool):
            msg = "include_corner_templates must be a boolean"
            raise ConfigurationError(msg)


def build_generation_options(
    min_points: int = DEFAULT_MIN_POINTS,
    max_points: int = DEFAULT_MAX_POINTS,
    world_size: float = DEFAULT_WORLD_SIZE,
    target_lap_time: float = DEFAULT_TARGET_LAP_TIME,
    difficulty: Difficulty = DEFAULT_DIFFICULTY,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    include_corner_templates: bool = DEFAULT_INCLUDE_CORNER_TEMPLATES,
) -> GenerationOptions:
    """Build validated generation options with sensible defaults.

    Args:
        min_points: Minimum number of scattered base points.
        max_points: Maximum number of scattered base points.
        world_size: Edge length of the square world [m].
        target_lap_time: Informational target lap time [s].
        difficulty: Difficulty tier.
        max_attempts: Maximum number of generation attempts.
        include_corner_templates: Whether to splice corner templates.

    Returns:
        Fully validated generation options.

    Raises:
        circuitforge.utils.exceptions.ConfigurationError: If any setting
            violates its bound.
    """
    options = GenerationOptions(
        min_points=min_points,
        max_points=max_points,
        world_size=world_size,
        target_lap_time=target_lap_time,
        difficulty=difficulty,
        max_attempts=max_attempts,
        include_corner_templates=include_corner_templates,
    )
    options.validate()
    return options
