"""Configuration for conditioning hand-drawn paths."""

from __future__ import annotations

from dataclasses import dataclass

from circuitforge.utils.exceptions import ConfigurationError

DEFAULT_SIMPLIFICATION_TOLERANCE = 3.0
DEFAULT_SMOOTHING_ITERATIONS = 2
DEFAULT_MIN_POINT_SPACING = 5.0
DEFAULT_AUTO_CLOSE = True
DEFAULT_CLOSE_THRESHOLD = 20.0


@dataclass(frozen=True)
class ProcessingOptions:
    """Controls for the drawn-path conditioning pipeline.

    Args:
        simplification_tolerance: Douglas-Peucker deviation tolerance [m].
        smoothing_iterations: Number of open-path Laplacian smoothing passes
            applied after simplification.
        min_point_spacing: Target spacing of the resampled path [m]. Raw
            points closer than half this distance to their predecessor are
            dropped before simplification.
        auto_close: Whether to merge nearby endpoints into a closed loop.
        close_threshold: Maximum endpoint gap that is merged when
            ``auto_close`` is enabled [m].
    """

    simplification_tolerance: float = DEFAULT_SIMPLIFICATION_TOLERANCE
    smoothing_iterations: int = DEFAULT_SMOOTHING_ITERATIONS
    min_point_spacing: float = DEFAULT_MIN_POINT_SPACING
    auto_close: bool = DEFAULT_AUTO_CLOSE
    close_threshold: float = DEFAULT_CLOSE_THRESHOLD

    def validate(self) -> None:
        """Validate conditioning settings.

        Raises:
            circuitforge.utils.exceptions.ConfigurationError: If any setting
                violates its bound.
        """
        if self.simplification_tolerance < 0.0:
            msg = "simplification_tolerance must be non-negative"
            raise ConfigurationError(msg)
        if self.smoothing_iterations < 0:
            msg = "smoothing_iterations must be non-negative"
            raise ConfigurationError(msg)
        if self.min_point_spacing <= 0.0:
            msg = "min_point_spacing must be positive"
            raise ConfigurationError(msg)
        if self.close_threshold < 0.0:
            msg = "close_threshold must be non-negative"
            raise ConfigurationError(msg)
        if not isinstance(self.auto_close, bool):
            msg = "auto_close must be a boolean"
            raise ConfigurationError(msg)


def build_processing_options(
    simplification_tolerance: float = DEFAULT_SIMPLIFICATION_TOLERANCE,
    smoothing_iterations: int = DEFAULT_SMOOTHING_ITERATIONS,
    min_point_spacing: float = DEFAULT_MIN_POINT_SPACING,
    auto_close: bool = DEFAULT_AUTO_CLOSE,
    close_threshold: float = DEFAULT_CLOSE_THRESHOLD,
) -> ProcessingOptions:
    """Build validated conditioning options.

    Args:
        simplification_tolerance: Douglas-Peucker deviation tolerance [m].
        smoothing_iterations: Number of open-path smoothing passes.
        min_point_spacing: Target resampling spacing [m].
        auto_close: Whether to merge nearby endpoints.
        close_threshold: Maximum merged endpoint gap [m].

    Returns:
        Fully validated processing options.

    Raises:
        circuitforge.utils.exceptions.ConfigurationError: If any setting
            violates its bound.
    """
    options = ProcessingOptions(
        simplification_tolerance=simplification_tolerance,
        smoothing_iterations=smoothing_iterations,
        min_point_spacing=min_point_spacing,
        auto_close=auto_close,
        close_threshold=close_threshold,
    )
    options.validate()
    return options
