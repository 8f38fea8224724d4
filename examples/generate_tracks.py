"""Generate, validate and plot circuits for every difficulty tier."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

from circuitforge import (
    GenerationOptions,
    Point2D,
    generate_track_or_fallback,
    process_drawing_to_waypoints,
    validate_waypoints,
)
from circuitforge.analysis import plot_track_layout
from circuitforge.track import estimate_difficulty, suggest_fixes
from circuitforge.track.models import VALID_DIFFICULTIES
from circuitforge.utils import configure_logging

WORLD_SIZE = 300.0
SEED = 2024
SKETCH_RADIUS = 70.0


def _sketched_loop(rng: np.random.Generator, count: int = 240) -> list[Point2D]:
    """Emulate a wobbly hand-drawn loop that stops just short of its start.

    Args:
        rng: Random generator for the pen jitter.
        count: Number of raw pen samples.

    Returns:
        Raw drawn points in drawing order.
    """
    angle = np.linspace(0.0, 1.97 * np.pi, count)
    radius = SKETCH_RADIUS + 12.0 * np.sin(2.0 * angle)
    jitter = rng.normal(0.0, 0.6, size=(count, 2))
    x = 1.4 * radius * np.cos(angle) + jitter[:, 0]
    z = radius * np.sin(angle) + jitter[:, 1]
    return [Point2D(float(xi), float(zi)) for xi, zi in zip(x, z)]


def main() -> None:
    """Build one generated circuit per difficulty plus a sketched one."""
    configure_logging(logging.INFO)
    logger = logging.getLogger("generate_tracks")

    project_root = Path(__file__).resolve().parents[1]
    output_dir = project_root / "examples" / "output" / "tracks"
    output_dir.mkdir(parents=True, exist_ok=True)

    rng = np.random.default_rng(SEED)
    tracks = {
        f"generated_{difficulty}": generate_track_or_fallback(
            GenerationOptions(world_size=WORLD_SIZE, difficulty=difficulty),
            rng,
        )
        for difficulty in VALID_DIFFICULTIES
    }
    tracks["sketched"] = process_drawing_to_waypoints(_sketched_loop(rng))

    for name, track in tracks.items():
        result = validate_waypoints(track)
        plot_track_layout(track, output_dir / name, validation=result, title=name)
        logger.info(
            "%s: %d waypoints, %.0f m, rated %s, valid=%s",
            name,
            result.stats.point_count,
            result.stats.length,
            estimate_difficulty([wp.point for wp in track]),
            result.is_valid,
        )
        for hint in suggest_fixes(result):
            logger.warning("%s: %s", name, hint)

    logger.info("Track artifacts written to %s", output_dir)


if __name__ == "__main__":
    main()
