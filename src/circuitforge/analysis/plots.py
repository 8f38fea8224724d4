"""Plot generation for track diagnostics."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import matplotlib
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from circuitforge.track.geometry import points_to_array
from circuitforge.track.models import Point2D, ValidationResult, Waypoint

matplotlib.use("Agg")

PLOT_FORMATS = (".png", ".pdf")
RASTER_DPI = 180


def _save_layout_figure(fig: Figure, out_base: Path) -> tuple[Path, ...]:
    """Write a figure once per entry of :data:`PLOT_FORMATS` and close it.

    Args:
        fig: Figure object to persist.
        out_base: Output path without suffix.

    Returns:
        Written file paths in :data:`PLOT_FORMATS` order.
    """
    out_base.parent.mkdir(parents=True, exist_ok=True)
    paths = tuple(out_base.with_suffix(suffix) for suffix in PLOT_FORMATS)
    for path in paths:
        fig.savefig(path, dpi=RASTER_DPI, bbox_inches="tight")
    plt.close(fig)
    return paths


def plot_track_layout(
    track: Sequence[Point2D] | Sequence[Waypoint],
    out_base: str | Path,
    validation: ValidationResult | None = None,
    title: str = "Track Layout",
) -> tuple[Path, ...]:
    """Plot a closed centreline with checkpoints and validation findings.

    Waypoint inputs are coloured by width and have their checkpoints marked.
    Error locations of ``validation`` are drawn as red crosses so the
    offending region of a drawn path can be found.

    Args:
        track: Ordered points or waypoints of the loop.
        out_base: Output path without suffix.
        validation: Optional validation result to annotate.
        title: Figure title.

    Returns:
        Paths of the written PNG and PDF files.
    """
    coords = points_to_array(track)
    fig, ax = plt.subplots(figsize=(7, 7))

    if coords.shape[0] > 0:
        loop = np.vstack([coords, coords[:1]])
        ax.plot(loop[:, 0], loop[:, 1], color="0.4", lw=1.2, zorder=1)

    waypoints = [p for p in track if isinstance(p, Waypoint)]
    if waypoints and len(waypoints) == len(track):
        widths = np.asarray([wp.width for wp in waypoints], dtype=float)
        scatter = ax.scatter(coords[:, 0], coords[:, 1], c=widths, s=14, cmap="viridis", zorder=2)
        fig.colorbar(scatter, ax=ax, label="Width [m]", shrink=0.8)
        checkpoints = coords[np.asarray([wp.is_checkpoint for wp in waypoints], dtype=bool)]
        ax.scatter(
            checkpoints[:, 0],
            checkpoints[:, 1],
            marker="s",
            s=60,
            facecolors="none",
            edgecolors="k",
            label="Checkpoint",
            zorder=3,
        )
    elif coords.shape[0] > 0:
        ax.scatter(coords[:, 0], coords[:, 1], s=10, zorder=2)

    if validation is not None:
        located = [e.location for e in validation.errors if e.location is not None]
        if located:
            marks = points_to_array(located)
            ax.scatter(
                marks[:, 0], marks[:, 1], marker="x", s=80, color="red", label="Error", zorder=4
            )
        status = "valid" if validation.is_valid else f"{len(validation.errors)} error(s)"
        title = f"{title} ({status}, {validation.stats.length:.0f} m)"

    ax.set_aspect("equal")
    ax.set_xlabel("x [m]")
    ax.set_ylabel("z [m]")
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    if ax.get_legend_handles_labels()[0]:
        ax.legend(loc="best")
    return _save_layout_figure(fig, Path(out_base))
