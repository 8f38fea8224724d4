"""Diagnostic output helpers."""

from circuitforge.analysis.plots import plot_track_layout

__all__ = ["plot_track_layout"]
