"""Numerical tolerances shared across the geometry pipeline."""

SMALL_EPS: float = 1e-9
PARALLEL_EPS: float = 1e-10
DEGENERATE_SIDE_EPS: float = 1e-6
