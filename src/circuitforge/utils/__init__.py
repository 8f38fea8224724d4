"""Utility helpers."""

from circuitforge.utils.constants import SMALL_EPS
from circuitforge.utils.exceptions import (
    CircuitForgeError,
    ConfigurationError,
    TrackDataError,
)
from circuitforge.utils.logging import configure_logging

__all__ = [
    "SMALL_EPS",
    "CircuitForgeError",
    "ConfigurationError",
    "TrackDataError",
    "configure_logging",
]
