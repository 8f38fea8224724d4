"""Custom exceptions for track construction."""


class CircuitForgeError(Exception):
    """Base exception for track construction errors."""


class ConfigurationError(CircuitForgeError):
    """Raised when processing or generation configuration is invalid."""


class TrackDataError(CircuitForgeError):
    """Raised when layout parameters cannot produce a usable point set."""
