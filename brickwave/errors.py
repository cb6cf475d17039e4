from __future__ import annotations


class BrickwaveError(Exception):
    """Base error for the brickwave library."""


class InvalidNoiseTypeError(BrickwaveError, ValueError):
    """Raised when a noise color is not one of the supported types."""


class InvalidLayerError(BrickwaveError, ValueError):
    """Raised when an ambient layer is unknown or does not fit the base signal."""


class InvalidConfigError(BrickwaveError):
    """Raised when render options cannot be parsed or validated."""
