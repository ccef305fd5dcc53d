"""
Error types raised by the HOG descriptor pipeline.
"""


class HOGError(ValueError):
    """Base class for all descriptor pipeline errors."""


class InvalidInput(HOGError):
    """Image source is missing, unreadable or of the wrong type."""


class UnsupportedFormat(HOGError):
    """File extension is not one of the supported image formats."""


class CorruptFile(HOGError):
    """File header or pixel stream is malformed."""


class InvalidDimensions(HOGError):
    """Image (or requested size) has no pixels."""


class InvalidConfiguration(HOGError):
    """Cell, block or bin parameter is not a positive integer."""
