"""
Error types raised at the photomotion boundary.

Degenerate inputs (flat images, unsatisfiable crops, low confidence) are
never errors; they degrade to safe defaults. These exceptions cover
malformed arguments only, and are local to the image or shot being
processed.
"""


class PhotomotionError(Exception):
    """Base class for photomotion errors."""

    pass


class InvalidImageError(PhotomotionError, ValueError):
    """Pixel buffer does not match its declared dimensions."""

    pass


class UnsupportedImageError(PhotomotionError, TypeError):
    """Image object is of a type the frame planner cannot read."""

    pass
