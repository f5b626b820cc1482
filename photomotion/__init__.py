"""
photomotion

Framing and camera motion for turning still photos into cinematic shots:
saliency-anchored crops (photomotion.reframe) and documentary-style
Ken Burns motion (photomotion.motion_engine).
"""

from .errors import (
    InvalidImageError,
    PhotomotionError,
    UnsupportedImageError,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidImageError",
    "PhotomotionError",
    "UnsupportedImageError",
    "__version__",
]
