"""
Saliency Estimation

Finds the visual focal point of a small, downsampled image as the centroid
of its edge energy. Luminance uses Rec. 601 weights and edge energy is the
3x3 Sobel gradient magnitude at every interior pixel.
"""

import logging
from dataclasses import dataclass
from typing import Tuple, Union

import numpy as np

from ..errors import InvalidImageError, UnsupportedImageError

logger = logging.getLogger(__name__)

LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)

# Mean gradient magnitude that maps to full confidence
CONFIDENCE_NORMALIZER = 50.0
MIN_CONFIDENCE = 0.3
MAX_CONFIDENCE = 1.0

PixelBuffer = Union[bytes, bytearray, memoryview, np.ndarray]


@dataclass(frozen=True)
class SaliencyResult:
    """
    Edge-weighted focal point of an image.

    Attributes:
        anchor_x: Normalized focal X (0.0-1.0)
        anchor_y: Normalized focal Y (0.0-1.0)
        confidence: Edge strength mapped into [0.3, 1.0]
        total_weight: Sum of gradient magnitudes
    """

    anchor_x: float
    anchor_y: float
    confidence: float
    total_weight: float

    @property
    def anchor(self) -> Tuple[float, float]:
        return (self.anchor_x, self.anchor_y)

    @property
    def is_degenerate(self) -> bool:
        return self.total_weight == 0.0


def _as_pixel_array(pixels: PixelBuffer, width: int, height: int) -> np.ndarray:
    """
    Normalize a pixel buffer to a (height, width, channels) array.

    Raw buffers are interpreted as packed 8-bit RGBA (or RGB, inferred
    from the length).

    Raises:
        InvalidImageError: If the buffer does not match width x height
        UnsupportedImageError: If the buffer is not bytes-like or an ndarray
    """
    if width <= 0 or height <= 0:
        raise InvalidImageError(f"Image dimensions must be positive, got {width}x{height}")

    if isinstance(pixels, (bytes, bytearray, memoryview)):
        arr = np.frombuffer(pixels, dtype=np.uint8)
    elif isinstance(pixels, np.ndarray):
        arr = pixels
    else:
        raise UnsupportedImageError(
            f"Unsupported pixel buffer type: {type(pixels).__name__}"
        )

    if arr.ndim == 1:
        pixel_count = width * height
        if arr.size % pixel_count != 0 or arr.size // pixel_count not in (3, 4):
            raise InvalidImageError(
                f"Buffer of {arr.size} values does not match {width}x{height} RGB/RGBA"
            )
        arr = arr.reshape(height, width, arr.size // pixel_count)

    if arr.ndim != 3 or arr.shape[0] != height or arr.shape[1] != width or arr.shape[2] < 3:
        raise InvalidImageError(
            f"Expected pixel array of shape ({height}, {width}, 3|4), got {arr.shape}"
        )

    return arr


def luminance(pixels: np.ndarray) -> np.ndarray:
    """Convert an (H, W, C>=3) array to float64 luminance."""
    return pixels[..., :3].astype(np.float64) @ LUMA_WEIGHTS


def sobel_magnitude(luma: np.ndarray) -> np.ndarray:
    """
    Sobel gradient magnitude over the interior of a luminance image.

    Returns:
        Array of shape (H-2, W-2); element [i, j] is pixel (j+1, i+1)
    """
    top_left = luma[:-2, :-2]
    top = luma[:-2, 1:-1]
    top_right = luma[:-2, 2:]
    left = luma[1:-1, :-2]
    right = luma[1:-1, 2:]
    bottom_left = luma[2:, :-2]
    bottom = luma[2:, 1:-1]
    bottom_right = luma[2:, 2:]

    gx = (top_right + 2.0 * right + bottom_right) - (top_left + 2.0 * left + bottom_left)
    gy = (bottom_left + 2.0 * bottom + bottom_right) - (top_left + 2.0 * top + top_right)

    return np.hypot(gx, gy)


def estimate_saliency(pixels: PixelBuffer, width: int, height: int) -> SaliencyResult:
    """
    Estimate the focal point of a downsampled image.

    The anchor is the gradient-magnitude-weighted centroid normalized by
    the image size. A flat image (no gradient anywhere) falls back to the
    center with floor confidence.

    Args:
        pixels: RGBA/RGB bytes or an (H, W, C) array, at most a few dozen
                pixels on the long edge
        width: Buffer width in pixels
        height: Buffer height in pixels

    Returns:
        SaliencyResult

    Raises:
        InvalidImageError: If the buffer does not match width x height
        UnsupportedImageError: If the buffer type is not supported
    """
    arr = _as_pixel_array(pixels, width, height)

    if width < 3 or height < 3:
        return SaliencyResult(0.5, 0.5, MIN_CONFIDENCE, 0.0)

    magnitude = sobel_magnitude(luminance(arr))
    total_weight = float(magnitude.sum())

    if total_weight == 0.0:
        return SaliencyResult(0.5, 0.5, MIN_CONFIDENCE, 0.0)

    xs = np.arange(1, width - 1, dtype=np.float64)
    ys = np.arange(1, height - 1, dtype=np.float64)
    sum_x = float(magnitude.sum(axis=0) @ xs)
    sum_y = float(magnitude.sum(axis=1) @ ys)

    anchor_x = sum_x / total_weight / width
    anchor_y = sum_y / total_weight / height

    mean_gradient = total_weight / (width * height)
    confidence = min(MAX_CONFIDENCE, max(MIN_CONFIDENCE, mean_gradient / CONFIDENCE_NORMALIZER))

    logger.debug(
        f"Saliency anchor=({anchor_x:.3f}, {anchor_y:.3f}) "
        f"confidence={confidence:.3f} mean_gradient={mean_gradient:.2f}"
    )

    return SaliencyResult(anchor_x, anchor_y, confidence, total_weight)
