"""
Crop Rectangle Calculation

Computes the largest crop window of a target aspect ratio that fits the
source image, centered on an anchor point and clamped inside the source.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import List, Tuple

from ..schemas.frame_plan import CropRect

logger = logging.getLogger(__name__)

# Aspect ratios closer than this are treated as equal (no micro-crops)
ASPECT_TOLERANCE = 0.02

# Rounded crop sizes are searched until w/h is this close to the target
ASPECT_PRECISION = 1e-3

# Largest share of the crop side given up to reach ASPECT_PRECISION
MAX_PRECISION_SHRINK = 0.05


@dataclass
class CropValidation:
    """Result of validate_crop_rect."""

    valid: bool
    errors: List[str] = field(default_factory=list)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _integer_crop_size(
    crop_w: float,
    crop_h: float,
    src_width: int,
    src_height: int,
    target_aspect: float,
) -> Tuple[int, int]:
    """
    Round a float crop size to whole pixels that keep target_aspect.

    Rounding each side on its own can leave w/h well off the target on
    small sources. Starting from the rounded size, each side is walked
    down one pixel at a time with the other side derived from it, and the
    first in-bounds pair within ASPECT_PRECISION wins. Crops too small to
    reach that precision keep the plain rounded size.
    """
    base_w = int(_clamp(_round_half_up(crop_w), 1, src_width))
    base_h = int(_clamp(_round_half_up(crop_h), 1, src_height))

    max_steps = max(1, int(min(base_w, base_h) * MAX_PRECISION_SHRINK))
    for step in range(min(max_steps, base_w, base_h)):
        w = base_w - step
        h = _round_half_up(w / target_aspect)
        if 1 <= h <= src_height and abs(w / h - target_aspect) < ASPECT_PRECISION:
            return w, h

        h = base_h - step
        w = _round_half_up(h * target_aspect)
        if 1 <= w <= src_width and abs(w / h - target_aspect) < ASPECT_PRECISION:
            return w, h

    logger.debug(
        f"No {target_aspect:.4f} crop within {ASPECT_PRECISION} near {base_w}x{base_h}, "
        f"keeping rounded size"
    )
    return base_w, base_h


def calculate_aspect_ratio(width: float, height: float) -> float:
    """Width/height, or 1.0 for a zero height."""
    if height == 0:
        return 1.0
    return width / height


def compute_crop_rect(
    src_width: int,
    src_height: int,
    target_aspect: float,
    anchor_x: float = 0.5,
    anchor_y: float = 0.5,
    headroom_bias: float = 0.0,
) -> CropRect:
    """
    Compute a crop rectangle for a target aspect ratio.

    The crop keeps the full extent of whichever source dimension is
    proportionally smaller and derives the other from target_aspect.
    The window is centered on the anchor (shifted up by headroom_bias
    of the crop height) and its origin clamped so it stays in bounds.

    Args:
        src_width: Source width in pixels
        src_height: Source height in pixels
        target_aspect: Target aspect ratio (width/height), e.g. 16/9
        anchor_x: Anchor X (0.0-1.0 normalized)
        anchor_y: Anchor Y (0.0-1.0 normalized)
        headroom_bias: Fraction of crop height to shift the anchor upward

    Returns:
        CropRect in integer source pixels

    Raises:
        ValueError: If dimensions or aspect ratio are not positive
    """
    if src_width <= 0 or src_height <= 0:
        raise ValueError(f"Source dimensions must be positive, got {src_width}x{src_height}")
    if not math.isfinite(target_aspect) or target_aspect <= 0:
        raise ValueError(f"Target aspect must be a positive number, got {target_aspect}")

    src_aspect = src_width / src_height

    # Near-identical aspect: keep the full frame
    if abs(src_aspect - target_aspect) <= ASPECT_TOLERANCE:
        return CropRect(x=0, y=0, w=src_width, h=src_height)

    if src_aspect > target_aspect:
        # Source is wider - keep full height
        crop_h = float(src_height)
        crop_w = crop_h * target_aspect
    else:
        # Source is taller - keep full width
        crop_w = float(src_width)
        crop_h = crop_w / target_aspect

    crop_w = min(crop_w, src_width)
    crop_h = min(crop_h, src_height)

    anchor_px_x = _clamp(anchor_x, 0.0, 1.0) * src_width
    anchor_px_y = _clamp(anchor_y, 0.0, 1.0) * src_height

    if headroom_bias > 0:
        anchor_px_y = max(0.0, anchor_px_y - crop_h * headroom_bias)

    # Size is rounded before the origin so the clamp holds in integer pixels
    w, h = _integer_crop_size(crop_w, crop_h, src_width, src_height, target_aspect)

    x = int(_clamp(_round_half_up(anchor_px_x - w / 2), 0, src_width - w))
    y = int(_clamp(_round_half_up(anchor_px_y - h / 2), 0, src_height - h))

    return CropRect(x=x, y=y, w=w, h=h)


def validate_crop_rect(
    crop: CropRect,
    src_width: int,
    src_height: int,
    target_aspect: float,
    tolerance: float = ASPECT_TOLERANCE,
) -> CropValidation:
    """
    Check a crop rectangle against its source bounds and target aspect.

    Args:
        crop: Crop rectangle to check
        src_width: Source width (display orientation)
        src_height: Source height (display orientation)
        target_aspect: Expected aspect ratio
        tolerance: Allowed absolute aspect difference

    Returns:
        CropValidation with a list of human-readable errors
    """
    errors: List[str] = []

    if crop.x < 0:
        errors.append(f"crop.x ({crop.x}) < 0")
    if crop.y < 0:
        errors.append(f"crop.y ({crop.y}) < 0")
    if crop.x + crop.w > src_width:
        errors.append(f"crop.x + crop.w ({crop.x + crop.w}) > srcWidth ({src_width})")
    if crop.y + crop.h > src_height:
        errors.append(f"crop.y + crop.h ({crop.y + crop.h}) > srcHeight ({src_height})")
    if crop.w > src_width:
        errors.append(f"crop.w ({crop.w}) > srcWidth ({src_width})")
    if crop.h > src_height:
        errors.append(f"crop.h ({crop.h}) > srcHeight ({src_height})")

    aspect_diff = abs(crop.aspect - target_aspect)
    if aspect_diff > tolerance:
        errors.append(
            f"crop aspect ({crop.aspect:.4f}) differs from target "
            f"({target_aspect:.4f}) by {aspect_diff:.4f}"
        )

    return CropValidation(valid=not errors, errors=errors)
