"""
Frame Planning

Composes saliency estimation and crop calculation into a FramePlan for a
decoded image. Reads EXIF orientation so the crop is expressed in display
orientation; the pixels themselves are never rotated or cropped here.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np
from PIL import Image

from ..errors import PhotomotionError, UnsupportedImageError
from ..schemas.frame_plan import (
    Anchor,
    BatchPlanResult,
    FramePlan,
    FramePlanOptions,
)
from .cache import FramePlanCache
from .crop import compute_crop_rect
from .saliency import estimate_saliency

logger = logging.getLogger(__name__)

# EXIF tag id for Orientation
ORIENTATION_TAG = 0x0112

# Anchor Y range used when stabilizing low-confidence anchors
STABLE_ANCHOR_Y_RANGE = (0.2, 0.8)

# Transposes that bring each supported orientation upright
_ORIENTATION_TRANSPOSE = {
    3: Image.Transpose.ROTATE_180,
    6: Image.Transpose.ROTATE_270,
    8: Image.Transpose.ROTATE_90,
}

ImageInput = Union[Image.Image, np.ndarray]


@dataclass
class BatchPlanInput:
    """One image of a batch; image may also be a path to open."""

    image: Union[ImageInput, str, Path]
    image_key: Optional[str] = None
    target_aspect: Optional[float] = None
    options: Optional[FramePlanOptions] = None


def orientation_to_rotation(orientation: Optional[int]) -> int:
    """
    Normalize EXIF orientation to clockwise rotation degrees.

    1=0, 3=180, 6=90 CW, 8=270 CW. Mirrored and unknown orientations
    are treated as upright.
    """
    return {1: 0, 3: 180, 6: 90, 8: 270}.get(orientation or 1, 0)


def _read_orientation(image: Image.Image) -> int:
    try:
        return int(image.getexif().get(ORIENTATION_TAG, 1))
    except (TypeError, ValueError):
        return 1


def _to_pil(image: ImageInput) -> Tuple[Image.Image, int]:
    """Return an upright PIL image and its EXIF orientation."""
    if isinstance(image, Image.Image):
        orientation = _read_orientation(image)
        transpose = _ORIENTATION_TRANSPOSE.get(orientation)
        upright = image.transpose(transpose) if transpose is not None else image
        return upright, orientation

    if isinstance(image, np.ndarray):
        if image.ndim not in (2, 3) or image.size == 0:
            raise UnsupportedImageError(f"Unsupported array shape for image: {image.shape}")
        arr = image
        if arr.dtype != np.uint8:
            arr = np.clip(arr, 0, 255).astype(np.uint8)
        if arr.ndim == 3 and arr.shape[2] not in (3, 4):
            raise UnsupportedImageError(f"Unsupported channel count: {arr.shape[2]}")
        return Image.fromarray(np.ascontiguousarray(arr)), 1

    raise UnsupportedImageError(f"Unsupported image input type: {type(image).__name__}")


def _score_pixels(image: Image.Image, max_dimension: int) -> Tuple[np.ndarray, int, int]:
    """Downscale so the long edge is at most max_dimension; return RGBA pixels."""
    width, height = image.size
    scale = min(1.0, max_dimension / width, max_dimension / height)
    score_width = max(1, round(width * scale))
    score_height = max(1, round(height * scale))

    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA")
    small = image.resize((score_width, score_height), Image.Resampling.BILINEAR)
    return np.asarray(small.convert("RGBA")), score_width, score_height


def plan_frame(
    image: ImageInput,
    target_aspect: float = 16 / 9,
    options: Optional[FramePlanOptions] = None,
) -> FramePlan:
    """
    Create a frame plan for an image.

    Steps:
    1. Read EXIF orientation and bring the image upright for analysis
    2. Downscale to options.max_score_dimension on the long edge
    3. Estimate the saliency anchor (Sobel edge centroid)
    4. Compute the crop rectangle around the anchor with headroom bias

    Args:
        image: Decoded PIL image or (H, W[, C]) uint8 array
        target_aspect: Target aspect ratio (width/height)
        options: FramePlanOptions (defaults if None)

    Returns:
        FramePlan with crop in display-orientation source pixels

    Raises:
        UnsupportedImageError: If image is not a PIL image or array
        ValueError: If target_aspect is not positive
    """
    opts = options or FramePlanOptions()

    upright, orientation = _to_pil(image)
    rotation_deg = orientation_to_rotation(orientation)
    src_width, src_height = upright.size

    pixels, score_width, score_height = _score_pixels(upright, opts.max_score_dimension)
    saliency = estimate_saliency(pixels, score_width, score_height)

    anchor_x, anchor_y = saliency.anchor
    confidence = saliency.confidence
    reason = "flat image, center fallback" if saliency.is_degenerate else "gradient centroid"

    if opts.stabilize_below is not None and confidence < opts.stabilize_below:
        low, high = STABLE_ANCHOR_Y_RANGE
        clamped_y = max(low, min(high, anchor_y))
        if clamped_y != anchor_y:
            reason += f" (anchorY clamped {anchor_y:.2f}->{clamped_y:.2f})"
            anchor_y = clamped_y

    crop = compute_crop_rect(
        src_width,
        src_height,
        target_aspect,
        anchor_x,
        anchor_y,
        opts.headroom_bias,
    )
    if opts.headroom_bias > 0:
        reason += f" (headroom bias {opts.headroom_bias * 100:.1f}%)"

    safe_mode_used = False
    if opts.safe_mode_below is not None and confidence < opts.safe_mode_below:
        crop = compute_crop_rect(src_width, src_height, target_aspect, 0.5, 0.5, 0.0)
        reason = f"low confidence ({confidence:.2f}), forced center crop"
        safe_mode_used = True
        logger.warning(
            f"Safe mode: confidence {confidence:.2f} < {opts.safe_mode_below:.2f}, using center crop"
        )

    plan = FramePlan(
        rotation_deg=rotation_deg,
        crop=crop,
        confidence=confidence,
        reason=reason,
        anchor=Anchor(x=anchor_x, y=anchor_y),
        needs_review=confidence < opts.confidence_threshold,
        safe_mode_used=safe_mode_used,
        source_width=src_width,
        source_height=src_height,
    )

    logger.debug(
        f"Frame plan {src_width}x{src_height} rot={rotation_deg} crop={crop.model_dump()} "
        f"confidence={confidence:.2f} review={plan.needs_review}"
    )
    return plan


def load_image(path: Union[str, Path]) -> Image.Image:
    """
    Open and fully decode an image file.

    Raises:
        FileNotFoundError: If path doesn't exist
        PIL.UnidentifiedImageError: If the file is not a readable image
    """
    with Image.open(path) as img:
        img.load()
        return img


def _plan_one(
    index: int,
    item: BatchPlanInput,
    default_target_aspect: float,
    default_options: Optional[FramePlanOptions],
    cache: Optional[FramePlanCache],
) -> BatchPlanResult:
    target_aspect = item.target_aspect if item.target_aspect is not None else default_target_aspect

    if cache is not None and item.image_key:
        cached = cache.get(item.image_key, target_aspect)
        if cached is not None:
            return BatchPlanResult(index=index, image_key=item.image_key, plan=cached)

    try:
        image = item.image
        if isinstance(image, (str, Path)):
            image = load_image(image)
        plan = plan_frame(image, target_aspect, item.options or default_options)
    except (PhotomotionError, ValueError, TypeError, OSError, Image.DecompressionBombError) as e:
        logger.warning(f"Frame plan failed for image {index} ({item.image_key or 'unkeyed'}): {e}")
        return BatchPlanResult(index=index, image_key=item.image_key, error=str(e))

    if cache is not None and item.image_key:
        cache.store(item.image_key, target_aspect, plan)

    return BatchPlanResult(index=index, image_key=item.image_key, plan=plan)


def plan_frames_batch(
    inputs: Sequence[BatchPlanInput],
    default_target_aspect: float = 16 / 9,
    options: Optional[FramePlanOptions] = None,
    cache: Optional[FramePlanCache] = None,
    max_workers: Optional[int] = None,
) -> List[BatchPlanResult]:
    """
    Create frame plans for many images.

    Images are planned independently on a thread pool. A failure on one
    image is recorded in its result and never aborts the batch.

    Args:
        inputs: Images to plan, in sequence order
        default_target_aspect: Aspect used when an input has none
        options: Default FramePlanOptions for inputs without their own
        cache: Optional FramePlanCache consulted by image_key
        max_workers: Thread pool size (executor default if None)

    Returns:
        One BatchPlanResult per input, in input order
    """
    if not inputs:
        return []

    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        results = list(
            pool.map(
                lambda pair: _plan_one(pair[0], pair[1], default_target_aspect, options, cache),
                enumerate(inputs),
            )
        )

    failed = sum(1 for r in results if not r.ok)
    review = sum(1 for r in results if r.ok and r.plan.needs_review)
    logger.info(f"Planned {len(results)} frames: {failed} failed, {review} flagged for review")
    return results
