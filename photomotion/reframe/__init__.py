"""
Auto-Reframe for Still Images

Estimates the salient region of a photo and computes a crop window of the
target aspect ratio around it. The resulting FramePlan is handed to an
external cropper; no pixels are modified here.

Usage:
    from photomotion.reframe import plan_frame, FramePlanOptions

    plan = plan_frame(
        image,                      # PIL.Image.Image or numpy array
        target_aspect=16 / 9,
        options=FramePlanOptions(headroom_bias=0.075),
    )
    x, y, w, h = plan.crop.x, plan.crop.y, plan.crop.w, plan.crop.h
"""

from .saliency import (
    SaliencyResult,
    estimate_saliency,
)

from .crop import (
    ASPECT_TOLERANCE,
    CropValidation,
    calculate_aspect_ratio,
    compute_crop_rect,
    validate_crop_rect,
)

from .cache import (
    FramePlanCache,
    generate_cache_key,
)

from .frame_plan import (
    BatchPlanInput,
    load_image,
    orientation_to_rotation,
    plan_frame,
    plan_frames_batch,
)

__all__ = [
    # Saliency
    "SaliencyResult",
    "estimate_saliency",
    # Crop
    "ASPECT_TOLERANCE",
    "CropValidation",
    "calculate_aspect_ratio",
    "compute_crop_rect",
    "validate_crop_rect",
    # Cache
    "FramePlanCache",
    "generate_cache_key",
    # Frame plans
    "BatchPlanInput",
    "load_image",
    "orientation_to_rotation",
    "plan_frame",
    "plan_frames_batch",
]
