"""
Pydantic schemas for photomotion.
"""

from .frame_plan import (
    Anchor,
    BatchPlanResult,
    CropRect,
    FramePlan,
    FramePlanOptions,
)
from .motion import (
    DocumentaryMotionConfig,
    ShotMotionParams,
    get_documentary_defaults,
)

__all__ = [
    "Anchor",
    "BatchPlanResult",
    "CropRect",
    "FramePlan",
    "FramePlanOptions",
    "DocumentaryMotionConfig",
    "ShotMotionParams",
    "get_documentary_defaults",
]
