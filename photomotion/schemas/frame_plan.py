"""
Pydantic v2 schemas for frame plans.

A FramePlan is produced once per source image and handed to an external
cropper. Crop coordinates are source pixels in display orientation, i.e.
after the EXIF rotation in rotation_deg has been applied.

Example usage:
    from photomotion.schemas.frame_plan import FramePlan

    payload = plan.model_dump()
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field


class CropRect(BaseModel):
    """Crop window in integer source pixels."""

    model_config = {"frozen": True}

    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)
    w: int = Field(..., gt=0)
    h: int = Field(..., gt=0)

    @property
    def aspect(self) -> float:
        return self.w / self.h


class Anchor(BaseModel):
    model_config = {"frozen": True}

    x: float = Field(..., ge=0.0, le=1.0)
    y: float = Field(..., ge=0.0, le=1.0)


class FramePlanOptions(BaseModel):
    """Options accepted by plan_frame."""

    model_config = {"frozen": True}

    confidence_threshold: float = Field(default=0.55, ge=0.0, le=1.0)
    headroom_bias: float = Field(default=0.075, ge=0.0, lt=1.0)
    max_score_dimension: int = Field(default=64, ge=3)
    # Opt-in: clamp anchor y into [0.2, 0.8] below this confidence
    stabilize_below: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    # Opt-in: force a centered crop below this confidence
    safe_mode_below: Optional[float] = Field(default=None, ge=0.0, le=1.0)


class FramePlan(BaseModel):
    """Framing decision for a single source image."""

    model_config = {"frozen": True}

    rotation_deg: Literal[0, 90, 180, 270] = 0
    crop: CropRect
    confidence: float = Field(..., ge=0.0, le=1.0)
    reason: str
    anchor: Anchor
    needs_review: bool = False
    safe_mode_used: bool = False
    source_width: int = Field(..., gt=0)
    source_height: int = Field(..., gt=0)


class BatchPlanResult(BaseModel):
    """Outcome for one image of a batch; exactly one of plan/error is set."""

    index: int = Field(..., ge=0)
    image_key: Optional[str] = None
    plan: Optional[FramePlan] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.plan is not None
