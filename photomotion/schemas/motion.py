"""
Pydantic v2 schemas for the documentary motion pack.

DocumentaryMotionConfig is the numeric policy shared by the preset planner
and the transform curve generator. One instance is built per render job and
never mutated.

Example usage:
    from photomotion.schemas.motion import DocumentaryMotionConfig

    config = DocumentaryMotionConfig(max_drift_percent=0.9)
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator


class DocumentaryMotionConfig(BaseModel):
    """Restrained "gallery documentary" camera policy."""

    model_config = {"frozen": True}

    # Preset weights for non-drift middle shots
    static_weight: float = Field(default=0.0, ge=0.0)
    push_in_weight: float = Field(default=0.70, ge=0.0)
    drift_weight: float = Field(default=0.25, ge=0.0)
    pull_back_weight: float = Field(default=0.0, ge=0.0)
    parallax_weight: float = Field(default=0.0, ge=0.0)

    transition_duration: float = Field(default=0.4, ge=0.0, description="Cross-dissolve seconds")

    # Push-in / pull-back scale range
    min_scale: float = Field(default=1.01, ge=1.0)
    max_scale: float = Field(default=1.035, ge=1.0)

    # Coupled zoom-pan scale range
    drift_min_scale: float = Field(default=1.03, ge=1.0)
    drift_max_scale: float = Field(default=1.06, ge=1.0)

    # Drift distance as percent of frame width
    min_drift_percent: float = Field(default=0.4, ge=0.0)
    max_drift_percent: float = Field(default=1.2, ge=0.0)

    hold_fraction: float = Field(
        default=0.25,
        ge=0.0,
        lt=1.0,
        description="Carried for renderers; sample_transform eases without a hold phase",
    )
    drift_safety_px: float = Field(default=4.0, ge=0.0)

    @model_validator(mode="after")
    def check_ranges(self) -> "DocumentaryMotionConfig":
        """Validate paired min/max bounds."""
        if self.min_scale > self.max_scale:
            raise ValueError(
                f"min_scale ({self.min_scale}) must not exceed max_scale ({self.max_scale})"
            )
        if self.drift_min_scale > self.drift_max_scale:
            raise ValueError(
                f"drift_min_scale ({self.drift_min_scale}) must not exceed "
                f"drift_max_scale ({self.drift_max_scale})"
            )
        if self.min_drift_percent > self.max_drift_percent:
            raise ValueError(
                f"min_drift_percent ({self.min_drift_percent}) must not exceed "
                f"max_drift_percent ({self.max_drift_percent})"
            )
        return self


class ShotMotionParams(BaseModel):
    """Start/end summary of one shot, for renderers that interpolate themselves."""

    preset: str
    zoom_start: float
    zoom_end: float
    pan_x_percent: float = 0.0
    pan_y_percent: float = 0.0
    pan_axis: Optional[Literal["x", "y"]] = None
    transition_duration: float = 0.4


def get_documentary_defaults() -> DocumentaryMotionConfig:
    """
    Get default documentary motion configuration.

    "Gallery documentary": every shot moves, push-in dominant, a quarter
    horizontal drift, no pull-back or parallax in the weighted pool.
    """
    return DocumentaryMotionConfig()
