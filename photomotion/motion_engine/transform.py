"""
Transform Curve Generator

Evaluates a motion preset at normalized time t into scale, translation and
rotation for the renderer. All motion follows one ease-in-out sine curve
entered 12% of the way in, so the camera is already moving on the first
frame.

Panning is only safe inside the overscan created by zoom:

    max_pan(scale) = ((scale - 1) * frame_width) / 2 - safety_px

Lateral drifts derive their end scale from the requested pan distance
(coupled zoom-pan), and every sample is clamped against max_pan at the
current scale.
"""

import logging
import math
from dataclasses import dataclass
from typing import List, Optional

from ..schemas.motion import DocumentaryMotionConfig, ShotMotionParams, get_documentary_defaults
from .presets import MotionPreset, drift_direction, is_drift
from .rng import DEFAULT_SEED, SeededRNG

logger = logging.getLogger(__name__)

DOC_START_OFFSET = 0.12
PUSH_IN_END_SCALE = 1.025
PARALLAX_END_SCALE = 1.02

# Safety margin floor as a fraction of frame width
SAFETY_WIDTH_FRACTION = 0.0015


@dataclass(frozen=True)
class TransformSample:
    """Camera transform for one frame."""

    scale: float
    translate_x: float
    translate_y: float
    rotate_deg: float = 0.0

    def to_dict(self) -> dict:
        return {
            "scale": self.scale,
            "translateX": self.translate_x,
            "translateY": self.translate_y,
            "rotateDeg": self.rotate_deg,
        }


@dataclass(frozen=True)
class TransformParams:
    """
    Per-shot inputs to the transform curve.

    Attributes:
        frame_width: Output frame width in pixels
        frame_height: Output frame height in pixels
        seed: Per-shot seed for drift distance
        config: DocumentaryMotionConfig (defaults if None)
        anchor_x: Focal point X (0-1), if known
        anchor_y: Focal point Y (0-1), if known
    """

    frame_width: int
    frame_height: int
    seed: int = DEFAULT_SEED
    config: Optional[DocumentaryMotionConfig] = None
    anchor_x: Optional[float] = None
    anchor_y: Optional[float] = None

    def __post_init__(self):
        if self.frame_width <= 0 or self.frame_height <= 0:
            raise ValueError(
                f"Frame dimensions must be positive, got {self.frame_width}x{self.frame_height}"
            )
        for name in ("anchor_x", "anchor_y"):
            value = getattr(self, name)
            if value is not None and not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1], got {value}")

    @property
    def resolved_config(self) -> DocumentaryMotionConfig:
        return self.config or get_documentary_defaults()


@dataclass(frozen=True)
class DriftSolution:
    """
    Coupled zoom-pan solution for a lateral drift.

    Attributes:
        desired_drift_px: Drift requested from the configured range
        required_end_scale: Smallest end scale that allows the desired drift
        end_scale: End scale actually used (within drift scale bounds)
        drift_px: Drift distance actually used (may be less than desired)
    """

    desired_drift_px: float
    required_end_scale: float
    end_scale: float
    drift_px: float


# =============================================================================
# Curves and constraints
# =============================================================================


def ease_in_out_sine(t: float) -> float:
    return -(math.cos(math.pi * t) - 1) / 2


def doc_progress(t: float, start_offset: float = DOC_START_OFFSET) -> float:
    """
    Eased progress that starts mid-curve.

    At t=0 the curve is already start_offset in, so the first frame moves;
    at t=1 it reaches 1.0.
    """
    t = max(0.0, min(1.0, t))
    return ease_in_out_sine(start_offset + (1 - start_offset) * t)


def safety_margin_px(frame_width: int, config: DocumentaryMotionConfig) -> float:
    """Edge safety margin: configured pixels or 0.15% of frame width, whichever is larger."""
    return max(config.drift_safety_px, frame_width * SAFETY_WIDTH_FRACTION)


def max_pan_at_scale(scale: float, frame_width: int, safety_px: float) -> float:
    """
    Largest translation that keeps the unscaled frame edge hidden.

    Formula: ((scale - 1) * frame_width) / 2 - safety_px, floored at 0
    """
    overscan_per_side = ((scale - 1) * frame_width) / 2
    return max(0.0, overscan_per_side - safety_px)


def solve_coupled_drift(
    desired_drift_px: float,
    frame_width: int,
    safety_px: float,
    min_scale: float,
    max_scale: float,
) -> DriftSolution:
    """
    Choose the end scale and drift distance of a lateral drift.

    The end scale needed for the desired drift is
    1 + 2 * (drift + safety) / frame_width. Above max_scale, the scale
    stays at max_scale and the drift shrinks to what it allows.

    Args:
        desired_drift_px: Requested drift in pixels
        frame_width: Output frame width in pixels
        safety_px: Edge safety margin in pixels
        min_scale: Lowest allowed end scale
        max_scale: Highest allowed end scale

    Returns:
        DriftSolution
    """
    required_end_scale = 1 + (2 * (desired_drift_px + safety_px)) / frame_width

    if required_end_scale > max_scale:
        end_scale = max_scale
        drift_px = min(desired_drift_px, max_pan_at_scale(max_scale, frame_width, safety_px))
    else:
        end_scale = max(min_scale, min(max_scale, required_end_scale))
        drift_px = desired_drift_px

    return DriftSolution(
        desired_drift_px=desired_drift_px,
        required_end_scale=required_end_scale,
        end_scale=end_scale,
        drift_px=drift_px,
    )


def drift_solution_for(params: TransformParams) -> DriftSolution:
    """Draw the drift distance for a shot and solve its coupled zoom-pan."""
    cfg = params.resolved_config
    rng = SeededRNG(params.seed)
    drift_percent = rng.next_float(cfg.min_drift_percent, cfg.max_drift_percent)
    desired_drift_px = (params.frame_width * drift_percent) / 100
    return solve_coupled_drift(
        desired_drift_px,
        params.frame_width,
        safety_margin_px(params.frame_width, cfg),
        cfg.drift_min_scale,
        cfg.drift_max_scale,
    )


def scale_ceiling(preset: MotionPreset, config: DocumentaryMotionConfig) -> float:
    """Upper scale bound of the final safety clamp for a preset."""
    return config.drift_max_scale if is_drift(preset) else config.max_scale


# =============================================================================
# Sampling
# =============================================================================


def sample_transform(t: float, preset: MotionPreset, params: TransformParams) -> TransformSample:
    """
    Get the camera transform for a preset at normalized time t.

    The anchor in params is accepted for the renderer's benefit; the
    documentary policy keeps every move centered, so it does not shift
    the camera.

    Args:
        t: Normalized shot time, clamped to [0, 1]
        preset: MotionPreset to evaluate
        params: TransformParams with frame size, seed and config

    Returns:
        TransformSample (rotate_deg is always 0)
    """
    cfg = params.resolved_config
    t = max(0.0, min(1.0, t))
    eased = doc_progress(t)
    safety_px = safety_margin_px(params.frame_width, cfg)

    scale = 1.0
    translate_x = 0.0
    translate_y = 0.0

    if preset == MotionPreset.STATIC:
        pass

    elif preset == MotionPreset.SLOW_PUSH_IN:
        end_scale = min(cfg.max_scale, max(cfg.min_scale, PUSH_IN_END_SCALE))
        scale = cfg.min_scale + (end_scale - cfg.min_scale) * eased

    elif preset == MotionPreset.SLOW_PULL_BACK:
        scale = cfg.max_scale - (cfg.max_scale - cfg.min_scale) * eased

    elif is_drift(preset):
        solution = drift_solution_for(params)
        # Scale and pan share one progress value so the pan never outruns the zoom
        scale = 1.0 + (solution.end_scale - 1.0) * eased
        limit = max_pan_at_scale(scale, params.frame_width, safety_px)
        raw_x = drift_direction(preset) * solution.drift_px * eased
        translate_x = max(-limit, min(limit, raw_x))

    elif preset == MotionPreset.PARALLAX_PUSH_IN:
        end_scale = min(cfg.max_scale, max(cfg.min_scale, PARALLAX_END_SCALE))
        scale = cfg.min_scale + (end_scale - cfg.min_scale) * eased

    # Final safety clamps, derived from the current scale
    scale = max(1.0, min(scale_ceiling(preset, cfg), scale))
    limit = max_pan_at_scale(scale, params.frame_width, safety_px)
    translate_x = max(-limit, min(limit, translate_x))
    translate_y = max(-limit, min(limit, translate_y))

    return TransformSample(
        scale=scale,
        translate_x=translate_x,
        translate_y=translate_y,
        rotate_deg=0.0,
    )


def sample_shot(preset: MotionPreset, frame_count: int, params: TransformParams) -> List[TransformSample]:
    """
    Sample a preset at every frame of a shot.

    Frame i of n is sampled at t = i / (n - 1); a single frame samples t = 0.

    Args:
        preset: MotionPreset to evaluate
        frame_count: Number of frames in the shot
        params: TransformParams

    Returns:
        List of TransformSample, one per frame
    """
    if frame_count < 1:
        raise ValueError(f"frame_count must be at least 1, got {frame_count}")
    if frame_count == 1:
        return [sample_transform(0.0, preset, params)]

    last = frame_count - 1
    return [sample_transform(i / last, preset, params) for i in range(frame_count)]


def to_motion_params(preset: MotionPreset, params: TransformParams) -> ShotMotionParams:
    """
    Summarize a preset as start/end zoom and end pan for external renderers.

    The pan is the signed end translation as a percentage of frame width.
    """
    cfg = params.resolved_config
    start = sample_transform(0.0, preset, params)
    end = sample_transform(1.0, preset, params)

    pan_x_percent = 0.0
    pan_axis = None
    if is_drift(preset):
        pan_x_percent = (end.translate_x / params.frame_width) * 100
        pan_axis = "x"

    return ShotMotionParams(
        preset=preset.value,
        zoom_start=start.scale,
        zoom_end=end.scale,
        pan_x_percent=pan_x_percent,
        pan_axis=pan_axis,
        transition_duration=cfg.transition_duration,
    )
