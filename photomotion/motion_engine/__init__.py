"""
Motion Engine for Documentary Style Animation

Chooses a restrained Ken Burns camera move for each shot of a photo
sequence and evaluates it into per-frame scale/translate values for an
external renderer.

Usage:
    from photomotion.motion_engine import (
        ContinuityState,
        MotionPreset,
        TransformParams,
        pick_preset,
        sample_transform,
    )

    # Pick presets in sequence order, threading continuity
    state = ContinuityState()
    for i in range(total):
        shot = state.shot_metadata(i, total, frame_width=1920, frame_height=1080)
        preset = pick_preset(shot, seed=job_seed)
        state = state.advance(preset)

    # Evaluate a preset at normalized time t
    sample = sample_transform(
        0.5,
        MotionPreset.LATERAL_DRIFT_L,
        TransformParams(frame_width=1920, frame_height=1080, seed=shot_seed),
    )
"""

from .presets import (
    MotionPreset,
    PresetInfo,
    PRESET_LIBRARY,
    drift_direction,
    get_preset,
    get_preset_info,
    is_drift,
    list_presets,
    opposite_drift,
)

from .rng import (
    DEFAULT_SEED,
    SeededRNG,
    generate_seed,
)

from .planner import (
    ContinuityState,
    ShotMetadata,
    pick_preset,
    plan_sequence,
)

from .transform import (
    DriftSolution,
    TransformParams,
    TransformSample,
    doc_progress,
    ease_in_out_sine,
    max_pan_at_scale,
    safety_margin_px,
    sample_shot,
    sample_transform,
    solve_coupled_drift,
    to_motion_params,
)

__all__ = [
    # Presets
    "MotionPreset",
    "PresetInfo",
    "PRESET_LIBRARY",
    "drift_direction",
    "get_preset",
    "get_preset_info",
    "is_drift",
    "list_presets",
    "opposite_drift",
    # RNG
    "DEFAULT_SEED",
    "SeededRNG",
    "generate_seed",
    # Planner
    "ContinuityState",
    "ShotMetadata",
    "pick_preset",
    "plan_sequence",
    # Transform
    "DriftSolution",
    "TransformParams",
    "TransformSample",
    "doc_progress",
    "ease_in_out_sine",
    "max_pan_at_scale",
    "safety_margin_px",
    "sample_shot",
    "sample_transform",
    "solve_coupled_drift",
    "to_motion_params",
]
