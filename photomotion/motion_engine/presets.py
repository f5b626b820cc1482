"""
Motion Preset Definitions for Documentary Style Animation

Defines the six named camera behaviors of the documentary motion pack and
descriptors for grouping them into families.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Union


class MotionPreset(str, Enum):
    """Camera-motion behaviors available to a shot."""

    STATIC = "STATIC"
    SLOW_PUSH_IN = "SLOW_PUSH_IN"
    SLOW_PULL_BACK = "SLOW_PULL_BACK"
    LATERAL_DRIFT_L = "LATERAL_DRIFT_L"
    LATERAL_DRIFT_R = "LATERAL_DRIFT_R"
    PARALLAX_PUSH_IN = "PARALLAX_PUSH_IN"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class PresetInfo:
    """
    Describes a motion preset.

    Attributes:
        preset: Preset identifier
        family: Motion family (static, push_in, pull_back, drift, parallax)
        direction: Horizontal drift direction (-1 left, 1 right, 0 none)
        zooms: Whether scale changes over the shot
        description: Human-readable description
    """

    preset: MotionPreset
    family: str
    direction: int = 0
    zooms: bool = True
    description: str = ""

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "name": self.preset.value,
            "family": self.family,
            "direction": self.direction,
            "zooms": self.zooms,
            "description": self.description,
        }


# =============================================================================
# Preset Library
# =============================================================================

PRESET_LIBRARY: Dict[MotionPreset, PresetInfo] = {
    MotionPreset.STATIC: PresetInfo(
        preset=MotionPreset.STATIC,
        family="static",
        zooms=False,
        description="Locked-off frame, no movement",
    ),
    MotionPreset.SLOW_PUSH_IN: PresetInfo(
        preset=MotionPreset.SLOW_PUSH_IN,
        family="push_in",
        description="Gentle centered push-in",
    ),
    MotionPreset.SLOW_PULL_BACK: PresetInfo(
        preset=MotionPreset.SLOW_PULL_BACK,
        family="pull_back",
        description="Gentle centered pull-back to the full frame",
    ),
    MotionPreset.LATERAL_DRIFT_L: PresetInfo(
        preset=MotionPreset.LATERAL_DRIFT_L,
        family="drift",
        direction=-1,
        description="Coupled zoom-pan drifting left",
    ),
    MotionPreset.LATERAL_DRIFT_R: PresetInfo(
        preset=MotionPreset.LATERAL_DRIFT_R,
        family="drift",
        direction=1,
        description="Coupled zoom-pan drifting right",
    ),
    MotionPreset.PARALLAX_PUSH_IN: PresetInfo(
        preset=MotionPreset.PARALLAX_PUSH_IN,
        family="parallax",
        description="Single-layer stand-in for parallax: a lighter push-in",
    ),
}


def get_preset(name: Union[str, MotionPreset]) -> Optional[MotionPreset]:
    """
    Look up a motion preset by name.

    Accepts enum values ("SLOW_PUSH_IN") and lowercase spellings
    ("slow_push_in").

    Args:
        name: Preset name or MotionPreset

    Returns:
        MotionPreset if found, None otherwise
    """
    if isinstance(name, MotionPreset):
        return name
    try:
        return MotionPreset(str(name).strip().upper())
    except ValueError:
        return None


def list_presets() -> List[str]:
    """
    List all available preset names.

    Returns:
        List of preset name strings
    """
    return [preset.value for preset in PRESET_LIBRARY]


def get_preset_info(preset: MotionPreset) -> PresetInfo:
    return PRESET_LIBRARY[preset]


def is_drift(preset: Optional[MotionPreset]) -> bool:
    return preset is not None and PRESET_LIBRARY[preset].family == "drift"


def drift_direction(preset: Optional[MotionPreset]) -> int:
    """-1 for a left drift, 1 for a right drift, 0 otherwise."""
    if preset is None:
        return 0
    return PRESET_LIBRARY[preset].direction


def opposite_drift(preset: MotionPreset) -> MotionPreset:
    """Reverse a lateral drift."""
    if preset == MotionPreset.LATERAL_DRIFT_L:
        return MotionPreset.LATERAL_DRIFT_R
    if preset == MotionPreset.LATERAL_DRIFT_R:
        return MotionPreset.LATERAL_DRIFT_L
    raise ValueError(f"Not a drift preset: {preset}")
