"""
Motion Preset Planner

Chooses a camera-motion preset per shot from the shot's place in the
sequence and the presets of the shots just before it. The planner is a
pure function: continuity history is passed in by the caller (see
ContinuityState) and randomness comes from a generator reseeded per call.

Decision order:
    1. Shots 0 and 1 establish with a push-in
    2. The last shot pulls back (60%) or pushes in
    3. Two identical presets in a row force a different family
    4. A young drift continues; an older drift streak reverses or ends
    5. Middle shots drift (40% interior, 20% near the edges) or take a
       weighted non-drift preset
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..schemas.motion import DocumentaryMotionConfig, get_documentary_defaults
from .presets import MotionPreset, get_preset, is_drift, opposite_drift
from .rng import SeededRNG, generate_seed

logger = logging.getLogger(__name__)

LAST_SHOT_PULL_BACK_PROBABILITY = 0.6
STREAK_REVERSE_PROBABILITY = 0.7
INTERIOR_DRIFT_PROBABILITY = 0.4
EDGE_DRIFT_PROBABILITY = 0.2
INTERIOR_RANGE = (0.2, 0.8)

# A drift at most this many shots back still sets the direction
YOUNG_DRIFT_MAX_AGE = 3


@dataclass(frozen=True)
class ShotMetadata:
    """
    Describes one shot for preset selection.

    Attributes:
        position: Position in sequence (0.0-1.0)
        index: Shot index (0-based)
        total_shots: Number of shots in the sequence
        frame_width: Output frame width in pixels
        frame_height: Output frame height in pixels
        previous_preset: Preset of the shot before this one
        previous_previous_preset: Preset two shots back
        anchor_x: Focal point X from reframing (0-1), if known
        anchor_y: Focal point Y from reframing (0-1), if known
        last_drift_preset: Most recent drift preset in the sequence
        shots_since_drift: How many shots back last_drift_preset was
    """

    position: float
    index: int
    total_shots: int
    frame_width: int = 1920
    frame_height: int = 1080
    previous_preset: Optional[MotionPreset] = None
    previous_previous_preset: Optional[MotionPreset] = None
    anchor_x: Optional[float] = None
    anchor_y: Optional[float] = None
    last_drift_preset: Optional[MotionPreset] = None
    shots_since_drift: Optional[int] = None

    def __post_init__(self):
        if not 0.0 <= self.position <= 1.0:
            raise ValueError(f"position must be within [0, 1], got {self.position}")
        if self.index < 0:
            raise ValueError(f"index must be non-negative, got {self.index}")
        if self.total_shots < 1 or self.index >= self.total_shots:
            raise ValueError(
                f"index {self.index} out of range for {self.total_shots} shots"
            )
        if self.frame_width <= 0 or self.frame_height <= 0:
            raise ValueError(
                f"Frame dimensions must be positive, got {self.frame_width}x{self.frame_height}"
            )
        for name in ("previous_preset", "previous_previous_preset", "last_drift_preset"):
            value = getattr(self, name)
            if value is None:
                continue
            preset = get_preset(value)
            if preset is None:
                raise ValueError(f"Unknown preset for {name}: {value!r}")
            object.__setattr__(self, name, preset)

    @property
    def is_last(self) -> bool:
        return self.index == self.total_shots - 1


@dataclass(frozen=True)
class ContinuityState:
    """
    Immutable preset history threaded from one shot to the next.

    Usage:
        state = ContinuityState()
        for i in range(total):
            shot = state.shot_metadata(i, total)
            preset = pick_preset(shot, seed)
            state = state.advance(preset)
    """

    previous_preset: Optional[MotionPreset] = None
    previous_previous_preset: Optional[MotionPreset] = None
    last_drift_preset: Optional[MotionPreset] = None
    shots_since_drift: Optional[int] = None

    def advance(self, preset: MotionPreset) -> "ContinuityState":
        """Return the history as seen by the shot after one using preset."""
        if is_drift(preset):
            last_drift, since = preset, 1
        elif self.shots_since_drift is not None:
            last_drift, since = self.last_drift_preset, self.shots_since_drift + 1
        else:
            last_drift, since = None, None

        return ContinuityState(
            previous_preset=preset,
            previous_previous_preset=self.previous_preset,
            last_drift_preset=last_drift,
            shots_since_drift=since,
        )

    def shot_metadata(
        self,
        index: int,
        total_shots: int,
        frame_width: int = 1920,
        frame_height: int = 1080,
        anchor_x: Optional[float] = None,
        anchor_y: Optional[float] = None,
    ) -> ShotMetadata:
        """Build ShotMetadata for shot `index` carrying this history."""
        position = index / (total_shots - 1) if total_shots > 1 else 0.0
        return ShotMetadata(
            position=position,
            index=index,
            total_shots=total_shots,
            frame_width=frame_width,
            frame_height=frame_height,
            previous_preset=self.previous_preset,
            previous_previous_preset=self.previous_previous_preset,
            anchor_x=anchor_x,
            anchor_y=anchor_y,
            last_drift_preset=self.last_drift_preset,
            shots_since_drift=self.shots_since_drift,
        )


def _random_drift(rng: SeededRNG) -> MotionPreset:
    return MotionPreset.LATERAL_DRIFT_L if rng.next() < 0.5 else MotionPreset.LATERAL_DRIFT_R


def _young_drift(shot: ShotMetadata) -> Optional[MotionPreset]:
    if (
        shot.last_drift_preset is not None
        and is_drift(shot.last_drift_preset)
        and shot.shots_since_drift is not None
        and shot.shots_since_drift <= YOUNG_DRIFT_MAX_AGE
    ):
        return shot.last_drift_preset
    return None


def _weighted_non_drift(rng: SeededRNG, cfg: DocumentaryMotionConfig) -> MotionPreset:
    """Pick a non-drift preset by config weight; push-in when weights are empty."""
    pool = [
        (MotionPreset.STATIC, cfg.static_weight),
        (MotionPreset.SLOW_PUSH_IN, cfg.push_in_weight),
        (MotionPreset.SLOW_PULL_BACK, cfg.pull_back_weight),
        (MotionPreset.PARALLAX_PUSH_IN, cfg.parallax_weight),
    ]
    weighted = [(preset, weight) for preset, weight in pool if weight > 0]
    if not weighted:
        return MotionPreset.SLOW_PUSH_IN
    if len(weighted) == 1:
        return weighted[0][0]

    total = sum(weight for _, weight in weighted)
    rand = rng.next() * total
    cumulative = 0.0
    for preset, weight in weighted:
        cumulative += weight
        if rand < cumulative:
            return preset
    return weighted[-1][0]


def _decide(
    shot: ShotMetadata,
    rng: SeededRNG,
    cfg: DocumentaryMotionConfig,
) -> Tuple[MotionPreset, str]:
    prev = shot.previous_preset
    prev_prev = shot.previous_previous_preset

    # 1. Establishing shots
    if shot.index <= 1:
        return MotionPreset.SLOW_PUSH_IN, "establishing shot"

    # 2. Closing shot
    if shot.is_last:
        if prev is not None and prev == prev_prev:
            if prev == MotionPreset.SLOW_PUSH_IN:
                return MotionPreset.SLOW_PULL_BACK, "closing shot after two push-ins"
            if prev == MotionPreset.SLOW_PULL_BACK:
                return MotionPreset.SLOW_PUSH_IN, "closing shot after two pull-backs"
        if rng.next() < LAST_SHOT_PULL_BACK_PROBABILITY:
            return MotionPreset.SLOW_PULL_BACK, "closing pull-back"
        return MotionPreset.SLOW_PUSH_IN, "closing push-in"

    # 3. No third repeat
    if prev is not None and prev == prev_prev:
        if prev == MotionPreset.SLOW_PUSH_IN:
            young = _young_drift(shot)
            if young is not None:
                return young, "break push-in run, continue recent drift"
            return _random_drift(rng), "break push-in run with drift"
        return MotionPreset.SLOW_PUSH_IN, f"break {prev.value} run with push-in"

    # 4. Drift streaks
    if is_drift(prev):
        if is_drift(prev_prev):
            if rng.next() < STREAK_REVERSE_PROBABILITY:
                return opposite_drift(prev), "reverse drift streak"
            return MotionPreset.SLOW_PUSH_IN, "end drift streak"
        return prev, "continue drift"

    # 5. Middle shots
    low, high = INTERIOR_RANGE
    interior = low < shot.position < high
    drift_probability = INTERIOR_DRIFT_PROBABILITY if interior else EDGE_DRIFT_PROBABILITY
    if rng.next() < drift_probability:
        return _random_drift(rng), "interior drift" if interior else "edge drift"

    return _weighted_non_drift(rng, cfg), "weighted default"


def pick_preset(
    shot: ShotMetadata,
    seed: Optional[int] = None,
    config: Optional[DocumentaryMotionConfig] = None,
) -> MotionPreset:
    """
    Pick a documentary motion preset for one shot.

    Identical (shot, seed, config) always yield the same preset. The
    caller threads the result into the next shot's previous_preset /
    previous_previous_preset (ContinuityState.advance does this).

    Args:
        shot: ShotMetadata with sequence position and history
        seed: Global job seed (DEFAULT_SEED if None)
        config: DocumentaryMotionConfig (defaults if None)

    Returns:
        MotionPreset
    """
    cfg = config or get_documentary_defaults()
    rng = SeededRNG(generate_seed(shot.position, shot.index, seed))

    preset, reason = _decide(shot, rng, cfg)

    logger.debug(
        f"Shot {shot.index + 1}/{shot.total_shots} pos={shot.position:.2f}: "
        f"{preset.value} ({reason}; prev={shot.previous_preset}, "
        f"prev_prev={shot.previous_previous_preset})"
    )
    return preset


def plan_sequence(
    total_shots: int,
    frame_width: int = 1920,
    frame_height: int = 1080,
    seed: Optional[int] = None,
    config: Optional[DocumentaryMotionConfig] = None,
    anchors: Optional[Sequence[Optional[Tuple[float, float]]]] = None,
) -> List[MotionPreset]:
    """
    Pick presets for a whole ordered sequence, threading continuity.

    Args:
        total_shots: Number of shots
        frame_width: Output frame width in pixels
        frame_height: Output frame height in pixels
        seed: Global job seed
        config: DocumentaryMotionConfig (defaults if None)
        anchors: Optional per-shot (x, y) focal points

    Returns:
        One MotionPreset per shot, in order
    """
    if total_shots < 0:
        raise ValueError(f"total_shots must be non-negative, got {total_shots}")
    if anchors is not None and len(anchors) != total_shots:
        raise ValueError(f"Expected {total_shots} anchors, got {len(anchors)}")

    state = ContinuityState()
    presets: List[MotionPreset] = []

    for index in range(total_shots):
        anchor = anchors[index] if anchors is not None else None
        shot = state.shot_metadata(
            index,
            total_shots,
            frame_width,
            frame_height,
            anchor_x=anchor[0] if anchor else None,
            anchor_y=anchor[1] if anchor else None,
        )
        preset = pick_preset(shot, seed, config)
        presets.append(preset)
        state = state.advance(preset)

    if presets:
        counts = {p.value: presets.count(p) for p in dict.fromkeys(presets)}
        logger.info(f"Planned {total_shots} shots: {counts}")

    return presets
