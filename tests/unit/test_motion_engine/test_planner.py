"""
Unit tests for motion_engine.planner module.
"""

import pytest

from photomotion.motion_engine.planner import (
    ContinuityState,
    ShotMetadata,
    pick_preset,
    plan_sequence,
)
from photomotion.motion_engine.presets import MotionPreset, is_drift
from photomotion.schemas.motion import DocumentaryMotionConfig

PUSH_IN = MotionPreset.SLOW_PUSH_IN
PULL_BACK = MotionPreset.SLOW_PULL_BACK
DRIFT_L = MotionPreset.LATERAL_DRIFT_L
DRIFT_R = MotionPreset.LATERAL_DRIFT_R

SEEDS = [0, 1, 7, 42, 12345, 99991, 2 ** 31 - 2]
LENGTHS = [1, 2, 3, 4, 5, 8, 13, 30]


def spread_seeds(count: int) -> list:
    """Job seeds far enough apart that their first draws cover [0, 1)."""
    return [k * 104729 for k in range(count)]


def middle_shot(index=4, total=10, **history) -> ShotMetadata:
    return ShotMetadata(
        position=index / (total - 1),
        index=index,
        total_shots=total,
        **history,
    )


class TestShotMetadata:
    """Tests for ShotMetadata validation."""

    def test_valid(self):
        shot = ShotMetadata(position=0.5, index=2, total_shots=5)
        assert shot.frame_width == 1920
        assert shot.is_last is False

    def test_is_last(self):
        assert ShotMetadata(position=1.0, index=4, total_shots=5).is_last is True

    @pytest.mark.parametrize("kwargs", [
        dict(position=1.5, index=0, total_shots=3),
        dict(position=-0.1, index=0, total_shots=3),
        dict(position=0.5, index=-1, total_shots=3),
        dict(position=0.5, index=3, total_shots=3),
        dict(position=0.5, index=0, total_shots=0),
        dict(position=0.5, index=0, total_shots=3, frame_width=0),
        dict(position=0.5, index=2, total_shots=5, previous_preset="ZOOM_BLUR"),
        dict(position=0.5, index=2, total_shots=5, previous_previous_preset=""),
        dict(position=0.5, index=2, total_shots=5, last_drift_preset="nope"),
    ])
    def test_invalid(self, kwargs):
        """Test out-of-range metadata raises ValueError."""
        with pytest.raises(ValueError):
            ShotMetadata(**kwargs)

    def test_preset_names_coerced(self):
        """Test lowercase preset names resolve to MotionPreset members."""
        shot = ShotMetadata(
            position=0.5,
            index=2,
            total_shots=5,
            previous_preset="lateral_drift_l",
            last_drift_preset=" Lateral_Drift_L ",
            shots_since_drift=1,
        )
        assert shot.previous_preset is DRIFT_L
        assert shot.last_drift_preset is DRIFT_L
        assert pick_preset(shot, seed=42) == DRIFT_L


class TestContinuityState:
    """Tests for continuity threading."""

    def test_advance_shifts_history(self):
        """Test advance moves previous into previous_previous."""
        state = ContinuityState().advance(PUSH_IN).advance(PULL_BACK)
        assert state.previous_preset == PULL_BACK
        assert state.previous_previous_preset == PUSH_IN

    def test_advance_is_immutable(self):
        """Test advance returns a new state and leaves the old one alone."""
        start = ContinuityState()
        start.advance(PUSH_IN)
        assert start.previous_preset is None

    def test_drift_age(self):
        """Test the last drift is remembered with its age."""
        state = ContinuityState().advance(DRIFT_R)
        assert (state.last_drift_preset, state.shots_since_drift) == (DRIFT_R, 1)
        state = state.advance(PUSH_IN).advance(PUSH_IN)
        assert (state.last_drift_preset, state.shots_since_drift) == (DRIFT_R, 3)

    def test_no_drift_yet(self):
        state = ContinuityState().advance(PUSH_IN)
        assert state.last_drift_preset is None
        assert state.shots_since_drift is None

    def test_shot_metadata_position(self):
        """Test position is index / (total - 1), 0 for a single shot."""
        state = ContinuityState()
        assert state.shot_metadata(2, 5).position == 0.5
        assert state.shot_metadata(0, 1).position == 0.0


class TestBoundaryConvention:
    """Tests for establishing and closing shots."""

    @pytest.mark.parametrize("seed", SEEDS)
    @pytest.mark.parametrize("total", LENGTHS)
    def test_first_two_push_in_last_closes(self, seed, total):
        """Test shots 0-1 push in and the final shot pulls back or pushes in."""
        presets = plan_sequence(total, seed=seed)
        assert len(presets) == total

        for preset in presets[:2]:
            assert preset == PUSH_IN
        if total > 2:
            assert presets[-1] in (PULL_BACK, PUSH_IN)

    def test_five_shot_sequence(self):
        """Test the canonical 5-shot sequence shape."""
        presets = plan_sequence(5, seed=12345)
        assert presets[0] == PUSH_IN
        assert presets[1] == PUSH_IN
        assert presets[4] in (PULL_BACK, PUSH_IN)

    def test_last_shot_after_two_push_ins(self):
        """Test the closing shot pulls back after two push-ins."""
        for seed in SEEDS:
            shot = ShotMetadata(
                position=1.0,
                index=2,
                total_shots=3,
                previous_preset=PUSH_IN,
                previous_previous_preset=PUSH_IN,
            )
            assert pick_preset(shot, seed) == PULL_BACK

    def test_last_shot_mixes(self):
        """Test closing shots use both pull-back and push-in across seeds."""
        seen = set()
        for seed in spread_seeds(200):
            shot = ShotMetadata(
                position=1.0,
                index=9,
                total_shots=10,
                previous_preset=DRIFT_L,
                previous_previous_preset=PUSH_IN,
            )
            seen.add(pick_preset(shot, seed))
        assert seen == {PULL_BACK, PUSH_IN}


class TestSequenceInvariants:
    """Tests for no-repeat and drift-streak rules over many sequences."""

    @pytest.mark.parametrize("seed", spread_seeds(60))
    @pytest.mark.parametrize("total", [6, 12, 40])
    def test_no_triple_repeat(self, seed, total):
        """Test no preset appears three times in a row."""
        presets = plan_sequence(total, seed=seed)
        for a, b, c in zip(presets, presets[1:], presets[2:]):
            assert not (a == b == c), presets

    @pytest.mark.parametrize("seed", spread_seeds(60))
    def test_drift_streak_bounded(self, seed):
        """Test same-direction drift runs never exceed three shots."""
        presets = plan_sequence(40, seed=seed)
        run = 0
        previous = None
        for preset in presets:
            run = run + 1 if (is_drift(preset) and preset == previous) else (1 if is_drift(preset) else 0)
            assert run <= 3, presets
            previous = preset

    def test_sequences_include_drifts(self):
        """Test drifts appear somewhere across seeds."""
        presets = [p for seed in spread_seeds(30) for p in plan_sequence(12, seed=seed)]
        assert DRIFT_L in presets
        assert DRIFT_R in presets

    def test_default_weights_never_static_or_parallax(self):
        """Test the default weighted pool only yields push-ins."""
        for seed in spread_seeds(50):
            presets = plan_sequence(15, seed=seed)
            assert MotionPreset.STATIC not in presets
            assert MotionPreset.PARALLAX_PUSH_IN not in presets
            assert PULL_BACK not in presets[:-1]


class TestDecisionRules:
    """Tests for individual decision steps."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_two_pull_backs_force_push_in(self, seed):
        shot = middle_shot(previous_preset=PULL_BACK, previous_previous_preset=PULL_BACK)
        assert pick_preset(shot, seed) == PUSH_IN

    @pytest.mark.parametrize("seed", SEEDS)
    def test_two_drifts_same_direction_force_push_in(self, seed):
        shot = middle_shot(previous_preset=DRIFT_L, previous_previous_preset=DRIFT_L)
        assert pick_preset(shot, seed) == PUSH_IN

    @pytest.mark.parametrize("seed", SEEDS)
    def test_two_push_ins_force_drift(self, seed):
        shot = middle_shot(previous_preset=PUSH_IN, previous_previous_preset=PUSH_IN)
        assert is_drift(pick_preset(shot, seed))

    @pytest.mark.parametrize("seed", SEEDS)
    def test_two_push_ins_continue_young_drift(self, seed):
        """Test a recent drift sets the direction of the forced drift."""
        shot = middle_shot(
            previous_preset=PUSH_IN,
            previous_previous_preset=PUSH_IN,
            last_drift_preset=DRIFT_R,
            shots_since_drift=3,
        )
        assert pick_preset(shot, seed) == DRIFT_R

    def test_old_drift_is_forgotten(self):
        """Test drifts older than three shots leave the direction random."""
        seen = set()
        for seed in spread_seeds(100):
            shot = middle_shot(
                previous_preset=PUSH_IN,
                previous_previous_preset=PUSH_IN,
                last_drift_preset=DRIFT_R,
                shots_since_drift=4,
            )
            seen.add(pick_preset(shot, seed))
        assert seen == {DRIFT_L, DRIFT_R}

    @pytest.mark.parametrize("seed", SEEDS)
    def test_single_drift_continues(self, seed):
        shot = middle_shot(previous_preset=DRIFT_L, previous_previous_preset=PUSH_IN)
        assert pick_preset(shot, seed) == DRIFT_L

    def test_drift_streak_reverses_or_ends(self):
        """Test a two-drift streak reverses or ends, mostly reversing."""
        outcomes = []
        for seed in spread_seeds(300):
            shot = middle_shot(previous_preset=DRIFT_R, previous_previous_preset=DRIFT_L)
            outcomes.append(pick_preset(shot, seed))

        assert set(outcomes) <= {DRIFT_L, PUSH_IN}
        reversals = outcomes.count(DRIFT_L) / len(outcomes)
        assert 0.55 < reversals < 0.85

    def test_weights_drive_non_drift_pick(self):
        """Test configured weights reach the non-drift pool."""
        config = DocumentaryMotionConfig(push_in_weight=0.0, static_weight=1.0)
        picks = set()
        for seed in spread_seeds(100):
            shot = middle_shot(previous_preset=PUSH_IN, previous_previous_preset=DRIFT_L)
            picks.add(pick_preset(shot, seed, config))
        assert MotionPreset.STATIC in picks
        assert PUSH_IN not in picks

    def test_empty_weights_fall_back_to_push_in(self):
        config = DocumentaryMotionConfig(push_in_weight=0.0)
        picks = set()
        for seed in spread_seeds(100):
            shot = middle_shot(previous_preset=PUSH_IN, previous_previous_preset=DRIFT_L)
            picks.add(pick_preset(shot, seed, config))
        assert picks - {DRIFT_L, DRIFT_R} == {PUSH_IN}

    def test_interior_drifts_more_than_edges(self):
        """Test middle shots drift more often than shots near the ends."""
        def drift_rate(index):
            hits = 0
            for seed in spread_seeds(500):
                shot = middle_shot(index=index, total=20, previous_preset=PUSH_IN,
                                   previous_previous_preset=DRIFT_L)
                hits += is_drift(pick_preset(shot, seed))
            return hits / 500

        assert drift_rate(10) > drift_rate(2)


class TestDeterminism:
    """Tests for reproducible planning."""

    @pytest.mark.parametrize("seed", SEEDS)
    def test_same_seed_same_sequence(self, seed):
        assert plan_sequence(20, seed=seed) == plan_sequence(20, seed=seed)

    def test_default_seed(self):
        """Test seed=None means the default job seed."""
        assert plan_sequence(20) == plan_sequence(20, seed=12345)

    def test_seeds_diverge(self):
        """Test different job seeds give different sequences somewhere."""
        sequences = {tuple(plan_sequence(20, seed=s)) for s in spread_seeds(20)}
        assert len(sequences) > 1

    def test_pick_preset_matches_manual_threading(self):
        """Test plan_sequence equals threading ContinuityState by hand."""
        state = ContinuityState()
        manual = []
        for i in range(10):
            preset = pick_preset(state.shot_metadata(i, 10), 77)
            manual.append(preset)
            state = state.advance(preset)
        assert plan_sequence(10, seed=77) == manual


class TestPlanSequence:
    """Tests for plan_sequence argument handling."""

    def test_empty(self):
        assert plan_sequence(0) == []

    def test_negative_raises(self):
        with pytest.raises(ValueError):
            plan_sequence(-1)

    def test_anchor_count_mismatch(self):
        with pytest.raises(ValueError):
            plan_sequence(3, anchors=[(0.5, 0.5)])

    def test_anchors_accepted(self):
        """Test anchors (including missing ones) do not change the plan."""
        anchors = [(0.2, 0.3), None, (0.9, 0.1), (0.5, 0.5)]
        assert plan_sequence(4, seed=3, anchors=anchors) == plan_sequence(4, seed=3)
