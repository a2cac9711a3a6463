"""Tests for the phase sequencer state machine.

Covers: start/pause/resume/stop transitions, cycle counting, overshoot
carry-over, zero-length phase skipping, and callbacks that change the
run state mid-advance.
"""

import pytest

from serenitybreath.engine.sequencer import PhaseSequencer
from serenitybreath.engine.state import RunState
from serenitybreath.errors import NoPhasesDefined
from serenitybreath.exercises.catalog import (
    BUILTIN_EXERCISES, Exercise, Phase, PhaseName,
    CustomTimings, build_custom_exercise,
)

INHALE = PhaseName.INHALE
HOLD = PhaseName.HOLD
EXHALE = PhaseName.EXHALE


def _exercise(*phases) -> Exercise:
    return Exercise(
        id="test",
        display_name="Test",
        description="",
        phases=tuple(Phase(name, secs, f"{name.value}Cue") for name, secs in phases),
    )


class Recorder:
    def __init__(self):
        self.entered: list[tuple[PhaseName, int]] = []
        self.cycles: list[int] = []

    def phase(self, phase):
        self.entered.append((phase.name, phase.duration_seconds))

    def cycle(self, n):
        self.cycles.append(n)


def _sequencer(exercise):
    rec = Recorder()
    seq = PhaseSequencer(
        exercise, on_phase_entered=rec.phase, on_cycle_completed=rec.cycle,
    )
    return seq, rec


def _478():
    return BUILTIN_EXERCISES[0]


# ═══════════════════════════════════════════════════════════════════════════
#  TRANSITIONS
# ═══════════════════════════════════════════════════════════════════════════


class TestTransitions:

    def test_initial_state(self):
        seq, _ = _sequencer(_478())
        assert seq.state is RunState.STOPPED
        assert seq.phase_index == 0
        assert seq.remaining_ms == 0
        assert seq.current_phase is None

    def test_start_enters_first_phase(self):
        seq, rec = _sequencer(_478())
        seq.start()
        assert seq.state is RunState.RUNNING
        assert seq.phase_index == 0
        assert seq.remaining_ms == 4000
        assert rec.entered == [(INHALE, 4)]

    def test_start_is_noop_when_running(self):
        seq, rec = _sequencer(_478())
        seq.start()
        seq.advance(1000)
        seq.start()
        assert seq.remaining_ms == 3000
        assert len(rec.entered) == 1

    def test_start_without_phases_raises(self):
        seq, rec = _sequencer(build_custom_exercise(CustomTimings(0, 0, 0, 0)))
        with pytest.raises(NoPhasesDefined):
            seq.start()
        assert seq.state is RunState.STOPPED
        assert rec.entered == []

    def test_start_with_only_zero_phases_raises(self):
        seq, _ = _sequencer(_exercise((INHALE, 0), (EXHALE, 0)))
        with pytest.raises(NoPhasesDefined):
            seq.start()

    def test_pause_freezes_remaining(self):
        seq, _ = _sequencer(_478())
        seq.start()
        seq.advance(1250)
        seq.pause()
        seq.advance(5000)
        assert seq.state is RunState.PAUSED
        assert seq.remaining_ms == 2750

    def test_resume_keeps_frozen_countdown(self):
        seq, rec = _sequencer(_478())
        seq.start()
        seq.advance(1250)
        seq.pause()
        seq.resume()
        assert seq.state is RunState.RUNNING
        assert seq.remaining_ms == 2750
        assert len(rec.entered) == 1

    def test_pause_is_noop_when_stopped(self):
        seq, _ = _sequencer(_478())
        seq.pause()
        assert seq.state is RunState.STOPPED

    def test_resume_is_noop_when_running(self):
        seq, _ = _sequencer(_478())
        seq.start()
        seq.resume()
        assert seq.state is RunState.RUNNING

    @pytest.mark.parametrize("pause_first", [False, True])
    def test_stop_resets_everything(self, pause_first):
        seq, _ = _sequencer(_478())
        seq.start()
        seq.advance(25_000)
        if pause_first:
            seq.pause()
        seq.stop()
        assert seq.state is RunState.STOPPED
        assert seq.phase_index == 0
        assert seq.remaining_ms == 0
        assert seq.completed_cycles == 0
        assert seq.current_phase is None
        assert seq.previous_phase is None

    def test_stop_is_idempotent(self):
        seq, _ = _sequencer(_478())
        seq.stop()
        seq.stop()
        assert seq.state is RunState.STOPPED

    def test_load_stops_first(self):
        seq, rec = _sequencer(_478())
        seq.start()
        seq.load(BUILTIN_EXERCISES[1])
        assert seq.state is RunState.STOPPED
        assert seq.exercise.id == "box"
        seq.advance(10_000)
        assert len(rec.entered) == 1


# ═══════════════════════════════════════════════════════════════════════════
#  PHASE ADVANCE & CYCLES
# ═══════════════════════════════════════════════════════════════════════════


class TestAdvance:

    def test_478_order_and_cycle(self):
        seq, rec = _sequencer(_478())
        seq.start()
        for _ in range(19):
            seq.advance(1000)
        assert rec.entered == [(INHALE, 4), (HOLD, 7), (EXHALE, 8), (INHALE, 4)]
        assert rec.cycles == [1]
        assert seq.completed_cycles == 1
        assert seq.phase_index == 0

    def test_previous_phase_tracked(self):
        seq, _ = _sequencer(_478())
        seq.start()
        seq.advance(4000)
        assert seq.current_phase.name is HOLD
        assert seq.previous_phase.name is INHALE

    def test_single_phase_counts_every_traversal(self):
        seq, rec = _sequencer(_exercise((INHALE, 3)))
        seq.start()
        seq.advance(3000)
        assert seq.completed_cycles == 1
        seq.advance(9000)
        assert seq.completed_cycles == 4
        assert rec.cycles == [1, 2, 3, 4]
        assert len(rec.entered) == 5

    def test_overshoot_carries_into_next_phase(self):
        seq, _ = _sequencer(_478())
        seq.start()
        seq.advance(1500)
        seq.advance(1500)
        seq.advance(1500)
        assert seq.current_phase.name is HOLD
        assert seq.remaining_ms == 6500

    def test_large_advance_crosses_several_phases(self):
        seq, rec = _sequencer(_478())
        seq.start()
        seq.advance(19_000 * 2 + 5000)
        assert seq.completed_cycles == 2
        assert seq.current_phase.name is HOLD
        assert seq.remaining_ms == 6000
        assert len(rec.entered) == 8

    def test_advance_ignored_unless_running(self):
        seq, _ = _sequencer(_478())
        seq.advance(5000)
        assert seq.remaining_ms == 0
        seq.start()
        seq.pause()
        seq.advance(5000)
        assert seq.remaining_ms == 4000

    def test_ms_until_next_second(self):
        seq, _ = _sequencer(_478())
        assert seq.ms_until_next_second() == 1000
        seq.start()
        assert seq.ms_until_next_second() == 1000
        seq.advance(250)
        assert seq.ms_until_next_second() == 750


# ═══════════════════════════════════════════════════════════════════════════
#  ZERO-LENGTH PHASES
# ═══════════════════════════════════════════════════════════════════════════


class TestZeroLengthPhases:

    def test_middle_zero_phase_skipped_silently(self):
        seq, rec = _sequencer(_exercise((INHALE, 2), (HOLD, 0), (EXHALE, 2)))
        seq.start()
        seq.advance(2000)
        assert rec.entered == [(INHALE, 2), (EXHALE, 2)]
        assert seq.phase_index == 2
        assert seq.remaining_ms == 2000

    def test_trailing_zero_phase_still_completes_cycle(self):
        seq, rec = _sequencer(_exercise((INHALE, 2), (EXHALE, 2), (HOLD, 0)))
        seq.start()
        seq.advance(4000)
        assert seq.completed_cycles == 1
        assert seq.current_phase.name is INHALE
        assert (HOLD, 0) not in rec.entered

    def test_leading_zero_phase_skipped_on_start(self):
        seq, rec = _sequencer(_exercise((HOLD, 0), (INHALE, 2)))
        seq.start()
        assert seq.phase_index == 1
        assert seq.completed_cycles == 0
        assert rec.entered == [(INHALE, 2)]
        seq.advance(2000)
        assert seq.completed_cycles == 1
        assert seq.phase_index == 1


# ═══════════════════════════════════════════════════════════════════════════
#  CALLBACKS CHANGING THE RUN STATE
# ═══════════════════════════════════════════════════════════════════════════


class TestRunStateGuard:

    def test_stop_inside_phase_callback_halts_advance(self):
        entered = []
        seq = None

        def on_phase(phase):
            entered.append(phase.name)
            if phase.name is HOLD:
                seq.stop()

        seq = PhaseSequencer(_478(), on_phase_entered=on_phase)
        seq.start()
        seq.advance(30_000)
        assert seq.state is RunState.STOPPED
        assert entered == [INHALE, HOLD]
        assert seq.remaining_ms == 0

    def test_pause_inside_phase_callback_keeps_full_phase(self):
        seq = None

        def on_phase(phase):
            if phase.name is HOLD:
                seq.pause()

        seq = PhaseSequencer(_478(), on_phase_entered=on_phase)
        seq.start()
        seq.advance(5000)
        assert seq.state is RunState.PAUSED
        assert seq.current_phase.name is HOLD
        assert seq.remaining_ms == 7000

    def test_stop_inside_cycle_callback(self):
        entered = []
        seq = None

        def on_cycle(_n):
            seq.stop()

        seq = PhaseSequencer(
            _exercise((INHALE, 1), (EXHALE, 1)),
            on_phase_entered=lambda p: entered.append(p.name),
            on_cycle_completed=on_cycle,
        )
        seq.start()
        seq.advance(5000)
        assert seq.state is RunState.STOPPED
        assert entered == [INHALE, EXHALE]

    def test_pause_inside_cycle_callback_defers_next_phase(self):
        entered = []
        seq = None

        def on_cycle(_n):
            seq.pause()

        seq = PhaseSequencer(
            BUILTIN_EXERCISES[3],
            on_phase_entered=lambda p: entered.append((p.name, seq.state)),
            on_cycle_completed=on_cycle,
        )
        seq.start()
        seq.advance(6000)
        assert seq.state is RunState.PAUSED
        assert entered == [(INHALE, RunState.RUNNING), (EXHALE, RunState.RUNNING)]
        assert seq.completed_cycles == 1

        seq.resume()
        assert entered[-1] == (INHALE, RunState.RUNNING)
        assert seq.remaining_ms == 2000
        assert seq.completed_cycles == 1

    def test_pause_while_skipping_zero_phase_defers_entry(self):
        entered = []

        seq = PhaseSequencer(
            _exercise((INHALE, 1), (EXHALE, 1), (HOLD, 0)),
            on_phase_entered=lambda p: entered.append(p.name),
            on_cycle_completed=lambda _n: seq.pause(),
        )
        seq.start()
        seq.advance(2000)
        assert seq.state is RunState.PAUSED
        assert entered == [INHALE, EXHALE]
        seq.resume()
        assert entered == [INHALE, EXHALE, INHALE]
        assert seq.completed_cycles == 1

    def test_stop_while_paused_at_boundary_drops_pending_phase(self):
        entered = []

        seq = PhaseSequencer(
            _exercise((INHALE, 1), (EXHALE, 1)),
            on_phase_entered=lambda p: entered.append(p.name),
            on_cycle_completed=lambda _n: seq.pause(),
        )
        seq.start()
        seq.advance(2000)
        seq.stop()
        seq.resume()
        assert seq.state is RunState.STOPPED
        assert entered == [INHALE, EXHALE]
