"""Phase state machine for breathing exercises.

States
------
STOPPED   Nothing running.  Phase index, countdown and cycles are 0.
RUNNING   Counting down the current phase.
PAUSED    Countdown frozen at the exact millisecond it was paused.

Transitions
-----------
STOPPED → RUNNING          (start; needs a phase with duration > 0)
RUNNING → PAUSED           (pause)
PAUSED  → RUNNING          (resume; keeps the frozen countdown)
Any     → STOPPED          (stop / load)
RUNNING → RUNNING          (countdown reaches 0: next phase, maybe next cycle)

The sequencer owns no timer.  Whoever drives it calls ``advance`` with
the real milliseconds that passed; overshoot past a phase boundary is
carried into the next phase so repeated beats never drift.

Zero-length phases are skipped on the spot: no countdown and no
phase-entered notification.  Wrapping past the last phase, skipped or
not, completes a cycle.  A listener that pauses at a phase boundary
defers the next phase entry to ``resume``.
"""

from __future__ import annotations

import logging
from typing import Callable

from ..errors import NoPhasesDefined
from ..exercises.catalog import Exercise, Phase
from .state import RunState

LOGGER = logging.getLogger(__name__)


class PhaseSequencer:
    """Advances an exercise's phase list and counts completed cycles.

    Callbacks
    ---------
    on_phase_entered(phase)
        Called exactly once per phase entry, including the first phase
        on ``start``.  Never called by ``resume``.
    on_cycle_completed(completed_cycles)
        Called each time the phase index wraps back to 0.
    """

    def __init__(
        self,
        exercise: Exercise,
        *,
        on_phase_entered: Callable[[Phase], None] | None = None,
        on_cycle_completed: Callable[[int], None] | None = None,
    ) -> None:
        self._exercise = exercise
        self._on_phase_entered = on_phase_entered
        self._on_cycle_completed = on_cycle_completed

        self._state: RunState = RunState.STOPPED
        self._phase_index: int = 0
        self._remaining_ms: int = 0
        self._completed_cycles: int = 0
        self._current: Phase | None = None
        self._previous: Phase | None = None
        # phase due when a listener paused us at a boundary
        self._pending_index: int | None = None

    # ── properties ───────────────────────────────────────────────────

    @property
    def state(self) -> RunState:
        return self._state

    @property
    def exercise(self) -> Exercise:
        return self._exercise

    @property
    def phase_index(self) -> int:
        return self._phase_index

    @property
    def remaining_ms(self) -> int:
        return max(0, self._remaining_ms)

    @property
    def completed_cycles(self) -> int:
        return self._completed_cycles

    @property
    def current_phase(self) -> Phase | None:
        return self._current

    @property
    def previous_phase(self) -> Phase | None:
        return self._previous

    def ms_until_next_second(self) -> int:
        """Delay (1-1000 ms) until the whole-second countdown changes."""
        if self._remaining_ms <= 0:
            return 1000
        return (self._remaining_ms - 1) % 1000 + 1

    # ── controls ─────────────────────────────────────────────────────

    def load(self, exercise: Exercise) -> None:
        """Switch exercise.  Always stops first."""
        self.stop()
        self._exercise = exercise

    def start(self) -> None:
        """Begin phase 0.  Only valid from STOPPED."""
        if self._state is not RunState.STOPPED:
            return
        if not self._exercise.is_runnable:
            raise NoPhasesDefined()
        self._completed_cycles = 0
        self._current = None
        self._previous = None
        self._pending_index = None
        self._state = RunState.RUNNING
        LOGGER.debug("Started exercise %s", self._exercise.id)
        self._enter(0)

    def pause(self) -> None:
        if self._state is not RunState.RUNNING:
            return
        self._state = RunState.PAUSED
        LOGGER.debug("Paused with %d ms left in phase %d",
                     self._remaining_ms, self._phase_index)

    def resume(self) -> None:
        if self._state is not RunState.PAUSED:
            return
        self._state = RunState.RUNNING
        LOGGER.debug("Resumed phase %d", self._phase_index)
        if self._pending_index is not None:
            index, self._pending_index = self._pending_index, None
            self._enter(index)

    def stop(self) -> None:
        """Return to STOPPED and zero every counter.  Idempotent."""
        was = self._state
        self._state = RunState.STOPPED
        self._phase_index = 0
        self._remaining_ms = 0
        self._completed_cycles = 0
        self._current = None
        self._previous = None
        self._pending_index = None
        if was is not RunState.STOPPED:
            LOGGER.debug("Stopped exercise %s", self._exercise.id)

    def advance(self, elapsed_ms: int) -> None:
        """Consume *elapsed_ms* of real time.  No-op unless RUNNING."""
        if self._state is not RunState.RUNNING or elapsed_ms <= 0:
            return
        self._remaining_ms -= elapsed_ms
        while self._remaining_ms <= 0 and self._state is RunState.RUNNING:
            overshoot = -self._remaining_ms
            next_index = self._step(self._phase_index)
            if self._state is not RunState.RUNNING:
                self._hold_at(next_index)
                return
            self._enter(next_index)
            # a callback may have paused or stopped us
            if self._state is RunState.RUNNING:
                self._remaining_ms -= overshoot

    # ── internal ─────────────────────────────────────────────────────

    def _step(self, index: int) -> int:
        """Index after *index*, completing a cycle on wrap."""
        index += 1
        if index >= len(self._exercise.phases):
            index = 0
            self._completed_cycles += 1
            LOGGER.debug("Cycle %d complete", self._completed_cycles)
            if self._on_cycle_completed is not None:
                self._on_cycle_completed(self._completed_cycles)
        return index

    def _enter(self, index: int) -> None:
        phases = self._exercise.phases
        while phases[index].duration_seconds == 0:
            index = self._step(index)
            if self._state is not RunState.RUNNING:
                self._hold_at(index)
                return
        phase = phases[index]
        self._previous = self._current
        self._current = phase
        self._phase_index = index
        self._remaining_ms = phase.duration_ms
        LOGGER.debug("Entered %s (%ds)", phase.name.value, phase.duration_seconds)
        if self._on_phase_entered is not None:
            self._on_phase_entered(phase)

    def _hold_at(self, index: int) -> None:
        """Defer entering *index* until resume if we were paused mid-step."""
        if self._state is RunState.PAUSED:
            self._pending_index = index
