"""Run states and the immutable snapshot published to observers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from ..exercises.catalog import CustomTimings, Exercise, Phase


class RunState(Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


@dataclass(frozen=True)
class EngineState:
    """Read-only view of the engine, published after every change.

    ``previous_phase`` is the phase entered before ``current_phase``
    (None right after start), for observers whose presentation depends
    on where a Hold came from.
    """

    run_state: RunState
    exercise: Exercise
    phase_index: int
    current_phase: Phase | None
    previous_phase: Phase | None
    remaining_ms: int
    completed_cycles: int
    session_elapsed_ms: int
    sound_enabled: bool
    custom_timings: CustomTimings

    @property
    def countdown_seconds(self) -> int:
        """Whole seconds shown on the countdown (a partial second counts)."""
        return -(-self.remaining_ms // 1000)

    @property
    def session_elapsed_seconds(self) -> int:
        return self.session_elapsed_ms // 1000

    @property
    def is_running(self) -> bool:
        return self.run_state is RunState.RUNNING

    @property
    def is_stopped(self) -> bool:
        return self.run_state is RunState.STOPPED
