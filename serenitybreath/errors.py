"""Engine error taxonomy and the result type every command returns.

Errors are raised inside the catalog and the sequencer, then caught by
``BreathingEngine`` at the command boundary and handed back inside a
``CommandResult``.  A failed command never changes engine state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - hints only
    from .engine.state import EngineState


class EngineError(Exception):
    """Base class for recoverable engine errors."""

    message = "Something went wrong."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        if message:
            self.message = message


class NoPhasesDefined(EngineError):
    message = "This exercise has no phases. Define custom timings first."


class UnknownExerciseId(EngineError):
    message = "Unknown exercise."

    def __init__(self, exercise_id: str) -> None:
        super().__init__(f"Unknown exercise: {exercise_id!r}")
        self.exercise_id = exercise_id


class InvalidTimings(EngineError):
    message = (
        "Inhale and exhale must be longer than 0 seconds. "
        "Hold durations can be 0."
    )


class ExerciseRunning(EngineError):
    message = "Stop the exercise before changing custom settings."


@dataclass(frozen=True)
class CommandResult:
    """Outcome of a facade command: the state after it, plus any error."""

    state: EngineState
    error: EngineError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
