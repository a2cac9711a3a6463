"""Breathing exercise catalog.

Built-in exercises
------------------
    4-7-8           Inhale 4s, Hold 7s, Exhale 8s
    box             Inhale 4s, Hold 4s, Exhale 4s, Hold 4s
    diaphragmatic   Inhale 4s, Exhale 6s
    pursed-lip      Inhale 2s, Exhale 4s

Custom exercise
---------------
The ``custom`` exercise is built from four durations
(inhale, hold after inhale, exhale, hold after exhale).  Phases whose
duration is 0 are left out, so ``(4, 7, 8, 0)`` yields three phases.

``ExerciseCatalog`` owns the current custom exercise and exposes the
look-up helpers (``list_exercises``, ``get``).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from ..errors import UnknownExerciseId


# ── enums / cue ids ──────────────────────────────────────────────────────


class PhaseName(Enum):
    INHALE = "Inhale"
    HOLD = "Hold"
    EXHALE = "Exhale"


INHALE_CUE = "inhaleSound"
HOLD_CUE = "holdSound"
EXHALE_CUE = "exhaleSound"

_CUE_FOR: dict[PhaseName, str] = {
    PhaseName.INHALE: INHALE_CUE,
    PhaseName.HOLD: HOLD_CUE,
    PhaseName.EXHALE: EXHALE_CUE,
}

CUSTOM_ID = "custom"
DEFAULT_EXERCISE_ID = "4-7-8"
NO_PHASES_TEXT = "No phases defined."


# ── value types ──────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Phase:
    name: PhaseName
    duration_seconds: int
    cue_id: str | None = None

    @property
    def duration_ms(self) -> int:
        return self.duration_seconds * 1000


def _phase(name: PhaseName, seconds: int) -> Phase:
    return Phase(name, seconds, _CUE_FOR[name])


@dataclass(frozen=True)
class Exercise:
    id: str
    display_name: str
    description: str
    phases: tuple[Phase, ...] = ()

    @property
    def is_runnable(self) -> bool:
        """True when at least one phase actually takes time."""
        return any(p.duration_seconds > 0 for p in self.phases)

    @property
    def cycle_seconds(self) -> int:
        return sum(p.duration_seconds for p in self.phases)


@dataclass(frozen=True)
class CustomTimings:
    """Four phase durations in seconds for the custom exercise."""

    inhale: int = 4
    hold1: int = 7
    exhale: int = 8
    hold2: int = 0

    @property
    def total(self) -> int:
        return self.inhale + self.hold1 + self.exhale + self.hold2

    @property
    def is_valid(self) -> bool:
        return (
            self.inhale > 0
            and self.exhale > 0
            and self.hold1 >= 0
            and self.hold2 >= 0
            and self.total > 0
        )

    def merged(
        self,
        inhale: int | None = None,
        hold1: int | None = None,
        exhale: int | None = None,
        hold2: int | None = None,
    ) -> CustomTimings:
        """Copy with only the given (non-None) fields replaced."""
        changes = {
            key: value
            for key, value in (
                ("inhale", inhale),
                ("hold1", hold1),
                ("exhale", exhale),
                ("hold2", hold2),
            )
            if value is not None
        }
        return replace(self, **changes)


# ── built-ins ────────────────────────────────────────────────────────────

BUILTIN_EXERCISES: tuple[Exercise, ...] = (
    Exercise(
        id="4-7-8",
        display_name="4-7-8 Breathing",
        description="Inhale for 4s, Hold for 7s, Exhale for 8s.",
        phases=(
            _phase(PhaseName.INHALE, 4),
            _phase(PhaseName.HOLD, 7),
            _phase(PhaseName.EXHALE, 8),
        ),
    ),
    Exercise(
        id="box",
        display_name="Box Breathing",
        description="Inhale for 4s, Hold for 4s, Exhale for 4s, Hold for 4s.",
        phases=(
            _phase(PhaseName.INHALE, 4),
            _phase(PhaseName.HOLD, 4),
            _phase(PhaseName.EXHALE, 4),
            _phase(PhaseName.HOLD, 4),
        ),
    ),
    Exercise(
        id="diaphragmatic",
        display_name="Diaphragmatic Breathing",
        description="Inhale slowly (4s), Exhale slowly (6s).",
        phases=(
            _phase(PhaseName.INHALE, 4),
            _phase(PhaseName.EXHALE, 6),
        ),
    ),
    Exercise(
        id="pursed-lip",
        display_name="Pursed-Lip Breathing",
        description="Inhale normally (2s), Exhale slowly (4s) through pursed lips.",
        phases=(
            _phase(PhaseName.INHALE, 2),
            _phase(PhaseName.EXHALE, 4),
        ),
    ),
)


def build_custom_exercise(timings: CustomTimings) -> Exercise:
    """Build the custom exercise, dropping every zero-length phase.

    Does not validate: an all-zero inhale/exhale simply produces an
    exercise that can be inspected but not started.
    """
    ordered = (
        (PhaseName.INHALE, timings.inhale),
        (PhaseName.HOLD, timings.hold1),
        (PhaseName.EXHALE, timings.exhale),
        (PhaseName.HOLD, timings.hold2),
    )
    phases = tuple(_phase(name, secs) for name, secs in ordered if secs > 0)
    if phases:
        summary = "-".join(
            f"{p.name.value[0]}{p.duration_seconds}s" for p in phases
        )
    else:
        summary = NO_PHASES_TEXT
    return Exercise(
        id=CUSTOM_ID,
        display_name="Custom Breathing",
        description=f"Custom: {summary}",
        phases=phases,
    )


# ── catalog ──────────────────────────────────────────────────────────────


class ExerciseCatalog:
    """Built-in exercises plus the current custom exercise."""

    def __init__(self, timings: CustomTimings | None = None) -> None:
        self._custom = build_custom_exercise(timings or CustomTimings())

    @property
    def custom(self) -> Exercise:
        return self._custom

    def list_exercises(self) -> list[Exercise]:
        return [*BUILTIN_EXERCISES, self._custom]

    def get(self, exercise_id: str) -> Exercise:
        for exercise in self.list_exercises():
            if exercise.id == exercise_id:
                return exercise
        raise UnknownExerciseId(exercise_id)

    def default(self) -> Exercise:
        return self.get(DEFAULT_EXERCISE_ID)

    def update_custom(self, timings: CustomTimings) -> Exercise:
        self._custom = build_custom_exercise(timings)
        return self._custom
