"""Exercise catalog package."""

from .catalog import (
    Phase,
    PhaseName,
    Exercise,
    CustomTimings,
    ExerciseCatalog,
    BUILTIN_EXERCISES,
    CUSTOM_ID,
    DEFAULT_EXERCISE_ID,
    build_custom_exercise,
)

__all__ = [
    "Phase",
    "PhaseName",
    "Exercise",
    "CustomTimings",
    "ExerciseCatalog",
    "BUILTIN_EXERCISES",
    "CUSTOM_ID",
    "DEFAULT_EXERCISE_ID",
    "build_custom_exercise",
]
