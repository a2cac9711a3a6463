"""Breathing engine package."""

from .state import RunState, EngineState
from .clock import SessionClock
from .sequencer import PhaseSequencer
from .facade import BreathingEngine

__all__ = [
    "RunState",
    "EngineState",
    "SessionClock",
    "PhaseSequencer",
    "BreathingEngine",
]
