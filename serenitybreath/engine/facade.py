"""Public command/state surface of the breathing engine.

``BreathingEngine`` ties together the exercise catalog, the phase
sequencer and the session clock, drives them from a single heartbeat
``QTimer``, and reports through Qt signals.

Heartbeat
---------
One single-shot timer, re-armed after every beat with the delay until
the visible countdown next changes.  Each beat measures the real time
that passed, advances the sequencer by exactly that much and refreshes
the session clock.  Pause and stop cancel the beat; start and resume arm
it.  A beat that lands while not RUNNING does nothing.

Commands
--------
Every command is synchronous and returns a ``CommandResult``.  Rejected
commands carry an ``EngineError`` and leave the engine untouched.
"""

from __future__ import annotations

import logging
import time
from datetime import datetime
from typing import Callable

from PyQt6.QtCore import QObject, QTimer, pyqtSignal
from sqlalchemy.exc import SQLAlchemyError

from ..errors import (
    CommandResult,
    EngineError,
    ExerciseRunning,
    InvalidTimings,
)
from ..exercises.catalog import CUSTOM_ID, CustomTimings, Exercise, ExerciseCatalog, Phase
from ..settings import Settings, SettingsStore
from .clock import SessionClock
from .sequencer import PhaseSequencer
from .state import EngineState, RunState

LOGGER = logging.getLogger(__name__)

AudioSink = Callable[[str | None, bool], None]


class BreathingEngine(QObject):
    """Breathing exercise engine with pause-safe timing.

    Signals
    -------
    state_changed(state: EngineState)
        Emitted after every command and every heartbeat.
    phase_entered(phase_name: str, cue_id: str | None)
        Emitted once per phase entry, including the first phase on start.
    cycle_completed(completed_cycles: int)
        Emitted when the phase list wraps back to the first phase.
    """

    state_changed = pyqtSignal(object)
    phase_entered = pyqtSignal(str, object)
    cycle_completed = pyqtSignal(int)

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        settings_store: SettingsStore | None = None,
        audio_sink: AudioSink | None = None,
        db_enabled: bool = True,
        time_source: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(parent)

        # ── preferences ───────────────────────────────────────────────
        self._store = settings_store
        self._settings: Settings = (
            settings_store.load() if settings_store is not None else Settings()
        )
        self._sound_enabled: bool = self._settings.sound_enabled
        self._timings: CustomTimings = self._settings.custom_timings

        # ── collaborators ─────────────────────────────────────────────
        self._audio_sink = audio_sink
        self._db_enabled = db_enabled
        self._db_session_id: int | None = None

        # ── timing core ───────────────────────────────────────────────
        self._now = time_source
        self._catalog = ExerciseCatalog(self._timings)
        self._sequencer = PhaseSequencer(
            self._catalog.default(),
            on_phase_entered=self._on_phase_entered,
            on_cycle_completed=self._on_cycle_completed,
        )
        self._clock = SessionClock(time_source)
        self._last_beat: float | None = None

        # ── Qt timer ──────────────────────────────────────────────────
        self._heartbeat = QTimer(self)
        self._heartbeat.setSingleShot(True)
        self._heartbeat.timeout.connect(self._on_heartbeat)

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> EngineState:
        seq = self._sequencer
        return EngineState(
            run_state=seq.state,
            exercise=seq.exercise,
            phase_index=seq.phase_index,
            current_phase=seq.current_phase,
            previous_phase=seq.previous_phase,
            remaining_ms=seq.remaining_ms,
            completed_cycles=seq.completed_cycles,
            session_elapsed_ms=self._clock.elapsed_ms,
            sound_enabled=self._sound_enabled,
            custom_timings=self._timings,
        )

    @property
    def run_state(self) -> RunState:
        return self._sequencer.state

    @property
    def sound_enabled(self) -> bool:
        return self._sound_enabled

    @property
    def custom_timings(self) -> CustomTimings:
        return self._timings

    def list_exercises(self) -> list[Exercise]:
        return self._catalog.list_exercises()

    # ══════════════════════════════════════════════════════════════════
    #  COMMANDS
    # ══════════════════════════════════════════════════════════════════

    def select_exercise(self, exercise_id: str) -> CommandResult:
        """Stop whatever is running and switch to *exercise_id*."""
        try:
            exercise = self._catalog.get(exercise_id)
        except EngineError as exc:
            return self._reject(exc)
        self._halt()
        self._sequencer.load(exercise)
        LOGGER.info("Selected exercise %s", exercise.id)
        return self._publish()

    def start_or_toggle(self) -> CommandResult:
        """Start when stopped, pause when running, resume when paused."""
        state = self._sequencer.state
        if state is RunState.STOPPED:
            return self._start()
        if state is RunState.RUNNING:
            return self._pause()
        return self._resume()

    def stop(self) -> CommandResult:
        """Cancel the run and zero all counters.  Safe to call repeatedly."""
        self._halt()
        return self._publish()

    def update_custom_timings(
        self,
        inhale: int | None = None,
        hold1: int | None = None,
        exhale: int | None = None,
        hold2: int | None = None,
    ) -> CommandResult:
        """Stage new custom durations.  Nothing is rebuilt or saved until
        ``apply_custom_settings``."""
        self._timings = self._timings.merged(inhale, hold1, exhale, hold2)
        return self._publish()

    def apply_custom_settings(self) -> CommandResult:
        """Validate the staged timings and rebuild the custom exercise."""
        if self._sequencer.state is not RunState.STOPPED:
            return self._reject(ExerciseRunning())
        if not self._timings.is_valid:
            return self._reject(InvalidTimings())

        custom = self._catalog.update_custom(self._timings)
        if self._sequencer.exercise.id == CUSTOM_ID:
            self._sequencer.load(custom)
        LOGGER.info("Applied custom timings: %s", custom.description)

        self._settings = self._settings.with_timings(self._timings)
        self._save_settings()
        return self._publish()

    def set_sound_enabled(self, enabled: bool) -> CommandResult:
        self._sound_enabled = bool(enabled)
        self._settings.sound_enabled = self._sound_enabled
        self._save_settings()
        return self._publish()

    def shutdown(self) -> None:
        """Stop timing and close out the session record."""
        self._halt()

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: transitions
    # ══════════════════════════════════════════════════════════════════

    def _start(self) -> CommandResult:
        try:
            self._sequencer.start()
        except EngineError as exc:
            return self._reject(exc)
        # a phase-entered listener may already have stopped us
        if self._sequencer.state is RunState.RUNNING:
            self._clock.start()
            self._last_beat = self._now()
            self._persist_start()
            self._arm_heartbeat()
        return self._publish()

    def _pause(self) -> CommandResult:
        self._heartbeat.stop()
        self._catch_up()
        if self._sequencer.state is RunState.RUNNING:
            self._sequencer.pause()
            self._clock.pause()
        self._last_beat = None
        return self._publish()

    def _resume(self) -> CommandResult:
        self._sequencer.resume()
        # resuming may enter a deferred phase whose listener stops us
        if self._sequencer.state is RunState.RUNNING:
            self._clock.resume()
            self._last_beat = self._now()
            self._arm_heartbeat()
        return self._publish()

    def _halt(self) -> None:
        self._heartbeat.stop()
        if self._sequencer.state is not RunState.STOPPED:
            self._clock.tick()
            self._persist_finish()
        self._sequencer.stop()
        self._clock.reset()
        self._last_beat = None

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: heartbeat
    # ══════════════════════════════════════════════════════════════════

    def _arm_heartbeat(self) -> None:
        self._heartbeat.start(self._sequencer.ms_until_next_second())

    def _catch_up(self) -> None:
        """Feed the sequencer the real time since the last beat."""
        if self._last_beat is None:
            return
        elapsed_ms = round((self._now() - self._last_beat) * 1000)
        # advance by the rounded amount so the remainder carries over
        self._last_beat += elapsed_ms / 1000
        self._sequencer.advance(elapsed_ms)

    def _on_heartbeat(self) -> None:
        if self._sequencer.state is not RunState.RUNNING:
            return
        self._catch_up()
        self._clock.tick()
        if self._sequencer.state is RunState.RUNNING:
            self._arm_heartbeat()
        self._publish()

    def _on_phase_entered(self, phase: Phase) -> None:
        self.phase_entered.emit(phase.name.value, phase.cue_id)
        if self._audio_sink is None:
            return
        try:
            self._audio_sink(phase.cue_id, self._sound_enabled)
        except Exception:
            LOGGER.exception("Audio cue %s failed", phase.cue_id)

    def _on_cycle_completed(self, completed: int) -> None:
        self.cycle_completed.emit(completed)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: results
    # ══════════════════════════════════════════════════════════════════

    def _publish(self) -> CommandResult:
        snapshot = self.state
        self.state_changed.emit(snapshot)
        return CommandResult(snapshot)

    def _reject(self, error: EngineError) -> CommandResult:
        LOGGER.info("Command rejected: %s", error.message)
        snapshot = self.state
        self.state_changed.emit(snapshot)
        return CommandResult(snapshot, error)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL: persistence
    # ══════════════════════════════════════════════════════════════════

    def _save_settings(self) -> None:
        if self._store is not None:
            self._store.save(self._settings)

    def _persist_start(self) -> None:
        if not self._db_enabled:
            return
        from ..database.db import get_session
        from ..database.models import BreathingSession

        try:
            with get_session() as db:
                record = BreathingSession(
                    exercise_id=self._sequencer.exercise.id,
                    start_time=datetime.now(),
                )
                db.add(record)
                db.flush()
                self._db_session_id = record.id
        except SQLAlchemyError:
            LOGGER.exception("Could not record session start")
            self._db_session_id = None

    def _persist_finish(self) -> None:
        if self._db_session_id is None:
            return
        from ..database.db import get_session
        from ..database.models import BreathingSession

        try:
            with get_session() as db:
                record = db.get(BreathingSession, self._db_session_id)
                if record:
                    record.end_time = datetime.now()
                    record.duration_seconds = self._clock.elapsed_ms // 1000
                    record.completed_cycles = self._sequencer.completed_cycles
        except SQLAlchemyError:
            LOGGER.exception("Could not record session end")
        self._db_session_id = None
