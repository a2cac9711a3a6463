"""Main breathing display widget.

Layout (top → bottom):
    - Exercise selector buttons
    - Phase name + whole-second countdown
    - Phase progress bar
    - Instruction line
    - Cycle count and session time
    - Start/Pause/Resume and Stop buttons, sound toggle
"""

from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QGridLayout,
    QLabel, QPushButton, QCheckBox, QProgressBar, QFrame, QButtonGroup,
)

from ..engine.facade import BreathingEngine
from ..engine.state import EngineState, RunState
from ..errors import CommandResult
from ..exercises.catalog import CUSTOM_ID
from .styles import phase_color

START_LABELS: dict[RunState, str] = {
    RunState.STOPPED: "Start",
    RunState.RUNNING: "Pause",
    RunState.PAUSED:  "Resume",
}


def format_elapsed(ms: int) -> str:
    """Milliseconds as ``MM:SS``."""
    m, s = divmod(max(0, ms) // 1000, 60)
    return f"{m:02d}:{s:02d}"


def instruction_text(state: EngineState) -> str:
    phase = state.current_phase
    if state.run_state is RunState.RUNNING:
        return phase.name.value if phase else "Starting..."
    if state.run_state is RunState.PAUSED:
        name = phase.name.value if phase else ""
        return f"Paused: {name} ({state.countdown_seconds}s left)"
    if state.exercise.id == CUSTOM_ID and not state.exercise.phases:
        return "Define custom exercise settings."
    return state.exercise.description


def phase_progress(state: EngineState) -> float:
    """0.0 → 1.0 progress through the current phase."""
    phase = state.current_phase
    if phase is None or phase.duration_ms <= 0:
        return 0.0
    done = phase.duration_ms - state.remaining_ms
    return max(0.0, min(1.0, done / phase.duration_ms))


class BreathingWidget(QWidget):
    """Exercise picker, countdown and run controls."""

    def __init__(self, engine: BreathingEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self._exercise_buttons: dict[str, QPushButton] = {}
        self._build_ui()
        self._connect_signals()
        self._on_state_changed(engine.state)

    # ── build ─────────────────────────────────────────────────────────────

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)
        root.setContentsMargins(0, 0, 0, 0)
        root.setSpacing(0)

        card = QFrame(self)
        card.setObjectName("card")
        root.addWidget(card)

        layout = QVBoxLayout(card)
        layout.setContentsMargins(24, 20, 24, 20)
        layout.setSpacing(12)

        # ── exercise selector ────────────────────────────────────────
        grid = QGridLayout()
        grid.setSpacing(8)
        self._exercise_group = QButtonGroup(self)
        self._exercise_group.setExclusive(True)
        for i, exercise in enumerate(self._engine.list_exercises()):
            btn = QPushButton(exercise.display_name, card)
            btn.setCheckable(True)
            btn.setToolTip(exercise.description)
            self._exercise_group.addButton(btn)
            self._exercise_buttons[exercise.id] = btn
            grid.addWidget(btn, i // 2, i % 2)
        layout.addLayout(grid)

        # ── phase + countdown ────────────────────────────────────────
        self._phase_label = QLabel("", card)
        self._phase_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self._phase_label)

        self._countdown_label = QLabel("", card)
        self._countdown_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._countdown_label.setStyleSheet("font-size: 56px; font-weight: 700;")
        layout.addWidget(self._countdown_label)

        self._progress = QProgressBar(card)
        self._progress.setRange(0, 1000)
        self._progress.setTextVisible(False)
        layout.addWidget(self._progress)

        self._instruction_label = QLabel("", card)
        self._instruction_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self._instruction_label.setWordWrap(True)
        layout.addWidget(self._instruction_label)

        # ── session stats ────────────────────────────────────────────
        stats_row = QHBoxLayout()
        self._cycles_label = QLabel("Cycles: 0", card)
        self._session_label = QLabel("00:00", card)
        self._session_label.setAlignment(Qt.AlignmentFlag.AlignRight)
        stats_row.addWidget(self._cycles_label)
        stats_row.addStretch()
        stats_row.addWidget(self._session_label)
        layout.addLayout(stats_row)

        # ── controls ─────────────────────────────────────────────────
        btn_row = QHBoxLayout()
        btn_row.setSpacing(12)
        btn_row.setAlignment(Qt.AlignmentFlag.AlignCenter)

        self._stop_btn = QPushButton("Stop", card)
        self._stop_btn.setObjectName("dangerButton")

        self._start_btn = QPushButton("Start", card)
        self._start_btn.setObjectName("primaryButton")

        self._sound_cb = QCheckBox("Sound", card)

        btn_row.addWidget(self._stop_btn)
        btn_row.addWidget(self._start_btn)
        btn_row.addWidget(self._sound_cb)
        layout.addLayout(btn_row)

    # ── signals ───────────────────────────────────────────────────────────

    def _connect_signals(self) -> None:
        for exercise_id, btn in self._exercise_buttons.items():
            btn.clicked.connect(
                lambda _checked=False, eid=exercise_id: self._on_select(eid)
            )
        self._start_btn.clicked.connect(self.toggle)
        self._stop_btn.clicked.connect(self.stop)
        self._sound_cb.toggled.connect(self._engine.set_sound_enabled)
        self._engine.state_changed.connect(self._on_state_changed)

    # ── slots ─────────────────────────────────────────────────────────────

    def toggle(self) -> None:
        self.show_result(self._engine.start_or_toggle())

    def stop(self) -> None:
        self.show_result(self._engine.stop())

    def _on_select(self, exercise_id: str) -> None:
        self.show_result(self._engine.select_exercise(exercise_id))

    def show_result(self, result: CommandResult) -> None:
        """Surface a rejected command as instruction text."""
        if result.error is not None:
            self.show_message(result.error.message)

    def show_message(self, text: str) -> None:
        self._instruction_label.setText(text)

    def _on_state_changed(self, state: EngineState) -> None:
        running_or_paused = not state.is_stopped

        self._start_btn.setText(START_LABELS[state.run_state])
        self._stop_btn.setEnabled(running_or_paused)

        for exercise in self._engine.list_exercises():
            btn = self._exercise_buttons.get(exercise.id)
            if btn is not None:
                btn.setToolTip(exercise.description)

        btn = self._exercise_buttons.get(state.exercise.id)
        if btn is not None and not btn.isChecked():
            btn.setChecked(True)

        if self._sound_cb.isChecked() != state.sound_enabled:
            self._sound_cb.blockSignals(True)
            self._sound_cb.setChecked(state.sound_enabled)
            self._sound_cb.blockSignals(False)

        phase = state.current_phase
        self._phase_label.setText(phase.name.value if phase else "")
        self._phase_label.setStyleSheet(
            "font-size: 28px; font-weight: 600; "
            f"color: {phase_color(phase.name if phase else None)};"
        )
        self._countdown_label.setText(
            str(state.countdown_seconds) if running_or_paused else ""
        )
        self._progress.setValue(round(phase_progress(state) * 1000))
        self._instruction_label.setText(instruction_text(state))
        self._cycles_label.setText(f"Cycles: {state.completed_cycles}")
        self._session_label.setText(format_elapsed(state.session_elapsed_ms))
