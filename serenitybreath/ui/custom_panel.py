"""Custom exercise timings panel.

Four spin boxes stage durations on the engine as they change; nothing
is rebuilt or saved until Apply.  The panel is only shown while the
custom exercise is selected and only editable while stopped.
"""

from __future__ import annotations

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QFormLayout,
    QLabel, QSpinBox, QPushButton,
)

from ..engine.facade import BreathingEngine
from ..engine.state import EngineState
from ..exercises.catalog import CUSTOM_ID

MAX_PHASE_SECONDS = 60
APPLIED_TEXT = "Custom settings applied."


class CustomTimingsPanel(QWidget):
    """Inhale / hold / exhale / hold inputs plus Apply."""

    message = pyqtSignal(str)

    def __init__(self, engine: BreathingEngine, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._engine = engine
        self._build_ui()
        self._populate()
        self._connect_signals()
        self._on_state_changed(engine.state)

    def _build_ui(self) -> None:
        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        self._body = QWidget(self)
        outer.addWidget(self._body)

        root = QVBoxLayout(self._body)
        root.setContentsMargins(24, 0, 24, 12)

        title = QLabel("Custom timings")
        title.setStyleSheet("font-size: 15px; font-weight: 700;")
        root.addWidget(title)

        form = QFormLayout()
        form.setHorizontalSpacing(20)
        form.setVerticalSpacing(8)

        self._inhale_spin = self._spin()
        self._hold1_spin = self._spin()
        self._exhale_spin = self._spin()
        self._hold2_spin = self._spin()
        form.addRow("Inhale:", self._inhale_spin)
        form.addRow("Hold:", self._hold1_spin)
        form.addRow("Exhale:", self._exhale_spin)
        form.addRow("Hold:", self._hold2_spin)
        root.addLayout(form)

        btn_row = QHBoxLayout()
        btn_row.addStretch()
        self._apply_btn = QPushButton("Apply")
        self._apply_btn.setObjectName("secondaryButton")
        btn_row.addWidget(self._apply_btn)
        root.addLayout(btn_row)

    @staticmethod
    def _spin() -> QSpinBox:
        spin = QSpinBox()
        spin.setRange(0, MAX_PHASE_SECONDS)
        spin.setSuffix(" s")
        return spin

    def _populate(self) -> None:
        t = self._engine.custom_timings
        self._inhale_spin.setValue(t.inhale)
        self._hold1_spin.setValue(t.hold1)
        self._exhale_spin.setValue(t.exhale)
        self._hold2_spin.setValue(t.hold2)

    def _connect_signals(self) -> None:
        self._inhale_spin.valueChanged.connect(
            lambda v: self._engine.update_custom_timings(inhale=v))
        self._hold1_spin.valueChanged.connect(
            lambda v: self._engine.update_custom_timings(hold1=v))
        self._exhale_spin.valueChanged.connect(
            lambda v: self._engine.update_custom_timings(exhale=v))
        self._hold2_spin.valueChanged.connect(
            lambda v: self._engine.update_custom_timings(hold2=v))
        self._apply_btn.clicked.connect(self.apply)
        self._engine.state_changed.connect(self._on_state_changed)

    def apply(self) -> None:
        result = self._engine.apply_custom_settings()
        if result.error is not None:
            self.message.emit(result.error.message)
        elif result.state.exercise.id != CUSTOM_ID:
            self.message.emit(APPLIED_TEXT)

    def _on_state_changed(self, state: EngineState) -> None:
        self._body.setVisible(state.exercise.id == CUSTOM_ID)
        self._body.setEnabled(state.is_stopped)
