"""Main application window for SerenityBreath."""

from __future__ import annotations

import logging

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence
from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QLabel, QStatusBar, QMessageBox,
)
from sqlalchemy.exc import SQLAlchemyError

from .audio.sounds import SoundManager
from .database.history import recent_sessions, total_cycles
from .engine.facade import BreathingEngine
from .engine.state import EngineState, RunState
from .settings import SettingsStore
from .ui.breathing_widget import BreathingWidget, format_elapsed
from .ui.custom_panel import CustomTimingsPanel
from .ui.styles import build_stylesheet

LOGGER = logging.getLogger(__name__)

STATUS_MESSAGES: dict[RunState, str] = {
    RunState.STOPPED: "Ready when you are.",
    RunState.RUNNING: "Breathing...",
    RunState.PAUSED:  "Paused. Resume whenever you like.",
}


class SerenityBreathApp(QMainWindow):
    """Main application window."""

    def __init__(
        self,
        *,
        settings_store: SettingsStore | None = None,
        db_enabled: bool = True,
    ) -> None:
        super().__init__()
        self.setWindowTitle("SerenityBreath")
        self.setMinimumSize(440, 620)

        # ── engines ───────────────────────────────────────────────────
        self._sound_manager = SoundManager(parent=self)
        self._engine = BreathingEngine(
            self,
            settings_store=settings_store if settings_store is not None else SettingsStore(),
            audio_sink=self._sound_manager.play_cue,
            db_enabled=db_enabled,
        )
        self._db_enabled = db_enabled
        self._last_run_state = self._engine.run_state

        self.setStyleSheet(build_stylesheet())

        # ── central widget ────────────────────────────────────────────
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(16, 16, 16, 16)
        layout.setSpacing(12)

        self._breathing_widget = BreathingWidget(self._engine, central)
        layout.addWidget(self._breathing_widget)

        self._custom_panel = CustomTimingsPanel(self._engine, central)
        layout.addWidget(self._custom_panel)

        self._history_label = QLabel("", central)
        self._history_label.setObjectName("mutedLabel")
        self._history_label.setWordWrap(True)
        layout.addWidget(self._history_label)
        layout.addStretch()

        # ── status bar ────────────────────────────────────────────────
        self._status_bar = QStatusBar(self)
        self.setStatusBar(self._status_bar)
        self._status_bar.showMessage(STATUS_MESSAGES[RunState.STOPPED])

        self._build_menu_bar()

        # ── wire signals ──────────────────────────────────────────────
        self._custom_panel.message.connect(self._breathing_widget.show_message)
        self._engine.state_changed.connect(self._on_state_changed)

        self._refresh_history()

    @property
    def engine(self) -> BreathingEngine:
        return self._engine

    # ══════════════════════════════════════════════════════════════════
    #  NATIVE MENU BAR
    # ══════════════════════════════════════════════════════════════════

    def _build_menu_bar(self) -> None:
        menu_bar = self.menuBar()

        about_action = QAction("About SerenityBreath", self)
        about_action.setMenuRole(QAction.MenuRole.AboutRole)
        about_action.triggered.connect(self._show_about)

        quit_action = QAction("Quit SerenityBreath", self)
        quit_action.setMenuRole(QAction.MenuRole.QuitRole)
        quit_action.setShortcut(QKeySequence("Ctrl+Q"))
        quit_action.triggered.connect(self.close)

        app_menu = menu_bar.addMenu("SerenityBreath")
        app_menu.addAction(about_action)
        app_menu.addAction(quit_action)

        window_menu = menu_bar.addMenu("Window")

        minimize_action = QAction("Minimize", self)
        minimize_action.setShortcut(QKeySequence("Ctrl+M"))
        minimize_action.triggered.connect(self.showMinimized)
        window_menu.addAction(minimize_action)

    def _show_about(self) -> None:
        QMessageBox.about(
            self,
            "About SerenityBreath",
            "<h3>SerenityBreath</h3>"
            "<p>Guided breathing exercises with phase cues.</p>"
            "<p>Built with PyQt6.</p>",
        )

    # ══════════════════════════════════════════════════════════════════
    #  ENGINE SIGNALS
    # ══════════════════════════════════════════════════════════════════

    def _on_state_changed(self, state: EngineState) -> None:
        if state.run_state is not self._last_run_state:
            self._status_bar.showMessage(STATUS_MESSAGES[state.run_state])
            if state.is_stopped:
                self._refresh_history()
        self._last_run_state = state.run_state

    def _refresh_history(self) -> None:
        """Summarise recorded sessions under the controls."""
        if not self._db_enabled:
            self._history_label.setText("")
            return
        try:
            sessions = recent_sessions(limit=1)
            cycles = total_cycles()
        except SQLAlchemyError:
            LOGGER.exception("Could not read session history")
            return
        if not sessions:
            self._history_label.setText("No sessions yet.")
            return
        last = sessions[0]
        self._history_label.setText(
            f"Last session: {last.exercise_id}, "
            f"{last.completed_cycles} cycles in "
            f"{format_elapsed((last.duration_seconds or 0) * 1000)}. "
            f"All time: {cycles} cycles."
        )

    # ══════════════════════════════════════════════════════════════════
    #  WINDOW EVENTS
    # ══════════════════════════════════════════════════════════════════

    def closeEvent(self, event) -> None:  # type: ignore[override]
        """Close out any running session before the window goes away."""
        self._engine.shutdown()
        event.accept()

    def keyPressEvent(self, event) -> None:  # type: ignore[override]
        """Handle Space (start/pause/resume) and Escape (stop) globally."""
        key = event.key()
        if key == Qt.Key.Key_Space and not event.modifiers():
            self._breathing_widget.toggle()
            event.accept()
            return
        if key == Qt.Key.Key_Escape:
            if self._engine.run_state is not RunState.STOPPED:
                self._breathing_widget.stop()
            event.accept()
            return
        super().keyPressEvent(event)
