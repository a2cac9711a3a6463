"""QSS stylesheet and phase colours for SerenityBreath."""

from __future__ import annotations

from ..exercises.catalog import PhaseName

# ── phase accent colours ────────────────────────────────────────────────

PHASE_COLORS: dict[PhaseName, str] = {
    PhaseName.INHALE: "#89DCEB",   # sky
    PhaseName.HOLD:   "#B4BEFE",   # lavender
    PhaseName.EXHALE: "#A6E3A1",   # sage
}

IDLE_COLOR = "#6C7086"

PALETTE: dict[str, str] = {
    "bg":           "#1A1A2E",
    "bg_secondary": "#232340",
    "surface":      "#2A2A4A",
    "accent":       "#89DCEB",
    "accent2":      "#74C7EC",
    "text":         "#E2E2F0",
    "text_muted":   "#7A7A9A",
    "danger":       "#F38BA8",
    "border":       "#313154",
}


def phase_color(phase_name: PhaseName | None) -> str:
    if phase_name is None:
        return IDLE_COLOR
    return PHASE_COLORS.get(phase_name, IDLE_COLOR)


# ── QSS builder ───────────────────────────────────────────────────────


def build_stylesheet(palette: dict[str, str] | None = None) -> str:
    p = palette or PALETTE
    return f"""
    /* ── global ─────────────────────────────────── */
    QWidget {{
        background-color: {p['bg']};
        color: {p['text']};
        font-family: "Helvetica Neue", Arial;
        font-size: 14px;
    }}

    QMainWindow {{
        background-color: {p['bg']};
    }}

    QFrame#card {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 14px;
    }}

    /* ── buttons ─────────────────────────────────── */
    QPushButton {{
        background-color: {p['bg_secondary']};
        color: {p['text']};
        border: 1px solid {p['border']};
        border-radius: 10px;
        padding: 8px 18px;
        font-weight: 600;
    }}

    QPushButton:hover {{
        background-color: {p['surface']};
        border-color: {p['accent']};
    }}

    QPushButton:checked {{
        background-color: {p['surface']};
        border-color: {p['accent']};
        color: {p['accent']};
    }}

    QPushButton#primaryButton {{
        background-color: {p['accent']};
        color: {p['bg']};
        border: none;
        font-size: 17px;
        padding: 12px 40px;
        border-radius: 12px;
        font-weight: 700;
    }}

    QPushButton#primaryButton:hover {{
        background-color: {p['accent2']};
    }}

    QPushButton#secondaryButton {{
        background-color: transparent;
        color: {p['text_muted']};
        border: 1px solid {p['border']};
        font-size: 13px;
        padding: 8px 16px;
        border-radius: 8px;
    }}

    QPushButton#secondaryButton:hover {{
        color: {p['text']};
        border-color: {p['text_muted']};
    }}

    QPushButton#dangerButton {{
        background-color: transparent;
        color: {p['danger']};
        border: 1px solid {p['border']};
        font-size: 13px;
        padding: 8px 16px;
        border-radius: 8px;
    }}

    QPushButton#dangerButton:hover {{
        background-color: {p['danger']};
        color: {p['bg']};
        border-color: {p['danger']};
    }}

    QPushButton:disabled {{
        color: {p['text_muted']};
        border-color: {p['border']};
    }}

    /* ── progress bar ────────────────────────────── */
    QProgressBar {{
        background-color: {p['surface']};
        border: none;
        border-radius: 4px;
        max-height: 8px;
    }}

    QProgressBar::chunk {{
        background-color: {p['accent']};
        border-radius: 4px;
    }}

    /* ── spin boxes ──────────────────────────────── */
    QSpinBox {{
        background-color: {p['bg_secondary']};
        border: 1px solid {p['border']};
        border-radius: 6px;
        padding: 4px 8px;
    }}

    QSpinBox:focus {{
        border-color: {p['accent']};
    }}

    QLabel#mutedLabel {{
        color: {p['text_muted']};
        font-size: 12px;
    }}
    """
