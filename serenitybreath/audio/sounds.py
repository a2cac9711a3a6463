"""Phase cue synthesis and playback using numpy + QSoundEffect.

Cues are generated programmatically as WAV files and cached to disk so
later launches skip synthesis.

Cue ids
-------
- ``inhaleSound``  bright triangle tone, 660 Hz, 0.4 s
- ``holdSound``    low square tone, 330 Hz, 0.7 s
- ``exhaleSound``  soft sine tone, 440 Hz, 0.6 s

Each tone fades out exponentially so it ends without a click.
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..exercises.catalog import EXHALE_CUE, HOLD_CUE, INHALE_CUE

LOGGER = logging.getLogger(__name__)

# ── paths ────────────────────────────────────────────────────────────────

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "SerenityBreath"
SOUNDS_DIR = APP_SUPPORT_DIR / "sounds"

CUE_IDS = (INHALE_CUE, HOLD_CUE, EXHALE_CUE)

SAMPLE_RATE = 44100
PLAYBACK_VOLUME = 0.8
FADE_FLOOR = 1e-5


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _timeline(duration_s: float) -> np.ndarray:
    return np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    return np.sin(2 * np.pi * freq * _timeline(duration_s))


def _triangle(freq: float, duration_s: float) -> np.ndarray:
    phase = (freq * _timeline(duration_s)) % 1.0
    return 4.0 * np.abs(phase - 0.5) - 1.0


def _square(freq: float, duration_s: float) -> np.ndarray:
    return np.sign(_sine(freq, duration_s))


def _fade_out(length: int) -> np.ndarray:
    """Exponential ramp from 1.0 down to ``FADE_FLOOR``."""
    if length <= 0:
        return np.ones(0)
    return np.geomspace(1.0, FADE_FLOOR, length)


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


def _tone(wave_fn, freq: float, duration_s: float, volume: float) -> bytes:
    tone = wave_fn(freq, duration_s) * volume
    return _to_wav_bytes(tone * _fade_out(len(tone)))


# ═══════════════════════════════════════════════════════════════════════════
#  CUE GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_inhale() -> bytes:
    return _tone(_triangle, 660.0, 0.4, 0.25)


def _generate_hold() -> bytes:
    return _tone(_square, 330.0, 0.7, 0.2)


def _generate_exhale() -> bytes:
    return _tone(_sine, 440.0, 0.6, 0.2)


_GENERATORS: dict[str, callable] = {
    INHALE_CUE: _generate_inhale,
    HOLD_CUE: _generate_hold,
    EXHALE_CUE: _generate_exhale,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Audio cue sink for the breathing engine.

    Usage::

        mgr = SoundManager(parent=self)
        engine = BreathingEngine(audio_sink=mgr.play_cue)
    """

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}

        try:
            self._ensure_wav_files()
        except OSError:
            LOGGER.exception("Could not write cue files to %s", self._sounds_dir)
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def play_cue(self, cue_id: str | None, sound_enabled: bool) -> None:
        """Play *cue_id*.  No-op when disabled, None, or unknown."""
        if not sound_enabled or cue_id is None:
            return
        effect = self._effects.get(cue_id)
        if effect is None:
            LOGGER.debug("No sound loaded for cue %s", cue_id)
            return
        effect.play()

    @property
    def loaded_cues(self) -> tuple[str, ...]:
        return tuple(self._effects)

    # ── internal ──────────────────────────────────────────────────────

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for cue_id, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / f"{cue_id}.wav"
            if not path.exists():
                path.write_bytes(gen_fn())

    def _load_effects(self) -> None:
        for cue_id in CUE_IDS:
            path = self._sounds_dir / f"{cue_id}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(PLAYBACK_VOLUME)
                self._effects[cue_id] = effect
