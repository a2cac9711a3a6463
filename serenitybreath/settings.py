"""User preferences with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/SerenityBreath/settings.json

Usage::

    store = SettingsStore()
    settings = store.load()
    settings.sound_enabled = False
    store.save(settings)

The persisted record is flat: one boolean and four non-negative
integers.  Missing, unknown or wrongly typed keys
fall back to the defaults below.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path

from .exercises.catalog import CustomTimings

LOGGER = logging.getLogger(__name__)

APP_SUPPORT_DIR = Path.home() / "Library" / "Application Support" / "SerenityBreath"
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass
class Settings:
    """All user-configurable preferences."""

    # ── audio ─────────────────────────────────────────────────────────
    sound_enabled: bool = True

    # ── custom exercise (seconds) ─────────────────────────────────────
    inhale: int = 4
    hold1: int = 7
    exhale: int = 8
    hold2: int = 0

    @property
    def custom_timings(self) -> CustomTimings:
        return CustomTimings(self.inhale, self.hold1, self.exhale, self.hold2)

    def with_timings(self, timings: CustomTimings) -> Settings:
        return replace(
            self,
            inhale=timings.inhale,
            hold1=timings.hold1,
            exhale=timings.exhale,
            hold2=timings.hold2,
        )


def _coerce(data: dict) -> Settings:
    """Keep only known keys whose values have the right type."""
    defaults = Settings()
    values = {}
    for f in fields(Settings):
        if f.name not in data:
            continue
        value = data[f.name]
        expected = type(getattr(defaults, f.name))
        if expected is bool:
            ok = isinstance(value, bool)
        else:
            # bool is an int subclass; reject it for numeric fields
            ok = isinstance(value, int) and not isinstance(value, bool) and value >= 0
        if ok:
            values[f.name] = value
        else:
            LOGGER.warning("Ignoring invalid setting %s=%r", f.name, value)
    return Settings(**values)


class SettingsStore:
    """Loads and saves ``Settings`` as JSON.  Never raises on I/O errors."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else SETTINGS_PATH

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Settings:
        """Load settings from disk, falling back to defaults."""
        try:
            if self._path.exists():
                data = json.loads(self._path.read_text(encoding="utf-8"))
                if isinstance(data, dict):
                    return _coerce(data)
                LOGGER.warning("Settings file %s is not an object", self._path)
        except (OSError, ValueError):
            LOGGER.exception("Could not read settings from %s", self._path)
        return Settings()

    def save(self, settings: Settings) -> None:
        """Write settings to disk as JSON."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(asdict(settings), indent=2) + "\n",
                encoding="utf-8",
            )
        except OSError:
            LOGGER.exception("Could not save settings to %s", self._path)
