"""Tests for preference loading and saving."""

import json

import pytest

from serenitybreath.exercises.catalog import CustomTimings
from serenitybreath.settings import Settings, SettingsStore


class TestSettingsDefaults:

    def test_defaults(self):
        s = Settings()
        assert s.sound_enabled is True
        assert (s.inhale, s.hold1, s.exhale, s.hold2) == (4, 7, 8, 0)

    def test_custom_timings_bridge(self):
        assert Settings().custom_timings == CustomTimings()

    def test_with_timings_returns_copy(self):
        s = Settings()
        updated = s.with_timings(CustomTimings(5, 1, 6, 2))
        assert updated.custom_timings == CustomTimings(5, 1, 6, 2)
        assert s.inhale == 4


class TestSettingsStore:

    def test_missing_file_returns_defaults(self, tmp_path):
        assert SettingsStore(tmp_path / "nope.json").load() == Settings()

    def test_round_trip(self, tmp_path):
        store = SettingsStore(tmp_path / "settings.json")
        store.save(Settings(sound_enabled=False, inhale=6, hold1=0, exhale=6, hold2=3))
        loaded = store.load()
        assert loaded.sound_enabled is False
        assert loaded.custom_timings == CustomTimings(6, 0, 6, 3)

    def test_saved_shape_is_flat(self, tmp_path):
        store = SettingsStore(tmp_path / "settings.json")
        store.save(Settings())
        data = json.loads(store.path.read_text(encoding="utf-8"))
        assert data == {
            "sound_enabled": True, "inhale": 4, "hold1": 7, "exhale": 8, "hold2": 0,
        }

    def test_save_creates_parent_dirs(self, tmp_path):
        store = SettingsStore(tmp_path / "a" / "b" / "settings.json")
        store.save(Settings())
        assert store.path.exists()

    def test_invalid_json_returns_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("NOT VALID JSON", encoding="utf-8")
        assert SettingsStore(path).load() == Settings()

    def test_non_object_returns_defaults(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert SettingsStore(path).load() == Settings()

    def test_extra_keys_ignored(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"exhale": 10, "theme": "dark"}), encoding="utf-8")
        s = SettingsStore(path).load()
        assert s.exhale == 10
        assert not hasattr(s, "theme")

    @pytest.mark.parametrize("key, value", [
        ("sound_enabled", "yes"),
        ("sound_enabled", 1),
        ("inhale", "4"),
        ("inhale", -1),
        ("hold1", True),
        ("exhale", 2.5),
    ])
    def test_bad_field_falls_back_alone(self, tmp_path, key, value):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({key: value, "hold2": 2}), encoding="utf-8")
        s = SettingsStore(path).load()
        assert getattr(s, key) == getattr(Settings(), key)
        assert s.hold2 == 2

    def test_save_failure_does_not_raise(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        store = SettingsStore(blocker / "settings.json")
        store.save(Settings())
        assert store.load() == Settings()
