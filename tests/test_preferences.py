from __future__ import annotations

import json
from pathlib import Path

from changecast.playback.preferences import (
    JsonPreferencesStore,
    MemoryPreferencesStore,
    UserPreferences,
)
from changecast.types import DEFAULT_VOICE


def test_json_store_round_trip(tmp_path: Path) -> None:
    store = JsonPreferencesStore(tmp_path / "cfg" / "preferences.json")
    assert store.load() == UserPreferences()
    store.save(UserPreferences(voice="Kore", playback_speed=1.5))
    raw = json.loads(store.path.read_text(encoding="utf-8"))
    assert raw == {"voicePreference": "Kore", "playbackSpeed": 1.5}
    assert store.load() == UserPreferences(voice="Kore", playback_speed=1.5)


def test_invalid_values_fall_back(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    path.write_text(json.dumps({"voicePreference": "Nobody", "playbackSpeed": -2}), encoding="utf-8")
    default = UserPreferences(voice="Puck", playback_speed=1.25)
    assert JsonPreferencesStore(path).load(default) == default


def test_unreadable_file_uses_default(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    path.write_text("{not json", encoding="utf-8")
    assert JsonPreferencesStore(path).load().voice == DEFAULT_VOICE


def test_memory_store() -> None:
    store = MemoryPreferencesStore()
    assert store.load(UserPreferences(voice="Puck")).voice == "Puck"
    store.save(UserPreferences(voice="Kore"))
    assert store.load().voice == "Kore"


def test_from_dict_partial() -> None:
    prefs = UserPreferences.from_dict({"playbackSpeed": "2"})
    assert prefs == UserPreferences(voice=DEFAULT_VOICE, playback_speed=2.0)
    assert UserPreferences().with_voice("Kore").with_speed(0.75).to_dict() == {
        "voicePreference": "Kore",
        "playbackSpeed": 0.75,
    }


def test_non_finite_speed_falls_back(tmp_path: Path) -> None:
    path = tmp_path / "preferences.json"
    path.write_text('{"voicePreference": "Kore", "playbackSpeed": NaN}', encoding="utf-8")
    assert JsonPreferencesStore(path).load() == UserPreferences(voice="Kore", playback_speed=1.0)

    path.write_text('{"voicePreference": "Kore", "playbackSpeed": Infinity}', encoding="utf-8")
    assert JsonPreferencesStore(path).load().playback_speed == 1.0
    assert UserPreferences.from_dict({"playbackSpeed": float("-inf")}).playback_speed == 1.0
