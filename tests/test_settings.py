import json

from todoapp import settings
from todoapp.settings import Settings, load_settings, save_settings


def test_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "SETTINGS_PATH", tmp_path / "missing.json")
    assert load_settings() == Settings(reminders_enabled=True, prepopulate_count=5)


def test_save_and_load(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "SETTINGS_PATH", tmp_path / "nested" / "settings.json")
    save_settings(Settings(reminders_enabled=False, prepopulate_count=2))
    assert load_settings() == Settings(reminders_enabled=False, prepopulate_count=2)


def test_bad_values_fall_back(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr(settings, "SETTINGS_PATH", path)
    path.write_text(json.dumps({"prepopulate_count": "lots"}))
    assert load_settings().prepopulate_count == settings.DEFAULT_PREPOPULATE
    path.write_text(json.dumps({"prepopulate_count": 10_000}))
    assert load_settings().prepopulate_count == settings.MAX_PREPOPULATE
    path.write_text("{not json")
    assert load_settings() == Settings()
    path.write_text("[1, 2]")
    assert load_settings() == Settings()


def test_custom_alarm_sound(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr(settings, "SETTINGS_PATH", path)
    assert load_settings().custom_alarm_sound is None
    save_settings(Settings(custom_alarm_sound="/home/me/bell.wav"))
    assert load_settings().custom_alarm_sound == "/home/me/bell.wav"
    path.write_text(json.dumps({"custom_alarm_sound": 42}))
    assert load_settings().custom_alarm_sound is None
    path.write_text(json.dumps({"custom_alarm_sound": ""}))
    assert load_settings().custom_alarm_sound is None
