import datetime as dt
import pytest

from todoapp import settings, storage


@pytest.fixture
def db(tmp_path, monkeypatch):
    monkeypatch.setattr(storage, "DB_PATH", tmp_path / "test.sqlite", raising=False)
    monkeypatch.setattr(settings, "SETTINGS_PATH", tmp_path / "settings.json", raising=False)
    _ = storage.connect()
    return storage


@pytest.fixture
def noon():
    return dt.datetime(2024, 1, 10, 12, 0)
