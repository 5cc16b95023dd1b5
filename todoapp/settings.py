"""User preferences persisted as a small JSON file."""
from __future__ import annotations
import json, logging, pathlib
from dataclasses import asdict, dataclass
from typing import Optional

logger = logging.getLogger(__name__)

SETTINGS_PATH = pathlib.Path(__file__).resolve().parent / "settings.json"

DEFAULT_PREPOPULATE = 5
MAX_PREPOPULATE = 50


@dataclass
class Settings:
    reminders_enabled: bool = True
    prepopulate_count: int = DEFAULT_PREPOPULATE
    # sound file path for the overdue alarm; None uses the system default
    custom_alarm_sound: Optional[str] = None


def load_settings() -> Settings:
    if not SETTINGS_PATH.exists():
        return Settings()
    try:
        payload = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        logger.warning("Could not read %s, using defaults.", SETTINGS_PATH)
        return Settings()
    if not isinstance(payload, dict):
        return Settings()

    try:
        prepopulate = int(payload.get("prepopulate_count", DEFAULT_PREPOPULATE))
    except (TypeError, ValueError):
        prepopulate = DEFAULT_PREPOPULATE
    sound = payload.get("custom_alarm_sound")
    return Settings(
        reminders_enabled=bool(payload.get("reminders_enabled", True)),
        prepopulate_count=max(0, min(MAX_PREPOPULATE, prepopulate)),
        custom_alarm_sound=sound if isinstance(sound, str) and sound else None,
    )


def save_settings(settings: Settings) -> None:
    SETTINGS_PATH.parent.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(json.dumps(asdict(settings), indent=2), encoding="utf-8")
