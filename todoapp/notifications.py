from __future__ import annotations
import logging
from typing import Optional, Sequence
from plyer import notification

from .models import Task

logger = logging.getLogger(__name__)

APP_NAME = "To-Do"
MAX_LISTED = 3


def notify(title: str, message: str, timeout: int = 8, sound: Optional[str] = None) -> None:
    """
    Cross-platform desktop notification via plyer.
    sound is a file path handed to the backend as the "sound-file" hint.
    """
    kwargs = {}
    if sound:
        kwargs["hints"] = {"sound-file": sound}
    try:
        notification.notify(title=title, message=message, app_name=APP_NAME, timeout=timeout, **kwargs)
    except Exception:
        # plyer raises backend-specific errors; a missed reminder must not stop the sweep
        logger.warning("[notify:fallback] %s: %s", title, message, exc_info=True)


def alarm_message(tasks: Sequence[Task]) -> str:
    titles = [t.title for t in tasks[:MAX_LISTED]]
    extra = len(tasks) - len(titles)
    lines = [f"You have {len(tasks)} overdue task{'s' if len(tasks) != 1 else ''}:"]
    lines += [f"- {title}" for title in titles]
    if extra > 0:
        lines.append(f"...and {extra} more")
    return "\n".join(lines)


def alarm(tasks: Sequence[Task], sound: Optional[str] = None) -> None:
    """Raise one reminder covering every overdue task."""
    if not tasks:
        return
    notify("Reminder", alarm_message(tasks), timeout=30, sound=sound)
